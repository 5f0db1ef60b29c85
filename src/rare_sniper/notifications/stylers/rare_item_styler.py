# -*- coding: utf-8 -*-
"""Rare-item notification styler (Telegram HTML, plain text, Discord embeds)."""

from __future__ import annotations

from html import escape
from typing import Any

from rare_sniper.models.item import Item
from rare_sniper.notifications.types import NotificationStyler, RareItemsMessage
from rare_sniper.utils.formatting import format_price_sol

EMBED_COLOR = 0x00FFFF
FOOTER_TEXT = "Rare Sniper"
FOOTER_ICON = "https://magiceden.io/favicon.ico"


def rare_trait_lines(item: Item, *, bold: str = "") -> list[str]:
    """'trait: value (pct%, reason)' for every rare trait of item."""
    if item.rarity is None:
        return []
    lines: list[str] = []
    for trait_type, trait in item.rarity.rare_traits.items():
        lines.append(
            f"{bold}{trait_type}{bold}: {trait.value} ({trait.percentage}%, {trait.describe()})"
        )
    return lines


class RareItemStyler(NotificationStyler):
    """Render rare-item batches with emoji headers and one section per item."""

    def render(self, message: RareItemsMessage, *, parse_html: bool = False) -> str:
        esc = escape if parse_html else (lambda s: s)
        b_open, b_close = ("<b>", "</b>") if parse_html else ("", "")
        count = len(message.items)
        parts = [
            f"💎 {b_open}Rare NFT Summary for {esc(message.collection_name)}{b_close}",
            f"Found {count} rare NFT{'s' if count != 1 else ''}",
            "",
        ]
        for item in message.items:
            parts.append(f"🖼️ {b_open}{esc(item.name or item.mint_address)}{b_close}")
            parts.append(f"🪙 Mint: {esc(item.mint_address)}")
            parts.append(f"💵 Price: {format_price_sol(item.price)}")
            for line in rare_trait_lines(item):
                parts.append(f"  • {esc(line)}")
            parts.append(f"🔗 {esc(item.marketplace_url)}")
            parts.append("")
        return "\n".join(parts).rstrip()

    def discord_embeds(self, message: RareItemsMessage, *, max_items: int = 10) -> list[dict[str, Any]]:
        total = len(message.items)
        description = f"Found {total} rare NFTs in collection **{message.collection_name}**"
        if total > max_items:
            description += f"\n(Showing {max_items} of {total} rare NFTs)"
        summary: dict[str, Any] = {
            "title": f"Rare NFT Summary for {message.collection_name}",
            "description": description,
            "color": EMBED_COLOR,
            "footer": {"text": FOOTER_TEXT, "icon_url": FOOTER_ICON},
            "timestamp": message.created_at.isoformat(),
        }
        embeds = [summary]
        for item in message.items[:max_items]:
            traits = rare_trait_lines(item, bold="**")
            embed: dict[str, Any] = {
                "title": item.name or item.mint_address,
                "url": item.marketplace_url,
                "fields": [
                    {"name": "Price", "value": format_price_sol(item.price), "inline": True},
                    {
                        "name": "Rare Traits",
                        "value": "\n".join(traits) if traits else "None",
                        "inline": False,
                    },
                ],
                "color": EMBED_COLOR,
            }
            if item.image:
                embed["thumbnail"] = {"url": item.image}
            embeds.append(embed)
        return embeds
