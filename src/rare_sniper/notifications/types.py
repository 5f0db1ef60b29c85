"""Notification message types."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Protocol

from rare_sniper.models.item import Item


@dataclass(frozen=True)
class RareItemsMessage:
    """A batch of newly discovered rare listings for one collection."""

    collection_name: str
    items: tuple[Item, ...]
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def create(cls, items: list[Item], collection_name: str) -> RareItemsMessage:
        return cls(collection_name=collection_name, items=tuple(items))


class NotificationStyler(Protocol):
    """Render a message for a delivery channel."""

    def render(self, message: RareItemsMessage, *, parse_html: bool = False) -> str:
        """Return a formatted message body.

        Args:
            message: Message to render.
            parse_html: If True, output includes HTML. If False (default), plain text.
        """
        ...

    def discord_embeds(self, message: RareItemsMessage, *, max_items: int = 10) -> list[dict[str, Any]]:
        """Return Discord embed objects (summary first, then one per item)."""
        ...
