"""Item: a normalized NFT from the Magic Eden token endpoint.

Identity is the mint address. Built once from a raw token record; only the
listing overlay (price/seller) and the rarity annotation change afterwards,
and both produce a new instance.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, cast

if TYPE_CHECKING:
    from rare_sniper.models.rarity import RarityAnnotation

LAMPORTS_PER_SOL = 1_000_000_000
MISSING_TRAIT_VALUE = "None"
ITEM_DETAILS_URL = "https://magiceden.io/item-details/{mint}"


def trait_value(value: Any) -> str:
    """Coerce a raw attribute value to the string form used for counting."""
    if value is None or value == "":
        return MISSING_TRAIT_VALUE
    return str(value)


@dataclass(frozen=True, slots=True)
class Item:
    """Normalized NFT with flattened traits.

    Identity: mint_address. price is in lamports (None when not listed).
    """

    mint_address: str
    name: str = ""
    image: str | None = None
    price: int | None = None
    """Listing price in lamports; None if unlisted."""
    seller: str | None = None
    traits: Mapping[str, str] = field(default_factory=dict)
    """trait_type -> value, flattened from the token's attributes list."""
    rarity: RarityAnnotation | None = None
    """Set by the rarity engine; None until classified."""

    @classmethod
    def from_token(cls, raw: Mapping[str, Any]) -> Item | None:
        """Normalize a raw token record. None if it has no mint or no attributes list."""
        mint = raw.get("mintAddress")
        attributes = raw.get("attributes")
        if not isinstance(mint, str) or not mint.strip() or not isinstance(attributes, list):
            return None
        traits: dict[str, str] = {}
        for attr in cast(list[Any], attributes):
            if not isinstance(attr, dict):
                continue
            attr_d = cast(dict[str, Any], attr)
            trait_type = attr_d.get("trait_type")
            if trait_type is None:
                continue
            traits[str(trait_type)] = trait_value(attr_d.get("value"))
        return cls(
            mint_address=mint.strip(),
            name=str(raw.get("name") or ""),
            image=raw.get("image"),
            price=listing_price_lamports(raw),
            seller=raw.get("seller") or raw.get("owner"),
            traits=traits,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Item | None:
        """Rebuild from to_dict() output. None if the record is malformed."""
        mint = data.get("mint_address")
        traits_raw = data.get("traits")
        if not isinstance(mint, str) or not mint or not isinstance(traits_raw, dict):
            return None
        traits = {str(k): trait_value(v) for k, v in cast(dict[Any, Any], traits_raw).items()}
        return cls(
            mint_address=mint,
            name=str(data.get("name") or ""),
            image=data.get("image"),
            price=_lamports(data.get("price")),
            seller=data.get("seller"),
            traits=traits,
        )

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready form (rarity is derived per cycle and not persisted)."""
        return {
            "mint_address": self.mint_address,
            "name": self.name,
            "image": self.image,
            "price": self.price,
            "seller": self.seller,
            "traits": dict(self.traits),
        }

    def trait(self, trait_type: str) -> str:
        """Value for trait_type, or "None" when the item lacks it."""
        return self.traits.get(trait_type, MISSING_TRAIT_VALUE)

    def with_listing(self, price: int | None, seller: str | None) -> Item:
        """Return a copy carrying the listing price (lamports) and seller."""
        return replace(self, price=price, seller=seller)

    def with_rarity(self, rarity: RarityAnnotation) -> Item:
        """Return a copy with the rarity annotation attached."""
        return replace(self, rarity=rarity)

    @property
    def is_rare(self) -> bool:
        return self.rarity is not None and self.rarity.is_rare

    @property
    def price_sol(self) -> float | None:
        if self.price is None:
            return None
        return self.price / LAMPORTS_PER_SOL

    @property
    def marketplace_url(self) -> str:
        return ITEM_DETAILS_URL.format(mint=self.mint_address)


def _lamports(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def listing_price_lamports(listing: Mapping[str, Any]) -> int | None:
    """Lamport price of a listing record.

    Prefers priceInfo.solPrice.rawAmount (lamports); falls back to price, which
    the listings endpoint reports in SOL.
    """
    price_info = listing.get("priceInfo")
    if isinstance(price_info, dict):
        sol_price = cast(dict[str, Any], price_info).get("solPrice")
        if isinstance(sol_price, dict):
            raw = _lamports(cast(dict[str, Any], sol_price).get("rawAmount"))
            if raw is not None:
                return raw
    price = listing.get("price")
    if price is None or isinstance(price, bool):
        return None
    try:
        return round(float(price) * LAMPORTS_PER_SOL)
    except (TypeError, ValueError):
        return None
