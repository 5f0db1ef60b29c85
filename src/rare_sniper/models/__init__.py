"""Domain models."""

from rare_sniper.models.item import Item, listing_price_lamports
from rare_sniper.models.rarity import (
    RarityAnnotation,
    RarityReason,
    TraitRarity,
    TraitStats,
    TraitValueStat,
)
from rare_sniper.models.snapshot import CollectionSnapshot

__all__ = [
    "CollectionSnapshot",
    "Item",
    "RarityAnnotation",
    "RarityReason",
    "TraitRarity",
    "TraitStats",
    "TraitValueStat",
    "listing_price_lamports",
]
