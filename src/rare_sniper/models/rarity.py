"""Trait statistics and per-item rarity annotations."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class RarityReason(str, Enum):
    """Why a trait was flagged rare. One-of-one wins when both apply."""

    ONE_OF_ONE = "one-of-one"
    BELOW_THRESHOLD = "below-threshold"


@dataclass(frozen=True, slots=True)
class TraitValueStat:
    """Occurrences of one trait value across the full collection."""

    count: int
    percentage: float
    """Share of the collection in [0, 100], rounded to 2 decimals."""


@dataclass(frozen=True)
class TraitStats:
    """trait_type -> value -> TraitValueStat over a population of `total` items.

    Always rebuilt from scratch; never patched.
    """

    total: int
    by_type: Mapping[str, Mapping[str, TraitValueStat]] = field(default_factory=dict)

    @property
    def trait_types(self) -> list[str]:
        return sorted(self.by_type)

    def get(self, trait_type: str, value: str) -> TraitValueStat | None:
        return self.by_type.get(trait_type, {}).get(value)

    def __iter__(self) -> Iterator[str]:
        return iter(self.by_type)

    def __len__(self) -> int:
        return len(self.by_type)

    def __bool__(self) -> bool:
        return bool(self.by_type)


@dataclass(frozen=True, slots=True)
class TraitRarity:
    """Stat of one trait of one item, with the rarity verdict."""

    value: str
    count: int
    percentage: float
    rare: bool
    reason: RarityReason | None = None

    def describe(self) -> str:
        """Human-readable reason, 'One of one trait' or 'Below threshold'."""
        if self.reason is RarityReason.ONE_OF_ONE:
            return "One of one trait"
        if self.reason is RarityReason.BELOW_THRESHOLD:
            return "Below threshold"
        return ""

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "value": self.value,
            "count": self.count,
            "percentage": self.percentage,
            "rare": self.rare,
        }
        if self.reason is not None:
            data["reason"] = self.reason.value
        return data


@dataclass(frozen=True)
class RarityAnnotation:
    """trait_type -> TraitRarity for one item. Rare iff any trait is rare."""

    traits: Mapping[str, TraitRarity] = field(default_factory=dict)

    @property
    def is_rare(self) -> bool:
        return any(t.rare for t in self.traits.values())

    @property
    def rare_traits(self) -> dict[str, TraitRarity]:
        return {k: t for k, t in self.traits.items() if t.rare}

    def to_dict(self) -> dict[str, dict[str, Any]]:
        return {k: t.to_dict() for k, t in self.traits.items()}
