"""CollectionSnapshot: the full item list of a collection at one point in time."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

from rare_sniper.models.item import Item


@dataclass(frozen=True)
class CollectionSnapshot:
    """Full collection capture. Replaced wholesale on refresh."""

    symbol: str
    items: list[Item]
    captured_at: datetime

    @classmethod
    def create(
        cls,
        symbol: str,
        items: list[Item],
        *,
        captured_at: datetime | None = None,
    ) -> CollectionSnapshot:
        return cls(symbol=symbol, items=list(items), captured_at=captured_at or datetime.now(UTC))

    def __len__(self) -> int:
        return len(self.items)
