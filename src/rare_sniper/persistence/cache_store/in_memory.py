"""In-memory cache store (same contract as the JSON store, nothing on disk)."""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable
from datetime import UTC, datetime

from rare_sniper.models.item import Item
from rare_sniper.models.snapshot import CollectionSnapshot
from rare_sniper.persistence.cache_store.interface import ICacheStore


class InMemoryCacheStore(ICacheStore):
    """In-memory implementation of ICacheStore."""

    def __init__(
        self,
        *,
        enabled: bool = True,
        expire_hours: float = 24.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._enabled = enabled
        self._expiry_seconds = expire_hours * 3600.0
        self._clock = clock
        self._snapshots: dict[str, tuple[float, list[Item]]] = {}
        self._seen: dict[str, set[str]] = {}

    def has_fresh_snapshot(self, symbol: str) -> bool:
        entry = self._snapshots.get(symbol)
        return entry is not None and self._clock() - entry[0] <= self._expiry_seconds

    def read_snapshot(self, symbol: str) -> CollectionSnapshot | None:
        if not self._enabled or not self.has_fresh_snapshot(symbol):
            return None
        written_at, items = self._snapshots[symbol]
        return CollectionSnapshot.create(
            symbol, items, captured_at=datetime.fromtimestamp(written_at, UTC)
        )

    def write_snapshot(self, symbol: str, items: Iterable[Item]) -> bool:
        if not self._enabled:
            return False
        self._snapshots[symbol] = (self._clock(), list(items))
        return True

    def read_seen_set(self, symbol: str) -> set[str]:
        return set(self._seen.get(symbol, set()))

    def write_seen_set(self, symbol: str, seen: Iterable[str]) -> bool:
        self._seen[symbol] = set(seen)
        return True

    def clear(self, symbol: str) -> bool:
        self._snapshots.pop(symbol, None)
        return True
