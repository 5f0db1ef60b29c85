"""Abstract interface for the collection cache (snapshot + seen mints)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable

from rare_sniper.models.item import Item
from rare_sniper.models.snapshot import CollectionSnapshot


class ICacheStore(ABC):
    """Per-collection persistence of the full snapshot and the seen-rare set.

    Implementations are best-effort: they log and report failures through
    return values and never raise. Callers treat any failure as a cache miss.
    """

    @abstractmethod
    def read_snapshot(self, symbol: str) -> CollectionSnapshot | None:
        """Return the snapshot if present and written within the expiry window."""
        ...

    @abstractmethod
    def write_snapshot(self, symbol: str, items: Iterable[Item]) -> bool:
        """Replace the snapshot wholesale. False if caching is off or the write failed."""
        ...

    @abstractmethod
    def read_seen_set(self, symbol: str) -> set[str]:
        """Return the seen mint set; empty if missing or malformed."""
        ...

    @abstractmethod
    def write_seen_set(self, symbol: str, seen: Iterable[str]) -> bool:
        """Replace the seen mint set wholesale."""
        ...

    @abstractmethod
    def clear(self, symbol: str) -> bool:
        """Delete the snapshot only; the seen set is left untouched."""
        ...

    def has_fresh_snapshot(self, symbol: str) -> bool:
        """True if read_snapshot would return a snapshot."""
        return self.read_snapshot(symbol) is not None
