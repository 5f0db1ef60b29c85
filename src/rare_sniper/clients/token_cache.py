# -*- coding: utf-8 -*-
"""In-memory cache for token metadata lookups (mint -> raw token record)."""

from __future__ import annotations

import time
from typing import Any, Callable, Dict, Optional

from cachetools import TTLCache


class TokenMetadataCache:
    """Bounded TTL cache for /tokens/{mint} responses.

    Lets the listings pass reuse metadata fetched while enumerating the
    collection. Failed lookups are never cached.
    """

    def __init__(
        self,
        *,
        maxsize: int = 20000,
        ttl_seconds: float = 600.0,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the cache.

        Args:
            maxsize: Maximum number of tokens kept (oldest evicted first).
            ttl_seconds: Seconds an entry stays valid.
            timer: Clock used for expiry (injected for tests).
        """
        self._cache: TTLCache[str, Dict[str, Any]] = TTLCache(
            maxsize=max(1, maxsize),
            ttl=ttl_seconds,
            timer=timer,
        )

    def get(self, mint: str) -> Optional[Dict[str, Any]]:
        """Return a copy of the cached record for mint, or None."""
        record = self._cache.get(mint)
        return dict(record) if record is not None else None

    def put(self, mint: str, record: Dict[str, Any]) -> None:
        self._cache[mint] = dict(record)

    def __contains__(self, mint: object) -> bool:
        return mint in self._cache

    def __len__(self) -> int:
        return len(self._cache)

    def clear(self) -> None:
        self._cache.clear()
