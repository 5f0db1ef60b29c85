# -*- coding: utf-8 -*-
"""Fixed-interval request gate shared by every outbound call."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable


class RequestThrottle:
    """Spaces request starts at least 1 / requests_per_second apart.

    One instance is shared by the HTTP client, so concurrent callers and
    retries all queue on the same lock and the ceiling holds globally.
    """

    def __init__(
        self,
        requests_per_second: float,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if requests_per_second <= 0:
            raise ValueError("requests_per_second must be positive")
        self._interval = 1.0 / requests_per_second
        self._clock = clock
        self._sleep = sleep
        self._lock = asyncio.Lock()
        self._next_slot: float | None = None

    @property
    def interval(self) -> float:
        return self._interval

    async def acquire(self) -> None:
        """Wait until the next request slot opens, then claim it."""
        async with self._lock:
            now = self._clock()
            if self._next_slot is not None and now < self._next_slot:
                await self._sleep(self._next_slot - now)
                now = self._next_slot
            self._next_slot = now + self._interval

    async def __aenter__(self) -> RequestThrottle:
        await self.acquire()
        return self

    async def __aexit__(self, *args: object) -> None:
        return None
