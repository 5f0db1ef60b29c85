# -*- coding: utf-8 -*-
"""Bounded retry policy for rate-limited (HTTP 429) requests."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, TypeVar

import structlog

from rare_sniper.exceptions import RateLimitError

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Re-issue an operation after a fixed delay while it raises RateLimitError.

    Only RateLimitError is retried; any other exception propagates at once.
    After max_attempts rate-limited attempts the last RateLimitError is raised.
    """

    max_attempts: int = 5
    delay_seconds: float = 5.0
    sleep: Callable[[float], Awaitable[None]] = field(default=asyncio.sleep, repr=False)
    get_logger: Callable[[str], Any] = field(default=structlog.get_logger, repr=False)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.delay_seconds < 0:
            raise ValueError("delay_seconds must be >= 0")

    async def run(self, operation: Callable[[], Awaitable[T]]) -> T:
        """Await operation(), retrying on RateLimitError up to max_attempts times."""
        logger = self.get_logger("RetryPolicy")
        for attempt in range(1, self.max_attempts + 1):
            try:
                return await operation()
            except RateLimitError as exc:
                if attempt >= self.max_attempts:
                    logger.warning(
                        "retry_exhausted",
                        retry_attempts=attempt,
                        http_url=exc.url,
                    )
                    raise
                logger.warning(
                    "retry_rate_limited",
                    retry_attempt=attempt,
                    retry_max_attempts=self.max_attempts,
                    retry_delay_seconds=self.delay_seconds,
                    http_url=exc.url,
                )
                await self.sleep(self.delay_seconds)
        raise AssertionError("unreachable")  # pragma: no cover
