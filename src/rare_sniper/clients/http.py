# -*- coding: utf-8 -*-
"""Async HTTP client with request throttling and 429 retry handling."""

from __future__ import annotations

import asyncio
import uuid
import aiohttp
import structlog
from typing import Any, Callable, Dict, Optional
from structlog.contextvars import bound_contextvars

from rare_sniper.clients.request_throttle import RequestThrottle
from rare_sniper.clients.retry import RetryPolicy
from rare_sniper.config import Settings
from rare_sniper.exceptions import MagicEdenAPIError, RateLimitError


class AsyncHttpClient:
    """Async JSON GET client for the Magic Eden API.

    Every attempt passes through a shared RequestThrottle. HTTP 429 raises
    RateLimitError, which the RetryPolicy turns into a fixed wait and a
    re-issue; any other failure raises MagicEdenAPIError without retrying.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        session: Optional[aiohttp.ClientSession] = None,
        throttle: Optional[RequestThrottle] = None,
        retry_policy: Optional[RetryPolicy] = None,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: Configuration (timeout, requests_per_second, 429 policy).
            session: Shared aiohttp session. Without one the client opens its
                own on first use and closes it in aclose().
            throttle: Optional request gate; defaults to one built from
                settings.api.requests_per_second.
            retry_policy: Optional 429 policy; defaults to settings.api
                rate_limit_delay_seconds / max_rate_limit_retries.
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        api = settings.api
        self._settings = settings
        self._session = session
        self._owns_session = session is None
        self._throttle = throttle or RequestThrottle(api.requests_per_second)
        self._retry_policy = retry_policy or RetryPolicy(
            max_attempts=api.max_rate_limit_retries,
            delay_seconds=api.rate_limit_delay_seconds,
        )
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self._settings.api.timeout_seconds)
            self._session = aiohttp.ClientSession(timeout=timeout)
            self._owns_session = True
        return self._session

    async def aclose(self) -> None:
        """Close the session unless it was injected."""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> AsyncHttpClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def get(
        self,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Perform a GET request and return the parsed JSON body.

        Args:
            url: Absolute endpoint URL.
            params: Query string parameters (offset, limit, ...).

        Returns:
            The decoded JSON body, usually a dict or a list of records.

        Raises:
            RateLimitError: If 429 persists for every allowed attempt.
            MagicEdenAPIError: On any other HTTP, transport or decoding failure.
        """
        request_id = uuid.uuid4().hex[:12]
        attempts = 0

        async def _attempt() -> Any:
            nonlocal attempts
            attempts += 1
            with bound_contextvars(http_attempt=attempts):
                return await self._get_once(url, params or {})

        with bound_contextvars(http_url=url, http_request_id=request_id):
            return await self._retry_policy.run(_attempt)

    async def _get_once(self, url: str, params: Dict[str, Any]) -> Any:
        await self._throttle.acquire()
        try:
            session = await self._get_session()
            async with session.get(url, params=params) as response:
                if response.status == 429:
                    retry_after: Optional[float] = None
                    header = response.headers.get("Retry-After")
                    if header:
                        try:
                            retry_after = float(header)
                        except ValueError:
                            pass
                    self._logger.warning(
                        "http_get_rate_limited",
                        http_status_code=429,
                        http_retry_after_seconds=retry_after,
                    )
                    raise RateLimitError(url=url, retry_after=retry_after)
                if response.status >= 400:
                    self._logger.error(
                        "http_get_failed",
                        http_status_code=response.status,
                    )
                    raise MagicEdenAPIError(
                        f"GET {url} returned HTTP {response.status}",
                        url=url,
                        status_code=response.status,
                    )
                return await response.json(content_type=None)
        except MagicEdenAPIError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            self._logger.error(
                "http_get_failed",
                error_type=type(e).__name__,
                error_message=str(e),
            )
            raise MagicEdenAPIError(
                f"GET failed: {url}",
                url=url,
                status_code=getattr(e, "status", None),
                cause=e,
            ) from e
