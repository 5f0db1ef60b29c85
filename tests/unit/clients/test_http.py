# -*- coding: utf-8 -*-
"""Unit tests for AsyncHttpClient (status handling, throttling, 429 retry)."""

from __future__ import annotations

from collections.abc import Callable
from types import SimpleNamespace
from typing import Any, cast
from unittest.mock import AsyncMock

import aiohttp
import pytest

from rare_sniper.clients.http import AsyncHttpClient
from rare_sniper.clients.retry import RetryPolicy
from rare_sniper.config import Settings
from rare_sniper.exceptions import MagicEdenAPIError, RateLimitError


class _FakeResponse:
    def __init__(self, status: int, payload: Any = None, headers: dict[str, str] | None = None) -> None:
        self.status = status
        self.headers = headers or {}
        self._payload = payload

    async def json(self, content_type: str | None = None) -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload

    async def __aenter__(self) -> _FakeResponse:
        return self

    async def __aexit__(self, *args: Any) -> bool:
        return False


class _FakeSession:
    def __init__(self, *responses: _FakeResponse | Exception) -> None:
        self.closed = False
        self.calls: list[tuple[str, dict[str, Any] | None]] = []
        self._responses = list(responses)

    def get(self, url: str, params: dict[str, Any] | None = None) -> _FakeResponse:
        self.calls.append((url, params))
        nxt = self._responses.pop(0)
        if isinstance(nxt, Exception):
            raise nxt
        return nxt

    async def close(self) -> None:
        self.closed = True


def _client(
    settings: Settings,
    session: _FakeSession,
    logger: Callable[[str], Any],
    *,
    max_attempts: int = 3,
) -> tuple[AsyncHttpClient, Any, AsyncMock]:
    throttle = SimpleNamespace(acquire=AsyncMock())
    sleep = AsyncMock()
    client = AsyncHttpClient(
        settings,
        session=cast(Any, session),
        throttle=cast(Any, throttle),
        retry_policy=RetryPolicy(
            max_attempts=max_attempts, delay_seconds=5.0, sleep=sleep, get_logger=logger
        ),
        get_logger=logger,
    )
    return client, throttle, sleep


async def test_get_returns_parsed_json_and_passes_params(
    settings: Settings, quiet_logger: Callable[[str], Any]
) -> None:
    session = _FakeSession(_FakeResponse(200, [{"tokenMint": "m1"}]))
    client, throttle, _ = _client(settings, session, quiet_logger)

    data = await client.get("https://api.test/listings", params={"offset": 0, "limit": 500})

    assert data == [{"tokenMint": "m1"}]
    assert session.calls == [("https://api.test/listings", {"offset": 0, "limit": 500})]
    throttle.acquire.assert_awaited_once()


async def test_get_retries_after_429_and_throttles_each_attempt(
    settings: Settings, quiet_logger: Callable[[str], Any]
) -> None:
    session = _FakeSession(_FakeResponse(429), _FakeResponse(200, {"name": "Makers"}))
    client, throttle, sleep = _client(settings, session, quiet_logger)

    data = await client.get("https://api.test/collections/mkrs")

    assert data == {"name": "Makers"}
    assert len(session.calls) == 2
    assert throttle.acquire.await_count == 2
    sleep.assert_awaited_once_with(5.0)


async def test_get_raises_rate_limit_error_when_429_persists(
    settings: Settings, quiet_logger: Callable[[str], Any]
) -> None:
    session = _FakeSession(*[_FakeResponse(429, headers={"Retry-After": "7"}) for _ in range(2)])
    client, _, sleep = _client(settings, session, quiet_logger, max_attempts=2)

    with pytest.raises(RateLimitError) as exc_info:
        await client.get("https://api.test/x")

    assert exc_info.value.status_code == 429
    assert exc_info.value.retry_after == 7.0
    assert len(session.calls) == 2
    assert sleep.await_count == 1


async def test_get_raises_api_error_on_server_error_without_retry(
    settings: Settings, quiet_logger: Callable[[str], Any]
) -> None:
    session = _FakeSession(_FakeResponse(500))
    client, _, sleep = _client(settings, session, quiet_logger)

    with pytest.raises(MagicEdenAPIError) as exc_info:
        await client.get("https://api.test/x")

    assert not isinstance(exc_info.value, RateLimitError)
    assert exc_info.value.status_code == 500
    assert len(session.calls) == 1
    sleep.assert_not_awaited()


async def test_get_wraps_transport_and_decode_errors(
    settings: Settings, quiet_logger: Callable[[str], Any]
) -> None:
    session = _FakeSession(
        aiohttp.ClientConnectionError("refused"),
        _FakeResponse(200, ValueError("not json")),
    )
    client, _, _ = _client(settings, session, quiet_logger)

    with pytest.raises(MagicEdenAPIError) as first:
        await client.get("https://api.test/x")
    with pytest.raises(MagicEdenAPIError) as second:
        await client.get("https://api.test/y")

    assert isinstance(first.value.cause, aiohttp.ClientConnectionError)
    assert isinstance(second.value.cause, ValueError)


async def test_aclose_leaves_injected_session_open(
    settings: Settings, quiet_logger: Callable[[str], Any]
) -> None:
    session = _FakeSession()
    client, _, _ = _client(settings, session, quiet_logger)

    async with client:
        pass

    assert session.closed is False
