# -*- coding: utf-8 -*-
"""Unit tests for MagicEdenClient (lookups, pagination, collection enumeration)."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, cast

from rare_sniper.clients.magic_eden_api import MagicEdenClient
from rare_sniper.clients.token_cache import TokenMetadataCache
from rare_sniper.config import Settings
from rare_sniper.exceptions import MagicEdenAPIError

HOST = "https://api-mainnet.magiceden.dev/v2"


class _FakeHttp:
    """Routes GETs by path; pages are consumed in order, errors are raised."""

    def __init__(
        self,
        *,
        listing_pages: list[Any] | None = None,
        activity_pages: list[Any] | None = None,
        records: dict[str, Any] | None = None,
    ) -> None:
        self.listing_pages = list(listing_pages or [])
        self.activity_pages = list(activity_pages or [])
        self.records = records or {}
        self.calls: list[tuple[str, dict[str, Any] | None]] = []

    async def get(self, url: str, *, params: dict[str, Any] | None = None) -> Any:
        self.calls.append((url, params))
        path = url[len(HOST):]
        if path.endswith("/listings"):
            result = self.listing_pages.pop(0)
        elif path.endswith("/activities"):
            result = self.activity_pages.pop(0)
        elif path in self.records:
            result = self.records[path]
        else:
            raise MagicEdenAPIError("not found", url=url, status_code=404)
        if isinstance(result, Exception):
            raise result
        return result

    def calls_to(self, suffix: str) -> list[tuple[str, dict[str, Any] | None]]:
        return [c for c in self.calls if c[0].endswith(suffix)]


def _client(
    settings: Settings,
    http: _FakeHttp,
    logger: Callable[[str], Any],
    token_cache: TokenMetadataCache | None = None,
) -> MagicEdenClient:
    return MagicEdenClient(cast(Any, http), settings, token_cache=token_cache, get_logger=logger)


def _activity(mint: str) -> dict[str, Any]:
    return {"type": "list", "tokenMint": mint}


def _token(mint: str) -> dict[str, Any]:
    return {"mintAddress": mint, "attributes": [{"trait_type": "Eyes", "value": "Red"}]}


async def test_get_collection_returns_record(
    settings: Settings, quiet_logger: Callable[[str], Any]
) -> None:
    http = _FakeHttp(records={"/collections/mkrs": {"symbol": "mkrs", "name": "Makers"}})

    collection = await _client(settings, http, quiet_logger).get_collection("mkrs")

    assert collection == {"symbol": "mkrs", "name": "Makers"}


async def test_get_collection_returns_none_on_error_or_non_dict(
    settings: Settings, quiet_logger: Callable[[str], Any]
) -> None:
    http = _FakeHttp(records={"/collections/odd": ["not", "a", "dict"]})
    client = _client(settings, http, quiet_logger)

    assert await client.get_collection("missing") is None
    assert await client.get_collection("odd") is None


async def test_get_listings_paginates_until_short_page(
    settings_factory: Callable[..., Settings], quiet_logger: Callable[[str], Any]
) -> None:
    http = _FakeHttp(
        listing_pages=[
            [{"tokenMint": "m1"}, {"tokenMint": "m2"}],
            [{"tokenMint": "m3"}],
        ]
    )
    client = _client(settings_factory(api={"page_size": 2}), http, quiet_logger)

    listings = await client.get_listings("mkrs")

    assert [x["tokenMint"] for x in listings] == ["m1", "m2", "m3"]
    assert [c[1] for c in http.calls] == [{"offset": 0, "limit": 2}, {"offset": 2, "limit": 2}]


async def test_get_listings_stops_on_empty_page(
    settings_factory: Callable[..., Settings], quiet_logger: Callable[[str], Any]
) -> None:
    http = _FakeHttp(listing_pages=[[{"tokenMint": "m1"}, {"tokenMint": "m2"}], []])
    client = _client(settings_factory(api={"page_size": 2}), http, quiet_logger)

    listings = await client.get_listings("mkrs")

    assert len(listings) == 2
    assert len(http.calls) == 2


async def test_get_listings_keeps_pages_gathered_before_failure(
    settings_factory: Callable[..., Settings], quiet_logger: Callable[[str], Any]
) -> None:
    http = _FakeHttp(
        listing_pages=[
            [{"tokenMint": "m1"}, {"tokenMint": "m2"}],
            MagicEdenAPIError("boom", status_code=500),
        ]
    )
    client = _client(settings_factory(api={"page_size": 2}), http, quiet_logger)

    listings = await client.get_listings("mkrs")

    assert [x["tokenMint"] for x in listings] == ["m1", "m2"]


async def test_get_listings_drops_non_dict_entries(
    settings: Settings, quiet_logger: Callable[[str], Any]
) -> None:
    http = _FakeHttp(listing_pages=[[{"tokenMint": "m1"}, "junk", None]])

    listings = await _client(settings, http, quiet_logger).get_listings("mkrs")

    assert listings == [{"tokenMint": "m1"}]


async def test_get_listings_honours_should_stop(
    settings: Settings, quiet_logger: Callable[[str], Any]
) -> None:
    http = _FakeHttp(listing_pages=[[{"tokenMint": "m1"}]])

    listings = await _client(settings, http, quiet_logger).get_listings(
        "mkrs", should_stop=lambda: True
    )

    assert listings == []
    assert http.calls == []


async def test_get_token_is_served_from_cache(
    settings: Settings, quiet_logger: Callable[[str], Any]
) -> None:
    http = _FakeHttp(records={"/tokens/m1": _token("m1")})
    client = _client(settings, http, quiet_logger, TokenMetadataCache(ttl_seconds=60))

    first = await client.get_token("m1")
    second = await client.get_token("m1")

    assert first == second == _token("m1")
    assert len(http.calls) == 1


async def test_failed_token_lookup_is_not_cached(
    settings: Settings, quiet_logger: Callable[[str], Any]
) -> None:
    http = _FakeHttp()
    cache = TokenMetadataCache(ttl_seconds=60)
    client = _client(settings, http, quiet_logger, cache)

    assert await client.get_token("gone") is None
    assert await client.get_token("gone") is None

    assert "gone" not in cache
    assert len(http.calls) == 2


async def test_enumeration_fetches_each_distinct_mint_once(
    settings_factory: Callable[..., Settings], quiet_logger: Callable[[str], Any]
) -> None:
    http = _FakeHttp(
        activity_pages=[
            [_activity("m1"), _activity("m1"), _activity("m2")],
            [_activity("m2"), _activity("m3")],
        ],
        records={f"/tokens/{m}": _token(m) for m in ("m1", "m2", "m3")},
    )
    client = _client(settings_factory(api={"page_size": 3}), http, quiet_logger)

    tokens = await client.get_all_collection_tokens("mkrs", max_items=100)

    assert [t["mintAddress"] for t in tokens] == ["m1", "m2", "m3"]
    assert len([c for c in http.calls if "/tokens/" in c[0]]) == 3


async def test_enumeration_stops_at_max_items(
    settings_factory: Callable[..., Settings], quiet_logger: Callable[[str], Any]
) -> None:
    http = _FakeHttp(
        activity_pages=[
            [_activity("m1"), _activity("m2"), _activity("m3")],
            [_activity("m4")],
        ],
        records={f"/tokens/{m}": _token(m) for m in ("m1", "m2", "m3", "m4")},
    )
    client = _client(settings_factory(api={"page_size": 3}), http, quiet_logger)

    tokens = await client.get_all_collection_tokens("mkrs", max_items=2)

    assert [t["mintAddress"] for t in tokens] == ["m1", "m2"]
    assert len(http.calls_to("/activities")) == 1


async def test_enumeration_skips_failed_tokens_without_refetching(
    settings_factory: Callable[..., Settings], quiet_logger: Callable[[str], Any]
) -> None:
    http = _FakeHttp(
        activity_pages=[
            [_activity("m1"), _activity("bad"), {"type": "bid"}],
            [_activity("bad"), _activity("m3")],
        ],
        records={"/tokens/m1": _token("m1"), "/tokens/m3": _token("m3")},
    )
    client = _client(settings_factory(api={"page_size": 3}), http, quiet_logger)

    tokens = await client.get_all_collection_tokens("mkrs", max_items=100)

    assert [t["mintAddress"] for t in tokens] == ["m1", "m3"]
    assert len(http.calls_to("/tokens/bad")) == 1


async def test_enumeration_returns_partial_result_when_stopped(
    settings_factory: Callable[..., Settings], quiet_logger: Callable[[str], Any]
) -> None:
    http = _FakeHttp(
        activity_pages=[[_activity("m1"), _activity("m2"), _activity("m3")]],
        records={f"/tokens/{m}": _token(m) for m in ("m1", "m2", "m3")},
    )
    client = _client(settings_factory(api={"page_size": 3}), http, quiet_logger)

    tokens = await client.get_all_collection_tokens(
        "mkrs",
        max_items=100,
        should_stop=lambda: len(http.calls_to("/tokens/m1")) > 0,
    )

    assert [t["mintAddress"] for t in tokens] == ["m1"]
