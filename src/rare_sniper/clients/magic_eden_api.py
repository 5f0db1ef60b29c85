# -*- coding: utf-8 -*-
"""Magic Eden API client (public collection, listing, activity and token endpoints)."""

from __future__ import annotations

import structlog
from collections.abc import AsyncIterator
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, cast
from structlog.contextvars import bound_contextvars

from rare_sniper.config import Settings
from rare_sniper.exceptions import MagicEdenAPIError

if TYPE_CHECKING:
    from .http import AsyncHttpClient
    from .token_cache import TokenMetadataCache


def _dict_records(data: Any) -> List[Dict[str, Any]]:
    """Keep only dict entries of a list response."""
    if not isinstance(data, list):
        return []
    return [cast(Dict[str, Any], x) for x in cast(List[Any], data) if isinstance(x, dict)]


class MagicEdenClient:
    """Client for the Magic Eden v2 API.

    Single-record lookups return None on failure; paginated lookups stop at
    the first failed page and return what was gathered. Failures are logged,
    never raised.
    """

    def __init__(
        self,
        http_client: "AsyncHttpClient",
        settings: Settings,
        *,
        token_cache: Optional["TokenMetadataCache"] = None,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the client.

        Args:
            http_client: Async HTTP client (throttled, 429-aware).
            settings: Application settings (uses settings.api and settings.collection).
            token_cache: Optional memo for per-token metadata.
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        self._http = http_client
        self._settings = settings
        self._token_cache = token_cache
        self._logger = get_logger(logger_name or self.__class__.__name__)

    def _base_url(self) -> str:
        return self._settings.api.magic_eden_host.rstrip("/")

    @property
    def page_size(self) -> int:
        return self._settings.api.page_size

    async def _get_record(self, path: str, *, operation: str) -> Optional[Dict[str, Any]]:
        url = f"{self._base_url()}{path}"
        try:
            data = await self._http.get(url)
        except MagicEdenAPIError as e:
            self._logger.warning(
                "magic_eden_request_failed",
                magic_eden_operation=operation,
                http_status_code=e.status_code,
                error_message=str(e),
            )
            return None
        if not isinstance(data, dict):
            self._logger.warning(
                "magic_eden_non_dict_response",
                magic_eden_operation=operation,
                magic_eden_response_type=type(data).__name__,
            )
            return None
        return cast(Dict[str, Any], data)

    async def get_collection(self, symbol: str) -> Optional[Dict[str, Any]]:
        """GET /collections/{symbol}. None if missing or the request failed."""
        return await self._get_record(f"/collections/{symbol}", operation="get_collection")

    async def get_collection_stats(self, symbol: str) -> Optional[Dict[str, Any]]:
        """GET /collections/{symbol}/stats (floor price, listed count, volume)."""
        return await self._get_record(
            f"/collections/{symbol}/stats", operation="get_collection_stats"
        )

    async def get_token(self, mint: str) -> Optional[Dict[str, Any]]:
        """GET /tokens/{mint}, served from the token cache when possible."""
        if self._token_cache is not None:
            cached = self._token_cache.get(mint)
            if cached is not None:
                return cached
        record = await self._get_record(f"/tokens/{mint}", operation="get_token")
        if record is not None and self._token_cache is not None:
            self._token_cache.put(mint, record)
        return record

    async def get_listings_page(
        self, symbol: str, *, offset: int = 0, limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """One page of GET /collections/{symbol}/listings. Raises MagicEdenAPIError."""
        return await self._get_page(f"/collections/{symbol}/listings", offset, limit)

    async def get_activities_page(
        self, symbol: str, *, offset: int = 0, limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """One page of GET /collections/{symbol}/activities. Raises MagicEdenAPIError."""
        return await self._get_page(f"/collections/{symbol}/activities", offset, limit)

    async def _get_page(
        self, path: str, offset: int, limit: Optional[int]
    ) -> List[Dict[str, Any]]:
        params: dict[str, Any] = {"offset": offset, "limit": limit or self.page_size}
        data = await self._http.get(f"{self._base_url()}{path}", params=params)
        if not isinstance(data, list):
            self._logger.warning(
                "magic_eden_non_list_page",
                magic_eden_response_type=type(data).__name__,
            )
        return _dict_records(data)

    async def _paginate(
        self,
        fetch_page: Callable[..., Any],
        symbol: str,
        *,
        operation: str,
        should_stop: Optional[Callable[[], bool]] = None,
    ) -> AsyncIterator[List[Dict[str, Any]]]:
        """Yield pages until a short or empty page, a failed page, or should_stop()."""
        offset = 0
        limit = self.page_size
        while True:
            if should_stop is not None and should_stop():
                return
            with bound_contextvars(magic_eden_offset=offset, magic_eden_limit=limit):
                try:
                    page = await fetch_page(symbol, offset=offset, limit=limit)
                except MagicEdenAPIError as e:
                    self._logger.warning(
                        "magic_eden_pagination_stopped",
                        magic_eden_operation=operation,
                        http_status_code=e.status_code,
                        error_message=str(e),
                    )
                    return
            if not page:
                return
            yield page
            if len(page) < limit:
                return
            offset += limit

    async def get_listings(
        self, symbol: str, *, should_stop: Optional[Callable[[], bool]] = None
    ) -> List[Dict[str, Any]]:
        """All active listings of a collection (partial on failure)."""
        listings: List[Dict[str, Any]] = []
        with bound_contextvars(magic_eden_symbol=symbol):
            async for page in self._paginate(
                self.get_listings_page, symbol, operation="get_listings", should_stop=should_stop
            ):
                listings.extend(page)
                self._logger.debug(
                    "magic_eden_listings_progress",
                    magic_eden_listings_count=len(listings),
                )
            self._logger.info(
                "magic_eden_listings_fetched",
                magic_eden_listings_count=len(listings),
            )
        return listings

    async def get_all_collection_tokens(
        self,
        symbol: str,
        *,
        max_items: Optional[int] = None,
        should_stop: Optional[Callable[[], bool]] = None,
    ) -> List[Dict[str, Any]]:
        """Approximate the full collection from the activity feed.

        Collects the distinct token mints referenced by activity records and
        fetches each token's metadata, until the feed ends or max_items tokens
        are collected. Tokens with no recorded activity are never seen, so the
        result can under-count the collection.
        """
        limit_items = max_items if max_items is not None else self._settings.collection.max_items_to_fetch
        tokens: List[Dict[str, Any]] = []
        attempted: set[str] = set()

        with bound_contextvars(magic_eden_symbol=symbol, magic_eden_max_items=limit_items):
            self._logger.info("magic_eden_enumeration_started")
            async for page in self._paginate(
                self.get_activities_page,
                symbol,
                operation="get_all_collection_tokens",
                should_stop=should_stop,
            ):
                page_mints = dict.fromkeys(
                    a["tokenMint"] for a in page if isinstance(a.get("tokenMint"), str) and a["tokenMint"]
                )
                for mint in page_mints:
                    if len(tokens) >= limit_items:
                        break
                    if should_stop is not None and should_stop():
                        self._logger.info("magic_eden_enumeration_interrupted")
                        return tokens
                    if mint in attempted:
                        continue
                    attempted.add(mint)
                    record = await self.get_token(mint)
                    if record is not None:
                        tokens.append(record)
                self._logger.debug(
                    "magic_eden_enumeration_progress",
                    magic_eden_activities_in_page=len(page),
                    magic_eden_tokens_count=len(tokens),
                )
                if len(tokens) >= limit_items:
                    self._logger.info("magic_eden_enumeration_limit_reached")
                    break
            self._logger.info(
                "magic_eden_enumeration_completed",
                magic_eden_tokens_count=len(tokens),
            )
        return tokens
