"""One scan cycle: full collection -> trait stats -> listings -> rare -> dedup -> notify."""

from __future__ import annotations

import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol

import structlog
from structlog.contextvars import bound_contextvars

from rare_sniper.models.item import Item, listing_price_lamports
from rare_sniper.utils.formatting import format_elapsed, format_price_sol, mask_address

if TYPE_CHECKING:
    from rare_sniper.clients.magic_eden_api import MagicEdenClient
    from rare_sniper.config import Settings
    from rare_sniper.persistence.cache_store import ICacheStore
    from rare_sniper.services.rarity import RarityEngine


class RareItemSink(Protocol):
    """Receives newly discovered rare items; returns whether delivery succeeded."""

    async def notify(self, items: Sequence[Item], collection_name: str) -> bool: ...


class ScanStatus(str, Enum):
    """How a cycle ended."""

    COMPLETED = "completed"
    COLLECTION_NOT_FOUND = "collection_not_found"
    NO_COLLECTION_ITEMS = "no_collection_items"
    NO_LISTINGS = "no_listings"
    ABORTED = "aborted"
    """Stop requested between remote calls (shutdown)."""
    FAILED = "failed"


@dataclass(frozen=True)
class ScanResult:
    """Outcome and counters of one scan cycle."""

    symbol: str
    status: ScanStatus
    elapsed_seconds: float
    collection_name: str | None = None
    collection_items: int = 0
    snapshot_from_cache: bool = False
    listings: int = 0
    listed_items: int = 0
    rare_items: int = 0
    new_rare_items: tuple[Item, ...] = ()
    notified: bool | None = None
    """None when nothing was sent; otherwise the sink's result."""
    error: str | None = None


class _Aborted(Exception):
    pass


class ScanPipeline:
    """Runs one scan cycle for a collection symbol against a caller-owned seen set.

    The seen set is mutated in place and persisted through the cache store
    before any notification is attempted, so a failed delivery is not retried.
    """

    def __init__(
        self,
        client: MagicEdenClient,
        cache_store: ICacheStore,
        rarity_engine: RarityEngine,
        sink: RareItemSink,
        settings: Settings,
        *,
        clock: Callable[[], float] = time.monotonic,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: str | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            client: Magic Eden client (injected).
            cache_store: Snapshot and seen-set store (injected).
            rarity_engine: Rarity engine bound to the configured thresholds.
            sink: Notification sink for new rare items.
            settings: Application settings (uses settings.collection).
            clock: Monotonic clock for elapsed time.
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        self._client = client
        self._cache = cache_store
        self._rarity = rarity_engine
        self._sink = sink
        self._settings = settings
        self._clock = clock
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def run_cycle(
        self,
        symbol: str,
        seen: set[str],
        *,
        should_stop: Callable[[], bool] = lambda: False,
    ) -> ScanResult:
        """Run the full pipeline once. Never raises (except on cancellation).

        Args:
            symbol: Collection symbol.
            seen: Mints already reported; new rare mints are added to it.
            should_stop: Checked between remote calls; True abandons the cycle.
        """
        started = self._clock()
        state: dict[str, Any] = {}

        def _result(status: ScanStatus, **kwargs: Any) -> ScanResult:
            merged = {**state, **kwargs}
            return ScanResult(
                symbol=symbol,
                status=status,
                elapsed_seconds=self._clock() - started,
                **merged,
            )

        def _checkpoint() -> None:
            if should_stop():
                raise _Aborted()

        with bound_contextvars(scan_symbol=symbol):
            self._logger.info("scan_cycle_started")
            try:
                result = await self._run(symbol, seen, state, _result, _checkpoint, should_stop)
            except _Aborted:
                self._logger.info("scan_cycle_aborted")
                result = _result(ScanStatus.ABORTED)
            except Exception as e:
                self._logger.exception(
                    "scan_cycle_failed",
                    error_type=type(e).__name__,
                    error_message=str(e),
                )
                result = _result(ScanStatus.FAILED, error=str(e))
            self._logger.info(
                "scan_cycle_completed",
                scan_status=result.status.value,
                scan_elapsed=format_elapsed(result.elapsed_seconds),
            )
        return result

    async def _run(
        self,
        symbol: str,
        seen: set[str],
        state: dict[str, Any],
        result: Callable[..., ScanResult],
        checkpoint: Callable[[], None],
        should_stop: Callable[[], bool],
    ) -> ScanResult:
        collection = await self._client.get_collection(symbol)
        if not collection:
            self._logger.warning("scan_collection_not_found")
            return result(ScanStatus.COLLECTION_NOT_FOUND)
        collection_name = str(collection.get("name") or symbol)
        state["collection_name"] = collection_name
        self._logger.info("scan_collection_found", scan_collection_name=collection_name)
        checkpoint()

        all_items, from_cache = await self._collection_items(symbol, checkpoint, should_stop)
        state["collection_items"] = len(all_items)
        state["snapshot_from_cache"] = from_cache
        if not all_items:
            self._logger.warning("scan_no_collection_items")
            return result(ScanStatus.NO_COLLECTION_ITEMS)

        stats = self._rarity.compute_trait_stats(all_items)
        self._logger.info(
            "scan_trait_stats_ready",
            scan_collection_items=len(all_items),
            scan_trait_types=len(stats),
        )
        checkpoint()

        listings = await self._client.get_listings(symbol, should_stop=should_stop)
        checkpoint()
        state["listings"] = len(listings)
        if not listings:
            self._logger.info("scan_no_listings")
            return result(ScanStatus.NO_LISTINGS)

        listed = await self._listed_items(listings, checkpoint)
        state["listed_items"] = len(listed)
        self._logger.info("scan_listings_normalized", scan_listed_items=len(listed))

        rare = self._rarity.find_rare(listed, stats)
        state["rare_items"] = len(rare)
        if not rare:
            self._logger.info("scan_no_rare_listings")
            return result(ScanStatus.COMPLETED)

        new_rare = self._take_new(rare, seen)
        self._cache.write_seen_set(symbol, seen)
        state["new_rare_items"] = tuple(new_rare)
        self._logger.info(
            "scan_rare_listings_found",
            scan_rare_count=len(rare),
            scan_new_rare_count=len(new_rare),
            scan_seen_total=len(seen),
        )
        for item in new_rare:
            self._log_rare_item(item)

        if not new_rare:
            return result(ScanStatus.COMPLETED)

        notified = await self._notify(new_rare, collection_name)
        return result(ScanStatus.COMPLETED, notified=notified)

    async def _collection_items(
        self,
        symbol: str,
        checkpoint: Callable[[], None],
        should_stop: Callable[[], bool],
    ) -> tuple[list[Item], bool]:
        """Full-collection items from a fresh snapshot, else from the API (then cached)."""
        snapshot = self._cache.read_snapshot(symbol)
        if snapshot is not None and snapshot.items:
            self._logger.info("scan_using_cached_snapshot", scan_cached_items=len(snapshot))
            return snapshot.items, True

        self._logger.info("scan_fetching_full_collection")
        tokens = await self._client.get_all_collection_tokens(
            symbol,
            max_items=self._settings.collection.max_items_to_fetch,
            should_stop=should_stop,
        )
        checkpoint()
        items = [item for item in (Item.from_token(t) for t in tokens) if item is not None]
        if items:
            self._cache.write_snapshot(symbol, items)
        return items, False

    async def _listed_items(
        self, listings: list[dict[str, Any]], checkpoint: Callable[[], None]
    ) -> list[Item]:
        """Fetch and normalize each listed token; skip listings whose lookup fails."""
        items: list[Item] = []
        seen_mints: set[str] = set()
        for listing in listings:
            checkpoint()
            mint = listing.get("tokenMint")
            if not isinstance(mint, str) or not mint or mint in seen_mints:
                continue
            seen_mints.add(mint)
            token = await self._client.get_token(mint)
            if token is None:
                self._logger.debug("scan_listing_skipped", scan_mint=mask_address(mint))
                continue
            item = Item.from_token(token)
            if item is None:
                continue
            items.append(item.with_listing(listing_price_lamports(listing), listing.get("seller")))
        return items

    @staticmethod
    def _take_new(rare: list[Item], seen: set[str]) -> list[Item]:
        new: list[Item] = []
        for item in rare:
            if item.mint_address in seen:
                continue
            seen.add(item.mint_address)
            new.append(item)
        return new

    async def _notify(self, items: list[Item], collection_name: str) -> bool:
        try:
            sent = await self._sink.notify(items, collection_name)
        except Exception as e:
            self._logger.error(
                "scan_notification_failed",
                error_type=type(e).__name__,
                error_message=str(e),
            )
            return False
        if sent:
            self._logger.info("scan_notification_sent", scan_notified_count=len(items))
        else:
            self._logger.warning("scan_notification_not_delivered", scan_notified_count=len(items))
        return sent

    def _log_rare_item(self, item: Item) -> None:
        rare_traits = item.rarity.rare_traits if item.rarity else {}
        self._logger.info(
            "scan_new_rare_item",
            item_name=item.name,
            item_mint=item.mint_address,
            item_price=format_price_sol(item.price),
            item_url=item.marketplace_url,
            item_image=item.image,
            item_rare_traits={
                k: f"{t.value} ({t.percentage}%, {t.describe()})" for k, t in rare_traits.items()
            },
        )
