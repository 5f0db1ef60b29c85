"""Single-flight recurring scheduler for one collection."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING, Any

import structlog
from structlog.contextvars import bound_contextvars

from rare_sniper.services.scan.scan_pipeline import ScanResult

if TYPE_CHECKING:
    from rare_sniper.config import Settings
    from rare_sniper.persistence.cache_store import ICacheStore
    from rare_sniper.services.scan.scan_pipeline import ScanPipeline


class ScanState(str, Enum):
    """Scheduler lifecycle state."""

    IDLE = "IDLE"
    SCANNING = "SCANNING"
    """One cycle in flight; further triggers are dropped."""
    TERMINATING = "TERMINATING"
    """Shutdown requested; no new cycles start."""


class ScanScheduler:
    """Runs ScanPipeline cycles for one symbol at a fixed interval.

    Owns the seen-rare set and the in-flight flag. All state changes happen on
    the event loop thread, so a trigger and a running cycle never mutate them
    concurrently. Triggers arriving while a cycle runs are dropped, not queued.
    """

    def __init__(
        self,
        pipeline: ScanPipeline,
        cache_store: ICacheStore,
        settings: Settings,
        symbol: str,
        *,
        interval_seconds: float | None = None,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: str | None = None,
    ) -> None:
        """Initialize the scheduler.

        Args:
            pipeline: Scan pipeline (injected).
            cache_store: Store the seen set is loaded from and persisted to.
            settings: Application settings (uses settings.scan).
            symbol: Collection symbol to scan.
            interval_seconds: Override of settings.scan.interval_minutes.
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        symbol = symbol.strip()
        if not symbol:
            raise ValueError("symbol must be non-empty")
        self._pipeline = pipeline
        self._cache = cache_store
        self._settings = settings
        self._symbol = symbol
        self._interval = (
            interval_seconds
            if interval_seconds is not None
            else settings.scan.interval_minutes * 60.0
        )
        self._logger = get_logger(logger_name or self.__class__.__name__)

        self._state = ScanState.IDLE
        self._seen: set[str] = set()
        self._seen_loaded = False
        self._current: asyncio.Task[ScanResult | None] | None = None
        self.cycles_started = 0
        self.cycles_completed = 0
        self.triggers_dropped = 0
        self.last_elapsed_seconds: float | None = None
        self.last_result: ScanResult | None = None

    @property
    def symbol(self) -> str:
        return self._symbol

    @property
    def state(self) -> ScanState:
        return self._state

    @property
    def seen(self) -> frozenset[str]:
        return frozenset(self._seen)

    @property
    def interval_seconds(self) -> float:
        return self._interval

    def load_state(self) -> None:
        """Load the persisted seen set (once)."""
        if self._seen_loaded:
            return
        self._seen = self._cache.read_seen_set(self._symbol)
        self._seen_loaded = True

    def trigger(self) -> asyncio.Task[ScanResult | None] | None:
        """Start a cycle if idle. Returns the cycle task, or None if the trigger was dropped."""
        if self._state is ScanState.TERMINATING:
            self._logger.info("scan_trigger_ignored_terminating", scan_symbol=self._symbol)
            return None
        if self._state is ScanState.SCANNING:
            self.triggers_dropped += 1
            self._logger.info(
                "scan_trigger_dropped",
                scan_symbol=self._symbol,
                message="Previous scan still running, skipping this scheduled run",
            )
            return None
        self.load_state()
        self._state = ScanState.SCANNING
        self.cycles_started += 1
        self._current = asyncio.create_task(self._run_cycle())
        return self._current

    def _stop_requested(self) -> bool:
        return self._state is ScanState.TERMINATING

    async def _run_cycle(self) -> ScanResult | None:
        result: ScanResult | None = None
        try:
            result = await self._pipeline.run_cycle(
                self._symbol, self._seen, should_stop=self._stop_requested
            )
        except Exception as e:
            self._logger.exception(
                "scan_cycle_crashed",
                scan_symbol=self._symbol,
                error_type=type(e).__name__,
                error_message=str(e),
            )
        finally:
            self.cycles_completed += 1
            if self._state is ScanState.SCANNING:
                self._state = ScanState.IDLE
            self._current = None
        if result is not None:
            self.last_result = result
            self.last_elapsed_seconds = result.elapsed_seconds
        return result

    async def run(self, shutdown_event: asyncio.Event) -> None:
        """Scan now and then every interval until shutdown_event is set, then shut down."""
        self.load_state()
        with bound_contextvars(scan_symbol=self._symbol):
            self._log_startup()
            try:
                while not shutdown_event.is_set():
                    self.trigger()
                    try:
                        await asyncio.wait_for(shutdown_event.wait(), timeout=self._interval)
                    except asyncio.TimeoutError:
                        self._logger.info("scan_interval_reached")
            finally:
                await self.shutdown()

    async def shutdown(self) -> bool:
        """Stop scheduling, let an in-flight cycle reach its next stop point, persist the seen set.

        Returns:
            True if the seen set was persisted.
        """
        self._state = ScanState.TERMINATING
        self._logger.info("scan_scheduler_terminating", scan_symbol=self._symbol)
        current = self._current
        if current is not None and not current.done():
            try:
                await current
            except asyncio.CancelledError:
                self._logger.info("scan_cycle_cancelled", scan_symbol=self._symbol)
        saved = self._cache.write_seen_set(self._symbol, self._seen)
        if saved:
            self._logger.info(
                "scan_state_saved",
                scan_symbol=self._symbol,
                scan_seen_total=len(self._seen),
            )
        else:
            self._logger.error("scan_state_save_failed", scan_symbol=self._symbol)
        return saved

    def _log_startup(self) -> None:
        cfg = self._settings.collection
        self._logger.info(
            "scan_scheduler_started",
            scan_interval_minutes=self._interval / 60.0,
            scan_seen_total=len(self._seen),
            cache_enabled=cfg.cache_enabled,
            cache_expire_hours=cfg.cache_expire_hours if cfg.cache_enabled else None,
            rarity_one_of_one=self._settings.rarity.one_of_one_enabled,
            rarity_percent_threshold=self._settings.rarity.percent_threshold,
        )
