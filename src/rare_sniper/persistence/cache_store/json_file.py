# -*- coding: utf-8 -*-
"""JSON-file cache store: one snapshot file and one seen-set file per collection."""

from __future__ import annotations

import json
import os
import tempfile
import time
from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, cast

import structlog

from rare_sniper.exceptions import CacheStoreError
from rare_sniper.models.item import Item
from rare_sniper.models.snapshot import CollectionSnapshot
from rare_sniper.persistence.cache_store.interface import ICacheStore

if TYPE_CHECKING:
    from rare_sniper.config import Settings


class JsonFileCacheStore(ICacheStore):
    """Stores <cache_dir>/<symbol>.json (snapshot) and <cache_dir>/<symbol>_seen.json.

    Snapshot freshness is judged from the file's modification time at read
    time. Writes go through a temp file and os.replace so a crash never
    leaves a half-written file behind.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        cache_dir: str | Path | None = None,
        clock: Callable[[], float] = time.time,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: str | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            settings: Application settings (uses settings.collection).
            cache_dir: Directory override; defaults to settings.collection.cache_dir.
            clock: Wall clock in epoch seconds, compared with file mtimes.
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        cfg = settings.collection
        self._dir = Path(cache_dir if cache_dir is not None else cfg.cache_dir)
        self._enabled = cfg.cache_enabled
        self._expiry_seconds = cfg.cache_expire_hours * 3600.0
        self._clock = clock
        self._logger = get_logger(logger_name or self.__class__.__name__)

    @property
    def cache_dir(self) -> Path:
        return self._dir

    def snapshot_path(self, symbol: str) -> Path:
        return self._dir / f"{symbol}.json"

    def seen_path(self, symbol: str) -> Path:
        return self._dir / f"{symbol}_seen.json"

    def _write_json(self, path: Path, data: Any) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2)
                os.replace(tmp, path)
            except BaseException:
                Path(tmp).unlink(missing_ok=True)
                raise
        except (OSError, TypeError, ValueError) as e:
            raise CacheStoreError(f"Cannot write {path}: {e}", path=str(path)) from e

    def _read_json(self, path: Path) -> Any:
        try:
            with path.open("r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            raise CacheStoreError(f"Cannot read {path}: {e}", path=str(path)) from e

    def _snapshot_age(self, symbol: str) -> float | None:
        """Seconds since the snapshot file was written; None if absent."""
        try:
            mtime = self.snapshot_path(symbol).stat().st_mtime
        except FileNotFoundError:
            return None
        except OSError as e:
            self._logger.warning("cache_stat_failed", cache_symbol=symbol, error_message=str(e))
            return None
        return self._clock() - mtime

    def has_fresh_snapshot(self, symbol: str) -> bool:
        age = self._snapshot_age(symbol)
        if age is None:
            return False
        if age > self._expiry_seconds:
            self._logger.info(
                "cache_snapshot_expired",
                cache_symbol=symbol,
                cache_expire_hours=self._expiry_seconds / 3600.0,
            )
            return False
        return True

    def read_snapshot(self, symbol: str) -> CollectionSnapshot | None:
        if not self._enabled or not self.has_fresh_snapshot(symbol):
            return None
        path = self.snapshot_path(symbol)
        try:
            data = self._read_json(path)
            mtime = path.stat().st_mtime
        except (CacheStoreError, OSError) as e:
            self._logger.warning("cache_snapshot_read_failed", cache_symbol=symbol, error_message=str(e))
            return None
        if not isinstance(data, list):
            self._logger.warning("cache_snapshot_malformed", cache_symbol=symbol)
            return None
        items = [
            item
            for item in (
                Item.from_dict(cast(dict[str, Any], r)) for r in cast(list[Any], data) if isinstance(r, dict)
            )
            if item is not None
        ]
        self._logger.info("cache_snapshot_loaded", cache_symbol=symbol, cache_items_count=len(items))
        return CollectionSnapshot.create(
            symbol, items, captured_at=datetime.fromtimestamp(mtime, UTC)
        )

    def write_snapshot(self, symbol: str, items: Iterable[Item]) -> bool:
        if not self._enabled:
            return False
        records = [item.to_dict() for item in items]
        try:
            self._write_json(self.snapshot_path(symbol), records)
        except CacheStoreError as e:
            self._logger.error("cache_snapshot_write_failed", cache_symbol=symbol, error_message=str(e))
            return False
        self._logger.info("cache_snapshot_saved", cache_symbol=symbol, cache_items_count=len(records))
        return True

    def read_seen_set(self, symbol: str) -> set[str]:
        path = self.seen_path(symbol)
        if not path.exists():
            self._logger.info("cache_seen_set_missing", cache_symbol=symbol)
            return set()
        try:
            data = self._read_json(path)
        except CacheStoreError as e:
            self._logger.warning("cache_seen_set_read_failed", cache_symbol=symbol, error_message=str(e))
            return set()
        if not isinstance(data, list):
            self._logger.warning("cache_seen_set_malformed", cache_symbol=symbol)
            return set()
        seen = {m for m in cast(list[Any], data) if isinstance(m, str) and m}
        self._logger.info("cache_seen_set_loaded", cache_symbol=symbol, cache_seen_count=len(seen))
        return seen

    def write_seen_set(self, symbol: str, seen: Iterable[str]) -> bool:
        mints = sorted(set(seen))
        try:
            self._write_json(self.seen_path(symbol), mints)
        except CacheStoreError as e:
            self._logger.error("cache_seen_set_write_failed", cache_symbol=symbol, error_message=str(e))
            return False
        self._logger.debug("cache_seen_set_saved", cache_symbol=symbol, cache_seen_count=len(mints))
        return True

    def clear(self, symbol: str) -> bool:
        try:
            self.snapshot_path(symbol).unlink(missing_ok=True)
        except OSError as e:
            self._logger.error("cache_clear_failed", cache_symbol=symbol, error_message=str(e))
            return False
        self._logger.info("cache_cleared", cache_symbol=symbol)
        return True
