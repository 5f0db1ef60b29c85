# -*- coding: utf-8 -*-
"""
Entry point for the rare sniper.

Orchestrates: logging, settings, container, notification channels, the scan
scheduler, and shutdown (SIGINT/SIGTERM or CancelledError). The seen-rare set
is persisted before the process exits.

Run with: rare-sniper <collection-symbol> [--clear-cache]
      or: python -m rare_sniper.main <collection-symbol>
"""
from __future__ import annotations

import argparse
import asyncio
import signal
import sys
import structlog
from typing import Any, Optional, Sequence

from rare_sniper.DI import Container
from rare_sniper.config import get_settings
from rare_sniper.exceptions import MissingRequiredConfigError
from rare_sniper.logging.config import configure_logging

USAGE_EXAMPLE = "Example: rare-sniper mkrs"


def _setup_signals(shutdown_event: asyncio.Event) -> None:
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, shutdown_event.set)
        except NotImplementedError:
            pass  # Windows has no add_signal_handler


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="rare-sniper",
        description="Report listed NFTs with statistically rare traits.",
        epilog=USAGE_EXAMPLE,
    )
    parser.add_argument("symbol", nargs="?", default="", help="Magic Eden collection symbol")
    parser.add_argument(
        "--clear-cache",
        action="store_true",
        help="Delete the cached full-collection snapshot before the first scan",
    )
    return parser.parse_args(argv)


async def run(symbol: str, *, clear_cache: bool = False) -> None:
    configure_logging()
    logger = structlog.get_logger("main")
    symbol = symbol.strip()
    if not symbol:
        raise MissingRequiredConfigError("collection symbol")

    container = Container()
    settings = get_settings()
    cache_store = container.cache_store()
    if clear_cache:
        cache_store.clear(symbol)

    notification_service = container.notification_service()
    await notification_service.initialize()
    http_client = container.http_client()
    scheduler = container.scan_scheduler(symbol=symbol)

    shutdown_event = asyncio.Event()
    _setup_signals(shutdown_event)

    logger.info(
        "main_started",
        scan_symbol=symbol,
        scan_interval_minutes=settings.scan.interval_minutes,
        notification_channels=notification_service.enabled_channels,
        discord_enabled=settings.discord.enabled,
        telegram_enabled=settings.telegram.enabled,
    )
    try:
        await scheduler.run(shutdown_event)
    finally:
        await _close(logger, notification_service, http_client)


async def _close(logger: Any, notification_service: Any, http_client: Any) -> None:
    await notification_service.shutdown()
    await http_client.aclose()
    logger.info("main_shutdown_complete")


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    if not args.symbol.strip():
        print("Usage: rare-sniper <collection-symbol>", file=sys.stderr)
        print(USAGE_EXAMPLE, file=sys.stderr)
        sys.exit(1)
    try:
        asyncio.run(run(args.symbol, clear_cache=args.clear_cache))
    except KeyboardInterrupt:
        pass


__all__ = ["run", "main", "parse_args"]

if __name__ == "__main__":
    main()
