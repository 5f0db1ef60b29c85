# -*- coding: utf-8 -*-
"""Logging configuration for structlog + Logfire."""

from __future__ import annotations

import logging
import logfire
import structlog
from typing import Any, Optional
from structlog.types import EventDict, Processor
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from rare_sniper.config import AppSettings, LoggingSettings, Settings, get_settings

LOG_LEVEL_TO_LOGFIRE: dict[str, str] = {
    "DEBUG": "debug",
    "INFO": "info",
    "WARNING": "warn",
    "ERROR": "error",
    "CRITICAL": "fatal",
}


def _level(name: str) -> int:
    return getattr(logging, name.upper(), logging.INFO)


def _service_context(app: AppSettings) -> Processor:
    """Build a processor attaching logger name, app_name, service name/version and environment."""

    def _add_service_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        stdlib_logger = getattr(logger, "_logger", None)
        event_dict["logger"] = (
            getattr(stdlib_logger, "name", None) or getattr(logger, "name", "") or ""
        )
        event_dict["app_name"] = app.app_name
        if app.service_name:
            event_dict["service_name"] = app.service_name
        if app.service_version:
            event_dict["service_version"] = app.service_version
        event_dict["environment"] = app.environment
        return event_dict

    return _add_service_context


def _build_handlers(cfg: LoggingSettings) -> list[logging.Handler]:
    """Console and/or rotating file handlers; both emit the pre-rendered message only."""
    handlers: list[logging.Handler] = []
    if cfg.log_to_console:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(_level(cfg.console_level))
        handlers.append(console_handler)
    if cfg.log_to_file:
        path = Path(cfg.log_file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            path,
            when=cfg.log_file_when,
            interval=cfg.log_file_interval,
            backupCount=cfg.log_file_backup_count,
            encoding="utf-8",
            utc=cfg.log_file_utc,
        )
        file_handler.setLevel(_level(cfg.file_level))
        handlers.append(file_handler)
    for handler in handlers:
        handler.setFormatter(logging.Formatter("%(message)s"))
    return handlers


def _build_processors(cfg: LoggingSettings, app: AppSettings) -> list[Processor]:
    processors: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _service_context(app),
    ]
    if cfg.logfire_enabled:
        processors.append(logfire.StructlogProcessor())  # type: ignore[arg-type]

    # File output is always JSON; console follows json_format unless a file is also written.
    if cfg.log_to_console or cfg.log_to_file:
        renderer: Any = (
            structlog.processors.JSONRenderer()
            if cfg.log_to_file or cfg.json_format
            else structlog.dev.ConsoleRenderer()
        )
        processors.append(renderer)
    return processors


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Configure stdlib handlers, optional Logfire and the structlog pipeline."""
    settings = settings or get_settings()
    cfg = settings.logging

    handlers = _build_handlers(cfg)
    if handlers:
        logging.basicConfig(
            level=min(h.level for h in handlers),
            handlers=handlers,
            force=True,
        )

    if cfg.logfire_enabled:
        app = settings.app
        logfire.configure(
            token=cfg.logfire_token,
            service_name=app.service_name or app.app_name,
            service_version=app.service_version,
            min_level=LOG_LEVEL_TO_LOGFIRE.get(cfg.logfire_level, "info"),  # type: ignore[arg-type]
            environment=app.environment,
        )

    structlog.configure(
        processors=_build_processors(cfg, settings.app),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
