# -*- coding: utf-8 -*-
"""Telegram notification strategy (python-telegram-bot, HTML messages)."""

from __future__ import annotations

import asyncio
import time
from collections import deque
from collections.abc import Awaitable
from datetime import timedelta
from typing import Any, Callable, Optional, TYPE_CHECKING

import structlog
from telegram import Bot
from telegram.constants import MessageLimit, ParseMode
from telegram.error import BadRequest, Forbidden, RetryAfter, TelegramError
from telegram.request import HTTPXRequest

from rare_sniper.notifications.types import RareItemsMessage
from rare_sniper.notifications.strategies.base import BaseNotificationStrategy

if TYPE_CHECKING:
    from rare_sniper.config.config import Settings
    from rare_sniper.notifications.types import NotificationStyler

RATE_WINDOW_SECONDS = 60.0


def split_message(text: str, limit: int = MessageLimit.MAX_TEXT_LENGTH) -> list[str]:
    """Split text at blank lines into chunks of at most limit characters.

    Item sections are separated by blank lines, so HTML tags never straddle
    a chunk unless a single section is itself longer than limit.
    """
    chunks: list[str] = []
    current = ""
    for block in text.split("\n\n"):
        candidate = f"{current}\n\n{block}" if current else block
        if len(candidate) <= limit:
            current = candidate
            continue
        if current:
            chunks.append(current)
        while len(block) > limit:
            chunks.append(block[:limit])
            block = block[limit:]
        current = block
    if current:
        chunks.append(current)
    return chunks


def _seconds(value: float | timedelta) -> float:
    if isinstance(value, timedelta):
        return value.total_seconds()
    return float(value)


class TelegramNotifier(BaseNotificationStrategy):
    """Deliver rare-item summaries to one Telegram chat.

    Long summaries are sent as several messages. Each message honours the
    per-minute cap, waits out RetryAfter, and backs off on transient errors.
    BadRequest and Forbidden abort the delivery at once.
    """

    def __init__(
        self,
        settings: "Settings",
        styler: "NotificationStyler",
        *,
        bot: Optional[Bot] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        super().__init__(settings)
        cfg = self.settings.telegram
        if not cfg.enabled or not cfg.api_key or not cfg.chat_id:
            raise ValueError("TelegramNotifier requires api_key and chat_id.")
        self.chat_id = str(cfg.chat_id)
        self._token = str(cfg.api_key)
        self._styler = styler
        self._bot = bot
        self._clock = clock
        self._sleep = sleep
        self._sent_at: deque[float] = deque()
        self._running = False
        self._logger = get_logger(logger_name or self.__class__.__name__)

    @property
    def is_running(self) -> bool:
        return self._running

    async def initialize(self) -> None:
        if self._bot is None:
            cfg = self.settings.telegram
            self._bot = Bot(
                token=self._token,
                request=HTTPXRequest(
                    connect_timeout=cfg.connect_timeout,
                    read_timeout=cfg.read_timeout,
                    write_timeout=cfg.write_timeout,
                    pool_timeout=cfg.pool_timeout,
                ),
            )
        self._running = True

    async def shutdown(self) -> None:
        self._running = False
        self._bot = None

    async def send_notification(self, message: RareItemsMessage) -> bool:
        if not self._running or self._bot is None:
            self._logger.warning("telegram_not_running_cannot_send")
            return False
        chunks = split_message(self._styler.render(message, parse_html=True))
        for index, chunk in enumerate(chunks, start=1):
            if not await self._deliver(chunk):
                self._logger.error(
                    "telegram_delivery_aborted",
                    telegram_chunk=index,
                    telegram_chunks_total=len(chunks),
                )
                return False
        self._logger.debug("telegram_sent", telegram_chunks_total=len(chunks))
        return True

    async def _deliver(self, text: str) -> bool:
        assert self._bot is not None
        cfg = self.settings.telegram
        for attempt in range(1, cfg.max_retries + 2):
            await self._wait_for_rate_window()
            try:
                await self._bot.send_message(
                    chat_id=self.chat_id,
                    text=text,
                    parse_mode=ParseMode.HTML,
                )
            except RetryAfter as exc:
                delay = _seconds(exc.retry_after)
                self._logger.warning("telegram_retry_after", retry_seconds=delay, attempt=attempt)
            except (BadRequest, Forbidden) as exc:
                self._logger.error(
                    "telegram_rejected",
                    error_type=type(exc).__name__,
                    error_message=str(exc),
                )
                return False
            except TelegramError as exc:
                delay = min(60.0, cfg.backoff_base_seconds * 2 ** (attempt - 1))
                self._logger.warning(
                    "telegram_send_failed",
                    error_type=type(exc).__name__,
                    attempt=attempt,
                    backoff_seconds=delay,
                )
            else:
                self._sent_at.append(self._clock())
                return True
            await self._sleep(delay)
        self._logger.error("telegram_retries_exhausted", max_retries=cfg.max_retries)
        return False

    async def _wait_for_rate_window(self) -> None:
        limit = self.settings.telegram.messages_per_minute
        now = self._clock()
        while self._sent_at and now - self._sent_at[0] >= RATE_WINDOW_SECONDS:
            self._sent_at.popleft()
        if len(self._sent_at) >= limit:
            wait = RATE_WINDOW_SECONDS - (now - self._sent_at[0])
            if wait > 0:
                await self._sleep(wait)
