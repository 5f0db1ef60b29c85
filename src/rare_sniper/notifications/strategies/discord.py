# -*- coding: utf-8 -*-
"""Discord webhook notification strategy."""

from __future__ import annotations

import asyncio
import aiohttp
import structlog
from typing import Any, Callable, Optional, TYPE_CHECKING

from rare_sniper.notifications.types import RareItemsMessage
from rare_sniper.notifications.strategies.base import BaseNotificationStrategy

if TYPE_CHECKING:
    from rare_sniper.config.config import Settings
    from rare_sniper.notifications.types import NotificationStyler


class DiscordWebhookNotifier(BaseNotificationStrategy):
    """POST a summary embed plus one embed per item to a Discord webhook."""

    def __init__(
        self,
        settings: "Settings",
        styler: "NotificationStyler",
        *,
        session: Optional[aiohttp.ClientSession] = None,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        super().__init__(settings)
        cfg = self.settings.discord
        if not cfg.enabled or not cfg.webhook_url:
            raise ValueError("DiscordWebhookNotifier requires webhook_url.")
        self.webhook_url: str = cfg.webhook_url
        self.username = cfg.username
        # One slot is taken by the summary embed.
        self.max_item_embeds = max(1, cfg.max_embeds - 1)
        self._styler = styler
        self._session = session
        self._owns_session = session is None
        self._running = False
        self._logger = get_logger(logger_name or self.__class__.__name__)

    @property
    def is_running(self) -> bool:
        return self._running

    async def initialize(self) -> None:
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.settings.discord.timeout_seconds)
            self._session = aiohttp.ClientSession(timeout=timeout)
            self._owns_session = True
        self._running = True

    async def shutdown(self) -> None:
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None
        self._running = False

    def build_payload(self, message: RareItemsMessage) -> dict[str, Any]:
        count = len(message.items)
        return {
            "username": self.username,
            "content": f"Found {count} rare NFTs in collection **{message.collection_name}**",
            "embeds": self._styler.discord_embeds(message, max_items=self.max_item_embeds),
        }

    async def send_notification(self, message: RareItemsMessage) -> bool:
        if not self._running or self._session is None:
            self._logger.warning("discord_not_running_cannot_send")
            return False
        payload = self.build_payload(message)
        try:
            async with self._session.post(self.webhook_url, json=payload) as response:
                if response.status >= 400:
                    self._logger.error(
                        "discord_webhook_rejected",
                        http_status_code=response.status,
                    )
                    return False
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            self._logger.error(
                "discord_webhook_failed",
                error_type=type(exc).__name__,
                error_message=str(exc),
            )
            return False
        self._logger.debug(
            "discord_webhook_sent",
            discord_items_count=len(message.items),
        )
        return True
