"""Rare-item notification service (the scanner's notification sink)."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

import structlog

from rare_sniper.models.item import Item
from rare_sniper.notifications.strategies import BaseNotificationStrategy
from rare_sniper.notifications.types import RareItemsMessage


@dataclass
class RareItemNotificationService:
    """Deliver each batch of new rare items to every configured channel.

    notify() awaits delivery and reports True if at least one channel
    accepted the batch. Channel errors are logged, never raised.
    """

    notifiers: list[BaseNotificationStrategy]
    get_logger: Callable[[str], Any] = field(default=structlog.get_logger)
    _logger: Any = field(init=False)

    def __post_init__(self) -> None:
        self._logger = self.get_logger("RareItemNotificationService")

    @property
    def enabled_channels(self) -> list[str]:
        return [n.name for n in self.notifiers]

    async def initialize(self) -> None:
        """Initialize all notifiers."""
        for notifier in self.notifiers:
            await notifier.initialize()
        if not self.notifiers:
            self._logger.info("notification_init_no_notifiers")
            return
        self._logger.debug(
            "notification_init_complete",
            notification_channels=self.enabled_channels,
        )

    async def shutdown(self) -> None:
        """Shutdown all notifiers."""
        for notifier in self.notifiers:
            try:
                await notifier.shutdown()
            except Exception as exc:
                self._logger.warning(
                    "notification_shutdown_failed",
                    notification_channel=notifier.name,
                    error_type=type(exc).__name__,
                    error_message=str(exc),
                )
        self._logger.debug("notification_shutdown_complete")

    async def notify(self, items: Sequence[Item], collection_name: str) -> bool:
        """Send one summary of items for collection_name to every channel."""
        if not items or not self.notifiers:
            return False
        message = RareItemsMessage.create(list(items), collection_name)
        delivered = 0
        for notifier in self.notifiers:
            try:
                ok = await notifier.send_notification(message)
            except Exception as exc:
                self._logger.error(
                    "notification_channel_failed",
                    notification_channel=notifier.name,
                    error_type=type(exc).__name__,
                    error_message=str(exc),
                )
                ok = False
            if ok:
                delivered += 1
        self._logger.debug(
            "notification_dispatched",
            notification_items_count=len(items),
            notification_delivered_channels=delivered,
            notification_channels_count=len(self.notifiers),
        )
        return delivered > 0
