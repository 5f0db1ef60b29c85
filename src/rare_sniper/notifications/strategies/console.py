# -*- coding: utf-8 -*-
"""Console notifier (print-based)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rare_sniper.notifications.types import RareItemsMessage
from rare_sniper.notifications.strategies.base import BaseNotificationStrategy
from rare_sniper.config import Settings

if TYPE_CHECKING:  # pragma: no cover
    from rare_sniper.notifications.types import NotificationStyler


class ConsoleNotifier(BaseNotificationStrategy):
    """Print notifications to stdout."""

    def __init__(
        self,
        settings: "Settings",
        styler: "NotificationStyler"
    ) -> None:
        super().__init__(settings)
        self._running = False
        self._styler = styler

    @property
    def is_running(self) -> bool:
        return self._running

    async def initialize(self) -> None:
        self._running = True

    async def shutdown(self) -> None:
        self._running = False

    async def send_notification(self, message: RareItemsMessage) -> bool:
        """Print the rendered message to the console."""
        if not self.is_running or not self.settings.console.enabled:
            return False
        print(self._styler.render(message))
        return True
