"""Notification subsystem."""

from rare_sniper.notifications.notification_manager import (
    RareItemNotificationService,
)
from rare_sniper.notifications.strategies import (
    BaseNotificationStrategy,
    ConsoleNotifier,
    DiscordWebhookNotifier,
    TelegramNotifier,
)
from rare_sniper.notifications.stylers import RareItemStyler
from rare_sniper.notifications.types import (
    NotificationStyler,
    RareItemsMessage,
)

__all__ = [
    "BaseNotificationStrategy",
    "ConsoleNotifier",
    "DiscordWebhookNotifier",
    "TelegramNotifier",
    "NotificationStyler",
    "RareItemNotificationService",
    "RareItemStyler",
    "RareItemsMessage",
]
