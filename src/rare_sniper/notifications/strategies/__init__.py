"""Notification strategies."""

from rare_sniper.notifications.strategies.base import (
    BaseNotificationStrategy,
)
from rare_sniper.notifications.strategies.console import ConsoleNotifier
from rare_sniper.notifications.strategies.discord import DiscordWebhookNotifier
from rare_sniper.notifications.strategies.telegram import TelegramNotifier

__all__ = [
    "BaseNotificationStrategy",
    "ConsoleNotifier",
    "DiscordWebhookNotifier",
    "TelegramNotifier",
]
