"""Configuration subpackage."""

from rare_sniper.config.config import (
    ApiSettings,
    AppSettings,
    CollectionSettings,
    ConsoleNotificationSettings,
    DiscordNotificationSettings,
    LoggingSettings,
    RaritySettings,
    ScanSettings,
    Settings,
    TelegramNotificationSettings,
    get_settings,
)

__all__ = [
    "ApiSettings",
    "AppSettings",
    "CollectionSettings",
    "ConsoleNotificationSettings",
    "DiscordNotificationSettings",
    "LoggingSettings",
    "RaritySettings",
    "ScanSettings",
    "Settings",
    "TelegramNotificationSettings",
    "get_settings",
]
