# -*- coding: utf-8 -*-
"""Settings tree for the scanner, read from the environment and .env.

One class per section; override a field with SECTION__FIELD, e.g.
RARITY__PERCENT_THRESHOLD=0.5 or COLLECTION__CACHE_EXPIRE_HOURS=6.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Service identity attached to every log line."""

    model_config = SettingsConfigDict(extra="ignore")

    app_name: str = "rare-sniper"
    service_name: Optional[str] = None
    service_version: Optional[str] = None
    environment: Literal["development", "test", "production"] = "development"


class LoggingSettings(BaseSettings):
    """Log targets, levels and rendering (LOGGING__*)."""

    model_config = SettingsConfigDict(extra="ignore")

    console_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    file_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    logfire_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    log_to_console: bool = True
    log_to_file: bool = False
    log_file_path: str = "logs/rare_sniper.log"
    # rotation schedule for the log file
    log_file_when: Literal[
        "S", "M", "H", "D", "W0", "W1", "W2", "W3", "W4", "W5", "W6", "midnight"
    ] = "midnight"
    log_file_interval: int = 1
    log_file_backup_count: int = 30
    log_file_utc: bool = True

    # console output as JSON lines instead of the coloured dev renderer
    json_format: bool = False

    logfire_enabled: bool = False
    logfire_token: Optional[str] = None


class ApiSettings(BaseSettings):
    """Configuration for the Magic Eden HTTP API."""

    model_config = SettingsConfigDict(extra="ignore")

    magic_eden_host: str = Field(
        default="https://api-mainnet.magiceden.dev/v2",
        description="Magic Eden API base URL.",
    )
    timeout_seconds: float = Field(
        default=15.0,
        ge=1.0,
        le=120.0,
        description="HTTP request timeout in seconds.",
    )
    requests_per_second: float = Field(
        default=2.0,
        gt=0.0,
        le=100.0,
        description="Ceiling on outbound requests per second (retries included).",
    )
    page_size: int = Field(
        default=500,
        ge=1,
        le=500,
        description="Records requested per page for listings and activities.",
    )
    rate_limit_delay_seconds: float = Field(
        default=5.0,
        ge=0.0,
        le=300.0,
        description="Fixed wait after an HTTP 429 before the request is re-issued.",
    )
    max_rate_limit_retries: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Maximum attempts for one logical request while rate limited.",
    )
    token_cache_ttl_seconds: float = Field(
        default=600.0,
        ge=0.0,
        description="How long token metadata is memoized in-process (0 disables).",
    )
    token_cache_size: int = Field(default=20000, ge=1)


class RaritySettings(BaseSettings):
    """Rarity classification thresholds."""

    model_config = SettingsConfigDict(extra="ignore")

    one_of_one_enabled: bool = Field(
        default=True,
        description="Treat a trait value held by exactly one item as rare.",
    )
    percent_threshold: float = Field(
        default=1.0,
        ge=0.0,
        le=100.0,
        description="Trait values at or below this share of the collection are rare.",
    )


class ScanSettings(BaseSettings):
    """Scheduler configuration."""

    model_config = SettingsConfigDict(extra="ignore")

    interval_minutes: float = Field(default=5.0, gt=0.0, le=1440.0)


class CollectionSettings(BaseSettings):
    """Full-collection enumeration and on-disk cache."""

    model_config = SettingsConfigDict(extra="ignore")

    cache_enabled: bool = Field(
        default=True,
        description="Persist the full-collection snapshot between runs.",
    )
    cache_expire_hours: float = Field(default=24.0, ge=0.0)
    max_items_to_fetch: int = Field(
        default=10000,
        ge=1,
        description="Upper bound on items enumerated from the activity feed.",
    )
    cache_dir: str = "cache"


class TelegramNotificationSettings(BaseSettings):
    """Telegram channel (TELEGRAM__*); needs enabled, api_key and chat_id."""

    model_config = SettingsConfigDict(extra="ignore")

    enabled: bool = False
    api_key: Optional[str] = Field(default=None, description="Telegram bot API key.")
    chat_id: Optional[str] = Field(default=None, description="Telegram chat ID.")
    messages_per_minute: int = Field(default=30, ge=1, le=120)
    max_retries: int = Field(default=5, ge=0, le=20)
    backoff_base_seconds: float = Field(default=1.0, ge=0.1, le=60.0)
    connect_timeout: float = Field(default=10.0, ge=0.1, le=60.0)
    read_timeout: float = Field(default=20.0, ge=0.1, le=120.0)
    write_timeout: float = Field(default=20.0, ge=0.1, le=120.0)
    pool_timeout: float = Field(default=10.0, ge=0.1, le=60.0)


class DiscordNotificationSettings(BaseSettings):
    """Discord webhook notifications (from env DISCORD__*)."""

    model_config = SettingsConfigDict(extra="ignore")

    enabled: bool = False
    webhook_url: Optional[str] = Field(default=None, description="Discord webhook URL.")
    username: str = "Rare Sniper"
    max_embeds: int = Field(
        default=10,
        ge=1,
        le=10,
        description="Item embeds per message (Discord allows 10 embeds in total).",
    )
    timeout_seconds: float = Field(default=15.0, ge=1.0, le=120.0)


class ConsoleNotificationSettings(BaseSettings):
    """Print notifications to stdout (CONSOLE__ENABLED)."""

    model_config = SettingsConfigDict(extra="ignore")

    enabled: bool = True


class Settings(BaseSettings):
    """All settings sections. Frozen; build a new instance to change anything."""

    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    app: AppSettings = Field(default_factory=AppSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    api: ApiSettings = Field(default_factory=ApiSettings)
    rarity: RaritySettings = Field(default_factory=RaritySettings)
    scan: ScanSettings = Field(default_factory=ScanSettings)
    collection: CollectionSettings = Field(default_factory=CollectionSettings)
    telegram: TelegramNotificationSettings = Field(default_factory=TelegramNotificationSettings)
    discord: DiscordNotificationSettings = Field(default_factory=DiscordNotificationSettings)
    console: ConsoleNotificationSettings = Field(default_factory=ConsoleNotificationSettings)

    @classmethod
    def from_env(cls, **overrides: Any) -> Settings:
        """Load settings, letting keyword overrides win over the environment.

        Sections are overridden with dicts, e.g.
        from_env(rarity={"percent_threshold": 0.5}, collection={"cache_enabled": False}).
        """
        return cls(**overrides)


@lru_cache
def get_settings() -> Settings:
    """Process-wide Settings, loaded on first call."""
    return Settings()
