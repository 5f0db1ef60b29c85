# -*- coding: utf-8 -*-
"""Dependency injection container (dependency-injector)."""

from __future__ import annotations

from dependency_injector import containers, providers

from rare_sniper.config import Settings, get_settings
from rare_sniper.clients.http import AsyncHttpClient
from rare_sniper.clients.magic_eden_api import MagicEdenClient
from rare_sniper.clients.request_throttle import RequestThrottle
from rare_sniper.clients.retry import RetryPolicy
from rare_sniper.clients.token_cache import TokenMetadataCache
from rare_sniper.notifications.notification_manager import RareItemNotificationService
from rare_sniper.notifications.strategies.base import BaseNotificationStrategy
from rare_sniper.notifications.strategies.console import ConsoleNotifier
from rare_sniper.notifications.strategies.discord import DiscordWebhookNotifier
from rare_sniper.notifications.strategies.telegram import TelegramNotifier
from rare_sniper.notifications.stylers.rare_item_styler import RareItemStyler
from rare_sniper.persistence.cache_store import JsonFileCacheStore
from rare_sniper.services.rarity import RarityEngine
from rare_sniper.services.scan import ScanPipeline, ScanScheduler


def _build_notifiers(
    settings: Settings,
    styler: RareItemStyler,
) -> list[BaseNotificationStrategy]:
    notifiers: list[BaseNotificationStrategy] = []
    if settings.console.enabled:
        notifiers.append(ConsoleNotifier(settings=settings, styler=styler))
    if settings.telegram.enabled:
        notifiers.append(TelegramNotifier(settings=settings, styler=styler))
    if settings.discord.enabled:
        notifiers.append(DiscordWebhookNotifier(settings=settings, styler=styler))
    return notifiers


def _build_token_cache(settings: Settings) -> TokenMetadataCache | None:
    api = settings.api
    if api.token_cache_ttl_seconds <= 0:
        return None
    return TokenMetadataCache(maxsize=api.token_cache_size, ttl_seconds=api.token_cache_ttl_seconds)


class Container(containers.DeclarativeContainer):
    """Application container. Wires settings, HTTP client, Magic Eden client, cache, pipeline."""

    config = providers.Callable(get_settings)

    request_throttle = providers.Singleton(
        RequestThrottle,
        requests_per_second=providers.Callable(lambda s: s.api.requests_per_second, config),
    )

    retry_policy = providers.Singleton(
        RetryPolicy,
        max_attempts=providers.Callable(lambda s: s.api.max_rate_limit_retries, config),
        delay_seconds=providers.Callable(lambda s: s.api.rate_limit_delay_seconds, config),
    )

    http_client = providers.Singleton(
        AsyncHttpClient,
        settings=config,
        throttle=request_throttle,
        retry_policy=retry_policy,
    )

    token_cache = providers.Singleton(_build_token_cache, config)

    magic_eden_client = providers.Singleton(
        MagicEdenClient,
        http_client=http_client,
        settings=config,
        token_cache=token_cache,
    )

    cache_store = providers.Singleton(JsonFileCacheStore, settings=config)

    rarity_engine = providers.Singleton(RarityEngine, settings=config)

    notification_styler = providers.Singleton(RareItemStyler)

    notification_service = providers.Singleton(
        RareItemNotificationService,
        notifiers=providers.Callable(_build_notifiers, config, notification_styler),
    )

    scan_pipeline = providers.Singleton(
        ScanPipeline,
        client=magic_eden_client,
        cache_store=cache_store,
        rarity_engine=rarity_engine,
        sink=notification_service,
        settings=config,
    )

    scan_scheduler = providers.Factory(
        ScanScheduler,
        pipeline=scan_pipeline,
        cache_store=cache_store,
        settings=config,
    )
