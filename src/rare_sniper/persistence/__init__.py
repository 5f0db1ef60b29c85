"""Persistence layer (collection cache, seen-rare set)."""

from rare_sniper.persistence.cache_store import (
    ICacheStore,
    InMemoryCacheStore,
    JsonFileCacheStore,
)

__all__ = ["ICacheStore", "InMemoryCacheStore", "JsonFileCacheStore"]
