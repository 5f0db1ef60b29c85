"""Collection cache stores."""

from rare_sniper.persistence.cache_store.in_memory import InMemoryCacheStore
from rare_sniper.persistence.cache_store.interface import ICacheStore
from rare_sniper.persistence.cache_store.json_file import JsonFileCacheStore

__all__ = ["ICacheStore", "InMemoryCacheStore", "JsonFileCacheStore"]
