"""Exceptions subpackage."""

from rare_sniper.exceptions.exceptions import (
    CacheStoreError,
    MagicEdenAPIError,
    MissingRequiredConfigError,
    RareSniperError,
    RateLimitError,
)

__all__ = [
    "CacheStoreError",
    "MagicEdenAPIError",
    "MissingRequiredConfigError",
    "RareSniperError",
    "RateLimitError",
]
