"""Custom exceptions for the Magic Eden client, cache and scanner."""

from __future__ import annotations


class RareSniperError(Exception):
    """Base exception for rare-sniper errors."""

    pass


class MissingRequiredConfigError(RareSniperError):
    """Raised when a required configuration value or argument is missing."""

    pass


class MagicEdenAPIError(RareSniperError):
    """Raised when a Magic Eden API request fails (non-retryable)."""

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        status_code: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code
        self.cause = cause


class RateLimitError(MagicEdenAPIError):
    """Raised when the API returns HTTP 429 (Too Many Requests). Retryable."""

    def __init__(
        self,
        message: str = "Rate limit exceeded (429)",
        *,
        url: str | None = None,
        retry_after: float | None = None,
    ) -> None:
        super().__init__(message, url=url, status_code=429)
        self.retry_after = retry_after


class CacheStoreError(RareSniperError):
    """Raised inside a cache store when a file cannot be read or written."""

    def __init__(self, message: str, *, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path
