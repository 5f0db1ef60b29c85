"""HTTP and API clients."""

from rare_sniper.clients.http import AsyncHttpClient
from rare_sniper.clients.magic_eden_api import MagicEdenClient
from rare_sniper.clients.request_throttle import RequestThrottle
from rare_sniper.clients.retry import RetryPolicy
from rare_sniper.clients.token_cache import TokenMetadataCache

__all__ = [
    "AsyncHttpClient",
    "MagicEdenClient",
    "RequestThrottle",
    "RetryPolicy",
    "TokenMetadataCache",
]
