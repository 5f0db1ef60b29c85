"""Rare sniper: scans a Magic Eden collection for listed NFTs with rare traits."""

from rare_sniper.clients import AsyncHttpClient, MagicEdenClient
from rare_sniper.config import get_settings
from rare_sniper.DI import Container
from rare_sniper.services import RarityEngine, ScanPipeline, ScanScheduler

__version__ = "0.0.1"
__all__ = [
    "AsyncHttpClient",
    "Container",
    "MagicEdenClient",
    "RarityEngine",
    "ScanPipeline",
    "ScanScheduler",
    "get_settings",
]
