# -*- coding: utf-8 -*-
"""Application services."""

from rare_sniper.services.rarity import RarityEngine
from rare_sniper.services.scan import (
    ScanPipeline,
    ScanResult,
    ScanScheduler,
    ScanState,
    ScanStatus,
)

__all__ = [
    "RarityEngine",
    "ScanPipeline",
    "ScanResult",
    "ScanScheduler",
    "ScanState",
    "ScanStatus",
]
