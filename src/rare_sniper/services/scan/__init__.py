"""Scan cycle and scheduler."""

from rare_sniper.services.scan.scan_pipeline import (
    RareItemSink,
    ScanPipeline,
    ScanResult,
    ScanStatus,
)
from rare_sniper.services.scan.scan_scheduler import ScanScheduler, ScanState

__all__ = [
    "RareItemSink",
    "ScanPipeline",
    "ScanResult",
    "ScanScheduler",
    "ScanState",
    "ScanStatus",
]
