"""Rarity statistics and classification."""

from rare_sniper.services.rarity.rarity_engine import (
    RarityEngine,
    annotate,
    classify,
    compute_trait_stats,
    find_rare,
)

__all__ = ["RarityEngine", "annotate", "classify", "compute_trait_stats", "find_rare"]
