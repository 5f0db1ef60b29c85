"""Trait-frequency statistics and rarity classification.

Statistics are always computed over the full collection; classification is
then applied to any subset (typically the current listings) against them.
"""

from __future__ import annotations

from collections import Counter, defaultdict
from collections.abc import Callable, Iterable, Sequence
from typing import TYPE_CHECKING, Any

import structlog

from rare_sniper.models.item import MISSING_TRAIT_VALUE, Item
from rare_sniper.models.rarity import (
    RarityAnnotation,
    RarityReason,
    TraitRarity,
    TraitStats,
    TraitValueStat,
)

if TYPE_CHECKING:
    from rare_sniper.config import Settings


def compute_trait_stats(items: Sequence[Item]) -> TraitStats:
    """Count every value of every trait type seen in items.

    An item lacking a trait type counts as the value "None" for it, so the
    percentages of one trait type always sum to 100 (up to rounding).
    """
    total = len(items)
    if total == 0:
        return TraitStats(total=0)

    trait_types: set[str] = set()
    for item in items:
        trait_types.update(item.traits)

    counts: dict[str, Counter[str]] = defaultdict(Counter)
    for item in items:
        for trait_type in trait_types:
            counts[trait_type][item.traits.get(trait_type, MISSING_TRAIT_VALUE)] += 1

    by_type = {
        trait_type: {
            value: TraitValueStat(count=n, percentage=round(n / total * 100, 2))
            for value, n in values.items()
        }
        for trait_type, values in counts.items()
    }
    return TraitStats(total=total, by_type=by_type)


def annotate(
    item: Item,
    stats: TraitStats,
    *,
    one_of_one_enabled: bool,
    percent_threshold: float,
) -> RarityAnnotation:
    """Rarity annotation of one item against collection stats."""
    traits: dict[str, TraitRarity] = {}
    for trait_type in stats:
        value = item.trait(trait_type)
        stat = stats.get(trait_type, value)
        if stat is None:
            # Value never seen in the full collection (e.g. stale snapshot).
            continue
        reason: RarityReason | None = None
        if one_of_one_enabled and stat.count == 1:
            reason = RarityReason.ONE_OF_ONE
        elif stat.percentage <= percent_threshold:
            reason = RarityReason.BELOW_THRESHOLD
        traits[trait_type] = TraitRarity(
            value=value,
            count=stat.count,
            percentage=stat.percentage,
            rare=reason is not None,
            reason=reason,
        )
    return RarityAnnotation(traits=traits)


def classify(
    items: Iterable[Item],
    stats: TraitStats,
    *,
    one_of_one_enabled: bool,
    percent_threshold: float,
) -> list[Item]:
    """Return every item with its rarity annotation attached."""
    if not stats:
        return []
    return [
        item.with_rarity(
            annotate(
                item,
                stats,
                one_of_one_enabled=one_of_one_enabled,
                percent_threshold=percent_threshold,
            )
        )
        for item in items
    ]


def find_rare(
    items: Iterable[Item],
    stats: TraitStats,
    *,
    one_of_one_enabled: bool,
    percent_threshold: float,
) -> list[Item]:
    """Classify and keep only items with at least one rare trait."""
    classified = classify(
        items,
        stats,
        one_of_one_enabled=one_of_one_enabled,
        percent_threshold=percent_threshold,
    )
    return [item for item in classified if item.is_rare]


class RarityEngine:
    """Rarity functions bound to the configured thresholds."""

    def __init__(
        self,
        settings: Settings,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: str | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            settings: Application settings (uses settings.rarity).
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        self._one_of_one_enabled = settings.rarity.one_of_one_enabled
        self._percent_threshold = settings.rarity.percent_threshold
        self._logger = get_logger(logger_name or self.__class__.__name__)

    @property
    def percent_threshold(self) -> float:
        return self._percent_threshold

    def compute_trait_stats(self, items: Sequence[Item]) -> TraitStats:
        stats = compute_trait_stats(items)
        self._logger.debug(
            "rarity_stats_computed",
            rarity_population=stats.total,
            rarity_trait_types=len(stats),
        )
        return stats

    def classify(self, items: Iterable[Item], stats: TraitStats) -> list[Item]:
        return classify(
            items,
            stats,
            one_of_one_enabled=self._one_of_one_enabled,
            percent_threshold=self._percent_threshold,
        )

    def find_rare(self, items: Iterable[Item], stats: TraitStats) -> list[Item]:
        rare = find_rare(
            items,
            stats,
            one_of_one_enabled=self._one_of_one_enabled,
            percent_threshold=self._percent_threshold,
        )
        self._logger.debug("rarity_classified", rarity_rare_count=len(rare))
        return rare
