# -*- coding: utf-8 -*-
"""Fixtures for notification tests."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from rare_sniper.models.item import Item
from rare_sniper.models.rarity import RarityAnnotation, RarityReason, TraitRarity


@pytest.fixture
def rare_item_factory() -> Callable[..., Item]:
    """Build a listed Item carrying one one-of-one Background trait."""

    def _build(index: int = 0, *, image: str | None = "https://img.example/0.png") -> Item:
        annotation = RarityAnnotation(
            {
                "Background": TraitRarity("Gold", 1, 1.0, True, RarityReason.ONE_OF_ONE),
                "Eyes": TraitRarity("Normal", 100, 100.0, False),
            }
        )
        return Item(
            mint_address=f"mint-{index}",
            name=f"Maker #{index}",
            image=image,
            price=2_500_000_000,
            seller="seller-1",
            traits={"Background": "Gold", "Eyes": "Normal"},
        ).with_rarity(annotation)

    return _build
