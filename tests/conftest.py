# -*- coding: utf-8 -*-
"""Shared pytest fixtures for unit tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

from rare_sniper.config import Settings
from rare_sniper.models.item import Item


@pytest.fixture
def symbol() -> str:
    """Default collection symbol used by tests."""
    return "mkrs"


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    """Per-test cache directory."""
    return tmp_path / "cache"


@pytest.fixture
def settings_factory(cache_dir: Path) -> Callable[..., Settings]:
    """Build Settings without reading .env; nested overrides as dicts.

    The collection cache always points at the per-test cache_dir unless
    overridden explicitly.
    """

    def _build(**overrides: Any) -> Settings:
        collection = {"cache_dir": str(cache_dir), **overrides.pop("collection", {})}
        return Settings.from_env(_env_file=None, collection=collection, **overrides)

    return _build


@pytest.fixture
def settings(settings_factory: Callable[..., Settings]) -> Settings:
    """Default settings (one-of-one on, 1% threshold, cache enabled)."""
    return settings_factory()


@pytest.fixture
def quiet_logger() -> Callable[[str], Any]:
    """Logger factory returning a MagicMock (for asserting log calls)."""
    logger = MagicMock()
    return lambda _name: logger


@pytest.fixture
def token_factory() -> Callable[..., dict[str, Any]]:
    """Build a raw /tokens/{mint} record with sensible defaults."""

    def _build(mint: str, traits: dict[str, Any] | None = None, **extra: Any) -> dict[str, Any]:
        record: dict[str, Any] = {
            "mintAddress": mint,
            "name": extra.pop("name", f"Item {mint}"),
            "image": extra.pop("image", f"https://img.example/{mint}.png"),
            "attributes": [
                {"trait_type": k, "value": v} for k, v in (traits or {}).items()
            ],
        }
        record.update(extra)
        return record

    return _build


@pytest.fixture
def item_factory() -> Callable[..., Item]:
    """Build a normalized Item."""

    def _build(mint: str, traits: dict[str, str] | None = None, **overrides: Any) -> Item:
        return Item(
            mint_address=mint,
            name=overrides.pop("name", f"Item {mint}"),
            image=overrides.pop("image", None),
            price=overrides.pop("price", None),
            seller=overrides.pop("seller", None),
            traits=dict(traits or {}),
        )

    return _build


@pytest.fixture
def hundred_items(item_factory: Callable[..., Item]) -> list[Item]:
    """100 items: mint-0 has the only Gold background, 2 Red, the rest Blue."""
    items: list[Item] = []
    for i in range(100):
        if i == 0:
            background = "Gold"
        elif i in (1, 2):
            background = "Red"
        else:
            background = "Blue"
        items.append(item_factory(f"mint-{i}", {"Background": background, "Eyes": "Normal"}))
    return items
