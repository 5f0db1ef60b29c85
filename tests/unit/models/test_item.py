# -*- coding: utf-8 -*-
"""Unit tests for Item normalization and listing prices."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from rare_sniper.models.item import Item, listing_price_lamports
from rare_sniper.models.rarity import RarityAnnotation, TraitRarity


def test_from_token_flattens_attributes(token_factory: Callable[..., dict[str, Any]]) -> None:
    raw = token_factory("mint-1", {"Background": "Blue", "Level": 3, "Hat": None}, owner="owner-1")

    item = Item.from_token(raw)

    assert item is not None
    assert item.mint_address == "mint-1"
    assert item.name == "Item mint-1"
    assert item.image == "https://img.example/mint-1.png"
    assert dict(item.traits) == {"Background": "Blue", "Level": "3", "Hat": "None"}
    assert item.seller == "owner-1"
    assert item.price is None
    assert item.rarity is None


def test_from_token_skips_attributes_without_trait_type() -> None:
    raw = {
        "mintAddress": "mint-1",
        "attributes": [{"value": "orphan"}, "junk", {"trait_type": "Eyes", "value": "Red"}],
    }

    item = Item.from_token(raw)

    assert item is not None
    assert dict(item.traits) == {"Eyes": "Red"}


def test_from_token_rejects_records_without_mint_or_attributes() -> None:
    assert Item.from_token({"attributes": []}) is None
    assert Item.from_token({"mintAddress": "  ", "attributes": []}) is None
    assert Item.from_token({"mintAddress": "mint-1"}) is None
    assert Item.from_token({"mintAddress": "mint-1", "attributes": {"Eyes": "Red"}}) is None


def test_trait_returns_none_string_for_missing_type() -> None:
    item = Item(mint_address="m", traits={"Eyes": "Red"})

    assert item.trait("Eyes") == "Red"
    assert item.trait("Hat") == "None"


def test_with_listing_returns_new_instance() -> None:
    item = Item(mint_address="m", traits={"Eyes": "Red"})

    listed = item.with_listing(2_500_000_000, "seller-1")

    assert listed is not item
    assert item.price is None and item.seller is None
    assert listed.price == 2_500_000_000
    assert listed.seller == "seller-1"
    assert listed.price_sol == 2.5
    assert listed.traits == item.traits


def test_marketplace_url_uses_mint() -> None:
    assert Item(mint_address="abc").marketplace_url == "https://magiceden.io/item-details/abc"


def test_is_rare_follows_annotation() -> None:
    item = Item(mint_address="m", traits={"Eyes": "Red"})
    common = RarityAnnotation({"Eyes": TraitRarity("Red", 50, 50.0, rare=False)})
    rare = RarityAnnotation({"Eyes": TraitRarity("Red", 1, 1.0, rare=True)})

    assert item.is_rare is False
    assert item.with_rarity(common).is_rare is False
    assert item.with_rarity(rare).is_rare is True


def test_to_dict_leaves_out_rarity() -> None:
    item = Item(mint_address="m", traits={"Eyes": "Red"}).with_rarity(RarityAnnotation())

    data = item.to_dict()

    assert "rarity" not in data
    assert data["traits"] == {"Eyes": "Red"}


def test_from_dict_rejects_malformed_records() -> None:
    assert Item.from_dict({"name": "no mint", "traits": {}}) is None
    assert Item.from_dict({"mint_address": "m", "traits": ["Eyes"]}) is None


def test_listing_price_prefers_raw_lamports() -> None:
    listing = {"price": 1.5, "priceInfo": {"solPrice": {"rawAmount": "1500000001"}}}

    assert listing_price_lamports(listing) == 1_500_000_001


def test_listing_price_converts_sol_when_raw_amount_missing() -> None:
    assert listing_price_lamports({"price": 1.5}) == 1_500_000_000
    assert listing_price_lamports({"price": "0.25", "priceInfo": {}}) == 250_000_000


def test_listing_price_none_when_unparseable() -> None:
    assert listing_price_lamports({}) is None
    assert listing_price_lamports({"price": "free"}) is None
    assert listing_price_lamports({"price": True}) is None
