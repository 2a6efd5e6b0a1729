from __future__ import annotations

import json

from src.tcis.enums import BinderType, DeckType
from src.tcis.services import binders, collection, decks, inventory


def _stock() -> None:
    collection.add_new_card("Mew", 10.0, "rare", "full-art")
    collection.add_new_card("Shock", 1.0, "common")
    binders.create_binder("Rares", BinderType.RARES)
    binders.add_card_to_binder("Mew", "Rares")
    decks.create_deck("Burn", DeckType.NORMAL)


def test_render_status_empty_inventory() -> None:
    text = inventory.render_status(inventory.collect_status())

    assert text.splitlines() == [
        "Money: $0.00",
        "",
        "Collection:",
        "- (no cards)",
        "",
        "Binders:",
        "- (none)",
        "",
        "Decks:",
        "- (none)",
    ]


def test_collect_status_reports_containers() -> None:
    _stock()

    view = inventory.collect_status()

    assert [card.name for card in view.cards] == ["Mew", "Shock"]
    rares = view.binders[0]
    assert rares.type == "rares"
    assert rares.capacity == 20
    assert rares.sellable is True and rares.tradable is False
    assert rares.price == 22.0
    assert view.decks[0].price is None


def test_render_status_lines() -> None:
    _stock()

    text = inventory.render_status(inventory.collect_status())

    assert "- Mew (Rare, Full-art) $20.00 x0" in text
    assert "- Rares [rares] 1/20 price $22.00" in text
    assert "- Burn [normal] 0/10" in text


def test_render_status_json() -> None:
    _stock()

    payload = json.loads(inventory.render_status_json(inventory.collect_status()))

    assert payload["total_money"] == 0.0
    assert payload["binders"][0]["cards"][0]["name"] == "Mew"


def test_render_container_numbers_cards() -> None:
    _stock()

    rares = inventory.render_container(inventory.binder_view(binders.get_binder("Rares")))
    burn = inventory.render_container(inventory.deck_view(decks.get_deck("Burn")))

    assert rares.splitlines()[1] == "  1. Mew (Rare, Full-art) $20.00"
    assert burn.splitlines()[1] == "  (empty)"


def test_render_card() -> None:
    collection.add_new_card("Shock", 1.25, "common")

    text = inventory.render_card(inventory.card_view(collection.get_card("Shock")))

    assert "Card: Shock" in text
    assert "- Real value: $1.25" in text
    assert "- Copies in collection: 1" in text
