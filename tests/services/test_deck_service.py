from __future__ import annotations

import pytest

from src.tcis.core.errors import (
    CapacityError,
    CardNotAllowedError,
    DuplicateNameError,
    NotSellableError,
    SlotIndexError,
    UnknownTypeError,
)
from src.tcis.enums import DeckType, SaleKind
from src.tcis.services import collection, decks, ledger


def test_create_deck_defaults_to_normal() -> None:
    deck = decks.create_deck("Starter")

    assert deck.kind is DeckType.NORMAL
    with pytest.raises(DuplicateNameError):
        decks.create_deck("starter", "sellable")
    with pytest.raises(UnknownTypeError):
        decks.create_deck("Other", "sideboard")


def test_deck_rejects_second_copy_of_a_card() -> None:
    collection.add_new_card("Shock", 1.0, "common")
    collection.increase_count("Shock", 1)
    decks.create_deck("Burn")
    decks.add_card_to_deck("Shock", "Burn")

    with pytest.raises(CardNotAllowedError, match="already holds"):
        decks.add_card_to_deck("shock", "Burn")

    assert collection.get_card("Shock").count == 1


def test_deck_capacity_is_ten() -> None:
    for index in range(11):
        collection.add_new_card(f"Card {index}", 1.0, "common")
    decks.create_deck("Full")
    for index in range(10):
        decks.add_card_to_deck(f"Card {index}", "Full")

    with pytest.raises(CapacityError):
        decks.add_card_to_deck("Card 10", "Full")
    assert collection.get_card("Card 10").count == 1


def test_remove_and_delete_return_cards() -> None:
    collection.add_new_card("Shock", 1.0, "common")
    collection.add_new_card("Bolt", 1.0, "common")
    decks.create_deck("Burn")
    decks.add_card_to_deck("Shock", "Burn")
    decks.add_card_to_deck("Bolt", "Burn")

    assert decks.remove_card_from_deck(0, "Burn").name == "Shock"
    with pytest.raises(SlotIndexError):
        decks.remove_card_from_deck(4, "Burn")
    assert decks.delete_deck("Burn") == 1
    assert collection.card_counts() == {"bolt": 1, "shock": 1}
    assert decks.list_decks() == []


def test_normal_deck_cannot_be_sold() -> None:
    decks.create_deck("Starter", DeckType.NORMAL)

    with pytest.raises(NotSellableError):
        decks.sell_deck("Starter")


def test_sell_deck_at_card_value() -> None:
    collection.add_new_card("Mew", 4.0, "rare", "extended-art")
    decks.create_deck("Trade Bait", DeckType.SELLABLE)
    decks.add_card_to_deck("Mew", "Trade Bait")

    assert decks.sell_deck("trade bait") == pytest.approx(6.0)
    assert decks.find_deck("Trade Bait") is None
    assert ledger.list_sales()[0].kind is SaleKind.DECK
    assert ledger.total_money() == pytest.approx(6.0)
