from __future__ import annotations

import pytest

from src.tcis.core.errors import (
    CapacityError,
    CardNotAllowedError,
    CardUnavailableError,
    DuplicateNameError,
    InvalidAmountError,
    InvalidNameError,
    NotFoundError,
    NotSellableError,
    NotTradableError,
    SlotIndexError,
    UnknownTypeError,
)
from src.tcis.db.models.binder import LuxuryBinder, NonCuratedBinder
from src.tcis.domain.card_spec import build_card_spec
from src.tcis.enums import BinderType
from src.tcis.services import binders, collection, ledger


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("non-curated", BinderType.NON_CURATED),
        ("noncurated", BinderType.NON_CURATED),
        ("Non_Curated", BinderType.NON_CURATED),
        ("LUXURY", BinderType.LUXURY),
    ],
)
def test_parse_binder_type(raw: str, expected: BinderType) -> None:
    assert binders.parse_binder_type(raw) is expected


def test_create_binder_unknown_type() -> None:
    with pytest.raises(UnknownTypeError):
        binders.create_binder("Trades", "shoebox")


def test_create_binder_picks_subclass_and_rejects_duplicates() -> None:
    binders.create_binder("Trades", "non-curated")

    assert isinstance(binders.get_binder("trades"), NonCuratedBinder)
    with pytest.raises(DuplicateNameError):
        binders.create_binder(" TRADES ", BinderType.LUXURY)


def test_create_binder_rejects_blank_name() -> None:
    with pytest.raises(InvalidNameError):
        binders.create_binder("   ", BinderType.PAUPER)


def test_add_card_moves_copy_out_of_collection() -> None:
    collection.add_new_card("Pikachu", 2.0, "common")
    binders.create_binder("Trades", BinderType.NON_CURATED)

    binder = binders.add_card_to_binder("pikachu", "Trades")

    assert [card.name for card in binder.cards] == ["Pikachu"]
    assert collection.get_card("Pikachu").count == 0


def test_add_card_without_copies_fails() -> None:
    collection.add_new_card("Pikachu", 2.0, "common")
    collection.decrease_count("Pikachu", 1)
    binders.create_binder("Trades", BinderType.NON_CURATED)

    with pytest.raises(CardUnavailableError):
        binders.add_card_to_binder("Pikachu", "Trades")
    assert binders.get_binder("Trades").card_count == 0


def test_add_card_missing_binder_or_card() -> None:
    collection.add_new_card("Pikachu", 2.0, "common")
    binders.create_binder("Trades", BinderType.NON_CURATED)

    with pytest.raises(NotFoundError, match="Binder"):
        binders.add_card_to_binder("Pikachu", "Nope")
    with pytest.raises(NotFoundError, match="Card"):
        binders.add_card_to_binder("Nope", "Trades")


def test_full_binder_keeps_card_in_collection() -> None:
    collection.add_new_card("Pikachu", 2.0, "common")
    collection.increase_count("Pikachu", 20)
    binders.create_binder("Trades", BinderType.NON_CURATED)
    for _ in range(20):
        binders.add_card_to_binder("Pikachu", "Trades")

    with pytest.raises(CapacityError):
        binders.add_card_to_binder("Pikachu", "Trades")

    assert collection.get_card("Pikachu").count == 1
    assert binders.get_binder("Trades").card_count == 20


def test_rejected_card_stays_in_collection() -> None:
    collection.add_new_card("Mewtwo", 5.0, "rare")
    binders.create_binder("Commons", BinderType.PAUPER)
    binders.create_binder("Shiny", BinderType.COLLECTOR)

    with pytest.raises(CardNotAllowedError):
        binders.add_card_to_binder("Mewtwo", "Commons")
    with pytest.raises(CardNotAllowedError):
        binders.add_card_to_binder("Mewtwo", "Shiny")

    assert collection.get_card("Mewtwo").count == 1


def test_remove_card_returns_it_to_collection() -> None:
    collection.add_new_card("Pikachu", 2.0, "common")
    binders.create_binder("Trades", BinderType.NON_CURATED)
    binders.add_card_to_binder("Pikachu", "Trades")

    card = binders.remove_card_from_binder(0, "Trades")

    assert card.name == "Pikachu"
    assert collection.get_card("Pikachu").count == 1
    with pytest.raises(SlotIndexError):
        binders.remove_card_from_binder(0, "Trades")


def test_delete_binder_returns_all_cards() -> None:
    collection.add_new_card("Pikachu", 2.0, "common")
    collection.increase_count("Pikachu", 1)
    binders.create_binder("Trades", BinderType.NON_CURATED)
    binders.add_card_to_binder("Pikachu", "Trades")
    binders.add_card_to_binder("Pikachu", "Trades")

    returned = binders.delete_binder("trades")

    assert returned == 2
    assert collection.get_card("Pikachu").count == 2
    assert binders.find_binder("Trades") is None


def test_list_binders_in_creation_order() -> None:
    binders.create_binder("Zeta", BinderType.PAUPER)
    binders.create_binder("Alpha", BinderType.RARES)

    assert [b.name for b in binders.list_binders()] == ["Zeta", "Alpha"]


def test_sell_unsellable_binder() -> None:
    binders.create_binder("Trades", BinderType.NON_CURATED)

    with pytest.raises(NotSellableError):
        binders.sell_binder("Trades")
    assert binders.find_binder("Trades") is not None


def test_sell_rares_binder_adds_fee_and_removes_cards() -> None:
    collection.add_new_card("Mewtwo", 10.0, "rare")
    binders.create_binder("Rares", BinderType.RARES)
    binders.add_card_to_binder("Mewtwo", "Rares")

    price = binders.sell_binder("Rares")

    assert price == pytest.approx(11.0)
    assert ledger.total_money() == pytest.approx(11.0)
    assert binders.find_binder("Rares") is None
    assert collection.get_card("Mewtwo").count == 0


def test_luxury_binder_price() -> None:
    collection.add_new_card("Mew", 10.0, "legendary", "full-art")
    binders.create_binder("Vault", BinderType.LUXURY)
    binders.add_card_to_binder("Mew", "Vault")

    with pytest.raises(InvalidAmountError):
        binders.set_binder_price("Vault", 15.0)
    binder = binders.set_binder_price("Vault", 40.0)

    assert isinstance(binder, LuxuryBinder)
    assert binders.sell_binder("Vault") == pytest.approx(44.0)


def test_set_price_only_for_luxury() -> None:
    binders.create_binder("Rares", BinderType.RARES)

    with pytest.raises(UnknownTypeError):
        binders.set_binder_price("Rares", 10.0)


def _binder_with(card_name: str, base_value: float, kind: BinderType) -> None:
    collection.add_new_card(card_name, base_value, "common")
    binders.create_binder("Trades", kind)
    binders.add_card_to_binder(card_name, "Trades")


def test_trade_value_difference_and_threshold() -> None:
    _binder_with("Abra", 5.0, BinderType.NON_CURATED)

    fair = build_card_spec("Kadabra", 5.5, "common")
    unfair = build_card_spec("Alakazam", 4.0, "common")

    assert binders.trade_value_difference("Trades", 0, fair) == pytest.approx(0.5)
    assert binders.is_unfair_trade(0.5) is False
    assert binders.trade_value_difference("Trades", 0, unfair) == pytest.approx(1.0)
    assert binders.is_unfair_trade(1.0) is True
    with pytest.raises(SlotIndexError):
        binders.trade_value_difference("Trades", 3, fair)


def test_trade_value_difference_uses_registered_card_value() -> None:
    _binder_with("Abra", 1.0, BinderType.NON_CURATED)
    collection.add_new_card("Kadabra", 100.0, "common")

    claimed_cheap = build_card_spec("kadabra", 1.0, "common")
    difference = binders.trade_value_difference("Trades", 0, claimed_cheap)

    assert difference == pytest.approx(99.0)
    assert binders.is_unfair_trade(difference) is True


def test_trade_value_difference_ignores_inflated_value_for_known_card() -> None:
    _binder_with("Abra", 1.0, BinderType.NON_CURATED)
    collection.add_new_card("Kadabra", 1.5, "common")

    claimed_pricey = build_card_spec("Kadabra", 100.0, "common")

    assert binders.trade_value_difference("Trades", 0, claimed_pricey) == pytest.approx(0.5)


def test_perform_trade_registers_incoming_card() -> None:
    _binder_with("Abra", 5.0, BinderType.NON_CURATED)

    outgoing = binders.perform_trade(
        "Trades", 0, build_card_spec("Kadabra", 5.5, "common")
    )

    assert outgoing.name == "Abra"
    assert [card.name for card in binders.get_binder("Trades").cards] == ["Kadabra"]
    assert collection.get_card("Kadabra").count == 0
    assert collection.get_card("Abra").count == 0


def test_perform_trade_reuses_known_card() -> None:
    _binder_with("Abra", 5.0, BinderType.NON_CURATED)
    collection.add_new_card("Kadabra", 6.0, "uncommon")

    binders.perform_trade("Trades", 0, build_card_spec("kadabra", 99.0, "common"))

    card = collection.get_card("Kadabra")
    assert card.count == 1
    assert card.base_value == pytest.approx(6.0)
    assert binders.get_binder("Trades").cards[0].name == "Kadabra"


def test_trade_from_sellable_binder_is_refused() -> None:
    _binder_with("Abra", 5.0, BinderType.PAUPER)

    with pytest.raises(NotTradableError):
        binders.perform_trade("Trades", 0, build_card_spec("Kadabra", 5.0, "common"))


def test_trade_into_collector_binder_checks_rules() -> None:
    collection.add_new_card("Mew", 5.0, "rare", "alt-art")
    binders.create_binder("Shiny", BinderType.COLLECTOR)
    binders.add_card_to_binder("Mew", "Shiny")

    with pytest.raises(CardNotAllowedError):
        binders.perform_trade("Shiny", 0, build_card_spec("Abra", 15.0, "common"))

    assert collection.find_card("Abra") is None
    assert [card.name for card in binders.get_binder("Shiny").cards] == ["Mew"]


@pytest.mark.parametrize("price", [float("inf"), float("nan")])
def test_luxury_binder_rejects_non_finite_price(price: float) -> None:
    collection.add_new_card("Mew", 10.0, "legendary", "full-art")
    binders.create_binder("Vault", BinderType.LUXURY)
    binders.add_card_to_binder("Mew", "Vault")

    with pytest.raises(InvalidAmountError, match="finite"):
        binders.set_binder_price("Vault", price)

    assert binders.get_binder("Vault").calculate_price() == pytest.approx(22.0)
