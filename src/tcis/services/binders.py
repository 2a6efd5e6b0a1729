"""Binder orchestration helpers."""

from __future__ import annotations

import logging
import math

from sqlalchemy.orm import Session

from src.tcis.core.errors import (
    CapacityError,
    CardNotAllowedError,
    DuplicateNameError,
    InvalidAmountError,
    NotFoundError,
    NotSellableError,
    NotTradableError,
    SlotIndexError,
    UnknownTypeError,
)
from src.tcis.db.models.binder import BINDER_CLASSES, Binder, LuxuryBinder, query_binder
from src.tcis.db.models.card import Card, query_card
from src.tcis.db.session_context import managed_session
from src.tcis.domain.card_spec import CardSpec
from src.tcis.enums import BinderType, SaleKind
from src.tcis.services import collection, ledger
from src.tcis.services.audit import log_event

logger = logging.getLogger(__name__)

UNFAIR_TRADE_THRESHOLD = 1.0


def parse_binder_type(raw: BinderType | str) -> BinderType:
    if isinstance(raw, BinderType):
        return raw
    token = (raw or "").strip().lower().replace("_", "-")
    if token == "noncurated":
        token = "non-curated"
    try:
        return BinderType(token)
    except ValueError:
        raise UnknownTypeError(f"Unknown binder type '{raw}'.") from None


def create_binder(name: str, kind: BinderType | str) -> Binder:
    """
    Create an empty binder of the given type.

    Raises:
        UnknownTypeError: If ``kind`` is not a binder type.
        DuplicateNameError: If a binder with the same name exists.
        InvalidNameError: If the name is blank.
    """
    binder_type = parse_binder_type(kind)
    binder_class = BINDER_CLASSES[binder_type]
    with managed_session(commit=True) as session:
        if query_binder(session, name) is not None:
            raise DuplicateNameError("binder", name.strip())
        binder = binder_class(name)
        session.add(binder)
        session.flush()
    log_event(
        "binder_created",
        service="binders",
        binder_name=binder.name,
        binder_type=binder_type.value,
    )
    return binder


def delete_binder(name: str) -> int:
    """
    Delete a binder and return its cards to the collection.

    Returns:
        Number of cards returned to the collection.
    """
    with managed_session(commit=True) as session:
        binder = _require_binder(session, name)
        returned = _return_cards(binder.cards)
        binder_name = binder.name
        session.delete(binder)
    log_event(
        "binder_deleted",
        service="binders",
        binder_name=binder_name,
        cards_returned=returned,
    )
    return returned


def find_binder(name: str | None) -> Binder | None:
    with managed_session() as session:
        return query_binder(session, name)


def get_binder(name: str) -> Binder:
    binder = find_binder(name)
    if binder is None:
        raise NotFoundError("binder", name)
    return binder


def list_binders() -> list[Binder]:
    with managed_session() as session:
        return session.query(Binder).order_by(Binder.id).all()


def add_card_to_binder(card_name: str, binder_name: str) -> Binder:
    """
    Move one copy of a card from the collection into a binder.

    Raises:
        NotFoundError: If the binder or card does not exist.
        CardUnavailableError: If no copies remain in the collection.
        CapacityError: If the binder is full.
        CardNotAllowedError: If the binder type rejects the card.
    """
    with managed_session(commit=True) as session:
        binder = _require_binder(session, binder_name)
        card = _require_card(session, card_name)
        collection.take_copies(card, 1)
        if binder.is_full():
            raise CapacityError(
                f"Binder '{binder.name}' is full ({Binder.MAX_CAPACITY} cards)."
            )
        if not binder.add_card(card):
            raise CardNotAllowedError(
                f"A {binder.type_label} binder cannot hold '{card.name}'."
            )
    logger.info("Moved '%s' into binder '%s'.", card.name, binder.name)
    return binder


def remove_card_from_binder(index: int, binder_name: str) -> Card:
    """
    Move the card at ``index`` (0-based) back to the collection.

    Raises:
        NotFoundError: If the binder does not exist.
        SlotIndexError: If ``index`` is out of range.
    """
    with managed_session(commit=True) as session:
        binder = _require_binder(session, binder_name)
        card = binder.remove_card(index)
        if card is None:
            raise SlotIndexError(
                f"Binder '{binder.name}' has no card at position {index + 1}."
            )
        card.count += 1
    logger.info("Returned '%s' from binder '%s'.", card.name, binder.name)
    return card


def trade_value_difference(binder_name: str, outgoing_index: int, incoming: CardSpec) -> float:
    """
    Absolute value gap between the outgoing card and the incoming card.

    A registered incoming name is valued as stored, not as typed.
    """
    with managed_session() as session:
        binder = _require_binder(session, binder_name)
        cards = binder.cards
        if not 0 <= outgoing_index < len(cards):
            raise SlotIndexError(
                f"Binder '{binder.name}' has no card at position {outgoing_index + 1}."
            )
        known = query_card(session, incoming.name)
        incoming_value = (
            known.calculated_value if known is not None else incoming.calculated_value
        )
        return abs(cards[outgoing_index].calculated_value - incoming_value)


def is_unfair_trade(difference: float) -> bool:
    return difference >= UNFAIR_TRADE_THRESHOLD


def perform_trade(binder_name: str, outgoing_index: int, incoming: CardSpec) -> Card:
    """
    Trade the card at ``outgoing_index`` away for ``incoming``.

    The outgoing card leaves the inventory. An incoming card with an unknown
    name is registered as a new card type with no loose copies.

    Returns:
        The card that was traded away.

    Raises:
        NotTradableError: If the binder type forbids trading.
        CardNotAllowedError: If the incoming card breaks the binder's rules.
        SlotIndexError: If ``outgoing_index`` is out of range.
    """
    with managed_session(commit=True) as session:
        binder = _require_binder(session, binder_name)
        if not binder.can_trade():
            raise NotTradableError(
                f"Cards cannot be traded from a {binder.type_label} binder."
            )
        incoming_card = query_card(session, incoming.name)
        if incoming_card is None:
            incoming_card = collection.register_card(session, incoming, count=0)
        if not binder.can_add_card(incoming_card):
            raise CardNotAllowedError(
                f"'{incoming_card.name}' does not meet the requirements of a "
                f"{binder.type_label} binder."
            )
        outgoing = binder.remove_card(outgoing_index)
        if outgoing is None:
            raise SlotIndexError(
                f"Binder '{binder.name}' has no card at position {outgoing_index + 1}."
            )
        binder.add_card(incoming_card)
    log_event(
        "binder_trade",
        service="binders",
        binder_name=binder.name,
        outgoing=outgoing.name,
        incoming=incoming_card.name,
    )
    return outgoing


def set_binder_price(name: str, price: float) -> LuxuryBinder:
    """
    Set the custom sale price of a luxury binder.

    Raises:
        UnknownTypeError: If the binder is not a luxury binder.
        InvalidAmountError: If ``price`` is below the binder's card value
            or is not a finite number.
    """
    with managed_session(commit=True) as session:
        binder = _require_binder(session, name)
        if not isinstance(binder, LuxuryBinder):
            raise UnknownTypeError("Only luxury binders accept a custom price.")
        if not math.isfinite(price):
            raise InvalidAmountError("Price must be a finite number.")
        if not binder.set_price(price):
            raise InvalidAmountError(
                f"Price must be at least the total card value "
                f"(${binder.total_card_value():.2f})."
            )
    log_event("binder_priced", service="binders", binder_name=binder.name, price=price)
    return binder


def sell_binder(name: str) -> float:
    """
    Sell a binder with its contents and record the proceeds.

    Returns:
        The sale price.

    Raises:
        NotSellableError: If the binder type cannot be sold.
    """
    with managed_session(commit=True) as session:
        binder = _require_binder(session, name)
        if not binder.is_sellable():
            raise NotSellableError(
                f"A {binder.type_label} binder cannot be sold."
            )
        price = binder.calculate_price()
        binder_name = binder.name
        ledger.add_sale(session, kind=SaleKind.BINDER, item_name=binder_name, amount=price)
        session.delete(binder)
    log_event("binder_sold", service="binders", binder_name=binder_name, amount=price)
    return price


def _return_cards(cards: list[Card]) -> int:
    for card in cards:
        card.count += 1
    return len(cards)


def _require_binder(session: Session, name: str) -> Binder:
    binder = query_binder(session, name)
    if binder is None:
        raise NotFoundError("binder", name)
    return binder


def _require_card(session: Session, name: str) -> Card:
    card = query_card(session, name)
    if card is None:
        raise NotFoundError("card", name)
    return card
