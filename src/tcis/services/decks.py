"""Deck orchestration helpers."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from src.tcis.core.errors import (
    CapacityError,
    CardNotAllowedError,
    DuplicateNameError,
    NotFoundError,
    NotSellableError,
    SlotIndexError,
    UnknownTypeError,
)
from src.tcis.db.models.card import Card, query_card
from src.tcis.db.models.deck import DECK_CLASSES, Deck, query_deck
from src.tcis.db.session_context import managed_session
from src.tcis.enums import DeckType, SaleKind
from src.tcis.services import collection, ledger
from src.tcis.services.audit import log_event

logger = logging.getLogger(__name__)


def parse_deck_type(raw: DeckType | str) -> DeckType:
    if isinstance(raw, DeckType):
        return raw
    try:
        return DeckType((raw or "").strip().lower())
    except ValueError:
        raise UnknownTypeError(f"Unknown deck type '{raw}'.") from None


def create_deck(name: str, kind: DeckType | str = DeckType.NORMAL) -> Deck:
    deck_type = parse_deck_type(kind)
    with managed_session(commit=True) as session:
        if query_deck(session, name) is not None:
            raise DuplicateNameError("deck", name.strip())
        deck = DECK_CLASSES[deck_type](name)
        session.add(deck)
        session.flush()
    log_event(
        "deck_created", service="decks", deck_name=deck.name, deck_type=deck_type.value
    )
    return deck


def delete_deck(name: str) -> int:
    """Delete a deck and return its cards to the collection."""
    with managed_session(commit=True) as session:
        deck = _require_deck(session, name)
        cards = deck.cards
        for card in cards:
            card.count += 1
        deck_name = deck.name
        session.delete(deck)
    log_event(
        "deck_deleted", service="decks", deck_name=deck_name, cards_returned=len(cards)
    )
    return len(cards)


def find_deck(name: str | None) -> Deck | None:
    with managed_session() as session:
        return query_deck(session, name)


def get_deck(name: str) -> Deck:
    deck = find_deck(name)
    if deck is None:
        raise NotFoundError("deck", name)
    return deck


def list_decks() -> list[Deck]:
    with managed_session() as session:
        return session.query(Deck).order_by(Deck.id).all()


def add_card_to_deck(card_name: str, deck_name: str) -> Deck:
    """
    Move one copy of a card from the collection into a deck.

    Raises:
        NotFoundError: If the deck or card does not exist.
        CardUnavailableError: If no copies remain in the collection.
        CapacityError: If the deck is full.
        CardNotAllowedError: If the deck already holds that card.
    """
    with managed_session(commit=True) as session:
        deck = _require_deck(session, deck_name)
        card = _require_card(session, card_name)
        collection.take_copies(card, 1)
        if deck.is_full():
            raise CapacityError(f"Deck '{deck.name}' is full ({Deck.MAX_CAPACITY} cards).")
        if not deck.add_card(card):
            raise CardNotAllowedError(f"Deck '{deck.name}' already holds '{card.name}'.")
    logger.info("Moved '%s' into deck '%s'.", card.name, deck.name)
    return deck


def remove_card_from_deck(index: int, deck_name: str) -> Card:
    with managed_session(commit=True) as session:
        deck = _require_deck(session, deck_name)
        card = deck.remove_card(index)
        if card is None:
            raise SlotIndexError(
                f"Deck '{deck.name}' has no card at position {index + 1}."
            )
        card.count += 1
    logger.info("Returned '%s' from deck '%s'.", card.name, deck.name)
    return card


def sell_deck(name: str) -> float:
    """
    Sell a sellable deck for the total value of its cards.

    Raises:
        NotSellableError: If the deck is a normal deck.
    """
    with managed_session(commit=True) as session:
        deck = _require_deck(session, name)
        if not deck.is_sellable():
            raise NotSellableError(f"A {deck.type_label} deck cannot be sold.")
        price = deck.total_card_value()
        deck_name = deck.name
        ledger.add_sale(session, kind=SaleKind.DECK, item_name=deck_name, amount=price)
        session.delete(deck)
    log_event("deck_sold", service="decks", deck_name=deck_name, amount=price)
    return price


def _require_deck(session: Session, name: str) -> Deck:
    deck = query_deck(session, name)
    if deck is None:
        raise NotFoundError("deck", name)
    return deck


def _require_card(session: Session, name: str) -> Card:
    card = query_card(session, name)
    if card is None:
        raise NotFoundError("card", name)
    return card
