"""Card collection helpers.

The collection keeps one row per card type along with the number of loose
copies held outside binders and decks.
"""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from src.tcis.core.errors import (
    CardUnavailableError,
    DuplicateNameError,
    InvalidAmountError,
    NotFoundError,
)
from src.tcis.db.models.card import Card, name_key, query_card
from src.tcis.db.session_context import managed_session
from src.tcis.domain.card_spec import CardSpec, build_card_spec
from src.tcis.enums import Rarity, SaleKind, Variant
from src.tcis.services import ledger
from src.tcis.services.audit import log_event

logger = logging.getLogger(__name__)


def add_new_card(
    name: str,
    base_value: float | str,
    rarity: Rarity | str,
    variant: Variant | str | None = None,
) -> Card:
    """
    Register a new card type with a single copy.

    Returns:
        The stored card.

    Raises:
        InvalidCardError: If the card details are invalid.
        DuplicateNameError: If a card with the same name already exists.
    """
    spec = build_card_spec(name, base_value, rarity, variant)
    with managed_session(commit=True) as session:
        card = register_card(session, spec, count=1)
    log_event(
        "card_added",
        service="collection",
        card_name=card.name,
        rarity=card.rarity.value,
        variant=card.variant.value,
        base_value=card.base_value,
    )
    return card


def register_card(session: Session, spec: CardSpec, *, count: int) -> Card:
    """Insert a card type inside an existing session."""
    if query_card(session, spec.name) is not None:
        raise DuplicateNameError("card", spec.name)
    card = Card(
        name=spec.name,
        name_key=name_key(spec.name),
        base_value=spec.base_value,
        rarity=spec.rarity,
        variant=spec.variant,
        count=count,
    )
    session.add(card)
    session.flush()
    return card


def find_card(name: str | None) -> Card | None:
    """Return a card type by name, ignoring case and surrounding spaces."""
    with managed_session() as session:
        return query_card(session, name)


def get_card(name: str) -> Card:
    """
    Fetch a card type or raise if missing.

    Raises:
        NotFoundError: If the card does not exist.
    """
    card = find_card(name)
    if card is None:
        raise NotFoundError("card", name)
    return card


def increase_count(name: str, amount: int) -> int:
    """
    Add loose copies of a card to the collection.

    Returns:
        The new copy count.

    Raises:
        InvalidAmountError: If ``amount`` is not positive.
        NotFoundError: If the card does not exist.
    """
    _require_positive(amount)
    with managed_session(commit=True) as session:
        card = _require_card(session, name)
        card.count += amount
        new_count = card.count
    logger.info("Increased '%s' by %d (now %d).", card.name, amount, new_count)
    return new_count


def decrease_count(name: str, amount: int) -> int:
    """
    Remove loose copies of a card from the collection.

    Returns:
        The new copy count.

    Raises:
        InvalidAmountError: If ``amount`` is not positive or exceeds the copies held.
        NotFoundError: If the card does not exist.
    """
    _require_positive(amount)
    with managed_session(commit=True) as session:
        card = _require_card(session, name)
        take_copies(card, amount)
        new_count = card.count
    logger.info("Decreased '%s' by %d (now %d).", card.name, amount, new_count)
    return new_count


def sell_card(name: str, amount: int) -> float:
    """
    Sell loose copies of a card and record the proceeds.

    Returns:
        The sale amount.
    """
    _require_positive(amount)
    with managed_session(commit=True) as session:
        card = _require_card(session, name)
        take_copies(card, amount)
        proceeds = card.calculated_value * amount
        ledger.add_sale(
            session,
            kind=SaleKind.CARD,
            item_name=card.name,
            quantity=amount,
            amount=proceeds,
        )
    log_event(
        "card_sold",
        service="collection",
        card_name=card.name,
        quantity=amount,
        amount=proceeds,
    )
    return proceeds


def is_card_available(name: str | None) -> bool:
    """Return True when at least one loose copy is held."""
    card = find_card(name)
    return card is not None and card.count > 0


def list_cards() -> list[Card]:
    """Return every card type, sorted alphabetically."""
    with managed_session() as session:
        return session.query(Card).order_by(Card.name_key).all()


def card_counts() -> dict[str, int]:
    """Return loose copy counts keyed by lower-cased card name."""
    return {card.name_key: card.count for card in list_cards()}


def take_copies(card: Card, amount: int) -> None:
    """Remove copies from an attached card row."""
    if card.count <= 0:
        raise CardUnavailableError(f"No copies of '{card.name}' left in the collection.")
    if card.count < amount:
        raise InvalidAmountError(
            f"Only {card.count} copies of '{card.name}' are in the collection."
        )
    card.count -= amount


def _require_card(session: Session, name: str) -> Card:
    card = query_card(session, name)
    if card is None:
        raise NotFoundError("card", name)
    return card


def _require_positive(amount: int) -> None:
    if amount <= 0:
        raise InvalidAmountError("Amount must be a positive whole number.")
