"""
Deck models
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import Enum, ForeignKey, Integer, String
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import Mapped, Session, mapped_column, relationship

from src.tcis.core.errors import InvalidNameError
from src.tcis.db.init_db import Base
from src.tcis.db.models.card import Card, name_key
from src.tcis.enums import DeckType


class DeckSlot(Base):
    __tablename__ = "deck_slots"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    deck_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("decks.id", ondelete="CASCADE"), nullable=False
    )
    card_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("cards.id"), nullable=False
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)

    deck = relationship("Deck", back_populates="slots")
    card: Mapped[Card] = relationship(Card, lazy="joined")


class Deck(Base):
    __tablename__ = "decks"

    MAX_CAPACITY = 10

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    name_key: Mapped[str] = mapped_column(
        String(255), nullable=False, unique=True, index=True
    )
    kind: Mapped[DeckType] = mapped_column(Enum(DeckType), nullable=False)

    slots: Mapped[List[DeckSlot]] = relationship(
        DeckSlot,
        back_populates="deck",
        order_by=DeckSlot.position,
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __mapper_args__ = {"polymorphic_on": kind}

    def __init__(self, name: str, **kwargs) -> None:
        if name is None or not name.strip():
            raise InvalidNameError("Deck name cannot be null or blank.")
        super().__init__(name=name.strip(), name_key=name_key(name), **kwargs)

    @property
    def cards(self) -> list[Card]:
        return [slot.card for slot in self.slots]

    @property
    def card_count(self) -> int:
        return len(self.slots)

    @property
    def type_label(self) -> str:
        return self.kind.value

    def is_full(self) -> bool:
        return len(self.slots) >= self.MAX_CAPACITY

    def contains_card(self, card_name: str) -> bool:
        key = name_key(card_name)
        return any(slot.card.name_key == key for slot in self.slots)

    def add_card(self, card: Card) -> bool:
        if self.is_full() or self.contains_card(card.name):
            return False
        self.slots.append(DeckSlot(card=card))
        return True

    def remove_card(self, index: int) -> Optional[Card]:
        if 0 <= index < len(self.slots):
            return self.slots.pop(index).card
        return None

    def total_card_value(self) -> float:
        return sum(card.calculated_value for card in self.cards)

    def is_sellable(self) -> bool:
        raise NotImplementedError


class NormalDeck(Deck):
    __mapper_args__ = {"polymorphic_identity": DeckType.NORMAL}

    def is_sellable(self) -> bool:
        return False


class SellableDeck(Deck):
    __mapper_args__ = {"polymorphic_identity": DeckType.SELLABLE}

    def is_sellable(self) -> bool:
        return True


DECK_CLASSES: dict[DeckType, type[Deck]] = {
    DeckType.NORMAL: NormalDeck,
    DeckType.SELLABLE: SellableDeck,
}


def query_deck(session: Session, name: str | None) -> Optional[Deck]:
    """Return the deck matching ``name`` case-insensitively."""
    if name is None:
        return None
    return session.query(Deck).filter(Deck.name_key == name_key(name)).first()
