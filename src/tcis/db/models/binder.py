"""
Binder models.

Binders share one table; ``kind`` selects the subclass that carries the
content rules, sale behaviour and trade permissions for that binder type.
"""

from __future__ import annotations

import math
from typing import List, Optional

from sqlalchemy import Enum, Float, ForeignKey, Integer, String
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import Mapped, Session, mapped_column, relationship

from src.tcis.core.errors import InvalidNameError
from src.tcis.db.init_db import Base
from src.tcis.db.models.card import Card, name_key
from src.tcis.enums import BinderType, Rarity, Variant

HANDLING_FEE_RATE = 1.10


class BinderSlot(Base):
    __tablename__ = "binder_slots"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    binder_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("binders.id", ondelete="CASCADE"), nullable=False
    )
    card_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("cards.id"), nullable=False
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)

    binder = relationship("Binder", back_populates="slots")
    card: Mapped[Card] = relationship(Card, lazy="joined")


class Binder(Base):
    __tablename__ = "binders"

    MAX_CAPACITY = 20

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    name_key: Mapped[str] = mapped_column(
        String(255), nullable=False, unique=True, index=True
    )
    kind: Mapped[BinderType] = mapped_column(Enum(BinderType), nullable=False)
    custom_price: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    slots: Mapped[List[BinderSlot]] = relationship(
        BinderSlot,
        back_populates="binder",
        order_by=BinderSlot.position,
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __mapper_args__ = {"polymorphic_on": kind}

    def __init__(self, name: str, **kwargs) -> None:
        if name is None or not name.strip():
            raise InvalidNameError("Binder name cannot be null or blank.")
        super().__init__(
            name=name.strip(), name_key=name_key(name), custom_price=0.0, **kwargs
        )

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

    def add_card(self, card: Card) -> bool:
        if self.is_full() or not self.can_add_card(card):
            return False
        self.slots.append(BinderSlot(card=card))
        return True

    def remove_card(self, index: int) -> Optional[Card]:
        if 0 <= index < len(self.slots):
            return self.slots.pop(index).card
        return None

    def total_card_value(self) -> float:
        return sum(card.calculated_value for card in self.cards)

    def can_add_card(self, card: Card) -> bool:
        raise NotImplementedError

    def is_sellable(self) -> bool:
        return False

    def can_trade(self) -> bool:
        return True

    def calculate_price(self) -> float:
        return 0.0


class NonCuratedBinder(Binder):
    """Accepts any card, allows trading, cannot be sold."""

    __mapper_args__ = {"polymorphic_identity": BinderType.NON_CURATED}

    def can_add_card(self, card: Card) -> bool:
        return True


class CollectorBinder(Binder):
    """Rare or legendary cards with a special variant; tradable, not sellable."""

    __mapper_args__ = {"polymorphic_identity": BinderType.COLLECTOR}

    def can_add_card(self, card: Card) -> bool:
        return card.rarity.allows_variants and card.variant != Variant.NORMAL


class SellableBinder(Binder):
    """Sellable binder types. These never allow trading."""

    __mapper_args__ = {"polymorphic_abstract": True}

    def is_sellable(self) -> bool:
        return True

    def can_trade(self) -> bool:
        return False


class PauperBinder(SellableBinder):
    """Common and uncommon cards only, sold at card value with no fee."""

    __mapper_args__ = {"polymorphic_identity": BinderType.PAUPER}

    def can_add_card(self, card: Card) -> bool:
        return card.rarity in (Rarity.COMMON, Rarity.UNCOMMON)

    def calculate_price(self) -> float:
        return self.total_card_value()


class RaresBinder(SellableBinder):
    """Rare and legendary cards, sold with a 10% handling fee."""

    __mapper_args__ = {"polymorphic_identity": BinderType.RARES}

    def can_add_card(self, card: Card) -> bool:
        return card.rarity in (Rarity.RARE, Rarity.LEGENDARY)

    def calculate_price(self) -> float:
        return self.total_card_value() * HANDLING_FEE_RATE


class LuxuryBinder(SellableBinder):
    """Special-variant cards; owner may set a price no lower than card value."""

    __mapper_args__ = {"polymorphic_identity": BinderType.LUXURY}

    def can_add_card(self, card: Card) -> bool:
        return card.variant != Variant.NORMAL

    def set_price(self, price: float) -> bool:
        if math.isfinite(price) and price >= self.total_card_value():
            self.custom_price = price
            return True
        return False

    def calculate_price(self) -> float:
        base_price = (
            self.custom_price if self.custom_price > 0 else self.total_card_value()
        )
        return base_price * HANDLING_FEE_RATE


BINDER_CLASSES: dict[BinderType, type[Binder]] = {
    BinderType.NON_CURATED: NonCuratedBinder,
    BinderType.COLLECTOR: CollectorBinder,
    BinderType.PAUPER: PauperBinder,
    BinderType.RARES: RaresBinder,
    BinderType.LUXURY: LuxuryBinder,
}


def query_binder(session: Session, name: str | None) -> Optional[Binder]:
    """Return the binder matching ``name`` case-insensitively."""
    if name is None:
        return None
    return session.query(Binder).filter(Binder.name_key == name_key(name)).first()
