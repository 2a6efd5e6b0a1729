"""
Card model and lookup helpers
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import CheckConstraint, Enum, Float, Integer, String
from sqlalchemy.orm import Mapped, Session, mapped_column

from src.tcis.db.init_db import Base
from src.tcis.enums import Rarity, Variant


def name_key(name: str) -> str:
    """Normalize a name for case-insensitive uniqueness."""
    return name.strip().lower()


class Card(Base):
    """A card type registered in the collection, with its loose copy count."""

    __tablename__ = "cards"
    __table_args__ = (
        CheckConstraint("base_value >= 0", name="ck_cards_base_value"),
        CheckConstraint("count >= 0", name="ck_cards_count"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    name_key: Mapped[str] = mapped_column(
        String(255), nullable=False, unique=True, index=True
    )
    base_value: Mapped[float] = mapped_column(Float, nullable=False)
    rarity: Mapped[Rarity] = mapped_column(Enum(Rarity), nullable=False)
    variant: Mapped[Variant] = mapped_column(
        Enum(Variant), nullable=False, default=Variant.NORMAL
    )
    count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    @property
    def calculated_value(self) -> float:
        """Base value with the variant multiplier applied."""
        return self.base_value * self.variant.multiplier

    def __repr__(self) -> str:
        return (
            f"Card(name={self.name!r}, rarity={self.rarity.value}, "
            f"variant={self.variant.value}, base_value={self.base_value})"
        )


def query_card(session: Session, name: str | None) -> Optional[Card]:
    """Return the card type matching ``name`` case-insensitively."""
    if name is None:
        return None
    return session.query(Card).filter(Card.name_key == name_key(name)).first()
