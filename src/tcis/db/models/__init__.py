"""Database model namespace."""

from src.tcis.db.models.binder import (
    Binder,
    BinderSlot,
    CollectorBinder,
    LuxuryBinder,
    NonCuratedBinder,
    PauperBinder,
    RaresBinder,
    SellableBinder,
)
from src.tcis.db.models.card import Card
from src.tcis.db.models.deck import Deck, DeckSlot, NormalDeck, SellableDeck
from src.tcis.db.models.sale import Sale

__all__ = [
    "Binder",
    "BinderSlot",
    "Card",
    "CollectorBinder",
    "Deck",
    "DeckSlot",
    "LuxuryBinder",
    "NonCuratedBinder",
    "NormalDeck",
    "PauperBinder",
    "RaresBinder",
    "Sale",
    "SellableBinder",
    "SellableDeck",
]
