# -*- coding: utf-8 -*-
"""
Enum definitions for the Trading Card Inventory System.
"""

from __future__ import annotations

from enum import Enum as PyEnum
from typing import Optional


class Rarity(PyEnum):
    COMMON = "Common"
    UNCOMMON = "Uncommon"
    RARE = "Rare"
    LEGENDARY = "Legendary"

    @property
    def display_name(self) -> str:
        return self.value

    @property
    def allows_variants(self) -> bool:
        return self in (Rarity.RARE, Rarity.LEGENDARY)

    @classmethod
    def from_choice(cls, choice: int) -> Optional["Rarity"]:
        """Map a 1-based menu choice to a rarity."""
        members = list(cls)
        if 0 < choice <= len(members):
            return members[choice - 1]
        return None

    @classmethod
    def from_string(cls, text: str | None) -> Optional["Rarity"]:
        if text is None:
            return None
        token = text.strip().lower()
        for rarity in cls:
            if token in (rarity.value.lower(), rarity.name.lower()):
                return rarity
        return None


class Variant(PyEnum):
    NORMAL = "Normal"
    EXTENDED_ART = "Extended-art"
    FULL_ART = "Full-art"
    ALT_ART = "Alt-art"

    @property
    def display_name(self) -> str:
        return self.value

    @property
    def multiplier(self) -> float:
        return _VARIANT_MULTIPLIERS[self]

    @classmethod
    def from_string(cls, text: str | None) -> Optional["Variant"]:
        if text is None:
            return None
        token = text.strip().lower().replace("_", "-")
        for variant in cls:
            if token in (variant.value.lower(), variant.name.lower().replace("_", "-")):
                return variant
        return None


_VARIANT_MULTIPLIERS: dict[Variant, float] = {
    Variant.NORMAL: 1.0,
    Variant.EXTENDED_ART: 1.5,
    Variant.FULL_ART: 2.0,
    Variant.ALT_ART: 3.0,
}


class BinderType(PyEnum):
    NON_CURATED = "non-curated"
    COLLECTOR = "collector"
    PAUPER = "pauper"
    RARES = "rares"
    LUXURY = "luxury"


class DeckType(PyEnum):
    NORMAL = "normal"
    SELLABLE = "sellable"


class SaleKind(PyEnum):
    CARD = "card"
    BINDER = "binder"
    DECK = "deck"
