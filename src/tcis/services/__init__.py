"""Service layer for inventory operations."""

from src.tcis.services import (
    audit,
    binders,
    collection,
    decks,
    inventory,
    ledger,
)

__all__ = [
    "audit",
    "binders",
    "collection",
    "decks",
    "inventory",
    "ledger",
]
