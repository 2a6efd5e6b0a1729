"""Inventory error types raised by the service layer."""

from __future__ import annotations


class InventoryError(ValueError):
    """Base class for rejected inventory operations."""


class InvalidCardError(InventoryError):
    """Raised when card details fail validation."""


class InvalidAmountError(InventoryError):
    """Raised when a count adjustment or price is not acceptable."""


class DuplicateNameError(InventoryError):
    """Raised when a card, binder or deck name is already taken."""

    def __init__(self, kind: str, name: str) -> None:
        super().__init__(f"A {kind} named '{name}' already exists.")
        self.kind = kind
        self.name = name


class NotFoundError(InventoryError):
    """Raised when a named card, binder or deck does not exist."""

    def __init__(self, kind: str, name: str) -> None:
        super().__init__(f"{kind.capitalize()} '{name}' not found.")
        self.kind = kind
        self.name = name


class UnknownTypeError(InventoryError):
    """Raised when a binder or deck type is not recognised."""


class CardUnavailableError(InventoryError):
    """Raised when no loose copies of a card remain in the collection."""


class CapacityError(InventoryError):
    """Raised when a binder or deck is already full."""


class CardNotAllowedError(InventoryError):
    """Raised when a container's rules reject a card."""


class SlotIndexError(InventoryError):
    """Raised when a container position does not hold a card."""


class NotSellableError(InventoryError):
    """Raised when selling a binder or deck type that cannot be sold."""


class NotTradableError(InventoryError):
    """Raised when trading out of a binder type that forbids trades."""


class InvalidNameError(InventoryError):
    """Raised when a binder or deck name is blank."""
