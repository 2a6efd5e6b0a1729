"""Read-only inventory snapshot shared by the CLI and the TUI."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from typing import Iterable, Optional

from src.tcis.db.models.binder import Binder
from src.tcis.db.models.card import Card
from src.tcis.db.models.deck import Deck
from src.tcis.services import binders, collection, decks, ledger


@dataclass(frozen=True)
class CardView:
    name: str
    rarity: str
    variant: str
    base_value: float
    value: float
    count: int


@dataclass(frozen=True)
class ContainerView:
    name: str
    type: str
    card_count: int
    capacity: int
    sellable: bool
    tradable: bool
    price: Optional[float]
    cards: list[CardView]


@dataclass(frozen=True)
class InventoryView:
    total_money: float
    cards: list[CardView]
    binders: list[ContainerView]
    decks: list[ContainerView]


def card_view(card: Card) -> CardView:
    return CardView(
        name=card.name,
        rarity=card.rarity.value,
        variant=card.variant.value,
        base_value=round(card.base_value, 2),
        value=round(card.calculated_value, 2),
        count=card.count,
    )


def binder_view(binder: Binder) -> ContainerView:
    sellable = binder.is_sellable()
    return ContainerView(
        name=binder.name,
        type=binder.type_label,
        card_count=binder.card_count,
        capacity=binder.MAX_CAPACITY,
        sellable=sellable,
        tradable=binder.can_trade(),
        price=round(binder.calculate_price(), 2) if sellable else None,
        cards=[card_view(card) for card in binder.cards],
    )


def deck_view(deck: Deck) -> ContainerView:
    sellable = deck.is_sellable()
    return ContainerView(
        name=deck.name,
        type=deck.type_label,
        card_count=deck.card_count,
        capacity=deck.MAX_CAPACITY,
        sellable=sellable,
        tradable=False,
        price=round(deck.total_card_value(), 2) if sellable else None,
        cards=[card_view(card) for card in deck.cards],
    )


def collect_status() -> InventoryView:
    return InventoryView(
        total_money=round(ledger.total_money(), 2),
        cards=[card_view(card) for card in collection.list_cards()],
        binders=[binder_view(binder) for binder in binders.list_binders()],
        decks=[deck_view(deck) for deck in decks.list_decks()],
    )


def render_status(view: InventoryView) -> str:
    lines = [f"Money: ${view.total_money:.2f}", "", "Collection:"]
    lines.extend(_render_cards(view.cards, show_counts=True))
    lines.extend(["", "Binders:"])
    lines.extend(_render_containers(view.binders))
    lines.extend(["", "Decks:"])
    lines.extend(_render_containers(view.decks))
    return "\n".join(lines)


def render_status_json(view: InventoryView) -> str:
    return json.dumps(asdict(view), indent=2)


def render_container(view: ContainerView) -> str:
    lines = [container_heading(view)]
    if not view.cards:
        lines.append("  (empty)")
    for index, card in enumerate(view.cards, 1):
        lines.append(f"  {index}. {_card_line(card)}")
    return "\n".join(lines)


def render_card(view: CardView) -> str:
    return "\n".join(
        [
            f"Card: {view.name}",
            f"- Rarity: {view.rarity}",
            f"- Variant: {view.variant}",
            f"- Base value: ${view.base_value:.2f}",
            f"- Real value: ${view.value:.2f}",
            f"- Copies in collection: {view.count}",
        ]
    )


def _render_cards(cards: Iterable[CardView], *, show_counts: bool) -> list[str]:
    rendered = []
    for card in cards:
        suffix = f" x{card.count}" if show_counts else ""
        rendered.append(f"- {_card_line(card)}{suffix}")
    return rendered or ["- (no cards)"]


def _render_containers(containers: Iterable[ContainerView]) -> list[str]:
    rendered = [f"- {container_heading(view)}" for view in containers]
    return rendered or ["- (none)"]


def container_heading(view: ContainerView) -> str:
    heading = f"{view.name} [{view.type}] {view.card_count}/{view.capacity}"
    if view.price is not None:
        heading += f" price ${view.price:.2f}"
    return heading


def _card_line(card: CardView) -> str:
    return f"{card.name} ({card.rarity}, {card.variant}) ${card.value:.2f}"
