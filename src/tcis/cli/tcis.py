from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, Sequence

import dotenv

from src.tcis.cli.log_filters import filter_logs, latest_log_file, resolve_log_levels
from src.tcis.core.errors import InventoryError
from src.tcis.core.logging import configure_logging
from src.tcis.core.paths import get_logs_dir
from src.tcis.db.init_db import init_db, reset_database
from src.tcis.domain.card_spec import build_card_spec
from src.tcis.enums import BinderType, DeckType, Rarity, Variant
from src.tcis.services import binders, collection, decks, inventory, ledger

logger = logging.getLogger(__name__)

LOG_FILENAME = "tcis.log"
STATUS_COMMAND = "tcis status"
CARD_ADD_COMMAND = 'tcis card add "Card Name" --value 1.00 --rarity common'
BINDER_CREATE_COMMAND = 'tcis binder create "Binder Name" --type non-curated'
DECK_CREATE_COMMAND = 'tcis deck create "Deck Name" --type normal'

Handler = Callable[[argparse.Namespace], int]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tcis",
        description=(
            "Trading Card Inventory System. Manage a card collection, binders "
            "and decks, and track money earned from sales."
        ),
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    _add_card_parser(subparsers)
    _add_binder_parser(subparsers)
    _add_deck_parser(subparsers)

    money_parser = subparsers.add_parser("money", help="Show money earned from sales.")
    money_parser.add_argument(
        "--history", action="store_true", help="List individual sales."
    )
    money_parser.add_argument("--limit", type=int, default=20, help="Max sales to list.")

    status_parser = subparsers.add_parser(
        "status", help="Show the collection, binders, decks and money."
    )
    status_parser.add_argument("--json", action="store_true")

    logs_parser = subparsers.add_parser("logs", help="Inspect inventory logs.")
    logs_parser.add_argument(
        "--filter", "-i", type=str, help="Substring filter for log lines."
    )
    logs_parser.add_argument(
        "--level",
        "-l",
        action="append",
        help="Filter by log level (repeatable or comma-separated).",
    )
    logs_parser.add_argument(
        "--errors", action="store_true", help="Only show ERROR and CRITICAL lines."
    )
    logs_parser.add_argument(
        "--limit", type=int, default=200, help="Max lines to show."
    )

    reset_parser = subparsers.add_parser(
        "reset", help="Delete every card, binder, deck and sale."
    )
    reset_parser.add_argument(
        "--yes", action="store_true", help="Skip confirmation prompt."
    )

    subparsers.add_parser("tui", help="Open the interactive terminal UI.")
    return parser


def _add_card_parser(subparsers: argparse._SubParsersAction) -> None:
    card_parser = subparsers.add_parser("card", help="Manage the card collection.")
    card_subparsers = card_parser.add_subparsers(dest="card_command", required=True)

    add_parser = card_subparsers.add_parser("add", help="Register a new card type.")
    add_parser.add_argument("name", type=str, help="Card name.")
    add_parser.add_argument(
        "--value", "-v", type=float, required=True, help="Base dollar value."
    )
    add_parser.add_argument(
        "--rarity",
        "-r",
        type=_rarity_arg,
        required=True,
        help="Common, Uncommon, Rare or Legendary.",
    )
    add_parser.add_argument(
        "--variant",
        type=_variant_arg,
        default=Variant.NORMAL,
        help="Normal, Extended-art, Full-art or Alt-art (Rare/Legendary only).",
    )

    card_subparsers.add_parser("list", help="List card types and copy counts.")

    show_parser = card_subparsers.add_parser("show", help="Show one card type.")
    show_parser.add_argument("name", type=str)

    for command, help_text in (
        ("increase", "Add copies of a card."),
        ("decrease", "Remove copies of a card."),
        ("sell", "Sell copies of a card."),
    ):
        count_parser = card_subparsers.add_parser(command, help=help_text)
        count_parser.add_argument("name", type=str)
        count_parser.add_argument("amount", type=int, nargs="?", default=1)


def _add_binder_parser(subparsers: argparse._SubParsersAction) -> None:
    binder_parser = subparsers.add_parser("binder", help="Manage binders.")
    binder_subparsers = binder_parser.add_subparsers(
        dest="binder_command", required=True
    )

    create_parser = binder_subparsers.add_parser("create", help="Create a binder.")
    create_parser.add_argument("name", type=str)
    create_parser.add_argument(
        "--type",
        "-t",
        dest="binder_type",
        choices=[binder_type.value for binder_type in BinderType],
        default=BinderType.NON_CURATED.value,
    )

    delete_parser = binder_subparsers.add_parser(
        "delete", help="Delete a binder; its cards return to the collection."
    )
    delete_parser.add_argument("name", type=str)

    binder_subparsers.add_parser("list", help="List binders.")

    show_parser = binder_subparsers.add_parser("show", help="Show binder contents.")
    show_parser.add_argument("name", type=str)

    add_parser = binder_subparsers.add_parser(
        "add", help="Move a card from the collection into a binder."
    )
    add_parser.add_argument("binder", type=str)
    add_parser.add_argument("card", type=str)

    remove_parser = binder_subparsers.add_parser(
        "remove", help="Move a card from a binder back to the collection."
    )
    remove_parser.add_argument("binder", type=str)
    remove_parser.add_argument("position", type=int, help="1-based card position.")

    trade_parser = binder_subparsers.add_parser(
        "trade", help="Trade a binder card away for an incoming card."
    )
    trade_parser.add_argument("binder", type=str)
    trade_parser.add_argument("position", type=int, help="1-based outgoing position.")
    trade_parser.add_argument("--name", required=True, help="Incoming card name.")
    trade_parser.add_argument(
        "--value", "-v", type=float, required=True, help="Incoming base value."
    )
    trade_parser.add_argument("--rarity", "-r", type=_rarity_arg, required=True)
    trade_parser.add_argument("--variant", type=_variant_arg, default=Variant.NORMAL)
    trade_parser.add_argument(
        "--yes", action="store_true", help="Accept an unfair trade without asking."
    )

    price_parser = binder_subparsers.add_parser(
        "price", help="Set the custom price of a luxury binder."
    )
    price_parser.add_argument("name", type=str)
    price_parser.add_argument("price", type=float)

    sell_parser = binder_subparsers.add_parser("sell", help="Sell a binder.")
    sell_parser.add_argument("name", type=str)


def _add_deck_parser(subparsers: argparse._SubParsersAction) -> None:
    deck_parser = subparsers.add_parser("deck", help="Manage decks.")
    deck_subparsers = deck_parser.add_subparsers(dest="deck_command", required=True)

    create_parser = deck_subparsers.add_parser("create", help="Create a deck.")
    create_parser.add_argument("name", type=str)
    create_parser.add_argument(
        "--type",
        "-t",
        dest="deck_type",
        choices=[deck_type.value for deck_type in DeckType],
        default=DeckType.NORMAL.value,
    )

    delete_parser = deck_subparsers.add_parser(
        "delete", help="Delete a deck; its cards return to the collection."
    )
    delete_parser.add_argument("name", type=str)

    deck_subparsers.add_parser("list", help="List decks.")

    show_parser = deck_subparsers.add_parser("show", help="Show deck contents.")
    show_parser.add_argument("name", type=str)

    add_parser = deck_subparsers.add_parser(
        "add", help="Move a card from the collection into a deck."
    )
    add_parser.add_argument("deck", type=str)
    add_parser.add_argument("card", type=str)

    remove_parser = deck_subparsers.add_parser(
        "remove", help="Move a card from a deck back to the collection."
    )
    remove_parser.add_argument("deck", type=str)
    remove_parser.add_argument("position", type=int, help="1-based card position.")

    sell_parser = deck_subparsers.add_parser("sell", help="Sell a sellable deck.")
    sell_parser.add_argument("name", type=str)


def main(argv: Sequence[str] | None = None) -> int:
    dotenv.load_dotenv()
    parser = build_parser()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    if not args_list:
        parser.print_help()
        return 0
    args = parser.parse_args(args_list)
    handler = _HANDLERS.get(args.command)
    if handler is None:
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 1
    if args.command != "logs":
        configure_logging(get_logs_dir(), filename=LOG_FILENAME)
        init_db()
    try:
        return handler(args)
    except InventoryError as exc:
        logger.warning("tcis %s rejected: %s", args.command, exc)
        print(f"Error: {exc}", file=sys.stderr)
        return 1


def run_command(argv: Sequence[str]) -> int:
    """Run a CLI command without touching logging or schema setup."""
    args = build_parser().parse_args(list(argv))
    handler = _HANDLERS[args.command]
    return handler(args)


# --- card -------------------------------------------------------------------


def _handle_card(args: argparse.Namespace) -> int:
    return _CARD_HANDLERS[args.card_command](args)


def _handle_card_add(args: argparse.Namespace) -> int:
    card = collection.add_new_card(args.name, args.value, args.rarity, args.variant)
    print(f"Card '{card.name}' added to the collection.")
    return 0


def _handle_card_list(_: argparse.Namespace) -> int:
    cards = collection.list_cards()
    if not cards:
        print("No cards in the collection.")
        print(f"Next: run {CARD_ADD_COMMAND}.")
        return 0
    for card in cards:
        view = inventory.card_view(card)
        print(
            f"- {view.name} ({view.rarity}, {view.variant}) "
            f"${view.value:.2f} x{view.count}"
        )
    return 0


def _handle_card_show(args: argparse.Namespace) -> int:
    card = collection.get_card(args.name)
    print(inventory.render_card(inventory.card_view(card)))
    return 0


def _handle_card_increase(args: argparse.Namespace) -> int:
    count = collection.increase_count(args.name, args.amount)
    print(f"'{args.name.strip()}' now has {count} copies in the collection.")
    return 0


def _handle_card_decrease(args: argparse.Namespace) -> int:
    count = collection.decrease_count(args.name, args.amount)
    print(f"'{args.name.strip()}' now has {count} copies in the collection.")
    return 0


def _handle_card_sell(args: argparse.Namespace) -> int:
    proceeds = collection.sell_card(args.name, args.amount)
    print(f"Sold {args.amount} x '{args.name.strip()}' for ${proceeds:.2f}.")
    print(f"Money: ${ledger.total_money():.2f}")
    return 0


# --- binder -----------------------------------------------------------------


def _handle_binder(args: argparse.Namespace) -> int:
    return _BINDER_HANDLERS[args.binder_command](args)


def _handle_binder_create(args: argparse.Namespace) -> int:
    binder = binders.create_binder(args.name, args.binder_type)
    print(f"Binder '{binder.name}' ({binder.type_label}) created.")
    return 0


def _handle_binder_delete(args: argparse.Namespace) -> int:
    returned = binders.delete_binder(args.name)
    print(
        f"Binder '{args.name.strip()}' deleted; "
        f"{returned} cards returned to the collection."
    )
    return 0


def _handle_binder_list(_: argparse.Namespace) -> int:
    found = binders.list_binders()
    if not found:
        print("No binders yet.")
        print(f"Next: run {BINDER_CREATE_COMMAND}.")
        return 0
    for binder in found:
        print(f"- {inventory.container_heading(inventory.binder_view(binder))}")
    return 0


def _handle_binder_show(args: argparse.Namespace) -> int:
    binder = binders.get_binder(args.name)
    print(inventory.render_container(inventory.binder_view(binder)))
    return 0


def _handle_binder_add(args: argparse.Namespace) -> int:
    binder = binders.add_card_to_binder(args.card, args.binder)
    print(f"Added '{args.card.strip()}' to binder '{binder.name}'.")
    return 0


def _handle_binder_remove(args: argparse.Namespace) -> int:
    card = binders.remove_card_from_binder(args.position - 1, args.binder)
    print(f"Returned '{card.name}' to the collection.")
    return 0


def _handle_binder_trade(args: argparse.Namespace) -> int:
    incoming = build_card_spec(args.name, args.value, args.rarity, args.variant)
    index = args.position - 1
    difference = binders.trade_value_difference(args.binder, index, incoming)
    if binders.is_unfair_trade(difference) and not args.yes:
        prompt = (
            f"Value difference is ${difference:.2f}. "
            "This may be an unfair trade. Proceed? [y/N] "
        )
        if not _confirm(prompt):
            print("Trade canceled.")
            return 1
    outgoing = binders.perform_trade(args.binder, index, incoming)
    print(f"Traded '{outgoing.name}' for '{incoming.name}'.")
    return 0


def _handle_binder_price(args: argparse.Namespace) -> int:
    binder = binders.set_binder_price(args.name, args.price)
    print(
        f"Binder '{binder.name}' priced at ${args.price:.2f} "
        f"(sells for ${binder.calculate_price():.2f})."
    )
    return 0


def _handle_binder_sell(args: argparse.Namespace) -> int:
    price = binders.sell_binder(args.name)
    print(f"Sold binder '{args.name.strip()}' for ${price:.2f}.")
    print(f"Money: ${ledger.total_money():.2f}")
    return 0


# --- deck -------------------------------------------------------------------


def _handle_deck(args: argparse.Namespace) -> int:
    return _DECK_HANDLERS[args.deck_command](args)


def _handle_deck_create(args: argparse.Namespace) -> int:
    deck = decks.create_deck(args.name, args.deck_type)
    print(f"Deck '{deck.name}' ({deck.type_label}) created.")
    return 0


def _handle_deck_delete(args: argparse.Namespace) -> int:
    returned = decks.delete_deck(args.name)
    print(
        f"Deck '{args.name.strip()}' deleted; "
        f"{returned} cards returned to the collection."
    )
    return 0


def _handle_deck_list(_: argparse.Namespace) -> int:
    found = decks.list_decks()
    if not found:
        print("No decks yet.")
        print(f"Next: run {DECK_CREATE_COMMAND}.")
        return 0
    for deck in found:
        print(f"- {inventory.container_heading(inventory.deck_view(deck))}")
    return 0


def _handle_deck_show(args: argparse.Namespace) -> int:
    deck = decks.get_deck(args.name)
    print(inventory.render_container(inventory.deck_view(deck)))
    return 0


def _handle_deck_add(args: argparse.Namespace) -> int:
    deck = decks.add_card_to_deck(args.card, args.deck)
    print(f"Added '{args.card.strip()}' to deck '{deck.name}'.")
    return 0


def _handle_deck_remove(args: argparse.Namespace) -> int:
    card = decks.remove_card_from_deck(args.position - 1, args.deck)
    print(f"Returned '{card.name}' to the collection.")
    return 0


def _handle_deck_sell(args: argparse.Namespace) -> int:
    price = decks.sell_deck(args.name)
    print(f"Sold deck '{args.name.strip()}' for ${price:.2f}.")
    print(f"Money: ${ledger.total_money():.2f}")
    return 0


# --- everything else --------------------------------------------------------


def _handle_money(args: argparse.Namespace) -> int:
    print(f"Money: ${ledger.total_money():.2f}")
    if not args.history:
        return 0
    sales = ledger.list_sales(limit=args.limit)
    if not sales:
        print("No sales recorded.")
        return 0
    for sale in sales:
        print(
            f"- {sale.created_at:%Y-%m-%d %H:%M} {sale.kind.value} "
            f"'{sale.item_name}' x{sale.quantity} ${sale.amount:.2f}"
        )
    return 0


def _handle_status(args: argparse.Namespace) -> int:
    view = inventory.collect_status()
    if args.json:
        print(inventory.render_status_json(view))
    else:
        print(inventory.render_status(view))
    return 0


def _handle_logs(args: argparse.Namespace) -> int:
    target = latest_log_file(get_logs_dir())
    if target is None:
        print("No log files to inspect.")
        print(f"Next: run {STATUS_COMMAND} or any other command.")
        return 0
    try:
        levels = resolve_log_levels(args.level, args.errors)
    except ValueError:
        print("Invalid log level. Use: DEBUG, INFO, WARNING, ERROR, CRITICAL.")
        return 2
    lines = target.read_text(encoding="utf-8", errors="ignore").splitlines()
    for line in filter_logs(lines, args.filter, args.limit, levels):
        print(line)
    return 0


def _handle_reset(args: argparse.Namespace) -> int:
    if not args.yes and not _confirm(
        "Delete every card, binder, deck and sale? [y/N] "
    ):
        print("Reset canceled.")
        return 1
    reset_database()
    logger.warning("Inventory database reset.")
    print("Inventory cleared.")
    return 0


def _handle_tui(_: argparse.Namespace) -> int:
    from src.tcis.ui.app import InventoryTUI

    InventoryTUI().run()
    return 0


# --- helpers ----------------------------------------------------------------


def _rarity_arg(raw: str) -> Rarity:
    rarity = Rarity.from_string(raw)
    if rarity is None:
        raise argparse.ArgumentTypeError(
            "rarity must be one of: " + ", ".join(r.value for r in Rarity)
        )
    return rarity


def _variant_arg(raw: str) -> Variant:
    variant = Variant.from_string(raw)
    if variant is None:
        raise argparse.ArgumentTypeError(
            "variant must be one of: " + ", ".join(v.value for v in Variant)
        )
    return variant


def _confirm(prompt: str) -> bool:
    try:
        answer = input(prompt)
    except EOFError:
        return False
    return answer.strip().lower() in {"y", "yes"}


_CARD_HANDLERS: dict[str, Handler] = {
    "add": _handle_card_add,
    "list": _handle_card_list,
    "show": _handle_card_show,
    "increase": _handle_card_increase,
    "decrease": _handle_card_decrease,
    "sell": _handle_card_sell,
}

_BINDER_HANDLERS: dict[str, Handler] = {
    "create": _handle_binder_create,
    "delete": _handle_binder_delete,
    "list": _handle_binder_list,
    "show": _handle_binder_show,
    "add": _handle_binder_add,
    "remove": _handle_binder_remove,
    "trade": _handle_binder_trade,
    "price": _handle_binder_price,
    "sell": _handle_binder_sell,
}

_DECK_HANDLERS: dict[str, Handler] = {
    "create": _handle_deck_create,
    "delete": _handle_deck_delete,
    "list": _handle_deck_list,
    "show": _handle_deck_show,
    "add": _handle_deck_add,
    "remove": _handle_deck_remove,
    "sell": _handle_deck_sell,
}

_HANDLERS: dict[str, Handler] = {
    "card": _handle_card,
    "binder": _handle_binder,
    "deck": _handle_deck,
    "money": _handle_money,
    "status": _handle_status,
    "logs": _handle_logs,
    "reset": _handle_reset,
    "tui": _handle_tui,
}


if __name__ == "__main__":
    raise SystemExit(main())
