"""Run `tcis` command lines from inside the TUI and capture their output."""

from __future__ import annotations

import argparse
import io
import logging
import shlex
from contextlib import redirect_stderr, redirect_stdout
from dataclasses import dataclass

from src.tcis.cli.tcis import build_parser, run_command
from src.tcis.core.errors import InventoryError
from src.tcis.domain.card_spec import build_card_spec
from src.tcis.services import binders

logger = logging.getLogger(__name__)

EXIT_COMMANDS = {"/exit", "/quit", "exit", "quit"}
CONFIRM_WORDS = {"y", "yes"}


@dataclass(frozen=True)
class CommandResult:
    exit_code: int
    output: str


def split_command(line: str) -> list[str]:
    """
    Tokenize a command line, accepting an optional leading ``tcis``.

    Raises:
        ValueError: If quotes are unbalanced.
    """
    tokens = shlex.split(line)
    if tokens and tokens[0] == "tcis":
        tokens = tokens[1:]
    if tokens == ["help"]:
        return ["--help"]
    return tokens


def execute_command(tokens: list[str]) -> CommandResult:
    """Run one command and return its exit code with combined output."""
    if tokens and tokens[0] == "tui":
        return CommandResult(1, "Already running the TUI.")
    buffer = io.StringIO()
    with redirect_stdout(buffer), redirect_stderr(buffer):
        try:
            exit_code = run_command(tokens)
        except SystemExit as exc:
            exit_code = exc.code if isinstance(exc.code, int) else 2
        except InventoryError as exc:
            logger.warning("TUI command rejected: %s", exc)
            print(f"Error: {exc}")
            exit_code = 1
    return CommandResult(exit_code, buffer.getvalue().rstrip())


def confirmation_prompt(tokens: list[str]) -> str | None:
    """
    Return a question to ask before running ``tokens``, if one is needed.

    Unfair trades and inventory resets need an explicit yes. The caller
    re-runs the command with ``--yes`` once the user agrees.
    """
    args = _parse_quietly(tokens)
    if args is None or getattr(args, "yes", True):
        return None
    if args.command == "reset":
        return "Delete every card, binder, deck and sale? Type 'yes' to confirm."
    if args.command == "binder" and args.binder_command == "trade":
        try:
            incoming = build_card_spec(args.name, args.value, args.rarity, args.variant)
            difference = binders.trade_value_difference(
                args.binder, args.position - 1, incoming
            )
        except InventoryError:
            return None
        if binders.is_unfair_trade(difference):
            return (
                f"Value difference is ${difference:.2f}. This may be an unfair "
                "trade. Type 'yes' to proceed."
            )
    return None


def is_confirmation(answer: str) -> bool:
    return answer.strip().lower() in CONFIRM_WORDS


def _parse_quietly(tokens: list[str]) -> argparse.Namespace | None:
    buffer = io.StringIO()
    with redirect_stdout(buffer), redirect_stderr(buffer):
        try:
            return build_parser().parse_args(tokens)
        except SystemExit:
            return None
