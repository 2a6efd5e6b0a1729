# -*- coding: utf-8 -*-
"""
Main Application Entry Point (TUI)

Textual-based interface for managing the trading card inventory.
"""

import argparse
import logging
import sys

import dotenv

from src.tcis.cli.tcis import main as cli_main
from src.tcis.core.logging import configure_logging
from src.tcis.core.paths import get_logs_dir
from src.tcis.db.init_db import init_db

dotenv.load_dotenv()

logger = logging.getLogger(__name__)


def parse_cli_args(argv: list[str]) -> bool:
    parser = argparse.ArgumentParser(prog="main.py")
    parser.add_argument("--headless", "--no-tui", action="store_true")
    args = parser.parse_args(argv[1:])
    return args.headless


def should_force_headless() -> bool:
    return not (sys.stdin.isatty() and sys.stdout.isatty())


def main(argv: list[str] | None = None) -> int:
    headless = parse_cli_args(sys.argv if argv is None else argv)
    if not headless and should_force_headless():
        headless = True
    if headless:
        return cli_main(["status"])

    configure_logging(get_logs_dir(), filename="tcis.log")
    init_db()
    logger.info("Starting inventory TUI.")

    from src.tcis.ui.app import InventoryTUI

    InventoryTUI().run()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
