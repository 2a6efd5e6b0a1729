"""Logging setup for the inventory CLI and TUI."""

from __future__ import annotations

import logging
import os
import time
from pathlib import Path

LOG_LEVEL_ENV = "TCIS_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s [%(name)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_log_level(default: int = logging.INFO) -> int:
    """Return the level named by ``TCIS_LOG_LEVEL``, or ``default``."""
    raw = os.environ.get(LOG_LEVEL_ENV, "").strip().upper()
    if not raw:
        return default
    level = logging.getLevelName(raw)
    if isinstance(level, int):
        return level
    return default


def configure_logging(
    logs_dir: str | Path, filename: str | None = None, level: int | None = None
) -> str:
    """
    Configure Python logging to write inventory activity into a file.

    Args:
        logs_dir: Directory to write the log file into.
        filename: Optional fixed filename for determinism in tests.
        level: Logging level for the root and ``src.tcis`` loggers.

    Returns:
        Absolute path to the configured log file.
    """
    if level is None:
        level = resolve_log_level()
    os.makedirs(logs_dir, exist_ok=True)
    if filename is None:
        filename = time.strftime("tcis_%Y%m%d_%H%M%S.log")
    log_path = Path(logs_dir) / filename
    log_path.touch(exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    normalized_path = str(log_path.resolve())
    for handler in root_logger.handlers:
        if isinstance(handler, logging.FileHandler):
            if os.path.abspath(handler.baseFilename) == normalized_path:
                return normalized_path

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    file_handler = logging.FileHandler(normalized_path, encoding="utf-8")
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    logging.getLogger("src.tcis").setLevel(level)
    # SQL echo stays off unless explicitly debugging.
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    return normalized_path
