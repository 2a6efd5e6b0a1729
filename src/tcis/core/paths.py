"""Where the inventory keeps its database, audit store and log files."""

from __future__ import annotations

import os
from pathlib import Path

ENV_ROOT_KEY = "TCIS_ROOT"


def _inventory_root() -> Path:
    # TCIS_ROOT wins; otherwise the checkout holding src/tcis.
    env_root = os.environ.get(ENV_ROOT_KEY)
    if env_root:
        return Path(env_root).expanduser().resolve()
    return Path(__file__).resolve().parents[3]


def get_data_dir() -> Path:
    return _inventory_root() / "data"


def get_logs_dir() -> Path:
    return _inventory_root() / "logs"


def resolve_data_path(*parts: str) -> Path:
    return get_data_dir().joinpath(*parts)
