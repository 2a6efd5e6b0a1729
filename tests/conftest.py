from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Generator

import pytest

from src.tcis.db import init_db
from src.tcis.db.session_context import managed_session

_WORKER_ID = os.environ.get("PYTEST_XDIST_WORKER", "main")
_TEST_DB_ROOT = (Path(".pytest_db") / _WORKER_ID).resolve()
TEST_DB_PATH = (_TEST_DB_ROOT / "test.db").resolve()


@pytest.fixture(scope="session", autouse=True)
def _initialize_test_db() -> None:
    os.environ.pop("TCIS_DB_URL", None)
    _TEST_DB_ROOT.mkdir(parents=True, exist_ok=True)
    if TEST_DB_PATH.exists():
        os.chmod(TEST_DB_PATH, 0o666)
        TEST_DB_PATH.unlink()
    init_db.configure_database(f"sqlite:///{TEST_DB_PATH}")
    init_db.init_db()


@pytest.fixture(autouse=True)
def _isolated_inventory(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> Generator[None, None, None]:
    monkeypatch.setenv("TCIS_ROOT", str(tmp_path))
    monkeypatch.setenv("TCIS_AUDIT_DB_PATH", str(tmp_path / "data" / "audit.db"))
    monkeypatch.delenv("TCIS_DB_URL", raising=False)
    monkeypatch.delenv("TCIS_LOG_LEVEL", raising=False)
    with managed_session(commit=True) as session:
        for table in reversed(init_db.Base.metadata.sorted_tables):
            session.execute(table.delete())
    yield
    _remove_file_handlers(tmp_path)


def _remove_file_handlers(root: Path) -> None:
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if isinstance(handler, logging.FileHandler) and Path(
            handler.baseFilename
        ).is_relative_to(root.resolve()):
            root_logger.removeHandler(handler)
            handler.close()
