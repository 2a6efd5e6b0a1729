"""
Common database components shared across all modules
"""

import logging
import os
from datetime import datetime
from datetime import timezone
from pathlib import Path
from urllib.parse import urlparse

from src.tcis.core.paths import get_data_dir

from sqlalchemy import create_engine, event
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import declarative_base
from sqlalchemy.orm import sessionmaker

logger = logging.getLogger(__name__)

DB_URL_ENV = "TCIS_DB_URL"
DB_FILENAME = "tcis.db"


def _default_database_url() -> str:
    db_path = (get_data_dir() / DB_FILENAME).resolve()
    return f"sqlite:///{db_path}"


def _resolve_database_url() -> str:
    return os.environ.get(DB_URL_ENV) or _default_database_url()


def _ensure_database_url_current() -> None:
    if not _DATABASE_URL_FROM_ENV:
        return
    resolved = _resolve_database_url()
    if DATABASE_URL != resolved:
        configure_database(resolved, from_env=True)


def _create_engine(database_url: str):
    new_engine = create_engine(database_url, echo=False)
    if new_engine.dialect.name == "sqlite":
        event.listen(new_engine, "connect", _enable_sqlite_foreign_keys)
    return new_engine


def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


# Create database directory if it doesn't exist
get_data_dir().mkdir(parents=True, exist_ok=True)

# SQLite database setup
DATABASE_URL = _resolve_database_url()
_DATABASE_URL_FROM_ENV = True
engine = _create_engine(DATABASE_URL)
SessionLocal = sessionmaker(
    autocommit=False, autoflush=False, expire_on_commit=False, bind=engine
)

# Single Base instance for all models
Base = declarative_base()


def init_db():
    """Initialize the database and create all tables"""
    _ensure_database_url_current()
    _ensure_db_writable()
    # Import models to ensure they're registered with Base
    from src.tcis.db.models.binder import Binder, BinderSlot
    from src.tcis.db.models.card import Card
    from src.tcis.db.models.deck import Deck, DeckSlot
    from src.tcis.db.models.sale import Sale

    _ = (Binder, BinderSlot, Card, Deck, DeckSlot, Sale)

    # Create all tables
    try:
        Base.metadata.create_all(bind=engine)
    except OperationalError as exc:
        if "disk i/o error" in str(exc).lower():
            db_path = get_database_path()
            backup_path = _attempt_recover_sqlite(db_path)
            if backup_path is not None:
                logger.warning(
                    "Moved unreadable database aside (backup=%s).", backup_path
                )
                configure_database(DATABASE_URL)
            try:
                Base.metadata.create_all(bind=engine)
            except OperationalError as retry_exc:
                hint = (
                    f" Backup saved to {backup_path}."
                    if backup_path is not None
                    else ""
                )
                raise RuntimeError(
                    f"SQLite disk I/O error while initializing database at {db_path}."
                    f"{hint} Check permissions and available disk space."
                ) from retry_exc
            return
        raise


def configure_database(database_url: str, *, from_env: bool = False) -> None:
    """Configure the database connection (used mainly for tests)."""
    global DATABASE_URL
    global engine
    global SessionLocal
    global _DATABASE_URL_FROM_ENV
    DATABASE_URL = database_url
    _DATABASE_URL_FROM_ENV = from_env
    engine.dispose()
    engine = _create_engine(DATABASE_URL)
    SessionLocal = sessionmaker(
        autocommit=False, autoflush=False, expire_on_commit=False, bind=engine
    )


def get_database_path() -> str:
    """Return the sqlite database path for the current DATABASE_URL."""
    _ensure_database_url_current()
    parsed = urlparse(DATABASE_URL)
    if parsed.scheme != "sqlite":
        raise ValueError("Database path is only available for sqlite databases.")
    raw_path = parsed.path or ""
    if raw_path:
        if raw_path == "/:memory:":
            return ":memory:"
        if raw_path.startswith("//"):
            normalized = os.path.normpath(raw_path)
            if normalized.startswith("//"):
                return "/" + normalized.lstrip("/")
            return normalized
        normalized = os.path.normpath(raw_path)
        if normalized.startswith("/"):
            return normalized.lstrip("/")
        return normalized
    return str((get_data_dir() / DB_FILENAME).resolve())


def _ensure_db_writable() -> None:
    _ensure_database_url_current()
    db_path = get_database_path()
    if db_path == ":memory:":
        return
    db_file = Path(db_path)
    db_dir = db_file.parent
    try:
        db_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise PermissionError(f"Database directory not writable: {db_dir}") from exc
    if not os.access(db_dir, os.W_OK):
        raise PermissionError(f"Database directory not writable: {db_dir}")
    if db_file.exists():
        if db_file.is_dir():
            raise ValueError(
                f"Expected file path for database, found directory: {db_file}"
            )
        if not os.access(db_file, os.W_OK):
            raise PermissionError(f"Database file is not writable: {db_file}")


def _attempt_recover_sqlite(db_path: str) -> str | None:
    if db_path == ":memory:":
        return None
    db_file = Path(db_path)
    if not db_file.exists() or not db_file.is_file():
        return None
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    backup_path = db_file.with_suffix(f".corrupt.{timestamp}.db")
    try:
        db_file.rename(backup_path)
    except OSError:
        return None
    return str(backup_path)


def reset_database() -> None:
    """Drop and recreate every inventory table."""
    init_db()
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)


# Note: init_db() is NOT called automatically during import to avoid circular dependencies
# It should be called explicitly when the application starts
