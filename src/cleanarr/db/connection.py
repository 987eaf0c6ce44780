"""Database connection management for Cleanarr."""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from functools import wraps
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path.home() / ".cleanarr" / "cleanarr.db"


class DatabaseLockedError(Exception):
    """Raised when the database is locked and cannot be accessed."""

    pass


def get_default_db_path() -> Path:
    """Return the default database path (~/.cleanarr/cleanarr.db)."""
    return DEFAULT_DB_PATH


def ensure_db_directory(db_path: Path) -> None:
    """Ensure the database directory exists, creating it if necessary."""
    db_path.parent.mkdir(parents=True, exist_ok=True)


def configure_connection(conn: sqlite3.Connection) -> sqlite3.Connection:
    """Apply the standard PRAGMAs and row factory to a connection."""
    conn.execute("PRAGMA foreign_keys = ON")
    # WAL: concurrent readers while the sync or generation pass writes
    conn.execute("PRAGMA journal_mode = WAL")
    conn.execute("PRAGMA synchronous = NORMAL")
    conn.execute("PRAGMA busy_timeout = 10000")
    conn.row_factory = sqlite3.Row
    return conn


def open_connection(db_path: Path | None = None, timeout: float = 30.0):
    """Open a configured connection that the caller must close.

    Args:
        db_path: Path to the database file. Defaults to ~/.cleanarr/cleanarr.db.
        timeout: How long to wait for locks (seconds).

    Returns:
        An sqlite3 Connection.
    """
    if db_path is None:
        db_path = get_default_db_path()
    ensure_db_directory(db_path)
    conn = sqlite3.connect(str(db_path), timeout=timeout)
    return configure_connection(conn)


@contextmanager
def get_connection(
    db_path: Path | None = None, timeout: float = 30.0
) -> Iterator[sqlite3.Connection]:
    """Get a database connection with proper settings.

    Args:
        db_path: Path to the database file. Defaults to ~/.cleanarr/cleanarr.db.
        timeout: How long to wait for locks (seconds). Default 30s.

    Yields:
        An sqlite3 Connection object.

    Raises:
        sqlite3.OperationalError: If database is locked and timeout exceeded.
    """
    conn = open_connection(db_path, timeout)
    try:
        yield conn
    finally:
        conn.close()


def handle_database_locked(func):
    """Decorator to convert sqlite3.OperationalError to DatabaseLockedError."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except sqlite3.OperationalError as e:
            if "locked" in str(e).casefold():
                raise DatabaseLockedError(
                    "Database is locked. Another process may be using it."
                ) from e
            raise

    return wrapper
