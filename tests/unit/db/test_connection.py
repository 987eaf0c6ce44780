"""Unit tests for database connection helpers."""

import sqlite3
from pathlib import Path

import pytest

from cleanarr.db.connection import (
    DatabaseLockedError,
    get_connection,
    handle_database_locked,
    open_connection,
)


class TestOpenConnection:
    """Tests for open_connection() and get_connection()."""

    def test_creates_parent_directory(self, tmp_path: Path) -> None:
        db_path = tmp_path / "nested" / "cleanarr.db"
        conn = open_connection(db_path)
        try:
            assert db_path.parent.is_dir()
        finally:
            conn.close()

    def test_applies_pragmas(self, tmp_path: Path) -> None:
        with get_connection(tmp_path / "test.db") as conn:
            assert conn.execute("PRAGMA journal_mode").fetchone()[0] == "wal"
            assert conn.execute("PRAGMA foreign_keys").fetchone()[0] == 1
            assert conn.row_factory is sqlite3.Row


class TestHandleDatabaseLocked:
    """Tests for the handle_database_locked decorator."""

    def test_locked_error_converted(self) -> None:
        @handle_database_locked
        def write():
            raise sqlite3.OperationalError("database is locked")

        with pytest.raises(DatabaseLockedError):
            write()

    def test_other_errors_pass_through(self) -> None:
        @handle_database_locked
        def write():
            raise sqlite3.OperationalError("no such table: movies")

        with pytest.raises(sqlite3.OperationalError, match="no such table"):
            write()

    def test_return_value_kept(self) -> None:
        @handle_database_locked
        def read():
            return 42

        assert read() == 42
