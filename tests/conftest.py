"""Shared test fixtures for Cleanarr."""

import os
import sqlite3
from datetime import datetime
from pathlib import Path
from unittest.mock import patch

import pytest
from factories import NOW

from cleanarr.config import CleanarrConfig
from cleanarr.db.connection import configure_connection
from cleanarr.db.schema import create_schema


@pytest.fixture
def now() -> datetime:
    """Return the fixed evaluation time."""
    return NOW


@pytest.fixture
def db_conn():
    """Create an in-memory database with the schema and default rules."""
    conn = configure_connection(sqlite3.connect(":memory:"))
    create_schema(conn)
    yield conn
    conn.close()


@pytest.fixture
def empty_rules_db(db_conn):
    """In-memory database with the built-in rules removed."""
    db_conn.execute("DELETE FROM suggestion_rules")
    db_conn.commit()
    return db_conn


@pytest.fixture
def app_config() -> CleanarrConfig:
    """Configuration with no services configured."""
    return CleanarrConfig()


@pytest.fixture(autouse=True)
def cleanarr_data_dir(tmp_path: Path):
    """Point CLEANARR_DATA_DIR at a temporary directory for every test.

    Keeps CLI and config tests away from ~/.cleanarr and clears any
    CLEANARR_* variables from the developer's environment.
    """
    data_dir = tmp_path / ".cleanarr"
    data_dir.mkdir()
    env = {k: v for k, v in os.environ.items() if not k.startswith("CLEANARR_")}
    env["CLEANARR_DATA_DIR"] = str(data_dir)
    with patch.dict(os.environ, env, clear=True):
        yield data_dir
