"""Database layer for Cleanarr.

SQLite storage for the media catalog, retention rules and suggestions.
"""

from cleanarr.db.connection import (
    DatabaseLockedError,
    get_connection,
    get_default_db_path,
    open_connection,
)
from cleanarr.db.schema import SCHEMA_VERSION, create_schema

__all__ = [
    "DatabaseLockedError",
    "SCHEMA_VERSION",
    "create_schema",
    "get_connection",
    "get_default_db_path",
    "open_connection",
]
