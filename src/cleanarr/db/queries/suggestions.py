"""Suggestion operations for the Cleanarr database.

This module contains database query functions for generated suggestions:
- Bulk replacement of the non-dismissed set
- Listing, lookup and dismissal
- Dismissed media + rule keys used to suppress regeneration
"""

import sqlite3
from collections.abc import Iterable

from cleanarr.core.datetime_utils import to_iso
from cleanarr.domain import MediaType, Suggestion

from .helpers import _row_to_suggestion

_SUGGESTION_COLUMNS = """
    id, media_type, media_id, media_title, media_year, media_size,
    poster_url, rule_name, reason, dismissed, created_at
"""


def delete_active_suggestions(conn: sqlite3.Connection) -> int:
    """Delete all non-dismissed suggestions.

    Returns:
        Number of suggestions deleted.

    Note:
        This function does NOT commit. Caller must manage transactions.
    """
    cursor = conn.execute("DELETE FROM suggestions WHERE dismissed = 0")
    return cursor.rowcount


def insert_suggestions(
    conn: sqlite3.Connection, suggestions: Iterable[Suggestion]
) -> None:
    """Insert suggestions in bulk. Their ids are ignored.

    Note:
        This function does NOT commit. Caller must manage transactions.
    """
    conn.executemany(
        """
        INSERT INTO suggestions (
            media_type, media_id, media_title, media_year, media_size,
            poster_url, rule_name, reason, dismissed, created_at
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        [
            (
                s.media_type.value,
                s.media_id,
                s.title,
                s.year,
                s.size,
                s.poster_url,
                s.rule_name,
                s.reason,
                int(s.dismissed),
                to_iso(s.created_at),
            )
            for s in suggestions
        ],
    )


def get_suggestions(
    conn: sqlite3.Connection, include_dismissed: bool = False
) -> list[Suggestion]:
    """List suggestions, newest first.

    Args:
        conn: Database connection.
        include_dismissed: Also return dismissed suggestions.

    Returns:
        Suggestions ordered by creation time descending.
    """
    query = f"SELECT {_SUGGESTION_COLUMNS} FROM suggestions"
    if not include_dismissed:
        query += " WHERE dismissed = 0"
    query += " ORDER BY created_at DESC, id DESC"
    return [_row_to_suggestion(row) for row in conn.execute(query).fetchall()]


def get_suggestion_by_id(
    conn: sqlite3.Connection, suggestion_id: int
) -> Suggestion | None:
    """Get a suggestion by ID."""
    row = conn.execute(
        f"SELECT {_SUGGESTION_COLUMNS} FROM suggestions WHERE id = ?",
        (suggestion_id,),
    ).fetchone()
    return _row_to_suggestion(row) if row else None


def dismiss_suggestion(conn: sqlite3.Connection, suggestion_id: int) -> bool:
    """Mark a suggestion as dismissed.

    Returns:
        True if the suggestion exists.

    Note:
        This function does NOT commit. Caller must manage transactions.
    """
    cursor = conn.execute(
        "UPDATE suggestions SET dismissed = 1 WHERE id = ?", (suggestion_id,)
    )
    return cursor.rowcount > 0


def get_dismissed_keys(
    conn: sqlite3.Connection,
) -> frozenset[tuple[MediaType, int, str]]:
    """Get the (media_type, media_id, rule_name) keys of dismissed suggestions."""
    cursor = conn.execute(
        "SELECT DISTINCT media_type, media_id, rule_name FROM suggestions "
        "WHERE dismissed = 1"
    )
    return frozenset(
        (MediaType(row["media_type"]), row["media_id"], row["rule_name"])
        for row in cursor.fetchall()
    )


def delete_suggestions_for_media(
    conn: sqlite3.Connection, media_type: MediaType, media_id: int
) -> int:
    """Delete every suggestion, dismissed or not, for one media item.

    Used when the media itself is deleted.

    Note:
        This function does NOT commit. Caller must manage transactions.
    """
    cursor = conn.execute(
        "DELETE FROM suggestions WHERE media_type = ? AND media_id = ?",
        (media_type.value, media_id),
    )
    return cursor.rowcount
