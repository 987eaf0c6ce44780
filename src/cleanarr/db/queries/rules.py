"""Suggestion rule CRUD operations for the Cleanarr database.

This module contains database query functions for retention rules:
- Rule insert, get, update, delete operations
- Enabled-rule listing used by suggestion generation
"""

import sqlite3

from cleanarr.rules.types import Rule

from .helpers import _row_to_rule

_RULE_COLUMNS = """
    id, name, description, enabled, apply_to_movies, apply_to_series,
    conditions_json, is_custom
"""


def get_all_rules(conn: sqlite3.Connection) -> list[Rule]:
    """Get every rule in ID order."""
    cursor = conn.execute(f"SELECT {_RULE_COLUMNS} FROM suggestion_rules ORDER BY id")
    return [_row_to_rule(row) for row in cursor.fetchall()]


def get_enabled_rules(conn: sqlite3.Connection) -> list[Rule]:
    """Get enabled rules in ID order."""
    cursor = conn.execute(
        f"SELECT {_RULE_COLUMNS} FROM suggestion_rules WHERE enabled = 1 ORDER BY id"
    )
    return [_row_to_rule(row) for row in cursor.fetchall()]


def get_rule_by_id(conn: sqlite3.Connection, rule_id: int) -> Rule | None:
    """Get a rule by ID.

    Args:
        conn: Database connection.
        rule_id: Rule ID.

    Returns:
        Rule if found, None otherwise.
    """
    row = conn.execute(
        f"SELECT {_RULE_COLUMNS} FROM suggestion_rules WHERE id = ?", (rule_id,)
    ).fetchone()
    return _row_to_rule(row) if row else None


def insert_rule(conn: sqlite3.Connection, rule: Rule) -> int:
    """Insert a new rule. The rule's id is ignored.

    Args:
        conn: Database connection.
        rule: Rule to insert.

    Returns:
        The ID assigned to the new rule.

    Note:
        This function does NOT commit. Caller must manage transactions.
    """
    cursor = conn.execute(
        """
        INSERT INTO suggestion_rules (
            name, description, enabled, apply_to_movies, apply_to_series,
            conditions_json, is_custom
        ) VALUES (?, ?, ?, ?, ?, ?, ?)
        """,
        (
            rule.name,
            rule.description,
            int(rule.enabled),
            int(rule.apply_to_movies),
            int(rule.apply_to_series),
            rule.conditions_json,
            int(rule.is_custom),
        ),
    )
    return cursor.lastrowid


def update_rule(conn: sqlite3.Connection, rule: Rule) -> bool:
    """Replace the editable fields of an existing rule.

    The is_custom flag is never changed by an update.

    Returns:
        True if the rule exists and was updated.

    Note:
        This function does NOT commit. Caller must manage transactions.
    """
    cursor = conn.execute(
        """
        UPDATE suggestion_rules SET
            name = ?, description = ?, enabled = ?, apply_to_movies = ?,
            apply_to_series = ?, conditions_json = ?
        WHERE id = ?
        """,
        (
            rule.name,
            rule.description,
            int(rule.enabled),
            int(rule.apply_to_movies),
            int(rule.apply_to_series),
            rule.conditions_json,
            rule.id,
        ),
    )
    return cursor.rowcount > 0


def set_rule_enabled(conn: sqlite3.Connection, rule_id: int, enabled: bool) -> bool:
    """Enable or disable a rule.

    Note:
        This function does NOT commit. Caller must manage transactions.
    """
    cursor = conn.execute(
        "UPDATE suggestion_rules SET enabled = ? WHERE id = ?",
        (int(enabled), rule_id),
    )
    return cursor.rowcount > 0


def delete_rule(conn: sqlite3.Connection, rule_id: int) -> bool:
    """Delete a rule.

    Note:
        This function does NOT commit. Caller must manage transactions.
    """
    cursor = conn.execute("DELETE FROM suggestion_rules WHERE id = ?", (rule_id,))
    return cursor.rowcount > 0
