"""Rule management service.

Every change to the rule set is committed and then followed by a
suggestion regeneration pass, so the non-dismissed suggestions always
reflect the current enabled rules. Built-in rules can be edited or
disabled but not deleted.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Sequence

from cleanarr.db.queries import (
    delete_rule,
    get_all_rules,
    get_rule_by_id,
    insert_rule,
    set_rule_enabled,
    update_rule,
)
from cleanarr.rules.exceptions import (
    ConditionParseError,
    ProtectedRuleError,
    RuleNotFoundError,
    RuleValidationError,
)
from cleanarr.rules.parsing import parse_conditions, serialize_conditions
from cleanarr.rules.types import Rule
from cleanarr.suggestions.service import SuggestionService

logger = logging.getLogger(__name__)


def _normalize_rule(rule: Rule) -> Rule:
    """Validate a rule and return it with canonical condition JSON.

    Raises:
        RuleValidationError: If the name is empty or the conditions are
            malformed.
    """
    name = rule.name.strip()
    if not name:
        raise RuleValidationError("Rule name must not be empty", field="name")
    try:
        conditions = parse_conditions(rule.conditions_json, name)
    except ConditionParseError as e:
        raise RuleValidationError(str(e), field="conditions") from e

    return Rule(
        id=rule.id,
        name=name,
        description=rule.description,
        enabled=rule.enabled,
        apply_to_movies=rule.apply_to_movies,
        apply_to_series=rule.apply_to_series,
        conditions_json=serialize_conditions(conditions),
        is_custom=rule.is_custom,
    )


class RuleService:
    """CRUD for suggestion rules with automatic regeneration."""

    def __init__(
        self,
        conn: sqlite3.Connection,
        suggestions: SuggestionService | None = None,
    ) -> None:
        self.conn = conn
        self.suggestions = suggestions or SuggestionService(conn)

    def _regenerate(self) -> None:
        self.suggestions.generate_suggestions()

    def list_rules(self) -> list[Rule]:
        """List all rules, built-in first, in ID order."""
        return get_all_rules(self.conn)

    def get_rule(self, rule_id: int) -> Rule:
        """Get a rule by ID.

        Raises:
            RuleNotFoundError: If the ID does not exist.
        """
        rule = get_rule_by_id(self.conn, rule_id)
        if rule is None:
            raise RuleNotFoundError(rule_id)
        return rule

    def create_rule(
        self,
        name: str,
        conditions_json: str,
        description: str = "",
        enabled: bool = True,
        apply_to_movies: bool = True,
        apply_to_series: bool = True,
    ) -> Rule:
        """Create a custom rule and regenerate suggestions.

        Raises:
            RuleValidationError: If the rule data is invalid.
        """
        rule = _normalize_rule(
            Rule(
                id=None,
                name=name,
                description=description,
                enabled=enabled,
                apply_to_movies=apply_to_movies,
                apply_to_series=apply_to_series,
                conditions_json=conditions_json,
                is_custom=True,
            )
        )
        rule.id = insert_rule(self.conn, rule)
        self.conn.commit()
        logger.info("Created rule %d '%s'", rule.id, rule.name)
        self._regenerate()
        return rule

    def update_rule(
        self,
        rule_id: int,
        name: str,
        conditions_json: str,
        description: str = "",
        enabled: bool = True,
        apply_to_movies: bool = True,
        apply_to_series: bool = True,
    ) -> Rule:
        """Replace all editable fields of a rule and regenerate.

        Raises:
            RuleNotFoundError: If the ID does not exist.
            RuleValidationError: If the rule data is invalid.
        """
        existing = self.get_rule(rule_id)
        rule = _normalize_rule(
            Rule(
                id=rule_id,
                name=name,
                description=description,
                enabled=enabled,
                apply_to_movies=apply_to_movies,
                apply_to_series=apply_to_series,
                conditions_json=conditions_json,
                is_custom=existing.is_custom,
            )
        )
        update_rule(self.conn, rule)
        self.conn.commit()
        logger.info("Updated rule %d '%s'", rule_id, rule.name)
        self._regenerate()
        return rule

    def delete_rule(self, rule_id: int) -> None:
        """Delete a custom rule and regenerate.

        Raises:
            RuleNotFoundError: If the ID does not exist.
            ProtectedRuleError: If the rule is built in.
        """
        rule = self.get_rule(rule_id)
        if not rule.is_custom:
            raise ProtectedRuleError(rule.name)
        delete_rule(self.conn, rule_id)
        self.conn.commit()
        logger.info("Deleted rule %d '%s'", rule_id, rule.name)
        self._regenerate()

    def set_enabled(self, rule_id: int, enabled: bool) -> Rule:
        """Enable or disable a rule and regenerate.

        Raises:
            RuleNotFoundError: If the ID does not exist.
        """
        rule = self.get_rule(rule_id)
        set_rule_enabled(self.conn, rule_id, enabled)
        self.conn.commit()
        rule.enabled = enabled
        logger.info(
            "%s rule %d '%s'", "Enabled" if enabled else "Disabled", rule_id, rule.name
        )
        self._regenerate()
        return rule

    def import_rules(self, rules: Sequence[Rule]) -> list[Rule]:
        """Add rules (e.g. loaded from a rule file) as custom rules.

        All rules are validated before any is stored; a single
        regeneration pass runs afterwards.

        Raises:
            RuleValidationError: If any rule is invalid.
        """
        normalized = [_normalize_rule(rule) for rule in rules]
        for rule in normalized:
            rule.id = None
            rule.is_custom = True
        try:
            for rule in normalized:
                rule.id = insert_rule(self.conn, rule)
            self.conn.commit()
        except sqlite3.Error:
            self.conn.rollback()
            raise
        logger.info("Imported %d rule(s)", len(normalized))
        if normalized:
            self._regenerate()
        return normalized
