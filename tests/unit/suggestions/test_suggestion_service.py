"""Unit tests for SuggestionService against an in-memory database."""

import sqlite3
from unittest.mock import MagicMock, patch

import pytest
from factories import NOW, days_ago, make_movie

from cleanarr.db.queries import (
    get_suggestions,
    insert_rule,
    update_movie_watch_history,
    upsert_movie,
)
from cleanarr.domain import MediaType
from cleanarr.rules.parsing import serialize_conditions
from cleanarr.rules.types import Condition, Rule
from cleanarr.suggestions import (
    SuggestionGenerationError,
    SuggestionNotFoundError,
    SuggestionService,
)


def add_rule(conn, name: str, *conditions: Condition, **overrides) -> int:
    rule = Rule(
        id=None,
        name=name,
        description=f"{name} reason",
        conditions_json=serialize_conditions(conditions),
        is_custom=True,
        **overrides,
    )
    rule_id = insert_rule(conn, rule)
    conn.commit()
    return rule_id


def add_watched_movie(conn, days: int, **overrides) -> int:
    movie_id = upsert_movie(conn, make_movie(id=None, **overrides))
    update_movie_watch_history(conn, movie_id, [], days_ago(days), "alice")
    conn.commit()
    return movie_id


@pytest.fixture
def service(empty_rules_db) -> SuggestionService:
    return SuggestionService(empty_rules_db, clock=lambda: NOW)


class TestGenerate:
    """Tests for generate_suggestions()."""

    def test_generate_stores_suggestions(self, empty_rules_db, service) -> None:
        add_rule(empty_rules_db, "Stale", Condition("lastWatched", "before", "180", "customDays"))
        movie_id = add_watched_movie(empty_rules_db, 200)

        result = service.generate_suggestions()

        assert result.count == 1
        stored = service.list_suggestions()
        assert len(stored) == 1
        assert stored[0].media_id == movie_id
        assert stored[0].media_type is MediaType.MOVIE
        assert stored[0].created_at == NOW

    def test_generate_is_idempotent(self, empty_rules_db, service) -> None:
        add_rule(empty_rules_db, "Old", Condition("year", "smaller", "2000", "customNumber"))
        add_watched_movie(empty_rules_db, 10)

        service.generate_suggestions()
        first = [(s.media_id, s.rule_name) for s in service.list_suggestions()]
        service.generate_suggestions()
        second = [(s.media_id, s.rule_name) for s in service.list_suggestions()]

        assert first == second
        assert len(second) == 1

    def test_rule_change_replaces_suggestions(self, empty_rules_db, service) -> None:
        rule_id = add_rule(
            empty_rules_db, "Old", Condition("year", "smaller", "2000", "customNumber")
        )
        add_watched_movie(empty_rules_db, 10)
        service.generate_suggestions()

        empty_rules_db.execute(
            "UPDATE suggestion_rules SET enabled = 0 WHERE id = ?", (rule_id,)
        )
        empty_rules_db.commit()
        service.generate_suggestions()

        assert service.list_suggestions() == []

    def test_dismissed_suggestion_not_resurrected(self, empty_rules_db, service) -> None:
        add_rule(empty_rules_db, "Old", Condition("year", "smaller", "2000", "customNumber"))
        add_watched_movie(empty_rules_db, 10)
        service.generate_suggestions()
        suggestion = service.list_suggestions()[0]

        service.dismiss_suggestion(suggestion.id)
        result = service.generate_suggestions()

        assert result.count == 0
        assert service.list_suggestions() == []
        history = service.list_suggestions(include_dismissed=True)
        assert [s.id for s in history] == [suggestion.id]
        assert history[0].dismissed is True

    def test_store_failure_rolls_back(self) -> None:
        conn = MagicMock()
        conn.in_transaction = False
        conn.execute.side_effect = sqlite3.OperationalError("disk I/O error")

        with pytest.raises(SuggestionGenerationError, match="disk I/O error"):
            SuggestionService(conn).generate_suggestions()

        conn.rollback.assert_called_once()
        conn.commit.assert_not_called()

    def test_failed_pass_keeps_previous_set(self, empty_rules_db, service) -> None:
        add_rule(empty_rules_db, "Old", Condition("year", "smaller", "2000", "customNumber"))
        add_watched_movie(empty_rules_db, 10)
        service.generate_suggestions()

        empty_rules_db.execute("DROP TABLE episodes")
        empty_rules_db.commit()
        with pytest.raises(SuggestionGenerationError):
            service.generate_suggestions()

        assert len(get_suggestions(empty_rules_db)) == 1

    def test_unexpected_error_rolls_back(self, empty_rules_db, service) -> None:
        """Any failure inside the pass releases the transaction and keeps the set."""
        add_rule(empty_rules_db, "Old", Condition("year", "smaller", "2000", "customNumber"))
        add_watched_movie(empty_rules_db, 10)
        service.generate_suggestions()

        with patch(
            "cleanarr.suggestions.service.generate_suggestions",
            side_effect=RuntimeError("evaluation blew up"),
        ):
            with pytest.raises(SuggestionGenerationError, match="RuntimeError"):
                service.generate_suggestions()

        assert empty_rules_db.in_transaction is False
        assert len(get_suggestions(empty_rules_db)) == 1

    def test_out_of_range_date_rule_is_harmless(self, empty_rules_db, service) -> None:
        add_rule(
            empty_rules_db,
            "Far",
            Condition("added", "before", "9999-12-31T23:00:00-05:00", "customDate"),
        )
        add_rule(empty_rules_db, "Old", Condition("year", "smaller", "2000", "customNumber"))
        add_watched_movie(empty_rules_db, 10)

        result = service.generate_suggestions()

        assert "Old" in [s.rule_name for s in result.suggestions]
        assert empty_rules_db.in_transaction is False


class TestDismissAndExecute:
    """Tests for dismiss_suggestion() and execute_suggestion()."""

    def test_dismiss_unknown(self, service) -> None:
        with pytest.raises(SuggestionNotFoundError, match="Suggestion not found: 5"):
            service.dismiss_suggestion(5)

    def test_execute_marks_dismissed(self, empty_rules_db, service) -> None:
        add_rule(empty_rules_db, "Old", Condition("year", "smaller", "2000", "customNumber"))
        movie_id = add_watched_movie(empty_rules_db, 10)
        service.generate_suggestions()
        suggestion_id = service.list_suggestions()[0].id

        executed = service.execute_suggestion(suggestion_id)

        assert executed.media_id == movie_id
        assert executed.dismissed is True
        assert service.get_suggestion(suggestion_id).dismissed is True
