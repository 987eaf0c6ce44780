"""Store-backed suggestion service.

Wraps the pure generation pass in a single write transaction: the
catalog and rules are read, the non-dismissed suggestions are replaced,
and the whole pass is committed or rolled back as one unit.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from collections.abc import Callable
from datetime import datetime

from cleanarr.core.datetime_utils import utc_now
from cleanarr.db.queries import (
    delete_active_suggestions,
    dismiss_suggestion,
    get_all_movies,
    get_all_series_with_episodes,
    get_dismissed_keys,
    get_enabled_rules,
    get_suggestion_by_id,
    get_suggestions,
    insert_suggestions,
)
from cleanarr.domain import Suggestion
from cleanarr.suggestions.exceptions import (
    SuggestionGenerationError,
    SuggestionNotFoundError,
)
from cleanarr.suggestions.generator import GenerationResult, generate_suggestions

logger = logging.getLogger(__name__)

# At most one generation pass per process at a time.
_GENERATION_LOCK = threading.Lock()


class SuggestionService:
    """Generate, list, dismiss and execute suggestions.

    Example:
        service = SuggestionService(conn)
        result = service.generate_suggestions()
        print(f"{result.count} suggestions")
    """

    def __init__(
        self,
        conn: sqlite3.Connection,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.conn = conn
        self._clock = clock

    def generate_suggestions(self) -> GenerationResult:
        """Rebuild the non-dismissed suggestion set from the current catalog.

        Returns:
            GenerationResult describing the new set.

        Raises:
            SuggestionGenerationError: If the store cannot be read or
                written. The previous suggestion set is kept.
        """
        with _GENERATION_LOCK:
            if self.conn.in_transaction:
                self.conn.commit()
            try:
                # Write lock up front: reads form a consistent snapshot
                self.conn.execute("BEGIN IMMEDIATE")
                rules = get_enabled_rules(self.conn)
                movies = get_all_movies(self.conn)
                series = get_all_series_with_episodes(self.conn)
                dismissed = get_dismissed_keys(self.conn)

                result = generate_suggestions(
                    rules, movies, series, dismissed=dismissed, now=self._clock()
                )

                removed = delete_active_suggestions(self.conn)
                insert_suggestions(self.conn, result.suggestions)
                self.conn.commit()
            except sqlite3.Error as e:
                self.conn.rollback()
                logger.error("Suggestion generation failed: %s", e)
                raise SuggestionGenerationError(
                    f"Suggestion generation failed: {e}"
                ) from e
            except Exception as e:
                # Never leave the write lock held; the previous set stays.
                self.conn.rollback()
                logger.exception("Suggestion generation failed unexpectedly")
                raise SuggestionGenerationError(
                    f"Suggestion generation failed: {type(e).__name__}: {e}"
                ) from e

        logger.info(
            "Generated %d suggestion(s) (replaced %d, %d rule(s) applied, "
            "%d skipped)",
            result.count,
            removed,
            len(result.rules_applied),
            len(result.rules_skipped),
        )
        return result

    def list_suggestions(self, include_dismissed: bool = False) -> list[Suggestion]:
        """List suggestions, newest first."""
        return get_suggestions(self.conn, include_dismissed=include_dismissed)

    def get_suggestion(self, suggestion_id: int) -> Suggestion:
        """Get a suggestion by ID.

        Raises:
            SuggestionNotFoundError: If the ID does not exist.
        """
        suggestion = get_suggestion_by_id(self.conn, suggestion_id)
        if suggestion is None:
            raise SuggestionNotFoundError(suggestion_id)
        return suggestion

    def dismiss_suggestion(self, suggestion_id: int) -> Suggestion:
        """Mark a suggestion as dismissed.

        Dismissed suggestions are kept and suppress the same media + rule
        pair in later generation passes.

        Raises:
            SuggestionNotFoundError: If the ID does not exist.
        """
        suggestion = self.get_suggestion(suggestion_id)
        dismiss_suggestion(self.conn, suggestion_id)
        self.conn.commit()
        suggestion.dismissed = True
        logger.info(
            "Dismissed suggestion %d (%s '%s')",
            suggestion_id,
            suggestion.media_type.value,
            suggestion.title,
            extra={
                "suggestion_id": suggestion_id,
                "rule": suggestion.rule_name,
                "media_type": suggestion.media_type,
                "media_id": suggestion.media_id,
            },
        )
        return suggestion

    def execute_suggestion(self, suggestion_id: int) -> Suggestion:
        """Mark a suggestion as acted upon and return it.

        The media itself is not deleted here; callers use the returned
        media_type and media_id to delete it.

        Raises:
            SuggestionNotFoundError: If the ID does not exist.
        """
        return self.dismiss_suggestion(suggestion_id)
