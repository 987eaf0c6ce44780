"""Suggestion generation pass.

Applies every enabled rule to the full catalog and builds the new set of
non-dismissed suggestions. This module is pure: it reads nothing from the
store and writes nothing back. SuggestionService wraps it in a
transaction.

A rule whose condition JSON is malformed or empty is skipped with a
warning; the remaining rules still run. Each matching (media, rule) pair
yields its own suggestion, so one item can be suggested by several rules.
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Sequence
from dataclasses import dataclass, field
from datetime import datetime

from cleanarr.core.datetime_utils import utc_now
from cleanarr.domain import MediaType, Movie, SeriesWithEpisodes, Suggestion
from cleanarr.rules.evaluator import evaluate_movie, evaluate_series
from cleanarr.rules.exceptions import ConditionParseError
from cleanarr.rules.parsing import parse_conditions
from cleanarr.rules.types import Rule

logger = logging.getLogger(__name__)

# (media_type, media_id, rule_name)
SuggestionKey = tuple[MediaType, int, str]


@dataclass
class GenerationResult:
    """Outcome of one generation pass."""

    suggestions: list[Suggestion] = field(default_factory=list)
    rules_applied: list[str] = field(default_factory=list)
    rules_skipped: list[str] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.suggestions)


def _movie_suggestion(movie: Movie, rule: Rule, now: datetime) -> Suggestion:
    return Suggestion(
        id=None,
        media_type=MediaType.MOVIE,
        media_id=movie.id,
        title=movie.title,
        year=movie.year,
        size=movie.size_on_disk,
        poster_url=movie.poster_url,
        rule_name=rule.name,
        reason=rule.description,
        created_at=now,
    )


def _series_suggestion(
    item: SeriesWithEpisodes, rule: Rule, now: datetime
) -> Suggestion:
    series = item.series
    return Suggestion(
        id=None,
        media_type=MediaType.SERIES,
        media_id=series.id,
        title=series.title,
        year=series.year,
        size=series.total_size,
        poster_url=series.poster_url,
        rule_name=rule.name,
        reason=rule.description,
        created_at=now,
    )


def generate_suggestions(
    rules: Sequence[Rule],
    movies: Sequence[Movie],
    series: Sequence[SeriesWithEpisodes],
    dismissed: Collection[SuggestionKey] = frozenset(),
    now: datetime | None = None,
) -> GenerationResult:
    """Evaluate enabled rules against the catalog.

    Args:
        rules: Rules to apply. Disabled rules are ignored.
        movies: All movies.
        series: All series with their episodes.
        dismissed: Keys of dismissed suggestions; matching pairs are not
            emitted again.
        now: Evaluation time and creation timestamp (defaults to current UTC).

    Returns:
        GenerationResult with the new suggestions in rule order, then
        movies before series, then catalog order.
    """
    if now is None:
        now = utc_now()

    result = GenerationResult()
    for rule in rules:
        if not rule.enabled:
            continue

        try:
            conditions = parse_conditions(rule.conditions_json, rule.name)
        except ConditionParseError as e:
            logger.warning(
                "Skipping rule with invalid conditions: %s", e, extra={"rule": rule.name}
            )
            result.rules_skipped.append(rule.name)
            continue

        if not conditions:
            logger.warning(
                "Skipping rule '%s': no conditions", rule.name, extra={"rule": rule.name}
            )
            result.rules_skipped.append(rule.name)
            continue

        if rule.apply_to_movies:
            for movie in movies:
                if (MediaType.MOVIE, movie.id, rule.name) in dismissed:
                    continue
                if evaluate_movie(movie, conditions, now):
                    result.suggestions.append(_movie_suggestion(movie, rule, now))

        if rule.apply_to_series:
            for item in series:
                if (MediaType.SERIES, item.series.id, rule.name) in dismissed:
                    continue
                if evaluate_series(item.series, item.episodes, conditions, now):
                    result.suggestions.append(_series_suggestion(item, rule, now))

        result.rules_applied.append(rule.name)

    logger.debug(
        "Generated %d suggestion(s) from %d rule(s), %d skipped",
        result.count,
        len(result.rules_applied),
        len(result.rules_skipped),
    )
    return result
