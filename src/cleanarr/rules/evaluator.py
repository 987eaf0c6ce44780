"""Rule evaluation: fold a chain of conditions into one verdict per item.

Conditions are combined strictly left to right. The running result is
combined with condition i using the logical operator stored on
condition i-1; there is no operator precedence and no short-circuiting.
A link other than AND/OR leaves the running result unchanged and drops
the condition's own result.

For example, ``A AND B OR C`` evaluates as ``(A and B) or C`` while
``A OR B AND C`` evaluates as ``(A or B) and C``.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import datetime

from cleanarr.domain import Episode, Movie, Series
from cleanarr.rules.conditions import evaluate_condition
from cleanarr.rules.resolver import resolve_movie_field, resolve_series_field
from cleanarr.rules.types import Condition, FieldValue, LogicalOperator


def _fold(
    conditions: Sequence[Condition],
    resolve: Callable[[str], FieldValue],
    now: datetime | None,
) -> bool:
    if not conditions:
        return False

    first = conditions[0]
    result = evaluate_condition(resolve(first.field), first, now)

    for previous, condition in zip(conditions, conditions[1:]):
        condition_result = evaluate_condition(resolve(condition.field), condition, now)
        link = LogicalOperator.lookup(previous.logical_operator)
        if link is LogicalOperator.AND:
            result = result and condition_result
        elif link is LogicalOperator.OR:
            result = result or condition_result

    return result


def evaluate_movie(
    movie: Movie,
    conditions: Sequence[Condition],
    now: datetime | None = None,
) -> bool:
    """Evaluate a rule's conditions against a movie.

    Args:
        movie: The movie to test.
        conditions: Ordered conditions of the rule.
        now: Reference time for date operators (defaults to current UTC).

    Returns:
        True if the rule matches. An empty condition list never matches.
    """
    return _fold(conditions, lambda name: resolve_movie_field(movie, name), now)


def evaluate_series(
    series: Series,
    episodes: Sequence[Episode],
    conditions: Sequence[Condition],
    now: datetime | None = None,
) -> bool:
    """Evaluate a rule's conditions against a series and its episodes.

    Args:
        series: The series to test.
        episodes: All episodes of the series.
        conditions: Ordered conditions of the rule.
        now: Reference time for date operators (defaults to current UTC).

    Returns:
        True if the rule matches. An empty condition list never matches.
    """
    return _fold(
        conditions,
        lambda name: resolve_series_field(series, episodes, name),
        now,
    )
