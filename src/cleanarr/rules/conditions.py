"""Condition evaluation for retention rules.

Evaluates one condition (field value vs. coerced condition value) to a
boolean. Operators are dispatched through an explicit table; unknown
operators evaluate to False.

Key Functions:
    evaluate_condition: Main entry point for condition evaluation
    stringify_value: Textual form used by equals/contains comparisons

Usage:
    from cleanarr.rules.conditions import evaluate_condition
    from cleanarr.rules.types import Condition

    condition = Condition("lastWatched", "before", "180", "customDays")
    matched = evaluate_condition(movie.last_watched, condition)
"""

from __future__ import annotations

import operator
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from cleanarr.core.datetime_utils import MIN_DATE, utc_now
from cleanarr.core.string_utils import compare_strings_ci, contains_ci
from cleanarr.rules.coercion import coerce_value
from cleanarr.rules.types import Condition, FieldValue, Operator

MAX_DATE = datetime.max.replace(tzinfo=timezone.utc)

# Raw condition value that always means "field is absent" for equals.
NULL_LITERAL = "null"


def _is_number(value: FieldValue) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _shift_days(now: datetime, days: int) -> datetime:
    """Return now + days, clamped to the representable date range."""
    try:
        return now + timedelta(days=days)
    except OverflowError:
        return MAX_DATE if days > 0 else MIN_DATE


def stringify_value(value: FieldValue) -> str:
    """Render a value as text for equality and containment checks.

    Integral floats drop their fractional part so that a size of 500 equals
    a configured "500" coerced as a number.
    """
    if isinstance(value, bool):
        return "True" if value else "False"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        return _as_utc(value).isoformat()
    return str(value)


def _compare_numeric(
    actual: FieldValue,
    expected: FieldValue,
    op: Callable[[float, float], bool],
) -> bool:
    if not _is_number(actual) or not _is_number(expected):
        return False
    return op(actual, expected)


def _compare_equals(actual: FieldValue, expected: FieldValue, raw: str) -> bool:
    if raw == NULL_LITERAL:
        return actual is None
    if actual is None and expected is None:
        return True
    if actual is None or expected is None:
        return False
    if isinstance(actual, bool) and isinstance(expected, bool):
        return actual == expected
    return stringify_value(actual) == stringify_value(expected)


def _compare_contains(actual: FieldValue, expected: FieldValue, exact: bool) -> bool:
    if actual is None or expected is None:
        return False
    actual_str = stringify_value(actual)
    expected_str = stringify_value(expected)
    if exact:
        return compare_strings_ci(actual_str, expected_str)
    return contains_ci(actual_str, expected_str)


def _threshold(expected: FieldValue, now: datetime, sign: int) -> datetime | None:
    """Resolve a before/after threshold from a day count or a literal date."""
    if isinstance(expected, bool):
        return None
    if isinstance(expected, int):
        return _shift_days(now, sign * expected)
    if isinstance(expected, datetime):
        return _as_utc(expected)
    return None


def _compare_before(actual: FieldValue, expected: FieldValue, now: datetime) -> bool:
    if not isinstance(actual, datetime):
        return False
    threshold = _threshold(expected, now, -1)
    if threshold is None:
        return False
    return _as_utc(actual) < threshold


def _compare_after(actual: FieldValue, expected: FieldValue, now: datetime) -> bool:
    if not isinstance(actual, datetime):
        return False
    threshold = _threshold(expected, now, 1)
    if threshold is None:
        return False
    return _as_utc(actual) > threshold


def _day_count(expected: FieldValue) -> int | None:
    if isinstance(expected, int) and not isinstance(expected, bool):
        return expected
    return None


def _compare_in_last(actual: FieldValue, expected: FieldValue, now: datetime) -> bool:
    days = _day_count(expected)
    if not isinstance(actual, datetime) or days is None:
        return False
    return _shift_days(now, -days) <= _as_utc(actual) <= now


def _compare_in_next(actual: FieldValue, expected: FieldValue, now: datetime) -> bool:
    days = _day_count(expected)
    if not isinstance(actual, datetime) or days is None:
        return False
    return now <= _as_utc(actual) <= _shift_days(now, days)


# Each handler receives (field value, coerced value, raw value, now).
_OPERATORS: dict[
    Operator, Callable[[FieldValue, FieldValue, str, datetime], bool]
] = {
    Operator.BIGGER: lambda a, e, raw, now: _compare_numeric(a, e, operator.gt),
    Operator.SMALLER: lambda a, e, raw, now: _compare_numeric(a, e, operator.lt),
    Operator.EQUALS: lambda a, e, raw, now: _compare_equals(a, e, raw),
    Operator.NOT_EQUALS: lambda a, e, raw, now: not _compare_equals(a, e, raw),
    Operator.CONTAINS: lambda a, e, raw, now: _compare_contains(a, e, exact=True),
    Operator.NOT_CONTAINS: lambda a, e, raw, now: not _compare_contains(
        a, e, exact=True
    ),
    Operator.CONTAINS_PARTIAL: lambda a, e, raw, now: _compare_contains(
        a, e, exact=False
    ),
    Operator.NOT_CONTAINS_PARTIAL: lambda a, e, raw, now: not _compare_contains(
        a, e, exact=False
    ),
    Operator.BEFORE: lambda a, e, raw, now: _compare_before(a, e, now),
    Operator.AFTER: lambda a, e, raw, now: _compare_after(a, e, now),
    Operator.IN_LAST: lambda a, e, raw, now: _compare_in_last(a, e, now),
    Operator.IN_NEXT: lambda a, e, raw, now: _compare_in_next(a, e, now),
}


def evaluate_condition(
    field_value: FieldValue,
    condition: Condition,
    now: datetime | None = None,
) -> bool:
    """Evaluate a single condition against a resolved field value.

    The condition value is coerced according to its value type, then the
    operator is applied. Date operators compare against ``now``, which
    defaults to the current UTC time at the moment of the call.

    Args:
        field_value: Value resolved from the media item (None if absent).
        condition: The condition to evaluate.
        now: Reference time for relative date operators.

    Returns:
        True if the condition matches. Unknown operators return False.
    """
    op = Operator.lookup(condition.operator)
    handler = _OPERATORS.get(op) if op is not None else None
    if handler is None:
        return False

    expected = coerce_value(condition.value, condition.value_type)
    reference = _as_utc(now) if now is not None else utc_now()
    return handler(field_value, expected, condition.value, reference)
