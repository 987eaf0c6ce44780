"""Types for retention rules and their conditions.

Field names, operators, value types and logical links are closed enums.
Conditions keep the raw strings read from the wire so that rules with
unrecognised names survive an edit round-trip unchanged; the evaluator maps
them onto the enums and treats anything unknown as a non-match.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

# A value extracted from a media item or coerced from a condition.
# None means absent. bool is checked before int/float wherever it matters,
# since bool is a subclass of int.
FieldValue = int | float | str | bool | datetime | None


class _NamedEnum(Enum):
    """Enum with a lenient lookup that returns None for unknown names."""

    @classmethod
    def lookup(cls, name: str | None):
        if name is None:
            return None
        try:
            return cls(name)
        except ValueError:
            return None


class MediaField(_NamedEnum):
    """Symbolic media fields a condition can test."""

    LAST_WATCHED = "lastWatched"
    ADDED = "added"
    REQUESTED_DATE = "requestedDate"
    REQUESTED_BY = "requestedBy"
    WATCHED_BY = "watchedBy"
    SIZE_ON_DISK = "sizeOnDisk"
    TOTAL_SIZE = "totalSize"
    YEAR = "year"
    MONITORED = "monitored"
    WATCH_COUNT = "watchCount"
    TITLE = "title"
    QUALITY = "quality"
    EPISODE_COUNT = "episodeCount"


class Operator(_NamedEnum):
    """Comparison operators.

    Note that CONTAINS/NOT_CONTAINS are whole-string, case-insensitive
    matches; the *_PARTIAL variants are substring matches.
    """

    BIGGER = "bigger"
    SMALLER = "smaller"
    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    CONTAINS = "contains"
    NOT_CONTAINS = "not_contains"
    CONTAINS_PARTIAL = "contains_partial"
    NOT_CONTAINS_PARTIAL = "not_contains_partial"
    BEFORE = "before"
    AFTER = "after"
    IN_LAST = "in_last"
    IN_NEXT = "in_next"


class ValueType(_NamedEnum):
    """How a condition's raw value string is coerced before comparison."""

    CUSTOM_DAYS = "customDays"
    CUSTOM_NUMBER = "customNumber"
    CUSTOM_DATE = "customDate"
    CUSTOM_TEXT = "customText"
    BOOLEAN = "boolean"
    NULL = "null"


class LogicalOperator(_NamedEnum):
    """Link from one condition's result to the next one's."""

    AND = "AND"
    OR = "OR"


@dataclass(frozen=True)
class Condition:
    """One comparison clause of a rule.

    logical_operator states how this condition's result combines with the
    next condition's result. It is ignored on the last condition.
    """

    field: str
    operator: str
    value: str
    value_type: str
    logical_operator: str | None = None


@dataclass
class Rule:
    """A retention rule as stored in the database.

    conditions_json holds the raw condition array; it is parsed per
    generation pass so that one malformed rule cannot break the others.
    """

    id: int | None
    name: str
    description: str = ""
    enabled: bool = True
    apply_to_movies: bool = True
    apply_to_series: bool = True
    conditions_json: str = "[]"
    is_custom: bool = False
