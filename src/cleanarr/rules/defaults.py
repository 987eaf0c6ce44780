"""Built-in retention rules seeded into a new database."""

from __future__ import annotations

from cleanarr.rules.parsing import serialize_conditions
from cleanarr.rules.types import Condition, Rule

DEFAULT_RULES: tuple[Rule, ...] = (
    Rule(
        id=1,
        name="Not Watched (180 days)",
        description="Movies/Series not watched in 180 days",
        enabled=True,
        apply_to_movies=True,
        apply_to_series=True,
        conditions_json=serialize_conditions(
            [Condition("lastWatched", "before", "180", "customDays")]
        ),
    ),
    Rule(
        id=2,
        name="Fully Watched (2+ people)",
        description="Movies watched by 2 or more people",
        enabled=True,
        apply_to_movies=True,
        apply_to_series=False,
        conditions_json=serialize_conditions(
            [Condition("watchCount", "bigger", "2", "customNumber")]
        ),
    ),
    Rule(
        id=3,
        name="Ignored Request (90 days)",
        description="Requested but not watched for 90 days",
        enabled=True,
        apply_to_movies=True,
        apply_to_series=True,
        conditions_json=serialize_conditions(
            [
                Condition("requestedDate", "before", "90", "customDays", "AND"),
                Condition("lastWatched", "equals", "null", "null"),
            ]
        ),
    ),
    Rule(
        id=4,
        name="Unmonitored Cleanup (30 days)",
        description="Unmonitored and not watched for 30 days",
        enabled=False,
        apply_to_movies=True,
        apply_to_series=True,
        conditions_json=serialize_conditions(
            [
                Condition("monitored", "equals", "false", "boolean", "AND"),
                Condition("lastWatched", "before", "30", "customDays"),
            ]
        ),
    ),
)
