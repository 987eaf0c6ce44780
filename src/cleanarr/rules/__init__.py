"""Retention rule engine.

Evaluates user-configurable rules against media items. This package only
contains the pure evaluation pieces; rule persistence lives in
cleanarr.rules.service.

Usage:
    from cleanarr.rules import evaluate_movie, parse_conditions

    conditions = parse_conditions(rule.conditions_json, rule.name)
    if evaluate_movie(movie, conditions):
        ...
"""

from cleanarr.rules.coercion import coerce_value
from cleanarr.rules.conditions import evaluate_condition, stringify_value
from cleanarr.rules.evaluator import evaluate_movie, evaluate_series
from cleanarr.rules.exceptions import (
    ConditionParseError,
    ProtectedRuleError,
    RuleError,
    RuleNotFoundError,
    RuleValidationError,
)
from cleanarr.rules.parsing import parse_conditions, serialize_conditions
from cleanarr.rules.resolver import resolve_movie_field, resolve_series_field
from cleanarr.rules.types import (
    Condition,
    FieldValue,
    LogicalOperator,
    MediaField,
    Operator,
    Rule,
    ValueType,
)

__all__ = [
    # Types
    "Condition",
    "FieldValue",
    "LogicalOperator",
    "MediaField",
    "Operator",
    "Rule",
    "ValueType",
    # Evaluation
    "coerce_value",
    "evaluate_condition",
    "evaluate_movie",
    "evaluate_series",
    "resolve_movie_field",
    "resolve_series_field",
    "stringify_value",
    # Wire format
    "parse_conditions",
    "serialize_conditions",
    # Exceptions
    "ConditionParseError",
    "ProtectedRuleError",
    "RuleError",
    "RuleNotFoundError",
    "RuleValidationError",
]
