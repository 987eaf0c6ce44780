"""Rule file loading and export.

Rules can be shared as YAML files:

    schema_version: 1
    rules:
      - name: Old 4K remuxes
        description: Large files nobody watched this year
        apply_to_series: false
        conditions:
          - {field: sizeOnDisk, operator: bigger, value: "40000000000",
             valueType: customNumber, logicalOperator: AND}
          - {field: lastWatched, operator: before, value: "365",
             valueType: customDays}

Loaded rules are always custom rules; built-in rules are only ever
seeded by the database schema.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from cleanarr.rules.exceptions import RuleValidationError
from cleanarr.rules.parsing import (
    ConditionModel,
    conditions_to_data,
    parse_conditions,
    serialize_conditions,
)
from cleanarr.rules.types import Rule

RULE_FILE_SCHEMA_VERSION = 1


class RuleModel(BaseModel):
    """Pydantic model for one rule in a rule file."""

    model_config = ConfigDict(extra="forbid")

    name: str
    description: str = ""
    enabled: bool = True
    apply_to_movies: bool = True
    apply_to_series: bool = True
    conditions: list[ConditionModel] = []

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("rule name must not be empty")
        return v


class RuleFileModel(BaseModel):
    """Pydantic model for a whole rule file."""

    model_config = ConfigDict(extra="forbid")

    schema_version: int = RULE_FILE_SCHEMA_VERSION
    rules: list[RuleModel] = []

    @field_validator("schema_version")
    @classmethod
    def validate_schema_version(cls, v: int) -> int:
        if v != RULE_FILE_SCHEMA_VERSION:
            raise ValueError(
                f"only schema_version {RULE_FILE_SCHEMA_VERSION} is supported"
            )
        return v


def _format_validation_error(error: ValidationError) -> str:
    """Format a Pydantic validation error into a user-friendly message."""
    errors = error.errors()
    if errors:
        first_error = errors[0]
        loc = ".".join(str(x) for x in first_error.get("loc", []))
        msg = first_error.get("msg", str(error))
        if loc:
            return f"Rule file validation failed: {loc}: {msg}"
        return f"Rule file validation failed: {msg}"
    return f"Rule file validation failed: {error}"


def _convert_rule(model: RuleModel) -> Rule:
    return Rule(
        id=None,
        name=model.name,
        description=model.description,
        enabled=model.enabled,
        apply_to_movies=model.apply_to_movies,
        apply_to_series=model.apply_to_series,
        conditions_json=serialize_conditions(
            [c.to_condition() for c in model.conditions]
        ),
        is_custom=True,
    )


def load_rules_from_dict(data: dict[str, Any]) -> list[Rule]:
    """Load and validate rules from a dictionary.

    Args:
        data: Decoded rule file content.

    Returns:
        Custom rules without IDs, in file order.

    Raises:
        RuleValidationError: If the data is not a valid rule file.
    """
    try:
        model = RuleFileModel.model_validate(data)
    except ValidationError as e:
        raise RuleValidationError(_format_validation_error(e)) from e
    return [_convert_rule(rule) for rule in model.rules]


def load_rules(path: Path) -> list[Rule]:
    """Load and validate rules from a YAML file.

    Raises:
        RuleValidationError: If the file is not a valid rule file.
        FileNotFoundError: If the file does not exist.
    """
    if not path.exists():
        raise FileNotFoundError(f"Rule file not found: {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise RuleValidationError(f"Invalid YAML syntax: {e}") from e

    if data is None:
        raise RuleValidationError("Rule file is empty")
    if not isinstance(data, dict):
        raise RuleValidationError("Rule file must be a YAML mapping")

    return load_rules_from_dict(data)


def rules_to_dict(rules: Sequence[Rule]) -> dict[str, Any]:
    """Convert rules to the rule file structure.

    Raises:
        ConditionParseError: If a rule's stored conditions are malformed.
    """
    return {
        "schema_version": RULE_FILE_SCHEMA_VERSION,
        "rules": [
            {
                "name": rule.name,
                "description": rule.description,
                "enabled": rule.enabled,
                "apply_to_movies": rule.apply_to_movies,
                "apply_to_series": rule.apply_to_series,
                "conditions": conditions_to_data(
                    parse_conditions(rule.conditions_json, rule.name)
                ),
            }
            for rule in rules
        ],
    }


def export_rules(rules: Sequence[Rule], path: Path) -> None:
    """Write rules to a YAML rule file."""
    with open(path, "w") as f:
        yaml.safe_dump(rules_to_dict(rules), f, sort_keys=False)
