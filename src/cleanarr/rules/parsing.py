"""Condition wire format: parsing and serialization.

Conditions are stored and exchanged as a flat JSON array:

    [{"field": "lastWatched", "operator": "before", "value": "180",
      "valueType": "customDays", "logicalOperator": null}]

Parsing followed by serialize_conditions() reproduces the same keys and
values, so rules survive an edit round-trip. Unknown field, operator and
value-type names are preserved as-is.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from cleanarr.rules.exceptions import ConditionParseError
from cleanarr.rules.types import Condition


class ConditionModel(BaseModel):
    """Pydantic model for one condition object on the wire."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    field: str = ""
    operator: str = ""
    value: str = ""
    value_type: str = Field(default="", alias="valueType")
    logical_operator: str | None = Field(default=None, alias="logicalOperator")

    @field_validator("field", "operator", "value_type", mode="before")
    @classmethod
    def null_to_empty(cls, v: Any) -> Any:
        """Treat explicit nulls like missing names."""
        return "" if v is None else v

    @field_validator("value", mode="before")
    @classmethod
    def scalar_to_string(cls, v: Any) -> Any:
        """Accept numbers and booleans for the value, stored as text."""
        if v is None:
            return ""
        if isinstance(v, bool):
            return "true" if v else "false"
        if isinstance(v, (int, float)):
            return str(v)
        return v

    def to_condition(self) -> Condition:
        return Condition(
            field=self.field,
            operator=self.operator,
            value=self.value,
            value_type=self.value_type,
            logical_operator=self.logical_operator,
        )

    @classmethod
    def from_condition(cls, condition: Condition) -> ConditionModel:
        return cls(
            field=condition.field,
            operator=condition.operator,
            value=condition.value,
            value_type=condition.value_type,
            logical_operator=condition.logical_operator,
        )


_CONDITIONS_ADAPTER = TypeAdapter(list[ConditionModel] | None)


def _format_validation_error(error: ValidationError) -> str:
    """Format a Pydantic validation error into a short message."""
    errors = error.errors()
    if errors:
        first_error = errors[0]
        loc = ".".join(str(x) for x in first_error.get("loc", []))
        msg = first_error.get("msg", str(error))
        if loc:
            return f"Invalid conditions: {loc}: {msg}"
        return f"Invalid conditions: {msg}"
    return f"Invalid conditions: {error}"


def parse_conditions(
    conditions_json: str | None, rule_name: str | None = None
) -> list[Condition]:
    """Parse a rule's condition JSON into Condition objects.

    Args:
        conditions_json: JSON array text. Empty text or JSON null yields [].
        rule_name: Rule name included in error messages.

    Returns:
        Conditions in stored order.

    Raises:
        ConditionParseError: If the JSON is malformed or not an array of
            condition objects.
    """
    if conditions_json is None or not conditions_json.strip():
        return []
    try:
        models = _CONDITIONS_ADAPTER.validate_json(conditions_json)
    except ValidationError as e:
        raise ConditionParseError(_format_validation_error(e), rule_name) from e
    return [model.to_condition() for model in models or []]


def conditions_to_data(conditions: Sequence[Condition]) -> list[dict[str, Any]]:
    """Convert conditions to wire-shaped dicts."""
    return [
        ConditionModel.from_condition(c).model_dump(by_alias=True)
        for c in conditions
    ]


def serialize_conditions(conditions: Sequence[Condition]) -> str:
    """Serialize conditions back to the JSON wire format."""
    return json.dumps(conditions_to_data(conditions), separators=(",", ":"))
