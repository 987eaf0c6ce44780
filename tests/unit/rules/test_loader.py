"""Unit tests for YAML rule files."""

import json
from pathlib import Path

import pytest
import yaml

from cleanarr.rules.exceptions import RuleValidationError
from cleanarr.rules.loader import (
    export_rules,
    load_rules,
    load_rules_from_dict,
    rules_to_dict,
)
from cleanarr.rules.types import Rule

RULE_FILE = """\
schema_version: 1
rules:
  - name: Old remuxes
    description: Large files nobody watched this year
    apply_to_series: false
    conditions:
      - field: sizeOnDisk
        operator: bigger
        value: "40000000000"
        valueType: customNumber
        logicalOperator: AND
      - field: lastWatched
        operator: before
        value: 365
        valueType: customDays
"""


class TestLoadRules:
    """Tests for load_rules() and load_rules_from_dict()."""

    def test_load_valid_file(self, tmp_path: Path) -> None:
        path = tmp_path / "rules.yaml"
        path.write_text(RULE_FILE)

        rules = load_rules(path)

        assert len(rules) == 1
        rule = rules[0]
        assert rule.id is None
        assert rule.is_custom is True
        assert rule.name == "Old remuxes"
        assert rule.apply_to_movies is True
        assert rule.apply_to_series is False
        conditions = json.loads(rule.conditions_json)
        assert conditions[0]["logicalOperator"] == "AND"
        assert conditions[1]["value"] == "365"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_rules(tmp_path / "missing.yaml")

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "rules.yaml"
        path.write_text("")
        with pytest.raises(RuleValidationError, match="empty"):
            load_rules(path)

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "rules.yaml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(RuleValidationError, match="mapping"):
            load_rules(path)

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "rules.yaml"
        path.write_text("rules: [unclosed\n")
        with pytest.raises(RuleValidationError, match="YAML"):
            load_rules(path)

    def test_unknown_key_rejected(self) -> None:
        with pytest.raises(RuleValidationError, match="Rule file validation failed"):
            load_rules_from_dict({"rules": [{"name": "x", "colour": "red"}]})

    def test_empty_name_rejected(self) -> None:
        with pytest.raises(RuleValidationError):
            load_rules_from_dict({"rules": [{"name": "   "}]})

    def test_unsupported_schema_version(self) -> None:
        with pytest.raises(RuleValidationError, match="schema_version"):
            load_rules_from_dict({"schema_version": 2, "rules": []})


class TestExportRules:
    """Tests for rules_to_dict() and export_rules()."""

    def test_export_then_load(self, tmp_path: Path) -> None:
        rule = Rule(
            id=7,
            name="Unmonitored",
            description="Not monitored",
            enabled=False,
            conditions_json='[{"field":"monitored","operator":"equals","value":"false","valueType":"boolean","logicalOperator":null}]',
        )
        path = tmp_path / "out.yaml"

        export_rules([rule], path)
        loaded = load_rules(path)

        assert loaded[0].name == "Unmonitored"
        assert loaded[0].enabled is False
        assert json.loads(loaded[0].conditions_json) == json.loads(rule.conditions_json)

    def test_export_writes_schema_version(self, tmp_path: Path) -> None:
        path = tmp_path / "out.yaml"
        export_rules([], path)
        assert yaml.safe_load(path.read_text()) == {"schema_version": 1, "rules": []}

    def test_rules_to_dict_omits_ids(self) -> None:
        data = rules_to_dict([Rule(id=3, name="r", conditions_json="[]")])
        assert "id" not in data["rules"][0]
        assert data["rules"][0]["conditions"] == []
