"""CLI commands for suggestion rule management."""

import json
import logging
from pathlib import Path

import click

from cleanarr.cli.exit_codes import ExitCode
from cleanarr.cli.output import error_exit, get_db_conn
from cleanarr.rules.exceptions import (
    ConditionParseError,
    ProtectedRuleError,
    RuleNotFoundError,
    RuleValidationError,
)
from cleanarr.rules.loader import export_rules, load_rules
from cleanarr.rules.parsing import conditions_to_data, parse_conditions
from cleanarr.rules.service import RuleService
from cleanarr.rules.types import Rule
from cleanarr.suggestions import SuggestionGenerationError

logger = logging.getLogger(__name__)


def rule_to_dict(rule: Rule) -> dict:
    """Convert a rule to a JSON-serializable dict.

    Conditions are decoded when valid and passed through as raw text
    otherwise, so broken rules can still be inspected.
    """
    try:
        conditions = conditions_to_data(
            parse_conditions(rule.conditions_json, rule.name)
        )
    except ConditionParseError:
        conditions = rule.conditions_json
    return {
        "id": rule.id,
        "name": rule.name,
        "description": rule.description,
        "enabled": rule.enabled,
        "apply_to_movies": rule.apply_to_movies,
        "apply_to_series": rule.apply_to_series,
        "is_custom": rule.is_custom,
        "conditions": conditions,
    }


def _applies_to(rule: Rule) -> str:
    targets = []
    if rule.apply_to_movies:
        targets.append("movies")
    if rule.apply_to_series:
        targets.append("series")
    return ",".join(targets) or "-"


def _run(action):
    """Run a rule service call, mapping rule errors to exit codes."""
    try:
        return action()
    except RuleNotFoundError as e:
        error_exit(str(e), ExitCode.RULE_NOT_FOUND)
    except ProtectedRuleError as e:
        error_exit(str(e), ExitCode.PROTECTED_RULE)
    except RuleValidationError as e:
        error_exit(str(e), ExitCode.RULE_VALIDATION_ERROR)
    except SuggestionGenerationError as e:
        error_exit(f"Rule saved, but {e}", ExitCode.DATABASE_ERROR)


def _read_conditions(conditions: str | None, conditions_file: Path | None) -> str | None:
    if conditions is not None and conditions_file is not None:
        raise click.UsageError("Use either --conditions or --conditions-file, not both.")
    if conditions_file is not None:
        return conditions_file.read_text()
    return conditions


@click.group("rules")
def rules_group() -> None:
    """Manage suggestion rules.

    Conditions are a JSON array, for example:

        [{"field": "lastWatched", "operator": "before", "value": "180",
          "valueType": "customDays"}]

    Examples:

        # List rules
        cleanarr rules list

        # Add a custom rule for big, unwatched movies
        cleanarr rules add --name "Big and idle" --no-series \\
            --conditions '[{"field": "sizeOnDisk", "operator": "bigger",
            "value": "50000000000", "valueType": "customNumber"}]'

        # Turn on a built-in rule
        cleanarr rules enable 4
    """
    pass


@rules_group.command("list")
@click.option("--json", "json_output", is_flag=True, help="Output in JSON format.")
@click.pass_context
def list_command(ctx: click.Context, json_output: bool) -> None:
    """List all rules."""
    rules = RuleService(get_db_conn(ctx)).list_rules()

    if json_output:
        click.echo(json.dumps([rule_to_dict(r) for r in rules], indent=2))
        return

    click.echo(f"{'ID':<5} {'ENABLED':<8} {'TYPE':<8} {'APPLIES TO':<14} {'NAME'}")
    click.echo("-" * 80)
    for rule in rules:
        enabled = click.style(
            f"{'yes' if rule.enabled else 'no':<8}",
            fg="green" if rule.enabled else "bright_black",
        )
        kind = "custom" if rule.is_custom else "built-in"
        click.echo(
            f"{rule.id:<5} {enabled} {kind:<8} {_applies_to(rule):<14} {rule.name}"
        )


@rules_group.command("show")
@click.argument("rule_id", type=int)
@click.option("--json", "json_output", is_flag=True, help="Output in JSON format.")
@click.pass_context
def show_command(ctx: click.Context, rule_id: int, json_output: bool) -> None:
    """Show one rule with its conditions."""
    rule = _run(lambda: RuleService(get_db_conn(ctx)).get_rule(rule_id))
    data = rule_to_dict(rule)

    if json_output:
        click.echo(json.dumps(data, indent=2))
        return

    click.echo(f"Rule {rule.id}: {rule.name}")
    click.echo(f"  Description: {rule.description or '-'}")
    click.echo(f"  Enabled:     {'yes' if rule.enabled else 'no'}")
    click.echo(f"  Type:        {'custom' if rule.is_custom else 'built-in'}")
    click.echo(f"  Applies to:  {_applies_to(rule)}")
    click.echo("  Conditions:")
    if isinstance(data["conditions"], str):
        click.echo(f"    (invalid) {data['conditions']}")
        return
    for condition in data["conditions"]:
        line = (
            f"    {condition['field']} {condition['operator']} "
            f"{condition['value']!r} ({condition['valueType']})"
        )
        if condition.get("logicalOperator"):
            line += f" {condition['logicalOperator']}"
        click.echo(line)


@rules_group.command("add")
@click.option("--name", required=True, help="Rule name, shown on suggestions.")
@click.option("--description", default="", help="Reason shown on suggestions.")
@click.option("--conditions", default=None, help="Condition JSON array.")
@click.option(
    "--conditions-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="File holding the condition JSON array.",
)
@click.option("--movies/--no-movies", default=True, help="Apply to movies.")
@click.option("--series/--no-series", default=True, help="Apply to series.")
@click.option("--disabled", is_flag=True, help="Create the rule disabled.")
@click.pass_context
def add_command(
    ctx: click.Context,
    name: str,
    description: str,
    conditions: str | None,
    conditions_file: Path | None,
    movies: bool,
    series: bool,
    disabled: bool,
) -> None:
    """Add a custom rule and regenerate suggestions."""
    conditions_json = _read_conditions(conditions, conditions_file)
    if conditions_json is None:
        raise click.UsageError("One of --conditions or --conditions-file is required.")

    service = RuleService(get_db_conn(ctx))
    rule = _run(
        lambda: service.create_rule(
            name=name,
            conditions_json=conditions_json,
            description=description,
            enabled=not disabled,
            apply_to_movies=movies,
            apply_to_series=series,
        )
    )
    click.echo(f"Created rule {rule.id}: {rule.name}")


@rules_group.command("update")
@click.argument("rule_id", type=int)
@click.option("--name", default=None, help="New rule name.")
@click.option("--description", default=None, help="New description.")
@click.option("--conditions", default=None, help="New condition JSON array.")
@click.option(
    "--conditions-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="File holding the new condition JSON array.",
)
@click.option("--movies/--no-movies", default=None, help="Apply to movies.")
@click.option("--series/--no-series", default=None, help="Apply to series.")
@click.pass_context
def update_command(
    ctx: click.Context,
    rule_id: int,
    name: str | None,
    description: str | None,
    conditions: str | None,
    conditions_file: Path | None,
    movies: bool | None,
    series: bool | None,
) -> None:
    """Update a rule; options not given keep their current value."""
    conditions_json = _read_conditions(conditions, conditions_file)
    service = RuleService(get_db_conn(ctx))
    existing = _run(lambda: service.get_rule(rule_id))

    rule = _run(
        lambda: service.update_rule(
            rule_id,
            name=name if name is not None else existing.name,
            conditions_json=(
                conditions_json
                if conditions_json is not None
                else existing.conditions_json
            ),
            description=(
                description if description is not None else existing.description
            ),
            enabled=existing.enabled,
            apply_to_movies=movies if movies is not None else existing.apply_to_movies,
            apply_to_series=series if series is not None else existing.apply_to_series,
        )
    )
    click.echo(f"Updated rule {rule.id}: {rule.name}")


@rules_group.command("delete")
@click.argument("rule_id", type=int)
@click.pass_context
def delete_command(ctx: click.Context, rule_id: int) -> None:
    """Delete a custom rule. Built-in rules can only be disabled."""
    _run(lambda: RuleService(get_db_conn(ctx)).delete_rule(rule_id))
    click.echo(f"Deleted rule {rule_id}")


@rules_group.command("enable")
@click.argument("rule_id", type=int)
@click.pass_context
def enable_command(ctx: click.Context, rule_id: int) -> None:
    """Enable a rule."""
    rule = _run(lambda: RuleService(get_db_conn(ctx)).set_enabled(rule_id, True))
    click.echo(f"Enabled rule {rule.id}: {rule.name}")


@rules_group.command("disable")
@click.argument("rule_id", type=int)
@click.pass_context
def disable_command(ctx: click.Context, rule_id: int) -> None:
    """Disable a rule."""
    rule = _run(lambda: RuleService(get_db_conn(ctx)).set_enabled(rule_id, False))
    click.echo(f"Disabled rule {rule.id}: {rule.name}")


@rules_group.command("import")
@click.argument(
    "rule_file", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.pass_context
def import_command(ctx: click.Context, rule_file: Path) -> None:
    """Import custom rules from a YAML rule file."""
    rules = _run(lambda: load_rules(rule_file))
    imported = _run(lambda: RuleService(get_db_conn(ctx)).import_rules(rules))
    for rule in imported:
        click.echo(f"Imported rule {rule.id}: {rule.name}")
    click.echo(f"{len(imported)} rule(s) imported")


@rules_group.command("export")
@click.argument("rule_file", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--custom-only", is_flag=True, help="Only export custom rules.")
@click.pass_context
def export_command(ctx: click.Context, rule_file: Path, custom_only: bool) -> None:
    """Export rules to a YAML rule file."""
    rules = RuleService(get_db_conn(ctx)).list_rules()
    if custom_only:
        rules = [r for r in rules if r.is_custom]
    try:
        export_rules(rules, rule_file)
    except ConditionParseError as e:
        error_exit(str(e), ExitCode.RULE_VALIDATION_ERROR)
    click.echo(f"Exported {len(rules)} rule(s) to {rule_file}")
