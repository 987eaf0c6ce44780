"""CLI command for showing the effective configuration."""

import json
from dataclasses import asdict

import click

from cleanarr.cli.output import get_app_config
from cleanarr.config import SERVICE_NAMES, CleanarrConfig


def _mask(secret: str | None) -> str | None:
    """Hide all but the last four characters of an API key."""
    if not secret:
        return secret
    if len(secret) <= 4:
        return "****"
    return "*" * (len(secret) - 4) + secret[-4:]


def config_to_dict(config: CleanarrConfig) -> dict:
    """Convert the configuration to a dict with API keys masked."""
    data = asdict(config)
    for name in SERVICE_NAMES:
        data[name]["api_key"] = _mask(data[name]["api_key"])
    data["database_path"] = (
        str(config.database_path) if config.database_path else None
    )
    data["logging"]["file"] = (
        str(config.logging.file) if config.logging.file else None
    )
    return data


@click.group("config")
def config_group() -> None:
    """Inspect configuration.

    Settings come from ~/.cleanarr/config.toml, overridden by CLEANARR_*
    environment variables and command-line options.
    """
    pass


@config_group.command("show")
@click.option("--json", "json_output", is_flag=True, help="Output in JSON format.")
@click.pass_context
def show_command(ctx: click.Context, json_output: bool) -> None:
    """Show the effective configuration with API keys masked."""
    config = get_app_config(ctx)
    data = config_to_dict(config)

    if json_output:
        click.echo(json.dumps(data, indent=2))
        return

    click.echo(f"Database: {data['database_path'] or '(default)'}")
    for name in SERVICE_NAMES:
        service = data[name]
        status = "configured" if config.get_service(name).is_configured else "not configured"
        click.echo(f"\n[{name}] {status}")
        click.echo(f"  url:     {service['url'] or '-'}")
        click.echo(f"  api_key: {service['api_key'] or '-'}")
        click.echo(f"  timeout: {service['timeout']}")
    click.echo("\n[sync]")
    for key, value in data["sync"].items():
        click.echo(f"  {key}: {value}")
    click.echo("\n[logging]")
    for key, value in data["logging"].items():
        click.echo(f"  {key}: {value}")
