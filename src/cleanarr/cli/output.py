"""Shared CLI plumbing: context access and error output."""

from __future__ import annotations

import json
import sqlite3
import sys
from typing import NoReturn

import click

from cleanarr.cli.exit_codes import ExitCode
from cleanarr.config.models import CleanarrConfig


def get_db_conn(ctx: click.Context) -> sqlite3.Connection:
    """Extract the database connection from the Click context.

    Raises:
        click.ClickException: If no connection is available.
    """
    conn = ctx.obj.get("db_conn")
    if conn is None:
        raise click.ClickException("Failed to connect to database.")
    return conn


def get_app_config(ctx: click.Context) -> CleanarrConfig:
    """Extract the loaded configuration from the Click context."""
    config = ctx.obj.get("config")
    if config is None:
        raise click.ClickException("Configuration is not loaded.")
    return config


def error_exit(
    message: str,
    code: ExitCode,
    json_output: bool = False,
) -> NoReturn:
    """Exit with a formatted error message.

    Args:
        message: Error message to display.
        code: Exit code to use.
        json_output: Whether to format output as JSON.
    """
    if json_output:
        click.echo(
            json.dumps(
                {
                    "status": "failed",
                    "error": {"code": code.name, "message": message},
                }
            ),
            err=True,
        )
    else:
        click.echo(f"Error: {message}", err=True)

    sys.exit(int(code))
