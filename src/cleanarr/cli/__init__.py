"""CLI module for Cleanarr."""

import atexit
import logging
import sqlite3
from pathlib import Path

import click

from cleanarr.config import get_config
from cleanarr.db.connection import open_connection
from cleanarr.db.schema import create_schema
from cleanarr.logging import configure_logging

_db_conn: sqlite3.Connection | None = None
_atexit_registered: bool = False

logger = logging.getLogger(__name__)


def _cleanup_db_connection() -> None:
    """Close the CLI database connection on exit."""
    global _db_conn
    if _db_conn is not None:
        _db_conn.close()
        _db_conn = None


def _get_db_connection(db_path: Path) -> sqlite3.Connection | None:
    """Open the database for CLI use and make sure the schema exists.

    The connection lives for the whole process and is closed by an
    atexit handler.

    Returns:
        Database connection or None if connection fails.
    """
    global _db_conn, _atexit_registered

    if _db_conn is not None:
        return _db_conn

    try:
        conn = open_connection(db_path)
        create_schema(conn)
    except (sqlite3.Error, OSError) as e:
        logger.warning("Failed to open database %s: %s", db_path, e)
        return None

    _db_conn = conn
    if not _atexit_registered:
        atexit.register(_cleanup_db_connection)
        _atexit_registered = True
    return conn


@click.group()
@click.version_option(package_name="cleanarr")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Config file (default: ~/.cleanarr/config.toml).",
)
@click.option(
    "--db",
    "db_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Database file (default: ~/.cleanarr/cleanarr.db).",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level (default: info).",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Override log file path.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Use JSON log format.",
)
@click.pass_context
def main(
    ctx: click.Context,
    config_path: Path | None,
    db_path: Path | None,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """Cleanarr - Suggest movies and series to delete from your media server."""
    ctx.ensure_object(dict)

    # Tests may pass a prepared config and connection
    if "config" not in ctx.obj:
        try:
            ctx.obj["config"] = get_config(config_path, database_path=db_path)
        except ValueError as e:
            raise click.ClickException(f"Invalid configuration: {e}") from e
    config = ctx.obj["config"]

    configure_logging(
        config.logging.with_overrides(level=log_level, file=log_file, json_format=log_json)
    )

    if "db_conn" not in ctx.obj:
        ctx.obj["db_conn"] = _get_db_connection(config.database_path)


# Defer import to avoid circular dependency
def _register_commands():
    from cleanarr.cli.config import config_group
    from cleanarr.cli.media import media_group
    from cleanarr.cli.rules import rules_group
    from cleanarr.cli.suggestions import suggestions_group
    from cleanarr.cli.sync import sync_group

    main.add_command(config_group)
    main.add_command(media_group)
    main.add_command(rules_group)
    main.add_command(suggestions_group)
    main.add_command(sync_group)


_register_commands()
