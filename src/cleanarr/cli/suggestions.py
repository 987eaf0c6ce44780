"""CLI commands for delete suggestions."""

import json
import logging

import click

from cleanarr.cli.exit_codes import ExitCode
from cleanarr.cli.output import error_exit, get_app_config, get_db_conn
from cleanarr.core import format_file_size, truncate_title
from cleanarr.db.connection import DatabaseLockedError
from cleanarr.domain import Suggestion
from cleanarr.suggestions import (
    SuggestionGenerationError,
    SuggestionNotFoundError,
    SuggestionService,
)
from cleanarr.sync import (
    MediaDeletionService,
    MediaNotFoundError,
    ServiceConnectionError,
    ServiceNotConfiguredError,
)

logger = logging.getLogger(__name__)


def suggestion_to_dict(suggestion: Suggestion) -> dict:
    """Convert a suggestion to a JSON-serializable dict."""
    return {
        "id": suggestion.id,
        "media_type": suggestion.media_type.value,
        "media_id": suggestion.media_id,
        "title": suggestion.title,
        "year": suggestion.year,
        "size": suggestion.size,
        "poster_url": suggestion.poster_url,
        "rule_name": suggestion.rule_name,
        "reason": suggestion.reason,
        "dismissed": suggestion.dismissed,
        "created_at": suggestion.created_at.isoformat(),
    }


@click.group("suggestions")
def suggestions_group() -> None:
    """Generate and act on delete suggestions.

    Examples:

        # Rebuild suggestions from the current catalog and rules
        cleanarr suggestions generate

        # Show current suggestions
        cleanarr suggestions list

        # Hide a suggestion for good
        cleanarr suggestions dismiss 12

        # Delete the suggested media through Radarr/Sonarr
        cleanarr suggestions execute 12 --delete
    """
    pass


@suggestions_group.command("generate")
@click.pass_context
def generate_command(ctx: click.Context) -> None:
    """Rebuild suggestions from the current catalog and enabled rules."""
    conn = get_db_conn(ctx)
    try:
        result = SuggestionService(conn).generate_suggestions()
    except SuggestionGenerationError as e:
        error_exit(str(e), ExitCode.DATABASE_ERROR)

    click.echo(
        f"Generated {result.count} suggestion(s) from "
        f"{len(result.rules_applied)} rule(s)."
    )
    for name in result.rules_skipped:
        click.echo(f"Warning: skipped rule '{name}' (invalid or empty conditions)", err=True)


@suggestions_group.command("list")
@click.option("--all", "include_dismissed", is_flag=True, help="Include dismissed.")
@click.option("--json", "json_output", is_flag=True, help="Output in JSON format.")
@click.pass_context
def list_command(ctx: click.Context, include_dismissed: bool, json_output: bool) -> None:
    """List suggestions, newest first."""
    conn = get_db_conn(ctx)
    suggestions = SuggestionService(conn).list_suggestions(include_dismissed)

    if json_output:
        click.echo(json.dumps([suggestion_to_dict(s) for s in suggestions], indent=2))
        return

    if not suggestions:
        click.echo("No suggestions.")
        return

    click.echo(
        f"{'ID':<6} {'TYPE':<7} {'TITLE':<42} {'YEAR':<5} {'SIZE':>10}  {'RULE'}"
    )
    click.echo("-" * 100)
    for s in suggestions:
        title = truncate_title(s.title, 40)
        if s.dismissed:
            title = click.style(f"{title:<42}", fg="bright_black")
        else:
            title = f"{title:<42}"
        click.echo(
            f"{s.id:<6} {s.media_type.value:<7} {title} {s.year or '':<5} "
            f"{format_file_size(s.size):>10}  {s.rule_name}"
        )
    click.echo(f"\n{len(suggestions)} suggestion(s)")


@suggestions_group.command("dismiss")
@click.argument("suggestion_id", type=int)
@click.pass_context
def dismiss_command(ctx: click.Context, suggestion_id: int) -> None:
    """Dismiss a suggestion so it is not suggested again."""
    conn = get_db_conn(ctx)
    try:
        suggestion = SuggestionService(conn).dismiss_suggestion(suggestion_id)
    except SuggestionNotFoundError as e:
        error_exit(str(e), ExitCode.SUGGESTION_NOT_FOUND)
    click.echo(f"Dismissed: {suggestion.title} ({suggestion.rule_name})")


@suggestions_group.command("execute")
@click.argument("suggestion_id", type=int)
@click.option(
    "--delete",
    "delete_media",
    is_flag=True,
    help="Delete the media and its files through Radarr/Sonarr.",
)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation.")
@click.pass_context
def execute_command(
    ctx: click.Context, suggestion_id: int, delete_media: bool, yes: bool
) -> None:
    """Act on a suggestion.

    Without --delete the suggestion is only marked as handled and its
    media reference is printed.
    """
    conn = get_db_conn(ctx)
    service = SuggestionService(conn)
    try:
        suggestion = service.get_suggestion(suggestion_id)
    except SuggestionNotFoundError as e:
        error_exit(str(e), ExitCode.SUGGESTION_NOT_FOUND)

    if delete_media and not yes:
        click.confirm(
            f"Delete {suggestion.media_type.value.lower()} '{suggestion.title}' "
            "and its files?",
            abort=True,
        )

    if not delete_media:
        service.execute_suggestion(suggestion_id)
        click.echo(
            f"{suggestion.media_type.value} {suggestion.media_id}: "
            f"{suggestion.title} is ready to delete"
        )
        return

    # Deleting the media also removes its suggestions
    deletion = MediaDeletionService(conn, get_app_config(ctx))
    try:
        result = deletion.delete(suggestion.media_type, suggestion.media_id)
    except MediaNotFoundError as e:
        error_exit(str(e), ExitCode.MEDIA_NOT_FOUND)
    except ServiceNotConfiguredError as e:
        error_exit(str(e), ExitCode.SERVICE_NOT_CONFIGURED)
    except ServiceConnectionError as e:
        error_exit(str(e), ExitCode.SERVICE_ERROR)
    except DatabaseLockedError as e:
        error_exit(str(e), ExitCode.DATABASE_LOCKED)

    click.echo(f"Deleted: {result.title}")
    if result.request_removed:
        click.echo("Removed the matching Overseerr request.")
