"""CLI commands for catalog sync."""

import logging
import time

import click

from cleanarr.cli.exit_codes import ExitCode
from cleanarr.cli.output import error_exit, get_app_config, get_db_conn
from cleanarr.config import SERVICE_NAMES
from cleanarr.suggestions import SuggestionGenerationError
from cleanarr.sync import (
    MediaSyncService,
    OverseerrClient,
    RadarrClient,
    ServiceAuthError,
    ServiceConnectionError,
    ServiceNotConfiguredError,
    SonarrClient,
    SyncResult,
    TautulliClient,
)

logger = logging.getLogger(__name__)

_CLIENTS = {
    "radarr": RadarrClient,
    "sonarr": SonarrClient,
    "tautulli": TautulliClient,
    "overseerr": OverseerrClient,
}


def _print_result(result: SyncResult) -> None:
    click.echo(
        f"Synced {result.movies} movie(s), {result.series} series, "
        f"{result.episodes} episode(s)."
    )
    click.echo(
        f"Watch history: {result.movies_watched} movie(s), "
        f"{result.episodes_watched} episode(s). "
        f"Requests matched: {result.requests_matched}."
    )
    for name in result.skipped:
        click.echo(f"Skipped {name} (not configured)")
    for name, message in result.errors.items():
        click.echo(click.style(f"{name} failed: {message}", fg="red"), err=True)
    if result.suggestions is not None:
        click.echo(f"Generated {result.suggestions.count} suggestion(s).")


def _sync_once(ctx: click.Context) -> SyncResult:
    service = MediaSyncService(get_db_conn(ctx), get_app_config(ctx))
    try:
        return service.sync_all()
    except SuggestionGenerationError as e:
        error_exit(str(e), ExitCode.DATABASE_ERROR)
    finally:
        service.close()


@click.group("sync")
def sync_group() -> None:
    """Sync the local catalog from Radarr, Sonarr, Tautulli and Overseerr.

    Examples:

        # Sync once and regenerate suggestions
        cleanarr sync run

        # Keep syncing every six hours
        cleanarr sync run --every 360

        # Check the Radarr URL and API key
        cleanarr sync test radarr
    """
    pass


@sync_group.command("run")
@click.option(
    "--every",
    "every",
    type=click.IntRange(min=1),
    default=None,
    metavar="MINUTES",
    help="Repeat the sync every MINUTES until interrupted.",
)
@click.pass_context
def run_command(ctx: click.Context, every: int | None) -> None:
    """Sync all configured services, then regenerate suggestions.

    A service that fails is reported and the remaining services still
    sync. Without --every the exit code is non-zero if any service failed.
    """
    if every is None:
        result = _sync_once(ctx)
        _print_result(result)
        if not result.success:
            ctx.exit(int(ExitCode.SERVICE_ERROR))
        return

    logger.info("Syncing every %d minute(s)", every)
    try:
        while True:
            _print_result(_sync_once(ctx))
            click.echo(f"Next sync in {every} minute(s).")
            time.sleep(every * 60)
    except KeyboardInterrupt:
        click.echo("\nStopped.")
        ctx.exit(int(ExitCode.INTERRUPTED))


@sync_group.command("test")
@click.argument("service", type=click.Choice(SERVICE_NAMES, case_sensitive=False))
@click.pass_context
def test_command(ctx: click.Context, service: str) -> None:
    """Check the connection and API key of one service."""
    service = service.lower()
    config = get_app_config(ctx).get_service(service)
    try:
        client = _CLIENTS[service](config)
    except ServiceNotConfiguredError as e:
        error_exit(str(e), ExitCode.SERVICE_NOT_CONFIGURED)

    try:
        version = client.validate_connection()
    except ServiceAuthError as e:
        error_exit(str(e), ExitCode.SERVICE_AUTH_ERROR)
    except ServiceConnectionError as e:
        error_exit(str(e), ExitCode.SERVICE_ERROR)
    finally:
        client.close()

    click.echo(f"Connected to {service} (version {version})")
