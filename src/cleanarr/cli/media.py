"""CLI commands for the synced media catalog."""

import json
import logging

import click

from cleanarr.cli.exit_codes import ExitCode
from cleanarr.cli.output import error_exit, get_app_config, get_db_conn
from cleanarr.core import format_file_size, truncate_title
from cleanarr.db.connection import DatabaseLockedError
from cleanarr.db.queries import get_all_movies, get_all_series_with_episodes
from cleanarr.domain import Movie, SeriesWithEpisodes
from cleanarr.sync import (
    DeletionResult,
    MediaDeletionService,
    MediaNotFoundError,
    ServiceConnectionError,
    ServiceNotConfiguredError,
)

logger = logging.getLogger(__name__)


def _iso(value) -> str | None:
    return value.isoformat() if value is not None else None


def movie_to_dict(movie: Movie) -> dict:
    """Convert a movie to a JSON-serializable dict."""
    return {
        "id": movie.id,
        "radarr_id": movie.radarr_id,
        "title": movie.title,
        "year": movie.year,
        "quality": movie.quality,
        "size_on_disk": movie.size_on_disk,
        "added": _iso(movie.added),
        "requested_by": movie.requested_by,
        "requested_date": _iso(movie.requested_date),
        "last_watched": _iso(movie.last_watched),
        "watched_by": movie.watched_by,
        "watch_count": len({e.user for e in movie.watch_history if e.user}),
        "monitored": movie.monitored,
        "tmdb_id": movie.tmdb_id,
    }


def series_to_dict(entry: SeriesWithEpisodes) -> dict:
    """Convert a series and its episodes to a JSON-serializable dict."""
    series = entry.series
    watched = [e.last_watched for e in entry.episodes if e.last_watched]
    return {
        "id": series.id,
        "sonarr_id": series.sonarr_id,
        "title": series.title,
        "year": series.year,
        "total_size": series.total_size,
        "added": _iso(series.added),
        "requested_by": series.requested_by,
        "requested_date": _iso(series.requested_date),
        "episodes": len(entry.episodes),
        "last_watched": _iso(max(watched)) if watched else None,
        "monitored": series.monitored,
        "tmdb_id": series.tmdb_id,
    }


def _format_date(value) -> str:
    return value.strftime("%Y-%m-%d") if value is not None else "never"


@click.group("media")
def media_group() -> None:
    """Browse and delete synced media.

    Examples:

        # List movies in the local catalog
        cleanarr media movies

        # Delete a series and its files through Sonarr
        cleanarr media delete-series 7
    """
    pass


@media_group.command("movies")
@click.option("--json", "json_output", is_flag=True, help="Output in JSON format.")
@click.pass_context
def movies_command(ctx: click.Context, json_output: bool) -> None:
    """List movies in the local catalog."""
    movies = get_all_movies(get_db_conn(ctx))

    if json_output:
        click.echo(json.dumps([movie_to_dict(m) for m in movies], indent=2))
        return

    if not movies:
        click.echo("No movies. Run 'cleanarr sync run' first.")
        return

    click.echo(f"{'ID':<6} {'TITLE':<42} {'YEAR':<5} {'SIZE':>10}  {'LAST WATCHED'}")
    click.echo("-" * 80)
    for movie in movies:
        click.echo(
            f"{movie.id:<6} {truncate_title(movie.title, 40):<42} {movie.year:<5} "
            f"{format_file_size(movie.size_on_disk):>10}  "
            f"{_format_date(movie.last_watched)}"
        )
    click.echo(f"\n{len(movies)} movie(s)")


@media_group.command("series")
@click.option("--json", "json_output", is_flag=True, help="Output in JSON format.")
@click.pass_context
def series_command(ctx: click.Context, json_output: bool) -> None:
    """List series in the local catalog."""
    entries = get_all_series_with_episodes(get_db_conn(ctx))

    if json_output:
        click.echo(json.dumps([series_to_dict(e) for e in entries], indent=2))
        return

    if not entries:
        click.echo("No series. Run 'cleanarr sync run' first.")
        return

    click.echo(
        f"{'ID':<6} {'TITLE':<42} {'YEAR':<5} {'EPS':>4} {'SIZE':>10}  {'LAST WATCHED'}"
    )
    click.echo("-" * 86)
    for entry in entries:
        data = series_to_dict(entry)
        last = max(
            (e.last_watched for e in entry.episodes if e.last_watched), default=None
        )
        click.echo(
            f"{entry.series.id:<6} {truncate_title(entry.series.title, 40):<42} "
            f"{entry.series.year:<5} {data['episodes']:>4} "
            f"{format_file_size(entry.series.total_size):>10}  {_format_date(last)}"
        )
    click.echo(f"\n{len(entries)} series")


def _run_deletion(ctx: click.Context, action) -> DeletionResult:
    """Run a deletion, mapping failures to exit codes."""
    service = MediaDeletionService(get_db_conn(ctx), get_app_config(ctx))
    try:
        return action(service)
    except MediaNotFoundError as e:
        error_exit(str(e), ExitCode.MEDIA_NOT_FOUND)
    except ServiceNotConfiguredError as e:
        error_exit(str(e), ExitCode.SERVICE_NOT_CONFIGURED)
    except ServiceConnectionError as e:
        error_exit(str(e), ExitCode.SERVICE_ERROR)
    except DatabaseLockedError as e:
        error_exit(str(e), ExitCode.DATABASE_LOCKED)


def _report(result: DeletionResult) -> None:
    click.echo(f"Deleted: {result.title}")
    if result.request_removed:
        click.echo("Removed the matching Overseerr request.")


@media_group.command("delete-movie")
@click.argument("movie_id", type=int)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation.")
@click.pass_context
def delete_movie_command(ctx: click.Context, movie_id: int, yes: bool) -> None:
    """Delete a movie and its files through Radarr."""
    if not yes:
        click.confirm(f"Delete movie {movie_id} and its files?", abort=True)
    _report(_run_deletion(ctx, lambda s: s.delete_movie(movie_id)))


@media_group.command("delete-series")
@click.argument("series_id", type=int)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation.")
@click.pass_context
def delete_series_command(ctx: click.Context, series_id: int, yes: bool) -> None:
    """Delete a series, its episodes and files through Sonarr."""
    if not yes:
        click.confirm(f"Delete series {series_id} and all its files?", abort=True)
    _report(_run_deletion(ctx, lambda s: s.delete_series(series_id)))


@media_group.command("delete-episode")
@click.argument("episode_id", type=int)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation.")
@click.pass_context
def delete_episode_command(ctx: click.Context, episode_id: int, yes: bool) -> None:
    """Delete a single episode file through Sonarr."""
    if not yes:
        click.confirm(f"Delete the file of episode {episode_id}?", abort=True)
    _report(_run_deletion(ctx, lambda s: s.delete_episode(episode_id)))
