"""Field resolution for media items.

Maps a symbolic field name onto a value taken from a movie, or from a
series and its episodes. Unknown names, and names that do not apply to the
media type (e.g. "episodeCount" on a movie), resolve to None.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence

from cleanarr.domain import Episode, Movie, Series, WatchEntry
from cleanarr.rules.types import FieldValue, MediaField


def count_distinct_watchers(histories: Iterable[Iterable[WatchEntry]]) -> int:
    """Count distinct non-empty users across one or more watch histories."""
    users: set[str] = set()
    for history in histories:
        users.update(entry.user for entry in history if entry.user)
    return len(users)


def _series_last_watched(episodes: Sequence[Episode]):
    watched = [e.last_watched for e in episodes if e.last_watched is not None]
    return max(watched) if watched else None


_MOVIE_FIELDS: dict[MediaField, Callable[[Movie], FieldValue]] = {
    MediaField.LAST_WATCHED: lambda m: m.last_watched,
    MediaField.ADDED: lambda m: m.added,
    MediaField.REQUESTED_DATE: lambda m: m.requested_date,
    MediaField.REQUESTED_BY: lambda m: m.requested_by,
    MediaField.WATCHED_BY: lambda m: m.watched_by,
    MediaField.SIZE_ON_DISK: lambda m: m.size_on_disk,
    MediaField.YEAR: lambda m: m.year,
    MediaField.MONITORED: lambda m: m.monitored,
    MediaField.WATCH_COUNT: lambda m: count_distinct_watchers([m.watch_history]),
    MediaField.TITLE: lambda m: m.title,
    MediaField.QUALITY: lambda m: m.quality,
}

_SERIES_FIELDS: dict[
    MediaField, Callable[[Series, Sequence[Episode]], FieldValue]
] = {
    MediaField.LAST_WATCHED: lambda s, eps: _series_last_watched(eps),
    MediaField.ADDED: lambda s, eps: s.added,
    MediaField.REQUESTED_DATE: lambda s, eps: s.requested_date,
    MediaField.REQUESTED_BY: lambda s, eps: s.requested_by,
    MediaField.TOTAL_SIZE: lambda s, eps: s.total_size,
    MediaField.YEAR: lambda s, eps: s.year,
    MediaField.MONITORED: lambda s, eps: s.monitored,
    MediaField.WATCH_COUNT: lambda s, eps: count_distinct_watchers(
        e.watch_history for e in eps
    ),
    MediaField.TITLE: lambda s, eps: s.title,
    MediaField.EPISODE_COUNT: lambda s, eps: len(eps),
}


def resolve_movie_field(movie: Movie, field_name: str) -> FieldValue:
    """Resolve a field value from a movie.

    Args:
        movie: The movie to read from.
        field_name: Symbolic field name (e.g. "lastWatched").

    Returns:
        The field value, or None if absent or the name is not a movie field.
    """
    field = MediaField.lookup(field_name)
    getter = _MOVIE_FIELDS.get(field) if field is not None else None
    if getter is None:
        return None
    return getter(movie)


def resolve_series_field(
    series: Series, episodes: Sequence[Episode], field_name: str
) -> FieldValue:
    """Resolve a field value from a series.

    lastWatched and watchCount are derived by scanning the full episode
    list: the most recent episode watch, and the distinct users across all
    episode histories.

    Args:
        series: The series to read from.
        episodes: All episodes belonging to the series.
        field_name: Symbolic field name.

    Returns:
        The field value, or None if absent or not a series field.
    """
    field = MediaField.lookup(field_name)
    getter = _SERIES_FIELDS.get(field) if field is not None else None
    if getter is None:
        return None
    return getter(series, episodes)
