"""Media catalog operations for the Cleanarr database.

This module contains database query functions for the synced catalog:
- Movie upsert, lookup, enrichment and delete operations
- Series and episode upsert, lookup, enrichment and delete operations

Catalog upserts key on the Radarr/Sonarr identifiers and only touch
catalog columns; watch history and request info written by later sync
stages are preserved.
"""

import sqlite3
from collections import defaultdict
from collections.abc import Sequence
from datetime import datetime

from cleanarr.core.datetime_utils import to_iso
from cleanarr.domain import Episode, Movie, Series, SeriesWithEpisodes, WatchEntry

from .helpers import (
    _row_to_episode,
    _row_to_movie,
    _row_to_series,
    serialize_watch_history,
)

_MOVIE_COLUMNS = """
    id, radarr_id, title, year, quality, size_on_disk, added,
    requested_date, requested_by, last_watched, watched_by, watch_history,
    folder_path, monitored, poster_url, tmdb_id
"""

_SERIES_COLUMNS = """
    id, sonarr_id, title, year, added, requested_date, requested_by,
    total_size, monitored, poster_url, tmdb_id
"""

_EPISODE_COLUMNS = """
    id, series_id, sonarr_episode_id, episode_file_id, season_number,
    episode_number, title, quality, size_on_disk, air_date, last_watched,
    watched_by, watch_history, file_path
"""


# ==========================================================================
# Movies
# ==========================================================================


def upsert_movie(conn: sqlite3.Connection, movie: Movie) -> int:
    """Insert or update a movie keyed by its Radarr ID.

    Only catalog columns are updated on conflict. An existing poster URL
    or TMDb ID is kept when the new record has none.

    Args:
        conn: Database connection.
        movie: Movie to store.

    Returns:
        The database ID of the movie.

    Note:
        This function does NOT commit. Caller must manage transactions.
    """
    conn.execute(
        """
        INSERT INTO movies (
            radarr_id, title, year, quality, size_on_disk, added,
            folder_path, monitored, poster_url, tmdb_id
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        ON CONFLICT(radarr_id) DO UPDATE SET
            title = excluded.title,
            year = excluded.year,
            quality = excluded.quality,
            size_on_disk = excluded.size_on_disk,
            added = excluded.added,
            folder_path = excluded.folder_path,
            monitored = excluded.monitored,
            poster_url = COALESCE(excluded.poster_url, movies.poster_url),
            tmdb_id = COALESCE(excluded.tmdb_id, movies.tmdb_id)
        """,
        (
            movie.radarr_id,
            movie.title,
            movie.year,
            movie.quality,
            movie.size_on_disk,
            to_iso(movie.added),
            movie.folder_path,
            int(movie.monitored),
            movie.poster_url,
            movie.tmdb_id,
        ),
    )
    row = conn.execute(
        "SELECT id FROM movies WHERE radarr_id = ?", (movie.radarr_id,)
    ).fetchone()
    return row["id"]


def get_all_movies(conn: sqlite3.Connection) -> list[Movie]:
    """Get every movie, ordered by title."""
    cursor = conn.execute(
        f"SELECT {_MOVIE_COLUMNS} FROM movies ORDER BY title COLLATE NOCASE, id"
    )
    return [_row_to_movie(row) for row in cursor.fetchall()]


def get_movie_by_id(conn: sqlite3.Connection, movie_id: int) -> Movie | None:
    """Get a movie by database ID.

    Args:
        conn: Database connection.
        movie_id: Database ID of the movie.

    Returns:
        Movie if found, None otherwise.
    """
    row = conn.execute(
        f"SELECT {_MOVIE_COLUMNS} FROM movies WHERE id = ?", (movie_id,)
    ).fetchone()
    return _row_to_movie(row) if row else None


def get_movie_by_radarr_id(conn: sqlite3.Connection, radarr_id: int) -> Movie | None:
    """Get a movie by its Radarr ID."""
    row = conn.execute(
        f"SELECT {_MOVIE_COLUMNS} FROM movies WHERE radarr_id = ?", (radarr_id,)
    ).fetchone()
    return _row_to_movie(row) if row else None


def get_movie_by_title(conn: sqlite3.Connection, title: str) -> Movie | None:
    """Get the first movie with exactly this title.

    Watch history from Tautulli carries titles only, so this is how plays
    are attributed to catalog entries.
    """
    row = conn.execute(
        f"SELECT {_MOVIE_COLUMNS} FROM movies WHERE title = ? ORDER BY id LIMIT 1",
        (title,),
    ).fetchone()
    return _row_to_movie(row) if row else None


def update_movie_watch_history(
    conn: sqlite3.Connection,
    movie_id: int,
    history: Sequence[WatchEntry],
    last_watched: datetime | None,
    watched_by: str | None,
) -> bool:
    """Replace a movie's watch history and last-watched details.

    Args:
        conn: Database connection.
        movie_id: Database ID of the movie.
        history: Deduplicated history, oldest first.
        last_watched: Time of the most recent play.
        watched_by: User of the most recent play.

    Returns:
        True if the movie exists and was updated.

    Note:
        This function does NOT commit. Caller must manage transactions.
    """
    cursor = conn.execute(
        """
        UPDATE movies
        SET watch_history = ?, last_watched = ?, watched_by = ?
        WHERE id = ?
        """,
        (serialize_watch_history(history), to_iso(last_watched), watched_by, movie_id),
    )
    return cursor.rowcount > 0


def update_movie_request(
    conn: sqlite3.Connection,
    movie_id: int,
    requested_by: str | None,
    requested_date: datetime | None,
) -> bool:
    """Record who requested a movie, unless request info is already set.

    Returns:
        True if the request info was written.

    Note:
        This function does NOT commit. Caller must manage transactions.
    """
    cursor = conn.execute(
        """
        UPDATE movies SET requested_by = ?, requested_date = ?
        WHERE id = ? AND requested_by IS NULL
        """,
        (requested_by, to_iso(requested_date), movie_id),
    )
    return cursor.rowcount > 0


def delete_movie(conn: sqlite3.Connection, movie_id: int) -> bool:
    """Delete a movie record.

    Note:
        This function does NOT commit. Caller must manage transactions.
    """
    cursor = conn.execute("DELETE FROM movies WHERE id = ?", (movie_id,))
    return cursor.rowcount > 0


# ==========================================================================
# Series and episodes
# ==========================================================================


def upsert_series(conn: sqlite3.Connection, series: Series) -> int:
    """Insert or update a series keyed by its Sonarr ID.

    Returns:
        The database ID of the series.

    Note:
        This function does NOT commit. Caller must manage transactions.
    """
    conn.execute(
        """
        INSERT INTO series (
            sonarr_id, title, year, added, total_size, monitored,
            poster_url, tmdb_id
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        ON CONFLICT(sonarr_id) DO UPDATE SET
            title = excluded.title,
            year = excluded.year,
            added = excluded.added,
            total_size = excluded.total_size,
            monitored = excluded.monitored,
            poster_url = COALESCE(excluded.poster_url, series.poster_url),
            tmdb_id = COALESCE(excluded.tmdb_id, series.tmdb_id)
        """,
        (
            series.sonarr_id,
            series.title,
            series.year,
            to_iso(series.added),
            series.total_size,
            int(series.monitored),
            series.poster_url,
            series.tmdb_id,
        ),
    )
    row = conn.execute(
        "SELECT id FROM series WHERE sonarr_id = ?", (series.sonarr_id,)
    ).fetchone()
    return row["id"]


def get_all_series(conn: sqlite3.Connection) -> list[Series]:
    """Get every series, ordered by title."""
    cursor = conn.execute(
        f"SELECT {_SERIES_COLUMNS} FROM series ORDER BY title COLLATE NOCASE, id"
    )
    return [_row_to_series(row) for row in cursor.fetchall()]


def get_series_by_id(conn: sqlite3.Connection, series_id: int) -> Series | None:
    """Get a series by database ID.

    Args:
        conn: Database connection.
        series_id: Database ID of the series.

    Returns:
        Series if found, None otherwise.
    """
    row = conn.execute(
        f"SELECT {_SERIES_COLUMNS} FROM series WHERE id = ?", (series_id,)
    ).fetchone()
    return _row_to_series(row) if row else None


def get_series_by_sonarr_id(conn: sqlite3.Connection, sonarr_id: int) -> Series | None:
    """Get a series by its Sonarr ID."""
    row = conn.execute(
        f"SELECT {_SERIES_COLUMNS} FROM series WHERE sonarr_id = ?", (sonarr_id,)
    ).fetchone()
    return _row_to_series(row) if row else None


def get_series_by_title(conn: sqlite3.Connection, title: str) -> Series | None:
    """Get the first series with exactly this title."""
    row = conn.execute(
        f"SELECT {_SERIES_COLUMNS} FROM series WHERE title = ? ORDER BY id LIMIT 1",
        (title,),
    ).fetchone()
    return _row_to_series(row) if row else None


def update_series_request(
    conn: sqlite3.Connection,
    series_id: int,
    requested_by: str | None,
    requested_date: datetime | None,
) -> bool:
    """Record who requested a series, unless request info is already set.

    Note:
        This function does NOT commit. Caller must manage transactions.
    """
    cursor = conn.execute(
        """
        UPDATE series SET requested_by = ?, requested_date = ?
        WHERE id = ? AND requested_by IS NULL
        """,
        (requested_by, to_iso(requested_date), series_id),
    )
    return cursor.rowcount > 0


def delete_series(conn: sqlite3.Connection, series_id: int) -> bool:
    """Delete a series record; its episodes are removed by cascade.

    Note:
        This function does NOT commit. Caller must manage transactions.
    """
    cursor = conn.execute("DELETE FROM series WHERE id = ?", (series_id,))
    return cursor.rowcount > 0


def upsert_episode(conn: sqlite3.Connection, episode: Episode) -> int:
    """Insert or update an episode keyed by its Sonarr episode ID.

    Returns:
        The database ID of the episode.

    Note:
        This function does NOT commit. Caller must manage transactions.
    """
    conn.execute(
        """
        INSERT INTO episodes (
            series_id, sonarr_episode_id, episode_file_id, season_number,
            episode_number, title, quality, size_on_disk, air_date, file_path
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        ON CONFLICT(sonarr_episode_id) DO UPDATE SET
            series_id = excluded.series_id,
            episode_file_id = excluded.episode_file_id,
            season_number = excluded.season_number,
            episode_number = excluded.episode_number,
            title = excluded.title,
            quality = excluded.quality,
            size_on_disk = excluded.size_on_disk,
            air_date = excluded.air_date,
            file_path = excluded.file_path
        """,
        (
            episode.series_id,
            episode.sonarr_episode_id,
            episode.episode_file_id,
            episode.season_number,
            episode.episode_number,
            episode.title,
            episode.quality,
            episode.size_on_disk,
            to_iso(episode.air_date),
            episode.file_path,
        ),
    )
    row = conn.execute(
        "SELECT id FROM episodes WHERE sonarr_episode_id = ?",
        (episode.sonarr_episode_id,),
    ).fetchone()
    return row["id"]


def get_episodes_for_series(conn: sqlite3.Connection, series_id: int) -> list[Episode]:
    """Get a series' episodes ordered by season and episode number."""
    cursor = conn.execute(
        f"""
        SELECT {_EPISODE_COLUMNS} FROM episodes
        WHERE series_id = ?
        ORDER BY season_number, episode_number
        """,
        (series_id,),
    )
    return [_row_to_episode(row) for row in cursor.fetchall()]


def get_episode_by_number(
    conn: sqlite3.Connection,
    series_id: int,
    season_number: int,
    episode_number: int,
) -> Episode | None:
    """Find an episode of a series by season and episode number."""
    row = conn.execute(
        f"""
        SELECT {_EPISODE_COLUMNS} FROM episodes
        WHERE series_id = ? AND season_number = ? AND episode_number = ?
        ORDER BY id LIMIT 1
        """,
        (series_id, season_number, episode_number),
    ).fetchone()
    return _row_to_episode(row) if row else None


def update_episode_watch_history(
    conn: sqlite3.Connection,
    episode_id: int,
    history: Sequence[WatchEntry],
    last_watched: datetime | None,
    watched_by: str | None,
) -> bool:
    """Replace an episode's watch history and last-watched details.

    Note:
        This function does NOT commit. Caller must manage transactions.
    """
    cursor = conn.execute(
        """
        UPDATE episodes
        SET watch_history = ?, last_watched = ?, watched_by = ?
        WHERE id = ?
        """,
        (
            serialize_watch_history(history),
            to_iso(last_watched),
            watched_by,
            episode_id,
        ),
    )
    return cursor.rowcount > 0


def get_all_series_with_episodes(conn: sqlite3.Connection) -> list[SeriesWithEpisodes]:
    """Get every series paired with its episodes.

    Episodes are loaded in a single query and grouped in memory.

    Returns:
        SeriesWithEpisodes in series title order.
    """
    series_list = get_all_series(conn)
    cursor = conn.execute(
        f"""
        SELECT {_EPISODE_COLUMNS} FROM episodes
        ORDER BY series_id, season_number, episode_number
        """
    )
    by_series: dict[int, list[Episode]] = defaultdict(list)
    for row in cursor.fetchall():
        episode = _row_to_episode(row)
        by_series[episode.series_id].append(episode)

    return [
        SeriesWithEpisodes(series=s, episodes=tuple(by_series.get(s.id, ())))
        for s in series_list
    ]


def get_episode_by_id(conn: sqlite3.Connection, episode_id: int) -> Episode | None:
    """Get an episode by database ID."""
    row = conn.execute(
        f"SELECT {_EPISODE_COLUMNS} FROM episodes WHERE id = ?", (episode_id,)
    ).fetchone()
    return _row_to_episode(row) if row else None


def delete_episode(conn: sqlite3.Connection, episode_id: int) -> bool:
    """Delete an episode record.

    Note:
        This function does NOT commit. Caller must manage transactions.
    """
    cursor = conn.execute("DELETE FROM episodes WHERE id = ?", (episode_id,))
    return cursor.rowcount > 0
