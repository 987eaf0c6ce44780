"""Media deletion.

Deleting a movie or series removes it from Radarr/Sonarr together with
its files, withdraws the matching Overseerr request when possible, and
finally removes it and its suggestions from the local catalog. If the
Radarr/Sonarr call fails the local catalog is left untouched; an
Overseerr failure is only logged.
"""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass

from cleanarr.config.models import CleanarrConfig
from cleanarr.db.connection import handle_database_locked
from cleanarr.db.queries import (
    delete_episode,
    delete_movie,
    delete_series,
    delete_suggestions_for_media,
    get_episode_by_id,
    get_movie_by_id,
    get_series_by_id,
)
from cleanarr.domain import MediaType
from cleanarr.sync.exceptions import (
    MediaNotFoundError,
    ServiceConnectionError,
)
from cleanarr.sync.overseerr import MEDIA_TYPE_MOVIE, MEDIA_TYPE_TV, OverseerrClient
from cleanarr.sync.radarr import RadarrClient
from cleanarr.sync.sonarr import SonarrClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeletionResult:
    """Outcome of deleting one media item."""

    title: str
    request_removed: bool = False


class MediaDeletionService:
    """Delete media through Radarr/Sonarr and drop it from the catalog."""

    def __init__(
        self,
        conn: sqlite3.Connection,
        config: CleanarrConfig,
        radarr: RadarrClient | None = None,
        sonarr: SonarrClient | None = None,
        overseerr: OverseerrClient | None = None,
    ) -> None:
        self.conn = conn
        self.config = config
        self._radarr = radarr
        self._sonarr = sonarr
        self._overseerr = overseerr

    def _get_radarr(self) -> RadarrClient:
        if self._radarr is None:
            self._radarr = RadarrClient(self.config.radarr)
        return self._radarr

    def _get_sonarr(self) -> SonarrClient:
        if self._sonarr is None:
            self._sonarr = SonarrClient(self.config.sonarr)
        return self._sonarr

    def _remove_request(self, tmdb_id: int | None, media_type: str, title: str) -> bool:
        if tmdb_id is None:
            logger.info("No TMDb ID for '%s', leaving Overseerr requests", title)
            return False
        if self._overseerr is None:
            if not self.config.overseerr.is_configured:
                return False
            self._overseerr = OverseerrClient(self.config.overseerr)
        try:
            return self._overseerr.delete_request_for_media(
                tmdb_id, media_type, take=self.config.sync.request_take
            )
        except ServiceConnectionError as e:
            logger.warning("Could not remove Overseerr request for '%s': %s", title, e)
            return False

    @handle_database_locked
    def delete_movie(self, movie_id: int) -> DeletionResult:
        """Delete a movie and its files.

        Raises:
            MediaNotFoundError: If the movie is not in the catalog.
            ServiceNotConfiguredError: If Radarr is not configured.
            ServiceConnectionError: If Radarr rejects the deletion.
        """
        movie = get_movie_by_id(self.conn, movie_id)
        if movie is None:
            raise MediaNotFoundError("Movie", movie_id)

        radarr = self._get_radarr()
        remote = radarr.get_movie(movie.radarr_id)
        tmdb_id = (remote.tmdb_id if remote else None) or movie.tmdb_id
        radarr.delete_movie(movie.radarr_id, delete_files=True)

        request_removed = self._remove_request(tmdb_id, MEDIA_TYPE_MOVIE, movie.title)

        delete_suggestions_for_media(self.conn, MediaType.MOVIE, movie_id)
        delete_movie(self.conn, movie_id)
        self.conn.commit()
        logger.info(
            "Deleted movie '%s'",
            movie.title,
            extra={"media_type": MediaType.MOVIE, "media_id": movie_id},
        )
        return DeletionResult(title=movie.title, request_removed=request_removed)

    @handle_database_locked
    def delete_series(self, series_id: int) -> DeletionResult:
        """Delete a series, its episodes and files.

        Raises:
            MediaNotFoundError: If the series is not in the catalog.
            ServiceNotConfiguredError: If Sonarr is not configured.
            ServiceConnectionError: If Sonarr rejects the deletion.
        """
        series = get_series_by_id(self.conn, series_id)
        if series is None:
            raise MediaNotFoundError("Series", series_id)

        sonarr = self._get_sonarr()
        remote = sonarr.get_series_by_id(series.sonarr_id)
        tmdb_id = (remote.tmdb_id if remote else None) or series.tmdb_id
        sonarr.delete_series(series.sonarr_id, delete_files=True)

        request_removed = self._remove_request(tmdb_id, MEDIA_TYPE_TV, series.title)

        delete_suggestions_for_media(self.conn, MediaType.SERIES, series_id)
        delete_series(self.conn, series_id)
        self.conn.commit()
        logger.info(
            "Deleted series '%s'",
            series.title,
            extra={"media_type": MediaType.SERIES, "media_id": series_id},
        )
        return DeletionResult(title=series.title, request_removed=request_removed)

    @handle_database_locked
    def delete_episode(self, episode_id: int) -> DeletionResult:
        """Delete a single episode file.

        Raises:
            MediaNotFoundError: If the episode is not in the catalog.
            ServiceNotConfiguredError: If Sonarr is not configured.
            ServiceConnectionError: If Sonarr rejects the deletion.
        """
        episode = get_episode_by_id(self.conn, episode_id)
        if episode is None:
            raise MediaNotFoundError("Episode", episode_id)

        self._get_sonarr().delete_episode_file(episode.episode_file_id)
        delete_episode(self.conn, episode_id)
        self.conn.commit()
        title = f"S{episode.season_number:02d}E{episode.episode_number:02d} {episode.title}"
        logger.info("Deleted episode %s", title)
        return DeletionResult(title=title.strip())

    def delete(self, media_type: MediaType, media_id: int) -> DeletionResult:
        """Delete a movie or series by media type."""
        if media_type is MediaType.MOVIE:
            return self.delete_movie(media_id)
        return self.delete_series(media_id)

