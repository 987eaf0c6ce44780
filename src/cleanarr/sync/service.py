"""Catalog sync service.

Pulls the catalog and its enrichment data from the external services,
in this order:

1. Radarr: movies
2. Sonarr: series and their episodes with files
3. Tautulli: watch history for movies and episodes
4. Overseerr: who requested each movie or series
5. Suggestion regeneration

A service without URL and API key is skipped. A failing service is
logged and recorded in the result; the remaining stages still run. Each
stage commits its own writes.
"""

from __future__ import annotations

import logging
import sqlite3
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime

from cleanarr.config.models import CleanarrConfig
from cleanarr.db.queries import (
    get_episode_by_number,
    get_movie_by_radarr_id,
    get_movie_by_title,
    get_series_by_sonarr_id,
    get_series_by_title,
    update_episode_watch_history,
    update_movie_request,
    update_movie_watch_history,
    update_series_request,
    upsert_episode,
    upsert_movie,
    upsert_series,
)
from cleanarr.suggestions.generator import GenerationResult
from cleanarr.suggestions.service import SuggestionService
from cleanarr.sync.exceptions import ServiceConnectionError
from cleanarr.sync.overseerr import MEDIA_TYPE_MOVIE, MEDIA_TYPE_TV, OverseerrClient
from cleanarr.sync.radarr import RadarrClient
from cleanarr.sync.sonarr import SonarrClient
from cleanarr.sync.tautulli import TautulliClient
from cleanarr.sync.watch_history import summarize_plays

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    """Counts and failures of one sync run."""

    movies: int = 0
    series: int = 0
    episodes: int = 0
    movies_watched: int = 0
    episodes_watched: int = 0
    requests_matched: int = 0
    skipped: list[str] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)
    suggestions: GenerationResult | None = None

    @property
    def success(self) -> bool:
        return not self.errors


class MediaSyncService:
    """Synchronize the local catalog with the configured services.

    Clients may be injected (for tests); otherwise they are created from
    the configuration for each configured service.
    """

    def __init__(
        self,
        conn: sqlite3.Connection,
        config: CleanarrConfig,
        radarr: RadarrClient | None = None,
        sonarr: SonarrClient | None = None,
        tautulli: TautulliClient | None = None,
        overseerr: OverseerrClient | None = None,
        suggestions: SuggestionService | None = None,
    ) -> None:
        self.conn = conn
        self.config = config
        self.radarr = radarr or (
            RadarrClient(config.radarr) if config.radarr.is_configured else None
        )
        self.sonarr = sonarr or (
            SonarrClient(config.sonarr) if config.sonarr.is_configured else None
        )
        self.tautulli = tautulli or (
            TautulliClient(config.tautulli) if config.tautulli.is_configured else None
        )
        self.overseerr = overseerr or (
            OverseerrClient(config.overseerr)
            if config.overseerr.is_configured
            else None
        )
        self.suggestions = suggestions or SuggestionService(conn)

    def close(self) -> None:
        """Close all HTTP clients."""
        for client in (self.radarr, self.sonarr, self.tautulli, self.overseerr):
            if client is not None:
                client.close()

    def _run_stage(self, name: str, client, stage, result: SyncResult) -> None:
        if client is None:
            logger.info("%s not configured, skipping", name, extra={"service": name})
            result.skipped.append(name)
            return
        try:
            stage(result)
            self.conn.commit()
        except (ServiceConnectionError, sqlite3.Error) as e:
            self.conn.rollback()
            logger.error("%s sync failed: %s", name, e, extra={"service": name})
            result.errors[name] = str(e)

    def sync_all(self) -> SyncResult:
        """Run every sync stage, then regenerate suggestions.

        Returns:
            SyncResult with per-stage counts and errors.

        Raises:
            SuggestionGenerationError: If the final regeneration fails.
        """
        result = SyncResult()
        logger.info("Starting media sync")

        self._run_stage("Radarr", self.radarr, self._sync_radarr, result)
        self._run_stage("Sonarr", self.sonarr, self._sync_sonarr, result)
        self._run_stage("Tautulli", self.tautulli, self._sync_tautulli, result)
        self._run_stage("Overseerr", self.overseerr, self._sync_overseerr, result)

        logger.info(
            "Media sync complete: %d movies, %d series, %d episodes, "
            "%d movie and %d episode histories, %d requests matched",
            result.movies,
            result.series,
            result.episodes,
            result.movies_watched,
            result.episodes_watched,
            result.requests_matched,
        )

        if self.config.sync.generate_suggestions:
            result.suggestions = self.suggestions.generate_suggestions()
        return result

    def _sync_radarr(self, result: SyncResult) -> None:
        for movie in self.radarr.get_movies():
            upsert_movie(self.conn, movie)
            result.movies += 1

    def _sync_sonarr(self, result: SyncResult) -> None:
        for series in self.sonarr.get_series():
            series_id = upsert_series(self.conn, series)
            result.series += 1
            try:
                episodes = self.sonarr.get_episodes(series.sonarr_id, series_id)
            except ServiceConnectionError as e:
                logger.warning(
                    "Episode sync failed for series '%s': %s",
                    series.title,
                    e,
                    extra={"service": "Sonarr"},
                )
                continue
            for episode in episodes:
                upsert_episode(self.conn, episode)
                result.episodes += 1

    def _sync_tautulli(self, result: SyncResult) -> None:
        movie_plays: dict[str, list[tuple[str, datetime]]] = defaultdict(list)
        episode_plays: dict[tuple[str, int, int], list[tuple[str, datetime]]] = (
            defaultdict(list)
        )

        for play in self.tautulli.get_history(self.config.sync.history_length):
            if play.is_movie and play.title:
                movie_plays[play.title].append((play.user, play.stopped))
            elif (
                play.is_episode
                and play.grandparent_title
                and play.season_number is not None
                and play.episode_number is not None
            ):
                key = (play.grandparent_title, play.season_number, play.episode_number)
                episode_plays[key].append((play.user, play.stopped))

        for title, plays in movie_plays.items():
            movie = get_movie_by_title(self.conn, title)
            if movie is None:
                logger.debug("No movie titled '%s' for watch history", title)
                continue
            summary = summarize_plays(plays)
            update_movie_watch_history(
                self.conn,
                movie.id,
                summary.history,
                summary.last_watched,
                summary.watched_by,
            )
            result.movies_watched += 1

        for (series_title, season, number), plays in episode_plays.items():
            series = get_series_by_title(self.conn, series_title)
            if series is None:
                continue
            episode = get_episode_by_number(self.conn, series.id, season, number)
            if episode is None:
                continue
            summary = summarize_plays(plays)
            update_episode_watch_history(
                self.conn,
                episode.id,
                summary.history,
                summary.last_watched,
                summary.watched_by,
            )
            result.episodes_watched += 1

    def _sync_overseerr(self, result: SyncResult) -> None:
        for request in self.overseerr.get_requests(self.config.sync.request_take):
            if request.service_id is None:
                logger.debug("Overseerr request %d has no service ID", request.id)
                continue

            if request.media_type == MEDIA_TYPE_MOVIE:
                movie = get_movie_by_radarr_id(self.conn, request.service_id)
                if movie and update_movie_request(
                    self.conn, movie.id, request.requested_by, request.created_at
                ):
                    result.requests_matched += 1
            elif request.media_type == MEDIA_TYPE_TV:
                series = get_series_by_sonarr_id(self.conn, request.service_id)
                if series and update_series_request(
                    self.conn, series.id, request.requested_by, request.created_at
                ):
                    result.requests_matched += 1
