"""Records parsed from Tautulli and Overseerr API responses.

Radarr and Sonarr responses map straight onto the domain Movie, Series
and Episode models; these two services return data that is only used to
enrich them.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class TautulliPlay:
    """One row of Tautulli playback history."""

    media_type: str  # "movie" or "episode"
    title: str
    user: str
    stopped: datetime
    grandparent_title: str | None = None
    season_number: int | None = None
    episode_number: int | None = None

    @property
    def is_movie(self) -> bool:
        return self.media_type == "movie"

    @property
    def is_episode(self) -> bool:
        return self.media_type == "episode"


@dataclass(frozen=True)
class OverseerrRequest:
    """A media request from Overseerr."""

    id: int
    media_type: str  # "movie" or "tv"
    requested_by: str | None
    created_at: datetime | None
    title: str | None = None
    tmdb_id: int | None = None
    # Radarr/Sonarr ID of the requested media
    service_id: int | None = None
