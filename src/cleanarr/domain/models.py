"""Domain models for Cleanarr.

These dataclasses mirror the catalog synced from Radarr, Sonarr, Tautulli
and Overseerr. All datetimes are timezone-aware UTC.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime

from .enums import MediaType


@dataclass(frozen=True)
class WatchEntry:
    """One play of a movie or episode by a user on a calendar day."""

    user: str
    date: date


@dataclass
class Movie:
    """A movie from the Radarr catalog, enriched with watch and request data."""

    id: int | None
    radarr_id: int
    title: str
    year: int
    added: datetime
    size_on_disk: int = 0
    quality: str = "Unknown"
    requested_date: datetime | None = None
    requested_by: str | None = None
    last_watched: datetime | None = None
    watched_by: str | None = None
    # Deduplicated by user + day, oldest first
    watch_history: list[WatchEntry] = field(default_factory=list)
    folder_path: str = ""
    monitored: bool = True
    poster_url: str | None = None
    tmdb_id: int | None = None


@dataclass
class Series:
    """A series from the Sonarr catalog."""

    id: int | None
    sonarr_id: int
    title: str
    year: int
    added: datetime
    total_size: int = 0
    requested_date: datetime | None = None
    requested_by: str | None = None
    monitored: bool = True
    poster_url: str | None = None
    tmdb_id: int | None = None


@dataclass
class Episode:
    """An episode with a file on disk, owned by a Series."""

    id: int | None
    series_id: int
    sonarr_episode_id: int
    season_number: int
    episode_number: int
    title: str = ""
    episode_file_id: int = 0
    quality: str = "Unknown"
    size_on_disk: int = 0
    air_date: datetime | None = None
    last_watched: datetime | None = None
    watched_by: str | None = None
    watch_history: list[WatchEntry] = field(default_factory=list)
    file_path: str = ""


@dataclass(frozen=True)
class SeriesWithEpisodes:
    """A series paired with its full episode list for rule evaluation."""

    series: Series
    episodes: tuple[Episode, ...] = ()


@dataclass
class Suggestion:
    """A generated recommendation to delete one movie or series.

    Each suggestion is attributable to exactly one rule. Dismissed
    suggestions are kept as an audit trail.
    """

    id: int | None
    media_type: MediaType
    media_id: int
    title: str
    year: int | None
    size: int
    rule_name: str
    reason: str
    created_at: datetime
    dismissed: bool = False
    poster_url: str | None = None

    @property
    def key(self) -> tuple[MediaType, int, str]:
        """Identity of the media + rule pair this suggestion is about."""
        return (self.media_type, self.media_id, self.rule_name)
