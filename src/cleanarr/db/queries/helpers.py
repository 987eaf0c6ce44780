"""Shared helper functions for database queries.

- Watch history (de)serialization to the JSON column format
- Row mapping functions converting rows to domain dataclasses
"""

from __future__ import annotations

import json
import logging
import sqlite3
from collections.abc import Sequence
from datetime import date

from cleanarr.core.datetime_utils import parse_iso_timestamp, parse_optional_timestamp
from cleanarr.domain import Episode, MediaType, Movie, Series, Suggestion, WatchEntry
from cleanarr.rules.types import Rule

logger = logging.getLogger(__name__)


def serialize_watch_history(history: Sequence[WatchEntry]) -> str | None:
    """Serialize a watch history to JSON, or None when empty."""
    if not history:
        return None
    return json.dumps(
        [{"user": entry.user, "date": entry.date.isoformat()} for entry in history],
        separators=(",", ":"),
    )


def parse_watch_history(raw: str | None) -> list[WatchEntry]:
    """Parse a watch history JSON column.

    Malformed JSON or entries yield an empty history; the problem is
    logged rather than raised so that one bad row cannot break a pass.
    """
    if not raw:
        return []
    try:
        data = json.loads(raw)
        return [
            WatchEntry(user=item.get("user") or "", date=date.fromisoformat(item["date"]))
            for item in data
        ]
    except (ValueError, TypeError, KeyError, AttributeError) as e:
        logger.warning("Ignoring malformed watch history %r: %s", raw[:80], e)
        return []


def _row_to_movie(row: sqlite3.Row) -> Movie:
    return Movie(
        id=row["id"],
        radarr_id=row["radarr_id"],
        title=row["title"],
        year=row["year"],
        quality=row["quality"],
        size_on_disk=row["size_on_disk"],
        added=parse_iso_timestamp(row["added"]),
        requested_date=parse_optional_timestamp(row["requested_date"]),
        requested_by=row["requested_by"],
        last_watched=parse_optional_timestamp(row["last_watched"]),
        watched_by=row["watched_by"],
        watch_history=parse_watch_history(row["watch_history"]),
        folder_path=row["folder_path"],
        monitored=bool(row["monitored"]),
        poster_url=row["poster_url"],
        tmdb_id=row["tmdb_id"],
    )


def _row_to_series(row: sqlite3.Row) -> Series:
    return Series(
        id=row["id"],
        sonarr_id=row["sonarr_id"],
        title=row["title"],
        year=row["year"],
        added=parse_iso_timestamp(row["added"]),
        total_size=row["total_size"],
        requested_date=parse_optional_timestamp(row["requested_date"]),
        requested_by=row["requested_by"],
        monitored=bool(row["monitored"]),
        poster_url=row["poster_url"],
        tmdb_id=row["tmdb_id"],
    )


def _row_to_episode(row: sqlite3.Row) -> Episode:
    return Episode(
        id=row["id"],
        series_id=row["series_id"],
        sonarr_episode_id=row["sonarr_episode_id"],
        episode_file_id=row["episode_file_id"],
        season_number=row["season_number"],
        episode_number=row["episode_number"],
        title=row["title"],
        quality=row["quality"],
        size_on_disk=row["size_on_disk"],
        air_date=parse_optional_timestamp(row["air_date"]),
        last_watched=parse_optional_timestamp(row["last_watched"]),
        watched_by=row["watched_by"],
        watch_history=parse_watch_history(row["watch_history"]),
        file_path=row["file_path"],
    )


def _row_to_rule(row: sqlite3.Row) -> Rule:
    return Rule(
        id=row["id"],
        name=row["name"],
        description=row["description"],
        enabled=bool(row["enabled"]),
        apply_to_movies=bool(row["apply_to_movies"]),
        apply_to_series=bool(row["apply_to_series"]),
        conditions_json=row["conditions_json"],
        is_custom=bool(row["is_custom"]),
    )


def _row_to_suggestion(row: sqlite3.Row) -> Suggestion:
    return Suggestion(
        id=row["id"],
        media_type=MediaType(row["media_type"]),
        media_id=row["media_id"],
        title=row["media_title"],
        year=row["media_year"],
        size=row["media_size"],
        poster_url=row["poster_url"],
        rule_name=row["rule_name"],
        reason=row["reason"],
        dismissed=bool(row["dismissed"]),
        created_at=parse_iso_timestamp(row["created_at"]),
    )
