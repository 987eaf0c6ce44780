"""Database query operations package.

This package provides CRUD operations for all database tables.
Functions are organized by domain but re-exported here for convenience.

Module organization:
- helpers.py: Row mapping functions and watch history (de)serialization
- media.py: Movie, series and episode operations
- rules.py: Suggestion rule operations
- suggestions.py: Suggestion operations

Usage:
    from cleanarr.db.queries import get_all_movies, get_enabled_rules
"""

from .helpers import parse_watch_history, serialize_watch_history

# Media catalog operations
from .media import (
    delete_episode,
    delete_movie,
    delete_series,
    get_all_movies,
    get_all_series,
    get_all_series_with_episodes,
    get_episode_by_id,
    get_episode_by_number,
    get_episodes_for_series,
    get_movie_by_id,
    get_movie_by_radarr_id,
    get_movie_by_title,
    get_series_by_id,
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

# Rule operations
from .rules import (
    delete_rule,
    get_all_rules,
    get_enabled_rules,
    get_rule_by_id,
    insert_rule,
    set_rule_enabled,
    update_rule,
)

# Suggestion operations
from .suggestions import (
    delete_active_suggestions,
    delete_suggestions_for_media,
    dismiss_suggestion,
    get_dismissed_keys,
    get_suggestion_by_id,
    get_suggestions,
    insert_suggestions,
)

__all__ = [
    # Helpers
    "parse_watch_history",
    "serialize_watch_history",
    # Media
    "delete_episode",
    "delete_movie",
    "delete_series",
    "get_all_movies",
    "get_all_series",
    "get_all_series_with_episodes",
    "get_episode_by_id",
    "get_episode_by_number",
    "get_episodes_for_series",
    "get_movie_by_id",
    "get_movie_by_radarr_id",
    "get_movie_by_title",
    "get_series_by_id",
    "get_series_by_sonarr_id",
    "get_series_by_title",
    "update_episode_watch_history",
    "update_movie_request",
    "update_movie_watch_history",
    "update_series_request",
    "upsert_episode",
    "upsert_movie",
    "upsert_series",
    # Rules
    "delete_rule",
    "get_all_rules",
    "get_enabled_rules",
    "get_rule_by_id",
    "insert_rule",
    "set_rule_enabled",
    "update_rule",
    # Suggestions
    "delete_active_suggestions",
    "delete_suggestions_for_media",
    "dismiss_suggestion",
    "get_dismissed_keys",
    "get_suggestion_by_id",
    "get_suggestions",
    "insert_suggestions",
]
