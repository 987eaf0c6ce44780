"""Database schema definition for Cleanarr.

Tables:
- movies: Radarr catalog with watch/request enrichment
- series / episodes: Sonarr catalog; episodes cascade with their series
- suggestion_rules: retention rules (conditions stored as JSON text)
- suggestions: generated delete suggestions, dismissed ones kept as history
"""

import sqlite3

from cleanarr.rules.defaults import DEFAULT_RULES

SCHEMA_VERSION = 1

SCHEMA_SQL = """
-- Schema version tracking
CREATE TABLE IF NOT EXISTS _meta (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS movies (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    radarr_id INTEGER UNIQUE NOT NULL,
    title TEXT NOT NULL,
    year INTEGER NOT NULL DEFAULT 0,
    quality TEXT NOT NULL DEFAULT 'Unknown',
    size_on_disk INTEGER NOT NULL DEFAULT 0,
    added TEXT NOT NULL,            -- ISO 8601 UTC timestamp
    requested_date TEXT,
    requested_by TEXT,
    last_watched TEXT,
    watched_by TEXT,
    -- JSON: [{"user": "alice", "date": "2024-12-18"}, ...] oldest first
    watch_history TEXT,
    folder_path TEXT NOT NULL DEFAULT '',
    monitored INTEGER NOT NULL DEFAULT 1,
    poster_url TEXT,
    tmdb_id INTEGER
);

CREATE INDEX IF NOT EXISTS idx_movies_title ON movies(title);

CREATE TABLE IF NOT EXISTS series (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    sonarr_id INTEGER UNIQUE NOT NULL,
    title TEXT NOT NULL,
    year INTEGER NOT NULL DEFAULT 0,
    added TEXT NOT NULL,
    requested_date TEXT,
    requested_by TEXT,
    total_size INTEGER NOT NULL DEFAULT 0,
    monitored INTEGER NOT NULL DEFAULT 1,
    poster_url TEXT,
    tmdb_id INTEGER
);

CREATE INDEX IF NOT EXISTS idx_series_title ON series(title);

CREATE TABLE IF NOT EXISTS episodes (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    series_id INTEGER NOT NULL,
    sonarr_episode_id INTEGER UNIQUE NOT NULL,
    episode_file_id INTEGER NOT NULL DEFAULT 0,
    season_number INTEGER NOT NULL,
    episode_number INTEGER NOT NULL,
    title TEXT NOT NULL DEFAULT '',
    quality TEXT NOT NULL DEFAULT 'Unknown',
    size_on_disk INTEGER NOT NULL DEFAULT 0,
    air_date TEXT,
    last_watched TEXT,
    watched_by TEXT,
    watch_history TEXT,
    file_path TEXT NOT NULL DEFAULT '',
    FOREIGN KEY (series_id) REFERENCES series(id) ON DELETE CASCADE
);

CREATE INDEX IF NOT EXISTS idx_episodes_series_id ON episodes(series_id);
CREATE INDEX IF NOT EXISTS idx_episodes_numbering
    ON episodes(series_id, season_number, episode_number);

CREATE TABLE IF NOT EXISTS suggestion_rules (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    description TEXT NOT NULL DEFAULT '',
    enabled INTEGER NOT NULL DEFAULT 1,
    apply_to_movies INTEGER NOT NULL DEFAULT 1,
    apply_to_series INTEGER NOT NULL DEFAULT 1,
    conditions_json TEXT NOT NULL DEFAULT '[]',
    is_custom INTEGER NOT NULL DEFAULT 0
);

CREATE TABLE IF NOT EXISTS suggestions (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    media_type TEXT NOT NULL,
    media_id INTEGER NOT NULL,
    media_title TEXT NOT NULL,
    media_year INTEGER,
    media_size INTEGER NOT NULL DEFAULT 0,
    poster_url TEXT,
    rule_name TEXT NOT NULL,
    reason TEXT NOT NULL DEFAULT '',
    dismissed INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL,       -- ISO 8601 UTC timestamp
    CONSTRAINT valid_media_type CHECK (media_type IN ('Movie', 'Series'))
);

CREATE INDEX IF NOT EXISTS idx_suggestions_dismissed ON suggestions(dismissed);
CREATE INDEX IF NOT EXISTS idx_suggestions_media
    ON suggestions(media_type, media_id);
"""


def get_schema_version(conn: sqlite3.Connection) -> int | None:
    """Get the current schema version, or None if the schema is missing."""
    try:
        cursor = conn.execute("SELECT value FROM _meta WHERE key = 'schema_version'")
        row = cursor.fetchone()
        return int(row[0]) if row else None
    except sqlite3.OperationalError:
        return None


def _seed_default_rules(conn: sqlite3.Connection) -> None:
    conn.executemany(
        """
        INSERT OR IGNORE INTO suggestion_rules (
            id, name, description, enabled, apply_to_movies, apply_to_series,
            conditions_json, is_custom
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """,
        [
            (
                rule.id,
                rule.name,
                rule.description,
                int(rule.enabled),
                int(rule.apply_to_movies),
                int(rule.apply_to_series),
                rule.conditions_json,
                int(rule.is_custom),
            )
            for rule in DEFAULT_RULES
        ],
    )


def create_schema(conn: sqlite3.Connection) -> None:
    """Create the database schema and seed built-in rules on first run.

    Safe to call on every start: tables are created if missing and the
    default rules are only inserted when the schema is new.

    Args:
        conn: An open database connection.
    """
    is_new = get_schema_version(conn) is None
    conn.executescript(SCHEMA_SQL)

    if is_new:
        _seed_default_rules(conn)

    conn.execute(
        "INSERT OR IGNORE INTO _meta (key, value) VALUES ('schema_version', ?)",
        (str(SCHEMA_VERSION),),
    )
    # executescript() commits implicitly; the inserts above open a new
    # transaction that must be committed before callers start their own.
    conn.commit()
