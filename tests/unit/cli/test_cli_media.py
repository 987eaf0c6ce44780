"""Tests for the media CLI commands."""

import json
from unittest.mock import patch

from factories import make_episode, make_movie, make_series

from cleanarr.cli.exit_codes import ExitCode
from cleanarr.config import CleanarrConfig, ServiceConnectionConfig
from cleanarr.db.queries import (
    get_movie_by_id,
    update_movie_request,
    upsert_episode,
    upsert_movie,
    upsert_series,
)
from cleanarr.sync import DeletionResult, ServiceConnectionError


def radarr_config() -> CleanarrConfig:
    return CleanarrConfig(
        radarr=ServiceConnectionConfig(url="http://radarr:7878", api_key="key")
    )


class TestListing:
    """Tests for media movies and media series."""

    def test_movies_empty(self, invoke) -> None:
        result = invoke("media", "movies")

        assert result.exit_code == 0
        assert "No movies. Run 'cleanarr sync run' first." in result.output

    def test_movies(self, invoke, db_conn) -> None:
        upsert_movie(db_conn, make_movie(id=None))
        db_conn.commit()

        result = invoke("media", "movies")

        assert "Heat" in result.output
        assert "7.5 GB" in result.output
        assert "1 movie(s)" in result.output

    def test_movies_json(self, invoke, db_conn) -> None:
        movie_id = upsert_movie(db_conn, make_movie(id=None))
        update_movie_request(db_conn, movie_id, "alice", None)
        db_conn.commit()

        [data] = json.loads(invoke("media", "movies", "--json").output)

        assert data["radarr_id"] == 101
        assert data["requested_by"] == "alice"
        assert data["watch_count"] == 0

    def test_series_json(self, invoke, db_conn) -> None:
        series_id = upsert_series(db_conn, make_series(id=None))
        upsert_episode(db_conn, make_episode(id=None, series_id=series_id))
        db_conn.commit()

        [data] = json.loads(invoke("media", "series", "--json").output)

        assert data["title"] == "The Wire"
        assert data["episodes"] == 1
        assert data["last_watched"] is None


class TestDeletion:
    """Tests for the delete commands."""

    def test_delete_movie_not_configured(self, invoke, db_conn) -> None:
        movie_id = upsert_movie(db_conn, make_movie(id=None))
        db_conn.commit()

        result = invoke("media", "delete-movie", str(movie_id), "--yes")

        assert result.exit_code == ExitCode.SERVICE_NOT_CONFIGURED
        assert get_movie_by_id(db_conn, movie_id) is not None

    def test_delete_unknown_movie(self, invoke) -> None:
        result = invoke("media", "delete-movie", "999", "--yes", config=radarr_config())
        assert result.exit_code == ExitCode.MEDIA_NOT_FOUND

    def test_delete_requires_confirmation(self, invoke) -> None:
        with patch("cleanarr.cli.media.MediaDeletionService") as service_cls:
            result = invoke("media", "delete-movie", "1", input="n\n")

        assert result.exit_code == 1
        service_cls.return_value.delete_movie.assert_not_called()

    def test_delete_movie_success(self, invoke) -> None:
        with patch("cleanarr.cli.media.MediaDeletionService") as service_cls:
            service_cls.return_value.delete_movie.return_value = DeletionResult(
                title="Heat", request_removed=True
            )
            result = invoke("media", "delete-movie", "1", input="y\n")

        assert result.exit_code == 0
        assert "Deleted: Heat" in result.output
        assert "Removed the matching Overseerr request." in result.output
        service_cls.return_value.delete_movie.assert_called_once_with(1)

    def test_delete_series_service_error(self, invoke) -> None:
        with patch("cleanarr.cli.media.MediaDeletionService") as service_cls:
            service_cls.return_value.delete_series.side_effect = ServiceConnectionError(
                "Sonarr", "HTTP 500"
            )
            result = invoke("media", "delete-series", "1", "-y")

        assert result.exit_code == ExitCode.SERVICE_ERROR

    def test_delete_episode(self, invoke) -> None:
        with patch("cleanarr.cli.media.MediaDeletionService") as service_cls:
            service_cls.return_value.delete_episode.return_value = DeletionResult(
                title="S01E01 The Target"
            )
            result = invoke("media", "delete-episode", "1", "-y")

        assert result.exit_code == 0
        assert "Deleted: S01E01 The Target" in result.output
