"""Unit tests for the Radarr, Sonarr, Tautulli and Overseerr clients."""

from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import httpx
import pytest

from cleanarr.config.models import ServiceConnectionConfig
from cleanarr.sync import (
    OverseerrClient,
    RadarrClient,
    ServiceAuthError,
    ServiceConnectionError,
    ServiceNotConfiguredError,
    SonarrClient,
    TautulliClient,
)
from cleanarr.sync.base import ServiceClient


def make_response(status_code: int = 200, json_data=None) -> MagicMock:
    """Create a mock httpx response."""
    response = MagicMock()
    response.status_code = status_code
    response.content = b"{}" if json_data is not None else b""
    response.json.return_value = json_data
    if status_code >= 400:
        response.raise_for_status.side_effect = httpx.HTTPStatusError(
            "Server Error", request=MagicMock(), response=response
        )
    return response


@pytest.fixture
def config() -> ServiceConnectionConfig:
    """Create a test connection config."""
    return ServiceConnectionConfig(
        url="http://localhost:7878/",
        api_key="test-api-key-12345",  # pragma: allowlist secret
        timeout=15,
    )


@pytest.fixture
def mock_http():
    """Patch httpx.Client and yield the client instance."""
    with patch("cleanarr.sync.base.httpx.Client") as mock_client_class:
        mock_client = MagicMock()
        mock_client_class.return_value = mock_client
        mock_client.class_mock = mock_client_class
        yield mock_client


class TestServiceClient:
    """Tests for the shared client plumbing, exercised through RadarrClient."""

    def test_base_class_is_abstract(self, config) -> None:
        with pytest.raises(TypeError, match="validate_connection"):
            ServiceClient(config)

    def test_requires_configuration(self) -> None:
        with pytest.raises(ServiceNotConfiguredError, match="Radarr is not configured"):
            RadarrClient(ServiceConnectionConfig(url="http://localhost:7878"))

    def test_client_created_lazily_with_api_key(self, config, mock_http) -> None:
        client = RadarrClient(config)
        assert client._client is None

        mock_http.request.return_value = make_response(json_data={"appName": "Radarr"})
        client.get_status()
        client.get_status()

        mock_http.class_mock.assert_called_once_with(
            base_url="http://localhost:7878",
            timeout=15,
            headers={"X-Api-Key": "test-api-key-12345"},
        )

    def test_auth_error(self, config, mock_http) -> None:
        mock_http.request.return_value = make_response(401)
        with pytest.raises(ServiceAuthError, match="Invalid API key"):
            RadarrClient(config).get_status()

    def test_connect_error(self, config, mock_http) -> None:
        mock_http.request.side_effect = httpx.ConnectError("Connection refused")
        with pytest.raises(ServiceConnectionError, match="Cannot connect"):
            RadarrClient(config).get_status()

    def test_timeout(self, config, mock_http) -> None:
        mock_http.request.side_effect = httpx.TimeoutException("Timeout")
        with pytest.raises(ServiceConnectionError, match="Connection timeout"):
            RadarrClient(config).get_status()

    def test_http_error(self, config, mock_http) -> None:
        mock_http.request.return_value = make_response(500)
        with pytest.raises(ServiceConnectionError, match="HTTP error"):
            RadarrClient(config).get_status()

    def test_invalid_json(self, config, mock_http) -> None:
        response = make_response(json_data={})
        response.json.side_effect = ValueError("Expecting value")
        mock_http.request.return_value = response
        with pytest.raises(ServiceConnectionError, match="Invalid JSON"):
            RadarrClient(config).get_status()

    def test_close(self, config, mock_http) -> None:
        client = RadarrClient(config)
        client._get_client()
        client.close()
        mock_http.close.assert_called_once()
        assert client._client is None


class TestRadarrClient:
    """Tests for RadarrClient."""

    def test_validate_connection(self, config, mock_http) -> None:
        mock_http.request.return_value = make_response(
            json_data={"appName": "Radarr", "version": "5.2.6"}
        )
        assert RadarrClient(config).validate_connection() == "5.2.6"

    def test_validate_wrong_app(self, config, mock_http) -> None:
        mock_http.request.return_value = make_response(
            json_data={"appName": "Sonarr", "version": "4.0"}
        )
        with pytest.raises(ServiceConnectionError, match="Expected Radarr"):
            RadarrClient(config).validate_connection()

    def test_get_movies_parses_fields(self, config, mock_http) -> None:
        mock_http.request.return_value = make_response(
            json_data=[
                {
                    "id": 12,
                    "title": "Heat",
                    "year": 1995,
                    "added": "2023-01-02T03:04:05Z",
                    "sizeOnDisk": 8000,
                    "path": "/movies/Heat (1995)",
                    "monitored": False,
                    "tmdbId": 949,
                    "movieFile": {"quality": {"quality": {"name": "Bluray-1080p"}}},
                    "images": [
                        {"coverType": "fanart", "remoteUrl": "http://img/f.jpg"},
                        {"coverType": "poster", "remoteUrl": "http://img/p.jpg"},
                    ],
                }
            ]
        )

        [movie] = RadarrClient(config).get_movies()

        assert movie.id is None
        assert movie.radarr_id == 12
        assert movie.added == datetime(2023, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        assert movie.quality == "Bluray-1080p"
        assert movie.monitored is False
        assert movie.poster_url == "http://img/p.jpg"
        assert movie.tmdb_id == 949
        mock_http.request.assert_called_once_with("GET", "/api/v3/movie", params=None)

    def test_get_movie_not_found(self, config, mock_http) -> None:
        mock_http.request.return_value = make_response(404)
        assert RadarrClient(config).get_movie(12) is None

    def test_delete_movie_with_files(self, config, mock_http) -> None:
        mock_http.request.return_value = make_response(200)
        RadarrClient(config).delete_movie(12)
        mock_http.request.assert_called_once_with(
            "DELETE", "/api/v3/movie/12", params={"deleteFiles": "true"}
        )


class TestSonarrClient:
    """Tests for SonarrClient."""

    def test_get_series_total_size(self, config, mock_http) -> None:
        mock_http.request.return_value = make_response(
            json_data=[
                {
                    "id": 5,
                    "title": "The Wire",
                    "year": 2002,
                    "added": "2022-05-01T00:00:00Z",
                    "statistics": {"sizeOnDisk": 60000},
                }
            ]
        )
        [series] = SonarrClient(config).get_series()
        assert series.sonarr_id == 5
        assert series.total_size == 60000

    def test_get_episodes_joins_files(self, config, mock_http) -> None:
        episodes = [
            {
                "id": 100,
                "seasonNumber": 1,
                "episodeNumber": 1,
                "title": "The Target",
                "hasFile": True,
                "episodeFileId": 900,
                "airDateUtc": "2002-06-02T01:00:00Z",
            },
            {"id": 101, "seasonNumber": 1, "episodeNumber": 2, "hasFile": False},
        ]
        files = [
            {
                "id": 900,
                "size": 1234,
                "path": "/tv/The Wire/S01E01.mkv",
                "quality": {"quality": {"name": "HDTV-720p"}},
            }
        ]
        mock_http.request.side_effect = [
            make_response(json_data=episodes),
            make_response(json_data=files),
        ]

        result = SonarrClient(config).get_episodes(5, series_id=3)

        assert len(result) == 1
        episode = result[0]
        assert episode.series_id == 3
        assert episode.sonarr_episode_id == 100
        assert episode.episode_file_id == 900
        assert episode.size_on_disk == 1234
        assert episode.quality == "HDTV-720p"
        assert episode.file_path == "/tv/The Wire/S01E01.mkv"
        mock_http.request.assert_any_call(
            "GET", "/api/v3/episode", params={"seriesId": 5}
        )
        mock_http.request.assert_any_call(
            "GET", "/api/v3/episodefile", params={"seriesId": 5}
        )

    def test_delete_episode_file(self, config, mock_http) -> None:
        mock_http.request.return_value = make_response(200)
        SonarrClient(config).delete_episode_file(900)
        mock_http.request.assert_called_once_with(
            "DELETE", "/api/v3/episodefile/900", params=None
        )


class TestTautulliClient:
    """Tests for TautulliClient."""

    def test_api_key_sent_as_parameter(self, config, mock_http) -> None:
        mock_http.request.return_value = make_response(
            json_data={"response": {"result": "success", "data": {"pms_version": "1.40"}}}
        )

        assert TautulliClient(config).validate_connection() == "1.40"

        mock_http.class_mock.assert_called_once_with(
            base_url="http://localhost:7878", timeout=15, headers={}
        )
        mock_http.request.assert_called_once_with(
            "GET",
            "/api/v2",
            params={"apikey": "test-api-key-12345", "cmd": "get_server_info"},
        )

    def test_bad_api_key_in_envelope(self, config, mock_http) -> None:
        mock_http.request.return_value = make_response(
            json_data={"response": {"result": "error", "message": "Invalid apikey"}}
        )
        with pytest.raises(ServiceAuthError):
            TautulliClient(config).validate_connection()

    def test_command_failure(self, config, mock_http) -> None:
        mock_http.request.return_value = make_response(
            json_data={"response": {"result": "error", "message": "Database locked"}}
        )
        with pytest.raises(ServiceConnectionError, match="get_history failed"):
            TautulliClient(config).get_history()

    def test_get_history_parses_plays(self, config, mock_http) -> None:
        rows = [
            {
                "media_type": "episode",
                "title": "The Target",
                "user": "alice",
                "stopped": 1717200000,
                "grandparent_title": "The Wire",
                "parent_media_index": "1",
                "media_index": "1",
            },
            {"media_type": "movie", "title": "Heat", "user": "", "stopped": 1717200000},
            {"media_type": "movie", "title": "Heat", "user": "bob", "stopped": None},
        ]
        mock_http.request.return_value = make_response(
            json_data={"response": {"result": "success", "data": {"data": rows}}}
        )

        plays = TautulliClient(config).get_history(length=50)

        assert len(plays) == 1
        play = plays[0]
        assert play.is_episode
        assert play.grandparent_title == "The Wire"
        assert (play.season_number, play.episode_number) == (1, 1)
        assert play.stopped == datetime.fromtimestamp(1717200000, tz=timezone.utc)


class TestOverseerrClient:
    """Tests for OverseerrClient."""

    REQUESTS = {
        "results": [
            {
                "id": 31,
                "createdAt": "2024-01-10T08:00:00.000Z",
                "requestedBy": {"displayName": "bob"},
                "media": {"mediaType": "movie", "tmdbId": 949, "externalServiceId": 12},
            },
            {
                "id": 32,
                "createdAt": "2024-02-10T08:00:00.000Z",
                "requestedBy": {"displayName": "carol"},
                "media": {"mediaType": "tv", "tmdbId": 1438, "serviceId": 5},
            },
        ]
    }

    def test_get_requests(self, config, mock_http) -> None:
        mock_http.request.return_value = make_response(json_data=self.REQUESTS)

        movie_request, tv_request = OverseerrClient(config).get_requests(take=20)

        assert movie_request.requested_by == "bob"
        assert movie_request.service_id == 12
        assert movie_request.created_at == datetime(2024, 1, 10, 8, tzinfo=timezone.utc)
        assert tv_request.media_type == "tv"
        assert tv_request.service_id == 5
        mock_http.request.assert_called_once_with(
            "GET", "/api/v1/request", params={"take": 20, "skip": 0, "sort": "added"}
        )

    def test_delete_request_for_media(self, config, mock_http) -> None:
        mock_http.request.side_effect = [
            make_response(json_data=self.REQUESTS),
            make_response(204),
        ]

        assert OverseerrClient(config).delete_request_for_media(1438, "tv") is True
        mock_http.request.assert_called_with(
            "DELETE", "/api/v1/request/32", params=None
        )

    def test_delete_request_for_unknown_media(self, config, mock_http) -> None:
        mock_http.request.return_value = make_response(json_data=self.REQUESTS)
        assert OverseerrClient(config).delete_request_for_media(1, "movie") is False
        assert mock_http.request.call_count == 1

    def test_validate_connection(self, config, mock_http) -> None:
        mock_http.request.side_effect = [
            make_response(json_data={"applicationTitle": "Overseerr"}),
            make_response(json_data={"version": "1.33.2"}),
        ]
        assert OverseerrClient(config).validate_connection() == "1.33.2"
