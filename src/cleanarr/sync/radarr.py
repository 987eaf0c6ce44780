"""Radarr API client.

HTTP client for the Radarr v3 API: connection validation, catalog fetch
and movie deletion.
"""

from __future__ import annotations

import logging
from typing import Any

from cleanarr.core.datetime_utils import parse_optional_timestamp, utc_now
from cleanarr.domain import Movie
from cleanarr.sync.base import ServiceClient, find_poster_url
from cleanarr.sync.exceptions import ServiceConnectionError

logger = logging.getLogger(__name__)


class RadarrClient(ServiceClient):
    """HTTP client for Radarr v3 API."""

    SERVICE_NAME = "Radarr"

    def get_status(self) -> dict[str, Any]:
        """Get Radarr system status from /api/v3/system/status."""
        return self._get("/api/v3/system/status")

    def validate_connection(self) -> str:
        status = self.get_status()
        app_name = status.get("appName", "")
        if app_name and app_name != "Radarr":
            raise ServiceConnectionError(
                self.SERVICE_NAME, f"Expected Radarr, got {app_name}. Check the URL."
            )
        version = status.get("version", "unknown")
        logger.info("Connected to Radarr %s", version)
        return version

    def get_movies(self) -> list[Movie]:
        """Get all movies from Radarr.

        Returns:
            Movies without database IDs.

        Raises:
            ServiceConnectionError: If request fails.
        """
        data = self._get("/api/v3/movie") or []
        return [self._parse_movie_response(m) for m in data]

    def get_movie(self, radarr_id: int) -> Movie | None:
        """Get one movie, or None if Radarr no longer has it."""
        data = self._request("GET", f"/api/v3/movie/{radarr_id}", allow_not_found=True)
        return self._parse_movie_response(data) if data else None

    def delete_movie(self, radarr_id: int, delete_files: bool = True) -> None:
        """Delete a movie from Radarr, by default together with its files.

        A movie Radarr no longer knows about counts as deleted.
        """
        self._request(
            "DELETE",
            f"/api/v3/movie/{radarr_id}",
            params={"deleteFiles": str(delete_files).lower()},
            allow_not_found=True,
        )
        logger.info("Deleted movie %d from Radarr", radarr_id)

    def _parse_movie_response(self, data: dict[str, Any]) -> Movie:
        """Parse movie JSON response to a Movie.

        Args:
            data: Movie JSON object from API.

        Returns:
            Movie with catalog fields set.
        """
        quality = (
            ((data.get("movieFile") or {}).get("quality") or {}).get("quality") or {}
        ).get("name")
        return Movie(
            id=None,
            radarr_id=data["id"],
            title=data.get("title") or "",
            year=data.get("year") or 0,
            added=parse_optional_timestamp(data.get("added")) or utc_now(),
            size_on_disk=data.get("sizeOnDisk") or 0,
            quality=quality or "Unknown",
            folder_path=data.get("path") or "",
            monitored=data.get("monitored", True),
            poster_url=find_poster_url(data.get("images")),
            tmdb_id=data.get("tmdbId") or None,
        )
