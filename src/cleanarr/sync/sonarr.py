"""Sonarr API client.

HTTP client for the Sonarr v3 API: connection validation, series and
episode fetch, and deletion.
"""

from __future__ import annotations

import logging
from typing import Any

from cleanarr.core.datetime_utils import parse_optional_timestamp, utc_now
from cleanarr.domain import Episode, Series
from cleanarr.sync.base import ServiceClient, find_poster_url
from cleanarr.sync.exceptions import ServiceConnectionError

logger = logging.getLogger(__name__)


class SonarrClient(ServiceClient):
    """HTTP client for Sonarr v3 API."""

    SERVICE_NAME = "Sonarr"

    def get_status(self) -> dict[str, Any]:
        """Get Sonarr system status from /api/v3/system/status."""
        return self._get("/api/v3/system/status")

    def validate_connection(self) -> str:
        status = self.get_status()
        app_name = status.get("appName", "")
        if app_name and app_name != "Sonarr":
            raise ServiceConnectionError(
                self.SERVICE_NAME, f"Expected Sonarr, got {app_name}. Check the URL."
            )
        version = status.get("version", "unknown")
        logger.info("Connected to Sonarr %s", version)
        return version

    def get_series(self) -> list[Series]:
        """Get all series from Sonarr.

        Returns:
            Series without database IDs.

        Raises:
            ServiceConnectionError: If request fails.
        """
        data = self._get("/api/v3/series") or []
        return [self._parse_series_response(s) for s in data]

    def get_series_by_id(self, sonarr_id: int) -> Series | None:
        """Get one series, or None if Sonarr no longer has it."""
        data = self._request("GET", f"/api/v3/series/{sonarr_id}", allow_not_found=True)
        return self._parse_series_response(data) if data else None

    def get_episodes(self, sonarr_series_id: int, series_id: int) -> list[Episode]:
        """Get the episodes of a series that have a file on disk.

        Episode files are fetched in one request per series and joined to
        the episodes by episodeFileId.

        Args:
            sonarr_series_id: Sonarr ID of the series.
            series_id: Database ID of the series, set on each Episode.

        Returns:
            Episodes without database IDs.
        """
        episodes = self._get("/api/v3/episode", params={"seriesId": sonarr_series_id})
        files = self._get("/api/v3/episodefile", params={"seriesId": sonarr_series_id})
        files_by_id = {f["id"]: f for f in files or [] if "id" in f}

        result = []
        for data in episodes or []:
            if not data.get("hasFile"):
                continue
            file_data = files_by_id.get(data.get("episodeFileId") or 0)
            if file_data is None:
                logger.warning(
                    "Episode %s S%02dE%02d has no file data",
                    data.get("title", ""),
                    data.get("seasonNumber") or 0,
                    data.get("episodeNumber") or 0,
                )
            result.append(self._parse_episode_response(data, file_data, series_id))
        return result

    def delete_series(self, sonarr_id: int, delete_files: bool = True) -> None:
        """Delete a series from Sonarr, by default together with its files."""
        self._request(
            "DELETE",
            f"/api/v3/series/{sonarr_id}",
            params={"deleteFiles": str(delete_files).lower()},
            allow_not_found=True,
        )
        logger.info("Deleted series %d from Sonarr", sonarr_id)

    def delete_episode_file(self, episode_file_id: int) -> None:
        """Delete a single episode file from Sonarr."""
        self._request(
            "DELETE", f"/api/v3/episodefile/{episode_file_id}", allow_not_found=True
        )
        logger.info("Deleted episode file %d from Sonarr", episode_file_id)

    def _parse_series_response(self, data: dict[str, Any]) -> Series:
        statistics = data.get("statistics") or {}
        return Series(
            id=None,
            sonarr_id=data["id"],
            title=data.get("title") or "",
            year=data.get("year") or 0,
            added=parse_optional_timestamp(data.get("added")) or utc_now(),
            total_size=statistics.get("sizeOnDisk") or 0,
            monitored=data.get("monitored", True),
            poster_url=find_poster_url(data.get("images")),
            tmdb_id=data.get("tmdbId") or None,
        )

    def _parse_episode_response(
        self,
        data: dict[str, Any],
        file_data: dict[str, Any] | None,
        series_id: int,
    ) -> Episode:
        file_data = file_data or {}
        quality = ((file_data.get("quality") or {}).get("quality") or {}).get("name")
        return Episode(
            id=None,
            series_id=series_id,
            sonarr_episode_id=data["id"],
            episode_file_id=data.get("episodeFileId") or 0,
            season_number=data.get("seasonNumber") or 0,
            episode_number=data.get("episodeNumber") or 0,
            title=data.get("title") or "",
            air_date=parse_optional_timestamp(data.get("airDateUtc")),
            size_on_disk=file_data.get("size") or 0,
            file_path=file_data.get("path") or "",
            quality=quality or "Unknown",
        )
