"""Overseerr API client.

Fetches media requests (who asked for what, and when) and removes
requests for media that has been deleted.
"""

from __future__ import annotations

import logging
from typing import Any

from cleanarr.core.datetime_utils import parse_optional_timestamp
from cleanarr.sync.base import ServiceClient
from cleanarr.sync.models import OverseerrRequest

logger = logging.getLogger(__name__)

MEDIA_TYPE_MOVIE = "movie"
MEDIA_TYPE_TV = "tv"


class OverseerrClient(ServiceClient):
    """HTTP client for the Overseerr v1 API."""

    SERVICE_NAME = "Overseerr"

    def validate_connection(self) -> str:
        # settings/main requires a valid API key; status does not
        self._get("/api/v1/settings/main")
        status = self._get("/api/v1/status") or {}
        version = status.get("version", "unknown")
        logger.info("Connected to Overseerr %s", version)
        return version

    def get_requests(self, take: int = 100) -> list[OverseerrRequest]:
        """Get the most recently added requests.

        Args:
            take: Maximum number of requests to fetch.
        """
        data = self._get(
            "/api/v1/request", params={"take": take, "skip": 0, "sort": "added"}
        )
        return [self._parse_request(r) for r in (data or {}).get("results") or []]

    def delete_request(self, request_id: int) -> None:
        """Delete a request. A request that no longer exists counts as deleted."""
        self._request("DELETE", f"/api/v1/request/{request_id}", allow_not_found=True)
        logger.info("Deleted Overseerr request %d", request_id)

    def delete_request_for_media(
        self, tmdb_id: int, media_type: str, take: int = 100
    ) -> bool:
        """Delete the request matching a TMDb ID and media type.

        Args:
            tmdb_id: TMDb ID of the deleted media.
            media_type: "movie" or "tv".
            take: How many requests to search.

        Returns:
            True if a matching request was found and deleted.
        """
        data = self._get(
            "/api/v1/request", params={"filter": "all", "take": take, "skip": 0}
        )
        for request in (self._parse_request(r) for r in (data or {}).get("results") or []):
            if request.media_type == media_type and request.tmdb_id == tmdb_id:
                self.delete_request(request.id)
                return True
        logger.info("No Overseerr request found for TMDb %d (%s)", tmdb_id, media_type)
        return False

    def _parse_request(self, data: dict[str, Any]) -> OverseerrRequest:
        media = data.get("media") or {}
        service_id = media.get("externalServiceId")
        if service_id is None:
            service_id = media.get("serviceId")
        if service_id is None:
            service_id = media.get("serviceId4k")
        return OverseerrRequest(
            id=data.get("id") or 0,
            media_type=media.get("mediaType") or "",
            requested_by=(data.get("requestedBy") or {}).get("displayName"),
            created_at=parse_optional_timestamp(data.get("createdAt")),
            title=media.get("title") or media.get("name"),
            tmdb_id=media.get("tmdbId"),
            service_id=service_id,
        )
