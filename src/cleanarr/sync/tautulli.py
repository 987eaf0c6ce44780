"""Tautulli API client.

Tautulli's v2 API is a single endpoint taking the API key and a command
name as query parameters. Errors, including a bad API key, are reported
in the response envelope with HTTP 200.
"""

from __future__ import annotations

import logging
from typing import Any

from cleanarr.core.datetime_utils import from_unix_timestamp
from cleanarr.sync.base import ServiceClient
from cleanarr.sync.exceptions import ServiceAuthError, ServiceConnectionError
from cleanarr.sync.models import TautulliPlay

logger = logging.getLogger(__name__)


def _optional_int(value: Any) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class TautulliClient(ServiceClient):
    """HTTP client for the Tautulli v2 API."""

    SERVICE_NAME = "Tautulli"

    def _headers(self) -> dict[str, str]:
        return {}

    def _command(self, cmd: str, **params: Any) -> Any:
        """Run an API command and return the envelope's data.

        Raises:
            ServiceAuthError: If the API key is rejected.
            ServiceConnectionError: If the request or the command fails.
        """
        body = self._get("/api/v2", params={"apikey": self._api_key, "cmd": cmd, **params})
        envelope = (body or {}).get("response") or {}
        if envelope.get("result") != "success":
            message = envelope.get("message") or "unknown error"
            if "apikey" in message.casefold():
                raise ServiceAuthError(self.SERVICE_NAME, message)
            raise ServiceConnectionError(self.SERVICE_NAME, f"{cmd} failed: {message}")
        return envelope.get("data")

    def validate_connection(self) -> str:
        info = self._command("get_server_info") or {}
        version = info.get("pms_version", "unknown")
        logger.info("Connected to Tautulli (Plex %s)", version)
        return version

    def get_history(self, length: int = 1000) -> list[TautulliPlay]:
        """Get recent playback history.

        Rows without a user or stop time are dropped.

        Args:
            length: Maximum number of rows to fetch.

        Returns:
            Plays, newest first as returned by Tautulli.
        """
        data = self._command("get_history", length=length) or {}
        plays = []
        for row in data.get("data") or []:
            play = self._parse_history_row(row)
            if play is not None:
                plays.append(play)
        return plays

    def _parse_history_row(self, row: dict[str, Any]) -> TautulliPlay | None:
        stopped = _optional_int(row.get("stopped"))
        user = row.get("user")
        if not stopped or not user:
            return None
        return TautulliPlay(
            media_type=row.get("media_type") or "",
            title=row.get("title") or "",
            user=user,
            stopped=from_unix_timestamp(stopped),
            grandparent_title=row.get("grandparent_title") or None,
            season_number=_optional_int(row.get("parent_media_index")),
            episode_number=_optional_int(row.get("media_index")),
        )
