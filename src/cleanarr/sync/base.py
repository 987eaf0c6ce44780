"""Shared HTTP plumbing for the external service clients.

Every client talks JSON over httpx with a lazily created httpx.Client.
Transport and HTTP errors are wrapped in ServiceConnectionError, and a
401/403 response becomes ServiceAuthError.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from cleanarr.config.models import ServiceConnectionConfig
from cleanarr.sync.exceptions import (
    ServiceAuthError,
    ServiceConnectionError,
    ServiceNotConfiguredError,
)

logger = logging.getLogger(__name__)


def find_poster_url(images: list[dict[str, Any]] | None) -> str | None:
    """Return the remote URL of the poster image, if any."""
    for image in images or []:
        if image.get("coverType") == "poster" and image.get("remoteUrl"):
            return image["remoteUrl"]
    return None


class ServiceClient(ABC):
    """Base class for JSON API clients.

    Subclasses set SERVICE_NAME, implement validate_connection() and may
    override _headers().
    """

    SERVICE_NAME = "service"

    def __init__(self, config: ServiceConnectionConfig) -> None:
        if not config.is_configured:
            raise ServiceNotConfiguredError(self.SERVICE_NAME)
        self._base_url = config.url.rstrip("/")
        self._api_key = config.api_key
        self._timeout = config.timeout
        self._client: httpx.Client | None = None

    def _get_client(self) -> httpx.Client:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.Client(
                base_url=self._base_url,
                timeout=self._timeout,
                headers=self._headers(),
            )
        return self._client

    def _headers(self) -> dict[str, str]:
        return {"X-Api-Key": self._api_key}

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        allow_not_found: bool = False,
    ) -> Any:
        """Send a request and return the decoded JSON body.

        Args:
            method: HTTP method.
            path: Path relative to the service URL.
            params: Query parameters.
            allow_not_found: Return None for a 404 instead of raising.

        Returns:
            Decoded JSON, or None for an empty body.

        Raises:
            ServiceAuthError: If the API key is rejected (401/403).
            ServiceConnectionError: If the request fails.
        """
        client = self._get_client()
        try:
            response = client.request(method, path, params=params)
            if response.status_code in (401, 403):
                raise ServiceAuthError(self.SERVICE_NAME, "Invalid API key")
            if allow_not_found and response.status_code == 404:
                return None
            response.raise_for_status()
            if not response.content:
                return None
            return response.json()
        except httpx.ConnectError as e:
            raise ServiceConnectionError(
                self.SERVICE_NAME, f"Cannot connect: {e}"
            ) from e
        except httpx.TimeoutException as e:
            raise ServiceConnectionError(
                self.SERVICE_NAME, f"Connection timeout: {e}"
            ) from e
        except httpx.HTTPError as e:
            raise ServiceConnectionError(self.SERVICE_NAME, f"HTTP error: {e}") from e
        except ValueError as e:
            raise ServiceConnectionError(
                self.SERVICE_NAME, f"Invalid JSON response: {e}"
            ) from e

    def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return self._request("GET", path, params=params)

    @abstractmethod
    def validate_connection(self) -> str:
        """Check that the service is reachable and the API key is accepted.

        Returns:
            The service version, or "unknown".

        Raises:
            ServiceAuthError: If the API key is invalid.
            ServiceConnectionError: If connection fails.
        """
