"""Exceptions raised by external service clients."""


class ServiceConnectionError(Exception):
    """Raised when a request to an external service fails."""

    def __init__(self, service: str, message: str) -> None:
        self.service = service
        super().__init__(f"{service}: {message}")


class ServiceAuthError(ServiceConnectionError):
    """Raised when a service rejects the configured API key."""


class ServiceNotConfiguredError(Exception):
    """Raised when an operation needs a service without URL or API key."""

    def __init__(self, service: str) -> None:
        self.service = service
        super().__init__(f"{service} is not configured (set its url and api_key)")


class MediaNotFoundError(Exception):
    """Raised when a movie, series or episode ID is not in the catalog."""

    def __init__(self, kind: str, media_id: int) -> None:
        self.kind = kind
        self.media_id = media_id
        super().__init__(f"{kind} not found: {media_id}")
