"""Configuration models for Cleanarr.

This module defines dataclass models for configuration:
- ServiceConnectionConfig: URL and API key for one external service
- SyncConfig: Catalog sync behaviour
- LoggingConfig: Structured logging settings
- CleanarrConfig: Main configuration container
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path


@dataclass
class ServiceConnectionConfig:
    """Connection settings for Radarr, Sonarr, Tautulli or Overseerr.

    A service without both a URL and an API key is treated as not
    configured and skipped during sync.
    """

    url: str | None = None
    api_key: str | None = None

    # Request timeout in seconds
    timeout: float = 30.0

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.url:
            self.url = self.url.strip().rstrip("/")
            if not self.url.startswith(("http://", "https://")):
                raise ValueError(f"url must start with http:// or https://, got {self.url}")
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")

    @property
    def is_configured(self) -> bool:
        return bool(self.url) and bool(self.api_key)


@dataclass
class SyncConfig:
    """Configuration for catalog sync."""

    # Minutes between runs for `cleanarr sync run --every` default
    interval_minutes: int = 360

    # Number of Tautulli history rows fetched per sync
    history_length: int = 1000

    # Number of Overseerr requests fetched per sync
    request_take: int = 100

    # Regenerate suggestions after a sync
    generate_suggestions: bool = True

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.interval_minutes < 1:
            raise ValueError(
                f"interval_minutes must be at least 1, got {self.interval_minutes}"
            )
        if self.history_length < 1:
            raise ValueError(
                f"history_length must be at least 1, got {self.history_length}"
            )
        if self.request_take < 1:
            raise ValueError(f"request_take must be at least 1, got {self.request_take}")


@dataclass
class LoggingConfig:
    """Configuration for structured logging."""

    # Log level: debug, info, warning, error
    level: str = "info"

    # Log file path (None = stderr only)
    file: Path | None = None

    # Log format: text or json
    format: str = "text"

    # Also log to stderr when file is set
    include_stderr: bool = False

    # Rotation threshold in bytes (default 10MB)
    max_bytes: int = 10_485_760

    # Number of rotated files to keep
    backup_count: int = 5

    def __post_init__(self) -> None:
        """Validate configuration."""
        valid_levels = {"debug", "info", "warning", "error"}
        if self.level.lower() not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}, got {self.level}")
        valid_formats = {"text", "json"}
        if self.format.lower() not in valid_formats:
            raise ValueError(
                f"format must be one of {valid_formats}, got {self.format}"
            )

    def with_overrides(
        self,
        level: str | None = None,
        file: Path | None = None,
        json_format: bool = False,
    ) -> LoggingConfig:
        """Return a copy with the --log-level/--log-file/--log-json options applied.

        Options that were not given keep the configured value. The copy is
        validated again, so an unknown level raises ValueError.
        """
        changes: dict = {}
        if level is not None:
            changes["level"] = level
        if file is not None:
            changes["file"] = file
        if json_format:
            changes["format"] = "json"
        return replace(self, **changes)


# Services that can be configured, in sync order
SERVICE_NAMES = ("radarr", "sonarr", "tautulli", "overseerr")


@dataclass
class CleanarrConfig:
    """Main configuration container for Cleanarr."""

    radarr: ServiceConnectionConfig = field(default_factory=ServiceConnectionConfig)
    sonarr: ServiceConnectionConfig = field(default_factory=ServiceConnectionConfig)
    tautulli: ServiceConnectionConfig = field(default_factory=ServiceConnectionConfig)
    overseerr: ServiceConnectionConfig = field(default_factory=ServiceConnectionConfig)
    sync: SyncConfig = field(default_factory=SyncConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Database path (can be overridden)
    database_path: Path | None = None

    def get_service(self, name: str) -> ServiceConnectionConfig:
        """Get connection settings by service name (radarr, sonarr, ...).

        Raises:
            KeyError: If the name is not a known service.
        """
        if name.lower() not in SERVICE_NAMES:
            raise KeyError(name)
        return getattr(self, name.lower())
