"""Catalog sync with Radarr, Sonarr, Tautulli and Overseerr.

Usage:
    from cleanarr.sync import MediaSyncService

    service = MediaSyncService(conn, config)
    try:
        result = service.sync_all()
    finally:
        service.close()
"""

from cleanarr.sync.deletion import DeletionResult, MediaDeletionService
from cleanarr.sync.exceptions import (
    MediaNotFoundError,
    ServiceAuthError,
    ServiceConnectionError,
    ServiceNotConfiguredError,
)
from cleanarr.sync.overseerr import OverseerrClient
from cleanarr.sync.radarr import RadarrClient
from cleanarr.sync.service import MediaSyncService, SyncResult
from cleanarr.sync.sonarr import SonarrClient
from cleanarr.sync.tautulli import TautulliClient

__all__ = [
    "DeletionResult",
    "MediaDeletionService",
    "MediaNotFoundError",
    "MediaSyncService",
    "OverseerrClient",
    "RadarrClient",
    "ServiceAuthError",
    "ServiceConnectionError",
    "ServiceNotConfiguredError",
    "SonarrClient",
    "SyncResult",
    "TautulliClient",
]
