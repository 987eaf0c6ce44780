"""Configuration package for Cleanarr.

Usage:
    from cleanarr.config import get_config

    config = get_config()
    if config.radarr.is_configured:
        ...
"""

from cleanarr.config.env import EnvReader
from cleanarr.config.loader import (
    get_config,
    get_data_dir,
    get_default_config_path,
    load_config_file,
)
from cleanarr.config.models import (
    SERVICE_NAMES,
    CleanarrConfig,
    LoggingConfig,
    ServiceConnectionConfig,
    SyncConfig,
)

__all__ = [
    "SERVICE_NAMES",
    "CleanarrConfig",
    "EnvReader",
    "LoggingConfig",
    "ServiceConnectionConfig",
    "SyncConfig",
    "get_config",
    "get_data_dir",
    "get_default_config_path",
    "load_config_file",
]
