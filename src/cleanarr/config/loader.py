"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. CLI arguments (passed directly to functions)
2. Environment variables (CLEANARR_*)
3. Config file (~/.cleanarr/config.toml)
4. Default values

Environment variables:
- CLEANARR_CONFIG_PATH: Path to config file (overrides default location)
- CLEANARR_DATA_DIR: Path to Cleanarr data directory (overrides ~/.cleanarr/)
- CLEANARR_DATABASE_PATH: Path to database file
- CLEANARR_<SERVICE>_URL / _API_KEY / _TIMEOUT: Connection settings, where
  SERVICE is RADARR, SONARR, TAUTULLI or OVERSEERR
- CLEANARR_SYNC_INTERVAL_MINUTES, CLEANARR_SYNC_HISTORY_LENGTH,
  CLEANARR_SYNC_REQUEST_TAKE, CLEANARR_SYNC_GENERATE_SUGGESTIONS
- CLEANARR_LOG_LEVEL, CLEANARR_LOG_FILE, CLEANARR_LOG_FORMAT

Example config.toml:

    [radarr]
    url = "http://localhost:7878"
    api_key = "..."

    [sync]
    interval_minutes = 360
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from cleanarr.config.env import EnvReader
from cleanarr.config.models import (
    SERVICE_NAMES,
    CleanarrConfig,
    LoggingConfig,
    ServiceConnectionConfig,
    SyncConfig,
)

logger = logging.getLogger(__name__)

# Default config location
DEFAULT_CONFIG_DIR = Path.home() / ".cleanarr"
DEFAULT_CONFIG_FILENAME = "config.toml"
DEFAULT_DATABASE_FILENAME = "cleanarr.db"


def get_data_dir(env: EnvReader | None = None) -> Path:
    """Get the Cleanarr data directory.

    Holds the database and the default config file. Can be overridden by
    the CLEANARR_DATA_DIR environment variable.
    """
    env = env or EnvReader()
    return env.get_path("CLEANARR_DATA_DIR", DEFAULT_CONFIG_DIR)


def get_default_config_path(env: EnvReader | None = None) -> Path:
    """Get the config file path.

    Can be overridden by the CLEANARR_CONFIG_PATH environment variable.
    """
    env = env or EnvReader()
    override = env.get_path("CLEANARR_CONFIG_PATH")
    if override is not None:
        return override
    return get_data_dir(env) / DEFAULT_CONFIG_FILENAME


def load_config_file(path: Path) -> dict[str, Any]:
    """Load configuration from a TOML file.

    Args:
        path: Path to config file.

    Returns:
        Parsed configuration dict. Empty dict if the file doesn't exist
        or cannot be parsed.
    """
    if not path.exists():
        logger.debug("Config file not found: %s", path)
        return {}

    try:
        with open(path, "rb") as f:
            config = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Failed to load config file %s: %s", path, e)
        return {}

    logger.debug("Loaded config from %s", path)
    return config


def _section(file_config: dict[str, Any], name: str) -> dict[str, Any]:
    section = file_config.get(name, {})
    if not isinstance(section, dict):
        logger.warning("Ignoring config section [%s]: not a table", name)
        return {}
    return section


def _build_service_config(
    name: str, file_section: dict[str, Any], env: EnvReader
) -> ServiceConnectionConfig:
    prefix = f"CLEANARR_{name.upper()}"
    return ServiceConnectionConfig(
        url=env.get_str(f"{prefix}_URL", file_section.get("url")),
        api_key=env.get_str(f"{prefix}_API_KEY", file_section.get("api_key")),
        timeout=env.get_float(f"{prefix}_TIMEOUT", file_section.get("timeout", 30.0)),
    )


def get_config(
    config_path: Path | None = None,
    # CLI overrides (highest precedence)
    database_path: Path | None = None,
    env: EnvReader | None = None,
) -> CleanarrConfig:
    """Get Cleanarr configuration with full precedence handling.

    Args:
        config_path: Path to config file (overrides CLEANARR_CONFIG_PATH).
        database_path: CLI override for database path.
        env: Environment reader (defaults to os.environ).

    Returns:
        CleanarrConfig with merged configuration.

    Raises:
        ValueError: If a merged value fails validation.
    """
    env = env or EnvReader()
    file_config = load_config_file(config_path or get_default_config_path(env))

    services = {
        name: _build_service_config(name, _section(file_config, name), env)
        for name in SERVICE_NAMES
    }

    sync_file = _section(file_config, "sync")
    sync = SyncConfig(
        interval_minutes=env.get_int(
            "CLEANARR_SYNC_INTERVAL_MINUTES",
            sync_file.get("interval_minutes", 360),
        ),
        history_length=env.get_int(
            "CLEANARR_SYNC_HISTORY_LENGTH",
            sync_file.get("history_length", 1000),
        ),
        request_take=env.get_int(
            "CLEANARR_SYNC_REQUEST_TAKE",
            sync_file.get("request_take", 100),
        ),
        generate_suggestions=env.get_bool(
            "CLEANARR_SYNC_GENERATE_SUGGESTIONS",
            sync_file.get("generate_suggestions", True),
        ),
    )

    logging_file = _section(file_config, "logging")
    file_log_path = logging_file.get("file")
    logging_config = LoggingConfig(
        level=env.get_str("CLEANARR_LOG_LEVEL", logging_file.get("level", "info")),
        file=env.get_path(
            "CLEANARR_LOG_FILE",
            Path(file_log_path).expanduser() if file_log_path else None,
        ),
        format=env.get_str("CLEANARR_LOG_FORMAT", logging_file.get("format", "text")),
        include_stderr=logging_file.get("include_stderr", False),
        max_bytes=logging_file.get("max_bytes", 10_485_760),
        backup_count=logging_file.get("backup_count", 5),
    )

    file_db_path = file_config.get("database_path")
    db_path = (
        database_path
        or env.get_path("CLEANARR_DATABASE_PATH")
        or (Path(file_db_path).expanduser() if file_db_path else None)
        or get_data_dir(env) / DEFAULT_DATABASE_FILENAME
    )

    return CleanarrConfig(
        radarr=services["radarr"],
        sonarr=services["sonarr"],
        tautulli=services["tautulli"],
        overseerr=services["overseerr"],
        sync=sync,
        logging=logging_config,
        database_path=db_path,
    )
