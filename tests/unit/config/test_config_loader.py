"""Unit tests for configuration loading and precedence."""

from pathlib import Path

import pytest

from cleanarr.config import (
    EnvReader,
    get_config,
    get_data_dir,
    get_default_config_path,
    load_config_file,
)

CONFIG_TOML = """\
database_path = "/srv/cleanarr/file.db"

[radarr]
url = "http://radarr:7878"
api_key = "file-key"

[tautulli]
url = "http://tautulli:8181"
api_key = "t-key"
timeout = 5

[sync]
interval_minutes = 60
history_length = 500

[logging]
level = "debug"
format = "json"
"""


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "config.toml"
    path.write_text(CONFIG_TOML)
    return path


class TestLoadConfigFile:
    """Tests for load_config_file()."""

    def test_missing_file_is_empty(self, tmp_path: Path) -> None:
        assert load_config_file(tmp_path / "missing.toml") == {}

    def test_invalid_toml_is_empty(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.toml"
        path.write_text("[radarr\nurl = ")
        assert load_config_file(path) == {}

    def test_parses_file(self, config_file: Path) -> None:
        assert load_config_file(config_file)["radarr"]["api_key"] == "file-key"


class TestPaths:
    """Tests for data directory and config path resolution."""

    def test_data_dir_override(self) -> None:
        env = EnvReader({"CLEANARR_DATA_DIR": "/data/cleanarr"})
        assert get_data_dir(env) == Path("/data/cleanarr")

    def test_config_path_defaults_to_data_dir(self) -> None:
        env = EnvReader({"CLEANARR_DATA_DIR": "/data/cleanarr"})
        assert get_default_config_path(env) == Path("/data/cleanarr/config.toml")

    def test_config_path_override(self) -> None:
        env = EnvReader({"CLEANARR_CONFIG_PATH": "/etc/cleanarr.toml"})
        assert get_default_config_path(env) == Path("/etc/cleanarr.toml")


class TestGetConfig:
    """Tests for get_config() precedence."""

    def test_defaults_without_file(self, tmp_path: Path) -> None:
        env = EnvReader({"CLEANARR_DATA_DIR": str(tmp_path)})

        config = get_config(env=env)

        assert not config.radarr.is_configured
        assert config.sync.interval_minutes == 360
        assert config.logging.level == "info"
        assert config.database_path == tmp_path / "cleanarr.db"

    def test_file_values(self, config_file: Path) -> None:
        config = get_config(config_file, env=EnvReader({}))

        assert config.radarr.url == "http://radarr:7878"
        assert config.radarr.is_configured
        assert config.tautulli.timeout == 5
        assert not config.sonarr.is_configured
        assert config.sync.interval_minutes == 60
        assert config.sync.history_length == 500
        assert config.logging.format == "json"
        assert config.database_path == Path("/srv/cleanarr/file.db")

    def test_env_overrides_file(self, config_file: Path) -> None:
        env = EnvReader(
            {
                "CLEANARR_RADARR_API_KEY": "env-key",
                "CLEANARR_SONARR_URL": "http://sonarr:8989",
                "CLEANARR_SONARR_API_KEY": "s-key",
                "CLEANARR_SYNC_INTERVAL_MINUTES": "15",
                "CLEANARR_SYNC_GENERATE_SUGGESTIONS": "false",
                "CLEANARR_LOG_LEVEL": "warning",
                "CLEANARR_DATABASE_PATH": "/tmp/env.db",
            }
        )

        config = get_config(config_file, env=env)

        assert config.radarr.api_key == "env-key"
        assert config.radarr.url == "http://radarr:7878"
        assert config.sonarr.is_configured
        assert config.sync.interval_minutes == 15
        assert config.sync.history_length == 500
        assert config.sync.generate_suggestions is False
        assert config.logging.level == "warning"
        assert config.database_path == Path("/tmp/env.db")

    def test_cli_database_path_wins(self, config_file: Path) -> None:
        env = EnvReader({"CLEANARR_DATABASE_PATH": "/tmp/env.db"})
        config = get_config(config_file, database_path=Path("/tmp/cli.db"), env=env)
        assert config.database_path == Path("/tmp/cli.db")

    def test_invalid_env_int_falls_back(self, config_file: Path) -> None:
        env = EnvReader({"CLEANARR_SYNC_INTERVAL_MINUTES": "often"})
        assert get_config(config_file, env=env).sync.interval_minutes == 60

    def test_invalid_value_raises(self, tmp_path: Path) -> None:
        env = EnvReader(
            {"CLEANARR_DATA_DIR": str(tmp_path), "CLEANARR_RADARR_URL": "radarr:7878"}
        )
        with pytest.raises(ValueError):
            get_config(env=env)
