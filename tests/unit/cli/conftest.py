"""Fixtures for CLI tests."""

from unittest.mock import patch

import pytest
from click.testing import CliRunner

from cleanarr.cli import main


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def invoke(runner, db_conn, app_config):
    """Invoke the CLI against the in-memory database and test config."""

    def _invoke(*args: str, config=None, input: str | None = None):
        with patch("cleanarr.cli.configure_logging"):
            return runner.invoke(
                main,
                list(args),
                obj={"db_conn": db_conn, "config": config or app_config},
                input=input,
            )

    return _invoke
