"""Fixtures for CLI tests."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from playgate.config import (
    LoggingConfig,
    MigrationConfig,
    PlaygateConfig,
    StorageConfig,
)


@pytest.fixture(autouse=True)
def skip_logging_setup(monkeypatch):
    """Keep CLI invocations from replacing the root logger's handlers."""
    monkeypatch.setattr("playgate.cli._logging_configured", True)


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def cli_config(temp_dir: Path) -> PlaygateConfig:
    """Config whose stores all live in the test's temporary directory."""
    return PlaygateConfig(
        storage=StorageConfig(
            data_dir=temp_dir,
            database_path=temp_dir / "playgate.db",
            history_path=temp_dir / "watched.json",
        ),
        migration=MigrationConfig(backup_dir=temp_dir / "backups"),
        logging=LoggingConfig(),
    )


@pytest.fixture
def cli_obj(cli_config, db_conn) -> dict:
    """Click context object with injected config and database connection."""
    return {"config": cli_config, "db_conn": db_conn}
