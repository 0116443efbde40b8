"""Tests for config file loading and precedence."""

from pathlib import Path

import pytest

from playgate.config import (
    EnvReader,
    get_config,
    get_data_dir,
    get_default_config_path,
    load_config_file,
)
from playgate.config.loader import DEFAULT_DATA_DIR
from playgate.exceptions import ConfigFileError


@pytest.fixture
def config_file(temp_dir: Path) -> Path:
    path = temp_dir / "config.toml"
    path.write_text(
        """
[storage]
history_path = "/from/file/watched.json"
database_path = "/from/file/playgate.db"

[logging]
level = "warning"
format = "json"
"""
    )
    return path


class TestPaths:
    def test_data_dir_default(self) -> None:
        assert get_data_dir(EnvReader(env={})) == DEFAULT_DATA_DIR

    def test_data_dir_from_env(self) -> None:
        reader = EnvReader(env={"PLAYGATE_DATA_DIR": "/var/lib/playgate"})

        assert get_data_dir(reader) == Path("/var/lib/playgate")

    def test_config_path_inside_data_dir(self) -> None:
        reader = EnvReader(env={"PLAYGATE_DATA_DIR": "/var/lib/playgate"})

        assert get_default_config_path(reader) == Path(
            "/var/lib/playgate/config.toml"
        )

    def test_config_path_env_override(self) -> None:
        reader = EnvReader(
            env={
                "PLAYGATE_DATA_DIR": "/var/lib/playgate",
                "PLAYGATE_CONFIG_PATH": "/etc/playgate.toml",
            }
        )

        assert get_default_config_path(reader) == Path("/etc/playgate.toml")


class TestLoadConfigFile:
    def test_missing_file_is_empty(self, temp_dir) -> None:
        assert load_config_file(temp_dir / "absent.toml") == {}

    def test_parses_toml(self, config_file) -> None:
        config = load_config_file(config_file)

        assert config["logging"]["level"] == "warning"

    def test_invalid_toml_is_empty_when_lenient(self, temp_dir, caplog) -> None:
        path = temp_dir / "broken.toml"
        path.write_text("[storage\nhistory_path = ")

        assert load_config_file(path) == {}
        assert "Failed to load config file" in caplog.text

    def test_invalid_toml_raises_when_strict(self, temp_dir) -> None:
        path = temp_dir / "broken.toml"
        path.write_text("[storage\nhistory_path = ")

        assert load_config_file(path) == {}
        with pytest.raises(ConfigFileError, match="broken.toml"):
            load_config_file(path, strict=True)

    def test_default_location_from_environment(self, playgate_data_dir) -> None:
        (playgate_data_dir / "config.toml").write_text('[logging]\nlevel = "debug"\n')

        assert load_config_file() == {"logging": {"level": "debug"}}


class TestGetConfig:
    def test_file_values_apply(self, config_file) -> None:
        config = get_config(config_path=config_file, env_reader=EnvReader(env={}))

        assert config.storage.history_path == Path("/from/file/watched.json")
        assert config.logging.level == "warning"
        assert config.storage.data_dir == DEFAULT_DATA_DIR

    def test_env_overrides_file(self, config_file) -> None:
        reader = EnvReader(
            env={
                "PLAYGATE_HISTORY_PATH": "/from/env/watched.json",
                "PLAYGATE_LOG_LEVEL": "error",
            }
        )

        config = get_config(config_path=config_file, env_reader=reader)

        assert config.storage.history_path == Path("/from/env/watched.json")
        assert config.storage.database_path == Path("/from/file/playgate.db")
        assert config.logging.level == "error"
        assert config.logging.format == "json"

    def test_cli_overrides_env(self, config_file) -> None:
        reader = EnvReader(env={"PLAYGATE_LOG_LEVEL": "error"})

        config = get_config(
            config_path=config_file,
            log_level="debug",
            history_path=Path("/from/cli/watched.json"),
            env_reader=reader,
        )

        assert config.logging.level == "debug"
        assert config.storage.history_path == Path("/from/cli/watched.json")

    def test_config_path_from_env(self, temp_dir, config_file) -> None:
        reader = EnvReader(env={"PLAYGATE_CONFIG_PATH": str(config_file)})

        config = get_config(env_reader=reader)

        assert config.logging.level == "warning"

    def test_strict_raises_on_broken_file(self, temp_dir) -> None:
        path = temp_dir / "broken.toml"
        path.write_text("not = [valid")

        with pytest.raises(ConfigFileError):
            get_config(config_path=path, env_reader=EnvReader(env={}), strict=True)
