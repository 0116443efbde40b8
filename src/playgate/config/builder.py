"""Configuration builder with explicit layering.

ConfigBuilder composes ConfigSources from the config file, the
environment and the CLI. Later sources override earlier ones.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from playgate.config.env import EnvReader
from playgate.config.models import (
    LoggingConfig,
    MigrationConfig,
    PlaygateConfig,
    StorageConfig,
)

DEFAULT_DATABASE_FILENAME = "playgate.db"
DEFAULT_HISTORY_FILENAME = "watched.json"
DEFAULT_CATALOG_FILENAME = "catalog.json"


@dataclass
class ConfigSource:
    """Configuration values from a single source.

    None means "not specified here" and never overrides a lower-precedence
    value.
    """

    # Storage
    data_dir: Path | None = None
    database_path: Path | None = None
    history_path: Path | None = None
    catalog_snapshot_path: Path | None = None

    # Migration
    migration_backup_dir: Path | None = None
    migration_run_on_startup: bool | None = None

    # Logging
    logging_level: str | None = None
    logging_file: Path | None = None
    logging_format: str | None = None
    logging_include_stderr: bool | None = None
    logging_max_bytes: int | None = None
    logging_backup_count: int | None = None


class ConfigBuilder:
    """Builds PlaygateConfig by layering ConfigSources.

    Example:
        builder = ConfigBuilder()
        builder.apply(source_from_file(file_config))
        builder.apply(source_from_env(reader))
        builder.apply(cli_source)
        config = builder.build(default_data_dir)
    """

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}

    def apply(self, source: ConfigSource) -> None:
        """Apply a source, overriding existing values with its non-None ones."""
        for field_obj in fields(source):
            value = getattr(source, field_obj.name)
            if value is not None:
                self._values[field_obj.name] = value

    def _get(self, key: str, default: Any) -> Any:
        return self._values.get(key, default)

    def build(self, default_data_dir: Path) -> PlaygateConfig:
        """Build the final PlaygateConfig with defaults for unset values.

        Args:
            default_data_dir: Data directory used when no source sets one.

        Returns:
            Complete PlaygateConfig. Store paths default to files inside
            the data directory.

        Raises:
            ValueError: If a section fails validation.
        """
        data_dir = self._get("data_dir", default_data_dir)

        storage = StorageConfig(
            data_dir=data_dir,
            database_path=self._get(
                "database_path", data_dir / DEFAULT_DATABASE_FILENAME
            ),
            history_path=self._get("history_path", data_dir / DEFAULT_HISTORY_FILENAME),
            catalog_snapshot_path=self._get("catalog_snapshot_path", None),
        )

        migration = MigrationConfig(
            backup_dir=self._get("migration_backup_dir", None),
            run_on_startup=self._get("migration_run_on_startup", False),
        )

        logging_config = LoggingConfig(
            level=self._get("logging_level", "info"),
            file=self._get("logging_file", None),
            format=self._get("logging_format", "text"),
            include_stderr=self._get("logging_include_stderr", False),
            max_bytes=self._get("logging_max_bytes", 10_485_760),
            backup_count=self._get("logging_backup_count", 5),
        )

        return PlaygateConfig(
            storage=storage,
            migration=migration,
            logging=logging_config,
        )


def _path_or_none(value: Any) -> Path | None:
    return Path(value).expanduser() if value else None


def source_from_file(file_config: dict[str, Any]) -> ConfigSource:
    """Create ConfigSource from a parsed TOML config file.

    Args:
        file_config: Parsed configuration dictionary.

    Returns:
        ConfigSource with values from the config file.
    """
    storage = file_config.get("storage", {})
    migration = file_config.get("migration", {})
    logging_conf = file_config.get("logging", {})

    return ConfigSource(
        data_dir=_path_or_none(storage.get("data_dir")),
        database_path=_path_or_none(storage.get("database_path")),
        history_path=_path_or_none(storage.get("history_path")),
        catalog_snapshot_path=_path_or_none(storage.get("catalog_snapshot_path")),
        migration_backup_dir=_path_or_none(migration.get("backup_dir")),
        migration_run_on_startup=migration.get("run_on_startup"),
        logging_level=logging_conf.get("level"),
        logging_file=_path_or_none(logging_conf.get("file")),
        logging_format=logging_conf.get("format"),
        logging_include_stderr=logging_conf.get("include_stderr"),
        logging_max_bytes=logging_conf.get("max_bytes"),
        logging_backup_count=logging_conf.get("backup_count"),
    )


def source_from_env(reader: EnvReader) -> ConfigSource:
    """Create ConfigSource from PLAYGATE_* environment variables."""
    return ConfigSource(
        data_dir=reader.get_path("PLAYGATE_DATA_DIR"),
        database_path=reader.get_path("PLAYGATE_DATABASE_PATH"),
        history_path=reader.get_path("PLAYGATE_HISTORY_PATH"),
        catalog_snapshot_path=reader.get_path("PLAYGATE_CATALOG_PATH"),
        migration_backup_dir=reader.get_path("PLAYGATE_BACKUP_DIR"),
        migration_run_on_startup=reader.get_bool("PLAYGATE_MIGRATE_ON_STARTUP"),
        logging_level=reader.get_str("PLAYGATE_LOG_LEVEL"),
        logging_file=reader.get_path("PLAYGATE_LOG_FILE"),
        logging_format=reader.get_str("PLAYGATE_LOG_FORMAT"),
        logging_include_stderr=reader.get_bool("PLAYGATE_LOG_INCLUDE_STDERR"),
        logging_max_bytes=reader.get_int("PLAYGATE_LOG_MAX_BYTES"),
        logging_backup_count=reader.get_int("PLAYGATE_LOG_BACKUP_COUNT"),
    )
