"""Configuration models for Playgate.

Each section is a dataclass validated in ``__post_init__``. Paths left
as None are resolved against the data directory by the builder.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

VALID_LOG_LEVELS = frozenset({"debug", "info", "warning", "error"})
VALID_LOG_FORMATS = frozenset({"text", "json"})


@dataclass
class StorageConfig:
    """Locations of the persisted stores."""

    data_dir: Path
    database_path: Path
    history_path: Path
    # Catalog snapshot consulted when enriching history (None = no catalog)
    catalog_snapshot_path: Path | None = None


@dataclass
class MigrationConfig:
    """Watched-history migration settings."""

    # Where history backups go (None = next to the history file)
    backup_dir: Path | None = None

    # Run the migration when the CLI starts a playback command
    run_on_startup: bool = False


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
        if self.level.lower() not in VALID_LOG_LEVELS:
            raise ValueError(
                f"level must be one of {sorted(VALID_LOG_LEVELS)}, got {self.level}"
            )
        if self.format.lower() not in VALID_LOG_FORMATS:
            raise ValueError(
                f"format must be one of {sorted(VALID_LOG_FORMATS)}, got {self.format}"
            )
        if self.max_bytes <= 0:
            raise ValueError(f"max_bytes must be positive, got {self.max_bytes}")
        if self.backup_count < 0:
            raise ValueError(
                f"backup_count must be non-negative, got {self.backup_count}"
            )


@dataclass
class PlaygateConfig:
    """Main configuration for Playgate."""

    storage: StorageConfig
    migration: MigrationConfig = field(default_factory=MigrationConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
