"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. CLI arguments (passed directly to get_config)
2. Environment variables (PLAYGATE_*)
3. Config file (~/.playgate/config.toml)
4. Default values

Environment variables:
- PLAYGATE_CONFIG_PATH: Path to config file (overrides default location)
- PLAYGATE_DATA_DIR: Data directory (overrides ~/.playgate/)
- PLAYGATE_DATABASE_PATH: Path to the downloads database
- PLAYGATE_HISTORY_PATH: Path to the watched-history document
- PLAYGATE_CATALOG_PATH: Path to a catalog snapshot used for enrichment
- PLAYGATE_BACKUP_DIR: Directory for history backups
- PLAYGATE_MIGRATE_ON_STARTUP: Migrate history before playback commands
- PLAYGATE_LOG_LEVEL, PLAYGATE_LOG_FILE, PLAYGATE_LOG_FORMAT,
  PLAYGATE_LOG_INCLUDE_STDERR, PLAYGATE_LOG_MAX_BYTES,
  PLAYGATE_LOG_BACKUP_COUNT: Logging overrides
"""

from __future__ import annotations

import logging
import threading
import tomllib
from pathlib import Path
from typing import Any

from playgate.config.builder import (
    ConfigBuilder,
    ConfigSource,
    source_from_env,
    source_from_file,
)
from playgate.config.env import EnvReader
from playgate.config.models import PlaygateConfig
from playgate.exceptions import ConfigFileError

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path.home() / ".playgate"
CONFIG_FILENAME = "config.toml"

# Parsed config files keyed by path, invalidated on mtime change
_config_cache: dict[Path, tuple[dict[str, Any], float]] = {}
_config_cache_lock = threading.Lock()


def get_data_dir(env_reader: EnvReader | None = None) -> Path:
    """Get the Playgate data directory.

    This is the base directory for the downloads database, the watched
    history document and the config file. Can be overridden by
    PLAYGATE_DATA_DIR (tilde expansion supported).

    Returns:
        Path to the data directory (~/.playgate/ by default).
    """
    reader = env_reader or EnvReader()
    return reader.get_path("PLAYGATE_DATA_DIR", DEFAULT_DATA_DIR)


def get_default_config_path(env_reader: EnvReader | None = None) -> Path:
    """Get the config file path, honoring PLAYGATE_CONFIG_PATH."""
    reader = env_reader or EnvReader()
    env_path = reader.get_path("PLAYGATE_CONFIG_PATH")
    if env_path is not None:
        return env_path
    return get_data_dir(reader) / CONFIG_FILENAME


def _parse_toml_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        logger.debug("Config file not found: %s", path)
        return {}

    try:
        with path.open("rb") as f:
            config = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigFileError(f"Failed to load config file {path}: {e}") from e

    logger.debug("Loaded config from %s", path)
    return config


def load_config_file(path: Path | None = None, *, strict: bool = False) -> dict:
    """Load configuration from a TOML file.

    Results are cached and reloaded when the file's mtime changes.

    Args:
        path: Path to config file. If None, uses the default location.
        strict: If True, raise ConfigFileError on parse failures.
                If False (default), return an empty dict on errors.

    Returns:
        Parsed configuration dict. Empty dict if the file doesn't exist.

    Raises:
        ConfigFileError: When strict=True and the file cannot be parsed.
    """
    if path is None:
        path = get_default_config_path()

    try:
        current_mtime = path.stat().st_mtime
    except OSError:
        current_mtime = 0.0

    with _config_cache_lock:
        cached = _config_cache.get(path)
        if cached is not None and cached[1] == current_mtime:
            return cached[0]

        try:
            result = _parse_toml_file(path)
        except ConfigFileError as e:
            if strict:
                raise
            # Failures are not cached
            logger.warning("%s", e)
            return {}
        _config_cache[path] = (result, current_mtime)
        return result


def clear_config_cache() -> None:
    """Clear the config file cache. Primarily useful for testing."""
    with _config_cache_lock:
        _config_cache.clear()


def get_config(
    config_path: Path | None = None,
    # CLI overrides (highest precedence)
    data_dir: Path | None = None,
    database_path: Path | None = None,
    history_path: Path | None = None,
    log_level: str | None = None,
    log_file: Path | None = None,
    log_format: str | None = None,
    # Optional dependency injection for testing
    env_reader: EnvReader | None = None,
    *,
    strict: bool = False,
) -> PlaygateConfig:
    """Get Playgate configuration with full precedence handling.

    Args:
        config_path: Path to config file (overrides PLAYGATE_CONFIG_PATH).
        data_dir: CLI override for the data directory.
        database_path: CLI override for the database path.
        history_path: CLI override for the watched-history path.
        log_level: CLI override for the log level.
        log_file: CLI override for the log file.
        log_format: CLI override for the log format.
        env_reader: Optional EnvReader for testing (uses os.environ if None).
        strict: If True, raise ConfigFileError on config file parse failures.

    Returns:
        PlaygateConfig with merged configuration.

    Raises:
        ConfigFileError: When strict=True and the config file cannot be parsed.
        ValueError: If the merged values fail validation.
    """
    reader = env_reader or EnvReader()

    if config_path is None:
        config_path = get_default_config_path(reader)
    file_config = load_config_file(config_path, strict=strict)

    cli_source = ConfigSource(
        data_dir=data_dir,
        database_path=database_path,
        history_path=history_path,
        logging_level=log_level,
        logging_file=log_file,
        logging_format=log_format,
    )

    # file < env < cli
    builder = ConfigBuilder()
    builder.apply(source_from_file(file_config))
    builder.apply(source_from_env(reader))
    builder.apply(cli_source)

    return builder.build(default_data_dir=DEFAULT_DATA_DIR)
