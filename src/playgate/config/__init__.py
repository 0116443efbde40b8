"""Configuration for Playgate.

Usage:
    from playgate.config import get_config
    config = get_config()
    config.storage.history_path
"""

from playgate.config.builder import (
    ConfigBuilder,
    ConfigSource,
    source_from_env,
    source_from_file,
)
from playgate.config.env import EnvReader
from playgate.config.loader import (
    DEFAULT_DATA_DIR,
    clear_config_cache,
    get_config,
    get_data_dir,
    get_default_config_path,
    load_config_file,
)
from playgate.config.models import (
    LoggingConfig,
    MigrationConfig,
    PlaygateConfig,
    StorageConfig,
)

__all__ = [
    "DEFAULT_DATA_DIR",
    "ConfigBuilder",
    "ConfigSource",
    "EnvReader",
    "LoggingConfig",
    "MigrationConfig",
    "PlaygateConfig",
    "StorageConfig",
    "clear_config_cache",
    "get_config",
    "get_data_dir",
    "get_default_config_path",
    "load_config_file",
    "source_from_env",
    "source_from_file",
]
