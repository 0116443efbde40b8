"""Environment variable reader with dependency injection support.

EnvReader reads and converts PLAYGATE_* variables. Tests pass an explicit
mapping instead of patching os.environ.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

logger = logging.getLogger(__name__)

_TRUE_VALUES = frozenset({"true", "1", "yes", "on"})


class EnvReader:
    """Environment variable reader with type conversion.

    Example:
        reader = EnvReader(env={"PLAYGATE_LOG_MAX_BYTES": "1024"})
        reader.get_int("PLAYGATE_LOG_MAX_BYTES", 10)  # 1024
    """

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        """Initialize the environment reader.

        Args:
            env: Optional mapping to use instead of os.environ.
        """
        self._env: Mapping[str, str] = env if env is not None else os.environ

    def get_str(self, var: str, default: str | None = None) -> str | None:
        value = self._env.get(var)
        if value is None or value == "":
            return default
        return value

    def get_int(self, var: str, default: int | None = None) -> int | None:
        """Get an integer from an environment variable.

        Logs a warning and returns ``default`` when the value is not an integer.
        """
        value = self._env.get(var)
        if value is None or value == "":
            return default
        try:
            return int(value)
        except ValueError:
            logger.warning("Invalid integer value for %s: %s", var, value)
            return default

    def get_bool(self, var: str, default: bool | None = None) -> bool | None:
        """Get a boolean from an environment variable.

        "true", "1", "yes" and "on" (any case) are true, anything else false.
        """
        value = self._env.get(var)
        if value is None or value == "":
            return default
        return value.strip().lower() in _TRUE_VALUES

    def get_path(self, var: str, default: Path | None = None) -> Path | None:
        """Get a path from an environment variable, with tilde expansion.

        The path does not need to exist; data files are created on demand.
        """
        value = self._env.get(var)
        if value is None or value == "":
            return default
        return Path(value).expanduser()
