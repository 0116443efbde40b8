"""Filesystem existence probe."""

from __future__ import annotations

import asyncio
import logging
import os

logger = logging.getLogger(__name__)


class LocalFileProbe:
    """FileProbe over the local filesystem.

    Missing paths, permission problems on parent directories, and
    malformed paths (embedded NUL) all report False. The probe never
    raises for a path it cannot see.
    """

    async def exists(self, path: str) -> bool:
        return await asyncio.to_thread(self.exists_sync, path)

    @staticmethod
    def exists_sync(path: str) -> bool:
        """Blocking form of exists(), for synchronous callers."""
        if not path:
            return False
        try:
            return os.access(path, os.F_OK)
        except (OSError, ValueError) as e:
            logger.debug("File probe failed for %s: %s", path, e)
            return False
