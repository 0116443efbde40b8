"""JSON-file watched-history store.

Whole-document semantics: every read parses the full file and every
write replaces it. Writes go through a temp file and rename so a crash
mid-write never leaves a truncated history.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import shutil
import tempfile
from pathlib import Path

from pydantic import ValidationError

from playgate.domain import WatchedEntry
from playgate.exceptions import (
    BackupCreationError,
    HistoryReadError,
    HistoryWriteError,
)
from playgate.history.models import (
    WATCHED_HISTORY_ADAPTER,
    entries_to_document,
    entry_from_document,
)

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_FILENAME = "watched.json"


class JsonWatchedHistoryStore:
    """WatchedHistoryStore over a JSON array file.

    Args:
        path: Location of the history document.
        backup_dir: Directory for backups. Defaults to the document's directory.
    """

    def __init__(self, path: Path, backup_dir: Path | None = None) -> None:
        self.path = path
        self.backup_dir = backup_dir

    async def read_all(self) -> list[WatchedEntry]:
        return await asyncio.to_thread(self._read_all_sync)

    async def write_all(self, entries: list[WatchedEntry]) -> None:
        await asyncio.to_thread(self._write_all_sync, list(entries))

    async def backup(self, suffix: str) -> str | None:
        return await asyncio.to_thread(self._backup_sync, suffix)

    def backup_path_for(self, suffix: str) -> Path:
        """Return where a backup with ``suffix`` would be written."""
        directory = self.backup_dir if self.backup_dir is not None else self.path.parent
        return directory / f"{self.path.name}.backup.{suffix}"

    def _read_all_sync(self) -> list[WatchedEntry]:
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            return []
        except OSError as e:
            raise HistoryReadError(f"Cannot read history {self.path}: {e}") from e

        if not raw.strip():
            return []

        try:
            items = WATCHED_HISTORY_ADAPTER.validate_json(raw)
        except ValidationError as e:
            raise HistoryReadError(
                f"Invalid history document {self.path}: {e.error_count()} error(s)"
            ) from e

        entries = [entry_from_document(item) for item in items]
        for index, entry in enumerate(entries):
            if entry.load_error is not None:
                logger.warning(
                    "Unreadable history entry %d in %s: %s",
                    index,
                    self.path,
                    entry.load_error,
                )
        return entries

    def _write_all_sync(self, entries: list[WatchedEntry]) -> None:
        try:
            content = json.dumps(entries_to_document(entries), indent=2)
        except (TypeError, ValueError) as e:
            raise HistoryWriteError(f"Cannot serialize history: {e}") from e

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, temp_path_str = tempfile.mkstemp(
                suffix=self.path.suffix,
                dir=self.path.parent,
                text=True,
            )
            temp_path = Path(temp_path_str)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(content)
                temp_path.replace(self.path)  # Atomic on POSIX
            except Exception:
                temp_path.unlink(missing_ok=True)
                raise
        except OSError as e:
            raise HistoryWriteError(f"Cannot write history {self.path}: {e}") from e

        logger.debug("Wrote %d history entries to %s", len(entries), self.path)

    def _backup_sync(self, suffix: str) -> str | None:
        backup_path = self.backup_path_for(suffix)
        try:
            if not self.path.exists():
                return None
            backup_path.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(self.path, backup_path)
        except OSError as e:
            raise BackupCreationError(
                f"Failed to create backup {backup_path}: {e}"
            ) from e

        logger.debug(
            "History backup created",
            extra={"source_path": str(self.path), "backup_path": str(backup_path)},
        )
        return str(backup_path)
