"""Collaborator protocols for the reconciliation and migration services.

Services receive these through their constructors. Production wiring
uses the sqlite stores in playgate.db.stores, the JSON history store in
playgate.history, LocalFileProbe, and InMemoryCatalogRegistry; tests pass
in-memory fakes or AsyncMocks.
"""

from __future__ import annotations

from typing import Protocol

from playgate.domain import (
    CatalogVideoInfo,
    DownloadedVideoMetadata,
    DownloadStatusRecord,
    WatchedEntry,
)


class DownloadStatusStore(Protocol):
    """Download-status persistence, keyed by catalog identifier."""

    async def get(self, catalog_id: str) -> DownloadStatusRecord | None:
        """Return the status record, or None if the video was never queued.

        Raises:
            PersistenceError: If the store cannot be read.
        """
        ...

    async def delete(self, catalog_id: str) -> bool:
        """Delete the status record. Idempotent.

        Returns:
            True if a record existed and was deleted.

        Raises:
            PersistenceError: If the store cannot be written.
        """
        ...


class DownloadedVideoStore(Protocol):
    """Downloaded-video metadata persistence, keyed by catalog identifier."""

    async def get(self, catalog_id: str) -> DownloadedVideoMetadata | None:
        """Return the metadata record, or None if absent.

        Raises:
            PersistenceError: If the store cannot be read.
        """
        ...

    async def delete(self, catalog_id: str) -> bool:
        """Delete the metadata record. Idempotent.

        Returns:
            True if a record existed and was deleted.

        Raises:
            PersistenceError: If the store cannot be written.
        """
        ...


class WatchedHistoryStore(Protocol):
    """Whole-document watched-history persistence."""

    async def read_all(self) -> list[WatchedEntry]:
        """Read every entry. A missing document reads as empty."""
        ...

    async def write_all(self, entries: list[WatchedEntry]) -> None:
        """Replace the whole document with ``entries``."""
        ...

    async def backup(self, suffix: str) -> str | None:
        """Copy the current document aside before it is overwritten.

        Args:
            suffix: Suffix distinguishing this backup (e.g. a timestamp).

        Returns:
            Location of the backup, or None if there was nothing to copy.

        Raises:
            BackupCreationError: If the copy fails.
        """
        ...


class FileProbe(Protocol):
    """Filesystem existence check."""

    async def exists(self, path: str) -> bool:
        """Return True if ``path`` exists. Absence is False, not an error."""
        ...


class CatalogRegistry(Protocol):
    """Read-only snapshot of videos the catalog client has loaded."""

    def lookup_by_identifier(self, catalog_id: str) -> CatalogVideoInfo | None:
        """Return display metadata for a catalog video, or None."""
        ...
