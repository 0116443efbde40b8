"""Exception hierarchy for Playgate.

Read-only queries never raise these to their callers; they degrade to a
conservative answer instead. Mutating operations (download removal, the
final history write) and materialization do raise them.
"""

from __future__ import annotations


class PlaygateError(Exception):
    """Base exception for all Playgate errors."""


class PersistenceError(PlaygateError):
    """Raised when an external store cannot be read or written."""


class HistoryReadError(PersistenceError):
    """Raised when the watched-history document cannot be read or parsed."""


class HistoryWriteError(PersistenceError):
    """Raised when the watched-history document cannot be written."""


class MigrationWriteError(PersistenceError):
    """Raised when migrated history entries cannot be persisted.

    Attributes:
        migrated: Number of entries that had been migrated in memory.
    """

    def __init__(self, message: str, migrated: int = 0) -> None:
        self.migrated = migrated
        super().__init__(message)


class DownloadRemovalError(PersistenceError):
    """Raised when removing a download from its stores fails.

    Removal is not transactional: when this is raised the status record
    may already be gone while the metadata record remains.

    Attributes:
        catalog_id: Catalog identifier being removed.
        stage: Which store failed ("status" or "metadata").
    """

    def __init__(self, catalog_id: str, stage: str, cause: BaseException) -> None:
        self.catalog_id = catalog_id
        self.stage = stage
        super().__init__(
            f"Failed to reset download status for {catalog_id} "
            f"({stage} store): {cause}"
        )


class BackupCreationError(PlaygateError):
    """Raised when a backup copy of the history document cannot be made."""


class MaterializationError(PlaygateError):
    """Base for errors building a playable view of a local copy.

    Attributes:
        catalog_id: Catalog identifier of the downloaded video.
    """

    def __init__(self, catalog_id: str, message: str) -> None:
        self.catalog_id = catalog_id
        super().__init__(message)


class MissingFilePathError(MaterializationError):
    """Raised when downloaded-video metadata has no file path."""

    def __init__(self, catalog_id: str) -> None:
        super().__init__(
            catalog_id, f"No file path available for downloaded video {catalog_id}"
        )


class FileNotAccessibleError(MaterializationError):
    """Raised when the recorded local file no longer passes the probe.

    Attributes:
        file_path: The path that failed the probe.
    """

    def __init__(self, catalog_id: str, file_path: str) -> None:
        self.file_path = file_path
        super().__init__(
            catalog_id, f"Downloaded video file not accessible: {file_path}"
        )


class CatalogSnapshotError(PersistenceError):
    """Raised when a catalog snapshot file cannot be read or validated."""


class ConfigFileError(PlaygateError):
    """Raised in strict mode when the config file cannot be parsed."""
