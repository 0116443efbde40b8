"""Reconciliation of the download-status and downloaded-video stores.

A catalog id should be present in both stores or in neither. Reads
degrade to a conservative answer on any store failure; removal surfaces
failures because a silently lost deletion leaves the stores disagreeing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from playgate.domain import DownloadedVideoMetadata, DownloadStatusRecord
from playgate.exceptions import DownloadRemovalError
from playgate.interfaces import DownloadedVideoStore, DownloadStatusStore, FileProbe
from playgate.logging import video_context

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RemovalOutcome:
    """Which stores actually held the removed catalog id."""

    status_removed: bool
    metadata_removed: bool


class DownloadReconciler:
    """Keeps the two download stores consistent for a catalog id.

    Args:
        status_store: Store of download-status records.
        metadata_store: Store of downloaded-video metadata.
        probe: Filesystem probe used to confirm a local copy still exists.
    """

    def __init__(
        self,
        status_store: DownloadStatusStore,
        metadata_store: DownloadedVideoStore,
        probe: FileProbe,
    ) -> None:
        self._status_store = status_store
        self._metadata_store = metadata_store
        self._probe = probe

    async def is_downloaded(self, catalog_id: str) -> bool:
        """Check whether metadata for a downloaded copy exists.

        Returns:
            True if the metadata store has an entry. False when it does not
            or when the store cannot be read.
        """
        return await self.get_metadata(catalog_id) is not None

    async def get_metadata(self, catalog_id: str) -> DownloadedVideoMetadata | None:
        """Get downloaded-video metadata, or None if absent or unreadable."""
        try:
            return await self._metadata_store.get(catalog_id)
        except Exception:
            logger.warning(
                "Error reading downloaded video metadata for %s",
                catalog_id,
                exc_info=True,
            )
            return None

    async def get_status(self, catalog_id: str) -> DownloadStatusRecord | None:
        """Get the download-status record, or None if absent or unreadable."""
        try:
            return await self._status_store.get(catalog_id)
        except Exception:
            logger.warning(
                "Error reading download status for %s", catalog_id, exc_info=True
            )
            return None

    async def get_validated_local_path(self, catalog_id: str) -> str | None:
        """Return the local file path only if the file exists right now.

        The filesystem is not touched when there is no metadata or the
        metadata has no file path.

        Args:
            catalog_id: Catalog identifier of the video.

        Returns:
            The recorded file path if the probe confirms it, else None.
        """
        metadata = await self.get_metadata(catalog_id)
        if metadata is None or not metadata.file_path:
            return None

        try:
            exists = await self._probe.exists(metadata.file_path)
        except Exception:
            logger.warning(
                "Error probing downloaded file %s", metadata.file_path, exc_info=True
            )
            return None

        if not exists:
            logger.info(
                "Downloaded file missing for %s: %s", catalog_id, metadata.file_path
            )
            return None
        return metadata.file_path

    async def remove(self, catalog_id: str) -> RemovalOutcome:
        """Remove a catalog id from both download stores.

        The status record is deleted first, then the metadata record.
        Deleting an id a store does not hold is not an error. The two
        deletions are not atomic.

        Args:
            catalog_id: Catalog identifier to remove.

        Returns:
            RemovalOutcome recording which stores held the id.

        Raises:
            DownloadRemovalError: If a store fails. When the metadata stage
                fails the status record has already been deleted.
        """
        with video_context(catalog_id, "remove"):
            try:
                status_removed = await self._status_store.delete(catalog_id)
            except Exception as e:
                logger.error("Failed to delete download status: %s", e)
                raise DownloadRemovalError(catalog_id, "status", e) from e

            try:
                metadata_removed = await self._metadata_store.delete(catalog_id)
            except Exception as e:
                logger.error(
                    "Failed to delete downloaded video metadata after status "
                    "was removed: %s",
                    e,
                )
                raise DownloadRemovalError(catalog_id, "metadata", e) from e

            logger.info(
                "Reset download for %s (status %s, metadata %s)",
                catalog_id,
                "removed" if status_removed else "absent",
                "removed" if metadata_removed else "absent",
            )
            return RemovalOutcome(
                status_removed=status_removed, metadata_removed=metadata_removed
            )
