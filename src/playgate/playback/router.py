"""Local-versus-network playback routing for catalog videos.

The router only ever fails toward network delivery: no store or
filesystem error can stop a video from playing.
"""

from __future__ import annotations

import logging
from typing import Any

from playgate.domain import (
    DownloadedVideoMetadata,
    PlayableLocalVideo,
    PlaybackDecision,
)
from playgate.downloads import DownloadReconciler
from playgate.exceptions import FileNotAccessibleError, MissingFilePathError
from playgate.interfaces import FileProbe
from playgate.logging import video_context

logger = logging.getLogger(__name__)


class PlaybackRouter:
    """Decides whether a catalog video plays from its downloaded copy.

    Args:
        reconciler: Source of download state and validated local paths.
        probe: Filesystem probe used to re-check files at materialization.
    """

    def __init__(self, reconciler: DownloadReconciler, probe: FileProbe) -> None:
        self._reconciler = reconciler
        self._probe = probe

    async def decide(self, catalog_id: str) -> PlaybackDecision:
        """Decide where a catalog video should play from.

        Args:
            catalog_id: Catalog identifier of the requested video.

        Returns:
            A local decision carrying the metadata when a downloaded copy
            exists and its file is present, otherwise a network decision.
        """
        with video_context(catalog_id, "decide"):
            try:
                return await self._decide(catalog_id)
            except Exception:
                logger.warning(
                    "Playback routing failed, using network source", exc_info=True
                )
                return PlaybackDecision.network()

    async def _decide(self, catalog_id: str) -> PlaybackDecision:
        if not await self._reconciler.is_downloaded(catalog_id):
            logger.debug("Not downloaded, using network source")
            return PlaybackDecision.network()

        metadata = await self._reconciler.get_metadata(catalog_id)
        if metadata is None:
            logger.warning(
                "Marked as downloaded but metadata is missing, using network source"
            )
            return PlaybackDecision.network()

        local_path = await self._reconciler.get_validated_local_path(catalog_id)
        if local_path is None:
            logger.info(
                "Downloaded file not accessible, using network source: %s",
                metadata.file_path,
            )
            return PlaybackDecision.network()

        logger.info("Using downloaded copy: %s", local_path)
        return PlaybackDecision.local(metadata)

    async def materialize_local_view(
        self,
        metadata: DownloadedVideoMetadata,
        navigation_context: dict[str, Any] | None = None,
    ) -> PlayableLocalVideo:
        """Build a playable view of a downloaded video.

        The file is probed again even if decide() already checked it,
        since it may have been deleted in between.

        Args:
            metadata: Metadata of the downloaded video.
            navigation_context: Caller context passed through unchanged.

        Returns:
            PlayableLocalVideo whose id is the catalog id and whose url is
            the local file path.

        Raises:
            MissingFilePathError: If the metadata has no file path.
            FileNotAccessibleError: If the file does not exist.
        """
        if not metadata.file_path:
            raise MissingFilePathError(metadata.catalog_id)

        if not await self._probe.exists(metadata.file_path):
            raise FileNotAccessibleError(metadata.catalog_id, metadata.file_path)

        return PlayableLocalVideo(
            id=metadata.catalog_id,
            title=metadata.title,
            url=metadata.file_path,
            file_path=metadata.file_path,
            source_id=metadata.source_id,
            source_type=metadata.source_type,
            downloaded_at=metadata.downloaded_at,
            thumbnail=metadata.thumbnail or "",
            duration=metadata.duration or 0,
            source_title=metadata.source_title,
            navigation_context=navigation_context,
        )

    async def get_validated_downloaded_video(
        self, catalog_id: str
    ) -> DownloadedVideoMetadata | None:
        """Return metadata of a playable downloaded copy, or None."""
        decision = await self.decide(catalog_id)
        return decision.metadata if decision.use_local else None

    async def is_routed_to_local(self, catalog_id: str) -> bool:
        """Return True if the video would play from its downloaded copy."""
        decision = await self.decide(catalog_id)
        return decision.use_local
