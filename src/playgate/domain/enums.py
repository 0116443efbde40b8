"""Domain enums for Playgate."""

from enum import Enum


class DownloadState(Enum):
    """Lifecycle state of a queued download.

    State transitions:
        pending -> downloading (first progress report)
        downloading -> completed | failed
    """

    PENDING = "pending"
    DOWNLOADING = "downloading"
    COMPLETED = "completed"
    FAILED = "failed"


class SourceType(Enum):
    """Kind of source a video was listed under."""

    CATALOG_CHANNEL = "catalog_channel"
    CATALOG_PLAYLIST = "catalog_playlist"
    NETWORK_DEVICE = "dlna"
    LOCAL = "local"
