"""Domain models and enums for Playgate.

Usage:
    from playgate.domain import WatchedEntry, DownloadedVideoMetadata
    from playgate.domain import DownloadState, SourceType
"""

from .enums import DownloadState, SourceType
from .models import (
    CatalogVideoInfo,
    DownloadedVideoMetadata,
    DownloadStatusRecord,
    PlayableLocalVideo,
    PlaybackDecision,
    WatchedEntry,
)

__all__ = [
    # Enums
    "DownloadState",
    "SourceType",
    # Models
    "CatalogVideoInfo",
    "DownloadStatusRecord",
    "DownloadedVideoMetadata",
    "PlayableLocalVideo",
    "PlaybackDecision",
    "WatchedEntry",
]
