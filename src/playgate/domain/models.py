"""Domain models for Playgate.

These models are independent of how they are persisted: the sqlite
stores and the watched-history document both convert to and from them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from playgate.domain.enums import DownloadState, SourceType


@dataclass
class WatchedEntry:
    """One video in the watched history.

    Created on first watch, updated on every later watch event, and never
    deleted automatically. ``identifier`` is the stored identifier string,
    which may still use a legacy scheme until the history is migrated.
    """

    identifier: str
    position: float  # seconds
    last_watched_at: str  # ISO 8601
    total_time_watched: float  # seconds
    title: str | None = None
    thumbnail: str | None = None
    source_label: str | None = None
    first_watched_at: str | None = None  # ISO 8601
    duration: float | None = None  # seconds
    watched: bool | None = None
    # Fields we do not model, kept so a rewrite never drops data
    extra: dict[str, Any] = field(default_factory=dict)
    # Set when the persisted entry could not be read. ``raw`` then holds
    # it exactly as loaded and is what gets written back.
    load_error: str | None = None
    raw: Any = None

    @property
    def has_metadata(self) -> bool:
        """True if any display metadata (title, thumbnail, source) is set."""
        return bool(self.title or self.thumbnail or self.source_label)


@dataclass(frozen=True)
class DownloadStatusRecord:
    """Download-status row for a catalog video that was ever queued."""

    catalog_id: str
    status: DownloadState
    progress: int  # 0-100
    source_id: str | None = None
    start_time: int | None = None  # epoch milliseconds
    end_time: int | None = None  # epoch milliseconds
    error_message: str | None = None
    file_path: str | None = None


@dataclass(frozen=True)
class DownloadedVideoMetadata:
    """Metadata for a catalog video whose local copy is believed to exist.

    ``file_path`` is a claim recorded at download time. It is only
    authoritative after a filesystem probe succeeds.
    """

    catalog_id: str
    title: str
    file_path: str
    downloaded_at: str  # ISO 8601
    source_id: str
    source_type: SourceType = SourceType.CATALOG_CHANNEL
    duration: float | None = None  # seconds
    thumbnail: str | None = None
    source_title: str | None = None
    file_size: int | None = None
    format: str | None = None


@dataclass(frozen=True)
class CatalogVideoInfo:
    """Display metadata for a video the remote catalog currently has loaded."""

    title: str | None = None
    thumbnail: str | None = None
    source_label: str | None = None


@dataclass(frozen=True)
class PlaybackDecision:
    """Where a catalog video should play from.

    ``metadata`` is set only when ``use_local`` is True.
    """

    use_local: bool
    metadata: DownloadedVideoMetadata | None = None

    @classmethod
    def network(cls) -> PlaybackDecision:
        """Decision to use network delivery."""
        return cls(use_local=False)

    @classmethod
    def local(cls, metadata: DownloadedVideoMetadata) -> PlaybackDecision:
        """Decision to play the validated local copy."""
        return cls(use_local=True, metadata=metadata)


@dataclass(frozen=True)
class PlayableLocalVideo:
    """Playable view of a downloaded catalog video.

    Keeps the original catalog id so navigation (back button, history)
    continues to refer to the catalog video, while ``url`` points at the
    local file.
    """

    id: str
    title: str
    url: str
    file_path: str
    source_id: str
    source_type: SourceType
    downloaded_at: str
    thumbnail: str = ""
    duration: float = 0
    source_title: str | None = None
    navigation_context: dict[str, Any] | None = None
    kind: str = "local"
    is_available: bool = True
    is_fallback: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict for the playback caller."""
        return {
            "id": self.id,
            "type": self.kind,
            "title": self.title,
            "thumbnail": self.thumbnail,
            "duration": self.duration,
            "url": self.url,
            "filePath": self.file_path,
            "sourceId": self.source_id,
            "sourceType": self.source_type.value,
            "sourceTitle": self.source_title,
            "downloadedAt": self.downloaded_at,
            "navigationContext": self.navigation_context,
            "isAvailable": self.is_available,
            "isFallback": self.is_fallback,
        }
