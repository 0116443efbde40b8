"""Watched-history migration."""

from playgate.migration.thumbnails import (
    THUMBNAIL_EXTENSIONS,
    find_thumbnail,
    video_title_from_path,
)
from playgate.migration.watched_history import MigrationResult, WatchedHistoryMigrator

__all__ = [
    "THUMBNAIL_EXTENSIONS",
    "MigrationResult",
    "WatchedHistoryMigrator",
    "find_thumbnail",
    "video_title_from_path",
]
