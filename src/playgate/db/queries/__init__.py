"""Query helpers for the download tables.

Usage:
    from playgate.db.queries import get_downloaded_video, delete_download
"""

from .downloaded_videos import (
    count_downloaded_videos,
    delete_downloaded_video,
    get_downloaded_video,
    get_downloaded_videos,
    get_total_downloaded_size,
    insert_downloaded_video,
    is_video_downloaded,
)
from .downloads import (
    cleanup_old_downloads,
    count_downloads_by_status,
    create_download,
    delete_download,
    get_active_downloads,
    get_download_status,
    is_downloading,
    mark_download_completed,
    mark_download_failed,
    update_download_progress,
)

__all__ = [
    # downloads
    "cleanup_old_downloads",
    "count_downloads_by_status",
    "create_download",
    "delete_download",
    "get_active_downloads",
    "get_download_status",
    "is_downloading",
    "mark_download_completed",
    "mark_download_failed",
    "update_download_progress",
    # downloaded_videos
    "count_downloaded_videos",
    "delete_downloaded_video",
    "get_downloaded_video",
    "get_downloaded_videos",
    "get_total_downloaded_size",
    "insert_downloaded_video",
    "is_video_downloaded",
]
