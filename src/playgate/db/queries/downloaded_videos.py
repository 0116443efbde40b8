"""Query helpers for the downloaded_videos table.

The downloaded_videos table is the permanent registry of catalog videos
that were downloaded successfully. A row's file_path is what was written
at download time; whether the file still exists is checked elsewhere.

None of these functions commit. Callers manage transactions.
"""

from __future__ import annotations

import sqlite3
from datetime import datetime, timezone

from playgate.domain import DownloadedVideoMetadata, SourceType

_COLUMNS = """
    video_id, source_id, source_type, source_title, title, file_path,
    thumbnail_path, duration, downloaded_at, file_size, format
"""


def _row_to_metadata(row: sqlite3.Row) -> DownloadedVideoMetadata:
    """Convert a downloaded_videos row to DownloadedVideoMetadata."""
    try:
        source_type = SourceType(row["source_type"])
    except ValueError:
        source_type = SourceType.CATALOG_CHANNEL
    return DownloadedVideoMetadata(
        catalog_id=row["video_id"],
        title=row["title"],
        file_path=row["file_path"],
        downloaded_at=row["downloaded_at"],
        source_id=row["source_id"],
        source_type=source_type,
        duration=row["duration"],
        thumbnail=row["thumbnail_path"],
        source_title=row["source_title"],
        file_size=row["file_size"],
        format=row["format"],
    )


def get_downloaded_video(
    conn: sqlite3.Connection, video_id: str
) -> DownloadedVideoMetadata | None:
    """Get downloaded-video metadata by catalog identifier.

    Args:
        conn: Database connection.
        video_id: Catalog identifier.

    Returns:
        DownloadedVideoMetadata if found, None otherwise.
    """
    cursor = conn.execute(
        f"SELECT {_COLUMNS} FROM downloaded_videos WHERE video_id = ?",  # nosec B608
        (video_id,),
    )
    row = cursor.fetchone()
    if row is None:
        return None
    return _row_to_metadata(row)


def get_downloaded_videos(
    conn: sqlite3.Connection, source_id: str | None = None
) -> list[DownloadedVideoMetadata]:
    """List downloaded videos, newest first, optionally for one source."""
    if source_id is not None:
        cursor = conn.execute(
            f"""
            SELECT {_COLUMNS} FROM downloaded_videos
            WHERE source_id = ?
            ORDER BY downloaded_at DESC
            """,  # nosec B608
            (source_id,),
        )
    else:
        cursor = conn.execute(
            f"""
            SELECT {_COLUMNS} FROM downloaded_videos
            ORDER BY downloaded_at DESC
            """  # nosec B608
        )
    return [_row_to_metadata(row) for row in cursor.fetchall()]


def insert_downloaded_video(
    conn: sqlite3.Connection, metadata: DownloadedVideoMetadata
) -> None:
    """Insert or replace the downloaded-video row for a catalog video.

    An empty downloaded_at is filled with the current UTC time.
    """
    downloaded_at = metadata.downloaded_at or datetime.now(timezone.utc).isoformat()
    conn.execute(
        """
        INSERT OR REPLACE INTO downloaded_videos (
            video_id, source_id, source_type, source_title, title, file_path,
            thumbnail_path, duration, downloaded_at, file_size, format,
            updated_at
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, CURRENT_TIMESTAMP)
        """,
        (
            metadata.catalog_id,
            metadata.source_id,
            metadata.source_type.value,
            metadata.source_title,
            metadata.title,
            metadata.file_path,
            metadata.thumbnail,
            metadata.duration,
            downloaded_at,
            metadata.file_size,
            metadata.format,
        ),
    )


def is_video_downloaded(conn: sqlite3.Connection, video_id: str) -> bool:
    """Check whether a downloaded-video row exists for a catalog video."""
    cursor = conn.execute(
        "SELECT COUNT(*) FROM downloaded_videos WHERE video_id = ?", (video_id,)
    )
    return cursor.fetchone()[0] > 0


def delete_downloaded_video(conn: sqlite3.Connection, video_id: str) -> bool:
    """Delete the downloaded-video row for a catalog video.

    Deleting a missing row is not an error.

    Returns:
        True if a row was deleted.
    """
    cursor = conn.execute(
        "DELETE FROM downloaded_videos WHERE video_id = ?", (video_id,)
    )
    return cursor.rowcount > 0


def count_downloaded_videos(
    conn: sqlite3.Connection, source_id: str | None = None
) -> int:
    """Count downloaded videos, optionally for one source."""
    if source_id is not None:
        cursor = conn.execute(
            "SELECT COUNT(*) FROM downloaded_videos WHERE source_id = ?",
            (source_id,),
        )
    else:
        cursor = conn.execute("SELECT COUNT(*) FROM downloaded_videos")
    return cursor.fetchone()[0]


def get_total_downloaded_size(
    conn: sqlite3.Connection, source_id: str | None = None
) -> int:
    """Sum recorded file sizes, optionally for one source. Unknown sizes count 0."""
    if source_id is not None:
        cursor = conn.execute(
            "SELECT COALESCE(SUM(file_size), 0) FROM downloaded_videos "
            "WHERE source_id = ?",
            (source_id,),
        )
    else:
        cursor = conn.execute(
            "SELECT COALESCE(SUM(file_size), 0) FROM downloaded_videos"
        )
    return cursor.fetchone()[0]
