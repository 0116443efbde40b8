"""Query helpers for the downloads (download status) table.

The downloads table tracks active and recent download operations. Rows
are transient: finished downloads are cleaned up after a retention period.

None of these functions commit. Callers manage transactions.
"""

from __future__ import annotations

import sqlite3
import time

from playgate.domain import DownloadState, DownloadStatusRecord

COMPLETED_RETENTION_MS = 7 * 24 * 60 * 60 * 1000
FAILED_RETENTION_MS = 30 * 24 * 60 * 60 * 1000

_COLUMNS = """
    video_id, source_id, status, progress, start_time, end_time,
    error_message, file_path
"""


def _now_ms() -> int:
    return int(time.time() * 1000)


def _row_to_status_record(row: sqlite3.Row) -> DownloadStatusRecord:
    """Convert a downloads row to a DownloadStatusRecord."""
    return DownloadStatusRecord(
        catalog_id=row["video_id"],
        status=DownloadState(row["status"]),
        progress=row["progress"],
        source_id=row["source_id"],
        start_time=row["start_time"],
        end_time=row["end_time"],
        error_message=row["error_message"],
        file_path=row["file_path"],
    )


def get_download_status(
    conn: sqlite3.Connection, video_id: str
) -> DownloadStatusRecord | None:
    """Get the download status row for a video.

    Args:
        conn: Database connection.
        video_id: Catalog identifier.

    Returns:
        DownloadStatusRecord if found, None otherwise.
    """
    cursor = conn.execute(
        f"SELECT {_COLUMNS} FROM downloads WHERE video_id = ?",  # nosec B608
        (video_id,),
    )
    row = cursor.fetchone()
    if row is None:
        return None
    return _row_to_status_record(row)


def get_active_downloads(conn: sqlite3.Connection) -> list[DownloadStatusRecord]:
    """Get downloads that are pending or in progress, oldest first."""
    cursor = conn.execute(
        f"""
        SELECT {_COLUMNS} FROM downloads
        WHERE status IN ('pending', 'downloading')
        ORDER BY start_time ASC
        """  # nosec B608
    )
    return [_row_to_status_record(row) for row in cursor.fetchall()]


def create_download(
    conn: sqlite3.Connection,
    video_id: str,
    source_id: str | None,
    *,
    now_ms: int | None = None,
) -> None:
    """Create (or reset) a download row in pending status.

    Args:
        conn: Database connection.
        video_id: Catalog identifier.
        source_id: Source the video was queued from.
        now_ms: Start time override (epoch ms), for tests.
    """
    conn.execute(
        """
        INSERT OR REPLACE INTO downloads
            (video_id, source_id, status, progress, start_time, updated_at)
        VALUES (?, ?, 'pending', 0, ?, CURRENT_TIMESTAMP)
        """,
        (video_id, source_id, now_ms if now_ms is not None else _now_ms()),
    )


def update_download_progress(
    conn: sqlite3.Connection, video_id: str, progress: int
) -> None:
    """Record download progress, clamped to 0-100, and mark it downloading."""
    clamped = max(0, min(100, int(progress)))
    conn.execute(
        """
        UPDATE downloads
        SET progress = ?, status = 'downloading', updated_at = CURRENT_TIMESTAMP
        WHERE video_id = ?
        """,
        (clamped, video_id),
    )


def mark_download_completed(
    conn: sqlite3.Connection,
    video_id: str,
    file_path: str,
    *,
    now_ms: int | None = None,
) -> None:
    """Mark a download completed at 100% with its output path."""
    conn.execute(
        """
        UPDATE downloads
        SET status = 'completed', progress = 100, end_time = ?, file_path = ?,
            updated_at = CURRENT_TIMESTAMP
        WHERE video_id = ?
        """,
        (now_ms if now_ms is not None else _now_ms(), file_path, video_id),
    )


def mark_download_failed(
    conn: sqlite3.Connection,
    video_id: str,
    error_message: str,
    *,
    now_ms: int | None = None,
) -> None:
    """Mark a download failed with an error message."""
    conn.execute(
        """
        UPDATE downloads
        SET status = 'failed', end_time = ?, error_message = ?,
            updated_at = CURRENT_TIMESTAMP
        WHERE video_id = ?
        """,
        (now_ms if now_ms is not None else _now_ms(), error_message, video_id),
    )


def delete_download(conn: sqlite3.Connection, video_id: str) -> bool:
    """Delete the download row for a video.

    Deleting a missing row is not an error.

    Returns:
        True if a row was deleted.
    """
    cursor = conn.execute("DELETE FROM downloads WHERE video_id = ?", (video_id,))
    return cursor.rowcount > 0


def is_downloading(conn: sqlite3.Connection, video_id: str) -> bool:
    """Check whether a video is pending or currently downloading."""
    cursor = conn.execute(
        """
        SELECT COUNT(*) FROM downloads
        WHERE video_id = ? AND status IN ('pending', 'downloading')
        """,
        (video_id,),
    )
    return cursor.fetchone()[0] > 0


def count_downloads_by_status(conn: sqlite3.Connection, status: DownloadState) -> int:
    """Count download rows in a given state."""
    cursor = conn.execute(
        "SELECT COUNT(*) FROM downloads WHERE status = ?", (status.value,)
    )
    return cursor.fetchone()[0]


def cleanup_old_downloads(
    conn: sqlite3.Connection, *, now_ms: int | None = None
) -> int:
    """Remove finished download rows past their retention period.

    Completed downloads are kept for 7 days and failed downloads for 30
    days, measured from end_time. Only the status table is touched: a
    completed download keeps its downloaded_videos row.

    Returns:
        Number of rows removed.
    """
    now = now_ms if now_ms is not None else _now_ms()
    completed = conn.execute(
        "DELETE FROM downloads WHERE status = 'completed' AND end_time < ?",
        (now - COMPLETED_RETENTION_MS,),
    )
    failed = conn.execute(
        "DELETE FROM downloads WHERE status = 'failed' AND end_time < ?",
        (now - FAILED_RETENTION_MS,),
    )
    return completed.rowcount + failed.rowcount
