"""CLI commands for downloaded-video state.

``status`` and ``remove`` go through the reconciler. The recording
commands (``start``, ``progress``, ``complete``, ``fail``) let an external
downloader report the lifecycle of a download; ``list`` and ``cleanup``
work on the tables directly.
"""

from __future__ import annotations

import asyncio
import dataclasses
import sqlite3
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, TypeVar

import click

from playgate.cli.exit_codes import ExitCode
from playgate.cli.output import echo_json, error_exit, format_file_size
from playgate.cli.services import build_reconciler, get_db_conn_from_ctx
from playgate.db import execute_with_retry
from playgate.db.queries import (
    cleanup_old_downloads,
    count_downloaded_videos,
    count_downloads_by_status,
    create_download,
    get_active_downloads,
    get_download_status,
    get_downloaded_videos,
    get_total_downloaded_size,
    insert_downloaded_video,
    is_downloading,
    is_video_downloaded,
    mark_download_completed,
    mark_download_failed,
    update_download_progress,
)
from playgate.domain import DownloadedVideoMetadata, DownloadState, SourceType
from playgate.downloads import DownloadReconciler
from playgate.exceptions import DownloadRemovalError

T = TypeVar("T")


@click.group("downloads")
def downloads_group() -> None:
    """Inspect, record and reset downloaded videos."""


async def _collect_status(
    reconciler: DownloadReconciler, catalog_id: str
) -> dict[str, Any]:
    status = await reconciler.get_status(catalog_id)
    metadata = await reconciler.get_metadata(catalog_id)
    local_path = await reconciler.get_validated_local_path(catalog_id)
    return {
        "catalog_id": catalog_id,
        "status": dataclasses.asdict(status) if status else None,
        "metadata": dataclasses.asdict(metadata) if metadata else None,
        "validated_path": local_path,
    }


@downloads_group.command("status")
@click.argument("catalog_id")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON.")
@click.pass_context
def status_command(ctx: click.Context, catalog_id: str, json_output: bool) -> None:
    """Show download status, metadata and file check for CATALOG_ID."""
    reconciler = build_reconciler(get_db_conn_from_ctx(ctx))
    info = asyncio.run(_collect_status(reconciler, catalog_id))

    if json_output:
        echo_json(info)
        return

    status = info["status"]
    metadata = info["metadata"]
    if status is None and metadata is None:
        click.echo(f"{catalog_id}: not downloaded")
        return

    if status is not None:
        click.echo(f"Status:   {status['status'].value} ({status['progress']}%)")
    else:
        click.echo("Status:   (no record)")
    if metadata is not None:
        click.echo(f"Title:    {metadata['title']}")
        click.echo(f"File:     {metadata['file_path']}")
    else:
        click.echo("Metadata: (no record)")
    click.echo(f"On disk:  {'yes' if info['validated_path'] else 'no'}")


@downloads_group.command("remove")
@click.argument("catalog_id")
@click.pass_context
def remove_command(ctx: click.Context, catalog_id: str) -> None:
    """Reset CATALOG_ID so it is no longer considered downloaded.

    Removes both the download-status and the downloaded-video records.
    The video file itself is left on disk.
    """
    reconciler = build_reconciler(get_db_conn_from_ctx(ctx))

    try:
        outcome = asyncio.run(reconciler.remove(catalog_id))
    except DownloadRemovalError as e:
        if e.stage == "metadata":
            click.echo(
                "Warning: status record was removed but metadata remains",
                err=True,
            )
        error_exit(str(e), ExitCode.DATABASE_ERROR)

    if not outcome.status_removed and not outcome.metadata_removed:
        click.echo(f"{catalog_id} was not downloaded; nothing to remove.")
    else:
        click.echo(f"Reset download for {catalog_id}.")


def _run_query(
    conn: sqlite3.Connection, query: Callable[[sqlite3.Connection], T]
) -> T:
    try:
        return query(conn)
    except sqlite3.Error as e:
        error_exit(f"Database query failed: {e}", ExitCode.DATABASE_ERROR)


def _commit(
    conn: sqlite3.Connection, statement: Callable[[sqlite3.Connection], T]
) -> T:
    """Run a write and commit it, retrying while the database is locked."""

    def _attempt() -> T:
        try:
            result = statement(conn)
            conn.commit()
            return result
        except Exception:
            conn.rollback()
            raise

    try:
        return execute_with_retry(_attempt)
    except sqlite3.Error as e:
        error_exit(f"Database write failed: {e}", ExitCode.DATABASE_ERROR)


def _require_active(conn: sqlite3.Connection, catalog_id: str) -> None:
    """Exit unless CATALOG_ID has a pending or downloading record."""
    if not _run_query(conn, lambda c: is_downloading(c, catalog_id)):
        error_exit(
            f"No active download for {catalog_id}. "
            f"Run 'playgate downloads start {catalog_id}' first.",
            ExitCode.OPERATION_FAILED,
        )


@downloads_group.command("list")
@click.option("--source", "source_id", help="Only videos from this source.")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_command(ctx: click.Context, source_id: str | None, json_output: bool) -> None:
    """List downloaded videos and downloads in progress.

    Examples:

        # Everything downloaded so far
        playgate downloads list

        # Only one channel, as JSON
        playgate downloads list --source UC_channel_1 --json
    """
    conn = get_db_conn_from_ctx(ctx)

    videos = _run_query(conn, lambda c: get_downloaded_videos(c, source_id))
    count = _run_query(conn, lambda c: count_downloaded_videos(c, source_id))
    total_size = _run_query(conn, lambda c: get_total_downloaded_size(c, source_id))
    active = _run_query(conn, get_active_downloads)
    by_status = _run_query(
        conn,
        lambda c: {
            state.value: count_downloads_by_status(c, state)
            for state in DownloadState
        },
    )

    if json_output:
        echo_json(
            {
                "downloaded": [dataclasses.asdict(video) for video in videos],
                "count": count,
                "total_size": total_size,
                "active": [dataclasses.asdict(record) for record in active],
                "by_status": by_status,
            }
        )
        return

    if not videos:
        click.echo("No downloaded videos.")
    else:
        click.echo(f"{'ID':<12} {'SOURCE':<20} {'DOWNLOADED':<26} TITLE")
        click.echo("-" * 80)
        for video in videos:
            click.echo(
                f"{video.catalog_id:<12} {video.source_id[:20]:<20} "
                f"{video.downloaded_at[:26]:<26} {video.title}"
            )
        click.echo(f"\n{count} video(s), {format_file_size(total_size)}")

    if active:
        click.echo("\nIn progress:")
        for record in active:
            click.echo(
                f"  {record.catalog_id} {record.status.value} {record.progress}%"
            )
    if by_status[DownloadState.FAILED.value]:
        click.echo(f"Failed downloads: {by_status[DownloadState.FAILED.value]}")


@downloads_group.command("start")
@click.argument("catalog_id")
@click.option("--source", "source_id", help="Source the video was queued from.")
@click.pass_context
def start_command(ctx: click.Context, catalog_id: str, source_id: str | None) -> None:
    """Record that CATALOG_ID was queued for download.

    A finished or failed earlier attempt is replaced. A video that is
    already downloading or downloaded is refused.
    """
    conn = get_db_conn_from_ctx(ctx)

    if _run_query(conn, lambda c: is_downloading(c, catalog_id)):
        error_exit(f"{catalog_id} is already downloading", ExitCode.OPERATION_FAILED)
    if _run_query(conn, lambda c: is_video_downloaded(c, catalog_id)):
        error_exit(
            f"{catalog_id} is already downloaded. "
            f"Run 'playgate downloads remove {catalog_id}' to download it again.",
            ExitCode.OPERATION_FAILED,
        )

    _commit(conn, lambda c: create_download(c, catalog_id, source_id))
    click.echo(f"Queued {catalog_id}.")


@downloads_group.command("progress")
@click.argument("catalog_id")
@click.argument("percent", type=int)
@click.pass_context
def progress_command(ctx: click.Context, catalog_id: str, percent: int) -> None:
    """Record download progress for CATALOG_ID (clamped to 0-100)."""
    conn = get_db_conn_from_ctx(ctx)
    _require_active(conn, catalog_id)

    _commit(conn, lambda c: update_download_progress(c, catalog_id, percent))
    record = _run_query(conn, lambda c: get_download_status(c, catalog_id))
    if record is not None:
        click.echo(f"{catalog_id}: {record.progress}%")


@downloads_group.command("complete")
@click.argument("catalog_id")
@click.argument(
    "file_path",
    type=click.Path(exists=True, dir_okay=False, resolve_path=True, path_type=Path),
)
@click.option("--title", required=True, help="Video title.")
@click.option("--source", "source_id", help="Source id (defaults to the queued one).")
@click.option(
    "--source-type",
    type=click.Choice([t.value for t in SourceType]),
    default=SourceType.CATALOG_CHANNEL.value,
    show_default=True,
    help="Kind of source the video was listed under.",
)
@click.option("--source-title", help="Display name of the source.")
@click.option("--duration", type=float, help="Duration in seconds.")
@click.option("--thumbnail", help="Thumbnail path or URL.")
@click.option("--format", "video_format", help="Container or quality label.")
@click.pass_context
def complete_command(
    ctx: click.Context,
    catalog_id: str,
    file_path: Path,
    title: str,
    source_id: str | None,
    source_type: str,
    source_title: str | None,
    duration: float | None,
    thumbnail: str | None,
    video_format: str | None,
) -> None:
    """Record that CATALOG_ID finished downloading to FILE_PATH.

    Marks the status record completed and writes the downloaded-video
    metadata in one transaction, so playback can route to the file.
    """
    conn = get_db_conn_from_ctx(ctx)
    _require_active(conn, catalog_id)

    record = _run_query(conn, lambda c: get_download_status(c, catalog_id))
    resolved_source = source_id or (record.source_id if record else None)
    if not resolved_source:
        error_exit(
            f"No source recorded for {catalog_id}; pass --source.",
            ExitCode.OPERATION_FAILED,
        )

    metadata = DownloadedVideoMetadata(
        catalog_id=catalog_id,
        title=title,
        file_path=str(file_path),
        downloaded_at=datetime.now(timezone.utc).isoformat(),
        source_id=resolved_source,
        source_type=SourceType(source_type),
        duration=duration,
        thumbnail=thumbnail,
        source_title=source_title,
        file_size=file_path.stat().st_size,
        format=video_format,
    )

    def _record(c: sqlite3.Connection) -> None:
        mark_download_completed(c, catalog_id, metadata.file_path)
        insert_downloaded_video(c, metadata)

    _commit(conn, _record)
    click.echo(f"Recorded download of {catalog_id} at {metadata.file_path}.")


@downloads_group.command("fail")
@click.argument("catalog_id")
@click.argument("message")
@click.pass_context
def fail_command(ctx: click.Context, catalog_id: str, message: str) -> None:
    """Record that the download of CATALOG_ID failed with MESSAGE."""
    conn = get_db_conn_from_ctx(ctx)
    _require_active(conn, catalog_id)

    _commit(conn, lambda c: mark_download_failed(c, catalog_id, message))
    click.echo(f"Marked {catalog_id} as failed.")


@downloads_group.command("cleanup")
@click.option("--dry-run", "-n", is_flag=True, help="Show what would be removed.")
@click.pass_context
def cleanup_command(ctx: click.Context, dry_run: bool) -> None:
    """Remove finished download records past their retention period.

    Completed records are kept for 7 days and failed ones for 30 days.
    Downloaded-video metadata is never touched, so completed videos
    stay playable.
    """
    conn = get_db_conn_from_ctx(ctx)

    if dry_run:
        removed = _run_query(conn, cleanup_old_downloads)
        conn.rollback()
        click.echo(f"[DRY RUN] Would remove {removed} download record(s).")
        return

    removed = _commit(conn, cleanup_old_downloads)
    click.echo(f"Removed {removed} download record(s).")
