"""Async store adapters over the sqlite download tables.

The reconciliation services are async; the query helpers are plain
sqlite3 calls. These adapters run each query in a worker thread with
asyncio.to_thread and convert sqlite errors to PersistenceError.
"""

from __future__ import annotations

import asyncio
import logging
import sqlite3
import threading
from collections.abc import Callable
from typing import TypeVar

from playgate.db.connection import execute_with_retry
from playgate.db.queries import (
    delete_download,
    delete_downloaded_video,
    get_download_status,
    get_downloaded_video,
)
from playgate.domain import DownloadedVideoMetadata, DownloadStatusRecord
from playgate.exceptions import PersistenceError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _SqliteStore:
    """Shared plumbing: one connection, serialized across worker threads."""

    table: str = ""

    def __init__(
        self, conn: sqlite3.Connection, lock: threading.Lock | None = None
    ) -> None:
        self.conn = conn
        self._lock = lock if lock is not None else threading.Lock()

    async def _read(self, query: Callable[[sqlite3.Connection], T]) -> T:
        def _run() -> T:
            with self._lock:
                return query(self.conn)

        try:
            return await asyncio.to_thread(_run)
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to read {self.table}: {e}") from e

    async def _write(self, statement: Callable[[sqlite3.Connection], T]) -> T:
        def _attempt() -> T:
            with self._lock:
                try:
                    result = statement(self.conn)
                    self.conn.commit()
                    return result
                except Exception:
                    self.conn.rollback()
                    raise

        try:
            return await asyncio.to_thread(execute_with_retry, _attempt)
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to write {self.table}: {e}") from e


class SqliteDownloadStatusStore(_SqliteStore):
    """DownloadStatusStore backed by the downloads table."""

    table = "downloads"

    async def get(self, catalog_id: str) -> DownloadStatusRecord | None:
        return await self._read(lambda conn: get_download_status(conn, catalog_id))

    async def delete(self, catalog_id: str) -> bool:
        return await self._write(lambda conn: delete_download(conn, catalog_id))


class SqliteDownloadedVideoStore(_SqliteStore):
    """DownloadedVideoStore backed by the downloaded_videos table."""

    table = "downloaded_videos"

    async def get(self, catalog_id: str) -> DownloadedVideoMetadata | None:
        return await self._read(lambda conn: get_downloaded_video(conn, catalog_id))

    async def delete(self, catalog_id: str) -> bool:
        return await self._write(
            lambda conn: delete_downloaded_video(conn, catalog_id)
        )


def create_download_stores(
    conn: sqlite3.Connection,
) -> tuple[SqliteDownloadStatusStore, SqliteDownloadedVideoStore]:
    """Build both download stores over one connection.

    The stores share a lock so their worker threads never use the
    connection at the same time.
    """
    lock = threading.Lock()
    return (
        SqliteDownloadStatusStore(conn, lock=lock),
        SqliteDownloadedVideoStore(conn, lock=lock),
    )
