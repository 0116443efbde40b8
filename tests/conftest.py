"""Shared test fixtures for Playgate."""

import os
import shutil
import sqlite3
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

from playgate.config import clear_config_cache
from playgate.db import initialize_database, open_connection
from playgate.db.queries import (
    create_download,
    insert_downloaded_video,
    mark_download_completed,
)
from playgate.domain import DownloadedVideoMetadata, SourceType, WatchedEntry


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test isolation."""
    dir_path = tempfile.mkdtemp()
    yield Path(dir_path)
    shutil.rmtree(dir_path, ignore_errors=True)


@pytest.fixture(autouse=True)
def playgate_data_dir(temp_dir: Path):
    """Point PLAYGATE_DATA_DIR at a temporary directory for every test.

    Keeps tests from reading a developer's ~/.playgate/config.toml and
    resets the config file cache around each test.
    """
    data_dir = temp_dir / ".playgate"
    data_dir.mkdir(parents=True, exist_ok=True)

    clear_config_cache()
    with patch.dict(os.environ, {"PLAYGATE_DATA_DIR": str(data_dir)}):
        yield data_dir
    clear_config_cache()


@pytest.fixture
def temp_db(temp_dir: Path) -> Path:
    """Create a temporary database path."""
    return temp_dir / "test_playgate.db"


@pytest.fixture
def db_conn(temp_db: Path):
    """Open an initialized database in a temporary directory."""
    conn = open_connection(temp_db)
    initialize_database(conn)
    yield conn
    conn.close()


@pytest.fixture
def video_file(temp_dir: Path) -> Path:
    """Create an (empty) downloaded video file."""
    path = temp_dir / "downloads" / "Some Video.mp4"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.touch()
    return path


def _make_metadata(
    catalog_id: str = "dQw4w9WgXcQ",
    file_path: str = "/videos/dQw4w9WgXcQ.mp4",
    **overrides,
) -> DownloadedVideoMetadata:
    """Build DownloadedVideoMetadata with sensible defaults."""
    values = {
        "catalog_id": catalog_id,
        "title": "Test Video",
        "file_path": file_path,
        "downloaded_at": "2024-05-01T10:00:00+00:00",
        "source_id": "UC_channel_1",
        "source_type": SourceType.CATALOG_CHANNEL,
        "duration": 212.0,
        "thumbnail": "/videos/dQw4w9WgXcQ.jpg",
        "source_title": "Test Channel",
    }
    values.update(overrides)
    return DownloadedVideoMetadata(**values)


def _make_entry(identifier: str, **overrides) -> WatchedEntry:
    """Build a WatchedEntry with no display metadata unless overridden."""
    values = {
        "identifier": identifier,
        "position": 30.0,
        "last_watched_at": "2024-05-01T10:00:00.000Z",
        "total_time_watched": 120.0,
    }
    values.update(overrides)
    return WatchedEntry(**values)


def _seed_download(
    conn: sqlite3.Connection, metadata: DownloadedVideoMetadata
) -> None:
    """Insert a completed status row plus its downloaded_videos row."""
    create_download(conn, metadata.catalog_id, metadata.source_id, now_ms=1_000)
    mark_download_completed(
        conn, metadata.catalog_id, metadata.file_path, now_ms=2_000
    )
    insert_downloaded_video(conn, metadata)
    conn.commit()


@pytest.fixture
def make_metadata():
    """Factory for DownloadedVideoMetadata with sensible defaults."""
    return _make_metadata


@pytest.fixture
def make_entry():
    """Factory for WatchedEntry without display metadata."""
    return _make_entry


@pytest.fixture
def seed_download(db_conn: sqlite3.Connection):
    """Insert a completed download (both tables) into the test database."""

    def _seed(metadata: DownloadedVideoMetadata) -> DownloadedVideoMetadata:
        _seed_download(db_conn, metadata)
        return metadata

    return _seed
