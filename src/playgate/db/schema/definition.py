"""Database schema definition for Playgate.

Two tables track downloads of catalog videos:

- ``downloads``: transient status of queued/active/finished downloads.
- ``downloaded_videos``: permanent registry of videos with a local copy.

A video_id should appear in both tables or in neither; the download
reconciler's removal is the writer responsible for that.
"""

import sqlite3

SCHEMA_VERSION = 2

SCHEMA_SQL = """
-- Schema version tracking
CREATE TABLE IF NOT EXISTS _meta (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);

-- Download status (one row per catalog video ever queued)
CREATE TABLE IF NOT EXISTS downloads (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    video_id TEXT NOT NULL UNIQUE,
    source_id TEXT,
    status TEXT NOT NULL DEFAULT 'pending',
    progress INTEGER NOT NULL DEFAULT 0,
    start_time INTEGER,  -- epoch milliseconds
    end_time INTEGER,    -- epoch milliseconds
    error_message TEXT,
    file_path TEXT,
    created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
    updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
    CONSTRAINT valid_status CHECK (
        status IN ('pending', 'downloading', 'completed', 'failed')
    ),
    CONSTRAINT valid_progress CHECK (progress BETWEEN 0 AND 100)
);

CREATE INDEX IF NOT EXISTS idx_downloads_status ON downloads(status);

-- Downloaded videos (one row per catalog video with a local copy)
CREATE TABLE IF NOT EXISTS downloaded_videos (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    video_id TEXT NOT NULL UNIQUE,
    source_id TEXT NOT NULL,
    source_type TEXT NOT NULL DEFAULT 'catalog_channel',
    source_title TEXT,
    title TEXT NOT NULL,
    file_path TEXT NOT NULL,
    thumbnail_path TEXT,
    duration REAL,
    downloaded_at TEXT NOT NULL,  -- ISO 8601 UTC timestamp
    file_size INTEGER,
    format TEXT,
    created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
    updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
);

CREATE INDEX IF NOT EXISTS idx_downloaded_videos_source_id
    ON downloaded_videos(source_id);
CREATE INDEX IF NOT EXISTS idx_downloaded_videos_downloaded_at
    ON downloaded_videos(downloaded_at);
"""


def create_schema(conn: sqlite3.Connection) -> None:
    """Create the database schema if it doesn't exist.

    Args:
        conn: An open database connection.
    """
    conn.executescript(SCHEMA_SQL)

    conn.execute(
        "INSERT OR IGNORE INTO _meta (key, value) VALUES ('schema_version', ?)",
        (str(SCHEMA_VERSION),),
    )
    # executescript() commits implicitly; the INSERT opens a new
    # transaction that must be closed before callers start their own.
    conn.commit()
