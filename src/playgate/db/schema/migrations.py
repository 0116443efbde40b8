"""Database migrations for Playgate."""

import sqlite3


def migrate_v1_to_v2(conn: sqlite3.Connection) -> None:
    """Migrate database from schema version 1 to version 2.

    Adds source_type and source_title to downloaded_videos. Version 1
    rows did not record the source kind; they were all channel downloads.

    This migration is idempotent - safe to run multiple times.

    Args:
        conn: An open database connection.
    """
    cursor = conn.execute("PRAGMA table_info(downloaded_videos)")
    columns = {row[1] for row in cursor.fetchall()}

    if "source_type" not in columns:
        conn.execute(
            "ALTER TABLE downloaded_videos "
            "ADD COLUMN source_type TEXT NOT NULL DEFAULT 'catalog_channel'"
        )
    if "source_title" not in columns:
        conn.execute("ALTER TABLE downloaded_videos ADD COLUMN source_title TEXT")

    conn.execute(
        "UPDATE _meta SET value = '2' WHERE key = 'schema_version'",
    )
    conn.commit()
