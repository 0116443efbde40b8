"""Database module for Playgate.

Module organization:
- connection.py: Connection setup and lock retry
- schema/: Schema creation and migrations
- queries/: CRUD helpers for the downloads and downloaded_videos tables
- stores.py: Async store adapters used by the reconciliation services

Usage:
    from playgate.db import open_connection, initialize_database
    from playgate.db import create_download_stores
"""

from .connection import execute_with_retry, open_connection
from .schema import SCHEMA_VERSION, create_schema, initialize_database
from .stores import (
    SqliteDownloadedVideoStore,
    SqliteDownloadStatusStore,
    create_download_stores,
)

__all__ = [
    # connection
    "execute_with_retry",
    "open_connection",
    # schema
    "SCHEMA_VERSION",
    "create_schema",
    "initialize_database",
    # stores
    "SqliteDownloadStatusStore",
    "SqliteDownloadedVideoStore",
    "create_download_stores",
]
