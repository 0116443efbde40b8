"""Database initialization for Playgate."""

import logging
import sqlite3

from .definition import SCHEMA_VERSION, create_schema
from .migrations import migrate_v1_to_v2
from .version import get_schema_version

logger = logging.getLogger(__name__)


def initialize_database(conn: sqlite3.Connection) -> None:
    """Initialize the database with schema, creating tables if needed.

    Args:
        conn: An open database connection.
    """
    current_version = get_schema_version(conn)

    if current_version is None:
        create_schema(conn)
        return

    if current_version < SCHEMA_VERSION:
        logger.info(
            "Migrating database schema from v%d to v%d",
            current_version,
            SCHEMA_VERSION,
        )
        if current_version == 1:
            migrate_v1_to_v2(conn)
            current_version = 2
