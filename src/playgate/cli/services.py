"""Construction of the services the CLI commands drive.

Commands receive their collaborators through the click context object:
``ctx.obj["config"]`` and, for commands touching downloads,
``ctx.obj["db_conn"]``. Tests inject both directly.
"""

from __future__ import annotations

import sqlite3

import click

from playgate.catalog import InMemoryCatalogRegistry, load_catalog_snapshot
from playgate.cli.exit_codes import ExitCode
from playgate.cli.output import error_exit
from playgate.config import PlaygateConfig
from playgate.db import create_download_stores
from playgate.downloads import DownloadReconciler
from playgate.history import JsonWatchedHistoryStore
from playgate.migration import WatchedHistoryMigrator
from playgate.playback import PlaybackRouter
from playgate.probe import LocalFileProbe


def get_config_from_ctx(ctx: click.Context) -> PlaygateConfig:
    return ctx.obj["config"]


def get_db_conn_from_ctx(ctx: click.Context) -> sqlite3.Connection:
    """Get the database connection, exiting if it could not be opened."""
    conn = ctx.obj.get("db_conn")
    if conn is None:
        error_exit("Database connection not available", ExitCode.DATABASE_ERROR)
    return conn


def build_reconciler(conn: sqlite3.Connection) -> DownloadReconciler:
    status_store, metadata_store = create_download_stores(conn)
    return DownloadReconciler(status_store, metadata_store, LocalFileProbe())


def build_router(conn: sqlite3.Connection) -> PlaybackRouter:
    return PlaybackRouter(build_reconciler(conn), LocalFileProbe())


def build_migrator(config: PlaygateConfig) -> WatchedHistoryMigrator:
    """Build a migrator over the configured history and catalog snapshot.

    Raises:
        CatalogSnapshotError: If the configured snapshot is unreadable.
    """
    store = JsonWatchedHistoryStore(
        config.storage.history_path, backup_dir=config.migration.backup_dir
    )
    catalog_path = config.storage.catalog_snapshot_path
    catalog = (
        load_catalog_snapshot(catalog_path)
        if catalog_path is not None
        else InMemoryCatalogRegistry()
    )
    return WatchedHistoryMigrator(store, catalog=catalog)
