"""CLI module for Playgate."""

import atexit
import logging
import sqlite3
from pathlib import Path

import click

from playgate.cli.exit_codes import ExitCode
from playgate.cli.output import error_exit
from playgate.config import PlaygateConfig, get_config
from playgate.db import initialize_database, open_connection
from playgate.exceptions import ConfigFileError

_db_conn: sqlite3.Connection | None = None
_logging_configured: bool = False
_atexit_registered: bool = False

logger = logging.getLogger(__name__)

# Subcommands that read or write the downloads database
_DB_COMMANDS = frozenset({"downloads", "play"})


def _cleanup_db_connection() -> None:
    """Close the CLI database connection on exit."""
    global _db_conn
    if _db_conn is not None:
        try:
            _db_conn.close()
        except sqlite3.Error:  # nosec B110
            # Nothing useful to do with a close failure at exit
            pass
        _db_conn = None


def _get_db_connection(db_path: Path) -> sqlite3.Connection | None:
    """Get the database connection for this CLI process.

    Opened once and closed by an atexit handler; the process runs a single
    command and exits.

    Returns:
        Database connection, or None if it cannot be opened.
    """
    global _db_conn, _atexit_registered

    if _db_conn is not None:
        return _db_conn

    try:
        conn = open_connection(db_path)
        initialize_database(conn)
    except (sqlite3.Error, OSError) as e:
        logger.warning("Failed to open database %s: %s", db_path, e)
        return None

    _db_conn = conn
    if not _atexit_registered:
        atexit.register(_cleanup_db_connection)
        _atexit_registered = True
    return conn


def _configure_logging(config: PlaygateConfig) -> None:
    global _logging_configured
    if _logging_configured:
        return

    from playgate.logging import configure_logging

    configure_logging(config.logging)
    _logging_configured = True


@click.group()
@click.version_option(package_name="playgate")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Config file (default: ~/.playgate/config.toml).",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level (default: info).",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Override log file path.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Use JSON log format.",
)
@click.pass_context
def main(
    ctx: click.Context,
    config_path: Path | None,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """Playgate - video identity, history migration and playback routing."""
    ctx.ensure_object(dict)

    # Preserve config/connection injected by tests
    if "config" not in ctx.obj:
        try:
            ctx.obj["config"] = get_config(
                config_path,
                log_level=log_level,
                log_file=log_file,
                log_format="json" if log_json else None,
                strict=config_path is not None,
            )
        except (ConfigFileError, ValueError) as e:
            error_exit(f"Invalid configuration: {e}", ExitCode.CONFIG_ERROR)

    config: PlaygateConfig = ctx.obj["config"]
    _configure_logging(config)

    if ctx.invoked_subcommand in _DB_COMMANDS and "db_conn" not in ctx.obj:
        ctx.obj["db_conn"] = _get_db_connection(config.storage.database_path)


# Deferred so command modules can import from playgate.cli
def _register_commands() -> None:
    from playgate.cli.downloads import downloads_group
    from playgate.cli.history import history_group
    from playgate.cli.identity import id_group
    from playgate.cli.play import play_group

    main.add_command(id_group)
    main.add_command(history_group)
    main.add_command(downloads_group)
    main.add_command(play_group)


_register_commands()
