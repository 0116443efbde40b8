"""Opening the downloads database and retrying through lock contention."""

from __future__ import annotations

import logging
import random
import sqlite3
import time
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

_PRAGMAS = (
    "PRAGMA foreign_keys = ON",
    "PRAGMA journal_mode = WAL",
    "PRAGMA synchronous = NORMAL",
    "PRAGMA busy_timeout = 10000",
)


def open_connection(db_path: Path, timeout: float = 30.0) -> sqlite3.Connection:
    """Open the downloads database, creating its directory if needed.

    The connection is shared with worker threads by the async stores,
    which serialize access with a lock. The caller closes it.

    Args:
        db_path: Path to the database file.
        timeout: Seconds sqlite waits on a locked database.

    Returns:
        Connection with ``sqlite3.Row`` rows and WAL journaling.
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(db_path), timeout=timeout, check_same_thread=False)
    for pragma in _PRAGMAS:
        conn.execute(pragma)
    conn.row_factory = sqlite3.Row
    return conn


def _is_lock_error(error: sqlite3.OperationalError) -> bool:
    message = str(error).casefold()
    return "locked" in message or "busy" in message


def execute_with_retry(
    func: Callable[[], T],
    attempts: int = 6,
    initial_delay: float = 0.1,
    delay_cap: float = 5.0,
) -> T:
    """Call ``func``, backing off while the database is locked.

    Only "database is locked" and "busy" errors are retried. The delay
    doubles after each attempt, up to ``delay_cap``, with 10% jitter.

    Args:
        func: Zero-argument callable doing the database work.
        attempts: Total number of calls before giving up.
        initial_delay: Seconds to wait after the first failure.
        delay_cap: Upper bound on the wait between attempts.

    Returns:
        Whatever ``func`` returns.

    Raises:
        sqlite3.OperationalError: For non-lock errors, or when every
            attempt hit a lock.
    """
    delay = initial_delay
    for attempt in range(1, attempts + 1):
        try:
            return func()
        except sqlite3.OperationalError as e:
            if not _is_lock_error(e) or attempt == attempts:
                raise
            wait = delay * random.uniform(0.9, 1.1)  # nosec B311
            logger.info(
                "Database locked (attempt %d of %d), retrying in %.2fs",
                attempt,
                attempts,
                wait,
            )
            time.sleep(wait)
            delay = min(delay * 2, delay_cap)
    raise AssertionError("unreachable")
