"""Video context for structured logging.

A contextvar holds the video currently being decided on, reconciled or
migrated so that every log record emitted inside carries its identifier.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

_video_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "video_id", default=None
)
_operation: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "operation", default=None
)


def get_video_context() -> tuple[str | None, str | None]:
    """Get the current video context.

    Returns:
        Tuple of (video_id, operation), either may be None.
    """
    return _video_id.get(), _operation.get()


@contextmanager
def video_context(
    video_id: str, operation: str | None = None
) -> Generator[None, None, None]:
    """Context manager that tags log records with a video identifier.

    Restores the previous context on exit, so contexts nest.

    Args:
        video_id: Identifier of the video being processed.
        operation: Short name of the operation (e.g. "decide", "migrate").

    Example:
        with video_context("dQw4w9WgXcQ", "decide"):
            logger.info("Routing to local copy")
    """
    video_token = _video_id.set(video_id)
    operation_token = _operation.set(operation)
    try:
        yield
    finally:
        _operation.reset(operation_token)
        _video_id.reset(video_token)


class VideoContextFilter(logging.Filter):
    """Logging filter that injects the video context into log records.

    Adds ``video_id`` and ``operation`` attributes for JSON output and a
    compact ``video_tag`` like ``[video:dQw4w9WgXcQ] `` for text output.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        video_id, operation = get_video_context()

        record.video_id = video_id
        record.operation = operation
        record.video_tag = f"[video:{video_id}] " if video_id else ""

        return True  # Never filter out records
