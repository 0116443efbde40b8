"""Structured logging for Playgate.

Configurable text or JSON output with file rotation. Log records emitted
inside video_context() carry the identifier of the video being handled.
"""

from playgate.logging.config import configure_logging
from playgate.logging.context import (
    VideoContextFilter,
    get_video_context,
    video_context,
)
from playgate.logging.handlers import JSONFormatter

__all__ = [
    "JSONFormatter",
    "VideoContextFilter",
    "configure_logging",
    "get_video_context",
    "video_context",
]
