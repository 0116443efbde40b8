"""Thumbnail discovery for local video files."""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

# Tried in order; the first existing file wins
THUMBNAIL_EXTENSIONS = (".jpg", ".jpeg", ".png", ".webp", ".gif")


def video_title_from_path(path: str) -> str:
    """Return the file name of ``path`` without its extension."""
    return Path(path).stem


def find_thumbnail(video_path: str) -> str | None:
    """Find an image next to a video file with the same base name.

    For ``/videos/clip.mp4`` this looks for ``/videos/clip.jpg``,
    ``/videos/clip.jpeg`` and so on.

    Args:
        video_path: Absolute path of the video file.

    Returns:
        Path of the first matching image, or None if there is none or the
        directory cannot be inspected.
    """
    video = Path(video_path)
    if not video.stem:
        return None

    for ext in THUMBNAIL_EXTENSIONS:
        candidate = video.parent / f"{video.stem}{ext}"
        try:
            if candidate.is_file():
                return str(candidate)
        except (OSError, ValueError) as e:
            logger.debug("Cannot inspect thumbnail candidate %s: %s", candidate, e)
            return None
    return None
