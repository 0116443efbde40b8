"""Playback routing."""

from playgate.playback.router import PlaybackRouter

__all__ = ["PlaybackRouter"]
