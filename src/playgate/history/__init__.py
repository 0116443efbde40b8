"""Watched-history persistence."""

from playgate.history.models import WatchedEntryModel, entries_to_document
from playgate.history.store import DEFAULT_HISTORY_FILENAME, JsonWatchedHistoryStore

__all__ = [
    "DEFAULT_HISTORY_FILENAME",
    "JsonWatchedHistoryStore",
    "WatchedEntryModel",
    "entries_to_document",
]
