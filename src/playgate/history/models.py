"""Pydantic models for the persisted watched-history document.

The document is a JSON array of entries using the field names the
application has always written (``videoId``, ``lastWatched``, ...).
Fields we do not model are kept and written back unchanged.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from playgate.domain import WatchedEntry


class WatchedEntryModel(BaseModel):
    """Pydantic model for one watched-history entry."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    video_id: str = Field(alias="videoId")
    position: int | float = 0
    last_watched: str = Field(alias="lastWatched")
    time_watched: int | float = Field(default=0, alias="timeWatched")
    title: str | None = None
    thumbnail: str | None = None
    source: str | None = None
    first_watched: str | None = Field(default=None, alias="firstWatched")
    duration: int | float | None = None
    watched: bool | None = None

    def to_entry(self) -> WatchedEntry:
        return WatchedEntry(
            identifier=self.video_id,
            position=self.position,
            last_watched_at=self.last_watched,
            total_time_watched=self.time_watched,
            title=self.title,
            thumbnail=self.thumbnail,
            source_label=self.source,
            first_watched_at=self.first_watched,
            duration=self.duration,
            watched=self.watched,
            extra=dict(self.model_extra or {}),
        )

    @classmethod
    def from_entry(cls, entry: WatchedEntry) -> WatchedEntryModel:
        return cls(
            videoId=entry.identifier,
            position=entry.position,
            lastWatched=entry.last_watched_at,
            timeWatched=entry.total_time_watched,
            title=entry.title,
            thumbnail=entry.thumbnail,
            source=entry.source_label,
            firstWatched=entry.first_watched_at,
            duration=entry.duration,
            watched=entry.watched,
            **entry.extra,
        )


# Entries are validated one at a time so a bad one cannot hide the rest
WATCHED_HISTORY_ADAPTER = TypeAdapter(list[Any])


def entry_from_document(item: Any) -> WatchedEntry:
    """Convert one persisted entry to a WatchedEntry.

    An entry that fails validation is returned as an unreadable
    WatchedEntry carrying the original value in ``raw`` and the reason in
    ``load_error``, so it can be reported and written back untouched.
    """
    try:
        return WatchedEntryModel.model_validate(item).to_entry()
    except ValidationError as e:
        video_id = item.get("videoId") if isinstance(item, dict) else None
        return WatchedEntry(
            identifier=video_id if isinstance(video_id, str) else "",
            position=0,
            last_watched_at="",
            total_time_watched=0,
            load_error=f"{e.error_count()} validation error(s): {_first_error(e)}",
            raw=item,
        )


def _first_error(error: ValidationError) -> str:
    detail = error.errors()[0]
    location = ".".join(str(part) for part in detail["loc"]) or "entry"
    return f"{location}: {detail['msg']}"


def entries_to_document(entries: list[WatchedEntry]) -> list[Any]:
    """Serialize entries to the persisted JSON shape.

    Optional fields that are unset are omitted rather than written as null,
    so entries that were never enriched keep their original shape.
    Unreadable entries are written back exactly as they were loaded.
    """
    documents: list[Any] = []
    for entry in entries:
        if entry.load_error is not None:
            documents.append(entry.raw)
            continue
        model = WatchedEntryModel.from_entry(entry)
        doc = model.model_dump(by_alias=True, exclude_none=True)
        # Unknown fields are written back verbatim, nulls included
        doc.update(model.model_extra or {})
        documents.append(doc)
    return documents
