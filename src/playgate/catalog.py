"""Read-only snapshot of catalog videos, used to backfill history metadata.

The catalog client (out of scope here) exports whatever listing it has
loaded as a JSON array::

    [{"id": "dQw4w9WgXcQ", "title": "...", "thumbnail": "...", "sourceId": "..."}]

Absence of a video from the snapshot is normal; the history migrator
falls back to synthesized metadata.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from playgate.domain import CatalogVideoInfo
from playgate.exceptions import CatalogSnapshotError

logger = logging.getLogger(__name__)


class CatalogSnapshotEntry(BaseModel):
    """Pydantic model for one video in a catalog snapshot file."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    id: str = Field(min_length=1)
    title: str | None = None
    thumbnail: str | None = None
    source_id: str | None = Field(default=None, alias="sourceId")

    def to_info(self) -> CatalogVideoInfo:
        return CatalogVideoInfo(
            title=self.title,
            thumbnail=self.thumbnail,
            source_label=self.source_id,
        )


_SNAPSHOT_ADAPTER = TypeAdapter(list[CatalogSnapshotEntry])


class InMemoryCatalogRegistry:
    """CatalogRegistry over an in-memory mapping of catalog id to metadata."""

    def __init__(self, videos: Mapping[str, CatalogVideoInfo] | None = None) -> None:
        self._videos: dict[str, CatalogVideoInfo] = dict(videos or {})

    @classmethod
    def from_entries(
        cls, entries: Iterable[CatalogSnapshotEntry]
    ) -> InMemoryCatalogRegistry:
        return cls({entry.id: entry.to_info() for entry in entries})

    def lookup_by_identifier(self, catalog_id: str) -> CatalogVideoInfo | None:
        return self._videos.get(catalog_id)

    def __len__(self) -> int:
        return len(self._videos)


def load_catalog_snapshot(path: Path) -> InMemoryCatalogRegistry:
    """Load a catalog snapshot file into a registry.

    A missing file yields an empty registry.

    Args:
        path: Path to the JSON snapshot.

    Returns:
        InMemoryCatalogRegistry with every entry in the snapshot.

    Raises:
        CatalogSnapshotError: If the file cannot be read or is invalid.
    """
    try:
        raw = path.read_bytes()
    except FileNotFoundError:
        logger.debug("No catalog snapshot at %s", path)
        return InMemoryCatalogRegistry()
    except OSError as e:
        raise CatalogSnapshotError(f"Cannot read catalog snapshot {path}: {e}") from e

    try:
        entries = _SNAPSHOT_ADAPTER.validate_json(raw)
    except ValidationError as e:
        raise CatalogSnapshotError(
            f"Invalid catalog snapshot {path}: {e.error_count()} error(s)"
        ) from e

    registry = InMemoryCatalogRegistry.from_entries(entries)
    logger.debug("Loaded %d catalog video(s) from %s", len(registry), path)
    return registry
