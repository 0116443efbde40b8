"""One-time migration of the watched history.

Rewrites legacy base64-encoded local identifiers to the ``local:<path>``
scheme and backfills display metadata for entries that have none. The
pass is idempotent and never drops an entry: an entry that fails to
migrate is written back unchanged.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from pathlib import PurePosixPath
from typing import Any

from playgate.domain import WatchedEntry
from playgate.exceptions import (
    BackupCreationError,
    HistoryWriteError,
    MigrationWriteError,
)
from playgate.identity import (
    CatalogId,
    IdentifierKind,
    IdentifierParseResult,
    LegacyDecodeError,
    LocalId,
    NetworkDeviceId,
    create_local_id,
    decode_legacy_path,
    is_legacy_encoded,
    parse_identifier,
)
from playgate.interfaces import CatalogRegistry, WatchedHistoryStore
from playgate.logging import video_context
from playgate.migration.thumbnails import find_thumbnail, video_title_from_path

logger = logging.getLogger(__name__)

LOCAL_SOURCE_LABEL = "local"
NETWORK_DEVICE_SOURCE_LABEL = "dlna"
CATALOG_SOURCE_LABEL = "catalog"
UNKNOWN_SOURCE_LABEL = "unknown"

# Identifier kinds that are already in the current scheme
_CURRENT_KINDS = frozenset(
    {IdentifierKind.CATALOG, IdentifierKind.LOCAL, IdentifierKind.NETWORK_DEVICE}
)


@dataclass
class MigrationResult:
    """Outcome of a watched-history migration pass.

    Entries that raised during migration are counted in ``errors`` and
    also in ``skipped``, since they are written back unchanged.
    """

    total: int = 0
    migrated: int = 0
    skipped: int = 0
    errors: list[str] = field(default_factory=list)
    backup_path: str | None = None
    warnings: list[str] = field(default_factory=list)
    dry_run: bool = False

    @property
    def ok(self) -> bool:
        """True if every entry was processed without error."""
        return not self.errors

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "migrated": self.migrated,
            "skipped": self.skipped,
            "errors": list(self.errors),
            "backup_path": self.backup_path,
            "warnings": list(self.warnings),
            "dry_run": self.dry_run,
            "ok": self.ok,
        }


def _needs_migrating(entry: WatchedEntry) -> bool:
    if entry.load_error is not None:
        # Carried through unchanged by every pass
        return False
    if not entry.has_metadata:
        return True
    if not is_legacy_encoded(entry.identifier):
        return False
    try:
        decode_legacy_path(entry.identifier)
    except LegacyDecodeError:
        return False
    return True


def _fill(entry: WatchedEntry, **values: str | None) -> None:
    """Set display fields on ``entry`` that are currently empty."""
    for name, value in values.items():
        if value and not getattr(entry, name):
            setattr(entry, name, value)


class WatchedHistoryMigrator:
    """Upgrades the watched history to the current identifier scheme.

    Args:
        store: Watched-history store to read, back up and rewrite.
        catalog: Snapshot of the videos the catalog client has loaded,
            used to enrich catalog entries. None disables catalog lookup.
        clock: Returns the current time in epoch seconds. Used for the
            backup suffix.
    """

    def __init__(
        self,
        store: WatchedHistoryStore,
        catalog: CatalogRegistry | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._store = store
        self._catalog = catalog
        self._clock = clock or time.time

    async def needs_migration(self) -> bool:
        """Check whether any history entry still needs migrating.

        Only entries a migration pass would change count, so this is
        False again once a pass has run.

        Returns:
            True if an entry lacks display metadata or has a legacy
            identifier that can be decoded. False if the history cannot
            be read.
        """
        try:
            entries = await self._store.read_all()
        except Exception:
            logger.warning("Cannot read watched history", exc_info=True)
            return False

        return any(_needs_migrating(entry) for entry in entries)

    async def migrate(self, *, dry_run: bool = False) -> MigrationResult:
        """Migrate every watched-history entry.

        Backs up the persisted document, migrates entries one at a time,
        then rewrites the whole document.

        Args:
            dry_run: Compute the result without backing up or writing.

        Returns:
            MigrationResult with per-entry counts. A failed backup is
            reported in ``warnings`` and does not stop the migration.

        Raises:
            HistoryReadError: If the history cannot be read.
            MigrationWriteError: If the migrated history cannot be written.
        """
        result = MigrationResult(dry_run=dry_run)

        logger.info("Starting watched history migration")
        entries = await self._store.read_all()
        result.total = len(entries)

        if not entries:
            logger.info("No watched history entries to migrate")
            return result

        if not dry_run:
            await self._create_backup(result)

        migrated_entries: list[WatchedEntry] = []
        for entry in entries:
            if entry.load_error is not None:
                result.errors.append(
                    f"Unreadable entry {entry.identifier or '(no id)'} kept as is: "
                    f"{entry.load_error}"
                )
                result.skipped += 1
                migrated_entries.append(entry)
                continue

            with video_context(entry.identifier, "migrate"):
                try:
                    migrated_entry, changed = await self._migrate_entry(entry)
                except Exception as e:
                    logger.warning("Failed to migrate entry: %s", e, exc_info=True)
                    result.errors.append(f"Failed to migrate {entry.identifier}: {e}")
                    result.skipped += 1
                    migrated_entries.append(entry)
                    continue

            migrated_entries.append(migrated_entry)
            if changed:
                result.migrated += 1
            else:
                result.skipped += 1

        if dry_run:
            logger.info(
                "Dry run: %d of %d entries would be migrated",
                result.migrated,
                result.total,
            )
            return result

        try:
            await self._store.write_all(migrated_entries)
        except HistoryWriteError as e:
            raise MigrationWriteError(
                f"Failed to write migrated history: {e}", migrated=result.migrated
            ) from e

        logger.info(
            "Migration complete: %d migrated, %d skipped, %d errors",
            result.migrated,
            result.skipped,
            len(result.errors),
        )
        return result

    async def _create_backup(self, result: MigrationResult) -> None:
        suffix = str(int(self._clock() * 1000))
        try:
            result.backup_path = await self._store.backup(suffix)
        except BackupCreationError as e:
            logger.warning("Continuing migration without backup: %s", e)
            result.warnings.append(f"Failed to create backup: {e}")
            return

        if result.backup_path:
            logger.info("Created history backup: %s", result.backup_path)

    async def _migrate_entry(self, entry: WatchedEntry) -> tuple[WatchedEntry, bool]:
        """Migrate a single entry.

        Returns:
            Tuple of (entry to persist, whether it counts as migrated).
        """
        parsed = parse_identifier(entry.identifier)
        if parsed.success and parsed.kind in _CURRENT_KINDS and entry.has_metadata:
            return entry, False

        updated = replace(entry, extra=dict(entry.extra))

        if is_legacy_encoded(entry.identifier):
            try:
                path = decode_legacy_path(entry.identifier)
            except LegacyDecodeError as e:
                logger.debug("Legacy identifier not decodable: %s", e)
            else:
                updated.identifier = create_local_id(path)
                thumbnail = await asyncio.to_thread(find_thumbnail, path)
                _fill(
                    updated,
                    title=video_title_from_path(path),
                    thumbnail=thumbnail,
                    source_label=LOCAL_SOURCE_LABEL,
                    first_watched_at=updated.last_watched_at,
                )
                parsed = parse_identifier(updated.identifier)
                logger.debug("Rewrote legacy identifier to %s", updated.identifier)

        if not updated.has_metadata:
            await self._enhance(updated, parsed)

        changed = updated.identifier != entry.identifier or (
            updated.has_metadata and not entry.has_metadata
        )
        return (updated if changed else entry), changed

    async def _enhance(
        self, entry: WatchedEntry, parsed: IdentifierParseResult
    ) -> None:
        """Backfill display metadata on an entry that has none."""
        identifier = parsed.identifier

        if isinstance(identifier, LocalId):
            thumbnail = await asyncio.to_thread(find_thumbnail, identifier.path)
            _fill(
                entry,
                title=video_title_from_path(identifier.path),
                thumbnail=thumbnail,
                source_label=LOCAL_SOURCE_LABEL,
            )
        elif isinstance(identifier, NetworkDeviceId):
            _fill(
                entry,
                title=PurePosixPath(identifier.path).stem,
                source_label=NETWORK_DEVICE_SOURCE_LABEL,
            )
        elif isinstance(identifier, CatalogId) and self._catalog is not None:
            info = self._catalog.lookup_by_identifier(identifier.raw_id)
            if info is not None:
                _fill(
                    entry,
                    title=info.title,
                    thumbnail=info.thumbnail,
                    source_label=info.source_label or CATALOG_SOURCE_LABEL,
                )

        # No source of truth, or it had nothing to offer
        _fill(
            entry,
            title=f"Video {entry.identifier}",
            source_label=UNKNOWN_SOURCE_LABEL,
        )
        _fill(entry, first_watched_at=entry.last_watched_at)
