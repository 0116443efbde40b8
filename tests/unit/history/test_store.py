"""Tests for the JSON watched-history store."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from playgate.domain import WatchedEntry
from playgate.exceptions import (
    BackupCreationError,
    HistoryReadError,
    HistoryWriteError,
)
from playgate.history import JsonWatchedHistoryStore

SAMPLE_DOCUMENT = [
    {
        "videoId": "dQw4w9WgXcQ",
        "position": 42,
        "lastWatched": "2024-05-01T10:00:00.000Z",
        "timeWatched": 120.5,
        "title": "Never Gonna",
        "thumbnail": "https://img.example/dQw4w9WgXcQ.jpg",
        "source": "UC_channel_1",
        "firstWatched": "2024-04-01T09:00:00.000Z",
        "duration": 212,
        "watched": True,
    },
    {
        "videoId": "local_L3gveS5tcDQ",
        "position": 0,
        "lastWatched": "2023-12-24T18:30:00.000Z",
        "timeWatched": 0,
        "customTag": "kept",
        "nullable": None,
    },
]


@pytest.fixture
def history_path(temp_dir):
    return temp_dir / "watched.json"


class TestReadAll:
    """Tests for JsonWatchedHistoryStore.read_all."""

    @pytest.mark.asyncio
    async def test_missing_file_is_empty_history(self, history_path) -> None:
        store = JsonWatchedHistoryStore(history_path)

        assert await store.read_all() == []

    @pytest.mark.asyncio
    async def test_blank_file_is_empty_history(self, history_path) -> None:
        history_path.write_text("  \n")
        store = JsonWatchedHistoryStore(history_path)

        assert await store.read_all() == []

    @pytest.mark.asyncio
    async def test_maps_persisted_field_names(self, history_path) -> None:
        history_path.write_text(json.dumps(SAMPLE_DOCUMENT))
        store = JsonWatchedHistoryStore(history_path)

        first, second = await store.read_all()

        assert first == WatchedEntry(
            identifier="dQw4w9WgXcQ",
            position=42,
            last_watched_at="2024-05-01T10:00:00.000Z",
            total_time_watched=120.5,
            title="Never Gonna",
            thumbnail="https://img.example/dQw4w9WgXcQ.jpg",
            source_label="UC_channel_1",
            first_watched_at="2024-04-01T09:00:00.000Z",
            duration=212,
            watched=True,
        )
        assert second.identifier == "local_L3gveS5tcDQ"
        assert not second.has_metadata
        assert second.extra == {"customTag": "kept", "nullable": None}

    @pytest.mark.asyncio
    async def test_invalid_json_raises(self, history_path) -> None:
        history_path.write_text("{not json")
        store = JsonWatchedHistoryStore(history_path)

        with pytest.raises(HistoryReadError):
            await store.read_all()

    @pytest.mark.asyncio
    async def test_malformed_entry_is_read_as_unreadable(self, history_path) -> None:
        """A bad entry is reported on its own; its neighbours still load."""
        malformed = {"position": 1, "lastWatched": "x"}
        history_path.write_text(json.dumps([SAMPLE_DOCUMENT[0], malformed, "junk"]))
        store = JsonWatchedHistoryStore(history_path)

        good, missing_id, junk = await store.read_all()

        assert good.load_error is None
        assert good.title == "Never Gonna"
        assert missing_id.identifier == ""
        assert missing_id.raw == malformed
        assert "videoId" in missing_id.load_error
        assert junk.raw == "junk"
        assert junk.load_error is not None

    @pytest.mark.asyncio
    async def test_non_array_document_raises(self, history_path) -> None:
        history_path.write_text(json.dumps({"videoId": "dQw4w9WgXcQ"}))
        store = JsonWatchedHistoryStore(history_path)

        with pytest.raises(HistoryReadError, match="Invalid history document"):
            await store.read_all()


class TestWriteAll:
    """Tests for JsonWatchedHistoryStore.write_all."""

    @pytest.mark.asyncio
    async def test_round_trip_preserves_document(self, history_path) -> None:
        """Reading and writing back leaves every field, known or not, intact."""
        history_path.write_text(json.dumps(SAMPLE_DOCUMENT))
        store = JsonWatchedHistoryStore(history_path)

        await store.write_all(await store.read_all())

        assert json.loads(history_path.read_text()) == SAMPLE_DOCUMENT

    @pytest.mark.asyncio
    async def test_unreadable_entries_written_back_verbatim(
        self, history_path
    ) -> None:
        document = [
            SAMPLE_DOCUMENT[1],
            {"videoId": 42, "lastWatched": None, "note": "odd"},
            ["not", "an", "object"],
        ]
        history_path.write_text(json.dumps(document))
        store = JsonWatchedHistoryStore(history_path)

        await store.write_all(await store.read_all())

        assert json.loads(history_path.read_text()) == document

    @pytest.mark.asyncio
    async def test_unset_optional_fields_are_omitted(self, history_path) -> None:
        store = JsonWatchedHistoryStore(history_path)

        await store.write_all(
            [
                WatchedEntry(
                    identifier="local:/v/a.mp4",
                    position=1.5,
                    last_watched_at="2024-01-01T00:00:00Z",
                    total_time_watched=3,
                )
            ]
        )

        assert json.loads(history_path.read_text()) == [
            {
                "videoId": "local:/v/a.mp4",
                "position": 1.5,
                "lastWatched": "2024-01-01T00:00:00Z",
                "timeWatched": 3,
            }
        ]

    @pytest.mark.asyncio
    async def test_creates_parent_directory(self, temp_dir) -> None:
        store = JsonWatchedHistoryStore(temp_dir / "nested" / "watched.json")

        await store.write_all([])

        assert json.loads((temp_dir / "nested" / "watched.json").read_text()) == []

    @pytest.mark.asyncio
    async def test_write_failure_raises_and_leaves_no_temp_files(
        self, temp_dir
    ) -> None:
        """Writing over a directory fails cleanly."""
        history_dir = temp_dir / "history"
        target = history_dir / "watched.json"
        target.mkdir(parents=True)
        store = JsonWatchedHistoryStore(target)

        with pytest.raises(HistoryWriteError):
            await store.write_all([])

        assert [p.name for p in history_dir.iterdir()] == ["watched.json"]


class TestBackup:
    """Tests for JsonWatchedHistoryStore.backup."""

    @pytest.mark.asyncio
    async def test_copies_file_next_to_original(self, history_path) -> None:
        history_path.write_text(json.dumps(SAMPLE_DOCUMENT))
        store = JsonWatchedHistoryStore(history_path)

        backup = await store.backup("1714557600000")

        assert backup == str(history_path.parent / "watched.json.backup.1714557600000")
        assert json.loads(Path(backup).read_text()) == SAMPLE_DOCUMENT

    @pytest.mark.asyncio
    async def test_uses_configured_backup_dir(self, history_path, temp_dir) -> None:
        history_path.write_text("[]")
        store = JsonWatchedHistoryStore(history_path, backup_dir=temp_dir / "bk")

        backup = await store.backup("1")

        assert backup == str(temp_dir / "bk" / "watched.json.backup.1")

    @pytest.mark.asyncio
    async def test_no_backup_without_file(self, history_path) -> None:
        store = JsonWatchedHistoryStore(history_path)

        assert await store.backup("1") is None

    @pytest.mark.asyncio
    async def test_unwritable_backup_location_raises(
        self, history_path, temp_dir
    ) -> None:
        history_path.write_text("[]")
        blocker = temp_dir / "blocker"
        blocker.write_text("not a directory")
        store = JsonWatchedHistoryStore(history_path, backup_dir=blocker)

        with pytest.raises(BackupCreationError):
            await store.backup("1")

    @pytest.mark.asyncio
    async def test_failed_existence_check_raises_backup_error(
        self, history_path
    ) -> None:
        """An OSError while checking the source is a backup failure."""
        store = JsonWatchedHistoryStore(history_path)

        with patch.object(Path, "exists", side_effect=PermissionError("denied")):
            with pytest.raises(BackupCreationError, match="denied"):
                await store.backup("1")
