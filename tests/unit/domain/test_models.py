"""Tests for domain models."""

from playgate.domain import (
    PlayableLocalVideo,
    PlaybackDecision,
    SourceType,
    WatchedEntry,
)


class TestWatchedEntryHasMetadata:
    """Tests for WatchedEntry.has_metadata."""

    def _entry(self, **overrides) -> WatchedEntry:
        return WatchedEntry(
            identifier="dQw4w9WgXcQ",
            position=0,
            last_watched_at="2024-05-01T10:00:00Z",
            total_time_watched=0,
            **overrides,
        )

    def test_no_display_fields(self) -> None:
        assert not self._entry().has_metadata

    def test_empty_strings_do_not_count(self) -> None:
        """Empty title/thumbnail/source are treated as absent."""
        assert not self._entry(title="", thumbnail="", source_label="").has_metadata

    def test_any_single_field_counts(self) -> None:
        assert self._entry(title="A").has_metadata
        assert self._entry(thumbnail="/t.jpg").has_metadata
        assert self._entry(source_label="local").has_metadata

    def test_other_fields_do_not_count(self) -> None:
        """Duration and watched flags are not display metadata."""
        assert not self._entry(duration=100.0, watched=True).has_metadata


class TestPlaybackDecision:
    """Tests for PlaybackDecision constructors."""

    def test_network_has_no_metadata(self) -> None:
        decision = PlaybackDecision.network()

        assert decision.use_local is False
        assert decision.metadata is None

    def test_local_carries_metadata(self, make_metadata) -> None:
        metadata = make_metadata()

        decision = PlaybackDecision.local(metadata)

        assert decision.use_local is True
        assert decision.metadata is metadata


class TestPlayableLocalVideo:
    """Tests for PlayableLocalVideo serialization."""

    def test_to_dict_uses_camel_case_keys(self) -> None:
        video = PlayableLocalVideo(
            id="dQw4w9WgXcQ",
            title="Clip",
            url="/v/clip.mp4",
            file_path="/v/clip.mp4",
            source_id="UC1",
            source_type=SourceType.CATALOG_PLAYLIST,
            downloaded_at="2024-05-01T10:00:00+00:00",
            navigation_context={"breadcrumb": ["Home", "Playlist"]},
        )

        data = video.to_dict()

        assert data["id"] == "dQw4w9WgXcQ"
        assert data["type"] == "local"
        assert data["url"] == "/v/clip.mp4"
        assert data["filePath"] == "/v/clip.mp4"
        assert data["sourceType"] == "catalog_playlist"
        assert data["thumbnail"] == ""
        assert data["duration"] == 0
        assert data["navigationContext"] == {"breadcrumb": ["Home", "Playlist"]}
        assert data["isAvailable"] is True
        assert data["isFallback"] is False
