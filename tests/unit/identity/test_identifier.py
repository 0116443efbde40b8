"""Tests for video identifier parsing and construction."""

import pytest

from playgate.identity import (
    CatalogId,
    IdentifierKind,
    LegacyOpaqueId,
    LocalId,
    NetworkDeviceId,
    create_local_id,
    create_network_device_id,
    extract_path,
    identifier_path,
    identifier_to_string,
    is_catalog_id,
    parse_identifier,
)


class TestParseCatalogIds:
    """Tests for recognition of bare catalog ids."""

    @pytest.mark.parametrize(
        "raw",
        ["dQw4w9WgXcQ", "abc-DEF_123", "___________", "-----------", "local_abcde"],
    )
    def test_eleven_catalog_characters_parse_as_catalog(self, raw: str) -> None:
        """Any 11-character [A-Za-z0-9_-] string is a catalog id."""
        result = parse_identifier(raw)

        assert result.success
        assert result.identifier == CatalogId(raw_id=raw)
        assert result.kind is IdentifierKind.CATALOG

    @pytest.mark.parametrize("raw", ["dQw4w9WgXc", "dQw4w9WgXcQQ", "dQw4w9WgXc!"])
    def test_wrong_length_or_alphabet_is_not_catalog(self, raw: str) -> None:
        """Off-by-one lengths and foreign characters are not catalog ids."""
        assert not is_catalog_id(raw)
        assert parse_identifier(raw).kind is not IdentifierKind.CATALOG

    def test_catalog_id_has_no_path(self) -> None:
        """Catalog ids carry no path."""
        assert extract_path("dQw4w9WgXcQ") is None


class TestParseLocalIds:
    """Tests for local:<path> identifiers."""

    def test_path_with_spaces_and_parentheses(self) -> None:
        """Reserved characters pass through unmodified."""
        result = parse_identifier("local:/home/u/My Video (2024).mp4")

        assert result.success
        assert result.identifier == LocalId(path="/home/u/My Video (2024).mp4")

    def test_non_ascii_path(self) -> None:
        """Non-ASCII characters pass through unmodified."""
        result = parse_identifier("local:/vidéos/日本語 クリップ.mkv")

        assert result.identifier == LocalId(path="/vidéos/日本語 クリップ.mkv")

    def test_path_is_taken_verbatim_after_prefix(self) -> None:
        """Everything after the six-character prefix is the path."""
        result = parse_identifier("local:local:/weird")

        assert result.identifier == LocalId(path="local:/weird")

    def test_empty_path_round_trips(self) -> None:
        """A bare prefix parses to an empty path."""
        result = parse_identifier("local:")

        assert result.success
        assert result.identifier == LocalId(path="")
        assert extract_path(create_local_id("")) == ""


class TestParseNetworkDeviceIds:
    """Tests for dlna://<host><path> identifiers."""

    def test_host_with_port(self) -> None:
        """The host may carry a port."""
        result = parse_identifier("dlna://192.168.1.10:8200/MediaItems/22.mp4")

        assert result.success
        assert result.identifier == NetworkDeviceId(
            host="192.168.1.10:8200", path="/MediaItems/22.mp4"
        )
        assert result.kind is IdentifierKind.NETWORK_DEVICE

    def test_missing_path_is_unrecognized(self) -> None:
        """A host without a path is rejected."""
        result = parse_identifier("dlna://192.168.1.10:8200")

        assert not result.success
        assert "missing path" in result.error

    def test_empty_host_round_trips(self) -> None:
        """A path without a host parses with an empty host."""
        raw = create_network_device_id("", "/MediaItems/22.mp4")

        result = parse_identifier(raw)

        assert result.success
        assert result.identifier == NetworkDeviceId(
            host="", path="/MediaItems/22.mp4"
        )
        assert extract_path(raw) == "/MediaItems/22.mp4"


class TestParseLegacyAndUnknown:
    """Tests for legacy-opaque and unrecognized identifiers."""

    @pytest.mark.parametrize(
        "raw", ["local_L3gveS5tcDQ", "example-video-one", "local_not base64!"]
    )
    def test_legacy_prefixes_parse_as_legacy_opaque(self, raw: str) -> None:
        """Legacy prefixes are carried forward as LegacyOpaqueId."""
        result = parse_identifier(raw)

        assert result.success
        assert result.identifier == LegacyOpaqueId(raw=raw)
        assert extract_path(raw) is None

    @pytest.mark.parametrize("raw", ["", "https://example.com/v.mp4", "file:/x.mp4"])
    def test_unknown_strings_are_unrecognized(self, raw: str) -> None:
        """Strings matching no scheme fail without raising."""
        result = parse_identifier(raw)

        assert not result.success
        assert result.kind is None
        assert result.error.startswith("Unknown video identifier format")

    @pytest.mark.parametrize("raw", [None, 42, b"dQw4w9WgXcQ", ["local:/x"]])
    def test_non_string_input_is_unrecognized(self, raw: object) -> None:
        """Parsing is total, even for values that are not strings."""
        result = parse_identifier(raw)

        assert not result.success
        assert "must be a string" in result.error


class TestConstructors:
    """Tests for identifier construction and round trips."""

    @pytest.mark.parametrize(
        "path",
        [
            "/x/y.mp4",
            "/home/u/My Video (2024).mp4",
            "/média/ünïcödé/🎬.webm",
            "C:\\Users\\kid\\Videos\\clip.mp4",
            "/path/with:colon/and#hash?.mp4",
        ],
    )
    def test_local_round_trip(self, path: str) -> None:
        """extract_path(create_local_id(p)) == p."""
        raw = create_local_id(path)

        assert raw == f"local:{path}"
        assert extract_path(raw) == path
        assert parse_identifier(raw).identifier == LocalId(path=path)

    @pytest.mark.parametrize(
        ("host", "path"),
        [
            ("192.168.1.10:8200", "/MediaItems/22.mp4"),
            ("nas.local", "/Videos/My Show (S01E02).mkv"),
            ("[fe80::1]:9000", "/a"),
        ],
    )
    def test_network_device_round_trip(self, host: str, path: str) -> None:
        """Parsing create_network_device_id(h, p) yields host h and path p."""
        raw = create_network_device_id(host, path)

        assert parse_identifier(raw).identifier == NetworkDeviceId(
            host=host, path=path
        )
        assert extract_path(raw) == path

    def test_create_local_does_not_validate_path(self) -> None:
        """Nonexistent and relative paths are accepted as given."""
        assert create_local_id("relative/clip.mp4") == "local:relative/clip.mp4"


class TestSerialization:
    """Tests for identifier_to_string and identifier_path."""

    @pytest.mark.parametrize(
        "identifier",
        [
            CatalogId(raw_id="dQw4w9WgXcQ"),
            LocalId(path="/x/y z.mp4"),
            NetworkDeviceId(host="10.0.0.2:8200", path="/v/1.mp4"),
            LegacyOpaqueId(raw="example-clip"),
        ],
    )
    def test_to_string_parses_back_to_same_variant(self, identifier) -> None:
        """Every variant serializes to a string that parses back to itself."""
        raw = identifier_to_string(identifier)

        assert raw == identifier.to_string()
        assert parse_identifier(raw).identifier == identifier

    def test_identifier_path_per_variant(self) -> None:
        """Only local and network-device identifiers carry a path."""
        assert identifier_path(LocalId(path="/a.mp4")) == "/a.mp4"
        assert identifier_path(NetworkDeviceId(host="h", path="/b.mp4")) == "/b.mp4"
        assert identifier_path(CatalogId(raw_id="dQw4w9WgXcQ")) is None
        assert identifier_path(LegacyOpaqueId(raw="local_abc")) is None
