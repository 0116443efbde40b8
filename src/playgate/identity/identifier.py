"""URI-style video identifiers.

A stored video identifier is one of:

- a bare 11-character catalog id (``dQw4w9WgXcQ``),
- ``local:<absolute path>`` for a file on local disk,
- ``dlna://<host[:port]><path>`` for a file served by a network media device,
- a legacy opaque id (``local_<base64>`` or ``example-<name>``) that only the
  history migrator acts on.

Paths are carried verbatim: no escaping is applied, so spaces, parentheses
and non-ASCII characters survive a create/parse round trip unchanged.
Parsing never raises; failures come back as an unsuccessful
IdentifierParseResult.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import assert_never

LOCAL_PREFIX = "local:"
NETWORK_DEVICE_PREFIX = "dlna://"
LEGACY_PREFIXES: tuple[str, ...] = ("local_", "example-")

CATALOG_ID_LENGTH = 11
CATALOG_ID_PATTERN = re.compile(r"[A-Za-z0-9_-]{11}")


class IdentifierKind(Enum):
    """Origin of a video, as encoded in its identifier."""

    CATALOG = "catalog"
    LOCAL = "local"
    NETWORK_DEVICE = "dlna"
    LEGACY_OPAQUE = "legacy"


@dataclass(frozen=True)
class CatalogId:
    """Video known to the remote media catalog."""

    raw_id: str

    @property
    def kind(self) -> IdentifierKind:
        return IdentifierKind.CATALOG

    def to_string(self) -> str:
        return self.raw_id


@dataclass(frozen=True)
class LocalId:
    """Video stored on local disk at an absolute path."""

    path: str

    @property
    def kind(self) -> IdentifierKind:
        return IdentifierKind.LOCAL

    def to_string(self) -> str:
        return create_local_id(self.path)


@dataclass(frozen=True)
class NetworkDeviceId:
    """Video served live from a media device on the local network.

    ``host`` may include a port (``192.168.1.20:8200``); ``path`` always
    starts with ``/``.
    """

    host: str
    path: str

    @property
    def kind(self) -> IdentifierKind:
        return IdentifierKind.NETWORK_DEVICE

    def to_string(self) -> str:
        return create_network_device_id(self.host, self.path)


@dataclass(frozen=True)
class LegacyOpaqueId:
    """Pre-URI identifier, kept only so the history migrator can upgrade it."""

    raw: str

    @property
    def kind(self) -> IdentifierKind:
        return IdentifierKind.LEGACY_OPAQUE

    def to_string(self) -> str:
        return self.raw


VideoIdentifier = CatalogId | LocalId | NetworkDeviceId | LegacyOpaqueId


@dataclass(frozen=True)
class IdentifierParseResult:
    """Result of parsing a stored identifier string.

    Attributes:
        success: True if the string matched a known scheme.
        identifier: The parsed variant on success, None otherwise.
        error: Description of the unrecognized format on failure.
    """

    success: bool
    identifier: VideoIdentifier | None = None
    error: str | None = None

    @classmethod
    def ok(cls, identifier: VideoIdentifier) -> IdentifierParseResult:
        return cls(success=True, identifier=identifier)

    @classmethod
    def unrecognized(cls, error: str) -> IdentifierParseResult:
        return cls(success=False, error=error)

    @property
    def kind(self) -> IdentifierKind | None:
        """Kind of the parsed identifier, or None on failure."""
        return self.identifier.kind if self.identifier is not None else None


def is_catalog_id(raw: str) -> bool:
    """Check whether a string has the shape of a catalog video id."""
    return CATALOG_ID_PATTERN.fullmatch(raw) is not None


def parse_identifier(raw: object) -> IdentifierParseResult:
    """Parse a stored identifier string into its variant.

    Recognition order is catalog-id shape, ``local:`` prefix, ``dlna://``
    prefix, then legacy prefixes; the first match wins. An 11-character
    catalog-shaped string is therefore always a CatalogId, even when it
    starts with a legacy prefix.

    Args:
        raw: Identifier as stored. Non-string input is reported as
            unrecognized rather than raising.

    Returns:
        IdentifierParseResult with the variant or an error description.
    """
    if not isinstance(raw, str):
        return IdentifierParseResult.unrecognized(
            f"Video identifier must be a string, got {type(raw).__name__}"
        )

    if is_catalog_id(raw):
        return IdentifierParseResult.ok(CatalogId(raw_id=raw))

    if raw.startswith(LOCAL_PREFIX):
        return IdentifierParseResult.ok(LocalId(path=raw[len(LOCAL_PREFIX) :]))

    if raw.startswith(NETWORK_DEVICE_PREFIX):
        remainder = raw[len(NETWORK_DEVICE_PREFIX) :]
        slash = remainder.find("/")
        if slash == -1:
            return IdentifierParseResult.unrecognized(
                "Invalid DLNA identifier format: missing path"
            )
        return IdentifierParseResult.ok(
            NetworkDeviceId(host=remainder[:slash], path=remainder[slash:])
        )

    if raw.startswith(LEGACY_PREFIXES):
        return IdentifierParseResult.ok(LegacyOpaqueId(raw=raw))

    return IdentifierParseResult.unrecognized(f"Unknown video identifier format: {raw}")


def create_local_id(path: str) -> str:
    """Build a local identifier. The path is not validated or escaped."""
    return f"{LOCAL_PREFIX}{path}"


def create_network_device_id(host: str, path: str) -> str:
    """Build a network-device identifier.

    Args:
        host: Device host, optionally with ``:port``.
        path: Resource path on the device; must start with ``/``.
    """
    return f"{NETWORK_DEVICE_PREFIX}{host}{path}"


def identifier_to_string(identifier: VideoIdentifier) -> str:
    """Serialize any identifier variant to its stored string form."""
    if isinstance(identifier, CatalogId):
        return identifier.raw_id
    if isinstance(identifier, LocalId):
        return create_local_id(identifier.path)
    if isinstance(identifier, NetworkDeviceId):
        return create_network_device_id(identifier.host, identifier.path)
    if isinstance(identifier, LegacyOpaqueId):
        return identifier.raw
    assert_never(identifier)


def identifier_path(identifier: VideoIdentifier) -> str | None:
    """Return the filesystem or device path carried by an identifier."""
    if isinstance(identifier, (LocalId, NetworkDeviceId)):
        return identifier.path
    if isinstance(identifier, (CatalogId, LegacyOpaqueId)):
        return None
    assert_never(identifier)


def extract_path(raw: str) -> str | None:
    """Return the path from a local or network-device identifier string.

    Catalog, legacy, and unrecognized identifiers yield None.
    """
    result = parse_identifier(raw)
    if not result.success or result.identifier is None:
        return None
    return identifier_path(result.identifier)
