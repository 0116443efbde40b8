"""Video identifier parsing and construction."""

from playgate.identity.identifier import (
    LOCAL_PREFIX,
    NETWORK_DEVICE_PREFIX,
    CatalogId,
    IdentifierKind,
    IdentifierParseResult,
    LegacyOpaqueId,
    LocalId,
    NetworkDeviceId,
    VideoIdentifier,
    create_local_id,
    create_network_device_id,
    extract_path,
    identifier_path,
    identifier_to_string,
    is_catalog_id,
    parse_identifier,
)
from playgate.identity.legacy import (
    LegacyDecodeError,
    decode_legacy_path,
    encode_legacy_path,
    is_legacy_encoded,
)

__all__ = [
    # identifier
    "LOCAL_PREFIX",
    "NETWORK_DEVICE_PREFIX",
    "CatalogId",
    "IdentifierKind",
    "IdentifierParseResult",
    "LegacyOpaqueId",
    "LocalId",
    "NetworkDeviceId",
    "VideoIdentifier",
    "create_local_id",
    "create_network_device_id",
    "extract_path",
    "identifier_path",
    "identifier_to_string",
    "is_catalog_id",
    "parse_identifier",
    # legacy
    "LegacyDecodeError",
    "decode_legacy_path",
    "encode_legacy_path",
    "is_legacy_encoded",
]
