"""Codec for the legacy ``local_<base64>`` identifier scheme.

Before URI-style identifiers, local videos were keyed by the URL-safe
base64 encoding of their path (``+`` -> ``-``, ``/`` -> ``_``, padding
stripped) behind a ``local_`` prefix. Only the history migrator needs to
read these; nothing writes them any more except tests and fixtures.
"""

from __future__ import annotations

import base64
import binascii
import re
from pathlib import PurePosixPath, PureWindowsPath

from playgate.exceptions import PlaygateError

LEGACY_LOCAL_PREFIX = "local_"

_PAYLOAD_PATTERN = re.compile(r"[A-Za-z0-9_-]+")


class LegacyDecodeError(PlaygateError, ValueError):
    """Raised when a legacy identifier does not decode to a file path."""


def is_legacy_encoded(raw: str) -> bool:
    """Check whether an identifier looks like a legacy encoded path."""
    if not raw.startswith(LEGACY_LOCAL_PREFIX):
        return False
    payload = raw[len(LEGACY_LOCAL_PREFIX) :]
    return _PAYLOAD_PATTERN.fullmatch(payload) is not None


def encode_legacy_path(path: str) -> str:
    """Encode a path the way pre-URI identifiers were built."""
    encoded = base64.urlsafe_b64encode(path.encode("utf-8")).decode("ascii")
    return LEGACY_LOCAL_PREFIX + encoded.rstrip("=")


def decode_legacy_path(raw: str) -> str:
    """Decode a legacy identifier back to the file path it encodes.

    Args:
        raw: Identifier of the form ``local_<base64url>``.

    Returns:
        The absolute path encoded in the identifier.

    Raises:
        LegacyDecodeError: If the identifier is not legacy-encoded, the
            payload is not valid base64, is not UTF-8 text, or does not
            name an absolute path. Truncated scanner ids land here.
    """
    if not is_legacy_encoded(raw):
        raise LegacyDecodeError(f"Not a legacy encoded identifier: {raw}")

    payload = raw[len(LEGACY_LOCAL_PREFIX) :]
    padded = payload + "=" * (-len(payload) % 4)
    try:
        decoded = base64.urlsafe_b64decode(padded).decode("utf-8")
    except (binascii.Error, ValueError) as e:
        raise LegacyDecodeError(f"Invalid legacy identifier {raw}: {e}") from e

    if "\x00" in decoded or not _is_absolute(decoded):
        raise LegacyDecodeError(
            f"Legacy identifier {raw} does not encode an absolute path"
        )
    return decoded


def _is_absolute(path: str) -> bool:
    return PurePosixPath(path).is_absolute() or PureWindowsPath(path).is_absolute()
