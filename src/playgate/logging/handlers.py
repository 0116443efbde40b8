"""JSON log formatting."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

# Attributes every LogRecord has, plus those added during formatting
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "taskName"}

# Set by VideoContextFilter; video_tag is for text output only
_CONTEXT_ATTRS = ("video_id", "operation")


class JSONFormatter(logging.Formatter):
    """Format each record as one JSON object per line.

    Keys: ``timestamp`` (UTC, ISO 8601), ``level``, ``message``,
    ``logger``, ``context`` (``extra=`` fields and the video context,
    when any) and ``exception`` (formatted traceback, when any).
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
        }
        if record.name != "root":
            entry["logger"] = record.name

        context = self._extra_fields(record)
        for attr in _CONTEXT_ATTRS:
            value = getattr(record, attr, None)
            if value:
                context[attr] = value
        if context:
            entry["context"] = context

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)

    @staticmethod
    def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
        return {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS
            and key not in _CONTEXT_ATTRS
            and key != "video_tag"
            and not key.startswith("_")
        }
