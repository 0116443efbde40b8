"""Tests for JSONFormatter."""

import json
import logging
import sys

from playgate.logging import JSONFormatter


def _record(msg: str = "hello", args: tuple = (), exc_info=None) -> logging.LogRecord:
    return logging.LogRecord(
        "playgate.migration", logging.INFO, __file__, 10, msg, args, exc_info
    )


class TestJSONFormatter:
    def test_basic_fields(self) -> None:
        output = json.loads(JSONFormatter().format(_record("migrated %d", (3,))))

        assert output["message"] == "migrated 3"
        assert output["level"] == "INFO"
        assert output["logger"] == "playgate.migration"
        assert output["timestamp"].endswith("+00:00")
        assert "context" not in output
        assert "exception" not in output

    def test_extra_fields_become_context(self) -> None:
        record = _record()
        record.entries = 12

        output = json.loads(JSONFormatter().format(record))

        assert output["context"] == {"entries": 12}

    def test_video_context_fields(self) -> None:
        record = _record()
        record.video_id = "dQw4w9WgXcQ"
        record.operation = "migrate"
        record.video_tag = "[video:dQw4w9WgXcQ] "

        output = json.loads(JSONFormatter().format(record))

        assert output["context"] == {"video_id": "dQw4w9WgXcQ", "operation": "migrate"}

    def test_exception_is_formatted(self) -> None:
        try:
            raise ValueError("bad entry")
        except ValueError:
            record = _record(exc_info=sys.exc_info())

        output = json.loads(JSONFormatter().format(record))

        assert "ValueError: bad entry" in output["exception"]

    def test_non_serializable_context_uses_str(self) -> None:
        record = _record()
        record.path = object()

        output = json.loads(JSONFormatter().format(record))

        assert output["context"]["path"].startswith("<object object")
