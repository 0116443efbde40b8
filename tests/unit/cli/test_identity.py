"""Tests for the playgate id commands."""

import json

from playgate.cli import main
from playgate.cli.exit_codes import ExitCode


class TestParseCommand:
    def test_catalog_id(self, runner, cli_obj) -> None:
        result = runner.invoke(main, ["id", "parse", "dQw4w9WgXcQ"], obj=cli_obj)

        assert result.exit_code == 0
        assert "Kind: catalog" in result.output
        assert "raw_id: dQw4w9WgXcQ" in result.output

    def test_local_json(self, runner, cli_obj) -> None:
        result = runner.invoke(
            main,
            ["id", "parse", "local:/videos/My Clip (2024).mp4", "--json"],
            obj=cli_obj,
        )

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data == {
            "kind": "local",
            "identifier": "local:/videos/My Clip (2024).mp4",
            "fields": {"path": "/videos/My Clip (2024).mp4"},
            "path": "/videos/My Clip (2024).mp4",
        }

    def test_network_device_json(self, runner, cli_obj) -> None:
        result = runner.invoke(
            main,
            ["id", "parse", "dlna://192.168.1.10:8200/MediaItems/22.mp4", "--json"],
            obj=cli_obj,
        )

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["kind"] == "dlna"
        assert data["fields"] == {
            "host": "192.168.1.10:8200",
            "path": "/MediaItems/22.mp4",
        }

    def test_unrecognized(self, runner, cli_obj) -> None:
        result = runner.invoke(main, ["id", "parse", "ftp://x/y"], obj=cli_obj)

        assert result.exit_code == ExitCode.INVALID_IDENTIFIER
        assert "Unknown video identifier format" in result.output

    def test_unrecognized_json_error(self, runner, cli_obj) -> None:
        result = runner.invoke(
            main, ["id", "parse", "dlna://", "--json"], obj=cli_obj
        )

        assert result.exit_code == ExitCode.INVALID_IDENTIFIER
        error = json.loads(result.output)["error"]
        assert error["code"] == "INVALID_IDENTIFIER"
        assert "missing path" in error["message"]


class TestConstructCommands:
    def test_local(self, runner, cli_obj) -> None:
        result = runner.invoke(main, ["id", "local", "/x/y z.mp4"], obj=cli_obj)

        assert result.exit_code == 0
        assert result.output.strip() == "local:/x/y z.mp4"

    def test_dlna(self, runner, cli_obj) -> None:
        result = runner.invoke(
            main, ["id", "dlna", "nas:8200", "/Videos/a.mp4"], obj=cli_obj
        )

        assert result.exit_code == 0
        assert result.output.strip() == "dlna://nas:8200/Videos/a.mp4"

    def test_dlna_rejects_relative_path(self, runner, cli_obj) -> None:
        result = runner.invoke(
            main, ["id", "dlna", "nas", "Videos/a.mp4"], obj=cli_obj
        )

        assert result.exit_code == ExitCode.INVALID_IDENTIFIER
