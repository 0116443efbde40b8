"""CLI commands for parsing and constructing video identifiers."""

from __future__ import annotations

import dataclasses

import click

from playgate.cli.exit_codes import ExitCode
from playgate.cli.output import echo_json, error_exit
from playgate.identity import (
    create_local_id,
    create_network_device_id,
    extract_path,
    parse_identifier,
)


@click.group("id")
def id_group() -> None:
    """Parse and construct video identifiers.

    Examples:

        playgate id parse "local:/videos/My Clip (2024).mp4"

        playgate id dlna 192.168.1.10:8200 /MediaItems/22.mp4
    """


@id_group.command("parse")
@click.argument("raw")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON.")
def parse_command(raw: str, json_output: bool) -> None:
    """Show which identifier scheme RAW uses."""
    result = parse_identifier(raw)

    if not result.success:
        error_exit(
            result.error or "Unknown video identifier format",
            ExitCode.INVALID_IDENTIFIER,
            json_output,
        )

    identifier = result.identifier
    if json_output:
        echo_json(
            {
                "kind": identifier.kind.value,
                "identifier": identifier.to_string(),
                "fields": dataclasses.asdict(identifier),
                "path": extract_path(raw),
            }
        )
        return

    click.echo(f"Kind: {identifier.kind.value}")
    for name, value in dataclasses.asdict(identifier).items():
        click.echo(f"{name}: {value}")


@id_group.command("local")
@click.argument("path")
def local_command(path: str) -> None:
    """Print the identifier for a local file PATH."""
    click.echo(create_local_id(path))


@id_group.command("dlna")
@click.argument("host")
@click.argument("path")
def dlna_command(host: str, path: str) -> None:
    """Print the identifier for PATH served by network device HOST."""
    if not path.startswith("/"):
        error_exit(f"Path must start with '/': {path}", ExitCode.INVALID_IDENTIFIER)
    click.echo(create_network_device_id(host, path))
