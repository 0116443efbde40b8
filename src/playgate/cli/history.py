"""CLI commands for the watched history."""

from __future__ import annotations

import asyncio

import click

from playgate.cli.exit_codes import ExitCode
from playgate.cli.output import echo_json, error_exit
from playgate.cli.services import build_migrator, get_config_from_ctx
from playgate.exceptions import MigrationWriteError, PersistenceError


@click.group("history")
def history_group() -> None:
    """Inspect and migrate the watched history."""


@history_group.command("migrate")
@click.option(
    "--dry-run",
    is_flag=True,
    help="Report what would change without backing up or writing.",
)
@click.option("--json", "json_output", is_flag=True, help="Output as JSON.")
@click.pass_context
def migrate_command(ctx: click.Context, dry_run: bool, json_output: bool) -> None:
    """Upgrade legacy identifiers and backfill missing metadata.

    A timestamped backup of the history file is written first. Running
    the migration again makes no further changes.
    """
    config = get_config_from_ctx(ctx)

    try:
        migrator = build_migrator(config)
        result = asyncio.run(migrator.migrate(dry_run=dry_run))
    except MigrationWriteError as e:
        error_exit(str(e), ExitCode.MIGRATION_FAILED, json_output)
    except PersistenceError as e:
        error_exit(str(e), ExitCode.OPERATION_FAILED, json_output)

    if json_output:
        echo_json(result.to_dict())
        return

    prefix = "Dry run: " if dry_run else ""
    click.echo(
        f"{prefix}{result.total} entries, {result.migrated} migrated, "
        f"{result.skipped} skipped, {len(result.errors)} errors"
    )
    if result.backup_path:
        click.echo(f"Backup: {result.backup_path}")
    for warning in result.warnings:
        click.echo(f"Warning: {warning}", err=True)
    for error in result.errors:
        click.echo(f"Error: {error}", err=True)


@history_group.command("check")
@click.pass_context
def check_command(ctx: click.Context) -> None:
    """Report whether the watched history needs migrating."""
    config = get_config_from_ctx(ctx)

    try:
        migrator = build_migrator(config)
    except PersistenceError as e:
        error_exit(str(e), ExitCode.OPERATION_FAILED)

    if asyncio.run(migrator.needs_migration()):
        click.echo("Migration needed. Run 'playgate history migrate'.")
    else:
        click.echo("Watched history is up to date.")
