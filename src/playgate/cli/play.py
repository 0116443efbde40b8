"""CLI commands for playback routing."""

from __future__ import annotations

import asyncio
import json
import logging

import click

from playgate.cli.exit_codes import ExitCode
from playgate.cli.output import echo_json, error_exit
from playgate.cli.services import (
    build_migrator,
    build_router,
    get_config_from_ctx,
    get_db_conn_from_ctx,
)
from playgate.exceptions import MaterializationError, PlaygateError

logger = logging.getLogger(__name__)


async def _migrate_if_needed(ctx: click.Context) -> None:
    migrator = build_migrator(get_config_from_ctx(ctx))
    if not await migrator.needs_migration():
        return
    result = await migrator.migrate()
    logger.info(
        "Startup history migration: %d migrated, %d skipped, %d errors",
        result.migrated,
        result.skipped,
        len(result.errors),
    )


@click.group("play")
@click.pass_context
def play_group(ctx: click.Context) -> None:
    """Decide where catalog videos play from.

    When migration.run_on_startup is set, the watched history is migrated
    first. A failed migration is logged and never blocks playback.
    """
    config = get_config_from_ctx(ctx)
    if not config.migration.run_on_startup:
        return

    try:
        asyncio.run(_migrate_if_needed(ctx))
    except PlaygateError as e:
        logger.warning("Startup history migration failed: %s", e)


@play_group.command("decide")
@click.argument("catalog_id")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON.")
@click.pass_context
def decide_command(ctx: click.Context, catalog_id: str, json_output: bool) -> None:
    """Show whether CATALOG_ID plays locally or from the network."""
    router = build_router(get_db_conn_from_ctx(ctx))
    decision = asyncio.run(router.decide(catalog_id))

    if json_output:
        echo_json(
            {
                "catalog_id": catalog_id,
                "use_local": decision.use_local,
                "file_path": decision.metadata.file_path if decision.metadata else None,
            }
        )
        return

    if decision.use_local:
        click.echo(f"local: {decision.metadata.file_path}")
    else:
        click.echo("network")


@play_group.command("materialize")
@click.argument("catalog_id")
@click.option(
    "--context",
    "navigation_context",
    default=None,
    help="Navigation context as a JSON object, passed through unchanged.",
)
@click.pass_context
def materialize_command(
    ctx: click.Context, catalog_id: str, navigation_context: str | None
) -> None:
    """Print the playable local view of CATALOG_ID as JSON.

    Fails when the video has no usable downloaded copy.
    """
    context = None
    if navigation_context is not None:
        try:
            context = json.loads(navigation_context)
        except json.JSONDecodeError as e:
            raise click.BadParameter(
                f"not valid JSON: {e}", param_hint="--context"
            ) from e

    router = build_router(get_db_conn_from_ctx(ctx))

    async def _materialize():
        decision = await router.decide(catalog_id)
        if not decision.use_local:
            return None
        return await router.materialize_local_view(decision.metadata, context)

    try:
        video = asyncio.run(_materialize())
    except MaterializationError as e:
        error_exit(str(e), ExitCode.FILE_NOT_ACCESSIBLE)

    if video is None:
        error_exit(
            f"No playable downloaded copy of {catalog_id}",
            ExitCode.FILE_NOT_ACCESSIBLE,
        )
    echo_json(video.to_dict())
