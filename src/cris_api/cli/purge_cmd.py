"""CLI command for emptying every table in the database.

``cris-api purge`` always prints a table of every collection and its
document count. Nothing is deleted unless ``--force`` (``-f``) is given;
with it, each collection is emptied independently and any failures are
listed before exiting with a nonzero code.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import typer
from sqlalchemy.exc import SQLAlchemyError

from cris_api.core.exceptions import CrisAdminError, PartialPurgeFailure, PurgeFailure

if TYPE_CHECKING:
    from cris_api.lib.purger import PurgeReport


def purge(
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Actually delete all documents. Without this flag only the report is shown.",
    ),
) -> None:
    """Report document counts and, with --force, delete ALL data.

    Collections (tables) are kept; only their contents are removed.
    """
    asyncio.run(_run_purge(force=force))


async def _run_purge(*, force: bool) -> None:
    """Async implementation of the purge workflow."""
    from cris_api.core.config import get_settings
    from cris_api.core.database import database_engine
    from cris_api.lib.purger import SqlAlchemyCollectionStore, build_report, execute_purge

    try:
        settings = get_settings()
        async with database_engine(settings) as engine:
            store = SqlAlchemyCollectionStore(engine, schema=settings.database_schema)
            report = await build_report(store)
            _print_report(report)

            if not force:
                typer.echo(
                    typer.style(
                        "WARNING: --force will permanently delete ALL documents from every collection above.",
                        fg=typer.colors.YELLOW,
                        bold=True,
                    )
                )
                typer.echo("Collections will remain but all documents will be removed.")
                typer.echo("To proceed, run: cris-api purge --force")
                return

            typer.echo("Clearing all data from collections...\n")
            result = await execute_purge(store, report)
    except (CrisAdminError, SQLAlchemyError, LookupError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e

    for name, deleted in result.deleted.items():
        typer.echo(f"  {typer.style('OK', fg=typer.colors.GREEN)}   {name} ({deleted} documents deleted)")
    for name, error in result.failed.items():
        typer.echo(f"  {typer.style('FAIL', fg=typer.colors.RED)} {name}: {error}", err=True)

    typer.echo(f"\nTotal documents deleted: {result.total_deleted} of {report.total}")

    try:
        result.raise_for_status()
    except PartialPurgeFailure as e:
        not_purged = f"{len(e.failed)} of {len(report.collections)} collection(s) not purged"
        typer.echo(f"\nPARTIAL FAILURE: {not_purged}.", err=True)
        raise typer.Exit(code=1) from e
    except PurgeFailure as e:
        typer.echo(f"\nFAILED: no collection could be purged. {e}", err=True)
        raise typer.Exit(code=1) from e

    typer.echo("Database cleaned successfully. All collections are now empty but still exist.")


def _print_report(report: PurgeReport) -> None:
    """Print the collection → document count table."""
    typer.echo(f"Found {len(report.collections)} collection(s):\n")
    typer.echo(f"{'Collection':<40} {'Documents':>12}")
    typer.echo("-" * 53)
    for entry in report.collections:
        typer.echo(f"{entry.name:<40} {entry.count:>12,}")
    typer.echo("-" * 53)
    typer.echo(f"{'Total':<40} {report.total:>12,}\n")
