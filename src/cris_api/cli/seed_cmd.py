"""CLI command for regenerating the demo user accounts.

``cris-api seed`` deletes every user and recreates the fixed demo set
(admin, staff, demo). Running it repeatedly always ends with exactly those
three accounts.
"""

import asyncio

import typer
from sqlalchemy.exc import SQLAlchemyError

from cris_api.core.exceptions import CrisAdminError, SeedError


def seed() -> None:
    """Replace all users with the demo accounts.

    Intended for development and staging databases only.
    """
    asyncio.run(_run_seed())


async def _run_seed() -> None:
    """Async implementation of the seed workflow."""
    from cris_api.core.config import get_settings
    from cris_api.core.database import database_engine, get_session_factory
    from cris_api.services.seed_service import DEMO_USERS, seed_demo_users

    try:
        settings = get_settings()
        async with database_engine(settings):
            factory = get_session_factory()
            async with factory() as session:
                result = await seed_demo_users(session)
    except SeedError as e:
        typer.echo(f"Error: {e}", err=True)
        if not e.wiped:
            typer.echo("  Existing users were left unchanged.", err=True)
            raise typer.Exit(code=1) from e
        typer.echo(f"  Deleted before failure: {e.deleted}", err=True)
        if e.partial:
            created = ", ".join(e.created)
            typer.echo(f"  PARTIAL: only these demo users were created: {created}", err=True)
        else:
            typer.echo("  No demo users were created; the users table is empty.", err=True)
        raise typer.Exit(code=1) from e
    except (CrisAdminError, SQLAlchemyError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e

    typer.echo(f"Cleared {result.deleted} existing user(s)")
    by_username = {d.username: d for d in DEMO_USERS}
    for username in result.created:
        definition = by_username[username]
        typer.echo(f"  Created user: {username} ({definition.role})")
    typer.echo(f"\n{len(result.created)} demo user(s) created.")
    typer.echo("Login credentials:")
    for username in result.created:
        definition = by_username[username]
        typer.echo(f"  {definition.role.value:<8} username={username} password={definition.password}")
