"""User management CLI commands."""

import asyncio

import typer
from sqlalchemy.exc import SQLAlchemyError

from cris_api.core.exceptions import CrisAdminError, DuplicateIdentityError

user_app = typer.Typer()

_FATAL_ERRORS = (CrisAdminError, SQLAlchemyError)


@user_app.command("create")
def create_user(
    username: str = typer.Option(..., prompt=True, help="Username"),
    email: str = typer.Option(..., prompt=True, help="Email address"),
    password: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True, help="Password"),
    role: str = typer.Option("client", prompt=True, help="User role (admin/staff/client)"),
    business_name: str | None = typer.Option(None, "--business-name", help="Business name"),
    contact_person: str | None = typer.Option(None, "--contact-person", help="Contact person"),
    phone: str | None = typer.Option(None, "--phone", help="Contact phone number"),
    address: str | None = typer.Option(None, "--address", help="Business address"),
    if_not_exists: bool = typer.Option(
        False,
        "--if-not-exists",
        help="Exit successfully if user already exists (idempotent mode)",
    ),
) -> None:
    """Create a new user interactively."""
    business = {
        "business_name": business_name,
        "contact_person": contact_person,
        "phone": phone,
        "address": address,
    }
    asyncio.run(
        _create_user(
            username,
            email,
            password,
            role,
            business_info=business if any(business.values()) else None,
            if_not_exists=if_not_exists,
        )
    )


async def _create_user(
    username: str,
    email: str,
    password: str,
    role: str,
    *,
    business_info: dict | None = None,
    if_not_exists: bool = False,
) -> None:
    """Async implementation of user creation."""
    from pydantic import ValidationError

    from cris_api.core.config import get_settings
    from cris_api.core.database import database_engine, get_session_factory
    from cris_api.schemas.auth import UserCreateRequest
    from cris_api.services.auth_service import create_user

    try:
        request = UserCreateRequest(
            username=username,
            email=email,
            password=password,
            role=role,
            business_info=business_info,
        )
    except ValidationError as e:
        typer.echo(f"Error: invalid user data:\n{e}", err=True)
        raise typer.Exit(code=1) from e

    try:
        settings = get_settings()
        async with database_engine(settings):
            factory = get_session_factory()
            async with factory() as session:
                user = await create_user(session, request)
                typer.echo(f"User '{user.username}' created with role '{user.role}'")
    except DuplicateIdentityError as e:
        if if_not_exists:
            typer.echo(f"User '{request.username}' already exists, skipping (--if-not-exists)")
            return
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e
    except _FATAL_ERRORS as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e


@user_app.command("list")
def list_users() -> None:
    """List all users."""
    asyncio.run(_list_users())


async def _list_users() -> None:
    """Async implementation of user listing."""
    from cris_api.core.config import get_settings
    from cris_api.core.database import database_engine, get_session_factory
    from cris_api.services.auth_service import list_users

    try:
        settings = get_settings()
        async with database_engine(settings):
            factory = get_session_factory()
            async with factory() as session:
                users, total = await list_users(session, page_size=1000)
    except _FATAL_ERRORS as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e

    typer.echo(f"{'Role':<8} {'Username':<30} {'Email':<30} {'Active':<8}")
    typer.echo("-" * 79)
    for user in users:
        typer.echo(f"{user.role.upper():<8} {user.username:<30} {user.email:<30} {user.is_active!s:<8}")
    typer.echo(f"\nTotal: {total}")


@user_app.command("show")
def show_user(
    identifier: str = typer.Argument(..., help="Username or email address"),
) -> None:
    """Show the details of one user."""
    asyncio.run(_show_user(identifier))


async def _show_user(identifier: str) -> None:
    """Async implementation of user lookup."""
    from cris_api.core.config import get_settings
    from cris_api.core.database import database_engine, get_session_factory
    from cris_api.services.auth_service import find_user

    try:
        settings = get_settings()
        async with database_engine(settings):
            factory = get_session_factory()
            async with factory() as session:
                user = await find_user(session, identifier)
    except _FATAL_ERRORS as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e

    if user is None:
        typer.echo(f"User not found: {identifier}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"Username:   {user.username}")
    typer.echo(f"Email:      {user.email}")
    typer.echo(f"Role:       {user.role}")
    typer.echo(f"Active:     {user.is_active}")
    if user.business_info:
        for key, value in user.business_info.items():
            if value:
                typer.echo(f"{key.replace('_', ' ').capitalize() + ':':<12}{value}")
    typer.echo(f"Created:    {user.created_at}")
    typer.echo(f"Last login: {user.last_login_at or 'Never'}")


@user_app.command("set-password")
def set_password(
    username: str = typer.Argument(..., help="Username"),
    password: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True, help="New password"),
) -> None:
    """Replace a user's password."""
    asyncio.run(_set_password(username, password))


async def _set_password(username: str, password: str) -> None:
    """Async implementation of password change."""
    from cris_api.core.config import get_settings
    from cris_api.core.database import database_engine, get_session_factory
    from cris_api.services.auth_service import change_password, get_user_by_username

    try:
        settings = get_settings()
        async with database_engine(settings):
            factory = get_session_factory()
            async with factory() as session:
                user = await get_user_by_username(session, username)
                if user is None:
                    typer.echo(f"User not found: {username}", err=True)
                    raise typer.Exit(code=1)
                await change_password(session, user, password)
    except _FATAL_ERRORS as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e

    typer.echo(f"Password updated for '{username}'")


@user_app.command("delete")
def delete_user(
    username: str = typer.Argument(..., help="Username"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
) -> None:
    """Delete a user account."""
    if not yes:
        typer.confirm(f"Delete user '{username}'?", abort=True)
    asyncio.run(_delete_user(username))


async def _delete_user(username: str) -> None:
    """Async implementation of user deletion."""
    from cris_api.core.config import get_settings
    from cris_api.core.database import database_engine, get_session_factory
    from cris_api.services.auth_service import delete_user, get_user_by_username

    try:
        settings = get_settings()
        async with database_engine(settings):
            factory = get_session_factory()
            async with factory() as session:
                user = await get_user_by_username(session, username)
                if user is None:
                    typer.echo(f"User not found: {username}", err=True)
                    raise typer.Exit(code=1)
                await delete_user(session, user)
    except _FATAL_ERRORS as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e

    typer.echo(f"User '{username}' deleted")
