"""Typer CLI root application with serve command."""

import typer

from cris_api.core.config import get_settings
from cris_api.core.exceptions import ConfigurationError
from cris_api.core.logging import setup_logging
from cris_api.core.security import configure_hashing

app = typer.Typer(name="cris-api", help="CRIS identity and database maintenance CLI")


@app.callback()
def _main_callback() -> None:
    """Initialize logging and hashing for all CLI commands."""
    try:
        settings = get_settings()
    except ConfigurationError:
        # Commands that need settings report the error themselves.
        setup_logging()
        return
    setup_logging(settings.log_level, log_dir=settings.log_dir)
    configure_hashing(settings.bcrypt_rounds)


@app.command()
def serve(
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload for development"),
    host: str = typer.Option("0.0.0.0", "--host", help="Bind host"),  # noqa: S104
    port: int = typer.Option(5000, "--port", help="Bind port"),
) -> None:
    """Start the API server."""
    import uvicorn

    uvicorn.run(
        "cris_api.main:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
    )


def _register_subcommands() -> None:
    """Register all CLI subcommand groups."""
    from cris_api.cli.db_cmd import db_app
    from cris_api.cli.purge_cmd import purge
    from cris_api.cli.seed_cmd import seed
    from cris_api.cli.user_cmd import user_app

    app.add_typer(db_app, name="db", help="Database migration commands")
    app.add_typer(user_app, name="user", help="User management commands")
    app.command("seed")(seed)
    app.command("purge")(purge)


_register_subcommands()
