"""Database schema CLI commands using Alembic programmatically."""

from pathlib import Path

import typer
from loguru import logger

db_app = typer.Typer()

_CONFIG_OPTION = typer.Option(Path("alembic.ini"), "--config", "-c", help="Path to alembic.ini")


def _alembic_config(path: Path):  # type: ignore[no-untyped-def]
    """Load the Alembic configuration, failing cleanly when it is missing."""
    from alembic.config import Config

    if not path.is_file():
        typer.echo(f"Error: Alembic config not found: {path}", err=True)
        raise typer.Exit(code=1)
    return Config(str(path))


@db_app.command()
def upgrade(
    revision: str = typer.Argument("head", help="Target revision"),
    config: Path = _CONFIG_OPTION,
) -> None:
    """Create or update the database schema up to the target revision."""
    from alembic import command

    alembic_cfg = _alembic_config(config)
    logger.info(f"Upgrading database to {revision}")
    command.upgrade(alembic_cfg, revision)
    logger.info("Database upgrade complete")


@db_app.command()
def downgrade(
    revision: str = typer.Argument("-1", help="Target revision"),
    config: Path = _CONFIG_OPTION,
) -> None:
    """Roll the database schema back to the target revision."""
    from alembic import command

    alembic_cfg = _alembic_config(config)
    logger.info(f"Downgrading database to {revision}")
    command.downgrade(alembic_cfg, revision)
    logger.info("Database downgrade complete")


@db_app.command()
def current(config: Path = _CONFIG_OPTION) -> None:
    """Show the current database schema revision."""
    from alembic import command

    command.current(_alembic_config(config), verbose=True)
