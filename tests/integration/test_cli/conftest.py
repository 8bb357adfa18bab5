"""Fixtures for CLI integration tests against a file-backed SQLite database."""

from collections.abc import Generator
from pathlib import Path

import pytest
from loguru import logger
from sqlalchemy import Engine, create_engine
from typer.testing import CliRunner

from cris_api.models.base import Base


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def db_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the CLI at an empty SQLite file with cheap hashing."""
    path = tmp_path / "cris.db"
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{path}")
    monkeypatch.setenv("BCRYPT_ROUNDS", "4")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    return path


@pytest.fixture
def sync_engine(db_path: Path) -> Generator[Engine]:
    """Synchronous engine on the same file, with the schema created."""
    engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture(autouse=True)
def _detach_log_sinks() -> Generator[None]:
    """Drop sinks bound to the runner's captured streams once a test ends."""
    yield
    logger.remove()
