"""Async database engine and session management.

Provides async engine creation, session factory, and lifecycle helpers
using SQLAlchemy 2.x. Maintenance commands acquire the engine through
:func:`database_engine`, which verifies connectivity up front and always
disposes the engine on the way out.
"""

import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from loguru import logger
from sqlalchemy import text
from sqlalchemy.exc import ArgumentError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from cris_api.core.config import Settings
from cris_api.core.exceptions import ConfigurationError, StoreConnectionError

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def get_engine() -> AsyncEngine:
    """Return the current async engine.

    Raises:
        RuntimeError: If the engine has not been initialized.
    """
    if _engine is None:
        msg = "Database engine not initialized. Call init_engine() first."
        raise RuntimeError(msg)
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the current session factory.

    Raises:
        RuntimeError: If the engine has not been initialized.
    """
    if _session_factory is None:
        msg = "Session factory not initialized. Call init_engine() first."
        raise RuntimeError(msg)
    return _session_factory


def init_engine(database_url: str, *, schema: str | None = None, **kwargs: object) -> AsyncEngine:
    """Create and store the async engine and session factory.

    Args:
        database_url: Async SQLAlchemy connection string.
        schema: Optional PostgreSQL schema for isolated environments.
        **kwargs: Additional arguments passed to create_async_engine.

    Returns:
        The created async engine.

    Raises:
        ConfigurationError: If the URL names an unknown or non-async driver.
    """
    global _engine, _session_factory  # noqa: PLW0603
    if schema is not None:
        connect_args = kwargs.pop("connect_args", {})
        if not isinstance(connect_args, dict):
            msg = "connect_args must be a dict"
            raise TypeError(msg)
        connect_args["options"] = f"-c search_path={schema},public"
        kwargs["connect_args"] = connect_args
    # Only set pool defaults for connection-pooled engines (not SQLite/StaticPool)
    uses_static_pool = kwargs.get("poolclass") is StaticPool or "sqlite" in database_url
    if not uses_static_pool:
        kwargs.setdefault("pool_size", 5)
        kwargs.setdefault("max_overflow", 2)
        kwargs.setdefault("pool_pre_ping", True)
    try:
        _engine = create_async_engine(database_url, **kwargs)
    except (ArgumentError, SQLAlchemyError, ImportError) as e:
        msg = f"Cannot create database engine: {e}"
        raise ConfigurationError(msg) from e
    _session_factory = async_sessionmaker(_engine, expire_on_commit=False)
    return _engine


async def dispose_engine() -> None:
    """Dispose of the async engine and release connections."""
    global _engine, _session_factory  # noqa: PLW0603
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _session_factory = None


async def ensure_connection(engine: AsyncEngine) -> None:
    """Open a connection and run a trivial query.

    Raises:
        StoreConnectionError: If the database cannot be reached.
    """
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (OSError, SQLAlchemyError) as e:
        msg = f"Cannot connect to database: {e}"
        raise StoreConnectionError(msg) from e


async def check_connectivity(timeout: float = 2.0) -> bool:
    """Report whether the current engine can reach the database.

    Never raises: an uninitialized engine, a check that does not finish
    within ``timeout`` seconds, or any driver error all report False.
    """
    if _engine is None:
        return False
    try:
        await asyncio.wait_for(ensure_connection(_engine), timeout=timeout)
    except Exception as e:  # noqa: BLE001
        logger.debug(f"Connectivity check failed: {e!r}")
        return False
    return True


@asynccontextmanager
async def database_engine(settings: Settings, **kwargs: object) -> AsyncGenerator[AsyncEngine]:
    """Initialize the engine for one workflow and dispose it on every exit path.

    Args:
        settings: Application settings providing the connection string.
        **kwargs: Additional arguments passed to :func:`init_engine`.

    Yields:
        A connected async engine.

    Raises:
        ConfigurationError: If the engine cannot be created.
        StoreConnectionError: If the database cannot be reached.
    """
    engine = init_engine(settings.database_url, schema=settings.database_schema, **kwargs)
    try:
        await ensure_connection(engine)
        logger.debug("Database connection established")
        yield engine
    finally:
        await dispose_engine()
        logger.debug("Database engine disposed")
