"""Shared test fixtures for async database, sessions, and users."""

import uuid
from collections.abc import AsyncGenerator, Generator

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from cris_api.core.config import Settings
from cris_api.core.security import DEFAULT_BCRYPT_ROUNDS, configure_hashing, hash_password
from cris_api.models.base import Base
from cris_api.models.user import User, UserRole

# Minimum bcrypt cost keeps the suite fast; the default is asserted separately.
TEST_BCRYPT_ROUNDS = 4


@pytest.fixture(autouse=True)
def _fast_hashing() -> Generator[None]:
    """Use the cheapest bcrypt cost for every test, then restore the default."""
    configure_hashing(TEST_BCRYPT_ROUNDS)
    yield
    configure_hashing(DEFAULT_BCRYPT_ROUNDS)


@pytest.fixture
def settings() -> Settings:
    """Test application settings."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        database_url="sqlite+aiosqlite:///:memory:",
        environment="test",
        health_check_timeout=0.5,
    )


@pytest.fixture
async def async_engine() -> AsyncGenerator[AsyncEngine]:
    """Create an in-memory async SQLite engine for testing."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def async_session(async_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Create a per-test async session."""
    session_factory = async_sessionmaker(async_engine, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
async def sample_user(async_session: AsyncSession) -> User:
    """Create a sample admin user in the test database."""
    user = User(
        id=uuid.uuid4(),
        username="testadmin",
        email="admin@test.com",
        hashed_password=hash_password("testpassword123"),
        role=UserRole.ADMIN,
    )
    async_session.add(user)
    await async_session.commit()
    await async_session.refresh(user)
    return user
