"""Tests for demo identity seeding."""

from unittest.mock import patch

import pytest
from sqlalchemy import func, select, text
from sqlalchemy.ext.asyncio import AsyncSession

from cris_api.core.exceptions import HashingError, SeedError
from cris_api.models.user import User, UserRole
from cris_api.schemas.auth import BusinessInfo
from cris_api.services.auth_service import verify_credential
from cris_api.services.seed_service import DEMO_USERS, DemoUser, seed_demo_users


async def _all_users(session: AsyncSession) -> list[User]:
    result = await session.execute(select(User).order_by(User.username))
    return list(result.scalars().all())


class TestDemoDefinitions:
    """The fixed demo set."""

    def test_three_accounts_in_order(self) -> None:
        assert [(d.username, d.role) for d in DEMO_USERS] == [
            ("admin", UserRole.ADMIN),
            ("staff", UserRole.STAFF),
            ("demo", UserRole.CLIENT),
        ]

    def test_usernames_and_emails_unique(self) -> None:
        assert len({d.username for d in DEMO_USERS}) == len(DEMO_USERS)
        assert len({d.email for d in DEMO_USERS}) == len(DEMO_USERS)


class TestSeedDemoUsers:
    """Tests for seed_demo_users."""

    async def test_creates_demo_set(self, async_session: AsyncSession) -> None:
        result = await seed_demo_users(async_session)

        assert result.deleted == 0
        assert result.created == ["admin", "staff", "demo"]
        users = {u.username: u for u in await _all_users(async_session)}
        assert set(users) == {"admin", "staff", "demo"}
        assert users["admin"].role is UserRole.ADMIN
        assert users["staff"].role is UserRole.STAFF
        assert users["demo"].role is UserRole.CLIENT
        assert users["demo"].business_info["business_name"] == "Demo Restaurant"

    async def test_passwords_are_hashed_and_verify(self, async_session: AsyncSession) -> None:
        await seed_demo_users(async_session)
        users = {u.username: u for u in await _all_users(async_session)}
        for definition in DEMO_USERS:
            user = users[definition.username]
            assert user.hashed_password != definition.password
            assert verify_credential(user, definition.password)

    async def test_rerun_converges_to_demo_set(self, async_session: AsyncSession) -> None:
        first = await seed_demo_users(async_session)
        second = await seed_demo_users(async_session)
        third = await seed_demo_users(async_session)

        assert first.deleted == 0
        assert second.deleted == 3
        assert third.deleted == 3
        count = (await async_session.execute(select(func.count(User.id)))).scalar_one()
        assert count == 3

    async def test_removes_leftover_accounts(self, async_session: AsyncSession, sample_user: User) -> None:
        result = await seed_demo_users(async_session)

        assert result.deleted == 1
        usernames = [u.username for u in await _all_users(async_session)]
        assert usernames == ["admin", "demo", "staff"]

    async def test_inactive_users_are_wiped_too(self, async_session: AsyncSession, sample_user: User) -> None:
        sample_user.is_active = False
        await async_session.commit()

        result = await seed_demo_users(async_session)
        assert result.deleted == 1

    async def test_duplicate_definition_aborts_with_partial_report(self, async_session: AsyncSession) -> None:
        clashing = DemoUser(
            username="clash",
            email=DEMO_USERS[0].email,
            password="clash123",
            role=UserRole.CLIENT,
            business_info=BusinessInfo(),
        )
        definitions = (DEMO_USERS[0], clashing, DEMO_USERS[2])

        with pytest.raises(SeedError) as exc_info:
            await seed_demo_users(async_session, definitions)

        err = exc_info.value
        assert err.username == "clash"
        assert err.created == ["admin"]
        assert err.partial
        assert "already exists" in err.reason
        assert [u.username for u in await _all_users(async_session)] == ["admin"]

    async def test_failure_on_first_record_is_not_partial(self, async_session: AsyncSession, sample_user: User) -> None:
        with (
            patch("cris_api.services.auth_service.hash_password", side_effect=HashingError("backend failed")),
            pytest.raises(SeedError) as exc_info,
        ):
            await seed_demo_users(async_session)

        err = exc_info.value
        assert err.username == "admin"
        assert err.created == []
        assert err.deleted == 1
        assert not err.partial
        assert await _all_users(async_session) == []

    async def test_does_not_touch_other_tables(self, async_session: AsyncSession) -> None:
        await async_session.execute(text("CREATE TABLE orders (id INTEGER PRIMARY KEY, total INTEGER)"))
        await async_session.execute(text("INSERT INTO orders (total) VALUES (10), (20)"))
        await async_session.commit()

        await seed_demo_users(async_session)

        remaining = (await async_session.execute(text("SELECT COUNT(*) FROM orders"))).scalar_one()
        assert remaining == 2

    async def test_wipe_failure_raises_seed_error(self, async_session: AsyncSession) -> None:
        await async_session.execute(text("DROP TABLE users"))
        await async_session.commit()

        with pytest.raises(SeedError) as exc_info:
            await seed_demo_users(async_session)

        err = exc_info.value
        assert err.username is None
        assert not err.wiped
        assert err.deleted == 0
        assert err.created == []
        assert "users" in err.reason
