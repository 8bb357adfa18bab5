"""Demo identity seeding.

Regenerates the fixed set of demo accounts used in development and staging:
every identity record is deleted, then each demo definition is created in
order through the regular user-creation path. The two steps are not wrapped
in one transaction, so a failure part-way leaves a partially seeded table;
:class:`~cris_api.core.exceptions.SeedError` reports exactly how far the run
got.
"""

from dataclasses import dataclass, field

from loguru import logger
from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cris_api.core.exceptions import HashingError, IdentityValidationError, SeedError
from cris_api.models.user import User, UserRole
from cris_api.schemas.auth import BusinessInfo, UserCreateRequest
from cris_api.services.auth_service import create_user


@dataclass(frozen=True)
class DemoUser:
    """Definition of one demo account."""

    username: str
    email: str
    password: str
    role: UserRole
    business_info: BusinessInfo

    def to_request(self) -> UserCreateRequest:
        return UserCreateRequest(
            username=self.username,
            email=self.email,
            password=self.password,
            role=self.role,
            business_info=self.business_info,
        )


DEMO_USERS: tuple[DemoUser, ...] = (
    DemoUser(
        username="admin",
        email="admin@crisnil.com",
        password="admin123",
        role=UserRole.ADMIN,
        business_info=BusinessInfo(
            business_name="Crisnil Trading Admin",
            contact_person="System Administrator",
            phone="+1-555-0100",
            address="123 Admin Street, Business District",
        ),
    ),
    DemoUser(
        username="staff",
        email="staff@crisnil.com",
        password="staff123",
        role=UserRole.STAFF,
        business_info=BusinessInfo(
            business_name="Crisnil Trading Staff",
            contact_person="Staff Member",
            phone="+1-555-0200",
            address="456 Staff Avenue, Operations Center",
        ),
    ),
    DemoUser(
        username="demo",
        email="demo@crisnil.com",
        password="demo123",
        role=UserRole.CLIENT,
        business_info=BusinessInfo(
            business_name="Demo Restaurant",
            contact_person="John Demo",
            phone="+1-555-0300",
            address="789 Demo Lane, Client City",
        ),
    ),
)


@dataclass
class SeedResult:
    """Outcome of a completed demo seeding run.

    Attributes:
        deleted: Identity records removed by the wipe step.
        created: Usernames created, in creation order.
    """

    deleted: int = 0
    created: list[str] = field(default_factory=list)


async def seed_demo_users(
    session: AsyncSession,
    definitions: tuple[DemoUser, ...] = DEMO_USERS,
) -> SeedResult:
    """Replace every identity record with the demo set.

    Args:
        session: The database session.
        definitions: Demo accounts to create, in order.

    Returns:
        Counts of deleted and created records.

    Raises:
        SeedError: If the wipe fails (``username`` is None, nothing changed)
            or any demo record cannot be persisted. Records created before
            the failure remain committed.
    """
    result = SeedResult()

    try:
        wipe = await session.execute(delete(User))
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"Seeding aborted while clearing users: {e}")
        raise SeedError(None, [], 0, str(e)) from e
    result.deleted = wipe.rowcount or 0
    logger.info(f"Cleared {result.deleted} existing user(s)")

    for definition in definitions:
        try:
            await create_user(session, definition.to_request())
        except (IdentityValidationError, HashingError, SQLAlchemyError) as e:
            await session.rollback()
            logger.error(f"Seeding aborted at '{definition.username}' after {len(result.created)} user(s): {e}")
            raise SeedError(definition.username, result.created, result.deleted, str(e)) from e
        result.created.append(definition.username)

    logger.info(f"Seeded {len(result.created)} demo user(s)")
    return result
