"""Identity and credential service.

Owns the credential pipeline (``set_credential`` / ``verify_credential``)
and the administrative create, update, and delete operations on identity
records. Callers hash explicitly: only ``create_user`` and
``change_password`` ever call ``set_credential``.
"""

from datetime import UTC, datetime

from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from cris_api.core.exceptions import DuplicateIdentityError, IdentityValidationError
from cris_api.core.security import hash_password, verify_password
from cris_api.models.user import User
from cris_api.schemas.auth import PASSWORD_MIN_LENGTH, UserCreateRequest, UserUpdateRequest

_UPDATABLE_USER_FIELDS: frozenset[str] = frozenset({"email", "role", "business_info", "is_active"})


def set_credential(user: User, password: str) -> None:
    """Hash ``password`` and store it on ``user``.

    Args:
        user: The identity record to update in place.
        password: The new plaintext password.

    Raises:
        IdentityValidationError: If the password is shorter than the minimum length.
        HashingError: If the hashing backend fails.
    """
    if len(password) < PASSWORD_MIN_LENGTH:
        msg = f"Password must be at least {PASSWORD_MIN_LENGTH} characters"
        raise IdentityValidationError(msg)
    user.hashed_password = hash_password(password)


def verify_credential(user: User, password: str) -> bool:
    """Return True if ``password`` matches the credential stored on ``user``."""
    return verify_password(password, user.hashed_password)


async def _commit_or_reject(session: AsyncSession) -> None:
    """Commit, translating unique-constraint violations into validation errors."""
    try:
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        msg = "Username or email already exists"
        raise DuplicateIdentityError(msg) from e


async def get_user_by_username(session: AsyncSession, username: str) -> User | None:
    """Get a user by exact (case-sensitive) username."""
    result = await session.execute(select(User).where(User.username == username))
    return result.scalar_one_or_none()


async def find_user(session: AsyncSession, identifier: str) -> User | None:
    """Find a user by username or by e-mail address.

    Args:
        session: The database session.
        identifier: A username (case-sensitive) or an e-mail (case-insensitive).

    Returns:
        The matching User, or None. A username match wins over an e-mail
        match on a different record.
    """
    identifier = identifier.strip()
    user = await get_user_by_username(session, identifier)
    if user is not None:
        return user
    result = await session.execute(select(User).where(User.email == identifier.lower()))
    return result.scalar_one_or_none()


async def create_user(session: AsyncSession, request: UserCreateRequest) -> User:
    """Create a new user with a freshly hashed credential.

    Args:
        session: The database session.
        request: User creation request data.

    Returns:
        The created User.

    Raises:
        DuplicateIdentityError: If username or email already exists.
        HashingError: If the password cannot be hashed.
    """
    existing = await session.execute(
        select(User.id).where((User.username == request.username) | (User.email == request.email))
    )
    if existing.first() is not None:
        msg = "Username or email already exists"
        raise DuplicateIdentityError(msg)

    user = User(
        username=request.username,
        email=request.email,
        role=request.role,
        business_info=request.business_info.model_dump() if request.business_info else None,
        is_active=request.is_active,
    )
    set_credential(user, request.password)
    session.add(user)
    await _commit_or_reject(session)
    await session.refresh(user)
    logger.info(f"Created user '{user.username}' with role '{user.role}'")
    return user


async def authenticate_user(session: AsyncSession, username: str, password: str) -> User | None:
    """Verify a login attempt and record the login time.

    Args:
        session: The database session.
        username: The username to authenticate.
        password: The plaintext password.

    Returns:
        The User if authentication succeeds, None otherwise.
    """
    user = await get_user_by_username(session, username)
    if user is None or not verify_credential(user, password):
        return None
    if not user.is_active:
        return None
    user.last_login_at = datetime.now(UTC)
    await session.commit()
    return user


async def list_users(session: AsyncSession, page: int = 1, page_size: int = 100) -> tuple[list[User], int]:
    """List users with pagination.

    Args:
        session: The database session.
        page: Page number (1-based).
        page_size: Items per page.

    Returns:
        Tuple of (users list, total count).
    """
    count_result = await session.execute(select(func.count(User.id)))
    total = count_result.scalar_one()

    offset = (page - 1) * page_size
    result = await session.execute(
        select(User).order_by(User.created_at, User.username).offset(offset).limit(page_size)
    )
    users = list(result.scalars().all())
    return users, total


async def update_user(session: AsyncSession, user: User, updates: UserUpdateRequest | dict) -> User:
    """Update a user's profile fields without touching the credential.

    Args:
        session: The database session.
        user: The User to update.
        updates: Update request, or a dictionary of field names to new values.

    Returns:
        The updated User.

    Raises:
        DuplicateIdentityError: If the new email is already in use by another user.
    """
    if isinstance(updates, UserUpdateRequest):
        updates = updates.model_dump(exclude_unset=True)

    new_email = updates.get("email")
    if new_email is not None and new_email.lower() != user.email:
        existing = await session.execute(select(User.id).where(User.email == new_email.lower()))
        if existing.first() is not None:
            msg = "Email already in use"
            raise DuplicateIdentityError(msg)

    for field, value in updates.items():
        if field in _UPDATABLE_USER_FIELDS:
            setattr(user, field, value)

    await _commit_or_reject(session)
    await session.refresh(user)
    return user


async def change_password(session: AsyncSession, user: User, new_password: str) -> User:
    """Replace a user's credential with a hash of ``new_password``.

    Raises:
        IdentityValidationError: If the password is too short.
        HashingError: If the password cannot be hashed.
    """
    set_credential(user, new_password)
    await session.commit()
    await session.refresh(user)
    logger.info(f"Credential changed for user '{user.username}'")
    return user


async def delete_user(session: AsyncSession, user: User) -> None:
    """Delete a user account.

    Args:
        session: The database session.
        user: The User to delete.
    """
    username = user.username
    await session.delete(user)
    await session.commit()
    logger.info(f"Deleted user '{username}'")
