"""Identity record model with role-based access and credential storage."""

import enum
from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, Enum, String
from sqlalchemy.orm import Mapped, mapped_column, validates

from cris_api.core.exceptions import IdentityValidationError
from cris_api.core.security import is_password_hash
from cris_api.models.base import Base, TimestampMixin, UUIDMixin

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 30


class UserRole(enum.StrEnum):
    """Roles an identity can hold."""

    ADMIN = "admin"
    STAFF = "staff"
    CLIENT = "client"


class User(Base, UUIDMixin, TimestampMixin):
    """An account that can log in to the system.

    ``hashed_password`` only ever holds output of the hashing pipeline; use
    :func:`cris_api.services.auth_service.set_credential` to change it.
    """

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(USERNAME_MAX_LENGTH), unique=True, nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        Enum(
            UserRole,
            name="user_role",
            native_enum=False,
            create_constraint=True,
            length=20,
            values_callable=lambda roles: [r.value for r in roles],
        ),
        nullable=False,
        default=UserRole.CLIENT,
    )
    business_info: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default="true")
    last_login_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    @validates("username")
    def _validate_username(self, _key: str, value: str) -> str:
        value = (value or "").strip()
        if not USERNAME_MIN_LENGTH <= len(value) <= USERNAME_MAX_LENGTH:
            msg = f"Username must be between {USERNAME_MIN_LENGTH} and {USERNAME_MAX_LENGTH} characters"
            raise IdentityValidationError(msg)
        return value

    @validates("email")
    def _validate_email(self, _key: str, value: str) -> str:
        value = (value or "").strip().lower()
        if "@" not in value:
            msg = "Email is required"
            raise IdentityValidationError(msg)
        return value

    @validates("hashed_password")
    def _validate_hashed_password(self, _key: str, value: str) -> str:
        if not is_password_hash(value):
            msg = "Credential must be a password hash, not an empty or plaintext value"
            raise IdentityValidationError(msg)
        return value

    @validates("role")
    def _validate_role(self, _key: str, value: str | UserRole) -> UserRole:
        try:
            return UserRole(value)
        except ValueError as e:
            allowed = ", ".join(r.value for r in UserRole)
            msg = f"Invalid role {value!r}; expected one of: {allowed}"
            raise IdentityValidationError(msg) from e

    def __repr__(self) -> str:
        return f"<User {self.username} ({self.role})>"
