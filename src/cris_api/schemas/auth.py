"""Identity Pydantic v2 schemas.

Defines request/response schemas for user creation, profile updates, and
user listings.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from cris_api.models.user import USERNAME_MAX_LENGTH, USERNAME_MIN_LENGTH, UserRole

PASSWORD_MIN_LENGTH = 6


class BusinessInfo(BaseModel):
    """Descriptive business contact details attached to an identity."""

    business_name: str | None = None
    contact_person: str | None = None
    phone: str | None = None
    address: str | None = None

    @field_validator("*")
    @classmethod
    def strip_text(cls, v: str | None) -> str | None:
        return v.strip() if isinstance(v, str) else v


class UserCreateRequest(BaseModel):
    """Request to create a new user."""

    username: str = Field(min_length=USERNAME_MIN_LENGTH, max_length=USERNAME_MAX_LENGTH)
    email: EmailStr
    password: str = Field(min_length=PASSWORD_MIN_LENGTH)
    role: UserRole = UserRole.CLIENT
    business_info: BusinessInfo | None = None
    is_active: bool = True

    @field_validator("username", mode="before")
    @classmethod
    def strip_username(cls, v: object) -> object:
        return v.strip() if isinstance(v, str) else v

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.lower()


class UserUpdateRequest(BaseModel):
    """Request to partially update an existing user (all fields optional).

    Passwords are changed separately so a profile update never re-hashes.
    """

    email: EmailStr | None = None
    role: UserRole | None = None
    business_info: BusinessInfo | None = None
    is_active: bool | None = None


class UserResponse(BaseModel):
    """User information response; never includes the credential hash."""

    id: UUID
    username: str
    email: str
    role: UserRole
    business_info: BusinessInfo | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime
    last_login_at: datetime | None = None

    model_config = {"from_attributes": True}
