"""ORM model registry. Import all models so Alembic autogenerate discovers them."""

from cris_api.models.user import User, UserRole

__all__ = [
    "User",
    "UserRole",
]
