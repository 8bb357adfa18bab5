"""Domain error taxonomy for identity and maintenance workflows.

Services raise these; CLI commands and the HTTP layer translate them at the
edge into exit codes or responses.
"""


class CrisAdminError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(CrisAdminError):
    """Required configuration is missing or invalid."""


class StoreConnectionError(CrisAdminError, ConnectionError):
    """The database could not be reached."""


class IdentityValidationError(CrisAdminError, ValueError):
    """An identity record violates a shape rule."""


class DuplicateIdentityError(IdentityValidationError):
    """The username or email already belongs to another identity record."""


class HashingError(CrisAdminError):
    """The password hashing backend failed."""


class SeedError(CrisAdminError):
    """Demo seeding aborted on a specific record.

    Attributes:
        username: The demo username whose persistence failed, or None when
            the wipe step itself failed and no record was attempted.
        created: Usernames already committed before the failure.
        deleted: Number of identity records removed by the wipe step.
    """

    def __init__(self, username: str | None, created: list[str], deleted: int, reason: str) -> None:
        self.username = username
        self.created = list(created)
        self.deleted = deleted
        self.reason = reason
        if username is None:
            super().__init__(f"Failed to clear existing users: {reason}")
        else:
            super().__init__(f"Failed to seed user '{username}': {reason}")

    @property
    def wiped(self) -> bool:
        """True when the wipe step completed before the failure."""
        return self.username is not None

    @property
    def partial(self) -> bool:
        """True when some demo users were committed before the failure."""
        return bool(self.created)


class PurgeFailure(CrisAdminError):
    """Every collection failed to purge.

    Attributes:
        failed: Mapping of collection name to error message.
    """

    def __init__(self, failed: dict[str, str], message: str | None = None) -> None:
        self.failed = dict(failed)
        names = ", ".join(sorted(self.failed))
        super().__init__(message or f"Purge failed for all collections: {names}")


class PartialPurgeFailure(PurgeFailure):
    """Some, but not all, collections failed to purge."""

    def __init__(self, failed: dict[str, str], succeeded: list[str]) -> None:
        self.succeeded = list(succeeded)
        names = ", ".join(sorted(failed))
        super().__init__(failed, f"Purge partially failed; failed collections: {names}")
