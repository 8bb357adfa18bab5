"""Tests for the error taxonomy."""

from cris_api.core.exceptions import (
    CrisAdminError,
    DuplicateIdentityError,
    IdentityValidationError,
    PartialPurgeFailure,
    PurgeFailure,
    SeedError,
    StoreConnectionError,
)


class TestErrorHierarchy:
    def test_store_connection_error_is_connection_error(self) -> None:
        assert issubclass(StoreConnectionError, ConnectionError)
        assert issubclass(StoreConnectionError, CrisAdminError)

    def test_identity_validation_error_is_value_error(self) -> None:
        assert issubclass(IdentityValidationError, ValueError)

    def test_duplicate_identity_error_is_identity_validation_error(self) -> None:
        assert issubclass(DuplicateIdentityError, IdentityValidationError)

    def test_partial_purge_failure_is_purge_failure(self) -> None:
        assert issubclass(PartialPurgeFailure, PurgeFailure)


class TestSeedError:
    def test_partial_when_some_created(self) -> None:
        err = SeedError("demo", ["admin", "staff"], deleted=3, reason="duplicate")
        assert err.partial
        assert err.username == "demo"
        assert "demo" in str(err)
        assert err.wiped

    def test_not_partial_when_nothing_created(self) -> None:
        assert not SeedError("admin", [], deleted=0, reason="boom").partial

    def test_wipe_failure(self) -> None:
        err = SeedError(None, [], deleted=0, reason="no such table: users")
        assert not err.wiped
        assert not err.partial
        assert str(err) == "Failed to clear existing users: no such table: users"


class TestPurgeFailures:
    def test_partial_message_names_failed_collections(self) -> None:
        err = PartialPurgeFailure({"orders": "locked"}, succeeded=["users"])
        assert err.failed == {"orders": "locked"}
        assert err.succeeded == ["users"]
        assert "orders" in str(err)

    def test_total_failure_message(self) -> None:
        err = PurgeFailure({"users": "x", "orders": "y"})
        assert "orders, users" in str(err)
