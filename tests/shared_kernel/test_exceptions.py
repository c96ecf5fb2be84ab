"""
Unit tests for Shared Kernel Exceptions.
"""

import pytest

from shared_kernel.exceptions import (
    BusinessRuleViolationError,
    DomainError,
    EntityAlreadyExistsError,
    EntityNotFoundError,
    ErrorKind,
    FailedToSaveEntityError,
    FailedToUpdateEntityError,
    InvalidOperationError,
    ValidationError,
    ValidationFailedError,
)


class TestDomainError:
    """Tests for DomainError and its kinds."""

    def test_message_and_cause(self) -> None:
        """Test message is the string form and cause is chained."""
        cause = KeyError("missing")
        error = DomainError("Something failed", cause=cause)

        assert str(error) == "Something failed"
        assert error.cause is cause
        assert error.__cause__ is cause
        assert error.kind == ErrorKind.DOMAIN

    def test_entity_not_found_message(self) -> None:
        """Test not-found message format."""
        error = EntityNotFoundError("User", "123")
        assert str(error) == "User with ID '123' was not found"
        assert error.kind == ErrorKind.NOT_FOUND
        assert error.details == {"entity_type": "User", "entity_id": "123"}

    def test_entity_already_exists_default_identifier(self) -> None:
        """Test already-exists message without an identifier name."""
        error = EntityAlreadyExistsError("User", "123")
        assert str(error) == "User with identifier: ID '123' already exists"
        assert error.kind == ErrorKind.ALREADY_EXISTS

    def test_entity_already_exists_named_identifier(self) -> None:
        """Test already-exists message naming the identifier."""
        error = EntityAlreadyExistsError("User", "a@b.co", identifier_name="email")
        assert str(error) == "User with identifier: email 'a@b.co' already exists"

    def test_persistence_failures(self) -> None:
        """Test save and update failure messages."""
        assert str(FailedToSaveEntityError("Order", 7)) == "Failed to save Order with ID '7'"
        assert str(FailedToUpdateEntityError("Order", 7)) == "Failed to update Order with ID '7'"
        assert FailedToSaveEntityError("Order", 7).kind == ErrorKind.FAILED_TO_SAVE
        assert FailedToUpdateEntityError("Order", 7).kind == ErrorKind.FAILED_TO_UPDATE

    def test_business_rule_records_rule(self) -> None:
        """Test rule name lands in details."""
        error = BusinessRuleViolationError("Too many sessions", rule_name="max_sessions")
        assert error.details["rule"] == "max_sessions"
        assert error.kind == ErrorKind.BUSINESS_RULE

    def test_validation_failed_keeps_errors(self) -> None:
        """Test validation errors are carried in order."""
        errors = [ValidationError(field="name", message="must not be blank"),
                  ValidationError(message="global issue")]
        error = ValidationFailedError(errors)

        assert error.errors == errors
        assert str(error) == "Validation failed"
        assert error.kind == ErrorKind.VALIDATION

    @pytest.mark.parametrize(
        "error",
        [
            InvalidOperationError("nope"),
            BusinessRuleViolationError("rule"),
            EntityNotFoundError("User", "1"),
            ValidationFailedError([]),
        ],
    )
    def test_all_kinds_are_domain_errors(self, error: Exception) -> None:
        """Test the hierarchy shares a single base."""
        assert isinstance(error, DomainError)

    def test_validation_error_is_immutable(self) -> None:
        """Test single validation errors are frozen values."""
        error = ValidationError(field="email", message="invalid")
        with pytest.raises(Exception):
            error.message = "changed"  # type: ignore[misc]
        assert error == ValidationError(field="email", message="invalid")
