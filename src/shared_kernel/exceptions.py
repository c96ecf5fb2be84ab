"""
Shared Kernel Exception Hierarchy.

Closed set of domain-level failure kinds. Domain errors are expected,
business-meaningful failures; everything else is treated as unexpected by
the presentation layer. Nothing here logs: failures are recorded once, where
they are translated into an HTTP response.
"""
from __future__ import annotations
from enum import Enum
from typing import Any
from pydantic import BaseModel, ConfigDict


class ErrorKind(str, Enum):
    """Tag identifying each domain error kind."""
    DOMAIN = "domain"
    BUSINESS_RULE = "business_rule"
    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    INVALID_OPERATION = "invalid_operation"
    FAILED_TO_SAVE = "failed_to_save"
    FAILED_TO_UPDATE = "failed_to_update"
    VALIDATION = "validation"


class ValidationError(BaseModel):
    """
    A single failed constraint.

    Used by the domain to describe multi-field validation failures and by the
    presentation layer when flattening them into error details.
    """
    field: str | None = None
    message: str
    model_config = ConfigDict(frozen=True)


class EntityIdFormatError(ValueError):
    """Raised when an identifier string is blank or not a canonical UUID."""


class DomainError(Exception):
    """Base exception for all domain-specific failures."""
    kind: ErrorKind = ErrorKind.DOMAIN

    def __init__(self, message: str, *, cause: BaseException | None = None,
                 details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.details = details or {}
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return self.message


class BusinessRuleViolationError(DomainError):
    kind = ErrorKind.BUSINESS_RULE

    def __init__(self, message: str, rule_name: str | None = None, **kwargs: Any) -> None:
        details = kwargs.pop("details", {})
        if rule_name:
            details["rule"] = rule_name
        super().__init__(message, details=details, **kwargs)
        self.rule_name = rule_name


class EntityNotFoundError(DomainError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, entity_type: str, entity_id: Any, **kwargs: Any) -> None:
        message = f"{entity_type} with ID '{entity_id}' was not found"
        details = kwargs.pop("details", {})
        details.update({"entity_type": entity_type, "entity_id": str(entity_id)})
        super().__init__(message, details=details, **kwargs)
        self.entity_type, self.entity_id = entity_type, entity_id


class EntityAlreadyExistsError(DomainError):
    kind = ErrorKind.ALREADY_EXISTS

    def __init__(self, entity_type: str, identifier: Any,
                 identifier_name: str | None = None, **kwargs: Any) -> None:
        message = (f"{entity_type} with identifier: {identifier_name or 'ID'} "
                   f"'{identifier}' already exists")
        details = kwargs.pop("details", {})
        details.update({"entity_type": entity_type, "identifier": str(identifier)})
        if identifier_name:
            details["identifier_name"] = identifier_name
        super().__init__(message, details=details, **kwargs)
        self.entity_type, self.identifier = entity_type, identifier
        self.identifier_name = identifier_name


class InvalidOperationError(DomainError):
    kind = ErrorKind.INVALID_OPERATION


class FailedToSaveEntityError(DomainError):
    kind = ErrorKind.FAILED_TO_SAVE

    def __init__(self, entity_type: str, entity_id: Any, **kwargs: Any) -> None:
        super().__init__(f"Failed to save {entity_type} with ID '{entity_id}'", **kwargs)
        self.entity_type, self.entity_id = entity_type, entity_id


class FailedToUpdateEntityError(DomainError):
    kind = ErrorKind.FAILED_TO_UPDATE

    def __init__(self, entity_type: str, entity_id: Any, **kwargs: Any) -> None:
        super().__init__(f"Failed to update {entity_type} with ID '{entity_id}'", **kwargs)
        self.entity_type, self.entity_id = entity_type, entity_id


class ValidationFailedError(DomainError):
    """Carries every failed constraint of a multi-field validation."""
    kind = ErrorKind.VALIDATION

    def __init__(self, errors: list[ValidationError], message: str = "Validation failed",
                 **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.errors = list(errors)
