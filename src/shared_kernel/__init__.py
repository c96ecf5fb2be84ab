"""
Shared Kernel.

Domain-Driven Design building blocks and HTTP presentation utilities shared
by every service.

Modules:
    domain: Identity, entities, aggregates, events, value objects, Result
    exceptions: Domain exception hierarchy and validation errors
    application: Command / query contracts
    infrastructure: Domain event publishing
    presentation: Response envelope, error translation, request timing
"""

from .domain import (
    AggregateEvent,
    AggregateRoot,
    Clock,
    DomainEntityId,
    DomainEvent,
    Failure,
    Model,
    Result,
    Success,
    SystemClock,
    ValueObject,
)
from .exceptions import (
    BusinessRuleViolationError,
    DomainError,
    EntityAlreadyExistsError,
    EntityIdFormatError,
    EntityNotFoundError,
    ErrorKind,
    FailedToSaveEntityError,
    FailedToUpdateEntityError,
    InvalidOperationError,
    ValidationError,
    ValidationFailedError,
)
from .logging_config import configure_logging

__version__ = "1.0.0"

__all__ = [
    "__version__",
    # Domain
    "AggregateEvent",
    "AggregateRoot",
    "Clock",
    "DomainEntityId",
    "DomainEvent",
    "Failure",
    "Model",
    "Result",
    "Success",
    "SystemClock",
    "ValueObject",
    # Exceptions
    "BusinessRuleViolationError",
    "DomainError",
    "EntityAlreadyExistsError",
    "EntityIdFormatError",
    "EntityNotFoundError",
    "ErrorKind",
    "FailedToSaveEntityError",
    "FailedToUpdateEntityError",
    "InvalidOperationError",
    "ValidationError",
    "ValidationFailedError",
    # Logging
    "configure_logging",
]
