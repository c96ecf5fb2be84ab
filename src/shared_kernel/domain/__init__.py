"""
Shared Kernel Domain Module.

Provides Domain-Driven Design building blocks:
- DomainEntityId: UUID-backed identity
- Model: Identity-based entities with lifecycle timestamps and soft deletion
- AggregateRoot: Consistency boundaries buffering domain events
- ValueObject: Immutable value objects
- Result: Success/failure values for fallible operations
"""

from .aggregate import AggregateRoot
from .clock import Clock, SystemClock
from .entity import Model
from .entity_id import DomainEntityId
from .events import AggregateEvent, DomainEvent
from .result import Failure, Result, Success
from .service import DomainService, SortDirection
from .value_object import (
    Address,
    Email,
    Phone,
    SingleValueObject,
    Url,
    ValueObject,
)

__all__ = [
    # Identity & entity
    "Clock",
    "SystemClock",
    "DomainEntityId",
    "Model",
    # Aggregate & events
    "AggregateRoot",
    "DomainEvent",
    "AggregateEvent",
    # Result
    "Result",
    "Success",
    "Failure",
    # Value Objects
    "ValueObject",
    "SingleValueObject",
    "Email",
    "Phone",
    "Url",
    "Address",
    # Services
    "DomainService",
    "SortDirection",
]
