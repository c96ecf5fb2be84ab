"""
Shared Kernel Domain Events.

Domain events represent significant occurrences within an aggregate that
other parts of the system may need to react to. They are immutable once
created and are queued on the aggregate until an external publisher picks
them up.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

from .clock import utc_now
from .entity_id import DomainEntityId

if TYPE_CHECKING:
    from .aggregate import AggregateRoot


class DomainEvent(BaseModel):
    """
    Base class for all domain events.

    ``event_id`` is the identity used for de-duplication on the aggregate;
    two structurally identical events with different ids are distinct.
    """

    event_id: DomainEntityId = Field(default_factory=DomainEntityId.random)
    aggregate_id: DomainEntityId = Field(..., description="ID of aggregate that raised event")
    aggregate_type: str = Field(..., description="Type of aggregate")
    event_type: str = Field(..., description="Event type identifier")
    occurred_on: datetime = Field(default_factory=utc_now)

    model_config = ConfigDict(frozen=True, extra="forbid")

    @classmethod
    def type_name(cls, default: str = "Event") -> str:
        """Class name with the ``Event`` suffix removed, or ``default`` if nothing is left."""
        return cls.__name__.removesuffix("Event") or default

    def to_dict(self) -> dict[str, Any]:
        """Serialize event to a JSON-compatible dictionary for publishing."""
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DomainEvent:
        """Deserialize event from dictionary."""
        return cls.model_validate(data)


class AggregateEvent(DomainEvent):
    """
    Base class for aggregate-specific events.

    Provides factory method for creating events with aggregate context.
    """

    @classmethod
    def create(
        cls,
        aggregate: AggregateRoot,
        event_type: str | None = None,
        **kwargs: Any,
    ) -> AggregateEvent:
        """Create event with aggregate context."""
        return cls(
            aggregate_id=aggregate.id,
            aggregate_type=aggregate.aggregate_type(),
            event_type=event_type or cls.type_name(),
            **kwargs,
        )
