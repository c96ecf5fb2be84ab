"""
Shared Kernel Aggregate Root Implementation.

Provides aggregate roots with domain event support for:
- Transactional consistency boundaries
- Domain event collection until hand-off to a publisher
"""

from __future__ import annotations

from abc import ABC

from pydantic import ConfigDict, PrivateAttr

import structlog

from .entity import Model
from .events import DomainEvent

logger = structlog.get_logger(__name__)


class AggregateRoot(Model, ABC):
    """
    Base class for aggregate roots.

    Aggregate roots are the primary entry points for domain operations.
    They:
    - Define consistency boundaries
    - Collect domain events for later dispatch

    Domain events are buffered internally, in insertion order and without
    duplicate ``event_id`` values. The aggregate never clears the buffer on
    its own: the caller reads ``get_domain_events()`` and then calls
    ``clear_domain_events()`` once the events have been handed to a
    publisher (typically after the aggregate was persisted).

    Not safe for concurrent mutation; one writer per instance.
    """

    _domain_events: list[DomainEvent] = PrivateAttr(default_factory=list)

    model_config = ConfigDict(
        validate_assignment=True,
        extra="forbid",
        use_enum_values=True,
    )

    @classmethod
    def aggregate_type(cls) -> str:
        """Type tag stamped on events raised by this aggregate."""
        return cls.get_entity_type()

    def _add_domain_event(self, event: DomainEvent) -> None:
        """
        Record a domain event to be dispatched after persistence.

        Adding an event whose ``event_id`` is already buffered is a no-op.
        """
        if any(pending.event_id == event.event_id for pending in self._domain_events):
            return
        self._domain_events.append(event)
        logger.debug(
            "domain_event_added",
            event_type=event.event_type,
            event_id=str(event.event_id),
            aggregate_id=str(self.id),
            aggregate_type=self.aggregate_type(),
        )

    def _remove_domain_event(self, event: DomainEvent) -> None:
        """Drop a buffered event with the same ``event_id``, if any."""
        self._domain_events[:] = [
            pending for pending in self._domain_events if pending.event_id != event.event_id
        ]

    def get_domain_events(self) -> tuple[DomainEvent, ...]:
        """Immutable snapshot of the pending events, oldest first."""
        return tuple(self._domain_events)

    def has_pending_events(self) -> bool:
        """Check if there are pending events to dispatch."""
        return len(self._domain_events) > 0

    def clear_domain_events(self) -> None:
        """Forget all pending events once they have been handed off."""
        self._domain_events.clear()
