"""
Shared Kernel Event Publisher Contract.

The aggregate's ``get_domain_events()`` / ``clear_domain_events()`` pair is
the only hand-off point to a publisher. Delivery guarantees beyond that
(outbox, retries, exactly-once) belong to the publisher implementation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

import structlog

from ..domain.aggregate import AggregateRoot
from ..domain.events import DomainEvent

logger = structlog.get_logger(__name__)


class EventPublishingError(RuntimeError):
    """Raised when serialization or persistence of an event fails."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause


class EventPublisher(ABC):
    """
    Abstract interface for publishing domain events.

    Implementations raise ``EventPublishingError`` when an event cannot be
    serialized or persisted.
    """

    @abstractmethod
    async def publish(self, events: Sequence[DomainEvent]) -> None:
        """Publish a batch of events, in order."""
        pass

    @abstractmethod
    async def publish_one(self, event: DomainEvent) -> None:
        """Publish a single event."""
        pass


class InMemoryEventPublisher(EventPublisher):
    """
    In-memory publisher for testing.

    Not for production use - events are lost on restart.
    """

    def __init__(self) -> None:
        self._published: list[dict] = []

    async def publish(self, events: Sequence[DomainEvent]) -> None:
        for event in events:
            await self.publish_one(event)

    async def publish_one(self, event: DomainEvent) -> None:
        try:
            payload = event.to_dict()
        except (TypeError, ValueError) as e:
            raise EventPublishingError(
                f"Failed to serialize event {event.event_type} '{event.event_id}'", cause=e
            ) from e
        self._published.append(payload)

    @property
    def published(self) -> list[dict]:
        """Serialized events in publication order."""
        return list(self._published)

    def clear(self) -> None:
        """Clear all published events (for testing)."""
        self._published.clear()


async def dispatch_pending_events(aggregate: AggregateRoot, publisher: EventPublisher) -> int:
    """
    Hand the aggregate's pending events to ``publisher`` and clear them.

    The buffer is cleared only after the publisher returns; if publishing
    raises, the events stay pending and the error propagates.

    Returns:
        Number of events published.
    """
    if not aggregate.has_pending_events():
        return 0
    events = aggregate.get_domain_events()
    await publisher.publish(events)
    aggregate.clear_domain_events()
    logger.info(
        "domain_events_dispatched",
        aggregate_type=aggregate.aggregate_type(),
        aggregate_id=str(aggregate.id),
        count=len(events),
    )
    return len(events)
