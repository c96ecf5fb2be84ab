"""Shared Kernel Infrastructure Module."""

from .event_publisher import (
    EventPublisher,
    EventPublishingError,
    InMemoryEventPublisher,
    dispatch_pending_events,
)

__all__ = [
    "EventPublisher",
    "EventPublishingError",
    "InMemoryEventPublisher",
    "dispatch_pending_events",
]
