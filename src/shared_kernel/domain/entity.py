"""
Shared Kernel Base Entity Implementation.

Provides identity-based domain entities with:
- Unique identity (UUID-based, immutable)
- Timestamps (created_at, updated_at) taken from an injected clock
- Soft deletion (deleted_at, deleted_by)
- Equality based on identity only
"""

from __future__ import annotations

from abc import ABC
from datetime import datetime
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, model_validator

import structlog

from .clock import Clock, SystemClock, utc_now
from .entity_id import DomainEntityId

logger = structlog.get_logger(__name__)


class Model(BaseModel, ABC):
    """
    Base class for all domain entities.

    Entities are domain objects with a distinct identity that persists
    across state changes. Two entities are considered equal if they
    have the same identity, regardless of their attribute values.

    Lifecycle fields can only change through the protected ``_touch``,
    ``_soft_delete`` and ``_restore`` operations, which subclasses call from
    their business methods. Assigning them from outside raises
    ``AttributeError``.
    """

    id: DomainEntityId = Field(..., description="Unique entity identifier")
    created_at: datetime = Field(default_factory=utc_now, description="Creation timestamp")
    updated_at: datetime = Field(default_factory=utc_now, description="Last update timestamp")
    deleted_at: datetime | None = Field(default=None, description="Soft deletion timestamp")
    deleted_by: DomainEntityId | None = Field(default=None, description="Who soft deleted the entity")

    model_config = ConfigDict(
        validate_assignment=True,
        extra="forbid",
        use_enum_values=True,
    )

    _LIFECYCLE_FIELDS: ClassVar[frozenset[str]] = frozenset(
        {"id", "created_at", "updated_at", "deleted_at", "deleted_by"}
    )
    _clock: Clock = PrivateAttr(default_factory=SystemClock)

    def __init__(self, clock: Clock | None = None, **data: Any) -> None:
        clock = clock or SystemClock()
        if data.get("created_at") is None:
            data["created_at"] = clock.now()
        super().__init__(**data)
        self._clock = clock

    @model_validator(mode="before")
    @classmethod
    def default_updated_at(cls, data: Any) -> Any:
        """Initialise updated_at to created_at when it is not supplied."""
        if isinstance(data, dict) and data.get("updated_at") is None:
            data = dict(data)
            if data.get("created_at") is None:
                data["created_at"] = utc_now()
            data["updated_at"] = data["created_at"]
        return data

    @model_validator(mode="after")
    def validate_lifecycle(self) -> Model:
        """Ensure timestamps and deletion markers are consistent."""
        if self.updated_at < self.created_at:
            raise ValueError("updated_at cannot be before created_at")
        if self.deleted_by is not None and self.deleted_at is None:
            raise ValueError("deleted_by requires deleted_at")
        return self

    def __setattr__(self, name: str, value: Any) -> None:
        if name in self._LIFECYCLE_FIELDS:
            raise AttributeError(f"'{name}' can only be changed through lifecycle operations")
        super().__setattr__(name, value)

    @classmethod
    def get_entity_type(cls) -> str:
        """Return the entity type name."""
        return cls.__name__

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def _touch(self) -> None:
        """
        Move updated_at to the current time.

        Called whenever mutable state changes. Never moves updated_at before
        created_at, even if the clock is behind.
        """
        now = self._clock.now()
        object.__setattr__(self, "updated_at", max(now, self.created_at))

    def _soft_delete(self, by: DomainEntityId) -> None:
        """Mark the entity as deleted without removing it."""
        object.__setattr__(self, "deleted_at", self._clock.now())
        object.__setattr__(self, "deleted_by", by)
        self._touch()
        logger.debug("entity_soft_deleted", entity_type=self.get_entity_type(),
                     entity_id=str(self.id), deleted_by=str(by))

    def _restore(self) -> None:
        """Clear the soft deletion markers."""
        object.__setattr__(self, "deleted_at", None)
        object.__setattr__(self, "deleted_by", None)
        self._touch()
        logger.debug("entity_restored", entity_type=self.get_entity_type(),
                     entity_id=str(self.id))

    def __eq__(self, other: object) -> bool:
        """
        Entities are equal if they have the same ID.

        This follows DDD principles where entity identity determines equality,
        not attribute values.
        """
        if self is other:
            return True
        if not isinstance(other, Model):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        """Hash based on identity for use in sets and dicts."""
        return hash(self.id)

    def __repr__(self) -> str:
        return f"{self.get_entity_type()}(id={self.id})"

    __str__ = __repr__
