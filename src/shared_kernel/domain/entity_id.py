"""
Shared Kernel Entity Identifier.

Strongly-typed, UUID-backed identity shared by every entity, aggregate and
domain event. Serializes as its canonical string form.
"""

from __future__ import annotations

import re
import uuid
from typing import Any

from pydantic import ConfigDict, RootModel, field_validator

from ..exceptions import EntityIdFormatError

_CANONICAL_UUID = re.compile(
    r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"
)


def parse_uuid(value: str) -> uuid.UUID:
    """
    Parse the canonical 8-4-4-4-12 representation of a UUID.

    Raises:
        EntityIdFormatError: when the string is blank or not canonical.
    """
    if not value.strip():
        raise EntityIdFormatError("UUID string cannot be empty")
    if not _CANONICAL_UUID.fullmatch(value):
        raise EntityIdFormatError(f"Invalid UUID string: '{value}'")
    return uuid.UUID(value)


class DomainEntityId(RootModel[uuid.UUID]):
    """
    Opaque identifier wrapping a 128-bit UUID.

    Equality and hashing are defined by the underlying UUID only.
    Immutable after creation.
    """

    root: uuid.UUID

    model_config = ConfigDict(frozen=True)

    @field_validator("root", mode="before")
    @classmethod
    def validate_root(cls, v: Any) -> uuid.UUID:
        """Accept UUIDs, other identifiers, or canonical strings."""
        if isinstance(v, uuid.UUID):
            return v
        if isinstance(v, DomainEntityId):
            return v.root
        if isinstance(v, str):
            return parse_uuid(v)
        raise EntityIdFormatError(
            f"Entity ID must be a UUID or string, got {type(v).__name__}"
        )

    @classmethod
    def random(cls) -> DomainEntityId:
        """Generate a new random (UUID4) identifier."""
        return cls(uuid.uuid4())

    @classmethod
    def from_string(cls, value: str) -> DomainEntityId:
        """
        Parse an identifier from its canonical string form.

        Raises:
            EntityIdFormatError: on blank or malformed input.
        """
        return cls(parse_uuid(value))

    @property
    def value(self) -> uuid.UUID:
        return self.root

    def __str__(self) -> str:
        return str(self.root)

    def __repr__(self) -> str:
        return f"DomainEntityId('{self.root}')"

    def __hash__(self) -> int:
        return hash(self.root)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, DomainEntityId):
            return self.root == other.root
        return False
