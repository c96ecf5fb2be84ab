"""
Shared Kernel CQRS Contracts.

Commands express intent to change state; queries read state. Each handler
processes exactly one command or query type.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Generic, TypeVar


class Command(ABC):
    """Marker base for commands."""


class Query(ABC):
    """Marker base for queries; queries never modify state."""


C = TypeVar("C", bound=Command)
Q = TypeVar("Q", bound=Query)
R = TypeVar("R")


class CommandHandler(ABC, Generic[C, R]):
    """Handles a single command type and returns its result."""

    @abstractmethod
    async def __call__(self, command: C) -> R:
        ...


class QueryHandler(ABC, Generic[Q, R]):
    """Handles a single query type and returns the requested data."""

    @abstractmethod
    async def __call__(self, query: Q) -> R:
        ...


class QueryView(str, Enum):
    """Level of detail requested from a query."""
    SUMMARY = "summary"
    DETAILED = "detailed"
    FULL = "full"
