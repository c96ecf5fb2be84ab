"""
Shared Kernel Domain Service Marker and Query Hints.
"""

from __future__ import annotations

from abc import ABC
from enum import Enum


class DomainService(ABC):
    """
    Marker base for stateless domain services.

    Domain services hold domain logic that spans several aggregates and does
    not belong to any single one of them.
    """


class SortDirection(str, Enum):
    """Ordering hint for queries."""
    ASC = "asc"
    DESC = "desc"
