"""
Shared Kernel Clock Abstraction.

Every timestamp in the kernel comes from an injected clock so that
construction stays deterministic under test and no "now" value is ever
captured at import time.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    """Source of the current instant."""

    def now(self) -> datetime:
        """Return the current time as a timezone-aware datetime."""
        ...


class SystemClock:
    """Clock backed by the system wall clock, always in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def __repr__(self) -> str:
        return "SystemClock()"


def utc_now() -> datetime:
    """Current UTC time; used as a pydantic ``default_factory``."""
    return datetime.now(timezone.utc)
