"""
Pytest configuration and fixtures for shared kernel testing.
"""

from datetime import datetime, timedelta, timezone

import pytest

from shared_kernel.presentation import PresentationSettings


class FakeClock:
    """Deterministic clock; advances by ``step`` after every read."""

    def __init__(self, start: datetime | None = None, step: timedelta = timedelta(0)) -> None:
        self.current = start or datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
        self.step = step

    def now(self) -> datetime:
        value = self.current
        self.current = self.current + self.step
        return value

    def advance(self, delta: timedelta) -> None:
        self.current = self.current + delta


@pytest.fixture
def clock() -> FakeClock:
    """Frozen clock at 2024-01-15T10:30:00Z."""
    return FakeClock()


@pytest.fixture
def stepping_clock() -> FakeClock:
    """Clock that moves forward one second per read."""
    return FakeClock(step=timedelta(seconds=1))


@pytest.fixture
def settings() -> PresentationSettings:
    """Presentation settings independent of the environment."""
    return PresentationSettings(
        _env_file=None,
        meta_defaults={"version": "v1", "environment": "test"},
    )
