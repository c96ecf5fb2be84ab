"""
Shared Kernel Result Type.

Represents the outcome of an operation that can either succeed or fail,
so expected failures travel as values instead of exceptions inside the
domain and application layers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

T = TypeVar("T")
R = TypeVar("R")


class Result(ABC, Generic[T]):
    """Either ``Success(value)`` or ``Failure(message, cause)``."""

    @abstractmethod
    def is_success(self) -> bool:
        ...

    def is_failure(self) -> bool:
        return not self.is_success()

    @abstractmethod
    def get_or_none(self) -> T | None:
        """Return the value if successful, ``None`` otherwise."""

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        """Return the value if successful, or ``default`` if failed."""

    @abstractmethod
    def map(self, transform: Callable[[T], R]) -> Result[R]:
        """Transform the success value; failures pass through unchanged."""

    @abstractmethod
    def flat_map(self, transform: Callable[[T], Result[R]]) -> Result[R]:
        """Chain a Result-returning transform; failures pass through unchanged."""

    @staticmethod
    def success(value: T) -> Result[T]:
        return Success(value)

    @staticmethod
    def failure(message: str, cause: BaseException | None = None) -> Result[T]:
        return Failure(message, cause)

    @staticmethod
    def of(operation: Callable[[], T]) -> Result[T]:
        """
        Run a potentially raising operation and capture its outcome.

        Any ``Exception`` becomes a ``Failure`` carrying the exception message
        and the exception itself as cause.
        """
        try:
            return Success(operation())
        except Exception as e:
            return Failure(str(e) or "Unknown error", e)


@dataclass(frozen=True)
class Success(Result[T]):
    value: T

    def is_success(self) -> bool:
        return True

    def get_or_none(self) -> T | None:
        return self.value

    def get_or_else(self, default: T) -> T:
        return self.value

    def map(self, transform: Callable[[T], R]) -> Result[R]:
        return Success(transform(self.value))

    def flat_map(self, transform: Callable[[T], Result[R]]) -> Result[R]:
        return transform(self.value)


@dataclass(frozen=True)
class Failure(Result[T]):
    message: str
    cause: BaseException | None = None

    def is_success(self) -> bool:
        return False

    def get_or_none(self) -> T | None:
        return None

    def get_or_else(self, default: T) -> T:
        return default

    def map(self, transform: Callable[[T], R]) -> Result[R]:
        return self  # type: ignore[return-value]

    def flat_map(self, transform: Callable[[T], Result[R]]) -> Result[R]:
        return self  # type: ignore[return-value]
