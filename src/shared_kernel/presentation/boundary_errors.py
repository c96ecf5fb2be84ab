"""
Shared Kernel Boundary Errors.

Failures raised by request-handling code that the framework does not model
itself. They are translated like any other failure.
"""
from __future__ import annotations


class MissingRequestParameterError(Exception):
    """A required request parameter was not supplied."""

    def __init__(self, parameter_name: str, parameter_type: str) -> None:
        super().__init__(
            f"Required request parameter '{parameter_name}' of type '{parameter_type}' is not present"
        )
        self.parameter_name = parameter_name
        self.parameter_type = parameter_type


class MessageNotReadableError(Exception):
    """The request body could not be read into the expected shape."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def most_specific_cause(self) -> BaseException:
        """Innermost exception of the cause chain, or this error itself."""
        current: BaseException = self
        seen: set[int] = set()
        while current.__cause__ is not None and id(current) not in seen:
            seen.add(id(current))
            current = current.__cause__
        return current


class ProjectionInstantiationError(Exception):
    """A stored row or result could not be turned into the projection / DTO type."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause
