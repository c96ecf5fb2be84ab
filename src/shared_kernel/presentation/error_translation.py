"""
Shared Kernel Error Translation Pipeline.

Turns whatever failure reached the HTTP boundary into exactly one envelope:

1. ``classify`` maps the exception onto a closed set of ``FailureKind``s,
   most specific first.
2. ``ErrorTranslator`` looks the kind up in an explicit table and produces
   an ``ErrorOutcome`` (status, message, code, details). Unknown kinds fall
   through to the unexpected-error arm.
3. The outcome is logged once, here, and rendered with ``EnvelopeFactory``.

Strings are carried into ``message`` and ``details`` as-is. No HTML escaping
is applied; consumers rendering these values into HTML must escape them.
"""
from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from enum import Enum
from http import HTTPStatus
from typing import Any, Callable, Iterable, Mapping, Sequence, cast

from fastapi.exceptions import RequestValidationError, ResponseValidationError
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError, NoResultFound
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request
from starlette.responses import JSONResponse
import structlog

from ..domain.clock import Clock, SystemClock
from ..exceptions import (
    DomainError,
    ErrorKind,
    ValidationError,
    ValidationFailedError,
)
from .api_response import ApiResponse
from .boundary_errors import (
    MessageNotReadableError,
    MissingRequestParameterError,
    ProjectionInstantiationError,
)
from .envelope import EnvelopeFactory, reason_phrase
from .request_context import RequestInfo

logger = structlog.get_logger(__name__)

VALIDATION_FAILED = "VALIDATION_FAILED"
CONSTRAINT_VIOLATION = "CONSTRAINT_VIOLATION"
MISSING_REQUEST_PARAMETER = "MISSING_REQUEST_PARAMETER"

_FIELD_BEFORE_PAREN = re.compile(r"\b(\w+)(?=\s*\()")
_PARAMETER_LOCATIONS = frozenset({"query", "header", "cookie", "path"})
_REQUEST_LOCATIONS = _PARAMETER_LOCATIONS | {"body"}


class FailureKind(str, Enum):
    """Every failure the boundary knows how to report."""
    ILLEGAL_ARGUMENT = "illegal_argument"
    UNREADABLE_BODY = "unreadable_body"
    REQUEST_VALIDATION = "request_validation"
    CONSTRAINT_VIOLATION = "constraint_violation"
    MISSING_PARAMETER = "missing_parameter"
    ENTITY_NOT_FOUND = "entity_not_found"
    ENTITY_ALREADY_EXISTS = "entity_already_exists"
    INTEGRITY_CONFLICT = "integrity_conflict"
    PROJECTION_FAILURE = "projection_failure"
    DOMAIN_VALIDATION = "domain_validation"
    DOMAIN = "domain"
    ILLEGAL_STATE = "illegal_state"
    PERSISTENCE_FAILURE = "persistence_failure"
    NO_SUCH_ELEMENT = "no_such_element"
    HTTP_ERROR = "http_error"
    UNEXPECTED = "unexpected"


# Storage and unknown failures keep their traceback whatever the status.
_LOGGED_WITH_CAUSE = frozenset({FailureKind.INTEGRITY_CONFLICT, FailureKind.UNEXPECTED})

_DOMAIN_KINDS: dict[ErrorKind, FailureKind] = {
    ErrorKind.NOT_FOUND: FailureKind.ENTITY_NOT_FOUND,
    ErrorKind.ALREADY_EXISTS: FailureKind.ENTITY_ALREADY_EXISTS,
    ErrorKind.FAILED_TO_SAVE: FailureKind.PERSISTENCE_FAILURE,
    ErrorKind.FAILED_TO_UPDATE: FailureKind.PERSISTENCE_FAILURE,
    ErrorKind.VALIDATION: FailureKind.DOMAIN_VALIDATION,
}


@dataclass(frozen=True)
class ErrorOutcome:
    """What the client sees for one failure."""
    status: int
    message: str | None
    code: str | None = None
    details: dict[str, str | None] | None = None
    headers: dict[str, str] | None = field(default=None, compare=False)


def _first_missing_parameter(errors: Sequence[Mapping[str, Any]]) -> tuple[str, str] | None:
    """(location, name) when the first request error is a missing parameter."""
    if not errors:
        return None
    first = errors[0]
    loc = tuple(first.get("loc") or ())
    if first.get("type") == "missing" and len(loc) >= 2 and loc[0] in _PARAMETER_LOCATIONS:
        return str(loc[0]), str(loc[1])
    return None


def classify(exc: BaseException) -> FailureKind:
    """Map an exception onto its ``FailureKind``, most specific type first."""
    if isinstance(exc, DomainError):
        return _DOMAIN_KINDS.get(exc.kind, FailureKind.DOMAIN)
    if isinstance(exc, RequestValidationError):
        errors = exc.errors()
        if any(error.get("type") == "json_invalid" for error in errors):
            return FailureKind.UNREADABLE_BODY
        if _first_missing_parameter(errors) is not None:
            return FailureKind.MISSING_PARAMETER
        return FailureKind.REQUEST_VALIDATION
    if isinstance(exc, MissingRequestParameterError):
        return FailureKind.MISSING_PARAMETER
    if isinstance(exc, (MessageNotReadableError, json.JSONDecodeError)):
        return FailureKind.UNREADABLE_BODY
    if isinstance(exc, (ResponseValidationError, ProjectionInstantiationError)):
        return FailureKind.PROJECTION_FAILURE
    if isinstance(exc, PydanticValidationError):
        return FailureKind.CONSTRAINT_VIOLATION
    if isinstance(exc, IntegrityError):
        return FailureKind.INTEGRITY_CONFLICT
    if isinstance(exc, NoResultFound):
        return FailureKind.NO_SUCH_ELEMENT
    if isinstance(exc, StarletteHTTPException):
        return FailureKind.HTTP_ERROR
    if isinstance(exc, ValueError):
        return FailureKind.ILLEGAL_ARGUMENT
    if isinstance(exc, (LookupError, StopIteration)):
        return FailureKind.NO_SUCH_ELEMENT
    if isinstance(exc, RuntimeError) and not isinstance(exc, (NotImplementedError, RecursionError)):
        return FailureKind.ILLEGAL_STATE
    return FailureKind.UNEXPECTED


def flatten_validation_errors(errors: Sequence[ValidationError]) -> dict[str, str | None]:
    """
    Flatten validation errors into ``details``.

    Keys are ``field.<name>``, or ``error.<index>`` when an error has no
    field; ``totalErrors`` carries the count.
    """
    details: dict[str, str | None] = {}
    for index, error in enumerate(errors):
        name = (error.field or "").strip()
        details[f"field.{name}" if name else f"error.{index}"] = error.message
    details["totalErrors"] = str(len(errors))
    return details


def _loc_to_field(loc: Iterable[Any], strip_location: bool) -> str | None:
    parts = [str(part) for part in loc]
    if strip_location and parts and parts[0] in _REQUEST_LOCATIONS:
        parts = parts[1:]
    return ".".join(parts) or None


def _validation_errors(raw: Sequence[Mapping[str, Any]], strip_location: bool) -> list[ValidationError]:
    return [
        ValidationError(
            field=_loc_to_field(error.get("loc") or (), strip_location),
            message=str(error.get("msg") or "Validation failed"),
        )
        for error in raw
    ]


def _message_of(exc: BaseException) -> str:
    if isinstance(exc, KeyError) and exc.args:
        return str(exc.args[0])
    return str(exc)


def _declared_parameter_type(route: Any, location: str, name: str) -> str:
    """Annotation name of a route parameter, searched through its dependencies."""
    pending = [getattr(route, "dependant", None)]
    while pending:
        dependant = pending.pop()
        if dependant is None:
            continue
        for param in getattr(dependant, f"{location}_params", None) or ():
            if name in (getattr(param, "alias", None), getattr(param, "name", None)):
                annotation = (getattr(getattr(param, "field_info", None), "annotation", None)
                              or getattr(param, "type_", None))
                if annotation is not None:
                    return getattr(annotation, "__name__", str(annotation))
        pending.extend(getattr(dependant, "dependencies", None) or ())
    return "str"


Handler = Callable[[BaseException, RequestInfo, Any], ErrorOutcome]


class ErrorTranslator:
    """
    Total mapping from failures to envelopes.

    Never re-raises: every failure, recognised or not, ends in exactly one
    envelope, and is logged exactly once.
    """

    def __init__(self, envelopes: EnvelopeFactory, clock: Clock | None = None) -> None:
        self._envelopes = envelopes
        self._clock = clock or SystemClock()
        self._handlers: dict[FailureKind, Handler] = {
            FailureKind.ILLEGAL_ARGUMENT: self._illegal_argument,
            FailureKind.UNREADABLE_BODY: self._unreadable_body,
            FailureKind.REQUEST_VALIDATION: self._request_validation,
            FailureKind.CONSTRAINT_VIOLATION: self._constraint_violation,
            FailureKind.MISSING_PARAMETER: self._missing_parameter,
            FailureKind.ENTITY_NOT_FOUND: self._entity_not_found,
            FailureKind.ENTITY_ALREADY_EXISTS: self._entity_already_exists,
            FailureKind.INTEGRITY_CONFLICT: self._integrity_conflict,
            FailureKind.PROJECTION_FAILURE: self._projection_failure,
            FailureKind.DOMAIN_VALIDATION: self._domain_validation,
            FailureKind.DOMAIN: self._domain,
            FailureKind.ILLEGAL_STATE: self._illegal_state,
            FailureKind.PERSISTENCE_FAILURE: self._persistence_failure,
            FailureKind.NO_SUCH_ELEMENT: self._no_such_element,
            FailureKind.HTTP_ERROR: self._http_error,
            FailureKind.UNEXPECTED: self._unexpected,
        }

    def translate(self, exc: BaseException, request: RequestInfo, route: Any = None) -> ErrorOutcome:
        """Compute the outcome for ``exc`` and log it."""
        kind = classify(exc)
        handler = self._handlers.get(kind, self._unexpected)
        outcome = handler(exc, request, route)
        self._log(kind, exc, request, outcome)
        return outcome

    def to_envelope(self, exc: BaseException, request: RequestInfo,
                    route: Any = None) -> tuple[ErrorOutcome, ApiResponse[Any]]:
        outcome = self.translate(exc, request, route)
        envelope = self._envelopes.failure(
            outcome.status, outcome.message, request, code=outcome.code, details=outcome.details
        )
        return outcome, envelope

    def to_response(self, request: Request, exc: BaseException) -> JSONResponse:
        """Render ``exc`` as the JSON envelope response for a Starlette request."""
        outcome, envelope = self.to_envelope(
            exc, RequestInfo.from_request(request), request.scope.get("route")
        )
        return JSONResponse(
            status_code=outcome.status, content=envelope.to_wire(), headers=outcome.headers
        )

    async def handle(self, request: Request, exc: Exception) -> JSONResponse:
        """Exception handler signature expected by FastAPI."""
        return self.to_response(request, exc)

    def _log(self, kind: FailureKind, exc: BaseException, request: RequestInfo,
             outcome: ErrorOutcome) -> None:
        log_data = {
            "failure_kind": kind.value,
            "status_code": outcome.status,
            "error_type": type(exc).__name__,
            "error_message": str(exc),
            "method": request.method,
            "path": request.path,
        }
        if outcome.code:
            log_data["error_code"] = outcome.code
        if kind in _LOGGED_WITH_CAUSE or outcome.status >= 500:
            logger.error("request_failed", exc_info=exc, **log_data)
        else:
            logger.warning("request_failed", **log_data)

    # -- translation table ------------------------------------------------

    def _illegal_argument(self, exc: BaseException, request: RequestInfo, route: Any) -> ErrorOutcome:
        message = str(exc)
        return ErrorOutcome(
            status=HTTPStatus.BAD_REQUEST,
            message=f"Invalid request: {message or 'Invalid argument provided'}",
            details={"errorType": type(exc).__name__, "error": message or "No details available"},
        )

    def _unreadable_body(self, exc: BaseException, request: RequestInfo, route: Any) -> ErrorOutcome:
        root = exc.most_specific_cause() if isinstance(exc, MessageNotReadableError) else exc
        if isinstance(root, ValueError) and not isinstance(root, json.JSONDecodeError):
            message = str(root) or "Invalid request format"
            match = _FIELD_BEFORE_PAREN.search(message)
            if match:
                details = {
                    "field": match.group(1),
                    "error": message,
                    "suggestion": f"Check the provided value for '{match.group(1)}'",
                }
            else:
                details = {
                    "error": message,
                    "suggestion": "Check the request format and required fields",
                }
            return ErrorOutcome(status=HTTPStatus.BAD_REQUEST, message="Invalid request format",
                                details=details)
        return ErrorOutcome(
            status=HTTPStatus.BAD_REQUEST,
            message="Invalid JSON body format",
            details={
                "error": "Request body is not a valid JSON",
                "suggestion": "Ensure the request body is a valid JSON document",
            },
        )

    def _request_validation(self, exc: BaseException, request: RequestInfo, route: Any) -> ErrorOutcome:
        errors = _validation_errors(exc.errors(), strip_location=True)
        return ErrorOutcome(
            status=HTTPStatus.BAD_REQUEST,
            message=f"Validation failed. {len(errors)} error(s).",
            code=VALIDATION_FAILED,
            details=flatten_validation_errors(errors),
        )

    def _constraint_violation(self, exc: BaseException, request: RequestInfo, route: Any) -> ErrorOutcome:
        errors = _validation_errors(exc.errors(), strip_location=False)
        return ErrorOutcome(
            status=HTTPStatus.BAD_REQUEST,
            message=f"Validation failed. {len(errors)} constraint(s) violated.",
            code=CONSTRAINT_VIOLATION,
            details=flatten_validation_errors(errors),
        )

    def _missing_parameter(self, exc: BaseException, request: RequestInfo, route: Any) -> ErrorOutcome:
        if isinstance(exc, MissingRequestParameterError):
            name, declared_type = exc.parameter_name, exc.parameter_type
        else:
            location, name = _first_missing_parameter(exc.errors())
            declared_type = _declared_parameter_type(route, location, name)
        return ErrorOutcome(
            status=HTTPStatus.BAD_REQUEST,
            message=f"Missing required request parameter '{name}'",
            code=MISSING_REQUEST_PARAMETER,
            details={
                "parameterName": name,
                "parameterType": declared_type,
                "message": f"Required request parameter '{name}' of type '{declared_type}' is missing",
            },
        )

    def _entity_not_found(self, exc: BaseException, request: RequestInfo, route: Any) -> ErrorOutcome:
        return ErrorOutcome(status=HTTPStatus.NOT_FOUND,
                            message=str(exc) or "The requested resource was not found")

    def _entity_already_exists(self, exc: BaseException, request: RequestInfo, route: Any) -> ErrorOutcome:
        message = str(exc) or "A resource with the same identifier already exists"
        return ErrorOutcome(
            status=HTTPStatus.CONFLICT,
            message=message,
            details={
                "errorType": type(exc).__name__,
                "message": message,
                "suggestion": "Try updating the existing resource or use a different identifier",
            },
        )

    def _integrity_conflict(self, exc: BaseException, request: RequestInfo, route: Any) -> ErrorOutcome:
        # The driver error omits the SQL statement that str(IntegrityError) appends.
        message = str(getattr(exc, "orig", None) or exc)
        return ErrorOutcome(status=HTTPStatus.CONFLICT,
                            message=message or "Duplicate key / data integrity violation")

    def _projection_failure(self, exc: BaseException, request: RequestInfo, route: Any) -> ErrorOutcome:
        if isinstance(exc, ResponseValidationError):
            cause_message = "; ".join(
                f"{'.'.join(str(part) for part in error.get('loc') or ())}: {error.get('msg')}"
                for error in exc.errors()
            )
        else:
            cause_message = str(exc.__cause__ or exc)
        return ErrorOutcome(
            status=HTTPStatus.BAD_REQUEST,
            message=f"Failed to instantiate projection / DTO: {cause_message or 'see server logs'}",
        )

    def _domain_validation(self, exc: BaseException, request: RequestInfo, route: Any) -> ErrorOutcome:
        failed = cast(ValidationFailedError, exc)
        return ErrorOutcome(
            status=HTTPStatus.BAD_REQUEST,
            message=failed.message,
            code=VALIDATION_FAILED,
            details=flatten_validation_errors(failed.errors),
        )

    def _domain(self, exc: BaseException, request: RequestInfo, route: Any) -> ErrorOutcome:
        return ErrorOutcome(status=HTTPStatus.BAD_REQUEST, message=str(exc))

    def _illegal_state(self, exc: BaseException, request: RequestInfo, route: Any) -> ErrorOutcome:
        message = str(exc)
        return ErrorOutcome(
            status=HTTPStatus.INTERNAL_SERVER_ERROR,
            message=message or "The system is in an unexpected state",
            details={
                "errorType": type(exc).__name__,
                "message": message or "No error message available",
                "suggestion": "Retry the request or contact support if the issue persists",
            },
        )

    def _persistence_failure(self, exc: BaseException, request: RequestInfo, route: Any) -> ErrorOutcome:
        return ErrorOutcome(status=HTTPStatus.INTERNAL_SERVER_ERROR, message=str(exc))

    def _no_such_element(self, exc: BaseException, request: RequestInfo, route: Any) -> ErrorOutcome:
        message = _message_of(exc) or "The requested element was not found"
        return ErrorOutcome(
            status=HTTPStatus.NOT_FOUND,
            message=message,
            details={
                "errorType": type(exc).__name__,
                "message": message,
                "suggestion": "Verify that the requested resource exists and try again",
            },
        )

    def _http_error(self, exc: BaseException, request: RequestInfo, route: Any) -> ErrorOutcome:
        http_exc = cast(StarletteHTTPException, exc)
        detail = http_exc.detail
        message = detail if isinstance(detail, str) else json.dumps(detail, default=str)
        return ErrorOutcome(
            status=http_exc.status_code,
            message=message or reason_phrase(http_exc.status_code),
            headers=dict(http_exc.headers) if http_exc.headers else None,
        )

    def _unexpected(self, exc: BaseException, request: RequestInfo, route: Any) -> ErrorOutcome:
        return ErrorOutcome(
            status=HTTPStatus.INTERNAL_SERVER_ERROR,
            message="An unexpected error occurred while processing your request",
            details={
                "errorType": type(exc).__name__,
                "message": str(exc) or "No error message available",
                "path": request.path,
                "timestamp": self._clock.now().isoformat(),
                "suggestion": "Please contact support if the problem persists",
            },
        )
