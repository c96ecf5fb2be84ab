"""
Shared Kernel Request Timing & Correlation.

The timing middleware records when a request started before any handler
runs; the envelope builders later turn that into ``processingTimeMs``. The
correlation id is read from well-known headers and echoed in every envelope.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Awaitable, Callable, Mapping

from starlette.requests import Request
from starlette.responses import Response
import structlog

from ..domain.clock import Clock

logger = structlog.get_logger(__name__)

CORRELATION_HEADERS: tuple[str, ...] = ("X-Correlation-Id", "X-Request-Id")
REQUEST_START_ATTRIBUTE = "request_start"


def extract_correlation_id(headers: Mapping[str, str]) -> str | None:
    """First non-empty correlation header wins; ``None`` when none is present."""
    for name in CORRELATION_HEADERS:
        value = headers.get(name)
        if value:
            return value
    return None


def record_request_start(request: Request, clock: Clock) -> datetime:
    """Store the start instant on the request-local state."""
    started = clock.now()
    setattr(request.state, REQUEST_START_ATTRIBUTE, started)
    return started


def get_request_start(request: Request) -> datetime | None:
    return getattr(request.state, REQUEST_START_ATTRIBUTE, None)


def processing_time_ms(start: datetime | None, now: datetime) -> int | None:
    """Whole milliseconds elapsed since ``start``; ``None`` when no start was recorded."""
    if start is None:
        return None
    return (now - start) // timedelta(milliseconds=1)


@dataclass(frozen=True)
class RequestInfo:
    """Framework-neutral view of the request fields the envelope needs."""
    method: str
    path: str
    query: str | None = None
    correlation_id: str | None = None
    started_at: datetime | None = None

    @classmethod
    def from_request(cls, request: Request) -> RequestInfo:
        query = request.url.query
        return cls(
            method=request.method,
            path=request.url.path,
            query=query or None,
            correlation_id=extract_correlation_id(request.headers),
            started_at=get_request_start(request),
        )


def request_timing_middleware(
    clock: Clock,
) -> Callable[[Request, Callable[[Request], Awaitable[Response]]], Awaitable[Response]]:
    """
    Build the HTTP middleware that records the request start.

    Also binds the correlation id and request line to the structlog context
    for the duration of the request.
    """

    async def record_timing(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        record_request_start(request, clock)
        structlog.contextvars.clear_contextvars()
        context = {"method": request.method, "path": request.url.path}
        correlation_id = extract_correlation_id(request.headers)
        if correlation_id:
            context["correlation_id"] = correlation_id
        structlog.contextvars.bind_contextvars(**context)
        try:
            response = await call_next(request)
            logger.debug("request_completed", status_code=response.status_code)
            return response
        finally:
            structlog.contextvars.clear_contextvars()

    return record_timing
