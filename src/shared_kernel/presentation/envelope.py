"""
Shared Kernel Envelope Assembly.

Both the success path (response wrapping) and the failure path (error
translation) build their envelopes here, so the metadata is identical in
shape whichever way a request ends.
"""
from __future__ import annotations

from http import HTTPStatus
from typing import Any, Mapping

from ..domain.clock import Clock, SystemClock
from .api_response import ApiResponse, ErrorBody, Meta, RequestMetadata, ResponseMetadata
from .request_context import RequestInfo, processing_time_ms
from .settings import PresentationSettings


def reason_phrase(status: int) -> str:
    """Standard reason phrase for ``status``, ``"Unknown"`` for unregistered codes."""
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return "Unknown"


class EnvelopeFactory:
    """
    Builds success and failure envelopes for a request.

    ``version`` and ``environment`` come from the supplied settings; nothing
    is computed or cached across requests.
    """

    def __init__(self, settings: PresentationSettings, clock: Clock | None = None) -> None:
        self._settings = settings
        self._clock = clock or SystemClock()

    def _meta(self, request: RequestInfo, status: int) -> Meta:
        now = self._clock.now()
        defaults = self._settings.meta_defaults
        return Meta(
            request=RequestMetadata(
                method=request.method,
                path=request.path,
                query=request.query,
                correlation_id=request.correlation_id,
            ),
            response=ResponseMetadata(
                status=status,
                status_code=status,
                reason=reason_phrase(status),
                timestamp=now,
                processing_time_ms=processing_time_ms(request.started_at, now),
            ),
            version=defaults.version,
            environment=defaults.environment,
        )

    def success(self, data: Any, request: RequestInfo, status: int = HTTPStatus.OK) -> ApiResponse[Any]:
        return ApiResponse(success=True, meta=self._meta(request, int(status)), data=data, error=None)

    def failure(
        self,
        status: int,
        message: str | None,
        request: RequestInfo,
        code: str | None = None,
        details: Mapping[str, str | None] | None = None,
    ) -> ApiResponse[Any]:
        error = ErrorBody(
            message=message,
            code=code,
            details=dict(details) if details is not None else None,
        )
        return ApiResponse(success=False, meta=self._meta(request, int(status)), data=None, error=error)
