"""
Shared Kernel Response Wrapping.

Wraps JSON route results in the standard envelope just before they are
written. Non-JSON responses (HTML, files, streams) pass through untouched,
and bodies that already are envelopes are never wrapped twice.

Routes opt in through ``EnvelopeRoute``::

    router = APIRouter(route_class=EnvelopeRoute)
"""
from __future__ import annotations

import json
from http import HTTPStatus
from typing import Any, Callable, Coroutine, Mapping

from fastapi.routing import APIRoute
from starlette.requests import Request
from starlette.responses import JSONResponse, Response, StreamingResponse
import structlog

from .api_response import ApiResponse, is_envelope
from .envelope import EnvelopeFactory, reason_phrase
from .request_context import RequestInfo
from .settings import PresentationSettings

logger = structlog.get_logger(__name__)

RESPONSE_WRAPPER_STATE = "response_wrapper"

_BODILESS_STATUSES = frozenset({HTTPStatus.NO_CONTENT, HTTPStatus.NOT_MODIFIED})
_DROPPED_HEADERS = frozenset({b"content-length", b"content-type"})


def is_json_compatible(content_type: str | None) -> bool:
    """``application/json`` and ``application/*+json`` media types."""
    if not content_type:
        return False
    media_type = content_type.split(";", 1)[0].strip().lower()
    if media_type == "application/json":
        return True
    return media_type.startswith("application/") and media_type.endswith("+json")


def _error_message(body: Any, status: int) -> str:
    if isinstance(body, Mapping):
        for key in ("error", "message", "detail"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    if isinstance(body, str) and body:
        return body
    return reason_phrase(status)


class ApiResponseWrapper:
    """Decides whether a body is wrapped and builds the envelope when it is."""

    def __init__(self, settings: PresentationSettings, envelopes: EnvelopeFactory) -> None:
        self._settings = settings
        self._envelopes = envelopes

    def supports(self) -> bool:
        """Wrapping can be switched off globally."""
        return self._settings.api_response.enabled

    def before_body_write(
        self, body: Any, content_type: str | None, request: RequestInfo, status: int = HTTPStatus.OK
    ) -> Any:
        """
        Return the body to write.

        Non-JSON bodies come back unchanged. Envelopes are re-rendered in wire
        form, null fields dropped, without a second layer. Anything else is
        wrapped: 2xx as success, other statuses as failure with the message
        taken from the body.
        """
        if not self.supports() or not is_json_compatible(content_type):
            return body
        if isinstance(body, ApiResponse):
            return body.to_wire()
        if is_envelope(body):
            return ApiResponse.model_validate(body).to_wire()
        if HTTPStatus.OK <= status < HTTPStatus.MULTIPLE_CHOICES:
            return self._envelopes.success(body, request, status).to_wire()
        return self._envelopes.failure(status, _error_message(body, status), request).to_wire()

    def wrap_response(self, request: Request, response: Response) -> Response:
        """Rebuild a rendered JSON ``response`` around its enveloped body."""
        if isinstance(response, StreamingResponse) or response.status_code in _BODILESS_STATUSES:
            return response
        content_type = response.headers.get("content-type")
        if not self.supports() or not is_json_compatible(content_type):
            return response
        raw = bytes(response.body or b"")
        if raw:
            try:
                body = json.loads(raw)
            except ValueError:
                logger.warning("response_not_wrapped", reason="body is not valid JSON",
                               path=request.url.path)
                return response
        else:
            body = None
        wrapped = self.before_body_write(
            body, content_type, RequestInfo.from_request(request), response.status_code
        )
        if wrapped is body:
            return response
        enveloped = JSONResponse(
            content=wrapped, status_code=response.status_code, background=response.background
        )
        enveloped.raw_headers.extend(
            (name, value) for name, value in response.raw_headers if name.lower() not in _DROPPED_HEADERS
        )
        return enveloped


class EnvelopeRoute(APIRoute):
    """APIRoute whose JSON results are wrapped by the app's ``ApiResponseWrapper``."""

    def get_route_handler(self) -> Callable[[Request], Coroutine[Any, Any, Response]]:
        original_route_handler = super().get_route_handler()

        async def envelope_route_handler(request: Request) -> Response:
            response = await original_route_handler(request)
            wrapper = getattr(request.app.state, RESPONSE_WRAPPER_STATE, None)
            if wrapper is None:
                return response
            return wrapper.wrap_response(request, response)

        return envelope_route_handler
