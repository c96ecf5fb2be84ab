"""
Shared Kernel Presentation Wiring.

Installs the shared presentation behaviour on a FastAPI application:
request timing and correlation, response wrapping, and error translation.
"""
from __future__ import annotations

from typing import Any, Awaitable, Callable

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import structlog

from ..domain.clock import Clock, SystemClock
from ..logging_config import configure_logging
from .envelope import EnvelopeFactory
from .error_translation import ErrorTranslator
from .request_context import request_timing_middleware
from .response_wrapping import RESPONSE_WRAPPER_STATE, ApiResponseWrapper, EnvelopeRoute
from .settings import PresentationSettings

logger = structlog.get_logger(__name__)


def install_presentation(
    app: FastAPI,
    settings: PresentationSettings | None = None,
    clock: Clock | None = None,
) -> ErrorTranslator:
    """
    Wire the shared presentation layer into ``app``.

    Routes registered on ``app`` after this call use ``EnvelopeRoute``;
    separate routers must be created with ``APIRouter(route_class=EnvelopeRoute)``.
    """
    settings = settings or PresentationSettings.load()
    clock = clock or SystemClock()
    envelopes = EnvelopeFactory(settings, clock)
    translator = ErrorTranslator(envelopes, clock)

    app.state.presentation_settings = settings
    app.state.error_translator = translator
    setattr(app.state, RESPONSE_WRAPPER_STATE, ApiResponseWrapper(settings, envelopes))
    app.router.route_class = EnvelopeRoute

    _register_middleware(app, translator, clock)
    _register_exception_handlers(app, translator)
    logger.info(
        "presentation_installed",
        wrapping_enabled=settings.api_response.enabled,
        version=settings.meta_defaults.version,
        environment=settings.meta_defaults.environment,
    )
    return translator


def _register_middleware(app: FastAPI, translator: ErrorTranslator, clock: Clock) -> None:
    """Error boundary inside, timing outside, so every translated failure is timed."""

    @app.middleware("http")
    async def error_boundary_middleware(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            return translator.to_response(request, exc)

    app.middleware("http")(request_timing_middleware(clock))


def _register_exception_handlers(app: FastAPI, translator: ErrorTranslator) -> None:
    """Failures the framework raises before or around the endpoint."""
    app.add_exception_handler(RequestValidationError, translator.handle)
    app.add_exception_handler(StarletteHTTPException, translator.handle)


def create_app(
    settings: PresentationSettings | None = None,
    clock: Clock | None = None,
    **fastapi_options: Any,
) -> FastAPI:
    """Create a FastAPI application with logging and the presentation layer installed."""
    settings = settings or PresentationSettings.load()
    configure_logging(settings)
    app = FastAPI(debug=settings.debug, **fastapi_options)
    install_presentation(app, settings, clock)
    return app
