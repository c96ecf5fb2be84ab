"""
Shared Kernel Presentation Module.

HTTP-facing utilities shared by every service:
- ApiResponse: The standard success/failure envelope
- ErrorTranslator: Total mapping from failures to envelopes
- ApiResponseWrapper / EnvelopeRoute: Automatic wrapping of JSON results
- request_timing_middleware: Request start and correlation tracking
- install_presentation / create_app: FastAPI wiring
"""

from .api_response import ApiResponse, ErrorBody, Meta, RequestMetadata, ResponseMetadata, is_envelope
from .bootstrap import create_app, install_presentation
from .boundary_errors import (
    MessageNotReadableError,
    MissingRequestParameterError,
    ProjectionInstantiationError,
)
from .envelope import EnvelopeFactory, reason_phrase
from .error_translation import (
    ErrorOutcome,
    ErrorTranslator,
    FailureKind,
    classify,
    flatten_validation_errors,
)
from .request_context import (
    CORRELATION_HEADERS,
    RequestInfo,
    extract_correlation_id,
    request_timing_middleware,
)
from .response_wrapping import ApiResponseWrapper, EnvelopeRoute, is_json_compatible
from .settings import ApiResponseSettings, MetaDefaults, PresentationSettings

__all__ = [
    # Envelope
    "ApiResponse",
    "ErrorBody",
    "Meta",
    "RequestMetadata",
    "ResponseMetadata",
    "is_envelope",
    "EnvelopeFactory",
    "reason_phrase",
    # Errors
    "ErrorOutcome",
    "ErrorTranslator",
    "FailureKind",
    "classify",
    "flatten_validation_errors",
    "MessageNotReadableError",
    "MissingRequestParameterError",
    "ProjectionInstantiationError",
    # Request context
    "CORRELATION_HEADERS",
    "RequestInfo",
    "extract_correlation_id",
    "request_timing_middleware",
    # Wrapping
    "ApiResponseWrapper",
    "EnvelopeRoute",
    "is_json_compatible",
    # Settings & wiring
    "ApiResponseSettings",
    "MetaDefaults",
    "PresentationSettings",
    "create_app",
    "install_presentation",
]
