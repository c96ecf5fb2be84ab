"""
Shared Kernel API Response Envelope.

Wire contract returned by every HTTP endpoint::

    {
      "success": true,
      "meta": {
        "request": {"method", "path", "query", "correlationId"},
        "response": {"status", "statusCode", "reason", "timestamp", "processingTimeMs"},
        "version", "environment"
      },
      "data": ...,
      "error": {"message", "code", "details"}
    }

Field names are camelCase on the wire and snake_case in Python. Unknown
fields are ignored when reading; null fields are omitted when writing.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Generic, Mapping, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

T = TypeVar("T")

_ENVELOPE_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    extra="ignore",
    frozen=True,
)


class RequestMetadata(BaseModel):
    """HTTP request information echoed back in the envelope."""
    method: str
    path: str
    query: str | None = None
    correlation_id: str | None = None
    model_config = _ENVELOPE_CONFIG


class ResponseMetadata(BaseModel):
    """HTTP response information; ``status`` and ``status_code`` carry the same value."""
    status: int
    status_code: int
    reason: str
    timestamp: datetime
    processing_time_ms: int | None = None
    model_config = _ENVELOPE_CONFIG


class Meta(BaseModel):
    request: RequestMetadata
    response: ResponseMetadata
    version: str | None = None
    environment: str | None = None
    model_config = _ENVELOPE_CONFIG


class ErrorBody(BaseModel):
    """Structured error payload. Strings are carried as-is, without escaping."""
    message: str | None = None
    code: str | None = None
    details: dict[str, str | None] | None = None
    model_config = _ENVELOPE_CONFIG


class ApiResponse(BaseModel, Generic[T]):
    """Standardized JSON envelope returned by REST endpoints."""
    success: bool
    meta: Meta
    data: T | None = None
    error: ErrorBody | None = Field(default=None)
    model_config = _ENVELOPE_CONFIG

    @model_validator(mode="after")
    def validate_outcome(self) -> ApiResponse[T]:
        """A successful envelope never carries an error; a failed one always does."""
        if self.success and self.error is not None:
            raise ValueError("successful response cannot carry an error")
        if not self.success and self.error is None:
            raise ValueError("failed response must carry an error")
        if not self.success and self.data is not None:
            raise ValueError("failed response cannot carry data")
        return self

    def to_wire(self) -> dict[str, Any]:
        """JSON-compatible dict with camelCase keys and null fields omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)


def is_envelope(payload: Any) -> bool:
    """True when ``payload`` already is an envelope, as a model or as decoded JSON."""
    if isinstance(payload, ApiResponse):
        return True
    if not isinstance(payload, Mapping):
        return False
    meta = payload.get("meta")
    return (
        isinstance(payload.get("success"), bool)
        and isinstance(meta, Mapping)
        and isinstance(meta.get("request"), Mapping)
        and isinstance(meta.get("response"), Mapping)
    )
