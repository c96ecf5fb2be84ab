"""
Unit tests for Shared Kernel API Response Envelope.
"""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError as PydanticValidationError

from shared_kernel.presentation import (
    ApiResponse,
    EnvelopeFactory,
    ErrorBody,
    Meta,
    RequestInfo,
    RequestMetadata,
    ResponseMetadata,
    is_envelope,
    reason_phrase,
)


def _meta(status: int = 200) -> Meta:
    return Meta(
        request=RequestMetadata(method="GET", path="/api/users"),
        response=ResponseMetadata(
            status=status,
            status_code=status,
            reason=reason_phrase(status),
            timestamp=datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc),
        ),
    )


class TestApiResponse:
    """Tests for ApiResponse."""

    def test_wire_format_is_camel_case(self) -> None:
        """Test field names on the wire."""
        envelope = ApiResponse(success=True, meta=_meta(), data={"id": 1})
        wire = envelope.to_wire()

        assert wire["success"] is True
        assert wire["data"] == {"id": 1}
        assert wire["meta"]["response"]["statusCode"] == 200
        assert wire["meta"]["response"]["reason"] == "OK"
        assert "error" not in wire

    def test_null_fields_omitted(self) -> None:
        """Test optional metadata is left out when absent."""
        wire = ApiResponse(success=True, meta=_meta()).to_wire()

        assert "query" not in wire["meta"]["request"]
        assert "correlationId" not in wire["meta"]["request"]
        assert "processingTimeMs" not in wire["meta"]["response"]
        assert "version" not in wire["meta"]
        assert "data" not in wire

    def test_json_roundtrip_success(self) -> None:
        """Test a success envelope reads back equal."""
        envelope = ApiResponse(success=True, meta=_meta(), data=[1, 2, 3])
        assert ApiResponse.model_validate_json(envelope.to_json()) == envelope

    def test_json_roundtrip_failure(self) -> None:
        """Test a failure envelope reads back equal."""
        envelope = ApiResponse(
            success=False,
            meta=_meta(404),
            error=ErrorBody(message="gone", code="NOT_FOUND", details={"id": "1"}),
        )
        restored = ApiResponse.model_validate_json(envelope.to_json())

        assert restored == envelope
        assert restored.error.details == {"id": "1"}

    def test_unknown_fields_ignored(self) -> None:
        """Test readers tolerate fields they do not know."""
        wire = ApiResponse(success=True, meta=_meta(), data=1).to_wire()
        wire["extra"] = "ignored"
        assert ApiResponse.model_validate(wire).data == 1

    def test_success_cannot_carry_error(self) -> None:
        with pytest.raises(PydanticValidationError):
            ApiResponse(success=True, meta=_meta(), error=ErrorBody(message="x"))

    def test_failure_requires_error(self) -> None:
        with pytest.raises(PydanticValidationError):
            ApiResponse(success=False, meta=_meta(500))

    def test_failure_cannot_carry_data(self) -> None:
        with pytest.raises(PydanticValidationError):
            ApiResponse(success=False, meta=_meta(500), data=1, error=ErrorBody(message="x"))

    def test_is_envelope(self) -> None:
        """Test envelope detection for models and decoded JSON."""
        envelope = ApiResponse(success=True, meta=_meta(), data=1)

        assert is_envelope(envelope)
        assert is_envelope(envelope.to_wire())
        assert not is_envelope({"success": True, "data": 1})
        assert not is_envelope({"success": "yes", "meta": {"request": {}, "response": {}}})
        assert not is_envelope([1, 2])


class TestEnvelopeFactory:
    """Tests for EnvelopeFactory."""

    def test_success_metadata(self, settings, clock) -> None:
        """Test request echo, defaults and processing time."""
        factory = EnvelopeFactory(settings, clock)
        request = RequestInfo(
            method="POST",
            path="/api/sessions",
            query="page=2",
            correlation_id="corr-123",
            started_at=clock.current - timedelta(milliseconds=42),
        )

        wire = factory.success({"ok": True}, request, 201).to_wire()

        assert wire["meta"]["request"] == {
            "method": "POST",
            "path": "/api/sessions",
            "query": "page=2",
            "correlationId": "corr-123",
        }
        assert wire["meta"]["response"]["status"] == 201
        assert wire["meta"]["response"]["statusCode"] == 201
        assert wire["meta"]["response"]["reason"] == "Created"
        assert wire["meta"]["response"]["processingTimeMs"] == 42
        assert wire["meta"]["version"] == "v1"
        assert wire["meta"]["environment"] == "test"

    def test_no_processing_time_without_start(self, settings, clock) -> None:
        """Test processing time is absent when the start was never recorded."""
        factory = EnvelopeFactory(settings, clock)
        envelope = factory.success(None, RequestInfo(method="GET", path="/"))

        assert envelope.meta.response.processing_time_ms is None
        assert envelope.data is None
        assert envelope.success

    def test_failure(self, settings, clock) -> None:
        """Test failure envelopes carry the error body."""
        factory = EnvelopeFactory(settings, clock)
        envelope = factory.failure(409, "exists", RequestInfo(method="PUT", path="/x"),
                                   details={"k": "v"})

        assert not envelope.success
        assert envelope.data is None
        assert envelope.error == ErrorBody(message="exists", details={"k": "v"})
        assert envelope.meta.response.reason == "Conflict"

    def test_unknown_status_reason(self) -> None:
        assert reason_phrase(599) == "Unknown"
        assert reason_phrase(404) == "Not Found"
