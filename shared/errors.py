"""
Shared error handling for the registry submission service.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel, Field
from opentelemetry import trace


class ErrorResponse(BaseModel):
    """Standard error response format."""

    trace_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)


class SubmissionError(Exception):
    """Base exception for the submission pipeline."""

    status_code: int = 400

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        # Get trace ID from current span
        trace_id = None
        current_span = trace.get_current_span()
        if current_span and current_span.is_recording():
            span_context = current_span.get_span_context()
            if span_context.trace_id != 0:
                trace_id = f"{span_context.trace_id:032x}"

        return ErrorResponse(
            trace_id=trace_id,
            code=self.code,
            message=self.message,
            details=self.details
        )


class GateInterrupted(SubmissionError):
    """A caller stopped waiting for a rate gate permit."""

    status_code = 503

    def __init__(self, message: str = "Rate gate was interrupted", details: Optional[Dict[str, Any]] = None):
        super().__init__("GATE_INTERRUPTED", message, details)


class UnsupportedFormat(SubmissionError):
    """No encoder is registered for the requested document format."""

    status_code = 400

    def __init__(self, document_format: Any, details: Optional[Dict[str, Any]] = None):
        self.document_format = document_format
        name = getattr(document_format, "name", document_format)
        super().__init__(
            "UNSUPPORTED_FORMAT",
            f"Unsupported DocumentFormat = {name}",
            {"document_format": str(name), **(details or {})}
        )


class EncodingFailure(SubmissionError):
    """A document could not be turned into an envelope."""

    status_code = 422

    def __init__(self, message: str = "Document encoding failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("ENCODING_FAILURE", message, details)


class AuthenticationError(SubmissionError):
    """Authentication-related errors."""

    status_code = 401

    def __init__(self, message: str = "Authentication failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("AUTHENTICATION_ERROR", message, details)


class ExternalServiceError(SubmissionError):
    """External service errors."""

    status_code = 502

    def __init__(self, service: str, message: str = "External service error", details: Optional[Dict[str, Any]] = None):
        super().__init__("EXTERNAL_SERVICE_ERROR", f"{service}: {message}", details)
