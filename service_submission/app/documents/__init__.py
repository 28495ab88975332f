"""
Documents package for the submission service.

Defines the submission data model, the per-format envelope encoders and
the registry that dispatches a document format to its encoder.
"""

from .models import AuthToken, DocumentFormat, DocumentType, Envelope, SubmissionResponse
from .encoders import DocumentEncoder, JsonDocumentEncoder
from .registry import FormatRegistry, default_registry

__all__ = [
    "AuthToken",
    "DocumentFormat",
    "DocumentType",
    "Envelope",
    "SubmissionResponse",
    "DocumentEncoder",
    "JsonDocumentEncoder",
    "FormatRegistry",
    "default_registry",
]
