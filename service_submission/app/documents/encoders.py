"""
Envelope encoders, one per document format.
"""

import base64
import json
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Optional

from pydantic import ValidationError
from pydantic_core import to_jsonable_python

from shared.errors import EncodingFailure
from .models import DocumentFormat, DocumentType, Envelope


class DocumentEncoder(ABC):
    """Turns a document and its detached signature into an Envelope.

    Subclasses fix the format tag and the document kind tag; only the
    serialization step differs between formats.
    """

    document_format: ClassVar[DocumentFormat]
    document_type: ClassVar[DocumentType]

    def __init__(self, product_group: Optional[str] = None):
        self.product_group = product_group

    @abstractmethod
    def serialize(self, document: Any) -> str:
        """Canonical text form of ``document``."""

    def encode(self, document: Any, signature: str) -> Envelope:
        """Build the envelope for one submission."""
        if not isinstance(signature, str):
            raise EncodingFailure(
                "Signature must be a string",
                details={"signature_type": type(signature).__name__}
            )

        text = self.serialize(document)
        payload = base64.b64encode(text.encode("utf-8")).decode("ascii")

        try:
            return Envelope(
                document_format=self.document_format,
                document_type=self.document_type,
                signature=signature,
                encoded_payload=payload,
                product_group=self.product_group,
            )
        except ValidationError as e:
            raise EncodingFailure(
                "Envelope validation failed",
                details={"document_format": self.document_format.value, "errors": e.error_count()}
            ) from e


class JsonDocumentEncoder(DocumentEncoder):
    """Generic JSON documents (format MANUAL)."""

    document_format = DocumentFormat.MANUAL
    document_type = DocumentType.LP_INTRODUCE_GOODS

    def serialize(self, document: Any) -> str:
        try:
            plain = to_jsonable_python(document, by_alias=True)
            return json.dumps(plain, ensure_ascii=False, allow_nan=False, separators=(",", ":"))
        except (TypeError, ValueError) as e:
            raise EncodingFailure(
                f"Document is not JSON serializable: {e}",
                details={"document_format": self.document_format.value, "document_type": type(document).__name__}
            ) from e
