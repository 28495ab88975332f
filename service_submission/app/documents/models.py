"""
Data model of registry submissions.
"""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr


class DocumentFormat(str, Enum):
    """Input encodings accepted by the registry."""

    MANUAL = "MANUAL"
    XML = "XML"
    CSV = "CSV"


class DocumentType(str, Enum):
    """Document kind tags, one per document format."""

    LP_INTRODUCE_GOODS = "LP_INTRODUCE_GOODS"
    LP_INTRODUCE_GOODS_CSV = "LP_INTRODUCE_GOODS_CSV"
    LP_INTRODUCE_GOODS_XML = "LP_INTRODUCE_GOODS_XML"


class Envelope(BaseModel):
    """Canonical submission unit posted to the registry."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    document_format: DocumentFormat
    document_type: DocumentType = Field(..., alias="type")
    signature: str = Field(..., repr=False)
    encoded_payload: str = Field(..., alias="product_document")
    product_group: Optional[str] = None

    def to_wire(self) -> Dict[str, Any]:
        """Registry JSON body; absent optional fields are left out."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class SubmissionResponse(BaseModel):
    """Result returned by the registry for one submission."""

    model_config = ConfigDict(frozen=True, extra="ignore", coerce_numbers_to_str=True)

    value: Optional[str] = None
    code: Optional[str] = None
    error_message: Optional[str] = None
    description: Optional[str] = None


class AuthToken(BaseModel):
    """Bearer credential for the registry API."""

    model_config = ConfigDict(frozen=True)

    value: SecretStr

    def bearer(self) -> str:
        """Authorization header value."""
        return f"Bearer {self.value.get_secret_value()}"
