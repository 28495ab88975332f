"""
Test helper functions and factory methods for the registry submission service.
"""

import asyncio
import base64
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class TestGood:
    """Goods line of an introduction document."""
    uit_code: str
    tnved_code: str
    production_date: str
    certificate_document: Optional[str] = None


@dataclass
class TestDocument:
    """Goods introduction document."""
    participant_inn: str
    producer_inn: str
    production_date: str
    production_type: str = "OWN_PRODUCTION"
    products: List[TestGood] = field(default_factory=list)


class TestDataFactory:
    """Factory for creating test data."""

    @staticmethod
    def create_test_document() -> TestDocument:
        """Create a typed goods introduction document."""
        return TestDocument(
            participant_inn="7701234567",
            producer_inn="7701234567",
            production_date="2024-01-15",
            products=[
                TestGood(
                    uit_code="010460043993125621JgXJ5.T",
                    tnved_code="6401100000",
                    production_date="2024-01-15"
                )
            ]
        )

    @staticmethod
    def create_test_document_dict() -> Dict[str, Any]:
        """Create a plain-dict goods introduction document."""
        return {
            "participant_inn": "7701234567",
            "producer_inn": "7701234567",
            "production_date": "2024-01-15",
            "production_type": "OWN_PRODUCTION",
            "products": [
                {
                    "uit_code": "010460043993125621JgXJ5.T",
                    "tnved_code": "6401100000",
                    "production_date": "2024-01-15"
                }
            ]
        }

    @staticmethod
    def create_test_signature() -> str:
        """Create a detached signature placeholder."""
        return base64.b64encode(b"detached-signature").decode("ascii")


def decode_payload(encoded_payload: str) -> Any:
    """Base64-decode and JSON-parse an envelope payload."""
    return json.loads(base64.b64decode(encoded_payload).decode("utf-8"))


class RecordingTransport:
    """Transport stub that records envelopes and returns a fixed response."""

    def __init__(self, response: Any, delay: float = 0.0, error: Optional[Exception] = None):
        self.response = response
        self.delay = delay
        self.error = error
        self.sent: List[Any] = []

    async def send(self, envelope: Any) -> Any:
        self.sent.append(envelope)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.response
