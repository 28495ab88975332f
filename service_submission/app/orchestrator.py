"""
Document submission pipeline: gate, encode, send.
"""

import time
from typing import Any, Optional, Protocol

from shared.logging import get_logger
from shared.metrics import MetricsCollector
from .documents.models import DocumentFormat, Envelope, SubmissionResponse
from .documents.registry import FormatRegistry
from .ratelimit.gate import RateGate


class RegistryTransport(Protocol):
    """Sends one envelope to the registry."""

    async def send(self, envelope: Envelope) -> SubmissionResponse:
        ...


class DocumentSubmissionService:
    """Single entry point for registry submissions.

    An admission is charged for every attempt: a permit taken before an
    unsupported format or an encoding failure is not refunded.
    """

    def __init__(self, gate: RateGate, registry: FormatRegistry, transport: RegistryTransport,
                 metrics: Optional[MetricsCollector] = None):
        self.gate = gate
        self.registry = registry
        self.transport = transport
        self.metrics = metrics
        self.logger = get_logger("submission.orchestrator")

    async def submit(self, document: Any, signature: str, document_format: Any) -> SubmissionResponse:
        """Submit one signed document and return the registry response."""
        format_label = self._format_label(document_format)
        start_time = time.monotonic()

        try:
            await self.gate.acquire()
            if self.metrics:
                self.metrics.record_gate_admission(time.monotonic() - start_time, self.gate.available)

            encoder = self.registry.resolve(document_format)
            envelope = encoder.encode(document, signature)
            response = await self.transport.send(envelope)
        except Exception as e:
            self.logger.warning(
                "Document submission failed",
                document_format=format_label,
                error_type=type(e).__name__,
                error=str(e)
            )
            self._record(format_label, type(e).__name__, start_time)
            raise

        self.logger.info(
            "Document submitted",
            document_format=format_label,
            document_type=envelope.document_type.value,
            value=response.value,
            code=response.code
        )
        self._record(format_label, "success", start_time)
        return response

    def close(self) -> None:
        """Stop admitting submissions."""
        self.gate.close()

    @staticmethod
    def _format_label(document_format: Any) -> str:
        # Metric labels stay within the known formats.
        try:
            return DocumentFormat(document_format).value
        except (ValueError, TypeError):
            return "unsupported"

    def _record(self, format_label: str, outcome: str, start_time: float) -> None:
        if self.metrics:
            self.metrics.record_submission(format_label, outcome, time.monotonic() - start_time)
            if outcome != "success":
                self.metrics.record_error(outcome)
