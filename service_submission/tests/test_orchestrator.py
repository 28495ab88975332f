"""
Unit tests for the document submission pipeline.
"""

import asyncio
import pytest
from unittest.mock import AsyncMock, MagicMock

from service_submission.app.documents import DocumentFormat, SubmissionResponse, default_registry
from service_submission.app.orchestrator import DocumentSubmissionService
from service_submission.app.ratelimit import RateGate
from shared.errors import EncodingFailure, ExternalServiceError, GateInterrupted, UnsupportedFormat
from shared.metrics import MetricsCollector
from shared.test_helpers import RecordingTransport, TestDataFactory, decode_payload

TOLERANCE = 0.02


class TestDocumentSubmissionService:
    """Test cases for DocumentSubmissionService."""

    @pytest.fixture
    def transport(self):
        """No-op transport returning an assigned identifier."""
        return RecordingTransport(SubmissionResponse(value="doc-123"))

    @pytest.fixture
    def service(self, transport):
        """Create service with five submissions per 0.3 seconds."""
        service = DocumentSubmissionService(
            RateGate.configure(0.3, 5),
            default_registry(),
            transport,
            metrics=MetricsCollector("submission")
        )
        yield service
        service.close()

    @pytest.mark.asyncio
    async def test_submit_success(self, service, transport):
        """Test a document travels through gate, encoder and transport."""
        document = TestDataFactory.create_test_document_dict()

        response = await service.submit(document, "sig", DocumentFormat.MANUAL)

        assert response is transport.response
        assert len(transport.sent) == 1
        envelope = transport.sent[0]
        assert envelope.signature == "sig"
        assert decode_payload(envelope.encoded_payload) == document
        assert service.gate.available == 4

    @pytest.mark.asyncio
    async def test_sixth_submission_waits_for_interval(self, service):
        """Test limit=5: the sixth concurrent submission is admitted one interval after the first."""
        loop = asyncio.get_running_loop()
        admissions = []
        acquire = service.gate.acquire

        async def stamped_acquire(*args, **kwargs):
            await acquire(*args, **kwargs)
            admissions.append(loop.time())

        service.gate.acquire = stamped_acquire

        results = await asyncio.gather(*(
            service.submit({"n": i}, "sig", DocumentFormat.MANUAL) for i in range(6)
        ))

        assert all(result.value == "doc-123" for result in results)
        admissions.sort()
        assert admissions[5] - admissions[0] >= 0.3 - TOLERANCE

    @pytest.mark.asyncio
    async def test_unregistered_format_consumes_permit(self, service, transport):
        """Test UnsupportedFormat propagates and the permit is not refunded."""
        with pytest.raises(UnsupportedFormat):
            await service.submit({"a": 1}, "sig", DocumentFormat.XML)

        assert service.gate.available == 4
        assert service.gate.pending_releases == 1
        assert transport.sent == []

        await asyncio.sleep(0.1)
        assert service.gate.available == 4

    @pytest.mark.asyncio
    async def test_encoding_failure_consumes_permit(self, service, transport):
        """Test EncodingFailure propagates and the permit is not refunded."""
        with pytest.raises(EncodingFailure):
            await service.submit({"bad": object()}, "sig", DocumentFormat.MANUAL)

        assert service.gate.available == 4
        assert transport.sent == []

    @pytest.mark.asyncio
    async def test_transport_failure_propagates(self):
        """Test transport errors reach the caller unchanged."""
        error = ExternalServiceError("registry", "Registry error: 500")
        transport = RecordingTransport(None, error=error)
        service = DocumentSubmissionService(RateGate.configure(1.0, 2), default_registry(), transport)

        with pytest.raises(ExternalServiceError) as exc_info:
            await service.submit({"a": 1}, "sig", DocumentFormat.MANUAL)

        assert exc_info.value is error
        assert len(transport.sent) == 1
        service.close()

    @pytest.mark.asyncio
    async def test_gate_interrupted_propagates(self, transport):
        """Test a closed gate stops submissions before encoding."""
        service = DocumentSubmissionService(RateGate.configure(1.0, 1), default_registry(), transport)
        service.close()

        with pytest.raises(GateInterrupted):
            await service.submit({"a": 1}, "sig", DocumentFormat.MANUAL)

        assert transport.sent == []

    @pytest.mark.asyncio
    async def test_no_envelope_without_admission(self, transport):
        """Test encoding never starts before the gate admits the caller."""
        registry = MagicMock()
        gate = MagicMock()
        gate.acquire = AsyncMock(side_effect=GateInterrupted("Rate gate wait cancelled"))
        service = DocumentSubmissionService(gate, registry, transport)

        with pytest.raises(GateInterrupted):
            await service.submit({"a": 1}, "sig", DocumentFormat.MANUAL)

        registry.resolve.assert_not_called()

    @pytest.mark.asyncio
    async def test_failures_leave_service_usable(self, service, transport):
        """Test that a failed submission is not fatal."""
        with pytest.raises(UnsupportedFormat):
            await service.submit({"a": 1}, "sig", "PDF")

        response = await service.submit({"a": 1}, "sig", "MANUAL")

        assert response.value == "doc-123"

    @pytest.mark.asyncio
    async def test_metrics_recorded(self, service):
        """Test submission outcomes are counted."""
        await service.submit({"a": 1}, "sig", DocumentFormat.MANUAL)
        with pytest.raises(UnsupportedFormat):
            await service.submit({"a": 1}, "sig", DocumentFormat.CSV)

        registry = service.metrics.registry
        assert registry.get_sample_value(
            "submissions_total", {"document_format": "MANUAL", "outcome": "success"}
        ) == 1.0
        assert registry.get_sample_value(
            "submissions_total", {"document_format": "CSV", "outcome": "UnsupportedFormat"}
        ) == 1.0
        assert registry.get_sample_value("gate_wait_seconds_count") == 2.0

    @pytest.mark.asyncio
    async def test_unknown_format_names_share_one_label(self, service):
        """Test arbitrary format names do not create new metric series."""
        for i in range(3):
            with pytest.raises(UnsupportedFormat):
                await service.submit({"a": 1}, "sig", f"junk-{i}")

        registry = service.metrics.registry
        assert registry.get_sample_value(
            "submissions_total", {"document_format": "unsupported", "outcome": "UnsupportedFormat"}
        ) == 3.0
        assert registry.get_sample_value(
            "submissions_total", {"document_format": "junk-0", "outcome": "UnsupportedFormat"}
        ) is None
