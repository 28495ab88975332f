"""
Submission service: signed documents in, registry submissions out.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from shared.base_service import BaseService
from shared.config import SubmissionConfig
from .adapters import RegistryClient, StaticTokenProvider
from .documents import DocumentFormat, FormatRegistry, default_registry
from .orchestrator import DocumentSubmissionService, RegistryTransport
from .ratelimit import RateGate


class DocumentSubmissionRequest(BaseModel):
    """Body of a document submission."""
    document: Any = Field(..., description="Document to submit")
    signature: str = Field(..., description="Detached signature of the document")
    document_format: str = Field(default=DocumentFormat.MANUAL.value, description="Document format name")


class SubmissionApiService(BaseService):
    """Submission service implementation."""

    def __init__(self, config: Optional[SubmissionConfig] = None,
                 transport: Optional[RegistryTransport] = None,
                 registry: Optional[FormatRegistry] = None):
        config = config or SubmissionConfig()
        super().__init__("submission", config)

        self.gate = RateGate.configure(config.interval_seconds, config.request_limit)
        if registry is None:
            registry = default_registry(config.product_group)
        if transport is None:
            transport = RegistryClient(
                config.base_url,
                config.introduce_goods_path,
                StaticTokenProvider(config.auth_token),
                timeout=config.request_timeout
            )

        self.submissions = DocumentSubmissionService(self.gate, registry, transport, metrics=self.metrics)
        self._setup_submission_routes()

    def _setup_submission_routes(self):
        """Set up submission-specific routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "submission",
                "message": "Registry Submission Service",
                "version": "1.0.0"
            }

        @self.app.post("/api/v1/documents")
        async def submit_document(request: DocumentSubmissionRequest):
            """Submit a signed document to the registry."""
            response = await self.submissions.submit(
                request.document,
                request.signature,
                request.document_format
            )
            return response.model_dump(exclude_none=True)

        @self.app.get("/api/v1/gate")
        async def gate_status():
            """Current rate gate state."""
            return self._gate_status()

    def _gate_status(self) -> Dict[str, Any]:
        return {
            "limit": self.gate.limit,
            "interval_seconds": self.gate.interval,
            "available": self.gate.available,
            "waiting": self.gate.waiting,
            "pending_releases": self.gate.pending_releases,
            "closed": self.gate.closed
        }

    async def _check_dependencies(self) -> Dict[str, str]:
        return {"rate_gate": "closed" if self.gate.closed else "ok"}

    async def shutdown(self):
        self.submissions.close()


def create_app(config: Optional[SubmissionConfig] = None,
               transport: Optional[RegistryTransport] = None,
               registry: Optional[FormatRegistry] = None):
    """Create FastAPI application."""
    service = SubmissionApiService(config=config, transport=transport, registry=registry)
    return service.app


if __name__ == "__main__":
    service = SubmissionApiService()
    service.run()
