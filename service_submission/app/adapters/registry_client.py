"""
Registry API client for the submission service.
"""

import httpx
from typing import Any, Dict, Optional

from pydantic import ValidationError

from shared.logging import get_logger
from shared.errors import ExternalServiceError
from ..documents.models import Envelope, SubmissionResponse
from .token_provider import TokenProvider


class RegistryClient:
    """Posts envelopes to the goods registry.

    Each call sends exactly one request; failed submissions are never
    retried here.
    """

    def __init__(self, base_url: str, introduce_goods_path: str, token_provider: TokenProvider,
                 timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self.introduce_goods_path = "/" + introduce_goods_path.lstrip("/")
        self.token_provider = token_provider
        self.timeout = timeout
        self.logger = get_logger("submission.registry_client")

    @property
    def url(self) -> str:
        return f"{self.base_url}{self.introduce_goods_path}"

    async def send(self, envelope: Envelope) -> SubmissionResponse:
        """Submit one envelope and return the registry response."""
        token = await self.token_provider.get_token()

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.url,
                    json=envelope.to_wire(),
                    headers={"Authorization": token.bearer()}
                )
        except httpx.HTTPError as e:
            self.logger.error("Registry HTTP error", error=str(e), url=self.url)
            raise ExternalServiceError(
                "registry",
                "Registry unavailable",
                details={"http_error": str(e)}
            ) from e

        if response.status_code >= 400:
            details: Dict[str, Any] = {"status_code": response.status_code}
            remote = self._parse(response)
            if remote is not None:
                details.update(remote.model_dump(exclude_none=True))
            self.logger.warning(
                "Registry rejected submission",
                status_code=response.status_code,
                code=details.get("code"),
                document_format=envelope.document_format.value
            )
            raise ExternalServiceError(
                "registry",
                f"Registry error: {response.status_code}",
                details=details
            )

        result = self._parse(response)
        if result is None:
            raise ExternalServiceError(
                "registry",
                "Malformed registry response",
                details={"status_code": response.status_code}
            )
        return result

    def _parse(self, response: httpx.Response) -> Optional[SubmissionResponse]:
        """Parse a registry body, None when it is not a JSON object."""
        try:
            return SubmissionResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            self.logger.debug("Unparseable registry body", status_code=response.status_code, error=str(e))
            return None
