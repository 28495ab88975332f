"""
Bearer token providers for the registry client.
"""

from typing import Protocol, Union

from pydantic import SecretStr

from shared.logging import get_logger
from shared.errors import AuthenticationError
from ..documents.models import AuthToken


class TokenProvider(Protocol):
    """Supplies the token used for one registry call."""

    async def get_token(self) -> AuthToken:
        ...


class StaticTokenProvider:
    """Token provider backed by a configured value."""

    def __init__(self, token: Union[str, SecretStr]):
        if not isinstance(token, SecretStr):
            token = SecretStr(token)
        self._token = token
        self.logger = get_logger("submission.token_provider")

    async def get_token(self) -> AuthToken:
        """Return the configured token."""
        if not self._token.get_secret_value():
            self.logger.error("No registry auth token configured")
            raise AuthenticationError("Registry auth token is not configured")
        return AuthToken(value=self._token)
