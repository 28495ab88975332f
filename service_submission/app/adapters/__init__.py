"""
Adapters package for the submission service.

Contains the HTTP client for the goods registry and the token providers it
authenticates with. These adapters encapsulate:

- Base URLs and request shapes
- Bearer authentication
- Error handling that maps to shared errors

Keep adapters thin and side-effect free outside of explicit calls.
"""

from .registry_client import RegistryClient
from .token_provider import StaticTokenProvider, TokenProvider

__all__ = [
    "RegistryClient",
    "StaticTokenProvider",
    "TokenProvider",
]
