"""
Collaborator interfaces used by the use cases.

Password hashing and token signing live outside the core; the concrete
adapters are in ``identity_api.auth``.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict


class PasswordHashService(ABC):
    """Hashes and verifies passwords."""

    @abstractmethod
    async def hash(self, plaintext: str) -> str:
        """Return a salted hash of ``plaintext``."""

    @abstractmethod
    async def compare(self, plaintext: str, hashed: str) -> bool:
        """Timing-safe comparison of ``plaintext`` against ``hashed``."""


class TokenService(ABC):
    """Issues and checks bearer tokens."""

    @abstractmethod
    def sign(self, payload: Dict[str, Any]) -> str:
        """Sign ``payload`` into an opaque bearer token. Expiry is configured by the adapter."""

    @abstractmethod
    def verify(self, token: str) -> Dict[str, Any]:
        """
        Decode a bearer token.

        Raises:
            InvalidTokenError: If the token is malformed, tampered with or expired
        """


class InvalidTokenError(Exception):
    """Raised when a bearer token cannot be trusted."""
