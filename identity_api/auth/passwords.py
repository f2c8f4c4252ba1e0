"""
Password hashing with passlib's bcrypt scheme.
"""

import asyncio
import logging
from typing import Optional

from passlib.context import CryptContext

from identity_api.services.ports import PasswordHashService

logger = logging.getLogger(__name__)

DEFAULT_BCRYPT_ROUNDS = 10


def create_password_context(rounds: int = DEFAULT_BCRYPT_ROUNDS) -> CryptContext:
    """
    Build the passlib context used for hashing.

    Args:
        rounds: bcrypt cost factor

    Returns:
        Configured CryptContext
    """
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


class BcryptPasswordHashService(PasswordHashService):
    """
    bcrypt hashing through passlib.

    Hashing is CPU bound, so it runs in a worker thread to keep the event
    loop free.
    """

    def __init__(self, rounds: int = DEFAULT_BCRYPT_ROUNDS, context: Optional[CryptContext] = None):
        self.pwd_context = context or create_password_context(rounds)

    async def hash(self, plaintext: str) -> str:
        return await asyncio.to_thread(self.pwd_context.hash, plaintext)

    async def compare(self, plaintext: str, hashed: str) -> bool:
        """
        Verify a password against a stored hash.

        Malformed hashes count as a mismatch.
        """
        try:
            return await asyncio.to_thread(self.pwd_context.verify, plaintext, hashed)
        except (ValueError, TypeError) as e:
            logger.warning(
                f"Could not verify password hash: {e}",
                extra={"event_type": "password_hash_unreadable"}
            )
            return False
