"""
Bearer token issuance and verification with PyJWT.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt

from identity_api.services.ports import InvalidTokenError, TokenService

logger = logging.getLogger(__name__)


class JWTTokenService(TokenService):
    """
    HMAC-signed JWT access tokens.

    Tokens carry only the user id plus the standard ``iat``/``exp`` claims.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256", expires_in: timedelta = timedelta(days=7)):
        """
        Initialize the token service.

        Args:
            secret_key: Signing secret
            algorithm: HMAC algorithm
            expires_in: Token lifetime
        """
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expires_in = expires_in

    def sign(self, payload: Dict[str, Any]) -> str:
        """
        Create a signed access token.

        Args:
            payload: Claims to encode, e.g. ``{"userId": ...}``

        Returns:
            Encoded JWT
        """
        now = datetime.now(timezone.utc)
        to_encode = payload.copy()
        to_encode.update({
            "iat": now,
            "exp": now + self.expires_in,
        })
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> Dict[str, Any]:
        """
        Decode and check a token.

        Args:
            token: Encoded JWT

        Returns:
            Decoded claims

        Raises:
            InvalidTokenError: If the token is expired, malformed or badly signed
        """
        try:
            return jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError as e:
            logger.warning("JWT token expired", extra={"event_type": "token_expired"})
            raise InvalidTokenError("Token expired") from e
        except jwt.InvalidTokenError as e:
            logger.warning(f"Invalid JWT token: {e}", extra={"event_type": "token_invalid"})
            raise InvalidTokenError("Invalid token") from e
