"""
Authentication adapters: password hashing and bearer tokens.

The FastAPI guards live in ``identity_api.auth.rbac``.
"""

from .passwords import BcryptPasswordHashService, create_password_context
from .tokens import JWTTokenService

__all__ = [
    "BcryptPasswordHashService",
    "create_password_context",
    "JWTTokenService",
]
