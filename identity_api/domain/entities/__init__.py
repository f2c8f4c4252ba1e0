"""Aggregate roots of the identity domain."""

from .permission import Permission
from .role import Role
from .user import User

__all__ = ["Permission", "Role", "User"]
