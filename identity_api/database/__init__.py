"""
Database module for SQLAlchemy ORM integration.

This module provides database configuration, models and the repository
adapters for the identity aggregates.
"""

from .config import (
    get_database_url,
    create_engine,
    create_session_factory,
    create_tables,
    get_session,
    get_session_factory,
    init_database,
    close_database,
)
from .base import Base
from .models import PermissionModel, RoleModel, UserModel, role_permissions
from .repositories import (
    SQLAlchemyPermissionRepository,
    SQLAlchemyRoleRepository,
    SQLAlchemyUserRepository,
)

__all__ = [
    # Database configuration
    "get_database_url",
    "create_engine",
    "create_session_factory",
    "create_tables",
    "get_session",
    "get_session_factory",
    "init_database",
    "close_database",

    # Base model
    "Base",

    # Models
    "PermissionModel",
    "RoleModel",
    "UserModel",
    "role_permissions",

    # Repositories
    "SQLAlchemyPermissionRepository",
    "SQLAlchemyRoleRepository",
    "SQLAlchemyUserRepository",
]
