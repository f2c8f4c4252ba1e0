"""
Database models for users, roles and permissions.

Roles and permissions are linked through the ``role_permissions``
association table, managed explicitly by the role repository.
"""

from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Table, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, IdentifierMixin, TimestampMixin, utc_now


role_permissions = Table(
    "role_permissions",
    Base.metadata,
    Column("role_id", String(36), ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
    Column("permission_id", String(36), ForeignKey("permissions.id", ondelete="CASCADE"), primary_key=True),
)


class PermissionModel(Base, IdentifierMixin):
    """A ``resource:action`` grant."""

    __tablename__ = "permissions"
    __table_args__ = (
        UniqueConstraint("resource", "action", name="uq_permissions_resource_action"),
    )

    resource: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        comment="Resource token or *"
    )

    action: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        comment="Action token or *"
    )

    description: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Permission description"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
        comment="Record creation timestamp"
    )


class RoleModel(Base, IdentifierMixin, TimestampMixin):
    """Named permission bundle."""

    __tablename__ = "roles"

    name: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        nullable=False,
        index=True,
        comment="Unique uppercase role name"
    )

    description: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Role description"
    )

    is_system: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
        comment="Seeded roles that cannot be edited or deleted"
    )


class UserModel(Base, IdentifierMixin, TimestampMixin):
    """Authenticatable account."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        comment="Lowercased email address"
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="bcrypt password hash"
    )

    first_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="First name"
    )

    last_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Last name"
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
        index=True,
        comment="Account active status"
    )

    role_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("roles.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
        comment="The user's single role"
    )
