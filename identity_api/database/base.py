"""
Declarative base and shared columns for identity tables.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all database models."""


class IdentifierMixin:
    """String UUID primary key. Ids are generated by the domain."""

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        comment="Primary key UUID"
    )


class TimestampMixin:
    """Creation and update timestamps, set from the domain entities."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
        comment="Record creation timestamp"
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
        comment="Record last update timestamp"
    )
