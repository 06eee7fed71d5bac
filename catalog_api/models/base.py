"""
Base class, identifier factory and TimestampMixin for all SQLAlchemy ORM models.
"""

from __future__ import annotations

import secrets
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from catalog_shared.config.constants import Identifiers


def new_object_id() -> str:
    """Generate a 24 character hex identifier."""
    return secrets.token_hex(Identifiers.BYTES)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class ObjectIdMixin:
    """String primary key holding a 24 character hex identifier."""

    id: Mapped[str] = mapped_column(
        String(Identifiers.LENGTH), primary_key=True, default=new_object_id
    )


class TimestampMixin:
    """
    Mixin providing audit timestamps.

    Fields added:
    - created_at: set on insert (microsecond resolution keeps insertion order)
    - updated_at: refreshed on every update
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), onupdate=func.now(), nullable=True
    )

    def touch(self) -> None:
        """Mark the row as updated so the version counter is bumped."""
        self.updated_at = utcnow()

    def __repr__(self) -> str:
        class_name = self.__class__.__name__
        id_val = getattr(self, 'id', None)
        return f"<{class_name}(id={id_val})>"
