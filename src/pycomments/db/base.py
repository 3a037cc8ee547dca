"""
SQLAlchemy declarative base and model mixins.

Every model must subclass Base so its table lands in Base.metadata,
which both init scripts and migrations read.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Declarative base for PyComments models."""


class TimestampMixin:
    """Adds created_at/updated_at, filled in on insert and update."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=func.now(),
        onupdate=utc_now,
        nullable=False,
    )


# Largest value a 32-bit signed INTEGER column holds
MAX_INTEGER_ID = 2**31 - 1


class IntegerIDMixin:
    """
    Auto-incrementing integer primary key.

    Comment and content item IDs appear in URLs and fragment
    identifiers, so they stay small integers.
    """

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)


class SoftDeleteMixin:
    """Rows are marked with deleted_at instead of being removed."""

    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        default=None,
        nullable=True,
    )

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def soft_delete(self) -> None:
        self.deleted_at = utc_now()


class BaseModel(Base, IntegerIDMixin, TimestampMixin):
    """Abstract model with an integer ID and timestamps."""

    __abstract__ = True


class SoftDeleteModel(BaseModel, SoftDeleteMixin):
    """Abstract model that is soft-deleted."""

    __abstract__ = True
