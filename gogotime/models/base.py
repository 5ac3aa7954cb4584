# GoGoTime - Base Model and Mixins

import enum
import uuid
from datetime import datetime, timezone
from typing import Optional, Type

from sqlalchemy import DateTime, Enum, ForeignKey, Integer, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, declared_attr


def utcnow() -> datetime:
    """Naive UTC timestamp, the format stored in every DateTime column."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def StringEnum(enum_cls: Type[enum.Enum], length: int) -> Enum:
    """Enum stored as VARCHAR of its values (portable across backends)."""
    return Enum(
        enum_cls,
        native_enum=False,
        length=length,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
    )


class Base(DeclarativeBase):
    """Base class for all models."""


class UuidPrimaryKeyMixin:
    """UUID primary key generated on the application side."""

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )


class TimestampMixin:
    """Mixin that adds created_at / updated_at timestamps to models."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=utcnow,
        nullable=False
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=utcnow,
        onupdate=utcnow,
        nullable=False
    )


class AuditMixin(TimestampMixin):
    """
    Mixin that adds full audit fields to models.
    Includes timestamps, who created / last updated the row, and a version counter.

    The version counter is bumped by the repositories on every update. Update
    payloads may carry the version they were based on; a mismatch is refused.
    """

    created_by_user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        nullable=True
    )

    updated_by_user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        nullable=True
    )

    version: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=1
    )


class SoftDeleteMixin:
    """
    Soft delete support.

    Rows are never removed; deleted_at is set instead and every normal
    query filters on deleted_at IS NULL.
    """

    deleted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime,
        nullable=True,
        index=True
    )

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def soft_delete(self, deleted_by_id: Optional[uuid.UUID] = None) -> None:
        """Mark this row as deleted."""
        self.deleted_at = utcnow()
        if deleted_by_id is not None and hasattr(self, "updated_by_user_id"):
            self.updated_by_user_id = deleted_by_id

    def restore(self) -> None:
        """Restore a soft-deleted row."""
        self.deleted_at = None


class TenantMixin:
    """Company scoping column shared by every tenant entity."""

    @declared_attr
    def company_id(cls) -> Mapped[uuid.UUID]:
        return mapped_column(
            Uuid,
            ForeignKey("companies.id", ondelete="RESTRICT"),
            nullable=False,
            index=True
        )


class EntityBase(UuidPrimaryKeyMixin, AuditMixin, SoftDeleteMixin, Base):
    """Abstract base for audited, soft-deletable entities."""

    __abstract__ = True


class TenantEntity(TenantMixin, EntityBase):
    """Abstract base for company-scoped entities."""

    __abstract__ = True
