# GoGoTime - Timesheet History Model

import enum
import json
import uuid
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import String, DateTime, Text, ForeignKey, Uuid, Index
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, UuidPrimaryKeyMixin, TenantMixin, StringEnum, utcnow


class HistoryTargetType(str, enum.Enum):
    TIMESHEET = "Timesheet"
    TIMESHEET_ENTRY = "TimesheetEntry"
    ACTION_CODE = "ActionCode"
    LEAVE_REQUEST = "LeaveRequest"
    PERMISSION = "Permission"
    ROLE_PERMISSION = "RolePermission"


class HistoryAction(str, enum.Enum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"
    INVOICED = "invoiced"


class TimesheetHistory(UuidPrimaryKeyMixin, TenantMixin, Base):
    """
    Append-only trail of what happened to a record and who did it.

    Rows are written by HistoryService inside the same unit of work as the
    change they describe, and are never updated or deleted afterwards.

        - created:  diff holds the new record
        - updated:  diff holds {field: {"old": ..., "new": ...}}
        - deleted:  diff holds the record as it was
        - workflow actions carry an optional reason
    """

    __tablename__ = "timesheet_history"

    __table_args__ = (
        Index("ix_timesheet_history_target", "company_id", "target_type", "target_id"),
    )

    # Owner of the target record
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    target_type: Mapped[HistoryTargetType] = mapped_column(
        StringEnum(HistoryTargetType, 32),
        nullable=False
    )

    target_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        nullable=False
    )

    action: Mapped[HistoryAction] = mapped_column(
        StringEnum(HistoryAction, 16),
        nullable=False,
        index=True
    )

    actor_user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        nullable=True
    )

    reason: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True
    )

    # JSON blobs
    diff: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True
    )

    # "metadata" is reserved on declarative classes
    extra: Mapped[Optional[str]] = mapped_column(
        "metadata",
        Text,
        nullable=True
    )

    ip_address: Mapped[Optional[str]] = mapped_column(
        String(45),
        nullable=True
    )

    occurred_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=utcnow,
        nullable=False,
        index=True
    )

    def __repr__(self) -> str:
        return f"<TimesheetHistory {self.action.value} {self.target_type.value}:{self.target_id}>"

    def get_diff(self) -> Optional[dict]:
        if self.diff:
            return json.loads(self.diff)
        return None

    def get_metadata(self) -> Optional[dict]:
        if self.extra:
            return json.loads(self.extra)
        return None

    def get_changes(self) -> dict[str, tuple[Any, Any]]:
        """
        Return {field_name: (old_value, new_value)}.
        Only meaningful for updates.
        """
        if self.action != HistoryAction.UPDATED:
            return {}

        return {
            field: (change.get("old"), change.get("new"))
            for field, change in (self.get_diff() or {}).items()
        }


def create_history_entry(
    company_id: uuid.UUID,
    target_type: HistoryTargetType,
    target_id: uuid.UUID,
    action: HistoryAction,
    actor_user_id: Optional[uuid.UUID],
    user_id: Optional[uuid.UUID] = None,
    diff: Optional[dict] = None,
    metadata: Optional[dict] = None,
    reason: Optional[str] = None,
    ip_address: Optional[str] = None,
) -> TimesheetHistory:
    """
    Factory function to create a TimesheetHistory row.

    Args:
        company_id: Tenant of the target record
        target_type: Kind of record
        target_id: Primary key of the record
        action: What happened
        actor_user_id: Who did it
        user_id: Owner of the record, when it has one
        diff: JSON-serializable change description
        metadata: Extra JSON-serializable context
        reason: Free text (rejection reason and the like)
        ip_address: Client IP address

    Returns:
        TimesheetHistory instance (not yet added to session)
    """
    return TimesheetHistory(
        company_id=company_id,
        target_type=target_type,
        target_id=target_id,
        action=action,
        actor_user_id=actor_user_id,
        user_id=user_id,
        diff=json.dumps(diff, default=str) if diff else None,
        extra=json.dumps(metadata, default=str) if metadata else None,
        reason=reason,
        ip_address=ip_address,
    )
