# GoGoTime - Timesheet and Timesheet Entry Models

import enum
import uuid
from datetime import datetime, date
from typing import List, Optional, TYPE_CHECKING

from sqlalchemy import (
    String, Integer, DateTime, Date, Text,
    ForeignKey, Uuid, Index, UniqueConstraint, CheckConstraint
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import TenantEntity, StringEnum

if TYPE_CHECKING:
    from .user import User
    from .action_code import ActionCode


class TimesheetStatus(str, enum.Enum):
    """
    Approval states shared by timesheets and their entries.

        DRAFT -> SUBMITTED -> APPROVED -> INVOICED
                          \\-> REJECTED
    """
    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    INVOICED = "INVOICED"


class WorkMode(str, enum.Enum):
    OFFICE = "office"
    REMOTE = "remote"
    HYBRID = "hybrid"


class ApprovalMixin:
    """Status column plus the who/when of each workflow step."""

    status: Mapped[TimesheetStatus] = mapped_column(
        StringEnum(TimesheetStatus, 16),
        nullable=False,
        default=TimesheetStatus.DRAFT
    )

    submitted_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    submitted_by_user_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)

    approved_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    approver_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)

    rejected_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    rejection_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    invoiced_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)


class Timesheet(ApprovalMixin, TenantEntity):
    """
    A user's timesheet for one period (usually a week).

    total_minutes is a roll-up of the live entries attached to the
    timesheet and is recomputed whenever an entry changes.
    """

    __tablename__ = "timesheets"

    __table_args__ = (
        UniqueConstraint(
            "company_id", "user_id", "period_start", "period_end",
            name="uq_timesheets_company_user_period",
        ),
        Index("ix_timesheets_company_status", "company_id", "status"),
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )

    period_start: Mapped[date] = mapped_column(
        Date,
        nullable=False
    )

    period_end: Mapped[date] = mapped_column(
        Date,
        nullable=False
    )

    total_minutes: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0
    )

    notes: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True
    )

    user: Mapped["User"] = relationship(
        "User",
        foreign_keys=[user_id]
    )

    entries: Mapped[List["TimesheetEntry"]] = relationship(
        "TimesheetEntry",
        back_populates="timesheet"
    )

    def __repr__(self) -> str:
        return f"<Timesheet {self.period_start}..{self.period_end} {self.status.value}>"

    def covers(self, day: date) -> bool:
        return self.period_start <= day <= self.period_end


class TimesheetEntry(ApprovalMixin, TenantEntity):
    """
    Time logged by a user on one day against one action code.

    Entries can specify either:
        - started_at and ended_at (duration_min is calculated)
        - duration_min directly
    duration_min is stored for fast totals and bounded to a single day.
    """

    __tablename__ = "timesheet_entries"

    __table_args__ = (
        CheckConstraint("duration_min BETWEEN 0 AND 1440", name="ck_timesheet_entries_duration"),
        Index("ix_timesheet_entries_company_user_day", "company_id", "user_id", "day"),
        Index("ix_timesheet_entries_company_timesheet", "company_id", "timesheet_id"),
    )

    # Whose time is this?
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False
    )

    timesheet_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("timesheets.id", ondelete="SET NULL"),
        nullable=True
    )

    # What type of time?
    action_code_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("action_codes.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )

    work_mode: Mapped[WorkMode] = mapped_column(
        StringEnum(WorkMode, 8),
        nullable=False,
        default=WorkMode.OFFICE
    )

    # ISO 3166 alpha-2
    country: Mapped[str] = mapped_column(
        String(2),
        nullable=False
    )

    started_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    ended_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    duration_min: Mapped[int] = mapped_column(
        Integer,
        nullable=False
    )

    # Denormalized day for quick filtering
    day: Mapped[date] = mapped_column(
        Date,
        nullable=False
    )

    note: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True
    )

    # Relationships
    user: Mapped["User"] = relationship(
        "User",
        foreign_keys=[user_id]
    )

    timesheet: Mapped[Optional["Timesheet"]] = relationship(
        "Timesheet",
        back_populates="entries"
    )

    action_code: Mapped["ActionCode"] = relationship(
        "ActionCode"
    )

    def __repr__(self) -> str:
        status = " [DELETED]" if self.is_deleted else ""
        if self.started_at and self.ended_at:
            return (
                f"<TimesheetEntry {self.day} {self.started_at.strftime('%H:%M')}-"
                f"{self.ended_at.strftime('%H:%M')} {self.status.value}{status}>"
            )
        return f"<TimesheetEntry {self.day} {self.duration_min}min {self.status.value}{status}>"

    @property
    def calculated_minutes(self) -> Optional[int]:
        """Calculate minutes from started_at and ended_at."""
        if not self.started_at or not self.ended_at:
            return None

        delta = self.ended_at - self.started_at
        return int(delta.total_seconds() // 60)

    def set_times_and_compute_duration(self, started_at: datetime, ended_at: datetime) -> None:
        """Set the work period and derive duration_min from it."""
        self.started_at = started_at
        self.ended_at = ended_at
        self.duration_min = self.calculated_minutes
