# GoGoTime - Leave Request Model

import enum
import uuid
from datetime import date
from typing import Optional, TYPE_CHECKING

from sqlalchemy import Date, Text, ForeignKey, Uuid, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import TenantEntity, StringEnum

if TYPE_CHECKING:
    from .user import User


class LeaveRequestStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"


class LeaveType(str, enum.Enum):
    PTO = "PTO"
    SICK = "SICK"
    UNPAID = "UNPAID"


class LeaveRequest(TenantEntity):
    """
    Leave requested by a user for a date range.

    The owner may manage their own requests; acting on another user's
    request needs the matching *_other_leave_request permission.
    """

    __tablename__ = "leave_requests"

    __table_args__ = (
        Index("ix_leave_requests_company_user", "company_id", "user_id"),
        Index("ix_leave_requests_company_dates", "company_id", "start_date", "end_date"),
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False
    )

    start_date: Mapped[date] = mapped_column(
        Date,
        nullable=False
    )

    end_date: Mapped[date] = mapped_column(
        Date,
        nullable=False
    )

    leave_type: Mapped[LeaveType] = mapped_column(
        StringEnum(LeaveType, 20),
        nullable=False
    )

    status: Mapped[LeaveRequestStatus] = mapped_column(
        StringEnum(LeaveRequestStatus, 20),
        nullable=False,
        default=LeaveRequestStatus.PENDING
    )

    reason: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True
    )

    rejection_reason: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True
    )

    user: Mapped["User"] = relationship(
        "User",
        foreign_keys=[user_id]
    )

    def __repr__(self) -> str:
        return f"<LeaveRequest {self.leave_type.value} {self.start_date}..{self.end_date} {self.status.value}>"

    @property
    def days(self) -> int:
        """Calendar days covered, inclusive."""
        return (self.end_date - self.start_date).days + 1
