# GoGoTime - Timesheet and Entry Schemas

import uuid
from datetime import date, datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from gogotime.models import TimesheetStatus, WorkMode
from .common import EntityResponse, VersionedUpdate


MINUTES_PER_DAY = 24 * 60


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Offset-aware timestamps become naive UTC, the form stored in the database."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class RejectRequest(BaseModel):
    """Body of every reject transition."""
    reason: str = Field(..., min_length=1, max_length=2000)

    @field_validator("reason")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("reason must not be blank")
        return v


class ApprovalFields(EntityResponse):
    status: TimesheetStatus
    submitted_at: Optional[datetime] = None
    submitted_by_user_id: Optional[uuid.UUID] = None
    approved_at: Optional[datetime] = None
    approver_id: Optional[uuid.UUID] = None
    rejected_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    invoiced_at: Optional[datetime] = None


# ---- Timesheets -----------------------------------------------------------

class TimesheetCreate(BaseModel):
    """user_id defaults to the caller."""
    user_id: Optional[uuid.UUID] = None
    period_start: date
    period_end: date
    notes: Optional[str] = Field(None, max_length=2000)

    @model_validator(mode="after")
    def check_period(self) -> "TimesheetCreate":
        if self.period_end < self.period_start:
            raise ValueError("period_end must be on or after period_start")
        return self


class TimesheetResponse(ApprovalFields):
    user_id: uuid.UUID
    period_start: date
    period_end: date
    total_minutes: int
    notes: Optional[str] = None


# ---- Entries --------------------------------------------------------------

class TimesheetEntryCreate(BaseModel):
    """
    Either started_at + ended_at (duration derived) or duration_min + day.

    day defaults to the date of started_at.
    """
    user_id: Optional[uuid.UUID] = None
    timesheet_id: Optional[uuid.UUID] = None
    action_code_id: uuid.UUID
    work_mode: WorkMode = WorkMode.OFFICE
    country: str = Field(..., pattern=r"^[A-Za-z]{2}$")
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    duration_min: Optional[int] = Field(None, ge=0, le=MINUTES_PER_DAY)
    day: Optional[date] = None
    note: Optional[str] = Field(None, max_length=2000)

    @field_validator("country")
    @classmethod
    def upper_country(cls, v: str) -> str:
        return v.upper()

    @field_validator("started_at", "ended_at")
    @classmethod
    def normalize_times(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v)

    @model_validator(mode="after")
    def check_times(self) -> "TimesheetEntryCreate":
        if (self.started_at is None) != (self.ended_at is None):
            raise ValueError("started_at and ended_at must be given together")

        if self.started_at is not None:
            if self.ended_at <= self.started_at:
                raise ValueError("ended_at must be after started_at")
            minutes = int((self.ended_at - self.started_at).total_seconds() // 60)
            if minutes > MINUTES_PER_DAY:
                raise ValueError("an entry cannot exceed 24 hours")
            if self.day is None:
                self.day = self.started_at.date()
        else:
            if self.duration_min is None:
                raise ValueError("duration_min is required without started_at/ended_at")
            if self.day is None:
                raise ValueError("day is required without started_at/ended_at")

        return self


class TimesheetEntryUpdate(VersionedUpdate):
    action_code_id: Optional[uuid.UUID] = None
    work_mode: Optional[WorkMode] = None
    country: Optional[str] = Field(None, pattern=r"^[A-Za-z]{2}$")
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    duration_min: Optional[int] = Field(None, ge=0, le=MINUTES_PER_DAY)
    day: Optional[date] = None
    note: Optional[str] = Field(None, max_length=2000)

    @field_validator("country")
    @classmethod
    def upper_country(cls, v: Optional[str]) -> Optional[str]:
        return v.upper() if v else v

    @field_validator("started_at", "ended_at")
    @classmethod
    def normalize_times(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v)

    @model_validator(mode="after")
    def check_times(self) -> "TimesheetEntryUpdate":
        if self.started_at is not None and self.ended_at is not None and self.ended_at <= self.started_at:
            raise ValueError("ended_at must be after started_at")
        return self


class TimesheetEntryResponse(ApprovalFields):
    user_id: uuid.UUID
    timesheet_id: Optional[uuid.UUID] = None
    action_code_id: uuid.UUID
    work_mode: WorkMode
    country: str
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    duration_min: int
    day: date
    note: Optional[str] = None
