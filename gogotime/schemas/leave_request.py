# GoGoTime - Leave Request Schemas

import uuid
from datetime import date
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from gogotime.models import LeaveRequestStatus, LeaveType
from .common import EntityResponse, VersionedUpdate


class LeaveRequestCreate(BaseModel):
    """user_id defaults to the caller."""
    user_id: Optional[uuid.UUID] = None
    start_date: date
    end_date: date
    leave_type: LeaveType
    reason: Optional[str] = Field(None, max_length=2000)

    @model_validator(mode="after")
    def check_dates(self) -> "LeaveRequestCreate":
        if self.end_date < self.start_date:
            raise ValueError("end_date must be on or after start_date")
        return self


class LeaveRequestUpdate(VersionedUpdate):
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    leave_type: Optional[LeaveType] = None
    status: Optional[LeaveRequestStatus] = None
    reason: Optional[str] = Field(None, max_length=2000)
    rejection_reason: Optional[str] = Field(None, max_length=2000)

    @model_validator(mode="after")
    def check_consistency(self) -> "LeaveRequestUpdate":
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must be on or after start_date")
        if self.status == LeaveRequestStatus.REJECTED and not (self.rejection_reason or "").strip():
            raise ValueError("rejection_reason is required when rejecting")
        return self


class LeaveRequestResponse(EntityResponse):
    user_id: uuid.UUID
    start_date: date
    end_date: date
    leave_type: LeaveType
    status: LeaveRequestStatus
    reason: Optional[str] = None
    rejection_reason: Optional[str] = None
    days: int
