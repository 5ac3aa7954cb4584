# GoGoTime - Timesheet Routes
# Timesheet CRUD and the approval workflow

import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from gogotime.database import get_db
from gogotime.dependencies import get_client_ip, get_current_user
from gogotime.models import User, TimesheetStatus
from gogotime.schemas import RejectRequest, TimesheetCreate, TimesheetResponse
from gogotime.services import TimesheetService


router = APIRouter(prefix="/timesheets", tags=["timesheets"])


def get_service(
    request: Request,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> TimesheetService:
    return TimesheetService(db, user, get_client_ip(request))


@router.get("", response_model=List[TimesheetResponse])
def list_timesheets(
    user_id: Optional[uuid.UUID] = Query(None, description="Defaults to the caller"),
    status_filter: Optional[TimesheetStatus] = Query(None, alias="status"),
    all_users: bool = Query(False, description="Every user of the company"),
    service: TimesheetService = Depends(get_service),
):
    return service.list_timesheets(user_id=user_id, status=status_filter, all_users=all_users)


@router.get("/{timesheet_id}", response_model=TimesheetResponse)
def get_timesheet(timesheet_id: uuid.UUID, service: TimesheetService = Depends(get_service)):
    return service.get_timesheet(timesheet_id)


@router.post("", response_model=TimesheetResponse, status_code=status.HTTP_201_CREATED)
def create_timesheet(payload: TimesheetCreate, service: TimesheetService = Depends(get_service)):
    sheet = service.create_timesheet(payload)
    service.db.commit()
    return sheet


# Workflow

@router.post("/{timesheet_id}/submit", response_model=TimesheetResponse)
def submit_timesheet(timesheet_id: uuid.UUID, service: TimesheetService = Depends(get_service)):
    sheet = service.submit_timesheet(timesheet_id)
    service.db.commit()
    return sheet


@router.post("/{timesheet_id}/approve", response_model=TimesheetResponse)
def approve_timesheet(timesheet_id: uuid.UUID, service: TimesheetService = Depends(get_service)):
    sheet = service.approve_timesheet(timesheet_id)
    service.db.commit()
    return sheet


@router.post("/{timesheet_id}/reject", response_model=TimesheetResponse)
def reject_timesheet(
    timesheet_id: uuid.UUID,
    payload: RejectRequest,
    service: TimesheetService = Depends(get_service),
):
    sheet = service.reject_timesheet(timesheet_id, payload)
    service.db.commit()
    return sheet


@router.post("/{timesheet_id}/invoice", response_model=TimesheetResponse)
def invoice_timesheet(timesheet_id: uuid.UUID, service: TimesheetService = Depends(get_service)):
    sheet = service.invoice_timesheet(timesheet_id)
    service.db.commit()
    return sheet
