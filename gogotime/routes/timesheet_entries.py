# GoGoTime - Timesheet Entry Routes
# Time logging and per-entry workflow

import uuid
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from gogotime.database import get_db
from gogotime.dependencies import get_client_ip, get_current_user
from gogotime.models import User, TimesheetStatus
from gogotime.schemas import (
    RejectRequest,
    TimesheetEntryCreate,
    TimesheetEntryUpdate,
    TimesheetEntryResponse,
)
from gogotime.services import TimesheetEntryService


router = APIRouter(prefix="/timesheet-entries", tags=["timesheet-entries"])


def get_service(
    request: Request,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> TimesheetEntryService:
    return TimesheetEntryService(db, user, get_client_ip(request))


@router.get("", response_model=List[TimesheetEntryResponse])
def list_entries(
    user_id: Optional[uuid.UUID] = Query(None),
    timesheet_id: Optional[uuid.UUID] = Query(None),
    status_filter: Optional[TimesheetStatus] = Query(None, alias="status"),
    date_from: Optional[date] = Query(None, description="Date in YYYY-MM-DD format"),
    date_to: Optional[date] = Query(None, description="Date in YYYY-MM-DD format"),
    service: TimesheetEntryService = Depends(get_service),
):
    return service.list_entries(
        user_id=user_id,
        timesheet_id=timesheet_id,
        status=status_filter,
        date_from=date_from,
        date_to=date_to,
    )


@router.get("/{entry_id}", response_model=TimesheetEntryResponse)
def get_entry(entry_id: uuid.UUID, service: TimesheetEntryService = Depends(get_service)):
    return service.get_entry(entry_id)


@router.post("", response_model=TimesheetEntryResponse, status_code=status.HTTP_201_CREATED)
def create_entry(payload: TimesheetEntryCreate, service: TimesheetEntryService = Depends(get_service)):
    entry = service.create_entry(payload)
    service.db.commit()
    return entry


@router.patch("/{entry_id}", response_model=TimesheetEntryResponse)
def update_entry(
    entry_id: uuid.UUID,
    payload: TimesheetEntryUpdate,
    service: TimesheetEntryService = Depends(get_service),
):
    entry = service.update_entry(entry_id, payload)
    service.db.commit()
    return entry


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_entry(entry_id: uuid.UUID, service: TimesheetEntryService = Depends(get_service)):
    service.delete_entry(entry_id)
    service.db.commit()


# Workflow

@router.post("/{entry_id}/submit", response_model=TimesheetEntryResponse)
def submit_entry(entry_id: uuid.UUID, service: TimesheetEntryService = Depends(get_service)):
    entry = service.submit_entry(entry_id)
    service.db.commit()
    return entry


@router.post("/{entry_id}/approve", response_model=TimesheetEntryResponse)
def approve_entry(entry_id: uuid.UUID, service: TimesheetEntryService = Depends(get_service)):
    entry = service.approve_entry(entry_id)
    service.db.commit()
    return entry


@router.post("/{entry_id}/reject", response_model=TimesheetEntryResponse)
def reject_entry(
    entry_id: uuid.UUID,
    payload: RejectRequest,
    service: TimesheetEntryService = Depends(get_service),
):
    entry = service.reject_entry(entry_id, payload)
    service.db.commit()
    return entry


@router.post("/{entry_id}/invoice", response_model=TimesheetEntryResponse)
def invoice_entry(entry_id: uuid.UUID, service: TimesheetEntryService = Depends(get_service)):
    entry = service.invoice_entry(entry_id)
    service.db.commit()
    return entry
