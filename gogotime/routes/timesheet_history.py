# GoGoTime - Timesheet History Routes

import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from gogotime.database import get_db
from gogotime.dependencies import get_client_ip, get_current_user
from gogotime.models import User, HistoryTargetType
from gogotime.schemas import HistoryResponse
from gogotime.services import TimesheetHistoryService


router = APIRouter(prefix="/timesheet-history", tags=["timesheet-history"])


def get_service(
    request: Request,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> TimesheetHistoryService:
    return TimesheetHistoryService(db, user, get_client_ip(request))


@router.get("/mine", response_model=List[HistoryResponse])
def my_changes(
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    service: TimesheetHistoryService = Depends(get_service),
):
    """Changes made by the caller, newest first."""
    return [HistoryResponse.from_model(row) for row in service.get_my_changes(limit, offset)]


@router.get("/recent", response_model=List[HistoryResponse])
def recent_changes(
    hours: int = Query(24, ge=1, le=24 * 31),
    target_type: Optional[HistoryTargetType] = Query(None),
    limit: int = Query(100, ge=1, le=500),
    service: TimesheetHistoryService = Depends(get_service),
):
    rows = service.get_recent_changes(hours=hours, target_type=target_type, limit=limit)
    return [HistoryResponse.from_model(row) for row in rows]


@router.get("/{target_type}/{target_id}", response_model=List[HistoryResponse])
def record_history(
    target_type: HistoryTargetType,
    target_id: uuid.UUID,
    service: TimesheetHistoryService = Depends(get_service),
):
    """Full trail of one record, oldest first."""
    return [HistoryResponse.from_model(row) for row in service.get_record_history(target_type, target_id)]
