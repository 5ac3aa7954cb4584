# GoGoTime - Leave Request Routes

import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from gogotime.database import get_db
from gogotime.dependencies import get_client_ip, get_current_user
from gogotime.models import User
from gogotime.schemas import LeaveRequestCreate, LeaveRequestUpdate, LeaveRequestResponse
from gogotime.services import LeaveRequestService


router = APIRouter(prefix="/leave-requests", tags=["leave-requests"])


def get_service(
    request: Request,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> LeaveRequestService:
    return LeaveRequestService(db, user, get_client_ip(request))


@router.get("", response_model=List[LeaveRequestResponse])
def list_leave_requests(
    user_id: Optional[uuid.UUID] = Query(None, description="Defaults to the caller"),
    service: LeaveRequestService = Depends(get_service),
):
    return service.list_leave_requests(user_id)


@router.get("/{leave_request_id}", response_model=LeaveRequestResponse)
def get_leave_request(leave_request_id: uuid.UUID, service: LeaveRequestService = Depends(get_service)):
    return service.get_leave_request(leave_request_id)


@router.post("", response_model=LeaveRequestResponse, status_code=status.HTTP_201_CREATED)
def create_leave_request(payload: LeaveRequestCreate, service: LeaveRequestService = Depends(get_service)):
    leave = service.create_leave_request(payload)
    service.db.commit()
    return leave


@router.patch("/{leave_request_id}", response_model=LeaveRequestResponse)
def update_leave_request(
    leave_request_id: uuid.UUID,
    payload: LeaveRequestUpdate,
    service: LeaveRequestService = Depends(get_service),
):
    """Edit a request, or approve / reject it through ``status``."""
    leave = service.update_leave_request(leave_request_id, payload)
    service.db.commit()
    return leave


@router.delete("/{leave_request_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_leave_request(leave_request_id: uuid.UUID, service: LeaveRequestService = Depends(get_service)):
    service.delete_leave_request(leave_request_id)
    service.db.commit()
