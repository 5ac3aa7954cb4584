# GoGoTime - Permission Routes

import uuid
from typing import List

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from gogotime.database import get_db
from gogotime.dependencies import get_client_ip, get_current_user
from gogotime.models import User
from gogotime.schemas import PermissionCreate, PermissionUpdate, PermissionResponse
from gogotime.services import PermissionService


router = APIRouter(prefix="/permissions", tags=["permissions"])


def get_service(
    request: Request,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> PermissionService:
    return PermissionService(db, user, get_client_ip(request))


@router.get("", response_model=List[PermissionResponse])
def list_permissions(service: PermissionService = Depends(get_service)):
    return service.list_permissions()


@router.get("/by-name/{name}", response_model=PermissionResponse)
def get_permission_by_name(name: str, service: PermissionService = Depends(get_service)):
    return service.get_permission_by_name(name)


@router.get("/{permission_id}", response_model=PermissionResponse)
def get_permission(permission_id: uuid.UUID, service: PermissionService = Depends(get_service)):
    return service.get_permission_by_id(permission_id)


@router.post("", response_model=PermissionResponse, status_code=status.HTTP_201_CREATED)
def create_permission(payload: PermissionCreate, service: PermissionService = Depends(get_service)):
    perm = service.create_permission(payload)
    service.db.commit()
    return perm


@router.patch("/{permission_id}", response_model=PermissionResponse)
def update_permission(
    permission_id: uuid.UUID,
    payload: PermissionUpdate,
    service: PermissionService = Depends(get_service),
):
    perm = service.update_permission(permission_id, payload)
    service.db.commit()
    return perm


@router.delete("/{permission_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_permission(permission_id: uuid.UUID, service: PermissionService = Depends(get_service)):
    """Soft-deletes the permission and revokes it from every role."""
    service.delete_permission(permission_id)
    service.db.commit()
