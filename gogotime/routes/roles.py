# GoGoTime - Role Routes

import uuid
from typing import List

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from gogotime.database import get_db
from gogotime.dependencies import get_client_ip, get_current_user
from gogotime.models import User
from gogotime.schemas import (
    RoleCreate,
    RoleUpdate,
    RoleResponse,
    RoleWithPermissionsResponse,
    RolePermissionResponse,
)
from gogotime.services import RoleService, RolePermissionService


router = APIRouter(prefix="/roles", tags=["roles"])


def get_service(
    request: Request,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> RoleService:
    return RoleService(db, user, get_client_ip(request))


@router.get("", response_model=List[RoleResponse])
def list_roles(service: RoleService = Depends(get_service)):
    return service.list_roles()


@router.get("/{role_id}", response_model=RoleWithPermissionsResponse)
def get_role(role_id: uuid.UUID, service: RoleService = Depends(get_service)):
    role = service.get_role(role_id)
    response = RoleWithPermissionsResponse.model_validate(role)
    response.permissions = service.get_role_permission_names(role_id)
    return response


@router.get("/{role_id}/permissions", response_model=List[RolePermissionResponse])
def list_role_permissions(role_id: uuid.UUID, service: RoleService = Depends(get_service)):
    grants = RolePermissionService(service.db, service.current_user).list_role_permissions(role_id)
    return [RolePermissionResponse.from_grant(g) for g in grants]


@router.post("", response_model=RoleResponse, status_code=status.HTTP_201_CREATED)
def create_role(payload: RoleCreate, service: RoleService = Depends(get_service)):
    role = service.create_role(payload)
    service.db.commit()
    return role


@router.patch("/{role_id}", response_model=RoleResponse)
def update_role(role_id: uuid.UUID, payload: RoleUpdate, service: RoleService = Depends(get_service)):
    role = service.update_role(role_id, payload)
    service.db.commit()
    return role


@router.delete("/{role_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_role(role_id: uuid.UUID, service: RoleService = Depends(get_service)):
    service.delete_role(role_id)
    service.db.commit()
