# GoGoTime - Role Permission Routes
# Granting and revoking permissions

import uuid

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from gogotime.database import get_db
from gogotime.dependencies import get_client_ip, get_current_user
from gogotime.models import User
from gogotime.schemas import RolePermissionCreate, RolePermissionResponse
from gogotime.services import RolePermissionService


router = APIRouter(prefix="/role-permissions", tags=["role-permissions"])


def get_service(
    request: Request,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> RolePermissionService:
    return RolePermissionService(db, user, get_client_ip(request))


@router.post("", response_model=RolePermissionResponse, status_code=status.HTTP_201_CREATED)
def create_role_permission(
    payload: RolePermissionCreate,
    service: RolePermissionService = Depends(get_service),
):
    """Grant a permission to a role. Granting twice returns the same grant."""
    grant = service.create_role_permission(payload)
    service.db.commit()
    return RolePermissionResponse.from_grant(grant)


@router.delete("/{role_permission_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_role_permission(
    role_permission_id: uuid.UUID,
    service: RolePermissionService = Depends(get_service),
):
    service.delete_role_permission(role_permission_id)
    service.db.commit()
