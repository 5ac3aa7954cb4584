# GoGoTime - Authentication Routes
# Login, logout, and the current principal

from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from gogotime.database import get_db
from gogotime.dependencies import get_bearer_token, get_client_ip, get_current_user
from gogotime.models import User
from gogotime.repositories import RolePermissionRepository
from gogotime.schemas import ChangePasswordRequest, LoginRequest, MeResponse, TokenResponse, UserResponse
from gogotime.services.auth import AuthService


router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
def login(
    payload: LoginRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    """
    Exchange credentials for a bearer token.

    Each login opens its own ActiveSession, so tokens can be revoked
    one device at a time.
    """
    user, token, session = AuthService(db).login(
        payload.email,
        payload.password,
        ip=get_client_ip(request),
        user_agent=request.headers.get("user-agent", "")[:500] or None,
        device_id=payload.device_id,
    )
    db.commit()

    return TokenResponse(
        access_token=token,
        expires_at=session.expires_at,
        user=UserResponse.model_validate(user),
    )


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(
    user: User = Depends(get_current_user),
    token: Optional[str] = Depends(get_bearer_token),
    db: Session = Depends(get_db),
):
    """Revoke the session behind the presented token."""
    AuthService(db).logout(token)
    db.commit()


@router.post("/change-password", status_code=status.HTTP_204_NO_CONTENT)
def change_password(
    payload: ChangePasswordRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Replace the caller's password.

    Every session of the user is revoked, including the one making this
    request, so the client has to log in again.
    """
    AuthService(db).change_password(user, payload.current_password, payload.new_password)
    db.commit()


@router.get("/me", response_model=MeResponse)
def me(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    permissions = []
    if user.role_id is not None:
        permissions = RolePermissionRepository(db).permission_names_for_role(user.role_id, user.company_id)

    return MeResponse(
        user=UserResponse.model_validate(user),
        role=user.role_name,
        permissions=permissions,
    )
