# GoGoTime - Authentication Dependencies
# FastAPI dependencies for protecting routes

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from gogotime.database import get_db
from gogotime.errors import AuthenticationError
from gogotime.models import User
from gogotime.services.auth import AuthService


# auto_error off so a missing header becomes our own 401 body
bearer_scheme = HTTPBearer(auto_error=False)


def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[str]:
    """
    Extract the raw token from ``Authorization: Bearer <jwt>``.

    Returns None if the header is absent or uses another scheme.
    """
    if credentials is None:
        return None
    return credentials.credentials


def get_client_ip(request: Request) -> Optional[str]:
    return request.client.host if request.client else None


def get_current_user_optional(
    token: Optional[str] = Depends(get_bearer_token),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """
    Get the current user if the token is valid, None otherwise.

    Usage:
        @router.get("/health")
        def health(user: Optional[User] = Depends(get_current_user_optional)):
            ...
    """
    if not token:
        return None

    user = AuthService(db).resolve_principal(token)
    if user is not None:
        # persist last_seen_at
        db.commit()
    return user


def get_current_user(
    user: Optional[User] = Depends(get_current_user_optional),
) -> User:
    """
    Get the authenticated user or raise 401.

    Usage:
        @router.get("/timesheets")
        def list_timesheets(user: User = Depends(get_current_user)):
            # user is guaranteed to be authenticated
            ...
    """
    if user is None:
        raise AuthenticationError("Not authenticated")
    return user
