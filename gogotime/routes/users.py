# GoGoTime - User Routes

import uuid
from typing import List

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from gogotime.database import get_db
from gogotime.dependencies import get_client_ip, get_current_user
from gogotime.models import User
from gogotime.schemas import UserCreate, UserResponse, UserUpdate
from gogotime.services import UserService


router = APIRouter(prefix="/users", tags=["users"])


def get_service(
    request: Request,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> UserService:
    return UserService(db, user, get_client_ip(request))


@router.get("", response_model=List[UserResponse])
def list_users(service: UserService = Depends(get_service)):
    return service.list_users()


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: uuid.UUID, service: UserService = Depends(get_service)):
    return service.get_user(user_id)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(payload: UserCreate, service: UserService = Depends(get_service)):
    user = service.create_user(payload)
    service.db.commit()
    return user


@router.patch("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: uuid.UUID,
    payload: UserUpdate,
    service: UserService = Depends(get_service),
):
    """Own profile fields, or anyone's with update_user."""
    user = service.update_user(user_id, payload)
    service.db.commit()
    return user


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: uuid.UUID, service: UserService = Depends(get_service)):
    service.delete_user(user_id)
    service.db.commit()


@router.post("/{user_id}/restore", response_model=UserResponse)
def restore_user(user_id: uuid.UUID, service: UserService = Depends(get_service)):
    user = service.restore_user(user_id)
    service.db.commit()
    return user
