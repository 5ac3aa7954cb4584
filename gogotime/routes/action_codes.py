# GoGoTime - Action Code Routes
# Action codes and their categories

import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from gogotime.database import get_db
from gogotime.dependencies import get_client_ip, get_current_user
from gogotime.models import User
from gogotime.schemas import (
    ActionCodeCreate,
    ActionCodeUpdate,
    ActionCodeResponse,
    ActionCodeCategoryCreate,
    ActionCodeCategoryUpdate,
    ActionCodeCategoryResponse,
)
from gogotime.services import ActionCodeService, ActionCodeCategoryService


router = APIRouter(prefix="/action-codes", tags=["action-codes"])
categories_router = APIRouter(prefix="/action-code-categories", tags=["action-codes"])


def get_service(
    request: Request,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ActionCodeService:
    return ActionCodeService(db, user, get_client_ip(request))


def get_category_service(
    request: Request,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ActionCodeCategoryService:
    return ActionCodeCategoryService(db, user, get_client_ip(request))


# Action codes

@router.get("", response_model=List[ActionCodeResponse])
def search_action_codes(
    q: Optional[str] = Query(None, description="Matches code or name"),
    category_id: Optional[uuid.UUID] = Query(None),
    loggable_only: bool = Query(False, description="Only codes that accept time"),
    service: ActionCodeService = Depends(get_service),
):
    return service.search(q, category_id, loggable_only)


@router.get("/{action_code_id}", response_model=ActionCodeResponse)
def get_action_code(action_code_id: uuid.UUID, service: ActionCodeService = Depends(get_service)):
    return service.get_action_code(action_code_id)


@router.post("", response_model=ActionCodeResponse, status_code=status.HTTP_201_CREATED)
def create_action_code(payload: ActionCodeCreate, service: ActionCodeService = Depends(get_service)):
    code = service.create_action_code(payload)
    service.db.commit()
    return code


@router.patch("/{action_code_id}", response_model=ActionCodeResponse)
def update_action_code(
    action_code_id: uuid.UUID,
    payload: ActionCodeUpdate,
    service: ActionCodeService = Depends(get_service),
):
    code = service.update_action_code(action_code_id, payload)
    service.db.commit()
    return code


@router.delete("/{action_code_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_action_code(action_code_id: uuid.UUID, service: ActionCodeService = Depends(get_service)):
    service.delete_action_code(action_code_id)
    service.db.commit()


# Categories

@categories_router.get("", response_model=List[ActionCodeCategoryResponse])
def list_categories(service: ActionCodeCategoryService = Depends(get_category_service)):
    return service.list_categories()


@categories_router.get("/{category_id}", response_model=ActionCodeCategoryResponse)
def get_category(category_id: uuid.UUID, service: ActionCodeCategoryService = Depends(get_category_service)):
    return service.get_category(category_id)


@categories_router.post("", response_model=ActionCodeCategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(
    payload: ActionCodeCategoryCreate,
    service: ActionCodeCategoryService = Depends(get_category_service),
):
    category = service.create_category(payload)
    service.db.commit()
    return category


@categories_router.patch("/{category_id}", response_model=ActionCodeCategoryResponse)
def update_category(
    category_id: uuid.UUID,
    payload: ActionCodeCategoryUpdate,
    service: ActionCodeCategoryService = Depends(get_category_service),
):
    category = service.update_category(category_id, payload)
    service.db.commit()
    return category


@categories_router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(category_id: uuid.UUID, service: ActionCodeCategoryService = Depends(get_category_service)):
    """Codes in the category stay, uncategorised."""
    service.delete_category(category_id)
    service.db.commit()
