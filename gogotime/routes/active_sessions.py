# GoGoTime - Active Session Routes

import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from gogotime.database import get_db
from gogotime.dependencies import get_client_ip, get_current_user
from gogotime.models import User
from gogotime.schemas import ActiveSessionResponse
from gogotime.services import ActiveSessionService


router = APIRouter(prefix="/active-sessions", tags=["active-sessions"])


def get_service(
    request: Request,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ActiveSessionService:
    return ActiveSessionService(db, user, get_client_ip(request))


@router.get("", response_model=List[ActiveSessionResponse])
def list_sessions(
    user_id: Optional[uuid.UUID] = Query(None, description="Defaults to the caller"),
    service: ActiveSessionService = Depends(get_service),
):
    return service.list_user_sessions(user_id)


@router.delete("/{session_id}", response_model=ActiveSessionResponse)
def revoke_session(session_id: uuid.UUID, service: ActiveSessionService = Depends(get_service)):
    """Sign out one device. Revoking an already revoked session is a no-op."""
    session = service.revoke_session_by_id(session_id)
    service.db.commit()
    return session
