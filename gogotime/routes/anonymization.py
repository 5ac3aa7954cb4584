# GoGoTime - Anonymization Routes

import uuid

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from gogotime.database import get_db
from gogotime.dependencies import get_client_ip, get_current_user
from gogotime.models import User
from gogotime.services import AnonymizationService


router = APIRouter(prefix="/anonymization", tags=["anonymization"])


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def anonymize_user(
    user_id: uuid.UUID,
    request: Request,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Irreversibly strip a user's personal data and sign them out everywhere."""
    AnonymizationService(db, user, get_client_ip(request)).anonymize_user(user_id)
    db.commit()
