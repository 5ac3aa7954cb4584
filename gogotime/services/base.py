# GoGoTime - Service Base
# Shared wiring for services acting on behalf of one user

import uuid
from typing import Optional, TypeVar

from sqlalchemy.orm import Session

from gogotime.errors import NotFoundError
from gogotime.models import User
from gogotime.repositories.base import ScopedRepository
from gogotime.services.authorization import RolePermissionService
from gogotime.services.history import HistoryService


T = TypeVar("T")


class TenantService:
    """
    Base for domain services.

    Holds the acting user, their company, an authorization oracle and a
    history writer. Services validate, authorize, then flush; they never
    commit.
    """

    def __init__(
        self,
        db: Session,
        current_user: User,
        ip_address: Optional[str] = None,
    ):
        self.db = db
        self.current_user = current_user
        self.company_id = current_user.company_id
        self.ip_address = ip_address
        self.authz = RolePermissionService(db, current_user, ip_address)
        self.history = HistoryService(db, current_user, ip_address)

    def get_or_404(
        self,
        repo: ScopedRepository,
        entity_id: uuid.UUID,
        resource: Optional[str] = None,
    ):
        """Live record of the caller's company, or NotFoundError."""
        entity = repo.find_by_id_in_company(entity_id, self.company_id)
        if entity is None:
            raise NotFoundError(resource or repo.model.__name__, entity_id)
        return entity

    def ensure_can_act_on(self, owner_id: Optional[uuid.UUID], override_key: str, message: Optional[str] = None) -> None:
        self.authz.ensure_can_act_on(self.current_user, owner_id, override_key, message)

    def require_permission(self, permission_key: str, message: Optional[str] = None) -> None:
        self.authz.require_permission(self.current_user, permission_key, message)

    def reload(self, entity: T) -> T:
        """Re-read the persisted row so responses reflect stored state."""
        self.db.flush()
        self.db.refresh(entity)
        return entity
