# GoGoTime - Role Permission Service
# Authorization oracle and role grant management

import logging
import uuid
from typing import Optional, Sequence

from sqlalchemy.orm import Session

from gogotime.errors import ForbiddenError, NotFoundError
from gogotime.models import User, RolePermission, HistoryTargetType
from gogotime.permissions import CREATE_ROLE_PERMISSION, DELETE_ROLE_PERMISSION
from gogotime.repositories import PermissionRepository, RoleRepository, RolePermissionRepository
from gogotime.schemas import RolePermissionCreate
from gogotime.services.history import HistoryService
from gogotime.validation import validate_dto


logger = logging.getLogger(__name__)


class RolePermissionService:
    """
    Decides whether a user may perform an action, and manages the grants
    that feed that decision.

    Rules:
        - A user may act on a permission key iff a live RolePermission row
          links their role to a live Permission of that exact name, in
          their own company. No role means no permissions.
        - A user may always act on records they own; acting on someone
          else's record needs the matching override permission.

    Usage:
        authz = RolePermissionService(db, current_user)

        if authz.check_permission(user, "approve_timesheet"):
            ...

        authz.ensure_can_act_on(user, request.user_id, "update_other_leave_request")
    """

    def __init__(
        self,
        db: Session,
        current_user: Optional[User] = None,
        ip_address: Optional[str] = None,
    ):
        self.db = db
        self.current_user = current_user
        self.ip_address = ip_address
        self.grants = RolePermissionRepository(db)
        self.roles = RoleRepository(db)
        self.permissions = PermissionRepository(db)

    # ---- decisions ------------------------------------------------------

    def check_permission(self, user: User, permission_key: str) -> bool:
        """Default-deny lookup of ``permission_key`` for ``user``. Pure read."""
        if user is None or user.role_id is None:
            return False
        return self.grants.has_grant(user.company_id, user.role_id, permission_key)

    def can_act_on(self, user: User, owner_id: Optional[uuid.UUID], override_key: str) -> bool:
        """Owner always; anyone else only with ``override_key``."""
        if owner_id is not None and user.id == owner_id:
            return True
        return self.check_permission(user, override_key)

    def ensure_can_act_on(
        self,
        user: User,
        owner_id: Optional[uuid.UUID],
        override_key: str,
        message: Optional[str] = None,
    ) -> None:
        if not self.can_act_on(user, owner_id, override_key):
            logger.warning(
                "Denied %s for user %s on record owned by %s",
                override_key, user.id, owner_id,
            )
            raise ForbiddenError(
                message or "You may only act on your own records",
                {"permission": override_key},
            )

    def require_permission(self, user: User, permission_key: str, message: Optional[str] = None) -> None:
        if not self.check_permission(user, permission_key):
            logger.warning("Denied %s for user %s", permission_key, user.id)
            raise ForbiddenError(
                message or f"Missing permission: {permission_key}",
                {"permission": permission_key},
            )

    # ---- grants ---------------------------------------------------------

    def _actor(self) -> User:
        if self.current_user is None:
            raise ForbiddenError("No acting user")
        return self.current_user

    def list_role_permissions(self, role_id: uuid.UUID) -> Sequence[RolePermission]:
        user = self._actor()
        if self.roles.find_by_id_in_company(role_id, user.company_id) is None:
            raise NotFoundError("Role", role_id)
        return self.grants.find_all_by_role(role_id, user.company_id)

    def create_role_permission(self, data) -> RolePermission:
        """
        Grant a permission to a role.

        Granting twice returns the existing grant; a revoked grant is
        brought back rather than duplicated.

        Raises:
            ValidationError: malformed payload
            ForbiddenError: caller lacks create_role_permission
            NotFoundError: role or permission not in the caller's company
        """
        dto = validate_dto(RolePermissionCreate, data)
        user = self._actor()

        self.require_permission(user, CREATE_ROLE_PERMISSION)

        if self.roles.find_by_id_in_company(dto.role_id, user.company_id) is None:
            raise NotFoundError("Role", dto.role_id)
        if self.permissions.find_by_id(dto.permission_id, user.company_id) is None:
            raise NotFoundError("Permission", dto.permission_id)

        history = HistoryService(self.db, user, self.ip_address)
        existing = self.grants.find_by_role_and_permission(user.company_id, dto.role_id, dto.permission_id)

        if existing is not None:
            if existing.is_deleted:
                self.grants.restore(existing, user.id)
                history.log_created(HistoryTargetType.ROLE_PERMISSION, existing)
                logger.info("Re-granted permission %s to role %s", dto.permission_id, dto.role_id)
            return existing

        grant = RolePermission(
            company_id=user.company_id,
            role_id=dto.role_id,
            permission_id=dto.permission_id,
        )
        self.grants.add(grant, user.id)
        history.log_created(HistoryTargetType.ROLE_PERMISSION, grant)
        logger.info("Granted permission %s to role %s", dto.permission_id, dto.role_id)
        return grant

    def delete_role_permission(self, role_permission_id: uuid.UUID) -> RolePermission:
        """
        Revoke a grant (soft delete).

        Raises:
            ForbiddenError: caller lacks delete_role_permission
            NotFoundError: no live grant with that id in the caller's company
        """
        user = self._actor()

        grant = self.grants.find_by_id_in_company(role_permission_id, user.company_id)
        if grant is None:
            raise NotFoundError("RolePermission", role_permission_id)

        self.require_permission(user, DELETE_ROLE_PERMISSION)

        HistoryService(self.db, user, self.ip_address).log_deleted(HistoryTargetType.ROLE_PERMISSION, grant)
        self.grants.soft_delete(grant, user.id)
        logger.info("Revoked grant %s", role_permission_id)
        return grant
