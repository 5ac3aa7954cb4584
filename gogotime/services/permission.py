# GoGoTime - Permission Service

import logging
import uuid
from typing import Sequence

from gogotime.errors import ConflictError, NotFoundError
from gogotime.models import Permission, HistoryTargetType
from gogotime.permissions import CREATE_PERMISSION, UPDATE_PERMISSION, DELETE_PERMISSION
from gogotime.repositories import PermissionRepository, RolePermissionRepository
from gogotime.schemas import PermissionCreate, PermissionUpdate
from gogotime.services.base import TenantService
from gogotime.validation import validate_dto


logger = logging.getLogger(__name__)


class PermissionService(TenantService):
    """
    CRUD for the permission catalogue of the caller's company.

    Usage:
        service = PermissionService(db, current_user, request.client.host)
        perm = service.create_permission({"name": "approve_timesheet"})
        service.delete_permission(perm.id)
    """

    def __init__(self, db, current_user, ip_address=None):
        super().__init__(db, current_user, ip_address)
        self.repo = PermissionRepository(db)
        self.grants = RolePermissionRepository(db)

    def list_permissions(self) -> Sequence[Permission]:
        return self.repo.find_all_in_company(self.company_id)

    def get_permission_by_id(self, permission_id: uuid.UUID) -> Permission:
        perm = self.repo.find_by_id(permission_id, self.company_id)
        if perm is None:
            raise NotFoundError("Permission", permission_id)
        return perm

    def get_permission_by_name(self, name: str) -> Permission:
        perm = self.repo.find_by_name(name, self.company_id)
        if perm is None:
            raise NotFoundError("Permission", name)
        return perm

    def create_permission(self, data) -> Permission:
        """
        Create a permission.

        A soft-deleted permission with the same name is revived instead of
        inserting a second row for the (company, name) pair.

        Raises:
            ValidationError, ForbiddenError, ConflictError
        """
        dto = validate_dto(PermissionCreate, data)
        self.require_permission(CREATE_PERMISSION)

        existing = self.repo.find_by_name(dto.name, self.company_id, with_deleted=True)
        if existing is not None and not existing.is_deleted:
            raise ConflictError(
                f"Permission '{dto.name}' already exists",
                {"field": "name", "value": dto.name},
            )

        if existing is not None:
            self.repo.restore(existing, self.current_user.id)
            self.repo.update(existing, {"description": dto.description}, self.current_user.id)
            perm = existing
        else:
            perm = Permission(company_id=self.company_id, name=dto.name, description=dto.description)
            self.repo.add(perm, self.current_user.id)

        self.history.log_created(HistoryTargetType.PERMISSION, perm)
        logger.info("Permission %s created in company %s", perm.name, self.company_id)
        return perm

    def update_permission(self, permission_id: uuid.UUID, data) -> Permission:
        dto = validate_dto(PermissionUpdate, data)
        perm = self.get_permission_by_id(permission_id)
        self.require_permission(UPDATE_PERMISSION)

        changes = dto.model_dump(exclude_unset=True, exclude={"version"})
        if "name" in changes and changes["name"] is None:
            changes.pop("name")

        new_name = changes.get("name")
        if new_name is not None and new_name != perm.name:
            clash = self.repo.find_by_name(new_name, self.company_id, with_deleted=True)
            if clash is not None:
                raise ConflictError(
                    f"Permission '{new_name}' already exists",
                    {"field": "name", "value": new_name},
                )

        old_state = self.history.capture_state(perm)
        self.repo.update(perm, changes, self.current_user.id, expected_version=dto.version)
        self.history.log_updated(HistoryTargetType.PERMISSION, perm, old_state)

        return self.reload(perm)

    def delete_permission(self, permission_id: uuid.UUID) -> Permission:
        """Soft-delete the permission together with every grant of it."""
        perm = self.get_permission_by_id(permission_id)
        self.require_permission(DELETE_PERMISSION)

        for grant in self.grants.find_all_by_permission(perm.id, self.company_id):
            self.grants.soft_delete(grant, self.current_user.id)

        self.history.log_deleted(HistoryTargetType.PERMISSION, perm)
        self.repo.soft_delete(perm, self.current_user.id)
        logger.info("Permission %s deleted in company %s", perm.name, self.company_id)
        return perm
