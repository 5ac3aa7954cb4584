# GoGoTime - Role Service

import logging
import uuid
from typing import Sequence

from gogotime.errors import ConflictError
from gogotime.models import Role
from gogotime.permissions import CREATE_ROLE, UPDATE_ROLE, DELETE_ROLE
from gogotime.repositories import RoleRepository, RolePermissionRepository
from gogotime.schemas import RoleCreate, RoleUpdate
from gogotime.services.base import TenantService
from gogotime.validation import validate_dto


logger = logging.getLogger(__name__)


class RoleService(TenantService):

    def __init__(self, db, current_user, ip_address=None):
        super().__init__(db, current_user, ip_address)
        self.repo = RoleRepository(db)
        self.grants = RolePermissionRepository(db)

    def list_roles(self) -> Sequence[Role]:
        return self.repo.find_all_in_company(self.company_id, order_by=Role.name)

    def get_role(self, role_id: uuid.UUID) -> Role:
        return self.get_or_404(self.repo, role_id, "Role")

    def get_role_permission_names(self, role_id: uuid.UUID) -> list[str]:
        role = self.get_role(role_id)
        return self.grants.permission_names_for_role(role.id, self.company_id)

    def _ensure_name_free(self, name: str) -> None:
        if self.repo.find_by_name(name, self.company_id, with_deleted=True) is not None:
            raise ConflictError(f"Role '{name}' already exists", {"field": "name", "value": name})

    def create_role(self, data) -> Role:
        dto = validate_dto(RoleCreate, data)
        self.require_permission(CREATE_ROLE)
        self._ensure_name_free(dto.name)

        role = Role(company_id=self.company_id, name=dto.name, description=dto.description)
        self.repo.add(role, self.current_user.id)
        logger.info("Role %s created in company %s", role.name, self.company_id)
        return role

    def update_role(self, role_id: uuid.UUID, data) -> Role:
        dto = validate_dto(RoleUpdate, data)
        role = self.get_role(role_id)
        self.require_permission(UPDATE_ROLE)

        changes = dto.model_dump(exclude_unset=True, exclude={"version"})
        if "name" in changes and changes["name"] is None:
            changes.pop("name")
        if changes.get("name") is not None and changes["name"] != role.name:
            self._ensure_name_free(changes["name"])

        self.repo.update(role, changes, self.current_user.id, expected_version=dto.version)
        return self.reload(role)

    def delete_role(self, role_id: uuid.UUID) -> Role:
        """
        Soft-delete a role and its grants.

        Raises:
            ConflictError: while live users still hold the role
        """
        role = self.get_role(role_id)
        self.require_permission(DELETE_ROLE)

        holders = self.repo.count_users(role.id, self.company_id)
        if holders:
            raise ConflictError(
                f"Role '{role.name}' is still assigned to {holders} user(s)",
                {"users": holders},
            )

        for grant in self.grants.find_all_by_role(role.id, self.company_id):
            self.grants.soft_delete(grant, self.current_user.id)

        self.repo.soft_delete(role, self.current_user.id)
        logger.info("Role %s deleted in company %s", role.name, self.company_id)
        return role
