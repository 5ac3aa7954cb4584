# GoGoTime - Permission, Role and Grant Repositories

import uuid
from typing import Optional, Sequence

from sqlalchemy import select, func

from gogotime.models import Permission, Role, RolePermission, User
from gogotime.repositories.base import ScopedRepository


class PermissionRepository(ScopedRepository[Permission]):
    """Permissions of one company; name and id lookups are always company-filtered."""

    model = Permission

    def find_by_id(self, permission_id: uuid.UUID, company_id: uuid.UUID) -> Optional[Permission]:
        return self.find_by_id_in_company(permission_id, company_id)

    def find_by_name(
        self,
        name: str,
        company_id: uuid.UUID,
        with_deleted: bool = False,
    ) -> Optional[Permission]:
        return self.find_one(company_id, Permission.name == name, with_deleted=with_deleted)

    def find_all_in_company(self, company_id: uuid.UUID, *criteria, order_by=None) -> Sequence[Permission]:
        return super().find_all_in_company(
            company_id, *criteria,
            order_by=order_by if order_by is not None else Permission.name,
        )


class RoleRepository(ScopedRepository[Role]):

    model = Role

    def find_by_name(self, name: str, company_id: uuid.UUID, with_deleted: bool = False) -> Optional[Role]:
        return self.find_one(company_id, Role.name == name, with_deleted=with_deleted)

    def count_users(self, role_id: uuid.UUID, company_id: uuid.UUID) -> int:
        """Live users still holding the role."""
        return self.db.execute(
            select(func.count(User.id))
            .where(User.company_id == company_id)
            .where(User.role_id == role_id)
            .where(User.deleted_at.is_(None))
        ).scalar_one()


class RolePermissionRepository(ScopedRepository[RolePermission]):
    """
    Grants of permissions to roles.

    has_grant is the query behind every authorization decision.
    """

    model = RolePermission

    def has_grant(self, company_id: uuid.UUID, role_id: uuid.UUID, permission_name: str) -> bool:
        """
        True iff a live grant links the role to a live permission named
        exactly ``permission_name``, with role, permission and grant all
        in ``company_id``.
        """
        query = (
            select(RolePermission.id)
            .join(Permission, Permission.id == RolePermission.permission_id)
            .join(Role, Role.id == RolePermission.role_id)
            .where(RolePermission.company_id == company_id)
            .where(RolePermission.role_id == role_id)
            .where(RolePermission.deleted_at.is_(None))
            .where(Permission.company_id == company_id)
            .where(Permission.name == permission_name)
            .where(Permission.deleted_at.is_(None))
            .where(Role.company_id == company_id)
            .where(Role.deleted_at.is_(None))
            .limit(1)
        )
        return self.db.execute(query).first() is not None

    def find_by_role_and_permission(
        self,
        company_id: uuid.UUID,
        role_id: uuid.UUID,
        permission_id: uuid.UUID,
    ) -> Optional[RolePermission]:
        """Including soft-deleted grants, so a revoked grant can be revived."""
        return self.find_one(
            company_id,
            RolePermission.role_id == role_id,
            RolePermission.permission_id == permission_id,
            with_deleted=True,
        )

    def find_all_by_role(self, role_id: uuid.UUID, company_id: uuid.UUID) -> Sequence[RolePermission]:
        return self.find_all_in_company(company_id, RolePermission.role_id == role_id)

    def find_all_by_permission(self, permission_id: uuid.UUID, company_id: uuid.UUID) -> Sequence[RolePermission]:
        return self.find_all_in_company(company_id, RolePermission.permission_id == permission_id)

    def permission_names_for_role(self, role_id: uuid.UUID, company_id: uuid.UUID) -> list[str]:
        """Names of the live permissions granted to a role."""
        rows = self.db.execute(
            select(Permission.name)
            .join(RolePermission, RolePermission.permission_id == Permission.id)
            .where(RolePermission.company_id == company_id)
            .where(RolePermission.role_id == role_id)
            .where(RolePermission.deleted_at.is_(None))
            .where(Permission.deleted_at.is_(None))
            .order_by(Permission.name)
        ).scalars().all()
        return list(rows)
