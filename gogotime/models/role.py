# GoGoTime - Role, Permission and RolePermission Models

import uuid
from typing import List, Optional, TYPE_CHECKING

from sqlalchemy import String, Text, ForeignKey, Uuid, UniqueConstraint, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import TenantEntity

if TYPE_CHECKING:
    from .company import Company
    from .user import User


class Role(TenantEntity):
    """
    Named collection of permissions scoped to a company
    (e.g. "Owner/CEO", "Manager", "Employee").
    """

    __tablename__ = "roles"

    __table_args__ = (
        UniqueConstraint("company_id", "name", name="uq_roles_company_name"),
    )

    name: Mapped[str] = mapped_column(
        String(50),
        nullable=False
    )

    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True
    )

    company: Mapped["Company"] = relationship(
        "Company",
        back_populates="roles"
    )

    users: Mapped[List["User"]] = relationship(
        "User",
        back_populates="role"
    )

    role_permissions: Mapped[List["RolePermission"]] = relationship(
        "RolePermission",
        back_populates="role"
    )

    def __repr__(self) -> str:
        return f"<Role {self.name}>"


class Permission(TenantEntity):
    """
    A capability string scoped to a company, e.g. ``create_permission``
    or ``update_other_leave_request``.

    Names are matched exactly; there is no wildcard or inheritance.
    """

    __tablename__ = "permissions"

    __table_args__ = (
        UniqueConstraint("company_id", "name", name="uq_permissions_company_name"),
    )

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False
    )

    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True
    )

    role_permissions: Mapped[List["RolePermission"]] = relationship(
        "RolePermission",
        back_populates="permission"
    )

    def __repr__(self) -> str:
        return f"<Permission {self.name}>"


class RolePermission(TenantEntity):
    """
    Grant of a permission to a role.

    The existence of a live (non-deleted) row is the only authorization
    signal; no row means deny.
    """

    __tablename__ = "role_permissions"

    __table_args__ = (
        UniqueConstraint(
            "company_id", "role_id", "permission_id",
            name="uq_role_permissions_company_role_permission",
        ),
        Index("ix_role_permissions_role", "company_id", "role_id"),
    )

    role_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("roles.id", ondelete="RESTRICT"),
        nullable=False
    )

    permission_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("permissions.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )

    role: Mapped["Role"] = relationship(
        "Role",
        back_populates="role_permissions"
    )

    permission: Mapped["Permission"] = relationship(
        "Permission",
        back_populates="role_permissions"
    )

    def __repr__(self) -> str:
        return f"<RolePermission role={self.role_id} permission={self.permission_id}>"
