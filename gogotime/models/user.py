# GoGoTime - User Model

import uuid
from datetime import datetime
from typing import Optional, TYPE_CHECKING

from sqlalchemy import String, Boolean, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import TenantEntity

if TYPE_CHECKING:
    from .company import Company
    from .role import Role


class User(TenantEntity):
    """
    An account inside a company.

    A user holds at most one role; the role's grants decide what the user
    may do beyond acting on their own records.
    """

    __tablename__ = "users"

    role_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("roles.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    # Login identifier, unique across tenants
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True
    )

    first_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False
    )

    last_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False
    )

    phone_number: Mapped[Optional[str]] = mapped_column(
        String(32),
        nullable=True
    )

    # Bcrypt hash; empty once the user is anonymized
    password_hash: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False
    )

    is_anonymized: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False
    )

    last_login_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime,
        nullable=True
    )

    # Relationships
    company: Mapped["Company"] = relationship(
        "Company",
        back_populates="users"
    )

    role: Mapped[Optional["Role"]] = relationship(
        "Role",
        back_populates="users"
    )

    def __repr__(self) -> str:
        status = " [DELETED]" if self.is_deleted else ""
        return f"<User {self.email}{status}>"

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def role_name(self) -> Optional[str]:
        return self.role.name if self.role is not None else None
