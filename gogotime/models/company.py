# GoGoTime - Company Model

from typing import List, TYPE_CHECKING

from sqlalchemy import String, Boolean
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import EntityBase

if TYPE_CHECKING:
    from .user import User
    from .role import Role


class Company(EntityBase):
    """
    A tenant.

    Every business record belongs to exactly one company and is only
    visible to users of that company.
    """

    __tablename__ = "companies"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False
    )

    users: Mapped[List["User"]] = relationship(
        "User",
        back_populates="company"
    )

    roles: Mapped[List["Role"]] = relationship(
        "Role",
        back_populates="company"
    )

    def __repr__(self) -> str:
        return f"<Company {self.name}>"
