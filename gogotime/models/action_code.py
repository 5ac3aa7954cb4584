# GoGoTime - Action Code Models
# Company-scoped lookup values that tag timesheet entries

import uuid
from typing import List, Optional

from sqlalchemy import String, Boolean, Text, ForeignKey, Uuid, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import TenantEntity


class ActionCodeCategory(TenantEntity):
    """Grouping for action codes (e.g. "Internal", "Client work")."""

    __tablename__ = "action_code_categories"

    __table_args__ = (
        UniqueConstraint("company_id", "name", name="uq_action_code_categories_company_name"),
    )

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False
    )

    action_codes: Mapped[List["ActionCode"]] = relationship(
        "ActionCode",
        back_populates="category"
    )

    def __repr__(self) -> str:
        return f"<ActionCodeCategory {self.name}>"


class ActionCode(TenantEntity):
    """
    What kind of work a timesheet entry records (e.g. "MTG" / "Meeting").

    Codes with allow_time_logging switched off stay visible for reporting
    but refuse new entries.
    """

    __tablename__ = "action_codes"

    __table_args__ = (
        UniqueConstraint("company_id", "code", name="uq_action_codes_company_code"),
    )

    code: Mapped[str] = mapped_column(
        String(50),
        nullable=False
    )

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False
    )

    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True
    )

    category_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("action_code_categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    allow_time_logging: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False
    )

    category: Mapped[Optional["ActionCodeCategory"]] = relationship(
        "ActionCodeCategory",
        back_populates="action_codes"
    )

    def __repr__(self) -> str:
        return f"<ActionCode {self.code}: {self.name}>"
