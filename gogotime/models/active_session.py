# GoGoTime - Active Session Model
# Database-backed record of issued access tokens

import uuid
from datetime import datetime
from typing import Optional, TYPE_CHECKING

from sqlalchemy import String, DateTime, ForeignKey, Uuid, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import TenantEntity, utcnow

if TYPE_CHECKING:
    from .user import User


class ActiveSession(TenantEntity):
    """
    One live login of a user.

    JWTs are stateless, so every issued token is also recorded here by the
    SHA-256 of its value. A token whose session row is revoked, expired or
    gone no longer authenticates. This gives:
        - Logout and forced logout
        - A per-user list of devices currently signed in
    """

    __tablename__ = "active_sessions"

    __table_args__ = (
        Index("ix_active_sessions_company_user", "company_id", "user_id"),
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False
    )

    # hex SHA-256 of the bearer token
    token_hash: Mapped[str] = mapped_column(
        String(64),
        unique=True,
        nullable=False
    )

    ip: Mapped[Optional[str]] = mapped_column(
        String(45),
        nullable=True
    )

    user_agent: Mapped[Optional[str]] = mapped_column(
        String(500),
        nullable=True
    )

    device_id: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True
    )

    expires_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False
    )

    last_seen_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime,
        nullable=True
    )

    revoked_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime,
        nullable=True
    )

    user: Mapped["User"] = relationship(
        "User",
        foreign_keys=[user_id]
    )

    def __repr__(self) -> str:
        state = "valid" if self.is_valid else "invalid"
        return f"<ActiveSession {self.id} ({state}) for user {self.user_id}>"

    @property
    def is_expired(self) -> bool:
        return utcnow() > self.expires_at

    @property
    def is_revoked(self) -> bool:
        return self.revoked_at is not None

    @property
    def is_valid(self) -> bool:
        """Not revoked, not expired, not deleted."""
        return not self.is_revoked and not self.is_expired and not self.is_deleted
