# GoGoTime - Active Session Service
# Lifecycle of login sessions: creation, last-seen tracking, revocation

import logging
import uuid
from datetime import datetime
from typing import Optional, Sequence

from sqlalchemy.orm import Session

from gogotime.errors import ForbiddenError, NotFoundError
from gogotime.models import ActiveSession, User, utcnow
from gogotime.permissions import REVOKE_OTHER_SESSION
from gogotime.repositories import ActiveSessionRepository, UserRepository
from gogotime.services.authorization import RolePermissionService


logger = logging.getLogger(__name__)


class ActiveSessionService:
    """
    Session rows behind issued access tokens.

    Token-level methods (create, lookup, last-seen, revoke) take the
    company explicitly because they run before a principal exists.
    User-facing methods (list, revoke by id) act as current_user.

    Usage:
        sessions = ActiveSessionService(db)
        sessions.create_active_session(company_id, user_id, token_hash, expires_at)

        sessions = ActiveSessionService(db, current_user)
        sessions.revoke_session_by_id(session_id)
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
        self.repo = ActiveSessionRepository(db)

    # ---- token level ----------------------------------------------------

    def create_active_session(
        self,
        company_id: uuid.UUID,
        user_id: uuid.UUID,
        token_hash: str,
        expires_at: datetime,
        ip: Optional[str] = None,
        user_agent: Optional[str] = None,
        device_id: Optional[str] = None,
    ) -> ActiveSession:
        session = ActiveSession(
            company_id=company_id,
            user_id=user_id,
            token_hash=token_hash,
            ip=ip,
            user_agent=user_agent,
            device_id=device_id,
            expires_at=expires_at,
            last_seen_at=utcnow(),
        )
        self.repo.add(session, user_id)
        return session

    def get_by_token(self, company_id: uuid.UUID, token_hash: str) -> ActiveSession:
        session = self.repo.find_by_token_hash(token_hash)
        if session is None or session.company_id != company_id:
            raise NotFoundError("ActiveSession")
        return session

    def update_last_seen(self, company_id: uuid.UUID, token_hash: str) -> ActiveSession:
        session = self.get_by_token(company_id, token_hash)
        session.last_seen_at = utcnow()
        self.db.flush()
        return session

    def revoke_active_session(self, company_id: uuid.UUID, token_hash: str) -> ActiveSession:
        session = self.get_by_token(company_id, token_hash)
        if session.revoked_at is None:
            session.revoked_at = utcnow()
            self.db.flush()
            logger.info("Session %s revoked", session.id)
        return session

    def revoke_all_for_user(self, company_id: uuid.UUID, user_id: uuid.UUID) -> int:
        """Revoke every live session of a user. Returns the count."""
        count = 0
        now = utcnow()
        for session in self.repo.find_all_for_user(user_id, company_id):
            session.revoked_at = now
            count += 1
        self.db.flush()
        return count

    # ---- acting user ----------------------------------------------------

    def _actor(self) -> User:
        if self.current_user is None:
            raise ForbiddenError("No acting user")
        return self.current_user

    def list_user_sessions(self, user_id: Optional[uuid.UUID] = None) -> Sequence[ActiveSession]:
        """Own sessions, or another user's with revoke_other_session."""
        actor = self._actor()
        user_id = user_id or actor.id

        if user_id != actor.id:
            if UserRepository(self.db).find_by_id_in_company(user_id, actor.company_id) is None:
                raise NotFoundError("User", user_id)
            RolePermissionService(self.db, actor, self.ip_address).ensure_can_act_on(
                actor, user_id, REVOKE_OTHER_SESSION,
                "You may only view your own sessions",
            )

        return self.repo.find_all_for_user(user_id, actor.company_id)

    def revoke_session_by_id(self, session_id: uuid.UUID) -> ActiveSession:
        actor = self._actor()
        session = self.repo.find_by_id_in_company(session_id, actor.company_id)
        if session is None:
            raise NotFoundError("ActiveSession", session_id)

        RolePermissionService(self.db, actor, self.ip_address).ensure_can_act_on(
            actor, session.user_id, REVOKE_OTHER_SESSION,
            "You may only revoke your own sessions",
        )

        if session.revoked_at is None:
            session.revoked_at = utcnow()
            self.db.flush()
            logger.info("Session %s revoked by %s", session.id, actor.id)
        return session
