# GoGoTime - Active Session Repository

import uuid
from typing import Optional, Sequence

from sqlalchemy import select, delete

from gogotime.models import ActiveSession
from gogotime.repositories.base import ScopedRepository


class ActiveSessionRepository(ScopedRepository[ActiveSession]):

    model = ActiveSession

    def find_by_token_hash(self, token_hash: str) -> Optional[ActiveSession]:
        """
        Global lookup by token hash.

        The tenant is not known until the session is found, so this is the
        one unscoped read; the caller checks the token's company claim
        against the row.
        """
        return self.db.execute(
            select(ActiveSession)
            .where(ActiveSession.token_hash == token_hash)
            .where(ActiveSession.deleted_at.is_(None))
        ).scalar_one_or_none()

    def find_all_for_user(
        self,
        user_id: uuid.UUID,
        company_id: uuid.UUID,
        include_revoked: bool = False,
    ) -> Sequence[ActiveSession]:
        criteria = [ActiveSession.user_id == user_id]
        if not include_revoked:
            criteria.append(ActiveSession.revoked_at.is_(None))
        return self.find_all_in_company(
            company_id, *criteria, order_by=ActiveSession.created_at.desc()
        )

    def hard_delete_for_user(self, user_id: uuid.UUID, company_id: uuid.UUID) -> int:
        """Physically remove every session row of a user. Returns the count."""
        result = self.db.execute(
            delete(ActiveSession)
            .where(ActiveSession.company_id == company_id)
            .where(ActiveSession.user_id == user_id)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount
