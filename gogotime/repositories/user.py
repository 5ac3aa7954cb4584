# GoGoTime - User Repository

import uuid
from typing import Optional

from sqlalchemy import select

from gogotime.models import User
from gogotime.repositories.base import ScopedRepository


class UserRepository(ScopedRepository[User]):

    model = User

    def find_by_email(self, email: str) -> Optional[User]:
        """
        Global lookup for login; email is unique across companies.

        Soft-deleted users are excluded.
        """
        return self.db.execute(
            select(User)
            .where(User.email == email.lower())
            .where(User.deleted_at.is_(None))
        ).scalar_one_or_none()

    def email_taken(self, email: str) -> bool:
        return self.db.execute(
            select(User.id).where(User.email == email.lower())
        ).first() is not None

    def find_active(self, user_id: uuid.UUID, company_id: uuid.UUID) -> Optional[User]:
        user = self.find_by_id_in_company(user_id, company_id)
        if user is None or not user.is_active:
            return None
        return user
