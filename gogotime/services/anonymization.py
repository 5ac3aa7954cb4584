# GoGoTime - Anonymization Service

import logging
import uuid

from gogotime.models import User
from gogotime.permissions import ANONYMIZE_USER
from gogotime.repositories import ActiveSessionRepository, UserRepository
from gogotime.services.base import TenantService


logger = logging.getLogger(__name__)


class AnonymizationService(TenantService):
    """
    Irreversibly strips personal data from a user.

    The user row stays (timesheets and history still point at it) but
    name, email, phone and password are replaced, the account is
    deactivated and every session row of the user is physically removed.
    """

    def __init__(self, db, current_user, ip_address=None):
        super().__init__(db, current_user, ip_address)
        self.users = UserRepository(db)
        self.sessions = ActiveSessionRepository(db)

    def anonymize_user(self, user_id: uuid.UUID) -> User:
        """
        Raises:
            ForbiddenError: caller lacks anonymize_user
            NotFoundError: user not in the caller's company
        """
        user = self.get_or_404(self.users, user_id, "User")
        self.require_permission(ANONYMIZE_USER)

        self.users.update(
            user,
            {
                "first_name": "Deleted",
                "last_name": "User",
                "email": f"deleted-{user.id}@anonymized.invalid",
                "phone_number": None,
                "password_hash": None,
                "is_active": False,
                "is_anonymized": True,
            },
            self.current_user.id,
        )

        removed = self.sessions.hard_delete_for_user(user.id, self.company_id)
        logger.info("User %s anonymized by %s (%d sessions removed)", user.id, self.current_user.id, removed)
        return user
