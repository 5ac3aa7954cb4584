# GoGoTime - User Service

import logging
import uuid
from typing import Sequence

from gogotime.errors import ConflictError, DomainError, ForbiddenError, NotFoundError, ValidationError
from gogotime.models import User
from gogotime.permissions import CREATE_USER, DELETE_USER, RESTORE_USER, UPDATE_USER
from gogotime.repositories import RoleRepository, UserRepository
from gogotime.schemas import UserCreate, UserUpdate
from gogotime.services.active_session import ActiveSessionService
from gogotime.services.auth import hash_password
from gogotime.services.base import TenantService
from gogotime.validation import validate_dto


logger = logging.getLogger(__name__)

# Nobody changes these on their own account
SELF_RESTRICTED_FIELDS = {"role_id", "is_active"}

REQUIRED_FIELDS = ("email", "first_name", "last_name")


class UserService(TenantService):

    def __init__(self, db, current_user, ip_address=None):
        super().__init__(db, current_user, ip_address)
        self.repo = UserRepository(db)
        self.roles = RoleRepository(db)

    def list_users(self) -> Sequence[User]:
        return self.repo.find_all_in_company(self.company_id, order_by=User.last_name)

    def get_user(self, user_id: uuid.UUID) -> User:
        return self.get_or_404(self.repo, user_id, "User")

    def create_user(self, data) -> User:
        """
        Create a user in the caller's company.

        Raises:
            ValidationError, ForbiddenError
            NotFoundError: role_id is not a role of this company
            ConflictError: email already registered
        """
        dto = validate_dto(UserCreate, data)
        self.require_permission(CREATE_USER)

        if dto.role_id is not None and self.roles.find_by_id_in_company(dto.role_id, self.company_id) is None:
            raise NotFoundError("Role", dto.role_id)

        if self.repo.email_taken(dto.email):
            raise ConflictError("Email already registered", {"field": "email"})

        user = User(
            company_id=self.company_id,
            role_id=dto.role_id,
            email=dto.email,
            first_name=dto.first_name,
            last_name=dto.last_name,
            phone_number=dto.phone_number,
            password_hash=hash_password(dto.password),
        )
        self.repo.add(user, self.current_user.id)
        logger.info("User %s created in company %s", user.id, self.company_id)
        return user

    def update_user(self, user_id: uuid.UUID, data) -> User:
        """
        Edit a user. Only provided fields change.

        Users may edit their own profile fields. Editing someone else, or
        anyone's role_id / is_active, needs update_user; role_id and
        is_active can never be changed on one's own account.

        Raises:
            ValidationError, NotFoundError
            ForbiddenError: missing update_user, or a restricted self-edit
            ConflictError: email taken or stale version
            DomainError: the user is anonymized
        """
        dto = validate_dto(UserUpdate, data)
        user = self.get_or_404(self.repo, user_id, "User")

        changes = dto.model_dump(exclude_unset=True, exclude={"version"})

        if user.id == self.current_user.id:
            restricted = sorted(SELF_RESTRICTED_FIELDS & set(changes))
            if restricted:
                raise ForbiddenError(
                    "You cannot change your own role or active status",
                    {"fields": restricted},
                )
        else:
            self.require_permission(UPDATE_USER, "You may only edit your own profile")

        if user.is_anonymized:
            raise DomainError("Anonymized users cannot be edited")

        for field in REQUIRED_FIELDS:
            if field in changes and changes[field] is None:
                raise ValidationError.single(field, f"{field} cannot be null", "missing")
        if "is_active" in changes and changes["is_active"] is None:
            raise ValidationError.single("is_active", "is_active cannot be null", "missing")

        email = changes.get("email")
        if email is not None and email != user.email and self.repo.email_taken(email):
            raise ConflictError("Email already registered", {"field": "email"})

        role_id = changes.get("role_id")
        if role_id is not None and self.roles.find_by_id_in_company(role_id, self.company_id) is None:
            raise NotFoundError("Role", role_id)

        self.repo.update(user, changes, self.current_user.id, expected_version=dto.version)

        if changes.get("is_active") is False:
            revoked = ActiveSessionService(self.db).revoke_all_for_user(self.company_id, user.id)
            logger.info("User %s deactivated by %s, %d session(s) revoked", user.id, self.current_user.id, revoked)

        return self.reload(user)

    def delete_user(self, user_id: uuid.UUID) -> User:
        """Soft-delete a user and end their sessions."""
        user = self.get_or_404(self.repo, user_id, "User")
        self.require_permission(DELETE_USER)

        if user.id == self.current_user.id:
            raise DomainError("You cannot delete your own account")

        self.repo.soft_delete(user, self.current_user.id)
        ActiveSessionService(self.db).revoke_all_for_user(self.company_id, user.id)
        logger.info("User %s deleted by %s", user.id, self.current_user.id)
        return user

    def restore_user(self, user_id: uuid.UUID) -> User:
        """Bring back a soft-deleted user. Restoring a live user is a no-op."""
        user = self.repo.find_by_id_in_company(user_id, self.company_id, with_deleted=True)
        if user is None:
            raise NotFoundError("User", user_id)
        self.require_permission(RESTORE_USER)

        if user.is_deleted:
            self.repo.restore(user, self.current_user.id)
            logger.info("User %s restored by %s", user.id, self.current_user.id)
        return user
