# GoGoTime - Action Code Services

import logging
import uuid
from typing import Optional, Sequence

from gogotime.errors import ConflictError, NotFoundError
from gogotime.models import ActionCode, ActionCodeCategory, HistoryTargetType
from gogotime.permissions import MANAGE_ACTION_CODES
from gogotime.repositories import ActionCodeRepository, ActionCodeCategoryRepository
from gogotime.schemas import (
    ActionCodeCreate,
    ActionCodeUpdate,
    ActionCodeCategoryCreate,
    ActionCodeCategoryUpdate,
)
from gogotime.services.base import TenantService
from gogotime.validation import validate_dto


logger = logging.getLogger(__name__)


class ActionCodeService(TenantService):
    """
    Action codes of the caller's company.

    Anyone in the company may search and read codes; changes need
    manage_action_codes. Codes are unique per company.
    """

    def __init__(self, db, current_user, ip_address=None):
        super().__init__(db, current_user, ip_address)
        self.repo = ActionCodeRepository(db)
        self.categories = ActionCodeCategoryRepository(db)

    def search(
        self,
        query: Optional[str] = None,
        category_id: Optional[uuid.UUID] = None,
        loggable_only: bool = False,
    ) -> Sequence[ActionCode]:
        return self.repo.search(self.company_id, query, category_id, loggable_only)

    def get_action_code(self, action_code_id: uuid.UUID) -> ActionCode:
        return self.get_or_404(self.repo, action_code_id, "ActionCode")

    def _check_category(self, category_id: Optional[uuid.UUID]) -> None:
        if category_id is not None and self.categories.find_by_id_in_company(category_id, self.company_id) is None:
            raise NotFoundError("ActionCodeCategory", category_id)

    def _ensure_code_free(self, code: str) -> None:
        if self.repo.find_by_code(code, self.company_id, with_deleted=True) is not None:
            raise ConflictError(f"Action code '{code}' already exists", {"field": "code", "value": code})

    def create_action_code(self, data) -> ActionCode:
        dto = validate_dto(ActionCodeCreate, data)
        self.require_permission(MANAGE_ACTION_CODES)
        self._check_category(dto.category_id)
        self._ensure_code_free(dto.code)

        code = ActionCode(company_id=self.company_id, **dto.model_dump())
        self.repo.add(code, self.current_user.id)
        self.history.log_created(HistoryTargetType.ACTION_CODE, code)
        return code

    def update_action_code(self, action_code_id: uuid.UUID, data) -> ActionCode:
        dto = validate_dto(ActionCodeUpdate, data)
        code = self.get_action_code(action_code_id)
        self.require_permission(MANAGE_ACTION_CODES)

        changes = dto.model_dump(exclude_unset=True, exclude={"version"})
        for field in ("code", "name", "allow_time_logging"):
            if field in changes and changes[field] is None:
                changes.pop(field)

        if "category_id" in changes:
            self._check_category(changes["category_id"])
        if changes.get("code") is not None and changes["code"] != code.code:
            self._ensure_code_free(changes["code"])

        old_state = self.history.capture_state(code)
        self.repo.update(code, changes, self.current_user.id, expected_version=dto.version)
        self.history.log_updated(HistoryTargetType.ACTION_CODE, code, old_state)
        return self.reload(code)

    def delete_action_code(self, action_code_id: uuid.UUID) -> ActionCode:
        code = self.get_action_code(action_code_id)
        self.require_permission(MANAGE_ACTION_CODES)

        self.history.log_deleted(HistoryTargetType.ACTION_CODE, code)
        self.repo.soft_delete(code, self.current_user.id)
        logger.info("Action code %s deleted in company %s", code.code, self.company_id)
        return code


class ActionCodeCategoryService(TenantService):
    """Categories for action codes; names are unique per company."""

    def __init__(self, db, current_user, ip_address=None):
        super().__init__(db, current_user, ip_address)
        self.repo = ActionCodeCategoryRepository(db)
        self.codes = ActionCodeRepository(db)

    def list_categories(self) -> Sequence[ActionCodeCategory]:
        return self.repo.find_all_in_company(self.company_id, order_by=ActionCodeCategory.name)

    def get_category(self, category_id: uuid.UUID) -> ActionCodeCategory:
        return self.get_or_404(self.repo, category_id, "ActionCodeCategory")

    def _ensure_name_free(self, name: str) -> None:
        if self.repo.find_by_name(name, self.company_id, with_deleted=True) is not None:
            raise ConflictError(f"Category '{name}' already exists", {"field": "name", "value": name})

    def create_category(self, data) -> ActionCodeCategory:
        dto = validate_dto(ActionCodeCategoryCreate, data)
        self.require_permission(MANAGE_ACTION_CODES)
        self._ensure_name_free(dto.name)

        category = ActionCodeCategory(company_id=self.company_id, name=dto.name)
        self.repo.add(category, self.current_user.id)
        return category

    def update_category(self, category_id: uuid.UUID, data) -> ActionCodeCategory:
        dto = validate_dto(ActionCodeCategoryUpdate, data)
        category = self.get_category(category_id)
        self.require_permission(MANAGE_ACTION_CODES)

        changes = dto.model_dump(exclude_unset=True, exclude={"version"}, exclude_none=True)
        if changes.get("name") is not None and changes["name"] != category.name:
            self._ensure_name_free(changes["name"])

        self.repo.update(category, changes, self.current_user.id, expected_version=dto.version)
        return self.reload(category)

    def delete_category(self, category_id: uuid.UUID) -> ActionCodeCategory:
        """Soft-delete; codes in the category become uncategorized."""
        category = self.get_category(category_id)
        self.require_permission(MANAGE_ACTION_CODES)

        for code in self.codes.find_by_category(category.id, self.company_id):
            self.codes.update(code, {"category_id": None}, self.current_user.id)

        self.repo.soft_delete(category, self.current_user.id)
        return category
