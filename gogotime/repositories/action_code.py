# GoGoTime - Action Code Repositories

import uuid
from typing import Optional, Sequence

from sqlalchemy import or_

from gogotime.models import ActionCode, ActionCodeCategory
from gogotime.repositories.base import ScopedRepository


class ActionCodeRepository(ScopedRepository[ActionCode]):

    model = ActionCode

    def find_by_code(self, code: str, company_id: uuid.UUID, with_deleted: bool = False) -> Optional[ActionCode]:
        return self.find_one(company_id, ActionCode.code == code, with_deleted=with_deleted)

    def search(
        self,
        company_id: uuid.UUID,
        query: Optional[str] = None,
        category_id: Optional[uuid.UUID] = None,
        loggable_only: bool = False,
    ) -> Sequence[ActionCode]:
        """Case-insensitive match on code or name."""
        criteria = []
        if query:
            pattern = f"%{query.strip()}%"
            criteria.append(or_(ActionCode.code.ilike(pattern), ActionCode.name.ilike(pattern)))
        if category_id is not None:
            criteria.append(ActionCode.category_id == category_id)
        if loggable_only:
            criteria.append(ActionCode.allow_time_logging.is_(True))
        return self.find_all_in_company(company_id, *criteria, order_by=ActionCode.code)

    def find_by_category(self, category_id: uuid.UUID, company_id: uuid.UUID) -> Sequence[ActionCode]:
        return self.find_all_in_company(company_id, ActionCode.category_id == category_id)


class ActionCodeCategoryRepository(ScopedRepository[ActionCodeCategory]):

    model = ActionCodeCategory

    def find_by_name(
        self,
        name: str,
        company_id: uuid.UUID,
        with_deleted: bool = False,
    ) -> Optional[ActionCodeCategory]:
        return self.find_one(company_id, ActionCodeCategory.name == name, with_deleted=with_deleted)
