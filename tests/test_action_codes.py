# GoGoTime - Action Code tests

import pytest

from gogotime.errors import ConflictError, ForbiddenError, NotFoundError
from gogotime.permissions import DEFAULT_ACTION_CODES
from gogotime.repositories import ActionCodeRepository, UserRepository
from gogotime.services import ActionCodeCategoryService, ActionCodeService


def test_seeded_codes_are_searchable(db, employee):
    codes = ActionCodeService(db, employee).search()
    assert sorted(c.code for c in codes) == sorted(code for code, _ in DEFAULT_ACTION_CODES)


def test_search_matches_code_or_name_case_insensitively(db, employee):
    service = ActionCodeService(db, employee)
    assert [c.code for c in service.search("meet")] == ["MEETING"]
    assert [c.code for c in service.search("development")] == ["DEV"]


def test_search_only_loggable(db, owner):
    service = ActionCodeService(db, owner)
    holiday = service.search("HOLIDAY")[0]
    service.update_action_code(holiday.id, {"allow_time_logging": False})
    db.commit()

    codes = [c.code for c in service.search(loggable_only=True)]
    assert "HOLIDAY" not in codes
    assert "DEV" in codes


def test_search_is_company_scoped(db, owner, other_company):
    ActionCodeService(db, owner).create_action_code({"code": "acme-only", "name": "Acme only"})
    db.commit()

    assert ActionCodeRepository(db).search(other_company.id, "ACME-ONLY") == []


def test_create_normalizes_code(db, owner):
    code = ActionCodeService(db, owner).create_action_code({"code": "  support ", "name": "Support"})
    db.commit()

    assert code.code == "SUPPORT"
    assert code.allow_time_logging is True


def test_duplicate_code_conflicts(db, owner):
    with pytest.raises(ConflictError):
        ActionCodeService(db, owner).create_action_code({"code": "dev", "name": "Again"})


def test_managing_codes_requires_permission(db, employee, action_code):
    service = ActionCodeService(db, employee)
    with pytest.raises(ForbiddenError):
        service.create_action_code({"code": "SUPPORT", "name": "Support"})
    with pytest.raises(ForbiddenError):
        service.update_action_code(action_code.id, {"name": "Renamed"})
    with pytest.raises(ForbiddenError):
        service.delete_action_code(action_code.id)


def test_foreign_code_is_not_found(db, outsider, action_code):
    with pytest.raises(NotFoundError):
        ActionCodeService(db, outsider).get_action_code(action_code.id)


def test_deleted_code_is_hidden_and_keeps_its_code_taken(db, owner, action_code):
    service = ActionCodeService(db, owner)
    service.delete_action_code(action_code.id)
    db.commit()

    with pytest.raises(NotFoundError):
        service.get_action_code(action_code.id)
    with pytest.raises(ConflictError):
        service.create_action_code({"code": "DEV", "name": "Development"})


def test_assign_unknown_category_is_not_found(db, owner, other_company, action_code):
    globex_owner = UserRepository(db).find_by_email("owner@globex.com")
    foreign = ActionCodeCategoryService(db, globex_owner).create_category({"name": "Billable"})
    db.commit()

    with pytest.raises(NotFoundError):
        ActionCodeService(db, owner).update_action_code(action_code.id, {"category_id": str(foreign.id)})


# ---- categories ----------------------------------------------------------

def test_category_lifecycle(db, owner, action_code):
    categories = ActionCodeCategoryService(db, owner)
    codes = ActionCodeService(db, owner)

    billable = categories.create_category({"name": "Billable"})
    codes.update_action_code(action_code.id, {"category_id": str(billable.id)})
    db.commit()

    assert [c.code for c in codes.search(category_id=billable.id)] == ["DEV"]

    categories.delete_category(billable.id)
    db.commit()
    db.refresh(action_code)

    assert action_code.category_id is None
    assert categories.list_categories() == []


def test_duplicate_category_name_conflicts(db, owner):
    categories = ActionCodeCategoryService(db, owner)
    categories.create_category({"name": "Billable"})
    db.commit()

    with pytest.raises(ConflictError):
        categories.create_category({"name": "Billable"})


def test_rename_category(db, owner):
    categories = ActionCodeCategoryService(db, owner)
    category = categories.create_category({"name": "Billable"})
    db.commit()

    renamed = categories.update_category(category.id, {"name": "Client work"})
    db.commit()

    assert renamed.name == "Client work"
    assert renamed.version == 2


def test_categories_require_permission(db, employee):
    with pytest.raises(ForbiddenError):
        ActionCodeCategoryService(db, employee).create_category({"name": "Billable"})
