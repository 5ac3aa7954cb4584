# GoGoTime - Permission and Role tests

import pytest

from gogotime.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from gogotime.permissions import APPROVE_TIMESHEET, EMPLOYEE_ROLE, MANAGER_ROLE
from gogotime.repositories import PermissionRepository, RolePermissionRepository, RoleRepository
from gogotime.services import PermissionService, RolePermissionService, RoleService


# ---- permissions ---------------------------------------------------------

def test_create_permission(db, owner):
    service = PermissionService(db, owner)
    perm = service.create_permission({"name": "export_payroll", "description": "Export payroll"})
    db.commit()

    assert perm.company_id == owner.company_id
    assert service.get_permission_by_name("export_payroll").id == perm.id


def test_create_permission_requires_permission(db, employee):
    with pytest.raises(ForbiddenError):
        PermissionService(db, employee).create_permission({"name": "export_payroll"})


def test_create_permission_rejects_bad_name(db, owner):
    with pytest.raises(ValidationError) as exc_info:
        PermissionService(db, owner).create_permission({"name": "Has Spaces"})
    assert exc_info.value.violations[0]["field"] == "name"


def test_duplicate_permission_name_conflicts(db, owner):
    with pytest.raises(ConflictError):
        PermissionService(db, owner).create_permission({"name": APPROVE_TIMESHEET})


def test_same_name_allowed_in_another_company(db, owner, other_company):
    perm = PermissionService(db, owner).create_permission({"name": "export_payroll"})
    db.commit()

    assert PermissionRepository(db).find_by_name("export_payroll", other_company.id) is None
    assert perm.company_id != other_company.id


def test_deleted_permission_is_revived_on_create(db, owner):
    service = PermissionService(db, owner)
    perm = service.create_permission({"name": "export_payroll"})
    service.delete_permission(perm.id)
    db.commit()

    revived = service.create_permission({"name": "export_payroll", "description": "Back again"})
    db.commit()

    assert revived.id == perm.id
    assert not revived.is_deleted
    assert revived.description == "Back again"


def test_rename_permission(db, owner):
    service = PermissionService(db, owner)
    perm = service.create_permission({"name": "export_payroll"})
    db.commit()

    renamed = service.update_permission(perm.id, {"name": "export_salaries", "version": perm.version})
    db.commit()

    assert renamed.name == "export_salaries"
    with pytest.raises(NotFoundError):
        service.get_permission_by_name("export_payroll")


def test_rename_onto_existing_name_conflicts(db, owner):
    service = PermissionService(db, owner)
    perm = service.create_permission({"name": "export_payroll"})
    db.commit()

    with pytest.raises(ConflictError):
        service.update_permission(perm.id, {"name": APPROVE_TIMESHEET})


def test_stale_version_conflicts(db, owner):
    service = PermissionService(db, owner)
    perm = service.create_permission({"name": "export_payroll"})
    db.commit()
    service.update_permission(perm.id, {"description": "first"})
    db.commit()

    with pytest.raises(ConflictError):
        service.update_permission(perm.id, {"description": "second", "version": 1})


def test_delete_permission_revokes_its_grants(db, company, owner, manager):
    service = PermissionService(db, owner)
    perm = service.get_permission_by_name(APPROVE_TIMESHEET)

    service.delete_permission(perm.id)
    db.commit()

    assert RolePermissionRepository(db).find_all_by_permission(perm.id, company.id) == []
    assert not RolePermissionService(db, manager).check_permission(manager, APPROVE_TIMESHEET)


def test_foreign_permission_is_not_found(db, owner, other_company):
    foreign = PermissionRepository(db).find_by_name(APPROVE_TIMESHEET, other_company.id)
    with pytest.raises(NotFoundError):
        PermissionService(db, owner).get_permission_by_id(foreign.id)
    with pytest.raises(NotFoundError):
        PermissionService(db, owner).delete_permission(foreign.id)


def test_list_permissions_is_company_scoped(db, owner, other_company):
    names = [p.name for p in PermissionService(db, owner).list_permissions()]
    assert APPROVE_TIMESHEET in names
    assert len(names) == len(set(names))


# ---- roles ---------------------------------------------------------------

def test_create_role_and_read_its_permissions(db, owner):
    service = RoleService(db, owner)
    role = service.create_role({"name": "  Auditor  "})
    db.commit()

    assert role.name == "Auditor"
    assert service.get_role_permission_names(role.id) == []


def test_manager_role_permission_names(db, company, owner):
    manager_role = RoleRepository(db).find_by_name(MANAGER_ROLE, company.id)
    names = RoleService(db, owner).get_role_permission_names(manager_role.id)
    assert APPROVE_TIMESHEET in names
    assert names == sorted(names)


def test_duplicate_role_name_conflicts(db, owner):
    with pytest.raises(ConflictError):
        RoleService(db, owner).create_role({"name": MANAGER_ROLE})


def test_role_in_use_cannot_be_deleted(db, company, owner, employee):
    role = RoleRepository(db).find_by_name(EMPLOYEE_ROLE, company.id)
    with pytest.raises(ConflictError):
        RoleService(db, owner).delete_role(role.id)


def test_delete_unused_role(db, owner):
    service = RoleService(db, owner)
    role = service.create_role({"name": "Auditor"})
    db.commit()

    service.delete_role(role.id)
    db.commit()

    with pytest.raises(NotFoundError):
        service.get_role(role.id)


def test_role_management_requires_permission(db, employee):
    with pytest.raises(ForbiddenError):
        RoleService(db, employee).create_role({"name": "Auditor"})
