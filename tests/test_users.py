# GoGoTime - User and Anonymization tests

import pytest

from gogotime.errors import (
    AuthenticationError,
    ConflictError,
    DomainError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from gogotime.permissions import EMPLOYEE_ROLE, MANAGER_ROLE
from gogotime.repositories import ActiveSessionRepository, RoleRepository
from gogotime.services import AnonymizationService, AuthService, LeaveRequestService, UserService

from tests.conftest import PASSWORD


NEW_USER = {
    "email": "New.Hire@Acme.com",
    "first_name": "Nia",
    "last_name": "Newhire",
    "password": "a-long-password",
}


def test_create_user(db, company, manager):
    role = RoleRepository(db).find_by_name(MANAGER_ROLE, company.id)
    user = UserService(db, manager).create_user({**NEW_USER, "role_id": str(role.id)})
    db.commit()

    assert user.email == "new.hire@acme.com"
    assert user.company_id == company.id
    assert user.role_name == MANAGER_ROLE
    assert AuthService(db).authenticate("new.hire@acme.com", "a-long-password").id == user.id


def test_create_user_requires_permission(db, employee):
    with pytest.raises(ForbiddenError):
        UserService(db, employee).create_user(NEW_USER)


def test_short_password_is_invalid(db, manager):
    with pytest.raises(ValidationError) as exc_info:
        UserService(db, manager).create_user({**NEW_USER, "password": "short"})
    assert exc_info.value.violations[0]["field"] == "password"


def test_email_is_unique_across_companies(db, manager, outsider):
    with pytest.raises(ConflictError):
        UserService(db, manager).create_user({**NEW_USER, "email": outsider.email})


def test_role_of_another_company_is_not_found(db, manager, other_company):
    foreign_role = RoleRepository(db).find_by_name(MANAGER_ROLE, other_company.id)
    with pytest.raises(NotFoundError):
        UserService(db, manager).create_user({**NEW_USER, "role_id": str(foreign_role.id)})


def test_users_are_company_scoped(db, manager, outsider):
    emails = {user.email for user in UserService(db, manager).list_users()}
    assert "manager@acme.com" in emails
    assert outsider.email not in emails

    with pytest.raises(NotFoundError):
        UserService(db, manager).get_user(outsider.id)


# ---- anonymization -------------------------------------------------------

def test_anonymize_user(db, owner, employee):
    auth = AuthService(db)
    _, token, _ = auth.login(employee.email, PASSWORD)
    leave = LeaveRequestService(db, employee).create_leave_request(
        {"start_date": "2025-03-03", "end_date": "2025-03-04", "leave_type": "SICK"}
    )
    db.commit()

    AnonymizationService(db, owner).anonymize_user(employee.id)
    db.commit()
    db.refresh(employee)

    assert employee.is_anonymized
    assert not employee.is_active
    assert employee.first_name == "Deleted"
    assert employee.email == f"deleted-{employee.id}@anonymized.invalid"
    assert employee.password_hash is None
    assert employee.phone_number is None

    # Sessions are physically removed, business records stay
    assert ActiveSessionRepository(db).find_all_for_user(employee.id, employee.company_id, include_revoked=True) == []
    assert auth.resolve_principal(token) is None
    assert LeaveRequestService(db, owner).get_leave_request(leave.id).user_id == employee.id


def test_anonymized_user_cannot_log_in(db, owner, employee):
    AnonymizationService(db, owner).anonymize_user(employee.id)
    db.commit()

    with pytest.raises(AuthenticationError):
        AuthService(db).login("employee@acme.com", PASSWORD)


def test_anonymize_requires_permission(db, manager, employee):
    with pytest.raises(ForbiddenError):
        AnonymizationService(db, manager).anonymize_user(employee.id)


def test_anonymize_foreign_user_is_not_found(db, owner, outsider):
    with pytest.raises(NotFoundError):
        AnonymizationService(db, owner).anonymize_user(outsider.id)


# ---- update / delete / restore -----------------------------------------

def test_users_edit_their_own_profile(db, employee):
    updated = UserService(db, employee).update_user(employee.id, {
        "first_name": "Eve",
        "phone_number": "+33 1 23 45 67 89",
        "version": employee.version,
    })
    db.commit()

    assert updated.first_name == "Eve"
    assert updated.phone_number == "+33 1 23 45 67 89"
    assert updated.version == 2


@pytest.mark.parametrize("changes", [{"is_active": False}, {"role_id": None}])
def test_own_role_and_active_flag_are_locked(db, owner, changes):
    with pytest.raises(ForbiddenError) as exc_info:
        UserService(db, owner).update_user(owner.id, changes)
    assert exc_info.value.details["fields"] == sorted(changes)


def test_editing_someone_else_requires_permission(db, manager, employee):
    with pytest.raises(ForbiddenError):
        UserService(db, employee).update_user(manager.id, {"first_name": "Mallory"})


def test_manager_changes_role_and_email(db, company, manager, employee):
    role = RoleRepository(db).find_by_name(MANAGER_ROLE, company.id)

    updated = UserService(db, manager).update_user(employee.id, {
        "role_id": str(role.id),
        "email": "Promoted@Acme.com",
    })
    db.commit()

    assert updated.role_name == MANAGER_ROLE
    assert updated.email == "promoted@acme.com"


def test_update_email_must_stay_unique(db, manager, employee, outsider):
    with pytest.raises(ConflictError):
        UserService(db, manager).update_user(employee.id, {"email": outsider.email})


def test_update_rejects_foreign_role_and_null_names(db, manager, employee, other_company):
    service = UserService(db, manager)
    foreign_role = RoleRepository(db).find_by_name(EMPLOYEE_ROLE, other_company.id)

    with pytest.raises(NotFoundError):
        service.update_user(employee.id, {"role_id": str(foreign_role.id)})
    with pytest.raises(ValidationError):
        service.update_user(employee.id, {"last_name": None})


def test_update_of_another_company_user_is_not_found(db, manager, outsider):
    with pytest.raises(NotFoundError):
        UserService(db, manager).update_user(outsider.id, {"first_name": "X"})


def test_deactivation_revokes_sessions(db, manager, employee):
    _, token, _ = AuthService(db).login(employee.email, PASSWORD)
    db.commit()

    UserService(db, manager).update_user(employee.id, {"is_active": False})
    db.commit()

    assert AuthService(db).resolve_principal(token) is None
    with pytest.raises(AuthenticationError):
        AuthService(db).authenticate(employee.email, PASSWORD)


def test_delete_and_restore_user(db, owner, employee):
    _, token, _ = AuthService(db).login(employee.email, PASSWORD)
    db.commit()
    service = UserService(db, owner)

    service.delete_user(employee.id)
    db.commit()

    assert AuthService(db).resolve_principal(token) is None
    with pytest.raises(NotFoundError):
        service.get_user(employee.id)
    assert employee.email not in {user.email for user in service.list_users()}

    restored = service.restore_user(employee.id)
    db.commit()

    assert not restored.is_deleted
    assert service.get_user(employee.id).id == employee.id
    assert AuthService(db).authenticate(employee.email, PASSWORD).id == employee.id


def test_manager_cannot_delete_or_restore(db, manager, employee):
    service = UserService(db, manager)
    with pytest.raises(ForbiddenError):
        service.delete_user(employee.id)
    with pytest.raises(ForbiddenError):
        service.restore_user(employee.id)


def test_nobody_deletes_themselves(db, owner):
    with pytest.raises(DomainError):
        UserService(db, owner).delete_user(owner.id)


def test_restore_of_another_company_user_is_not_found(db, owner, outsider):
    with pytest.raises(NotFoundError):
        UserService(db, owner).restore_user(outsider.id)
