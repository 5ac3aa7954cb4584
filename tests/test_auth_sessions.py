# GoGoTime - Authentication and session tests

from datetime import timedelta

import pytest
from jose import jwt

from gogotime.config import get_settings
from gogotime.errors import AuthenticationError, ForbiddenError, NotFoundError
from gogotime.models import utcnow
from gogotime.repositories import ActiveSessionRepository
from gogotime.services import ActiveSessionService, AuthService, hash_token, verify_password

from tests.conftest import PASSWORD


def test_login_issues_token_and_session(db, employee):
    user, token, session = AuthService(db).login("Employee@Acme.com", PASSWORD, ip="10.0.0.1")
    db.commit()

    assert user.id == employee.id
    assert session.token_hash == hash_token(token)
    assert session.ip == "10.0.0.1"
    assert user.last_login_at is not None

    settings = get_settings()
    claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    assert claims["sub"] == str(employee.id)
    assert claims["companyId"] == str(employee.company_id)
    assert claims["role"] == "Employee"
    assert {"iat", "exp", "jti"} <= set(claims)


def test_tokens_are_unique_per_login(db, employee):
    auth = AuthService(db)
    _, first, _ = auth.login(employee.email, PASSWORD)
    _, second, _ = auth.login(employee.email, PASSWORD)
    db.commit()

    assert first != second


@pytest.mark.parametrize("email, password", [
    ("employee@acme.com", "wrong-password"),
    ("nobody@acme.com", PASSWORD),
])
def test_bad_credentials_are_refused(db, employee, email, password):
    with pytest.raises(AuthenticationError) as exc_info:
        AuthService(db).login(email, password)
    assert exc_info.value.message == "Invalid email or password"


def test_inactive_user_cannot_log_in(db, employee):
    employee.is_active = False
    db.commit()

    with pytest.raises(AuthenticationError):
        AuthService(db).login(employee.email, PASSWORD)


def test_resolve_principal(db, employee):
    auth = AuthService(db)
    _, token, session = auth.login(employee.email, PASSWORD)
    db.commit()

    assert auth.resolve_principal(token).id == employee.id
    assert session.last_seen_at is not None


def test_resolving_a_token_marks_the_session_seen(db, employee):
    auth = AuthService(db)
    _, token, session = auth.login(employee.email, PASSWORD)
    stale = utcnow() - timedelta(hours=3)
    session.last_seen_at = stale
    db.commit()

    auth.resolve_principal(token)

    assert session.last_seen_at > stale


def test_update_last_seen_is_company_scoped(db, employee, other_company):
    sessions = ActiveSessionService(db)
    _, token, session = AuthService(db).login(employee.email, PASSWORD)
    db.commit()

    assert sessions.update_last_seen(employee.company_id, hash_token(token)).id == session.id
    with pytest.raises(NotFoundError):
        sessions.update_last_seen(other_company.id, hash_token(token))


@pytest.mark.parametrize("token", [None, "", "not-a-jwt"])
def test_resolve_principal_rejects_garbage(db, token):
    assert AuthService(db).resolve_principal(token) is None


def test_resolve_principal_rejects_foreign_signature(db, employee):
    auth = AuthService(db)
    _, token, _ = auth.login(employee.email, PASSWORD)
    db.commit()

    claims = jwt.get_unverified_claims(token)
    forged = jwt.encode(claims, "another-secret", algorithm="HS256")
    assert auth.resolve_principal(forged) is None


def test_resolve_principal_rejects_unknown_session(db, employee):
    auth = AuthService(db)
    token, _ = auth.create_access_token(employee)
    assert auth.resolve_principal(token) is None


def test_expired_session_is_rejected(db, employee):
    auth = AuthService(db)
    _, token, session = auth.login(employee.email, PASSWORD)
    session.expires_at = utcnow() - timedelta(minutes=1)
    db.commit()

    assert auth.resolve_principal(token) is None


def test_logout_revokes_session(db, employee):
    auth = AuthService(db)
    _, token, session = auth.login(employee.email, PASSWORD)
    db.commit()

    assert auth.logout(token) is True
    db.commit()

    assert session.revoked_at is not None
    assert auth.resolve_principal(token) is None
    # Second logout finds the session already revoked
    assert auth.logout(token) is True
    assert auth.logout("not-a-jwt") is False


def test_change_password_revokes_every_session(db, employee):
    auth = AuthService(db)
    _, first, _ = auth.login(employee.email, PASSWORD)
    _, second, _ = auth.login(employee.email, PASSWORD)
    db.commit()

    auth.change_password(employee, PASSWORD, "brand-new-password")
    db.commit()

    assert auth.resolve_principal(first) is None
    assert auth.resolve_principal(second) is None
    assert verify_password("brand-new-password", employee.password_hash)


def test_change_password_checks_current_password(db, employee):
    with pytest.raises(AuthenticationError):
        AuthService(db).change_password(employee, "wrong-password", "brand-new-password")


def test_verify_password_tolerates_missing_hash():
    assert verify_password(PASSWORD, None) is False
    assert verify_password(PASSWORD, "not-a-bcrypt-hash") is False


# ---- session management --------------------------------------------------

def test_list_own_sessions(db, employee):
    AuthService(db).login(employee.email, PASSWORD)
    db.commit()

    sessions = ActiveSessionService(db, employee).list_user_sessions()
    assert [s.user_id for s in sessions] == [employee.id]


def test_listing_others_sessions_needs_permission(db, manager, employee):
    AuthService(db).login(employee.email, PASSWORD)
    db.commit()

    assert len(ActiveSessionService(db, manager).list_user_sessions(employee.id)) == 1
    with pytest.raises(ForbiddenError):
        ActiveSessionService(db, employee).list_user_sessions(manager.id)


def test_listing_sessions_of_foreign_user_is_not_found(db, manager, outsider):
    with pytest.raises(NotFoundError):
        ActiveSessionService(db, manager).list_user_sessions(outsider.id)


def test_revoke_session_by_id(db, manager, employee):
    auth = AuthService(db)
    _, token, session = auth.login(employee.email, PASSWORD)
    db.commit()

    with pytest.raises(ForbiddenError):
        ActiveSessionService(db, employee).revoke_session_by_id(
            auth.login(manager.email, PASSWORD)[2].id
        )

    revoked = ActiveSessionService(db, manager).revoke_session_by_id(session.id)
    db.commit()

    assert revoked.revoked_at is not None
    assert auth.resolve_principal(token) is None


def test_foreign_session_cannot_be_revoked(db, employee, outsider):
    _, _, session = AuthService(db).login(employee.email, PASSWORD)
    db.commit()

    with pytest.raises(NotFoundError):
        ActiveSessionService(db, outsider).revoke_session_by_id(session.id)


def test_sessions_are_scoped_by_token_hash(db, employee):
    _, token, session = AuthService(db).login(employee.email, PASSWORD)
    db.commit()

    found = ActiveSessionRepository(db).find_by_token_hash(hash_token(token))
    assert found.id == session.id
    assert ActiveSessionRepository(db).find_by_token_hash(hash_token("other")) is None
