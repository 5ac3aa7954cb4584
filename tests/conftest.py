# GoGoTime - Test Fixtures
# In-memory SQLite, fast bcrypt, companies seeded with the default roles

import os

# Must be set before gogotime.config is first imported
os.environ["GOGOTIME_DATABASE_URL"] = "sqlite://"
os.environ["GOGOTIME_BCRYPT_ROUNDS"] = "4"
os.environ["GOGOTIME_JWT_SECRET"] = "test-secret"

from datetime import date

import pytest
from fastapi.testclient import TestClient

from gogotime.database import SessionLocal, drop_db, get_db, init_db
from gogotime.models import ActionCode, Timesheet, TimesheetStatus, User
from gogotime.permissions import EMPLOYEE_ROLE, MANAGER_ROLE
from gogotime.repositories import ActionCodeRepository, RoleRepository
from gogotime.seed import seed_company
from gogotime.services.auth import hash_password


PASSWORD = "correct-horse-battery"


@pytest.fixture
def db():
    init_db()
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        drop_db()


@pytest.fixture
def company(db):
    company, _ = seed_company(db, "Acme", "owner@acme.com", PASSWORD)
    db.commit()
    return company


@pytest.fixture
def owner(db, company):
    return db.query(User).filter_by(email="owner@acme.com").one()


@pytest.fixture
def make_user(db):
    """Factory: a committed user holding the named role of ``company``."""

    def _make(company, email, role_name=EMPLOYEE_ROLE, first_name="Test", last_name="User"):
        role = RoleRepository(db).find_by_name(role_name, company.id) if role_name else None
        user = User(
            company_id=company.id,
            role_id=role.id if role else None,
            email=email,
            first_name=first_name,
            last_name=last_name,
            password_hash=hash_password(PASSWORD),
        )
        db.add(user)
        db.commit()
        return user

    return _make


@pytest.fixture
def manager(company, make_user):
    return make_user(company, "manager@acme.com", MANAGER_ROLE, "Mona", "Manager")


@pytest.fixture
def employee(company, make_user):
    return make_user(company, "employee@acme.com", EMPLOYEE_ROLE, "Eli", "Employee")


@pytest.fixture
def other_company(db):
    company, _ = seed_company(db, "Globex", "owner@globex.com", PASSWORD)
    db.commit()
    return company


@pytest.fixture
def outsider(other_company, make_user):
    """Manager of another company."""
    return make_user(other_company, "manager@globex.com", MANAGER_ROLE, "Otto", "Outsider")


@pytest.fixture
def action_code(db, company) -> ActionCode:
    return ActionCodeRepository(db).find_by_code("DEV", company.id)


@pytest.fixture
def make_timesheet(db):
    def _make(user, start=date(2025, 3, 3), end=date(2025, 3, 9), status=TimesheetStatus.DRAFT):
        sheet = Timesheet(
            company_id=user.company_id,
            user_id=user.id,
            period_start=start,
            period_end=end,
            status=status,
            total_minutes=0,
        )
        db.add(sheet)
        db.commit()
        return sheet

    return _make


@pytest.fixture
def client(db):
    """TestClient sharing the test's session."""
    from gogotime.main import app

    def _get_db():
        yield db

    app.dependency_overrides[get_db] = _get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def login(client):
    """Factory: bearer headers for ``email``."""

    def _login(email, password=PASSWORD):
        response = client.post("/auth/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['access_token']}"}

    return _login
