# GoGoTime - Company Bootstrap
# Creates a tenant with the default permission catalogue, roles and an owner

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from gogotime.models import Company, Permission, Role, RolePermission, User, ActionCode
from gogotime.permissions import (
    DEFAULT_PERMISSIONS,
    DEFAULT_ROLES,
    DEFAULT_ROLE_GRANTS,
    DEFAULT_ACTION_CODES,
    OWNER_ROLE,
)
from gogotime.repositories import (
    ActionCodeRepository,
    PermissionRepository,
    RoleRepository,
    RolePermissionRepository,
    UserRepository,
)
from gogotime.services.auth import hash_password


logger = logging.getLogger(__name__)


def seed_company(
    db: Session,
    name: str,
    owner_email: str,
    owner_password: str,
    owner_first_name: str = "Company",
    owner_last_name: str = "Owner",
    with_action_codes: bool = True,
) -> tuple[Company, User]:
    """
    Bootstrap a company so its owner can log in and manage everything else.

    Runs without an acting user; permission checks cannot apply before the
    first grant exists. Safe to call again: existing rows are reused and
    only missing ones are added.

    Flushes only; the caller commits.

    Usage:
        with get_db_context() as db:
            company, owner = seed_company(db, "Acme", "ceo@acme.test", "s3cret-pass")
            db.commit()
    """
    company = db.execute(
        select(Company).where(Company.name == name, Company.deleted_at.is_(None))
    ).scalars().first()
    if company is None:
        company = Company(name=name)
        db.add(company)
        db.flush()
        logger.info("Created company %s", name)

    permissions = PermissionRepository(db)
    roles = RoleRepository(db)
    grants = RolePermissionRepository(db)

    perm_by_name: dict[str, Permission] = {}
    for perm_name, description in DEFAULT_PERMISSIONS.items():
        perm = permissions.find_by_name(perm_name, company.id, with_deleted=True)
        if perm is None:
            perm = permissions.add(Permission(company_id=company.id, name=perm_name, description=description))
        elif perm.is_deleted:
            permissions.restore(perm)
        perm_by_name[perm_name] = perm

    role_by_name: dict[str, Role] = {}
    for role_name, description in DEFAULT_ROLES.items():
        role = roles.find_by_name(role_name, company.id, with_deleted=True)
        if role is None:
            role = roles.add(Role(company_id=company.id, name=role_name, description=description))
        elif role.is_deleted:
            roles.restore(role)
        role_by_name[role_name] = role

    for role_name, perm_names in DEFAULT_ROLE_GRANTS.items():
        role = role_by_name[role_name]
        for perm_name in perm_names:
            perm = perm_by_name[perm_name]
            grant = grants.find_by_role_and_permission(company.id, role.id, perm.id)
            if grant is None:
                grants.add(RolePermission(company_id=company.id, role_id=role.id, permission_id=perm.id))
            elif grant.is_deleted:
                grants.restore(grant)

    if with_action_codes:
        _seed_action_codes(db, company)

    owner = _seed_owner(
        db, company, role_by_name[OWNER_ROLE],
        owner_email, owner_password, owner_first_name, owner_last_name,
    )
    return company, owner


def _seed_action_codes(db: Session, company: Company) -> None:
    codes = ActionCodeRepository(db)
    for code, label in DEFAULT_ACTION_CODES:
        if codes.find_by_code(code, company.id, with_deleted=True) is None:
            codes.add(ActionCode(company_id=company.id, code=code, name=label))


def _seed_owner(
    db: Session,
    company: Company,
    role: Role,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
) -> User:
    users = UserRepository(db)
    owner: Optional[User] = users.find_by_email(email)
    if owner is not None:
        if owner.company_id != company.id:
            raise ValueError(f"{email} already belongs to another company")
        return owner

    owner = users.add(User(
        company_id=company.id,
        role_id=role.id,
        email=email.strip().lower(),
        first_name=first_name,
        last_name=last_name,
        password_hash=hash_password(password),
    ))
    logger.info("Created owner %s for company %s", owner.email, company.name)
    return owner
