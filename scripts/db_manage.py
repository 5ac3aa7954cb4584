#!/usr/bin/env python
"""
GoGoTime - Database Management CLI

Usage:
    python -m scripts.db_manage check       # Test database connection
    python -m scripts.db_manage migrate     # Run pending migrations
    python -m scripts.db_manage rollback    # Rollback last migration (debug only)
    python -m scripts.db_manage current     # Show current migration version
    python -m scripts.db_manage history     # Show migration history
    python -m scripts.db_manage reset       # Drop all and recreate (debug only)
    python -m scripts.db_manage seed        # Create a company with default roles and an owner
    python -m scripts.db_manage setpassword # Set password for a user
"""

import sys
from getpass import getpass

from alembic import command
from alembic.config import Config
from sqlalchemy.exc import SQLAlchemyError

from gogotime.config import get_settings
from gogotime.database import check_connection, get_db_context


settings = get_settings()

# bcrypt only looks at the first 72 bytes
MAX_PASSWORD_BYTES = 72


def alembic_config() -> Config:
    return Config("alembic.ini")


def read_new_password() -> str | None:
    """Prompt twice; None (after printing why) if the password is unusable."""
    password = getpass("New password: ")
    confirm = getpass("Confirm password: ")

    if password != confirm:
        print("Passwords do not match")
        return None

    if len(password) < 8:
        print("Password must be at least 8 characters")
        return None

    password_bytes = password.encode("utf-8")
    if len(password_bytes) > MAX_PASSWORD_BYTES:
        print(f"Password is too long ({len(password_bytes)} bytes).")
        print("Bcrypt has a 72-byte limit. Multi-byte characters count several times.")
        return None

    return password


def cmd_check():
    """Test database connection."""
    print(f"Connecting to: {settings.db_host}:{settings.db_port}/{settings.db_name}")
    try:
        check_connection()
        print("Connection successful!")
        return True
    except SQLAlchemyError as e:
        print(f"Connection failed: {e}")
        return False


def cmd_migrate():
    """Run pending Alembic migrations."""
    print("Running migrations...")
    command.upgrade(alembic_config(), "head")
    print("Migrations complete!")
    return True


def cmd_rollback():
    """Rollback the last migration."""
    if not settings.debug:
        print("ERROR: rollback is only available in debug mode")
        return False

    print("Rolling back last migration...")
    command.downgrade(alembic_config(), "-1")
    print("Rollback complete!")
    return True


def cmd_current():
    """Show current migration version."""
    command.current(alembic_config())
    return True


def cmd_history():
    """Show migration history."""
    command.history(alembic_config())
    return True


def cmd_reset():
    """Drop all tables and recreate with migrations."""
    if not settings.debug:
        print("ERROR: reset is only available in debug mode")
        return False

    confirm = input("This will DELETE ALL DATA. Type 'yes' to confirm: ")
    if confirm.lower() != "yes":
        print("Aborted")
        return False

    cfg = alembic_config()

    print("Rolling back all migrations...")
    command.downgrade(cfg, "base")

    print("Running all migrations...")
    command.upgrade(cfg, "head")

    print("Reset complete!")
    return True


def cmd_seed():
    """Create a company with the default permissions, roles, action codes and an owner."""
    from gogotime.seed import seed_company

    name = input("Company name: ").strip()
    email = input("Owner email: ").strip().lower()
    if not name or not email:
        print("Company name and owner email are required")
        return False

    password = read_new_password()
    if password is None:
        return False

    with get_db_context() as db:
        try:
            company, owner = seed_company(db, name, email, password)
        except ValueError as e:
            print(f"ERROR: {e}")
            return False
        db.commit()

        print(f"Company '{company.name}' ready ({company.id})")
        print(f"Owner: {owner.email}")

    return True


def cmd_setpassword():
    """Set password for a user."""
    from gogotime.repositories import UserRepository
    from gogotime.services.auth import AuthService

    email = input("Email: ").strip()
    if not email:
        print("Email required")
        return False

    with get_db_context() as db:
        user = UserRepository(db).find_by_email(email)

        if not user:
            print(f"User '{email}' not found")
            return False

        if user.is_anonymized:
            print("User is anonymized; the account cannot be reactivated")
            return False

        password = read_new_password()
        if password is None:
            return False

        AuthService(db).set_password(user, password)
        db.commit()

        print(f"Password updated for {user.display_name}")

    return True


def cmd_help():
    """Show help."""
    print(__doc__)
    return True


COMMANDS = {
    "check": cmd_check,
    "migrate": cmd_migrate,
    "rollback": cmd_rollback,
    "current": cmd_current,
    "history": cmd_history,
    "reset": cmd_reset,
    "seed": cmd_seed,
    "setpassword": cmd_setpassword,
    "help": cmd_help,
}


def main():
    if len(sys.argv) < 2:
        cmd_help()
        sys.exit(1)

    name = sys.argv[1].lower()

    if name not in COMMANDS:
        print(f"Unknown command: {name}")
        cmd_help()
        sys.exit(1)

    success = COMMANDS[name]()
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
