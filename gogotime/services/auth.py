# GoGoTime - Authentication Service
# Password hashing, JWT issue/verification, login/logout

import hashlib
import logging
import uuid
from datetime import datetime, timedelta
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from gogotime.config import get_settings
from gogotime.errors import AuthenticationError, NotFoundError
from gogotime.models import ActiveSession, User, utcnow
from gogotime.repositories import ActiveSessionRepository, UserRepository
from gogotime.services.active_session import ActiveSessionService


logger = logging.getLogger(__name__)

settings = get_settings()

# Password hashing configuration
# Using bcrypt with automatic salt generation
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)


def hash_password(plain_password: str) -> str:
    return pwd_context.hash(plain_password)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """False for an empty or malformed hash instead of raising."""
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        return False


def hash_token(token: str) -> str:
    """Hex SHA-256 of a bearer token, the form stored in active_sessions."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


class AuthService:
    """
    Authentication service for login, logout and token resolution.

    Usage:
        auth = AuthService(db)

        # Login
        user, token, session = auth.login("ada@example.com", "password123")

        # Resolve a bearer token (None when invalid, expired or revoked)
        user = auth.resolve_principal(token)

        # Logout
        auth.logout(token)

    Access tokens are JWTs carrying sub (user id), companyId and role.
    Each token is also recorded as an ActiveSession so it can be revoked
    before it expires.
    """

    def __init__(self, db: Session):
        self.db = db
        self.users = UserRepository(db)
        self.sessions = ActiveSessionService(db)

    def authenticate(self, email: str, password: str) -> User:
        """
        Check credentials.

        Raises:
            AuthenticationError: If credentials are invalid or account is inactive
        """
        user = self.users.find_by_email(email)

        if not user:
            # Don't reveal whether the email exists
            raise AuthenticationError("Invalid email or password")

        if not user.is_active or user.is_anonymized:
            raise AuthenticationError("Account is inactive")

        if not verify_password(password, user.password_hash):
            raise AuthenticationError("Invalid email or password")

        return user

    def create_access_token(self, user: User) -> tuple[str, datetime]:
        """Signed JWT for ``user`` and its expiry (naive UTC)."""
        issued_at = utcnow()
        expires_at = issued_at + timedelta(minutes=settings.access_token_expire_minutes)
        payload = {
            "sub": str(user.id),
            "companyId": str(user.company_id),
            "role": user.role_name,
            "iat": issued_at,
            "exp": expires_at,
            # Makes every token distinct, so token hashes never collide
            "jti": uuid.uuid4().hex,
        }
        token = jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)
        return token, expires_at

    def decode_token(self, token: str) -> Optional[dict]:
        try:
            return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
        except JWTError:
            return None

    def login(
        self,
        email: str,
        password: str,
        ip: Optional[str] = None,
        user_agent: Optional[str] = None,
        device_id: Optional[str] = None,
    ) -> tuple[User, str, ActiveSession]:
        """
        Authenticate and open a session.

        Returns:
            Tuple of (User, access token, ActiveSession)
        """
        user = self.authenticate(email, password)

        token, expires_at = self.create_access_token(user)
        session = self.sessions.create_active_session(
            company_id=user.company_id,
            user_id=user.id,
            token_hash=hash_token(token),
            expires_at=expires_at,
            ip=ip,
            user_agent=user_agent,
            device_id=device_id,
        )

        user.last_login_at = utcnow()
        self.db.flush()

        logger.info("User %s logged in", user.id)
        return user, token, session

    def resolve_principal(self, token: Optional[str]) -> Optional[User]:
        """
        Map a bearer token to its user.

        Returns None, never raises, for a missing, malformed, badly signed,
        expired or revoked token, or for an inactive user.
        """
        if not token:
            return None

        claims = self.decode_token(token)
        if not claims:
            return None

        try:
            user_id = uuid.UUID(claims["sub"])
            company_id = uuid.UUID(claims["companyId"])
        except (KeyError, TypeError, ValueError):
            return None

        session = ActiveSessionRepository(self.db).find_by_token_hash(hash_token(token))
        if session is None or not session.is_valid:
            return None
        if session.user_id != user_id or session.company_id != company_id:
            return None

        user = self.users.find_active(user_id, company_id)
        if user is None or user.is_anonymized:
            return None

        self.sessions.update_last_seen(company_id, session.token_hash)

        return user

    def logout(self, token: str) -> bool:
        """
        Revoke the session behind ``token``.

        Returns True if a session was found and revoked, False otherwise.
        """
        claims = self.decode_token(token)
        if not claims or "companyId" not in claims:
            return False

        try:
            self.sessions.revoke_active_session(uuid.UUID(claims["companyId"]), hash_token(token))
        except (NotFoundError, ValueError):
            return False

        return True

    def set_password(self, user: User, new_password: str) -> None:
        user.password_hash = hash_password(new_password)
        self.db.flush()

    def change_password(self, user: User, current_password: str, new_password: str) -> None:
        """
        Change a password (requires the current one) and revoke every
        session of the user.

        Raises:
            AuthenticationError: If current password is wrong
        """
        if not verify_password(current_password, user.password_hash):
            raise AuthenticationError("Current password is incorrect")

        self.set_password(user, new_password)
        self.sessions.revoke_all_for_user(user.company_id, user.id)
