"""
Signup, login and refresh.

Login and refresh failures are deliberately undifferentiated: a missing
account and a wrong password produce the same error and message.
"""
import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from rbac_admin.core.exceptions import AlreadyExistsError, ConfigurationError, InvalidCredentialsError
from rbac_admin.core.security import hash_password, verify_password
from rbac_admin.core.tokens import TokenKind, TokenService
from rbac_admin.models import DEFAULT_ROLE, User
from rbac_admin.services import identity_store as store

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"
INVALID_REFRESH_TOKEN = "Invalid refresh token"


@dataclass(frozen=True)
class LoginResult:
    user: User
    access_token: str
    refresh_token: str
    expires_in: int


@dataclass(frozen=True)
class RefreshResult:
    access_token: str
    expires_in: int


def role_names(user: User) -> list[str]:
    return [user.role.name.value]


def signup(db: Session, full_name: str, email: str, password: str) -> User:
    role = store.find_role_by_name(db, DEFAULT_ROLE)
    if role is None:
        logger.error("Default role '%s' is missing; the database was never seeded", DEFAULT_ROLE.value)
        raise ConfigurationError(
            "Default user role not found. Database may not be properly initialized"
        )

    if store.exists_user_by_email(db, email):
        raise AlreadyExistsError("Email is already in use")

    user = User(
        full_name=full_name,
        email=email,
        password_hash=hash_password(password),
        role=role,
    )
    user = store.save_user(db, user)
    logger.info("User %s signed up", user.id)
    return user


def authenticate(db: Session, email: str, password: str) -> User:
    user = store.find_user_by_email(db, email)
    if not verify_password(password, user.password_hash if user else None):
        logger.info("Rejected login attempt")
        raise InvalidCredentialsError(INVALID_CREDENTIALS)
    return user


def login(db: Session, tokens: TokenService, email: str, password: str) -> LoginResult:
    user = authenticate(db, email, password)

    access_token = tokens.issue_access_token(user.email, role_names(user))
    refresh_token = tokens.issue_refresh_token(user.email)
    logger.info("User %s logged in", user.id)

    return LoginResult(
        user=user,
        access_token=access_token,
        refresh_token=refresh_token,
        expires_in=tokens.access_token_lifetime_ms,
    )


def refresh(db: Session, tokens: TokenService, refresh_token: str) -> RefreshResult:
    """Mint a new access token. The refresh token itself is left as is."""
    subject = tokens.extract_subject(refresh_token, TokenKind.REFRESH)

    user = store.find_user_by_email(db, subject)
    if user is None:
        raise InvalidCredentialsError(INVALID_REFRESH_TOKEN)
    if not tokens.is_valid(refresh_token, user.email, TokenKind.REFRESH):
        raise InvalidCredentialsError(INVALID_REFRESH_TOKEN)

    return RefreshResult(
        access_token=tokens.issue_access_token(user.email, role_names(user)),
        expires_in=tokens.access_token_lifetime_ms,
    )
