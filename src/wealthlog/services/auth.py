"""Registration, login and profile management."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHash, VerificationError, VerifyMismatchError

from ..config import BaseConfig
from ..domain.repositories.user import UserRepository
from ..errors import AuthenticationError, AuthorizationError, ConflictError, ValidationError
from ..logging_config import get_logger
from ..models.user import User
from ..timeutils import utcnow
from .tokens import TokenInfo, issue_access_token, verify_access_token

logger = get_logger(__name__)

_hasher = PasswordHasher()

INVALID_CREDENTIALS = "Invalid email or password"
ACCOUNT_DEACTIVATED = "Account is deactivated. Please contact support."


@dataclass(slots=True)
class AuthResult:
    user: User
    token: str
    expires_in: int


def hash_password(password: str) -> str:
    return _hasher.hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    try:
        return _hasher.verify(password_hash, password)
    except (VerifyMismatchError, InvalidHash, VerificationError):
        return False


def _issue(user: User, config: BaseConfig) -> AuthResult:
    return AuthResult(
        user=user,
        token=issue_access_token(user, config=config),
        expires_in=config.JWT_EXPIRES_MINUTES * 60,
    )


def register(
    *,
    user_repo: UserRepository,
    config: BaseConfig,
    first_name: str,
    last_name: str,
    email: str,
    password: str,
    currency: Optional[str] = None,
) -> AuthResult:
    """Create an account and sign an access token for it."""

    email = email.strip().lower()
    if user_repo.get_by_email(email) is not None:
        raise ConflictError("User with this email already exists")

    user = User(
        first_name=first_name.strip(),
        last_name=last_name.strip(),
        email=email,
        password_hash=hash_password(password),
        currency=currency or config.DEFAULT_CURRENCY,
    )
    user = user_repo.create(user)
    logger.info("User registered", extra={"user_id": user.id, "email": user.email})
    return _issue(user, config)


def login(
    *, user_repo: UserRepository, config: BaseConfig, email: str, password: str
) -> AuthResult:
    """Verify credentials; unknown email and wrong password look the same."""

    user = user_repo.get_by_email(email)
    if user is None or not verify_password(user.password_hash, password):
        logger.warning("Login failed", extra={"email": email.strip().lower()})
        raise AuthenticationError(INVALID_CREDENTIALS)
    if not user.is_active:
        raise AuthorizationError(ACCOUNT_DEACTIVATED)

    now = utcnow()
    user_repo.touch_last_login(user.id, now)
    user.last_login = now
    logger.info("User logged in", extra={"user_id": user.id})
    return _issue(user, config)


def authenticate_token(
    token: Optional[str], *, user_repo: UserRepository, config: BaseConfig
) -> tuple[User, TokenInfo]:
    """Resolve a bearer token to a live, active user.

    Raises:
        AuthenticationError: missing/invalid token or unknown user
        AuthorizationError: the account is deactivated
    """

    if not token:
        raise AuthenticationError("Access token is required")
    info = verify_access_token(token, config=config)
    user = user_repo.get_by_id(info.user_id)
    if user is None:
        raise AuthenticationError("User not found")
    if not user.is_active:
        raise AuthorizationError(ACCOUNT_DEACTIVATED)
    return user, info


def update_profile(
    user: User,
    *,
    user_repo: UserRepository,
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
    currency: Optional[str] = None,
) -> User:
    if first_name is not None:
        user.first_name = first_name.strip()
    if last_name is not None:
        user.last_name = last_name.strip()
    if currency is not None:
        user.currency = currency
    user = user_repo.update(user)
    logger.info("Profile updated", extra={"user_id": user.id})
    return user


def change_password(
    user: User, *, user_repo: UserRepository, current_password: str, new_password: str
) -> None:
    if not verify_password(user.password_hash, current_password):
        raise AuthenticationError("Current password is incorrect")
    if current_password == new_password:
        raise ValidationError.for_field(
            "newPassword", "New password must be different from current password"
        )
    user.password_hash = hash_password(new_password)
    user_repo.update(user)
    logger.info("Password changed", extra={"user_id": user.id})
