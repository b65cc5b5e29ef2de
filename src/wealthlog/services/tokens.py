"""Signed access tokens (HS256 JWT)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import jwt
from jwt import ExpiredSignatureError, InvalidTokenError

from ..config import BaseConfig
from ..errors import AuthenticationError
from ..models.user import User

ACCESS_TOKEN_TYPE = "access"


@dataclass(slots=True)
class TokenInfo:
    """Verified claims of an access token."""

    user_id: int
    email: str
    issued_at: datetime
    expires_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "userId": self.user_id,
            "email": self.email,
            "issuedAt": self.issued_at,
            "expiresAt": self.expires_at,
        }


def issue_access_token(
    user: User, *, config: BaseConfig, now: Optional[datetime] = None
) -> str:
    """Sign a token carrying the user id and email."""

    issued_at = now or datetime.now(timezone.utc)
    payload = {
        "sub": str(user.id),
        "userId": user.id,
        "email": user.email,
        "type": ACCESS_TOKEN_TYPE,
        "iat": issued_at,
        "exp": issued_at + timedelta(minutes=config.JWT_EXPIRES_MINUTES),
        "iss": config.JWT_ISSUER,
        "aud": config.JWT_AUDIENCE,
    }
    return jwt.encode(payload, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


def verify_access_token(token: str, *, config: BaseConfig) -> TokenInfo:
    """Check signature, expiry, issuer, audience and token type.

    Raises:
        AuthenticationError: "Token has expired" or "Invalid token"
    """

    try:
        payload = jwt.decode(
            token,
            config.JWT_SECRET,
            algorithms=[config.JWT_ALGORITHM],
            audience=config.JWT_AUDIENCE,
            issuer=config.JWT_ISSUER,
            options={"require": ["exp", "iat", "sub"]},
        )
    except ExpiredSignatureError as exc:
        raise AuthenticationError("Token has expired") from exc
    except InvalidTokenError as exc:
        raise AuthenticationError("Invalid token") from exc

    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise AuthenticationError("Invalid token")
    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError) as exc:
        raise AuthenticationError("Invalid token") from exc

    return TokenInfo(
        user_id=user_id,
        email=payload.get("email", ""),
        issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
        expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
    )


def bearer_token(header_value: Optional[str]) -> Optional[str]:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""

    if not header_value:
        return None
    scheme, _, token = header_value.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()
