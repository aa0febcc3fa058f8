"""Bearer tokens that tie a user to one login session."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt

from clubsphere.core import config

REQUIRED_CLAIMS = ["sub", "sid", "exp", "iat"]


@dataclass(frozen=True)
class TokenClaims:
    user_id: str
    session_id: str
    expires_at: datetime


def create_access_token(subject: str, session_id: str, expires_minutes: int | None = None) -> str:
    issued_at = datetime.now(timezone.utc)
    expires_at = issued_at + timedelta(minutes=expires_minutes or config.JWT_EXPIRES_MINUTES)
    payload = {"sub": subject, "sid": session_id, "iat": issued_at, "exp": expires_at}
    return jwt.encode(payload, config.JWT_SECRET_KEY, algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str) -> TokenClaims:
    """Raises jwt.PyJWTError for bad signatures, expiry or missing claims."""
    payload = jwt.decode(
        token,
        config.JWT_SECRET_KEY,
        algorithms=[config.JWT_ALGORITHM],
        options={"require": REQUIRED_CLAIMS},
    )
    return TokenClaims(
        user_id=str(payload["sub"]),
        session_id=str(payload["sid"]),
        expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
    )
