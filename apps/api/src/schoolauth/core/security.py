"""
Security Utilities

Password hashing with bcrypt and signed session tokens with PyJWT.
"""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import Any

import bcrypt
import jwt

from schoolauth.core.config import Settings

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TYPE = "access"


def hash_password(password: str, rounds: int = 12) -> str:
    """
    Hash a password with a per-password salt.

    Args:
        password: Plain text password
        rounds: bcrypt cost factor

    Returns:
        bcrypt hash string with the salt embedded
    """
    if not password:
        raise ValueError("Password cannot be empty")

    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plain text password against a bcrypt hash."""
    if not password or not password_hash:
        return False

    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError as e:
        logger.warning(f"Password verification failed: {e}")
        return False


@lru_cache
def dummy_password_hash(rounds: int) -> str:
    """
    A throwaway hash used to spend the same bcrypt time when no account matches.
    """
    return hash_password("not-a-real-password", rounds=rounds)


@dataclass(frozen=True)
class SessionToken:
    """A signed session token and its lifetime."""

    token: str
    expires_at: datetime
    max_age: int


def create_access_token(settings: Settings, subject: str) -> SessionToken:
    """
    Create a signed, expiring access token.

    The payload carries the subject identifier and standard timing claims only.
    """
    now = datetime.now(UTC)
    lifetime = timedelta(minutes=settings.access_token_expire_minutes)
    expires_at = now + lifetime

    payload: dict[str, Any] = {
        "sub": str(subject),
        "type": ACCESS_TOKEN_TYPE,
        "iat": int(now.timestamp()),
        "exp": int(expires_at.timestamp()),
    }
    token = jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)
    return SessionToken(
        token=token,
        expires_at=expires_at,
        max_age=int(lifetime.total_seconds()),
    )


def issue_session_token(settings: Settings, school_id: str) -> SessionToken:
    """Issue the session token for an authenticated school."""
    return create_access_token(settings, subject=school_id)


def decode_token(settings: Settings, token: str) -> dict[str, Any]:
    """
    Decode and verify a token.

    Raises:
        jwt.InvalidTokenError: If the signature, algorithm or expiry check fails
    """
    return jwt.decode(
        token,
        settings.jwt_secret_key,
        algorithms=[settings.jwt_algorithm],
        options={"require": ["sub", "exp"]},
    )
