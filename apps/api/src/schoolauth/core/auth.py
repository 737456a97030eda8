"""
Authentication Dependencies

Resolves the signed-in school from its session token.
The token is read from the session cookie first, then from an
Authorization: Bearer header.
"""

import logging

import jwt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from schoolauth.core.config import Settings, get_settings
from schoolauth.core.database import get_db
from schoolauth.core.security import ACCESS_TOKEN_TYPE, decode_token
from schoolauth.modules.schools import repository
from schoolauth.modules.schools.models import School

logger = logging.getLogger(__name__)

# Security scheme for OpenAPI documentation
bearer_scheme = HTTPBearer(
    auto_error=False,
    description="Session token, as an alternative to the session cookie",
)


def _unauthorized(error: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error": error, "message": message},
        headers={"WWW-Authenticate": "Bearer"},
    )


def _extract_token(
    request: Request,
    settings: Settings,
    credentials: HTTPAuthorizationCredentials | None,
) -> str | None:
    token = request.cookies.get(settings.session_cookie_name)
    if token:
        return token
    if credentials:
        return credentials.credentials
    return None


async def get_current_school(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> School:
    """
    FastAPI dependency returning the active school behind the session token.

    Raises:
        HTTPException 401: If the token is missing, invalid or expired,
            or the school no longer exists or is inactive
    """
    token = _extract_token(request, settings, credentials)
    if not token:
        raise _unauthorized("NOT_AUTHENTICATED", "You are not signed in.")

    try:
        payload = decode_token(settings, token)
    except jwt.ExpiredSignatureError as e:
        raise _unauthorized(
            "TOKEN_EXPIRED", "Your session has expired. Please sign in again."
        ) from e
    except jwt.InvalidTokenError as e:
        logger.warning(f"Invalid session token: {e}")
        raise _unauthorized("INVALID_TOKEN", "Invalid session token.") from e

    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise _unauthorized("INVALID_TOKEN", "Invalid session token.")

    school = await repository.get_by_id(db, payload["sub"])
    if school is None or not school.is_active:
        logger.warning(f"Session token for missing or inactive school: {payload['sub']}")
        raise _unauthorized("INVALID_TOKEN", "Invalid session token.")

    return school


__all__ = ["get_current_school"]
