"""
Authentication Router

API endpoints for the school account lifecycle.
Signup, activation and sign-in are public; /me requires a session.

Endpoints:
- POST /auth/signup - Register a school and email its licence number
- POST /auth/activate - Activate a school with its licence number
- POST /auth/signin - Sign in with email and password
- GET /auth/me - Get the signed-in school

Security:
- Rate limiting on all public endpoints
- Session token delivered only as an HTTP-only, SameSite=strict cookie
- Password and licence digests never appear in responses
- Generic error for unknown email and wrong password
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from schoolauth.core.auth import get_current_school
from schoolauth.core.config import Settings, get_settings
from schoolauth.core.database import get_db
from schoolauth.core.rate_limit import rate_limit
from schoolauth.core.security import SessionToken
from schoolauth.modules.auth import service
from schoolauth.modules.auth.exceptions import AuthServiceError
from schoolauth.modules.auth.schemas import (
    ActivateRequest,
    CurrentSchoolResponse,
    SchoolResponse,
    SessionResponse,
    SigninRequest,
    SignupRequest,
    SignupResponse,
)
from schoolauth.modules.schools.models import School

logger = logging.getLogger(__name__)

router = APIRouter()

_ERROR_EXAMPLE = {
    "application/json": {
        "example": {"status": "fail", "error": "ERROR_CODE", "message": "Description."}
    }
}


def _http_error(e: AuthServiceError) -> HTTPException:
    return HTTPException(
        status_code=e.status_code,
        detail={"error": e.error_code, "message": e.message},
    )


def _internal_error() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={
            "error": "INTERNAL_ERROR",
            "message": "An unexpected error occurred. Please try again later.",
        },
    )


def _set_session_cookie(response: Response, settings: Settings, session: SessionToken) -> None:
    """Place the session token in a cookie that expires with the token."""
    response.set_cookie(
        key=settings.session_cookie_name,
        value=session.token,
        max_age=session.max_age,
        expires=session.expires_at,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="strict",
    )


@router.post(
    "/signup",
    response_model=SignupResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a School",
    description="""
Register a new school account.

The account is created inactive and a licence number is emailed to the
school's address. The licence is required to activate the account.

If the licence email cannot be delivered, the account is removed again
and the request fails; the school may simply sign up again.
""",
    responses={
        400: {"description": "Validation error", "content": _ERROR_EXAMPLE},
        409: {"description": "Email already registered", "content": _ERROR_EXAMPLE},
        429: {"description": "Rate limit exceeded", "content": _ERROR_EXAMPLE},
        503: {"description": "Licence email could not be sent", "content": _ERROR_EXAMPLE},
    },
)
@rate_limit()
async def signup(
    request: Request,
    data: SignupRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> SignupResponse:
    """
    Register a school and email its licence number.

    Raises:
        HTTPException 409: If the email is already registered
        HTTPException 503: If the licence email failed (registration rolled back)
    """
    try:
        return await service.register_school(db, settings, data)
    except AuthServiceError as e:
        logger.warning(f"Signup rejected: {e.error_code}")
        raise _http_error(e) from e
    except Exception as e:
        logger.exception(f"Unexpected error during signup: {e}")
        raise _internal_error() from e


@router.post(
    "/activate",
    response_model=SessionResponse,
    summary="Activate a School Account",
    description="""
Activate a school account with the licence number from the signup email.

A licence activates its account once. On success the session cookie is set.
""",
    responses={
        400: {"description": "Missing or invalid licence", "content": _ERROR_EXAMPLE},
        429: {"description": "Rate limit exceeded", "content": _ERROR_EXAMPLE},
    },
)
@rate_limit()
async def activate(
    request: Request,
    response: Response,
    data: ActivateRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> SessionResponse:
    """
    Activate a school account.

    Raises:
        HTTPException 400: If the licence is unknown or already used
    """
    try:
        school, session = await service.activate_school(db, settings, data.licence)
    except AuthServiceError as e:
        logger.warning(f"Activation rejected: {e.error_code}")
        raise _http_error(e) from e
    except Exception as e:
        logger.exception(f"Unexpected error during activation: {e}")
        raise _internal_error() from e

    _set_session_cookie(response, settings, session)
    return SessionResponse(
        message="Account activated successfully.",
        school=SchoolResponse.model_validate(school),
    )


@router.post(
    "/signin",
    response_model=SessionResponse,
    summary="Sign In",
    description="""
Sign in with the school's email and password.

Unknown emails and wrong passwords get the same response. Accounts that
have not been activated are refused with a distinct message.
""",
    responses={
        400: {"description": "Validation error", "content": _ERROR_EXAMPLE},
        401: {"description": "Bad credentials or inactive account", "content": _ERROR_EXAMPLE},
        429: {"description": "Rate limit exceeded", "content": _ERROR_EXAMPLE},
    },
)
@rate_limit()
async def signin(
    request: Request,
    response: Response,
    credentials: SigninRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> SessionResponse:
    """
    Authenticate a school and set its session cookie.

    Raises:
        HTTPException 401: Invalid credentials or account not activated
    """
    try:
        school, session = await service.sign_in(
            db, settings, credentials.email, credentials.password
        )
    except AuthServiceError as e:
        logger.warning(f"Sign-in rejected: {e.error_code}")
        raise _http_error(e) from e
    except Exception as e:
        logger.exception(f"Unexpected error during sign-in: {e}")
        raise _internal_error() from e

    _set_session_cookie(response, settings, session)
    return SessionResponse(
        message="Signed in successfully.",
        school=SchoolResponse.model_validate(school),
    )


@router.get(
    "/me",
    response_model=CurrentSchoolResponse,
    summary="Get Signed-in School",
    responses={401: {"description": "Not signed in", "content": _ERROR_EXAMPLE}},
)
async def me(school: School = Depends(get_current_school)) -> CurrentSchoolResponse:
    """Return the public profile of the signed-in school."""
    return CurrentSchoolResponse(school=SchoolResponse.model_validate(school))
