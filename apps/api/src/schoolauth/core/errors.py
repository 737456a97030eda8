"""
Error Responses

Every error leaves the API as {"status", "error", "message"}:
- status is "fail" for 4xx and "error" for 5xx
- request validation failures become 400 VALIDATION_ERROR with the first violation
- unknown routes get a generic 404
- unhandled exceptions get a generic 500; details stay in the logs
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from schoolauth.modules.auth.exceptions import ValidationError

logger = logging.getLogger(__name__)

_DEFAULT_ERRORS: dict[int, tuple[str, str]] = {
    status.HTTP_404_NOT_FOUND: ("NOT_FOUND", "Not found."),
    status.HTTP_405_METHOD_NOT_ALLOWED: ("METHOD_NOT_ALLOWED", "Method not allowed."),
}


def error_body(status_code: int, error: str, message: str) -> dict[str, str]:
    return {
        "status": "fail" if status_code < 500 else "error",
        "error": error,
        "message": message,
    }


def _first_validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request."

    first = errors[0]
    message = str(first.get("msg", "Invalid value"))
    # Messages raised from our own validators arrive as "Value error, ..."
    message = message.removeprefix("Value error, ")

    # Drop the "body" prefix from the location
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    if field and first.get("type") != "value_error":
        return f"{field}: {message}"
    return message


async def http_exception_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
    detail = exc.detail
    if isinstance(detail, dict):
        error = str(detail.get("error", "ERROR"))
        message = str(detail.get("message", ""))
    else:
        error, message = _DEFAULT_ERRORS.get(exc.status_code, ("ERROR", str(detail)))

    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.status_code, error, message),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    error = ValidationError(_first_validation_message(exc))
    return JSONResponse(
        status_code=error.status_code,
        content=error_body(error.status_code, error.error_code, error.message),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "INTERNAL_ERROR",
            "An unexpected error occurred. Please try again later.",
        ),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the JSON error handlers on the application."""
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
