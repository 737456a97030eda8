"""
Authentication Errors

Every error raised by the registration, activation and sign-in flows.
Each carries a user-safe message, a stable error code and the HTTP status
the router answers with.
"""


class AuthServiceError(Exception):
    """Base exception for authentication service errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class ValidationError(AuthServiceError):
    """Raised when request input is missing or malformed."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            status_code=400,
        )


class DuplicateEmailError(AuthServiceError):
    """Raised when a school with the same email already exists."""

    def __init__(self):
        super().__init__(
            message="A school with this email address already exists.",
            error_code="DUPLICATE_EMAIL",
            status_code=409,
        )


class InvalidLicenceError(AuthServiceError):
    """
    Raised when a licence does not activate any account.

    Unknown licences and licences of already-active accounts share this
    error so callers cannot tell them apart.
    """

    def __init__(self):
        super().__init__(
            message="Invalid licence number.",
            error_code="INVALID_LICENCE",
            status_code=400,
        )


class AuthenticationError(AuthServiceError):
    """Raised when the email is unknown or the password is wrong."""

    def __init__(self):
        super().__init__(
            message="Incorrect email or password.",
            error_code="INVALID_CREDENTIALS",
            status_code=401,
        )


class AccountNotActivatedError(AuthServiceError):
    """Raised on sign-in with valid credentials for an inactive account."""

    def __init__(self):
        super().__init__(
            message="You have not activated your account. Please do so to gain access.",
            error_code="ACCOUNT_NOT_ACTIVATED",
            status_code=401,
        )


class DeliveryError(AuthServiceError):
    """Raised when the licence email could not be delivered."""

    def __init__(self):
        super().__init__(
            message="We could not send your licence email. Please try signing up again.",
            error_code="EMAIL_DELIVERY_FAILED",
            status_code=503,
        )


class PersistenceError(AuthServiceError):
    """Raised when the database rejects or fails an operation."""

    def __init__(self, message: str = "An unexpected error occurred. Please try again later."):
        super().__init__(
            message=message,
            error_code="PERSISTENCE_ERROR",
            status_code=500,
        )


class LicenceCollisionError(PersistenceError):
    """Raised when a freshly generated licence digest already exists."""


__all__ = [
    "AuthServiceError",
    "ValidationError",
    "DuplicateEmailError",
    "InvalidLicenceError",
    "AuthenticationError",
    "AccountNotActivatedError",
    "DeliveryError",
    "PersistenceError",
    "LicenceCollisionError",
]
