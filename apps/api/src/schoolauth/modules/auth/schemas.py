"""
Authentication Schemas

Pydantic schemas for request validation and response serialization.
These are the only place user input is validated; everything that reaches
the service layer has already passed them.

Bodies use camelCase on the wire (schoolName, passwordConfirm, ...);
snake_case field names are accepted as well.
"""

from datetime import datetime

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from schoolauth.modules.schools.models import SchoolRole

PASSWORD_MIN_LENGTH = 8
# bcrypt only reads the first 72 bytes of its input
PASSWORD_MAX_BYTES = 72

NAME_PATTERN = r"^[\w\s.,'&()-]+$"
PHONE_PATTERN = r"^\+?[0-9]{7,15}$"
ADDRESS_PATTERN = r"^[\w\s,.'#/-]+$"


class CamelModel(BaseModel):
    """Base schema with camelCase aliases and whitespace stripping."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


def _normalize_email(value: str) -> str:
    return value.strip().lower()


class SignupRequest(CamelModel):
    """Request body for POST /auth/signup."""

    school_name: str = Field(..., min_length=1, max_length=200, pattern=NAME_PATTERN)
    email: EmailStr
    phone_number: str = Field(..., min_length=1, max_length=20, pattern=PHONE_PATTERN)
    contact_address: str = Field(..., min_length=1, max_length=500, pattern=ADDRESS_PATTERN)
    admin_name: str = Field(..., min_length=1, max_length=200, pattern=NAME_PATTERN)
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH)
    password_confirm: str = Field(..., min_length=1)

    @field_validator("email", mode="after")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return _normalize_email(value)

    @field_validator("password", mode="after")
    @classmethod
    def check_password_bytes(cls, value: str) -> str:
        if len(value.encode("utf-8")) > PASSWORD_MAX_BYTES:
            raise ValueError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes long")
        return value

    @model_validator(mode="after")
    def check_passwords_match(self) -> "SignupRequest":
        if self.password != self.password_confirm:
            raise ValueError("Passwords do not match")
        return self


class SignupResponse(CamelModel):
    """Response after a successful signup. No session is issued yet."""

    status: str = "success"
    message: str = "Signup successful, kindly check your email for your Licence Number."


class ActivateRequest(CamelModel):
    """Request body for POST /auth/activate."""

    licence: str = Field(..., min_length=1, max_length=64)


class SigninRequest(CamelModel):
    """Request body for POST /auth/signin."""

    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email", mode="after")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return _normalize_email(value)


class SchoolResponse(CamelModel):
    """Public profile of a school. Never includes password or licence digests."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    school_name: str
    email: str
    phone_number: str
    contact_address: str
    admin_name: str
    role: SchoolRole
    is_active: bool
    created_at: datetime
    activated_at: datetime | None = None


class SessionResponse(CamelModel):
    """Response after activation or sign-in. The token itself travels in a cookie."""

    status: str = "success"
    message: str
    school: SchoolResponse


class CurrentSchoolResponse(CamelModel):
    """Response for GET /auth/me."""

    status: str = "success"
    school: SchoolResponse
