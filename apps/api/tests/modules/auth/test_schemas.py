"""
Unit tests for authentication request and response schemas.
"""

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from schoolauth.modules.auth.schemas import (
    ActivateRequest,
    SchoolResponse,
    SigninRequest,
    SignupRequest,
    SignupResponse,
)

VALID_SIGNUP = {
    "schoolName": "Greenfield Academy",
    "email": "admin@greenfield.edu",
    "phoneNumber": "08012345678",
    "contactAddress": "12 Market Road, Ikeja",
    "adminName": "Ada Obi",
    "password": "pw123456",
    "passwordConfirm": "pw123456",
}


class TestSignupRequest:
    """Tests for SignupRequest validation."""

    def test_accepts_camel_case_body(self):
        data = SignupRequest.model_validate(VALID_SIGNUP)
        assert data.school_name == "Greenfield Academy"
        assert data.phone_number == "08012345678"

    def test_accepts_snake_case_fields(self):
        data = SignupRequest(
            school_name="Greenfield Academy",
            email="admin@greenfield.edu",
            phone_number="08012345678",
            contact_address="12 Market Road",
            admin_name="Ada Obi",
            password="pw123456",
            password_confirm="pw123456",
        )
        assert data.admin_name == "Ada Obi"

    def test_email_is_lowercased(self):
        data = SignupRequest.model_validate({**VALID_SIGNUP, "email": "Admin@Greenfield.EDU"})
        assert data.email == "admin@greenfield.edu"

    def test_strips_whitespace(self):
        data = SignupRequest.model_validate({**VALID_SIGNUP, "schoolName": "  Greenfield  "})
        assert data.school_name == "Greenfield"

    def test_password_mismatch_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            SignupRequest.model_validate({**VALID_SIGNUP, "passwordConfirm": "different1"})
        assert "Passwords do not match" in str(exc_info.value)

    def test_short_password_rejected(self):
        with pytest.raises(ValidationError):
            SignupRequest.model_validate(
                {**VALID_SIGNUP, "password": "short", "passwordConfirm": "short"}
            )

    def test_password_over_bcrypt_limit_rejected(self):
        long_password = "é" * 40  # 80 bytes in UTF-8
        with pytest.raises(ValidationError) as exc_info:
            SignupRequest.model_validate(
                {**VALID_SIGNUP, "password": long_password, "passwordConfirm": long_password}
            )
        assert "72 bytes" in str(exc_info.value)

    @pytest.mark.parametrize(
        "field",
        ["schoolName", "email", "phoneNumber", "contactAddress", "adminName", "password"],
    )
    def test_missing_field_rejected(self, field):
        body = {k: v for k, v in VALID_SIGNUP.items() if k != field}
        with pytest.raises(ValidationError):
            SignupRequest.model_validate(body)

    @pytest.mark.parametrize("email", ["not-an-email", "a@", "@x.com"])
    def test_invalid_email_rejected(self, email):
        with pytest.raises(ValidationError):
            SignupRequest.model_validate({**VALID_SIGNUP, "email": email})

    @pytest.mark.parametrize("phone", ["12345", "0801-234-5678", "phone123456"])
    def test_invalid_phone_rejected(self, phone):
        with pytest.raises(ValidationError):
            SignupRequest.model_validate({**VALID_SIGNUP, "phoneNumber": phone})

    def test_international_phone_accepted(self):
        data = SignupRequest.model_validate({**VALID_SIGNUP, "phoneNumber": "+2348012345678"})
        assert data.phone_number == "+2348012345678"

    def test_markup_in_name_rejected(self):
        with pytest.raises(ValidationError):
            SignupRequest.model_validate({**VALID_SIGNUP, "schoolName": "<script>x</script>"})

    def test_empty_address_rejected(self):
        with pytest.raises(ValidationError):
            SignupRequest.model_validate({**VALID_SIGNUP, "contactAddress": "   "})


class TestSigninRequest:
    """Tests for SigninRequest validation."""

    def test_email_is_lowercased(self):
        data = SigninRequest(email="A@X.COM", password="pw123456")
        assert data.email == "a@x.com"

    def test_empty_password_rejected(self):
        with pytest.raises(ValidationError):
            SigninRequest(email="a@x.com", password="")


class TestActivateRequest:
    """Tests for ActivateRequest validation."""

    def test_missing_licence_rejected(self):
        with pytest.raises(ValidationError):
            ActivateRequest.model_validate({})

    def test_blank_licence_rejected(self):
        with pytest.raises(ValidationError):
            ActivateRequest(licence="   ")


class TestResponses:
    """Tests for response serialization."""

    def test_signup_response_defaults(self):
        response = SignupResponse()
        assert response.status == "success"
        assert "Licence Number" in response.message

    def test_school_response_excludes_digests(self, sample_school):
        sample_school.is_active = True
        sample_school.activated_at = datetime.now(UTC)

        body = SchoolResponse.model_validate(sample_school).model_dump(by_alias=True)

        assert body["schoolName"] == "Greenfield Academy"
        assert body["isActive"] is True
        assert "passwordHash" not in body
        assert "licenceHash" not in body
        assert "password_hash" not in body
        assert "licence_hash" not in body
