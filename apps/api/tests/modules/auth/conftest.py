"""
Fixtures for authentication tests.
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from schoolauth.core.config import Settings
from schoolauth.core.rate_limit import reset_memory_store
from schoolauth.modules.auth.schemas import SignupRequest
from schoolauth.modules.schools.models import School, SchoolRole

TEST_JWT_SECRET = "test-secret-key-that-is-long-enough-for-hs256"


@pytest.fixture(autouse=True)
def clear_rate_limits():
    """Start every test with an empty in-memory rate limit store."""
    reset_memory_store()
    yield
    reset_memory_store()


@pytest.fixture
def settings():
    """Settings for tests: cheap bcrypt, no email provider, plain-HTTP cookies."""
    return Settings(
        python_env="test",
        jwt_secret_key=TEST_JWT_SECRET,
        access_token_expire_minutes=30,
        bcrypt_rounds=10,
        session_cookie_secure=False,
        resend_api_key=None,
        rate_limit_auth_requests=100,
        rate_limit_auth_window_seconds=60,
    )


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.refresh = AsyncMock()
    db.execute = AsyncMock()
    db.add = MagicMock()
    return db


@pytest.fixture
def signup_request():
    """A valid signup request."""
    return SignupRequest(
        school_name="Greenfield Academy",
        email="Admin@Greenfield.edu",
        phone_number="08012345678",
        contact_address="12 Market Road, Ikeja",
        admin_name="Ada Obi",
        password="pw123456",
        password_confirm="pw123456",
    )


@pytest.fixture
def sample_school():
    """Create a sample inactive school model."""
    school = MagicMock(spec=School)
    school.id = str(uuid4())
    school.school_name = "Greenfield Academy"
    school.email = "admin@greenfield.edu"
    school.phone_number = "08012345678"
    school.contact_address = "12 Market Road, Ikeja"
    school.admin_name = "Ada Obi"
    school.password_hash = "$2b$10$notarealhashnotarealhashnotarealhashnotarealhashnota"
    school.licence_hash = "0" * 64
    school.role = SchoolRole.SCHOOL
    school.is_active = False
    school.created_at = datetime.now(UTC)
    school.activated_at = None
    return school


@pytest.fixture
def active_school(sample_school):
    """The sample school after activation."""
    sample_school.is_active = True
    sample_school.activated_at = datetime.now(UTC)
    return sample_school
