"""
Fixtures for school repository tests.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest


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
def school_fields():
    """Keyword arguments for repository.create."""
    return {
        "school_name": "Greenfield Academy",
        "email": "admin@greenfield.edu",
        "phone_number": "08012345678",
        "contact_address": "12 Market Road, Ikeja",
        "admin_name": "Ada Obi",
        "password_hash": "$2b$12$abcdefghijklmnopqrstuuabcdefghijklmnopqrstuvwxyz01234",
        "licence_hash": "a" * 64,
    }
