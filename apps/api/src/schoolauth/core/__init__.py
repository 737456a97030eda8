"""
Core module - Configuration, database, security, and utilities.
"""

from schoolauth.core.config import Settings, get_settings
from schoolauth.core.database import Base, close_db, get_db, init_db
from schoolauth.core.redis import close_redis, get_redis, init_redis
from schoolauth.core.security import (
    SessionToken,
    create_access_token,
    decode_token,
    hash_password,
    issue_session_token,
    verify_password,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Database
    "Base",
    "get_db",
    "init_db",
    "close_db",
    # Redis
    "get_redis",
    "init_redis",
    "close_redis",
    # Security
    "SessionToken",
    "hash_password",
    "verify_password",
    "create_access_token",
    "issue_session_token",
    "decode_token",
]
