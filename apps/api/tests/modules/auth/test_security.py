"""
Unit tests for password hashing and session tokens.
"""

from datetime import UTC, datetime, timedelta

import jwt
import pytest

from schoolauth.core.security import (
    ACCESS_TOKEN_TYPE,
    decode_token,
    dummy_password_hash,
    hash_password,
    issue_session_token,
    verify_password,
)


class TestPasswordHashing:
    """Tests for hash_password and verify_password."""

    def test_hash_is_not_plaintext(self):
        password_hash = hash_password("pw123456", rounds=10)
        assert password_hash != "pw123456"
        assert password_hash.startswith("$2")

    def test_hash_is_salted(self):
        assert hash_password("pw123456", rounds=10) != hash_password("pw123456", rounds=10)

    def test_verify_correct_password(self):
        password_hash = hash_password("pw123456", rounds=10)
        assert verify_password("pw123456", password_hash) is True

    def test_verify_wrong_password(self):
        password_hash = hash_password("pw123456", rounds=10)
        assert verify_password("wrongpw", password_hash) is False

    def test_verify_against_malformed_hash(self):
        assert verify_password("pw123456", "not-a-bcrypt-hash") is False

    def test_verify_empty_inputs(self):
        assert verify_password("", "anything") is False
        assert verify_password("pw123456", "") is False

    def test_empty_password_cannot_be_hashed(self):
        with pytest.raises(ValueError):
            hash_password("", rounds=10)

    def test_dummy_hash_is_cached_and_never_matches(self):
        assert dummy_password_hash(10) is dummy_password_hash(10)
        assert verify_password("pw123456", dummy_password_hash(10)) is False


class TestSessionTokens:
    """Tests for issue_session_token and decode_token."""

    def test_token_round_trips_subject(self, settings):
        session = issue_session_token(settings, "school-123")
        payload = decode_token(settings, session.token)

        assert payload["sub"] == "school-123"
        assert payload["type"] == ACCESS_TOKEN_TYPE

    def test_payload_carries_no_secrets(self, settings):
        """Only the identifier and timing claims are signed into the token."""
        session = issue_session_token(settings, "school-123")
        payload = decode_token(settings, session.token)

        assert set(payload) == {"sub", "type", "iat", "exp"}

    def test_expiry_matches_settings(self, settings):
        session = issue_session_token(settings, "school-123")

        assert session.max_age == settings.access_token_expire_minutes * 60
        expected = datetime.now(UTC) + timedelta(minutes=settings.access_token_expire_minutes)
        assert abs((session.expires_at - expected).total_seconds()) < 5

        payload = decode_token(settings, session.token)
        assert payload["exp"] == int(session.expires_at.timestamp())

    def test_token_signed_with_other_secret_rejected(self, settings):
        other = settings.model_copy(update={"jwt_secret_key": "x" * 48})
        session = issue_session_token(other, "school-123")

        with pytest.raises(jwt.InvalidSignatureError):
            decode_token(settings, session.token)

    def test_expired_token_rejected(self, settings):
        token = jwt.encode(
            {
                "sub": "school-123",
                "type": ACCESS_TOKEN_TYPE,
                "exp": int((datetime.now(UTC) - timedelta(minutes=1)).timestamp()),
            },
            settings.jwt_secret_key,
            algorithm=settings.jwt_algorithm,
        )

        with pytest.raises(jwt.ExpiredSignatureError):
            decode_token(settings, token)

    def test_token_without_expiry_rejected(self, settings):
        token = jwt.encode(
            {"sub": "school-123"}, settings.jwt_secret_key, algorithm=settings.jwt_algorithm
        )

        with pytest.raises(jwt.MissingRequiredClaimError):
            decode_token(settings, token)
