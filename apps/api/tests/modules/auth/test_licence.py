"""
Unit tests for licence generation and hashing.
"""

from unittest.mock import patch

from schoolauth.modules.auth.licence import (
    LICENCE_LENGTH,
    Licence,
    generate_licence,
    hash_licence,
)


class TestHashLicence:
    """Tests for hash_licence."""

    def test_returns_sha256_hex_digest(self):
        """Digest should be 64 hex characters."""
        digest = hash_licence("12345678901")
        assert len(digest) == 64
        int(digest, 16)

    def test_is_deterministic(self):
        """Same licence should always hash to the same digest."""
        assert hash_licence("12345678901") == hash_licence("12345678901")

    def test_different_licences_different_digests(self):
        assert hash_licence("12345678901") != hash_licence("12345678902")

    def test_known_value(self):
        """Digest matches the standard SHA-256 of the input."""
        assert (
            hash_licence("abc")
            == "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
        )


class TestGenerateLicence:
    """Tests for generate_licence."""

    def test_plaintext_is_fixed_length_digits(self):
        licence = generate_licence()
        assert isinstance(licence, Licence)
        assert len(licence.plaintext) == LICENCE_LENGTH
        assert licence.plaintext.isdigit()

    def test_digest_matches_plaintext(self):
        """The stored digest must be the hash of the emailed plaintext."""
        licence = generate_licence()
        assert licence.digest == hash_licence(licence.plaintext)
        assert licence.digest != licence.plaintext

    def test_keeps_leading_zeros(self):
        """Licences are strings, so a leading zero is not dropped."""
        with patch("schoolauth.modules.auth.licence.secrets.choice", return_value="0"):
            licence = generate_licence()
        assert licence.plaintext == "0" * LICENCE_LENGTH

    def test_consecutive_licences_differ(self):
        licences = {generate_licence().plaintext for _ in range(50)}
        assert len(licences) == 50
