"""
Licence Numbers

A licence is an 11-digit code emailed once to a newly registered school.
Only its SHA-256 digest is stored, so a database leak does not expose
usable licences.
"""

import hashlib
import secrets
from typing import NamedTuple

LICENCE_LENGTH = 11


class Licence(NamedTuple):
    """A freshly generated licence: the plaintext to email and the digest to store."""

    plaintext: str
    digest: str


def hash_licence(licence: str) -> str:
    """
    Hash a licence for storage or lookup.

    Args:
        licence: The plaintext licence number

    Returns:
        Hex-encoded SHA-256 digest of the licence
    """
    return hashlib.sha256(licence.encode()).hexdigest()


def generate_licence() -> Licence:
    """
    Generate a new random licence number and its digest.

    Each digit comes from the secrets module, so consecutive licences are
    independent and leading zeros are possible.
    """
    plaintext = "".join(secrets.choice("0123456789") for _ in range(LICENCE_LENGTH))
    return Licence(plaintext=plaintext, digest=hash_licence(plaintext))
