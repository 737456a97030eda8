"""
Authentication Service Layer

Business logic for the school account lifecycle.
Orchestrates repository operations, licence handling, password hashing,
email delivery and session token issuance.

This module implements:
1. Registration Flow:
   - Generate a licence number and store only its digest
   - Hash the password and create an inactive school
   - Email the licence; delete the school again if delivery fails

2. Activation Flow:
   - Hash the presented licence and activate the matching inactive school
   - Issue a session token

3. Sign-in Flow:
   - Verify email and password, then the activation status
   - Issue a session token

Security considerations:
- Licences come from the secrets module and are SHA-256 hashed before storage
- Passwords are bcrypt hashed; hashing runs off the event loop
- Activation is single-use: an already-active school is treated like an
  unknown licence, in one database round-trip either way
- Unknown email and wrong password produce the same error and the same bcrypt cost
- Activation status is revealed only after the password has been verified
- Licences, passwords and tokens are never logged
"""

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from schoolauth.core.config import Settings
from schoolauth.core.email import send_licence
from schoolauth.core.security import (
    SessionToken,
    dummy_password_hash,
    hash_password,
    issue_session_token,
    verify_password,
)
from schoolauth.modules.auth.exceptions import (
    AccountNotActivatedError,
    AuthenticationError,
    DeliveryError,
    InvalidLicenceError,
    LicenceCollisionError,
    PersistenceError,
)
from schoolauth.modules.auth.licence import generate_licence, hash_licence
from schoolauth.modules.auth.schemas import SignupRequest, SignupResponse
from schoolauth.modules.schools import repository
from schoolauth.modules.schools.models import School
from schoolauth.modules.schools.repository import SchoolProjection

logger = logging.getLogger(__name__)

# Attempts at creating a school before a licence digest collision is fatal
LICENCE_MAX_ATTEMPTS = 3


async def _create_school(
    db: AsyncSession,
    data: SignupRequest,
    password_hash: str,
) -> tuple[School, str]:
    """
    Create the inactive school, regenerating the licence on digest collisions.

    Returns:
        The created school and the plaintext licence to email
    """
    for attempt in range(1, LICENCE_MAX_ATTEMPTS + 1):
        licence = generate_licence()
        try:
            school = await repository.create(
                db,
                school_name=data.school_name,
                email=data.email,
                phone_number=data.phone_number,
                contact_address=data.contact_address,
                admin_name=data.admin_name,
                password_hash=password_hash,
                licence_hash=licence.digest,
            )
            return school, licence.plaintext
        except LicenceCollisionError:
            logger.warning(f"Licence collision for {data.email} (attempt {attempt})")

    raise PersistenceError()


async def register_school(
    db: AsyncSession,
    settings: Settings,
    data: SignupRequest,
) -> SignupResponse:
    """
    Register a new school and email its licence number.

    Args:
        db: Database session
        settings: Application settings
        data: Validated signup request

    Returns:
        SignupResponse confirming that the licence was sent

    Raises:
        DuplicateEmailError: If the email is already registered
        DeliveryError: If the licence email could not be sent (school is deleted)
        PersistenceError: If the database fails
    """
    logger.info(f"Processing signup for school: {data.school_name}")

    password_hash = await asyncio.to_thread(hash_password, data.password, settings.bcrypt_rounds)

    school, licence = await _create_school(db, data, password_hash)

    try:
        sent = await send_licence(
            settings,
            to_email=school.email,
            admin_name=school.admin_name,
            school_name=school.school_name,
            licence=licence,
        )
    except Exception as e:
        logger.error(f"Exception sending licence email for school {school.id}: {e}")
        sent = False

    if not sent:
        logger.error(f"Licence email failed for school {school.id}; rolling back registration")
        await repository.delete_by_email(db, school.email)
        raise DeliveryError()

    logger.info(f"School registered: {school.id}")
    return SignupResponse()


async def activate_school(
    db: AsyncSession,
    settings: Settings,
    licence: str,
) -> tuple[School, SessionToken]:
    """
    Activate the school that owns a licence number.

    Presenting the licence of an already-active school is rejected exactly
    like an unknown licence.

    Returns:
        The activated school and its new session token

    Raises:
        InvalidLicenceError: If no inactive school holds this licence
    """
    school = await repository.activate_by_licence_hash(db, hash_licence(licence))

    if school is None:
        logger.warning("Activation attempt with invalid or used licence")
        raise InvalidLicenceError()

    logger.info(f"School activated: {school.id}")
    return school, issue_session_token(settings, school.id)


async def sign_in(
    db: AsyncSession,
    settings: Settings,
    email: str,
    password: str,
) -> tuple[School, SessionToken]:
    """
    Verify a school's credentials and issue a session token.

    Returns:
        The school and its new session token

    Raises:
        AuthenticationError: If the email is unknown or the password is wrong
        AccountNotActivatedError: If the credentials are right but the school is inactive
    """
    school = await repository.get_by_email(db, email, projection=SchoolProjection.PASSWORD_DIGEST)

    if school is None:
        # Spend the same bcrypt time as a real check
        await asyncio.to_thread(
            verify_password, password, dummy_password_hash(settings.bcrypt_rounds)
        )
        logger.warning(f"Sign-in attempt for unknown email: {email}")
        raise AuthenticationError()

    if not await asyncio.to_thread(verify_password, password, school.password_hash):
        logger.warning(f"Invalid password for school: {school.id}")
        raise AuthenticationError()

    if not school.is_active:
        logger.warning(f"Sign-in attempt for inactive school: {school.id}")
        raise AccountNotActivatedError()

    logger.info(f"School signed in: {school.id}")
    return school, issue_session_token(settings, school.id)
