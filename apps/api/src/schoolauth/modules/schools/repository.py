"""
School Repository

Database operations for school accounts. This module is the only code that
writes School rows.

Design Principles:
- Uniqueness (email, licence digest) is enforced by database constraints,
  never by a read-then-write check
- Digest columns are loaded only when a SchoolProjection asks for them
- Activation is a single conditional UPDATE, safe under concurrent attempts
- No user-facing validation happens here; schemas do that before we are called
"""

import enum
import logging
import re

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import undefer

from schoolauth.modules.auth.exceptions import (
    DuplicateEmailError,
    LicenceCollisionError,
    PersistenceError,
)
from schoolauth.modules.schools.models import School, SchoolRole

logger = logging.getLogger(__name__)

LICENCE_HASH_CONSTRAINT = "uq_schools_licence_hash"

_CONSTRAINT_IN_MESSAGE = re.compile(r'constraint "([^"]+)"')


class SchoolProjection(enum.Flag):
    """Which secret digests a query should load in addition to public fields."""

    PUBLIC = 0
    PASSWORD_DIGEST = enum.auto()
    LICENCE_DIGEST = enum.auto()


def _violated_constraint(error: IntegrityError) -> str | None:
    """
    Name of the constraint behind an IntegrityError.

    asyncpg exposes it as constraint_name on the driver exception, which the
    SQLAlchemy adapter chains as __cause__. Otherwise only the first line of
    the message is read: the DETAIL line quotes the row's values.
    """
    for candidate in (error.orig, getattr(error.orig, "__cause__", None)):
        name = getattr(candidate, "constraint_name", None)
        if name:
            return name

    first_line = str(error.orig).split("\n", 1)[0]
    match = _CONSTRAINT_IN_MESSAGE.search(first_line)
    return match.group(1) if match else None


def _projection_options(projection: SchoolProjection) -> list:
    options = []
    if SchoolProjection.PASSWORD_DIGEST in projection:
        options.append(undefer(School.password_hash))
    if SchoolProjection.LICENCE_DIGEST in projection:
        options.append(undefer(School.licence_hash))
    return options


async def create(
    db: AsyncSession,
    *,
    school_name: str,
    email: str,
    phone_number: str,
    contact_address: str,
    admin_name: str,
    password_hash: str,
    licence_hash: str,
) -> School:
    """
    Create a new, inactive school.

    Raises:
        DuplicateEmailError: If the email is already registered
        LicenceCollisionError: If the licence digest is already taken
        PersistenceError: For any other database failure
    """
    school = School(
        school_name=school_name,
        email=email,
        phone_number=phone_number,
        contact_address=contact_address,
        admin_name=admin_name,
        password_hash=password_hash,
        licence_hash=licence_hash,
        role=SchoolRole.SCHOOL,
        is_active=False,
    )

    db.add(school)
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        if _violated_constraint(e) == LICENCE_HASH_CONSTRAINT:
            logger.warning("Licence digest collision on school creation")
            raise LicenceCollisionError() from e
        logger.info(f"Rejected duplicate school email: {email}")
        raise DuplicateEmailError() from e
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to create school {email}: {e}")
        raise PersistenceError() from e

    await db.refresh(school)
    logger.info(f"Created school: {school.id} - {school.email}")
    return school


async def get_by_id(
    db: AsyncSession,
    school_id: str,
    projection: SchoolProjection = SchoolProjection.PUBLIC,
) -> School | None:
    """Get a school by ID."""
    try:
        result = await db.execute(
            select(School)
            .where(School.id == str(school_id))
            .options(*_projection_options(projection))
        )
    except SQLAlchemyError as e:
        logger.error(f"Failed to load school {school_id}: {e}")
        raise PersistenceError() from e
    return result.scalar_one_or_none()


async def get_by_email(
    db: AsyncSession,
    email: str,
    projection: SchoolProjection = SchoolProjection.PUBLIC,
) -> School | None:
    """
    Get a school by email address.

    Pass SchoolProjection.PASSWORD_DIGEST on credential verification paths;
    the default projection leaves both digests unloaded.
    """
    try:
        result = await db.execute(
            select(School)
            .where(School.email == email)
            .options(*_projection_options(projection))
        )
    except SQLAlchemyError as e:
        logger.error(f"Failed to load school by email: {e}")
        raise PersistenceError() from e
    return result.scalar_one_or_none()


async def activate_by_licence_hash(db: AsyncSession, licence_hash: str) -> School | None:
    """
    Activate the inactive school holding this licence digest.

    A single UPDATE ... WHERE is_active = false RETURNING. Only one of any
    number of concurrent callers gets the row back; the others, like callers
    with an unknown digest, get None. Other columns are not revalidated.
    """
    stmt = (
        update(School)
        .where(School.licence_hash == licence_hash, School.is_active.is_(False))
        .values(is_active=True, activated_at=func.now())
        .returning(School)
    )
    try:
        result = await db.execute(stmt)
        school = result.scalar_one_or_none()
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to activate school: {e}")
        raise PersistenceError() from e

    if school is not None:
        logger.info(f"Activated school: {school.id}")
    return school


async def delete_by_email(db: AsyncSession, email: str) -> int:
    """
    Delete a school by email.

    Only used to roll back a registration whose licence email failed.

    Returns:
        Number of rows deleted
    """
    try:
        result = await db.execute(delete(School).where(School.email == email))
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to delete school {email}: {e}")
        raise PersistenceError() from e

    logger.info(f"Deleted school {email} ({result.rowcount} row(s))")
    return result.rowcount
