"""
School Models

The School is the only account kind in the system. A school registers,
receives a licence number by email and activates its account with it.

Digest columns are deferred: a plain SELECT never loads them. Verification
paths opt in through SchoolProjection (see repository.py).
"""

from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, DateTime, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import ENUM
from sqlalchemy.orm import Mapped, mapped_column

from schoolauth.modules.shared import BaseModel


class SchoolRole(str, Enum):
    """Role tag carried by school accounts."""

    SCHOOL = "school"


class School(BaseModel):
    """
    School account.

    Created inactive by registration and switched to active exactly once
    by licence activation.
    """

    __tablename__ = "schools"

    # Identity
    school_name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone_number: Mapped[str] = mapped_column(String(20), nullable=False)
    contact_address: Mapped[str] = mapped_column(String(500), nullable=False)
    admin_name: Mapped[str] = mapped_column(String(200), nullable=False)

    # Secrets (digests only)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False, deferred=True)
    licence_hash: Mapped[str] = mapped_column(String(64), nullable=False, deferred=True)

    # Account state
    role: Mapped[SchoolRole] = mapped_column(
        ENUM(
            SchoolRole,
            name="school_role",
            create_type=True,
            values_callable=lambda roles: [role.value for role in roles],
        ),
        nullable=False,
        default=SchoolRole.SCHOOL,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    activated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        UniqueConstraint("email", name="uq_schools_email"),
        UniqueConstraint("licence_hash", name="uq_schools_licence_hash"),
    )

    def __repr__(self) -> str:
        return f"<School(id={self.id}, email={self.email}, active={self.is_active})>"
