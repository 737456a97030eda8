"""create schools table

Revision ID: a7c3e91f0b24
Revises:
Create Date: 2026-10-18 12:00:00.000000

This migration:
1. Creates the school_role enum type
2. Creates the schools table with unique constraints on email and licence digest
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "a7c3e91f0b24"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create the schools table."""
    school_role_enum = postgresql.ENUM("school", name="school_role", create_type=False)
    school_role_enum.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "schools",
        # Primary key and timestamps (from BaseModel)
        sa.Column("id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        # Identity
        sa.Column("school_name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("phone_number", sa.String(length=20), nullable=False),
        sa.Column("contact_address", sa.String(length=500), nullable=False),
        sa.Column("admin_name", sa.String(length=200), nullable=False),
        # Digests
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("licence_hash", sa.String(length=64), nullable=False),
        # Account state
        sa.Column("role", school_role_enum, nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("activated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email", name="uq_schools_email"),
        sa.UniqueConstraint("licence_hash", name="uq_schools_licence_hash"),
    )


def downgrade() -> None:
    """Drop the schools table."""
    op.drop_table("schools")
    postgresql.ENUM(name="school_role").drop(op.get_bind(), checkfirst=True)
