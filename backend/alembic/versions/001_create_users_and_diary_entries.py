"""Create users and diary_entries tables

Revision ID: 001
Revises: None
Create Date: 2025-01-20 00:00:00.000000+00:00

What:  Initial schema: user accounts and their diary entries.
How:   Portable column types (Integer keys, DATE, TIMESTAMP WITH TIME ZONE)
       so the same migration runs on PostgreSQL and SQLite.

Rollback: downgrade() drops both tables (destructive — all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("user_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "username",
            sa.String(20),
            nullable=False,
            comment="3-20 alphanumeric characters",
        ),
        sa.Column("password", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column(
            "user_level",
            sa.String(10),
            nullable=False,
            server_default=sa.text("'regular'"),
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("user_id"),
        sa.UniqueConstraint("username"),
        sa.UniqueConstraint("email"),
    )

    op.create_table(
        "diary_entries",
        sa.Column("entry_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("entry_date", sa.Date(), nullable=False),
        sa.Column("mood", sa.String(25), nullable=True),
        sa.Column("weight", sa.Float(), nullable=True, comment="kg"),
        sa.Column("sleep_hours", sa.Float(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("entry_id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.user_id"], ondelete="CASCADE"),
    )

    # Serves "all entries of one user, newest date first"
    op.create_index(
        "idx_diary_entries_user_date",
        "diary_entries",
        ["user_id", "entry_date"],
    )


def downgrade() -> None:
    op.drop_index("idx_diary_entries_user_date", table_name="diary_entries")
    op.drop_table("diary_entries")
    op.drop_table("users")
