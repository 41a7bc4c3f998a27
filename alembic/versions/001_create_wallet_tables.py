"""Create users, images and works tables

Revision ID: 001
Revises: None
Create Date: 2024-06-01 00:00:00.000000+00:00

What:  Initial schema for the three record collections.
How:   Generic SQLAlchemy types (Uuid, JSON) so the same migration runs on
       PostgreSQL and SQLite.

Rollback: downgrade() drops all three tables (destructive).
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
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column(
            "email",
            sa.String(320),
            nullable=False,
            comment="Identity key; matches the email claim of bearer tokens",
        ),
        sa.Column(
            "profile",
            sa.JSON(),
            nullable=False,
            comment="Arbitrary profile fields supplied at registration",
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )

    op.create_table(
        "images",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("url", sa.String(1024), nullable=False, comment="Public URL of the stored object"),
        sa.Column(
            "public_id",
            sa.String(512),
            nullable=False,
            comment="Object-store key used to delete the file",
        ),
        sa.Column(
            "user",
            sa.String(320),
            nullable=False,
            comment="Owner identity (email claim of the uploading request)",
        ),
        sa.Column("uploaded_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_images_user_uploaded_at", "images", ["user", "uploaded_at"])

    op.create_table(
        "works",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("email", sa.String(320), nullable=False, comment="Owner identity"),
        sa.Column("data", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_works_email_created_at", "works", ["email", "created_at"])


def downgrade() -> None:
    op.drop_index("idx_works_email_created_at", table_name="works")
    op.drop_table("works")
    op.drop_index("idx_images_user_uploaded_at", table_name="images")
    op.drop_table("images")
    op.drop_table("users")
