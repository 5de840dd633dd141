"""initial schema: businesses, social links and single-use tokens

Revision ID: 20261019_0001
Revises: 
Create Date: 2026-10-19 00:00:00
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None

_TOKEN_TABLES = ("email_verification_tokens", "password_reset_tokens")


def upgrade() -> None:
    op.create_table(
        "businesses",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("slug", sa.String(), nullable=False),
        sa.Column("tagline", sa.String(), nullable=False, server_default=""),
        sa.Column("logo", sa.String(), nullable=False, server_default=""),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("is_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_approved", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_businesses_slug", "businesses", ["slug"], unique=True)
    op.create_index("ix_businesses_email", "businesses", ["email"], unique=True)

    op.create_table(
        "social_links",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("business_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("platform", sa.String(), nullable=False),
        sa.Column("url", sa.String(), nullable=False, server_default=""),
        sa.Column("icon", sa.String(), nullable=False, server_default=""),
        sa.Column("display_order", sa.Integer(), nullable=False, server_default="0"),
        sa.ForeignKeyConstraint(["business_id"], ["businesses.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_social_links_business_id", "social_links", ["business_id"], unique=False)

    for table_name in _TOKEN_TABLES:
        op.create_table(
            table_name,
            sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
            sa.Column("token", sa.String(length=128), nullable=False),
            sa.Column("business_id", postgresql.UUID(as_uuid=True), nullable=False),
            sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
            sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
            sa.ForeignKeyConstraint(["business_id"], ["businesses.id"], ondelete="CASCADE"),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index(f"ix_{table_name}_token", table_name, ["token"], unique=True)
        op.create_index(f"ix_{table_name}_business_id", table_name, ["business_id"], unique=False)


def downgrade() -> None:
    for table_name in reversed(_TOKEN_TABLES):
        op.drop_index(f"ix_{table_name}_business_id", table_name=table_name)
        op.drop_index(f"ix_{table_name}_token", table_name=table_name)
        op.drop_table(table_name)

    op.drop_index("ix_social_links_business_id", table_name="social_links")
    op.drop_table("social_links")

    op.drop_index("ix_businesses_email", table_name="businesses")
    op.drop_index("ix_businesses_slug", table_name="businesses")
    op.drop_table("businesses")
