"""Initial schema: users, usernames, admins, startups, startup_upvotes.

startup_upvotes holds one row per (startup, user); startups.upvotes is the counter kept equal to its row count.
"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(128), primary_key=True),
        sa.Column("display_name", sa.String(256), nullable=True),
        sa.Column("username", sa.String(20), nullable=True),
        sa.Column("email", sa.String(320), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("avatar_url", sa.String(2048), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_table(
        "usernames",
        sa.Column("username", sa.String(20), primary_key=True),
        sa.Column("uid", sa.String(128), nullable=True, index=True),
    )
    op.create_table(
        "admins",
        sa.Column("user_id", sa.String(128), primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_table(
        "startups",
        sa.Column("id", sa.String(32), primary_key=True),
        sa.Column("user_id", sa.String(128), nullable=False, index=True),
        sa.Column("name", sa.String(256), nullable=False),
        sa.Column("url", sa.String(2048), nullable=False),
        sa.Column("social_handle", sa.String(256), nullable=True),
        sa.Column("description", sa.String(256), nullable=True),
        sa.Column("category", sa.String(64), nullable=True),
        sa.Column("logo_url", sa.String(2048), nullable=True),
        sa.Column("status", sa.String(16), nullable=False, server_default="pending", index=True),
        sa.Column("listing_type", sa.String(16), nullable=True),
        sa.Column("do_follow_backlink", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("scheduled_launch_date", sa.DateTime(timezone=True), nullable=True, index=True),
        sa.Column("upvotes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_table(
        "startup_upvotes",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("startup_id", sa.String(32), sa.ForeignKey("startups.id"), nullable=False, index=True),
        sa.Column("user_id", sa.String(128), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("startup_id", "user_id", name="uq_startup_upvotes_startup_user"),
    )


def downgrade() -> None:
    op.drop_table("startup_upvotes")
    op.drop_table("startups")
    op.drop_table("admins")
    op.drop_table("usernames")
    op.drop_table("users")
