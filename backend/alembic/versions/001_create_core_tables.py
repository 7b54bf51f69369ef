"""Create users, posts and perks tables

Revision ID: 001
Revises: None
Create Date: 2026-10-18 00:00:00.000000+00:00

What:  Initial schema: users (with provider links and social lists),
       posts (perk id arrays) and perks (unique by name for upserts).
Rollback: downgrade() drops all three tables (destructive).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _uuid_pk() -> sa.Column:
    return sa.Column(
        "id",
        postgresql.UUID(as_uuid=True),
        server_default=sa.text("gen_random_uuid()"),
        nullable=False,
    )


def _uuid_array(name: str) -> sa.Column:
    return sa.Column(
        name,
        postgresql.ARRAY(postgresql.UUID(as_uuid=True)),
        server_default=sa.text("'{}'"),
        nullable=False,
    )


def _counter(name: str, comment: str = None) -> sa.Column:
    return sa.Column(name, sa.Integer(), server_default=sa.text("0"), nullable=False, comment=comment)


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        postgresql.TIMESTAMP(timezone=True),
        server_default=sa.text("CURRENT_TIMESTAMP"),
        nullable=False,
    )


def upgrade() -> None:
    op.create_table(
        "users",
        _uuid_pk(),
        sa.Column("google_id", sa.String(64), nullable=True, comment="Google account subject id"),
        sa.Column("steam_id", sa.String(64), nullable=True, comment="SteamID64 of the linked Steam account"),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("profile_pic", sa.String(500), nullable=True),
        sa.Column("perk_skin", sa.String(50), nullable=True, comment="Preferred perk icon skin (display setting)"),
        _uuid_array("saved_post_ids"),
        _uuid_array("following_ids"),
        _counter("followers"),
        _counter("save_count", "Total saves received across this user's posts"),
        _counter("post_count"),
        sa.Column("is_admin", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
    )
    op.create_index("ix_users_google_id", "users", ["google_id"], unique=True)
    op.create_index("ix_users_steam_id", "users", ["steam_id"], unique=True)

    op.create_table(
        "perks",
        _uuid_pk(),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("owner", sa.String(200), nullable=False, comment="Character the perk belongs to, or 'All' for general perks"),
        sa.Column("role", sa.String(50), nullable=False, comment="Open set: Survivor, Killer, ..."),
        sa.Column("img_url", sa.String(500), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_perks"),
        sa.UniqueConstraint("name", name="uq_perks_name"),
    )

    op.create_table(
        "posts",
        _uuid_pk(),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), server_default=sa.text("''"), nullable=False),
        _counter("saves"),
        _uuid_array("perk_ids"),
        sa.Column("author_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("type", sa.String(50), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("id", name="pk_posts"),
        sa.ForeignKeyConstraint(["author_id"], ["users.id"], name="fk_posts_author_id", ondelete="CASCADE"),
    )
    op.create_index("idx_posts_author_id", "posts", ["author_id"])
    op.create_index(
        "idx_posts_created_at",
        "posts",
        [sa.text("created_at DESC")],
    )


def downgrade() -> None:
    op.drop_index("idx_posts_created_at", table_name="posts")
    op.drop_index("idx_posts_author_id", table_name="posts")
    op.drop_table("posts")
    op.drop_table("perks")
    op.drop_index("ix_users_steam_id", table_name="users")
    op.drop_index("ix_users_google_id", table_name="users")
    op.drop_table("users")
