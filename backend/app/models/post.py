"""
PerkBoard Backend - Post SQLAlchemy Model
===========================================

What:  ORM model representing the `posts` table.
Why:   A post is a user-authored build: a name, a description and the set of
       perks it uses. Search reads name, description and perk_ids.

Query Patterns:
    - All posts (feed, search): SELECT ... ORDER BY created_at DESC
    - Posts by author: SELECT ... WHERE author_id = :id
      → Uses idx_posts_author_id
    - Saved posts: SELECT ... WHERE id = ANY(:ids)
"""

import uuid
from datetime import datetime, timezone
from typing import List

from sqlalchemy import ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.dialects.postgresql import ARRAY, TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Post(Base):
    """A perk build published by a user."""

    __tablename__ = "posts"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=text("gen_random_uuid()"),
    )

    name: Mapped[str] = mapped_column(String(200), nullable=False)

    description: Mapped[str] = mapped_column(
        Text, nullable=False, default="", server_default=text("''"),
    )

    # What: Number of users who currently have this post saved
    # Never negative; PostService clamps decrements at zero
    saves: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=text("0"),
    )

    # What: Ordered perk ids tagged on this post (order is the build's slot order)
    perk_ids: Mapped[List[uuid.UUID]] = mapped_column(
        ARRAY(UUID(as_uuid=True)),
        nullable=False,
        default=list,
        server_default=text("'{}'"),
    )

    author_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    # What: Which side the build is for, e.g. "survivor" or "killer"
    type: Mapped[str] = mapped_column(String(50), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_posts_author_id", author_id),
        Index("idx_posts_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, name='{self.name}', saves={self.saves})>"
