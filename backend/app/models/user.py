"""
PerkBoard Backend - User SQLAlchemy Model
===========================================

What:  ORM model representing the `users` table in PostgreSQL.
Who:   Used by UserService, PostService and the session dependencies.

Table Design Rationale:
    - google_id / steam_id: One column per identity provider. A user signs in
      through exactly one of them; the other stays NULL.
    - saved_post_ids / following_ids: UUID arrays. Lists are small (a user
      saves tens of posts, not millions) and always loaded with the user.
    - followers / save_count / post_count: Denormalized counters, updated by
      the services in the same transaction as the list they mirror.
    - is_admin: Role flag checked by the admin-only perk routes.
"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import Boolean, Integer, String, text
from sqlalchemy.dialects.postgresql import ARRAY, TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class User(Base):
    """A community member signed in through Google or Steam."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=text("gen_random_uuid()"),
    )

    # ── Identity Provider Links ───────────────────────────────────────────
    google_id: Mapped[Optional[str]] = mapped_column(
        String(64), nullable=True, unique=True, index=True,
        comment="Google account subject id",
    )
    steam_id: Mapped[Optional[str]] = mapped_column(
        String(64), nullable=True, unique=True, index=True,
        comment="SteamID64 of the linked Steam account",
    )

    # ── Profile ───────────────────────────────────────────────────────────
    username: Mapped[str] = mapped_column(String(100), nullable=False)
    profile_pic: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    perk_skin: Mapped[Optional[str]] = mapped_column(
        String(50), nullable=True,
        comment="Preferred perk icon skin (display setting)",
    )

    # ── Social Graph ──────────────────────────────────────────────────────
    # Lists are replaced, never mutated in place: SQLAlchemy does not track
    # in-place changes to ARRAY values.
    saved_post_ids: Mapped[List[uuid.UUID]] = mapped_column(
        ARRAY(UUID(as_uuid=True)),
        nullable=False,
        default=list,
        server_default=text("'{}'"),
    )
    following_ids: Mapped[List[uuid.UUID]] = mapped_column(
        ARRAY(UUID(as_uuid=True)),
        nullable=False,
        default=list,
        server_default=text("'{}'"),
    )

    # ── Counters ──────────────────────────────────────────────────────────
    followers: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=text("0"),
    )
    save_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=text("0"),
        comment="Total saves received across this user's posts",
    )
    post_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=text("0"),
    )

    is_admin: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false"),
    )

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"
