"""
PerkBoard Backend - Perk SQLAlchemy Model
===========================================

What:  ORM model representing the `perks` table.
How:   Rows are written only by POST /api/updatePerks, which upserts by name,
       so `name` carries a unique constraint.
"""

import uuid
from typing import Optional

from sqlalchemy import String, Text, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Perk(Base):
    """A named game ability with its description, owning character and role."""

    __tablename__ = "perks"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=text("gen_random_uuid()"),
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False, unique=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    owner: Mapped[str] = mapped_column(
        String(200), nullable=False,
        comment="Character the perk belongs to, or 'All' for general perks",
    )
    role: Mapped[str] = mapped_column(
        String(50), nullable=False,
        comment="Open set: Survivor, Killer, ...",
    )
    img_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    def __repr__(self) -> str:
        return f"<Perk(name='{self.name}', role='{self.role}')>"
