"""
PerkBoard Backend - Perk Service
==================================

What:  Lists stored perks, reads and parses the perk-definition asset, and
       upserts admin-supplied perk lists.
Who:   GET /api/perks, GET /api/perkDefs, POST /api/updatePerks, SearchService.

Definition Workflow:
    ┌──────────────┐    ┌───────────┐    ┌──────────────┐    ┌────────────┐
    │ GET perkDefs │───▶│ read file │───▶│ parse (pure) │───▶│ JSON to    │
    │   (admin)    │    │ (aiofiles)│    │              │    │ admin UI   │
    └──────────────┘    └───────────┘    └──────────────┘    └─────┬──────┘
                                                                    │ reviewed
    ┌────────────────┐    ┌──────────────────────┐                 │
    │ POST updatePerks│◀──│ admin submits list    │◀────────────────┘
    └───────┬────────┘    └──────────────────────┘
            ▼
      upsert by name

    Parsing never writes to the database; only updatePerks does.
"""

import logging
from pathlib import Path
from typing import List, Optional, Sequence

import aiofiles
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.exceptions import DatabaseError, InputReadError
from app.models.perk import Perk
from app.schemas.perk import PerkDefinition, PerkResponse, PerkUpdateResult
from app.services.perk_parser import parse_perk_definitions

logger = logging.getLogger(__name__)


class PerkService:
    """Stateless perk operations; the session is passed in per call."""

    async def list_all(self, db: AsyncSession) -> List[Perk]:
        """Every stored perk, ordered by name. Used by search as well as GET /api/perks."""
        try:
            result = await db.execute(select(Perk).order_by(Perk.name))
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing perks: %s", str(e))
            raise DatabaseError(
                message="Could not retrieve perks. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def list_perks(self, db: AsyncSession) -> List[PerkResponse]:
        return [PerkResponse.model_validate(perk) for perk in await self.list_all(db)]

    async def read_definitions_text(self, path: Optional[str] = None) -> str:
        """
        Read the raw perk-definition asset.

        Line endings are preserved (newline="") so the parser sees the file
        exactly as authored and strips CRs itself.

        Raises:
            InputReadError: Missing file, permission problem, or not UTF-8 text.
        """
        file_path = Path(path or settings.perk_definitions_path)
        try:
            async with aiofiles.open(file_path, "r", encoding="utf-8", newline="") as f:
                return await f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Failed to read perk definitions at %s: %s", file_path, str(e))
            raise InputReadError(
                message="Could not read the perk definition file.",
                context={"path": str(file_path), "error": str(e)},
            )

    async def load_definitions(self, path: Optional[str] = None) -> List[PerkDefinition]:
        """Read and parse the asset. Nothing is persisted."""
        text = await self.read_definitions_text(path)
        records = parse_perk_definitions(text)
        logger.info("Parsed %d perk definitions", len(records))
        return records

    async def update_perks(
        self, db: AsyncSession, definitions: Sequence[PerkDefinition]
    ) -> PerkUpdateResult:
        """
        Upsert perks by name.

        Existing rows keep their id (posts reference perks by id), so an
        update overwrites description, owner and role in place. An image URL
        is only overwritten when the incoming record carries one. Repeated
        names in one request resolve to the last occurrence.
        """
        created = 0
        updated = 0
        try:
            names = list({definition.name for definition in definitions})
            existing = {}
            if names:
                result = await db.execute(select(Perk).where(Perk.name.in_(names)))
                existing = {perk.name: perk for perk in result.scalars().all()}

            for definition in definitions:
                perk = existing.get(definition.name)
                if perk is None:
                    perk = Perk(
                        name=definition.name,
                        description=definition.description,
                        owner=definition.owner,
                        role=definition.role,
                        img_url=definition.img_url,
                    )
                    db.add(perk)
                    existing[definition.name] = perk
                    created += 1
                    continue

                perk.description = definition.description
                perk.owner = definition.owner
                perk.role = definition.role
                if definition.img_url:
                    perk.img_url = definition.img_url
                updated += 1

            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error updating perks: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not update perks. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.info("Perk update: %d created, %d updated", created, updated)
        return PerkUpdateResult(created=created, updated=updated)


perk_service = PerkService()
