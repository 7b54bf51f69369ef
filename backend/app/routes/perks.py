"""
PerkBoard Backend - Perk Route Handlers
=========================================

What:  Public perk listing and search, plus the two admin-only routes used
       to refresh perk data from the bundled definition file.

Admin Workflow:
    1. GET  /api/perkDefs     → parsed records from the asset (nothing saved)
    2. Admin reviews/edits them client-side
    3. POST /api/updatePerks  → upsert by name
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.dependencies import require_admin
from app.models.user import User
from app.schemas.common import ErrorResponse
from app.schemas.perk import (
    PerkDefinition,
    PerkResponse,
    PerkUpdateRequest,
    PerkUpdateResult,
)
from app.services.perk_service import perk_service
from app.services.search_service import search_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Perks"])

ADMIN_RESPONSES = {
    401: {"description": "Not signed in", "model": ErrorResponse},
    403: {"description": "Not an administrator", "model": ErrorResponse},
}


@router.get("/perks", response_model=List[PerkResponse], summary="List all perks")
async def list_perks(db: AsyncSession = Depends(get_db_session)) -> List[PerkResponse]:
    return await perk_service.list_perks(db)


@router.get(
    "/searchPerks",
    response_model=List[PerkResponse],
    summary="Fuzzy search perks by name",
)
async def search_perks(
    query: str = Query(default="", max_length=200),
    db: AsyncSession = Depends(get_db_session),
) -> List[PerkResponse]:
    return await search_service.search_perks(db, query)


@router.get(
    "/perkDefs",
    response_model=List[PerkDefinition],
    responses={**ADMIN_RESPONSES, 500: {"description": "Definition file unreadable", "model": ErrorResponse}},
    summary="Parse the bundled perk definition file",
)
async def perk_definitions(admin: User = Depends(require_admin)) -> List[PerkDefinition]:
    logger.info("Admin %s requested perk definitions", admin.id)
    return await perk_service.load_definitions()


@router.post(
    "/updatePerks",
    response_model=PerkUpdateResult,
    responses=ADMIN_RESPONSES,
    summary="Upsert perks by name",
)
async def update_perks(
    body: PerkUpdateRequest,
    db: AsyncSession = Depends(get_db_session),
    admin: User = Depends(require_admin),
) -> PerkUpdateResult:
    logger.info("Admin %s submitted %d perks", admin.id, len(body.perks))
    return await perk_service.update_perks(db, body.perks)
