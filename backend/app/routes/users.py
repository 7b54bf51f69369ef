"""
PerkBoard Backend - User Route Handlers
=========================================

What:  Public profiles, per-user post lists, and follow/unfollow.
"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.dependencies import get_current_user, get_optional_user
from app.models.user import User
from app.schemas.common import ErrorResponse, MessageResponse
from app.schemas.post import PostResponse
from app.schemas.user import UserRef, UserResponse
from app.services.user_service import user_service

router = APIRouter(prefix="/api", tags=["Users"])

NOT_FOUND = {404: {"description": "User not found", "model": ErrorResponse}}


@router.get("/getuser", response_model=Optional[UserResponse], summary="The signed-in user, or null")
async def get_signed_in_user(
    viewer: Optional[User] = Depends(get_optional_user),
) -> Optional[UserResponse]:
    return UserResponse.model_validate(viewer) if viewer else None


@router.get("/users/{user_id}", response_model=UserResponse, responses=NOT_FOUND)
async def get_user(
    user_id: UUID, db: AsyncSession = Depends(get_db_session)
) -> UserResponse:
    return UserResponse.model_validate(await user_service.get(db, user_id))


@router.get("/users/{user_id}/savedpostIDs", response_model=List[UUID], responses=NOT_FOUND)
async def get_saved_post_ids(
    user_id: UUID, db: AsyncSession = Depends(get_db_session)
) -> List[UUID]:
    return await user_service.saved_post_ids(db, user_id)


@router.get("/users/{user_id}/savedposts", response_model=List[PostResponse], responses=NOT_FOUND)
async def get_saved_posts(
    user_id: UUID,
    db: AsyncSession = Depends(get_db_session),
    viewer: Optional[User] = Depends(get_optional_user),
) -> List[PostResponse]:
    return await user_service.saved_posts(db, user_id, viewer)


@router.get("/users/{user_id}/posts", response_model=List[PostResponse], responses=NOT_FOUND)
async def get_user_posts(
    user_id: UUID,
    db: AsyncSession = Depends(get_db_session),
    viewer: Optional[User] = Depends(get_optional_user),
) -> List[PostResponse]:
    return await user_service.authored_posts(db, user_id, viewer)


@router.post("/follow", status_code=201, response_model=MessageResponse, responses=NOT_FOUND)
async def follow_user(
    body: UserRef,
    db: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user),
) -> MessageResponse:
    return MessageResponse(message=await user_service.follow(db, user, body.user_id))


@router.post("/unfollow", status_code=201, response_model=MessageResponse, responses=NOT_FOUND)
async def unfollow_user(
    body: UserRef,
    db: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user),
) -> MessageResponse:
    return MessageResponse(message=await user_service.unfollow(db, user, body.user_id))
