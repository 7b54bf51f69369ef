"""
PerkBoard Backend - Post Route Handlers
=========================================

What:  Post feed, detail, creation, save/unsave, and fuzzy post search.
How:   Extracts parameters, resolves the viewer from the session, delegates
       to PostService / SearchService, returns JSON.

Every post in a response carries `is_saved` for the current viewer
(always false for anonymous viewers).
"""

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.dependencies import get_current_user, get_optional_user
from app.models.user import User
from app.schemas.common import ErrorResponse, MessageResponse
from app.schemas.post import PostCreate, PostRef, PostResponse
from app.services.post_service import post_service
from app.services.search_service import search_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Posts"])


@router.get(
    "/posts",
    response_model=List[PostResponse],
    summary="List all posts",
)
async def list_posts(
    db: AsyncSession = Depends(get_db_session),
    viewer: Optional[User] = Depends(get_optional_user),
) -> List[PostResponse]:
    return await post_service.list_posts(db, viewer)


@router.get(
    "/posts/{post_id}",
    response_model=PostResponse,
    responses={404: {"description": "Post not found", "model": ErrorResponse}},
    summary="Get a single post",
)
async def get_post(
    post_id: UUID,
    db: AsyncSession = Depends(get_db_session),
    viewer: Optional[User] = Depends(get_optional_user),
) -> PostResponse:
    return await post_service.get_post(db, post_id, viewer)


@router.post(
    "/newpost",
    status_code=201,
    response_model=PostResponse,
    responses={401: {"description": "Not signed in", "model": ErrorResponse}},
    summary="Publish a new post as the signed-in user",
)
async def create_post(
    data: PostCreate,
    db: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user),
) -> PostResponse:
    return await post_service.create_post(db, user, data)


@router.post(
    "/savepost",
    status_code=201,
    response_model=MessageResponse,
    responses={
        401: {"description": "Not signed in", "model": ErrorResponse},
        404: {"description": "Post not found", "model": ErrorResponse},
    },
    summary="Save a post to the signed-in user's collection",
)
async def save_post(
    body: PostRef,
    db: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user),
) -> MessageResponse:
    message = await post_service.save_post(db, user, body.post_id)
    return MessageResponse(message=message)


@router.post(
    "/unsavepost",
    status_code=201,
    response_model=MessageResponse,
    responses={
        401: {"description": "Not signed in", "model": ErrorResponse},
        404: {"description": "Post not found", "model": ErrorResponse},
    },
    summary="Remove a post from the signed-in user's collection",
)
async def unsave_post(
    body: PostRef,
    db: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user),
) -> MessageResponse:
    message = await post_service.unsave_post(db, user, body.post_id)
    return MessageResponse(message=message)


@router.get(
    "/searchPosts",
    response_model=List[PostResponse],
    summary="Fuzzy search posts by text and by perk name",
    description=(
        "Splits the query on whitespace. A post matches when any word approximately "
        "matches its name or description, or the name of one of its perks. "
        "Perk matches are listed first. An empty query returns an empty list."
    ),
)
async def search_posts(
    query: str = Query(default="", max_length=200, description="Free-text search query"),
    db: AsyncSession = Depends(get_db_session),
    viewer: Optional[User] = Depends(get_optional_user),
) -> List[PostResponse]:
    return await search_service.search_posts(db, query, viewer)
