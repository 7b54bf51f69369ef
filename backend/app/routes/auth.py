"""
PerkBoard Backend - Session Route Handlers
============================================

What:  Starts and ends the cookie session.
How:   The identity broker runs the Google/Steam OAuth flow in front of this
       backend. When it has a verified account it forwards the browser's
       request to POST /auth/session with the shared broker key; the
       Set-Cookie on the response lands in the browser.

    Browser ──▶ Identity broker (OAuth) ──▶ POST /auth/session ──▶ Set-Cookie
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.dependencies import login_session, logout_session, require_identity_broker
from app.schemas.common import ErrorResponse
from app.schemas.user import IdentityAssertion, UserResponse
from app.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/session",
    response_model=UserResponse,
    responses={
        400: {"description": "Unsupported provider", "model": ErrorResponse},
        401: {"description": "Bad broker key", "model": ErrorResponse},
    },
    dependencies=[Depends(require_identity_broker)],
    summary="Sign in a verified provider account",
)
async def start_session(
    identity: IdentityAssertion,
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    user = await user_service.sign_in(
        db,
        provider=identity.provider,
        provider_user_id=identity.provider_user_id,
        username=identity.username,
        profile_pic=identity.profile_pic,
    )
    login_session(request, user)
    logger.info("User %s signed in via %s", user.id, identity.provider)
    return UserResponse.model_validate(user)


@router.get("/logout", response_class=PlainTextResponse, summary="End the current session")
async def logout(request: Request) -> str:
    if logout_session(request):
        return "Logged out"
    return "Not signed in"
