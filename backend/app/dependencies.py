"""
PerkBoard Backend - Request Dependencies
==========================================

What:  FastAPI dependencies resolving the signed-in user from the session
       cookie, plus the role and broker checks built on top of it.
How:   SessionMiddleware (registered in main.py) signs and decodes the
       cookie; only the user id is stored in it. The user row is loaded per
       request through the same session the route uses.

Dependency Chain:
    get_optional_user  → User | None     (public routes, is_saved annotation)
    get_current_user   → User | 401      (save, follow, new post)
    require_admin      → User | 401/403  (perkDefs, updatePerks)
"""

import hmac
import logging
import uuid
from typing import Optional

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db_session
from app.exceptions import AuthenticationError, PermissionDeniedError
from app.models.user import User
from app.services.user_service import user_service

logger = logging.getLogger(__name__)

SESSION_USER_KEY = "user_id"


def login_session(request: Request, user: User) -> None:
    request.session[SESSION_USER_KEY] = str(user.id)


def logout_session(request: Request) -> bool:
    """Clear the session; returns whether someone was signed in."""
    was_signed_in = SESSION_USER_KEY in request.session
    request.session.clear()
    return was_signed_in


async def get_optional_user(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> Optional[User]:
    raw_id = request.session.get(SESSION_USER_KEY)
    if not raw_id:
        return None
    try:
        user_id = uuid.UUID(raw_id)
    except ValueError:
        logger.warning("Discarding session with malformed user id")
        request.session.clear()
        return None

    user = await user_service.find(db, user_id)
    if user is None:
        # Account was removed after the cookie was issued
        request.session.clear()
    return user


async def get_current_user(
    user: Optional[User] = Depends(get_optional_user),
) -> User:
    if user is None:
        raise AuthenticationError()
    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        logger.warning("User %s denied access to an admin route", user.id)
        raise PermissionDeniedError(message="Administrator access required")
    return user


def require_identity_broker(x_identity_broker_key: str = Header(default="")) -> None:
    """
    Guard for the sign-in handoff route.

    Only the trusted identity broker (which ran the Google/Steam OAuth flow)
    knows the shared key. An unset key disables sign-in entirely.
    """
    expected = settings.identity_broker_key
    if not expected or not hmac.compare_digest(x_identity_broker_key, expected):
        raise AuthenticationError(message="Invalid or missing identity broker key")
