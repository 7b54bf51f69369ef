"""
PerkBoard Backend - User Service
==================================

What:  Sign-in (find-or-create by identity provider), profiles, the follow
       graph, and per-user post listings.
Who:   Auth and user routes, and the session dependencies.

Identity Providers:
    The OAuth handshake itself happens outside this backend. Once the
    identity broker has verified a Google or Steam account it hands over
    (provider, provider_user_id, username) and sign_in() maps that to a
    local user, creating one on first visit.
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import DatabaseError, NotFoundError, ValidationError
from app.models.post import Post
from app.models.user import User
from app.schemas.post import PostResponse
from app.services.post_service import annotate, counter_update, post_service, saved_ids_for

logger = logging.getLogger(__name__)

# provider name → User column holding that provider's account id
PROVIDER_COLUMNS = {
    "google": User.google_id,
    "steam": User.steam_id,
}


class UserService:
    """Stateless user operations; the session is passed in per call."""

    async def get(self, db: AsyncSession, user_id: uuid.UUID) -> User:
        try:
            user = await db.get(User, user_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching user %s: %s", user_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the user. Please try again.",
                context={"user_id": str(user_id)},
            )
        if user is None:
            raise NotFoundError(resource="user", resource_id=str(user_id))
        return user

    async def find(self, db: AsyncSession, user_id: uuid.UUID) -> Optional[User]:
        """Like get(), but returns None for unknown ids (stale sessions)."""
        try:
            return await self.get(db, user_id)
        except NotFoundError:
            return None

    async def sign_in(
        self,
        db: AsyncSession,
        provider: str,
        provider_user_id: str,
        username: str,
        profile_pic: Optional[str] = None,
    ) -> User:
        """
        Return the local user linked to a provider account, creating it if needed.

        Raises:
            ValidationError: Unknown provider.
            DatabaseError: Lookup or insert failed.
        """
        column = PROVIDER_COLUMNS.get(provider.lower())
        if column is None:
            raise ValidationError(
                message=f"Unsupported identity provider '{provider}'",
                field="provider",
                context={"supported": sorted(PROVIDER_COLUMNS)},
            )

        try:
            result = await db.execute(select(User).where(column == provider_user_id))
            user = result.scalar_one_or_none()
            if user is not None:
                return user

            user = User(username=username, profile_pic=profile_pic)
            setattr(user, column.key, provider_user_id)
            db.add(user)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error signing in %s user: %s", provider, str(e))
            raise DatabaseError(
                message="Could not sign you in. Please try again.",
                context={"provider": provider},
            )

        logger.info("Created user %s from %s sign-in", user.id, provider)
        return user

    async def saved_post_ids(self, db: AsyncSession, user_id: uuid.UUID) -> List[uuid.UUID]:
        user = await self.get(db, user_id)
        return list(user.saved_post_ids or [])

    async def saved_posts(
        self, db: AsyncSession, user_id: uuid.UUID, viewer: Optional[User]
    ) -> List[PostResponse]:
        user = await self.get(db, user_id)
        if not user.saved_post_ids:
            return []
        posts = await post_service.list_where(db, Post.id.in_(list(user.saved_post_ids)))
        return annotate(posts, saved_ids_for(viewer))

    async def authored_posts(
        self, db: AsyncSession, user_id: uuid.UUID, viewer: Optional[User]
    ) -> List[PostResponse]:
        await self.get(db, user_id)
        posts = await post_service.list_where(db, Post.author_id == user_id)
        return annotate(posts, saved_ids_for(viewer))

    async def follow(self, db: AsyncSession, viewer: User, target_id: uuid.UUID) -> str:
        if target_id == viewer.id:
            raise ValidationError(message="You cannot follow yourself", field="user_id")

        target = await self.get(db, target_id)
        following = list(viewer.following_ids or [])
        if target.id in following:
            return "already following"

        try:
            viewer.following_ids = following + [target.id]
            await db.execute(counter_update(User, target.id, User.followers, 1))
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error following %s: %s", target_id, str(e))
            raise DatabaseError(
                message="Could not follow the user. Please try again.",
                context={"user_id": str(target_id)},
            )
        return "followed"

    async def unfollow(self, db: AsyncSession, viewer: User, target_id: uuid.UUID) -> str:
        target = await self.get(db, target_id)
        following = list(viewer.following_ids or [])
        if target.id not in following:
            return "not following"

        try:
            following.remove(target.id)
            viewer.following_ids = following
            await db.execute(counter_update(User, target.id, User.followers, -1))
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error unfollowing %s: %s", target_id, str(e))
            raise DatabaseError(
                message="Could not unfollow the user. Please try again.",
                context={"user_id": str(target_id)},
            )
        return "unfollowed"


user_service = UserService()
