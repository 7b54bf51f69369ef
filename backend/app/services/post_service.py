"""
PerkBoard Backend - Post Service
==================================

What:  Post listing, creation, and the save/unsave counters.
Who:   Post routes, UserService (saved/authored listings), SearchService.

Counter Rules:
    save:    viewer.saved_post_ids += [post]   post.saves += 1   author.save_count += 1
    unsave:  viewer.saved_post_ids -= [post]   post.saves -= 1   author.save_count -= 1
    Repeating either action is a no-op with an explanatory message, and
    counters never drop below zero.
    Counters change through one UPDATE ... SET col = col + 1 per row
    (counter_update), so concurrent saves of one post all count.
    All changes are flushed together and committed by get_db_session,
    so a failure leaves none of them applied.
"""

import logging
import uuid
from typing import Collection, List, Optional, Sequence

from sqlalchemy import desc, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import DatabaseError, NotFoundError
from app.models.post import Post
from app.models.user import User
from app.schemas.post import PostCreate, PostResponse

logger = logging.getLogger(__name__)


def counter_update(model, row_id: uuid.UUID, column, delta: int):
    """
    Atomic `column += delta` on one row. Decrements are clamped at zero.

    Usage:
        await db.execute(counter_update(Post, post.id, Post.saves, 1))
    """
    if delta >= 0:
        value = column + delta
    else:
        value = func.greatest(column + delta, 0)
    return update(model).where(model.id == row_id).values({column.key: value})


def saved_ids_for(viewer: Optional[User]) -> set:
    """Post ids the viewer has saved; empty for anonymous viewers."""
    if viewer is None:
        return set()
    return set(viewer.saved_post_ids or ())


def annotate(posts: Sequence[Post], saved_ids: Collection[uuid.UUID]) -> List[PostResponse]:
    return [PostResponse.from_post(post, saved_ids) for post in posts]


class PostService:
    """Stateless post operations; the session is passed in per call."""

    async def list_all(self, db: AsyncSession) -> List[Post]:
        """Every post, newest first. No pagination: search scores them all."""
        return await self._fetch(db, select(Post).order_by(desc(Post.created_at)))

    async def list_where(self, db: AsyncSession, *criteria) -> List[Post]:
        return await self._fetch(
            db, select(Post).where(*criteria).order_by(desc(Post.created_at))
        )

    async def _fetch(self, db: AsyncSession, query) -> List[Post]:
        try:
            result = await db.execute(query)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing posts: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve posts. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def get(self, db: AsyncSession, post_id: uuid.UUID) -> Post:
        try:
            post = await db.get(Post, post_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching post %s: %s", post_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the post. Please try again.",
                context={"post_id": str(post_id)},
            )
        if post is None:
            raise NotFoundError(resource="post", resource_id=str(post_id))
        return post

    async def list_posts(self, db: AsyncSession, viewer: Optional[User]) -> List[PostResponse]:
        return annotate(await self.list_all(db), saved_ids_for(viewer))

    async def get_post(
        self, db: AsyncSession, post_id: uuid.UUID, viewer: Optional[User]
    ) -> PostResponse:
        post = await self.get(db, post_id)
        return PostResponse.from_post(post, saved_ids_for(viewer))

    async def create_post(
        self, db: AsyncSession, author: User, data: PostCreate
    ) -> PostResponse:
        """Publish a post as `author` and bump their post counter."""
        post = Post(
            name=data.name,
            description=data.description,
            perk_ids=list(data.perk_ids),
            type=data.type,
            author_id=author.id,
            saves=0,
        )
        try:
            db.add(post)
            await db.execute(counter_update(User, author.id, User.post_count, 1))
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating post: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the post. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.info("Post %s created by user %s", post.id, author.id)
        return PostResponse.from_post(post, saved_ids_for(author))

    async def save_post(self, db: AsyncSession, viewer: User, post_id: uuid.UUID) -> str:
        post = await self.get(db, post_id)
        saved = list(viewer.saved_post_ids or [])
        if post.id in saved:
            return "already was saved"

        try:
            viewer.saved_post_ids = saved + [post.id]
            await db.execute(counter_update(Post, post.id, Post.saves, 1))
            await db.execute(counter_update(User, post.author_id, User.save_count, 1))
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error saving post %s: %s", post_id, str(e))
            raise DatabaseError(
                message="Could not save the post. Please try again.",
                context={"post_id": str(post_id)},
            )

        logger.info("User %s saved post %s", viewer.id, post.id)
        return "saved"

    async def unsave_post(self, db: AsyncSession, viewer: User, post_id: uuid.UUID) -> str:
        post = await self.get(db, post_id)
        saved = list(viewer.saved_post_ids or [])
        if post.id not in saved:
            return "not a saved post"

        try:
            saved.remove(post.id)
            viewer.saved_post_ids = saved
            await db.execute(counter_update(Post, post.id, Post.saves, -1))
            await db.execute(counter_update(User, post.author_id, User.save_count, -1))
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error unsaving post %s: %s", post_id, str(e))
            raise DatabaseError(
                message="Could not unsave the post. Please try again.",
                context={"post_id": str(post_id)},
            )

        logger.info("User %s unsaved post %s", viewer.id, post.id)
        return "unsaved"


post_service = PostService()
