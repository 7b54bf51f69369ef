"""
PerkBoard Backend - Fuzzy Post and Perk Search
================================================

What:  Finds posts for a free-text query, either because one of their perks
       is named like a query word or because their own name/description is.
Who:   GET /api/searchPosts and GET /api/searchPerks.

Search Flow:
    query ──split──▶ words
      │
      ├─▶ perk names  ──fuzzy──▶ perk ids ──exact join on post.perk_ids──▶ perk hits
      │
      └─▶ post name + description ──fuzzy──▶ text hits
                                                     │
    merge: perk hits (post order), then text hits not already present

The module-level functions are pure: they take fully loaded posts and perks
and never touch the database. SearchService does the loading and the
per-viewer `is_saved` annotation around them.
"""

import logging
import uuid
from typing import Dict, Iterable, List, Optional, Sequence, Set

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.perk import Perk
from app.models.post import Post
from app.models.user import User
from app.schemas.perk import PerkResponse
from app.schemas.post import PostResponse
from app.services.fuzzy import DEFAULT_THRESHOLD, rank_matches
from app.services.perk_service import perk_service
from app.services.post_service import post_service

logger = logging.getLogger(__name__)

PERK_KEYS = ("name",)
POST_KEYS = ("name", "description")


def split_query(query: Optional[str]) -> List[str]:
    return (query or "").split()


def match_perks(
    query: str, perks: Sequence[Perk], threshold: float = DEFAULT_THRESHOLD
) -> List[Perk]:
    """Perks whose name matches any query word, de-duplicated, in per-word ranked order."""
    found: Dict[uuid.UUID, Perk] = {}
    for word in split_query(query):
        for perk in rank_matches(word, perks, PERK_KEYS, threshold):
            found.setdefault(perk.id, perk)
    return list(found.values())


def match_perk_ids(
    query: str, perks: Sequence[Perk], threshold: float = DEFAULT_THRESHOLD
) -> Set[uuid.UUID]:
    """Ids of every perk whose name approximately matches any query word."""
    return {perk.id for perk in match_perks(query, perks, threshold)}


def _posts_with_perks(posts: Iterable[Post], perk_ids: Set[uuid.UUID]) -> List[Post]:
    if not perk_ids:
        return []
    return [post for post in posts if perk_ids.intersection(post.perk_ids or ())]


def _posts_matching_text(
    words: Sequence[str], posts: Sequence[Post], threshold: float
) -> List[Post]:
    found: Dict[uuid.UUID, Post] = {}
    for word in words:
        for post in rank_matches(word, posts, POST_KEYS, threshold):
            found.setdefault(post.id, post)
    return list(found.values())


def search(
    query: str,
    posts: Sequence[Post],
    perks: Sequence[Perk],
    threshold: float = DEFAULT_THRESHOLD,
) -> List[Post]:
    """
    Posts matching the query through their perks or their own text.

    Args:
        query:     Free text; split on whitespace, words are OR-ed.
        posts:     Every post, in retrieval order.
        perks:     Every perk.
        threshold: Normalized distance cutoff shared by both match passes.

    Returns:
        Unique posts (by id): perk matches first, then text-only matches.
        Empty for an empty or whitespace-only query, without scoring anything.
    """
    words = split_query(query)
    if not words:
        return []

    perk_ids = match_perk_ids(query, perks, threshold)
    merged: Dict[uuid.UUID, Post] = {}
    for post in _posts_with_perks(posts, perk_ids):
        merged.setdefault(post.id, post)
    for post in _posts_matching_text(words, posts, threshold):
        merged.setdefault(post.id, post)
    return list(merged.values())


class SearchService:
    """
    Loads posts and perks, runs the pure search and shapes the response.

    Errors:
        Data loading failures surface as DatabaseError from the owning
        service. Nothing is retried here.
    """

    async def search_posts(
        self,
        db: AsyncSession,
        query: Optional[str],
        viewer: Optional[User] = None,
    ) -> List[PostResponse]:
        if not split_query(query):
            return []

        posts = await post_service.list_all(db)
        perks = await perk_service.list_all(db)
        results = search(query, posts, perks)
        logger.info(
            "Search of %d word(s) matched %d of %d posts",
            len(split_query(query)), len(results), len(posts),
        )

        saved_ids = set(viewer.saved_post_ids or ()) if viewer else set()
        return [PostResponse.from_post(post, saved_ids) for post in results]

    async def search_perks(self, db: AsyncSession, query: Optional[str]) -> List[PerkResponse]:
        if not split_query(query):
            return []
        perks = await perk_service.list_all(db)
        return [PerkResponse.model_validate(perk) for perk in match_perks(query, perks)]


search_service = SearchService()
