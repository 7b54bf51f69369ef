"""
PerkBoard Backend - Post Request/Response Schemas
===================================================

What:  API contract for posts, including the per-viewer `is_saved` flag.
Why:   `is_saved` depends on who is asking, so it is never stored on the
       row. PostResponse.from_post() adds it as a response-shaping step
       after the data has been loaded (and after search has run).
"""

import uuid
from datetime import datetime
from typing import Collection, List

from pydantic import BaseModel, Field

from app.models.post import Post


class PostCreate(BaseModel):
    """Body of POST /api/newpost. The author is always the signed-in user."""
    name: str = Field(min_length=1, max_length=200, description="Build name")
    description: str = Field(default="", description="Free-text build notes")
    perk_ids: List[uuid.UUID] = Field(default_factory=list, description="Tagged perk ids, in slot order")
    type: str = Field(min_length=1, max_length=50, description="Build side, e.g. survivor or killer")


class PostRef(BaseModel):
    """Body of POST /api/savepost and /api/unsavepost."""
    post_id: uuid.UUID


class PostResponse(BaseModel):
    """A post as returned to the client, annotated for the current viewer."""
    id: uuid.UUID
    name: str
    description: str
    saves: int
    perk_ids: List[uuid.UUID]
    author_id: uuid.UUID
    type: str
    created_at: datetime
    is_saved: bool = Field(default=False, description="Whether the viewer has saved this post")

    model_config = {"from_attributes": True}

    @classmethod
    def from_post(cls, post: Post, saved_ids: Collection[uuid.UUID]) -> "PostResponse":
        return cls(
            id=post.id,
            name=post.name,
            description=post.description or "",
            saves=post.saves,
            perk_ids=list(post.perk_ids or []),
            author_id=post.author_id,
            type=post.type,
            created_at=post.created_at,
            is_saved=post.id in saved_ids,
        )
