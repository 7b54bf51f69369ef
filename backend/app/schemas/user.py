"""
PerkBoard Backend - User Schemas
==================================

What:  Public user profile and the follow/unfollow request body.
Why:   Provider ids (google_id, steam_id) are never exposed to clients.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class UserResponse(BaseModel):
    id: uuid.UUID
    username: str
    profile_pic: Optional[str] = None
    perk_skin: Optional[str] = None
    saved_post_ids: List[uuid.UUID]
    following_ids: List[uuid.UUID]
    followers: int
    save_count: int
    post_count: int
    is_admin: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class IdentityAssertion(BaseModel):
    """A verified provider account handed over by the identity broker."""
    provider: str = Field(description="google or steam")
    provider_user_id: str = Field(min_length=1, max_length=64)
    username: str = Field(min_length=1, max_length=100)
    profile_pic: Optional[str] = None


class UserRef(BaseModel):
    """Body of POST /api/follow and /api/unfollow."""
    user_id: uuid.UUID
