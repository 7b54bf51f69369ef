"""
PerkBoard Backend - Perk Schemas
==================================

What:  PerkDefinition is the record produced by the perk-definition parser and
       accepted back by POST /api/updatePerks. PerkResponse is a stored perk.
"""

import uuid
from typing import List, Optional

from pydantic import BaseModel, Field


class PerkDefinition(BaseModel):
    """
    One parsed perk: name, description, owner, role.

    Role is an open string ("Survivor", "Killer", ...) and is deliberately
    not validated against an enum.
    """
    name: str
    description: str
    owner: str
    role: str
    img_url: Optional[str] = None


class PerkUpdateRequest(BaseModel):
    """Body of POST /api/updatePerks: an already-parsed perk list."""
    perks: List[PerkDefinition] = Field(description="Perks to upsert by name")


class PerkUpdateResult(BaseModel):
    created: int = Field(description="Perks inserted")
    updated: int = Field(description="Existing perks (matched by name) overwritten")


class PerkResponse(BaseModel):
    id: uuid.UUID
    name: str
    description: str
    owner: str
    role: str
    img_url: Optional[str] = None

    model_config = {"from_attributes": True}
