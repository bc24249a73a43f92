"""Pydantic schemas for anonymous user profiles."""
from typing import Optional

from pydantic import BaseModel, Field


class UserProfile(BaseModel):
    """Profile saved by an anonymous caller.

    Attributes:
        name: Current display name.
        anonId: Identity the caller sends messages under.
        avatarUrl: Uploaded or preset avatar, if any.
        presetAvatar: Set when the avatar was picked from the presets.
    """
    name: str = Field(..., min_length=1, max_length=100)
    anonId: str = Field(..., min_length=1)
    avatarUrl: Optional[str] = None
    presetAvatar: Optional[str] = None
