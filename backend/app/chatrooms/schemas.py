"""Pydantic schemas for chatrooms, messages, reactions and reply previews.

Field names are camelCase because they are sent to the web client as-is.
"""
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from .media import normalize_media_type

# Opaque per-user identity. Joins presence, messages and reactions and stays
# stable when the display name or avatar changes.
IdentityKey = str

MediaType = Literal["image", "youtube", "twitch", "twitter"]


# =============================================================================
# Stored records
# =============================================================================


class Chatroom(BaseModel):
    """A topic room as stored by the registry.

    Only messageCount, viewCount and pinnedMessageId change after creation.
    """
    id: int = Field(..., ge=0, description="Room ID")
    topic: str
    description: str
    mediaUrl: str
    mediaType: str
    createdAt: float = Field(..., description="Creation time in seconds since epoch")
    messageCount: int = 0
    viewCount: int = 0
    pinnedMessageId: Optional[int] = None
    category: str


class ChatroomView(Chatroom):
    """A room plus liveness computed at read time."""
    isLive: bool = False
    activeUserCount: int = 0


class Message(BaseModel):
    """A chat message.

    sender and avatarUrl are rewritten in place when the author changes
    their display identity; every other field is fixed at creation.
    """
    id: int = Field(..., ge=0, description="Globally unique message ID")
    roomId: int
    content: str
    timestamp: float = Field(..., description="Seconds since epoch")
    sender: str = Field(..., description="Display name of the sender")
    senderId: IdentityKey = Field(..., description="Identity of the sender")
    mediaUrl: Optional[str] = None
    mediaType: Optional[str] = None
    avatarUrl: Optional[str] = None
    replyToMessageId: Optional[int] = None


class ReactionSummary(BaseModel):
    """Caller-facing reaction view.

    Reacting identities are not exposed; reactedByMe only tells the caller
    whether their own identity is among them.
    """
    emoji: str
    count: int = Field(..., ge=1)
    reactedByMe: bool = False


class MessageView(Message):
    """A message with its reaction snapshot."""
    reactions: List[ReactionSummary] = Field(default_factory=list)


class ReplyPreview(BaseModel):
    """Summary of a message shown above a reply being composed."""
    sender: str
    contentSnippet: str
    mediaThumbnail: Optional[str] = None


# =============================================================================
# Request bodies
# =============================================================================


class ChatroomCreate(BaseModel):
    """Request body for creating a room."""
    topic: str
    description: str
    mediaUrl: str
    mediaType: MediaType
    category: str

    @field_validator("mediaType", mode="before")
    @classmethod
    def _lower_media_type(cls, value):
        return normalize_media_type(value) if isinstance(value, str) else value


class ChatroomCreated(BaseModel):
    id: int


class MessageCreate(BaseModel):
    """Request body for sending a message."""
    content: str
    sender: str
    senderId: IdentityKey
    mediaUrl: Optional[str] = None
    mediaType: Optional[MediaType] = None
    avatarUrl: Optional[str] = None
    replyToMessageId: Optional[int] = None

    @field_validator("mediaType", mode="before")
    @classmethod
    def _lower_media_type(cls, value):
        return normalize_media_type(value) if isinstance(value, str) else value


class ViewCreate(BaseModel):
    identity: IdentityKey


class PinUpdate(BaseModel):
    messageId: int


class PinnedVideo(BaseModel):
    messageId: Optional[int] = None


class ReactionUpdate(BaseModel):
    emoji: str = Field(..., min_length=1)
    identity: IdentityKey


class UsernameUpdate(BaseModel):
    username: str


class AvatarUpdate(BaseModel):
    avatarUrl: Optional[str] = None


class RewriteResult(BaseModel):
    identity: IdentityKey
    updated: int


class CleanupResult(BaseModel):
    removed: int
