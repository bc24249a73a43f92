"""Chatroom REST API router.

Endpoints:
    GET    /chatrooms                                 - List, search or filter rooms
    POST   /chatrooms                                 - Create a room
    GET    /chatrooms/{room_id}                       - Get a room with live status
    POST   /chatrooms/{room_id}/views                 - Count a view
    GET    /chatrooms/{room_id}/messages              - Messages, oldest first
    POST   /chatrooms/{room_id}/messages              - Send a message
    GET    /chatrooms/{room_id}/messages/full         - Messages with reactions
    GET    /chatrooms/{room_id}/messages/{id}/replies - Direct replies
    GET    /chatrooms/{room_id}/messages/{id}/preview - Quoted-reply preview
    GET    /chatrooms/{room_id}/pin                   - Pinned message ID
    PUT    /chatrooms/{room_id}/pin                   - Pin a message
    DELETE /chatrooms/{room_id}/pin                   - Unpin
    GET    /messages/{message_id}/reactions           - Reaction counts (?identity= flags own)
    POST   /messages/{message_id}/reactions           - Add a reaction
    DELETE /messages/{message_id}/reactions           - Remove a reaction
    PUT    /identities/{identity}/username            - Rename retroactively
    PUT    /identities/{identity}/avatar              - Change avatar retroactively
    POST   /admin/presence/cleanup                    - Drop stale presence (admin)
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Header, HTTPException, Query

from .errors import ChatroomError
from .schemas import (
    AvatarUpdate,
    ChatroomCreate,
    ChatroomCreated,
    ChatroomView,
    CleanupResult,
    Message,
    MessageCreate,
    MessageView,
    PinnedVideo,
    PinUpdate,
    ReactionSummary,
    ReactionUpdate,
    ReplyPreview,
    RewriteResult,
    UsernameUpdate,
    ViewCreate,
)
from .service import ChatService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["chatrooms"])


def _service() -> ChatService:
    return ChatService.get_instance()


def handle_chatroom_error(error: ChatroomError) -> HTTPException:
    """Convert a ChatroomError into the matching HTTPException."""
    return HTTPException(status_code=error.status_code, detail=error.message)


# =============================================================================
# Chatrooms
# =============================================================================


@router.get("/chatrooms", response_model=List[ChatroomView])
async def list_chatrooms(
    search: Optional[str] = Query(None, description="Match topic, description or category"),
    category: Optional[str] = Query(None, description="Exact category, case-insensitive"),
) -> List[ChatroomView]:
    """List rooms with live status.

    A non-blank `search` takes precedence over `category`; with neither,
    every room is returned.
    """
    service = _service()
    if search and search.strip():
        return service.search_chatrooms(search.strip())
    if category and category.strip():
        return service.filter_chatrooms_by_category(category.strip())
    return service.get_chatrooms()


@router.post("/chatrooms", response_model=ChatroomCreated, status_code=201)
async def create_chatroom(body: ChatroomCreate) -> ChatroomCreated:
    """Create a room seeded with its media.

    Returns:
        The new room ID (201 Created), or 400 on invalid input.
    """
    try:
        room_id = _service().create_chatroom(
            topic=body.topic,
            description=body.description,
            media_url=body.mediaUrl,
            media_type=body.mediaType,
            category=body.category,
        )
    except ChatroomError as e:
        raise handle_chatroom_error(e)
    return ChatroomCreated(id=room_id)


@router.get("/chatrooms/{room_id}", response_model=ChatroomView)
async def get_chatroom(room_id: int) -> ChatroomView:
    room = _service().get_chatroom(room_id)
    if room is None:
        raise HTTPException(status_code=404, detail=f"Chatroom {room_id} not found")
    return room


@router.post("/chatrooms/{room_id}/views", status_code=204)
async def increment_view_count(room_id: int, body: ViewCreate) -> None:
    try:
        _service().increment_view_count(room_id, body.identity)
    except ChatroomError as e:
        raise handle_chatroom_error(e)


# =============================================================================
# Messages
# =============================================================================


@router.get("/chatrooms/{room_id}/messages", response_model=List[Message])
async def get_messages(room_id: int) -> List[Message]:
    return _service().get_messages(room_id)


@router.post("/chatrooms/{room_id}/messages", response_model=Message, status_code=201)
async def send_message(room_id: int, body: MessageCreate) -> Message:
    """Send a message to a room.

    Returns:
        The stored message (201 Created), 400 on empty content, 404 if the
        room does not exist.
    """
    try:
        return _service().send_message(
            content=body.content,
            sender=body.sender,
            room_id=room_id,
            media_url=body.mediaUrl,
            media_type=body.mediaType,
            avatar_url=body.avatarUrl,
            identity=body.senderId,
            reply_to=body.replyToMessageId,
        )
    except ChatroomError as e:
        raise handle_chatroom_error(e)


@router.get("/chatrooms/{room_id}/messages/full", response_model=List[MessageView])
async def get_messages_with_reactions(
    room_id: int,
    identity: Optional[str] = Query(None, description="Caller identity for reactedByMe"),
) -> List[MessageView]:
    return _service().get_message_with_reactions_and_replies(room_id, identity)


@router.get(
    "/chatrooms/{room_id}/messages/{message_id}/replies",
    response_model=List[Message],
)
async def get_replies(room_id: int, message_id: int) -> List[Message]:
    return _service().get_replies(room_id, message_id)


@router.get(
    "/chatrooms/{room_id}/messages/{message_id}/preview",
    response_model=ReplyPreview,
)
async def get_reply_preview(room_id: int, message_id: int) -> ReplyPreview:
    preview = _service().get_reply_preview(room_id, message_id)
    if preview is None:
        raise HTTPException(status_code=404, detail="Message not found")
    return preview


# =============================================================================
# Pinning
# =============================================================================


@router.get("/chatrooms/{room_id}/pin", response_model=PinnedVideo)
async def get_pinned_video(room_id: int) -> PinnedVideo:
    return PinnedVideo(messageId=_service().get_pinned_video(room_id))


@router.put("/chatrooms/{room_id}/pin", response_model=PinnedVideo)
async def pin_video(room_id: int, body: PinUpdate) -> PinnedVideo:
    try:
        _service().pin_video(room_id, body.messageId)
    except ChatroomError as e:
        raise handle_chatroom_error(e)
    return PinnedVideo(messageId=body.messageId)


@router.delete("/chatrooms/{room_id}/pin", response_model=PinnedVideo)
async def unpin_video(room_id: int) -> PinnedVideo:
    try:
        _service().unpin_video(room_id)
    except ChatroomError as e:
        raise handle_chatroom_error(e)
    return PinnedVideo(messageId=None)


# =============================================================================
# Reactions
# =============================================================================


@router.get("/messages/{message_id}/reactions", response_model=List[ReactionSummary])
async def get_reactions(
    message_id: int,
    identity: Optional[str] = Query(None, description="Caller identity for reactedByMe"),
) -> List[ReactionSummary]:
    """Reaction counts; with `identity`, each entry says whether that caller reacted."""
    return _service().get_reactions(message_id, identity)


@router.post("/messages/{message_id}/reactions", response_model=List[ReactionSummary])
async def add_reaction(message_id: int, body: ReactionUpdate) -> List[ReactionSummary]:
    service = _service()
    service.add_reaction(message_id, body.emoji, body.identity)
    return service.get_reactions(message_id, body.identity)


@router.delete("/messages/{message_id}/reactions", response_model=List[ReactionSummary])
async def remove_reaction(
    message_id: int,
    emoji: str = Query(..., min_length=1),
    identity: str = Query(...),
) -> List[ReactionSummary]:
    service = _service()
    service.remove_reaction(message_id, emoji, identity)
    return service.get_reactions(message_id, identity)


# =============================================================================
# Retroactive identity rewrites
# =============================================================================


@router.put("/identities/{identity}/username", response_model=RewriteResult)
async def update_username(identity: str, body: UsernameUpdate) -> RewriteResult:
    try:
        updated = _service().update_username_retroactively(identity, body.username)
    except ChatroomError as e:
        raise handle_chatroom_error(e)
    return RewriteResult(identity=identity, updated=updated)


@router.put("/identities/{identity}/avatar", response_model=RewriteResult)
async def update_avatar(identity: str, body: AvatarUpdate) -> RewriteResult:
    updated = _service().update_avatar_retroactively(identity, body.avatarUrl)
    return RewriteResult(identity=identity, updated=updated)


# =============================================================================
# Maintenance
# =============================================================================


@router.post("/admin/presence/cleanup", response_model=CleanupResult)
async def cleanup_inactive_users(
    x_caller_id: str = Header(..., alias="X-Caller-Id"),
) -> CleanupResult:
    """Drop presence records outside the liveness window in every room.

    Returns:
        Number of records removed, or 403 for non-admin callers.
    """
    try:
        removed = _service().cleanup_inactive_users(x_caller_id)
    except ChatroomError as e:
        raise handle_chatroom_error(e)
    return CleanupResult(removed=removed)
