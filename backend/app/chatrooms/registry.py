"""Chatroom registry: room records, counters and liveness composition.

Liveness is never stored. Every read asks the PresenceTracker again, so a
room shown as live was live at the moment of the call.

Not thread-safe on its own; ChatService serialises access.
"""
import logging
from typing import Dict, List, Optional

from .errors import RoomNotFoundError
from .presence import PresenceTracker
from .schemas import Chatroom, ChatroomView, IdentityKey

logger = logging.getLogger(__name__)


class ChatroomRegistry:
    """room_id -> Chatroom, plus the presence data liveness is derived from."""

    def __init__(self, presence: PresenceTracker, liveness_window: float = 60.0) -> None:
        self._rooms: Dict[int, Chatroom] = {}
        self._next_chatroom_id = 0
        self._presence = presence
        self._window = liveness_window

    # =========================================================================
    # Writes
    # =========================================================================

    def create(
        self,
        topic: str,
        description: str,
        media_url: str,
        media_type: str,
        category: str,
        now: float,
    ) -> int:
        """Allocate a room ID and store the room.

        The room starts with messageCount = 1 to account for the seed
        message the caller adds right after.
        """
        room_id = self._next_chatroom_id
        self._next_chatroom_id += 1
        self._rooms[room_id] = Chatroom(
            id=room_id,
            topic=topic,
            description=description,
            mediaUrl=media_url,
            mediaType=media_type,
            createdAt=now,
            messageCount=1,
            viewCount=0,
            pinnedMessageId=None,
            category=category,
        )
        return room_id

    def record_view(self, room_id: int, identity: IdentityKey, now: float) -> None:
        room = self._require(room_id)
        room.viewCount += 1
        self._presence.touch(room_id, identity, now)

    def increment_message_count(self, room_id: int) -> None:
        self._require(room_id).messageCount += 1

    def pin(self, room_id: int, message_id: int) -> None:
        self._require(room_id).pinnedMessageId = message_id

    def unpin(self, room_id: int) -> None:
        self._require(room_id).pinnedMessageId = None

    # =========================================================================
    # Reads
    # =========================================================================

    def exists(self, room_id: int) -> bool:
        return room_id in self._rooms

    def pinned(self, room_id: int) -> Optional[int]:
        room = self._rooms.get(room_id)
        return room.pinnedMessageId if room else None

    def get(self, room_id: int, now: float) -> Optional[ChatroomView]:
        room = self._rooms.get(room_id)
        return self._view(room, now) if room else None

    def list(self, now: float) -> List[ChatroomView]:
        """All rooms ordered by ID (creation order)."""
        return [self._view(room, now) for room in self._rooms.values()]

    def search(self, term: str, now: float) -> List[ChatroomView]:
        """Case-insensitive substring match on topic, description or category."""
        needle = term.lower()
        return [
            self._view(room, now)
            for room in self._rooms.values()
            if needle in room.topic.lower()
            or needle in room.description.lower()
            or needle in room.category.lower()
        ]

    def filter_by_category(self, category: str, now: float) -> List[ChatroomView]:
        """Case-insensitive exact match on category."""
        wanted = category.lower()
        return [
            self._view(room, now)
            for room in self._rooms.values()
            if room.category.lower() == wanted
        ]

    # =========================================================================
    # Internal
    # =========================================================================

    def _require(self, room_id: int) -> Chatroom:
        room = self._rooms.get(room_id)
        if room is None:
            raise RoomNotFoundError(room_id)
        return room

    def _view(self, room: Chatroom, now: float) -> ChatroomView:
        active = self._presence.live_count(room.id, now, self._window)
        return ChatroomView(
            **room.model_dump(),
            isLive=active > 0,
            activeUserCount=active,
        )
