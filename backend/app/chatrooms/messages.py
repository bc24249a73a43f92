"""Per-room message logs with one-level reply threading.

Messages are appended to a list per room, so the stored order is already
chronological. IDs come from a single counter shared by every room and are
never reused.

Not thread-safe on its own; ChatService serialises access.
"""
import logging
from typing import Dict, List, Optional

from .media import thumbnail_for
from .schemas import IdentityKey, Message, ReplyPreview

logger = logging.getLogger(__name__)

# Marks a rewrite field that should be left alone (None is a valid avatar).
UNSET = object()


class MessageStore:
    """room_id -> append-ordered list of messages."""

    def __init__(self, snippet_length: int = 100) -> None:
        self._rooms: Dict[int, List[Message]] = {}
        self._next_message_id = 0
        self._snippet_length = snippet_length

    def append(self, room_id: int, message: Message) -> int:
        """Store a message under a fresh ID and return the ID.

        The caller is responsible for checking that the room exists.
        """
        message_id = self._next_message_id
        self._next_message_id += 1
        message.id = message_id
        message.roomId = room_id
        self._rooms.setdefault(room_id, []).append(message)
        return message_id

    def get(self, room_id: int, message_id: int) -> Optional[Message]:
        for message in self._rooms.get(room_id, []):
            if message.id == message_id:
                return message
        return None

    def list_chronological(self, room_id: int) -> List[Message]:
        """All messages in the room, oldest first."""
        return list(self._rooms.get(room_id, []))

    def list_replies(self, room_id: int, parent_id: int) -> List[Message]:
        """Direct replies to `parent_id` within the same room, oldest first."""
        return [
            msg for msg in self._rooms.get(room_id, [])
            if msg.replyToMessageId == parent_id
        ]

    def rewrite_identity(
        self,
        identity: IdentityKey,
        new_sender=UNSET,
        new_avatar=UNSET,
    ) -> int:
        """Patch sender and/or avatar on every message written by `identity`.

        Scans every room. Pass None as `new_avatar` to clear the avatar.

        Returns:
            Number of messages patched.
        """
        updated = 0
        for messages in self._rooms.values():
            for msg in messages:
                if msg.senderId != identity:
                    continue
                if new_sender is not UNSET:
                    msg.sender = new_sender
                if new_avatar is not UNSET:
                    msg.avatarUrl = new_avatar
                updated += 1
        return updated

    def find_reply_preview(self, room_id: int, message_id: int) -> Optional[ReplyPreview]:
        """Build the quoted-reply summary for a message, or None if absent."""
        message = self.get(room_id, message_id)
        if message is None:
            return None
        return ReplyPreview(
            sender=message.sender,
            contentSnippet=message.content[:self._snippet_length],
            mediaThumbnail=thumbnail_for(message.mediaUrl, message.mediaType),
        )
