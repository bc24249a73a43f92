"""ChatService: the public operation surface of the chatroom engine.

Coordinates the ChatroomRegistry, MessageStore, PresenceTracker and
ReactionAggregator. One instance owns all four; tests build a fresh
instance each time and the application uses the singleton.

Thread Safety:
    Every operation, read or write, runs under a single re-entrant lock.
    Mutations therefore apply in a total order and a reader never sees a
    half-applied one, including the all-rooms pass of a retroactive
    identity rewrite. Reads return copies, so nothing handed to a caller
    aliases internal state.

Usage:
    service = ChatService.get_instance()
    room_id = service.create_chatroom("Movie Night", "Friday", url, "youtube", "Entertainment")
    service.send_message("hi", "Alice", room_id, identity="u1")
"""
import logging
import threading
import time
from typing import Callable, List, Optional

from app.config import AppSettings, get_config

from .access import AdminCheck, RoleMap
from .errors import EmptyContentError, InvalidInputError, RoomNotFoundError, UnauthorizedError
from .media import MediaValidator, normalize_media_type, validate_media_url
from .messages import MessageStore
from .presence import PresenceTracker
from .reactions import ReactionAggregator
from .registry import ChatroomRegistry
from .schemas import (
    ChatroomView,
    IdentityKey,
    Message,
    MessageView,
    ReactionSummary,
    ReplyPreview,
)

logger = logging.getLogger(__name__)


class ChatService:
    """Singleton-style facade over the in-memory chatroom state.

    Attributes:
        _instance: Process-wide instance used by the HTTP routers.
    """

    _instance: Optional["ChatService"] = None

    def __init__(
        self,
        settings: Optional[AppSettings] = None,
        *,
        clock: Callable[[], float] = time.time,
        media_validator: MediaValidator = validate_media_url,
        is_admin: Optional[AdminCheck] = None,
    ) -> None:
        """Build an empty engine.

        Args:
            settings: Application settings. Defaults are used when omitted.
            clock: Returns the current time in seconds since epoch.
            media_validator: Decides whether a room's media reference is valid.
            is_admin: Decides whether a caller may run maintenance operations.
                Defaults to a RoleMap seeded from settings.access.
        """
        self._settings = settings or AppSettings()
        self._clock = clock
        self._validate_media = media_validator
        if is_admin is None:
            is_admin = RoleMap(self._settings.access.admin_identities).is_admin
        self._is_admin = is_admin

        self._window = self._settings.presence.liveness_window_seconds
        self._lock = threading.RLock()

        self._presence = PresenceTracker()
        self._reactions = ReactionAggregator()
        self._messages = MessageStore(
            snippet_length=self._settings.chatrooms.reply_snippet_length,
        )
        self._chatrooms = ChatroomRegistry(self._presence, liveness_window=self._window)

    @classmethod
    def get_instance(cls) -> "ChatService":
        """Get or create the process-wide instance from the loaded config."""
        if cls._instance is None:
            cls._instance = cls(get_config())
            logger.info("[ChatService] Initialized")
        return cls._instance

    @classmethod
    def set_instance(cls, service: "ChatService") -> None:
        cls._instance = service

    @classmethod
    def reset_instance(cls) -> None:
        """Drop the process-wide instance (for testing)."""
        cls._instance = None

    # =========================================================================
    # Chatrooms
    # =========================================================================

    def create_chatroom(
        self,
        topic: str,
        description: str,
        media_url: str,
        media_type: str,
        category: str,
    ) -> int:
        """Create a room and its seed message.

        Raises:
            InvalidInputError: A required field is empty or the media
                reference does not pass validation.
        """
        for field, value in (
            ("topic", topic),
            ("description", description),
            ("mediaUrl", media_url),
            ("category", category),
        ):
            if not value or not value.strip():
                logger.warning(f"[ChatService] Rejected chatroom: empty {field}")
                raise InvalidInputError(f"{field} is required")
        media_type = normalize_media_type(media_type)
        if not self._validate_media(media_url, media_type):
            logger.warning(f"[ChatService] Rejected chatroom: invalid {media_type} media")
            raise InvalidInputError(f"Invalid media reference for type {media_type!r}")

        seed = self._settings.chatrooms
        with self._lock:
            now = self._clock()
            room_id = self._chatrooms.create(
                topic, description, media_url, media_type, category, now,
            )
            self._messages.append(room_id, Message(
                id=0,
                roomId=room_id,
                content=description,
                timestamp=now,
                sender=seed.seed_sender,
                senderId=seed.seed_sender_id,
                mediaUrl=media_url,
                mediaType=media_type,
            ))
        logger.info(f"[ChatService] Created chatroom {room_id}: {topic!r} ({category})")
        return room_id

    def get_chatrooms(self) -> List[ChatroomView]:
        with self._lock:
            return self._chatrooms.list(self._clock())

    def get_chatroom(self, room_id: int) -> Optional[ChatroomView]:
        with self._lock:
            return self._chatrooms.get(room_id, self._clock())

    def search_chatrooms(self, term: str) -> List[ChatroomView]:
        with self._lock:
            return self._chatrooms.search(term, self._clock())

    def filter_chatrooms_by_category(self, category: str) -> List[ChatroomView]:
        with self._lock:
            return self._chatrooms.filter_by_category(category, self._clock())

    def increment_view_count(self, room_id: int, identity: IdentityKey) -> None:
        """Count a view and mark the viewer as present in the room."""
        with self._lock:
            self._chatrooms.record_view(room_id, identity, self._clock())
        logger.info(f"[ChatService] View on chatroom {room_id} by {identity}")

    # =========================================================================
    # Pinning
    # =========================================================================

    def pin_video(self, room_id: int, message_id: int) -> None:
        with self._lock:
            self._chatrooms.pin(room_id, message_id)
        logger.info(f"[ChatService] Pinned message {message_id} in chatroom {room_id}")

    def unpin_video(self, room_id: int) -> None:
        with self._lock:
            self._chatrooms.unpin(room_id)
        logger.info(f"[ChatService] Unpinned chatroom {room_id}")

    def get_pinned_video(self, room_id: int) -> Optional[int]:
        with self._lock:
            return self._chatrooms.pinned(room_id)

    # =========================================================================
    # Messages
    # =========================================================================

    def send_message(
        self,
        content: str,
        sender: str,
        room_id: int,
        media_url: Optional[str] = None,
        media_type: Optional[str] = None,
        avatar_url: Optional[str] = None,
        *,
        identity: IdentityKey,
        reply_to: Optional[int] = None,
    ) -> Message:
        """Append a message, bump the room's count and mark the sender present.

        reply_to is stored as given; it is not checked against the room.
        media_type is stored lower-cased.

        Raises:
            EmptyContentError: content is empty.
            InvalidInputError: identity is empty.
            RoomNotFoundError: the room does not exist.
        """
        if not content:
            raise EmptyContentError()
        if not identity:
            raise InvalidInputError("Sender identity is required")

        with self._lock:
            if not self._chatrooms.exists(room_id):
                raise RoomNotFoundError(room_id)
            now = self._clock()
            message = Message(
                id=0,
                roomId=room_id,
                content=content,
                timestamp=now,
                sender=sender,
                senderId=identity,
                mediaUrl=media_url,
                mediaType=normalize_media_type(media_type),
                avatarUrl=avatar_url,
                replyToMessageId=reply_to,
            )
            self._messages.append(room_id, message)
            self._chatrooms.increment_message_count(room_id)
            self._presence.touch(room_id, identity, now)
            stored = message.model_copy()
        logger.debug(f"[ChatService] Message {stored.id} in chatroom {room_id} from {identity}")
        return stored

    def get_messages(self, room_id: int) -> List[Message]:
        with self._lock:
            return [m.model_copy() for m in self._messages.list_chronological(room_id)]

    def get_message_with_reactions_and_replies(
        self, room_id: int, identity: Optional[IdentityKey] = None
    ) -> List[MessageView]:
        """Chronological messages, each with its current reaction counts.

        With `identity`, each reaction also says whether that caller reacted.
        """
        with self._lock:
            return [
                MessageView(**m.model_dump(), reactions=self._reactions.list(m.id, identity))
                for m in self._messages.list_chronological(room_id)
            ]

    def get_replies(self, room_id: int, parent_id: int) -> List[Message]:
        with self._lock:
            return [m.model_copy() for m in self._messages.list_replies(room_id, parent_id)]

    def get_reply_preview(self, room_id: int, message_id: int) -> Optional[ReplyPreview]:
        with self._lock:
            return self._messages.find_reply_preview(room_id, message_id)

    # =========================================================================
    # Reactions
    # =========================================================================

    def add_reaction(self, message_id: int, emoji: str, identity: IdentityKey) -> None:
        with self._lock:
            changed = self._reactions.add(message_id, emoji, identity)
        if changed:
            logger.debug(f"[ChatService] {identity} reacted {emoji} to message {message_id}")

    def remove_reaction(self, message_id: int, emoji: str, identity: IdentityKey) -> None:
        with self._lock:
            changed = self._reactions.remove(message_id, emoji, identity)
        if changed:
            logger.debug(f"[ChatService] {identity} removed {emoji} from message {message_id}")

    def get_reactions(
        self, message_id: int, identity: Optional[IdentityKey] = None
    ) -> List[ReactionSummary]:
        with self._lock:
            return self._reactions.list(message_id, identity)

    # =========================================================================
    # Retroactive identity rewrites
    # =========================================================================

    def update_username_retroactively(self, identity: IdentityKey, new_username: str) -> int:
        """Show `new_username` on every message ever sent by `identity`.

        Raises:
            InvalidInputError: new_username is blank.
        """
        new_username = new_username.strip() if new_username else ""
        if not new_username:
            raise InvalidInputError("Username cannot be empty")
        with self._lock:
            updated = self._messages.rewrite_identity(identity, new_sender=new_username)
        logger.info(f"[ChatService] Renamed {identity} on {updated} message(s)")
        return updated

    def update_avatar_retroactively(
        self, identity: IdentityKey, new_avatar_url: Optional[str]
    ) -> int:
        """Set (or clear, with None) the avatar on every message by `identity`."""
        with self._lock:
            updated = self._messages.rewrite_identity(identity, new_avatar=new_avatar_url)
        logger.info(f"[ChatService] Updated avatar of {identity} on {updated} message(s)")
        return updated

    # =========================================================================
    # Maintenance
    # =========================================================================

    def cleanup_inactive_users(self, caller: IdentityKey) -> int:
        """Drop stale presence records in every room (admin only).

        Raises:
            UnauthorizedError: caller is not an administrator.
        """
        if not self._is_admin(caller):
            logger.warning(f"[ChatService] Presence cleanup refused for {caller}")
            raise UnauthorizedError(caller)
        with self._lock:
            removed = self._presence.sweep(self._clock(), self._window)
        logger.info(f"[ChatService] Presence cleanup by {caller} removed {removed} record(s)")
        return removed
