"""Chatroom state engine: rooms, messages, presence and reactions."""

from .errors import (
    ChatroomError,
    EmptyContentError,
    InvalidInputError,
    RoomNotFoundError,
    UnauthorizedError,
)
from .schemas import ChatroomView, Message, MessageView, ReactionSummary, ReplyPreview
from .service import ChatService
from .router import router

__all__ = [
    "ChatroomError",
    "EmptyContentError",
    "InvalidInputError",
    "RoomNotFoundError",
    "UnauthorizedError",
    "ChatroomView",
    "Message",
    "MessageView",
    "ReactionSummary",
    "ReplyPreview",
    "ChatService",
    "router",
]
