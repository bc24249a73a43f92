"""Exceptions raised by the chatroom state engine.

Every error carries the HTTP status code the router should answer with.
All of them are caller errors; nothing here is retried.
"""


class ChatroomError(Exception):
    """Base exception for chatroom errors."""
    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class InvalidInputError(ChatroomError):
    """Raised when a required field is empty or a media reference is malformed."""
    def __init__(self, message: str):
        super().__init__(message, status_code=400)


class EmptyContentError(InvalidInputError):
    """Raised when a message is sent without content."""
    def __init__(self, message: str = "Message content cannot be empty"):
        super().__init__(message)


class RoomNotFoundError(ChatroomError):
    """Raised when a room-scoped mutation targets an unknown room."""
    def __init__(self, room_id: int):
        self.room_id = room_id
        super().__init__(f"Chatroom {room_id} not found", status_code=404)


class UnauthorizedError(ChatroomError):
    """Raised when a privileged operation is called by a non-admin."""
    def __init__(self, caller: str):
        self.caller = caller
        super().__init__(f"Caller {caller!r} is not an administrator", status_code=403)
