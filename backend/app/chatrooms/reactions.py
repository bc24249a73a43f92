"""Emoji reactions keyed by message.

Each (message, emoji) pair maps to the set of identities that reacted with
it. The count shown to clients is always the size of that set.
"""
from typing import Dict, List, Optional, Set

from .schemas import IdentityKey, ReactionSummary


class ReactionAggregator:
    """message_id -> {emoji -> reacting identities}.

    Emoji keep the order in which they were first added to a message. An
    emoji whose set becomes empty is deleted, so re-adding it later puts it
    at the end.
    """

    def __init__(self) -> None:
        self._reactions: Dict[int, Dict[str, Set[IdentityKey]]] = {}

    def add(self, message_id: int, emoji: str, identity: IdentityKey) -> bool:
        """Add a reaction. Returns False if the identity had already reacted."""
        users = self._reactions.setdefault(message_id, {}).setdefault(emoji, set())
        if identity in users:
            return False
        users.add(identity)
        return True

    def remove(self, message_id: int, emoji: str, identity: IdentityKey) -> bool:
        """Remove a reaction. Returns False if there was nothing to remove."""
        emojis = self._reactions.get(message_id)
        if not emojis or identity not in emojis.get(emoji, ()):
            return False
        emojis[emoji].discard(identity)
        if not emojis[emoji]:
            del emojis[emoji]
        if not emojis:
            del self._reactions[message_id]
        return True

    def list(
        self, message_id: int, identity: Optional[IdentityKey] = None
    ) -> List[ReactionSummary]:
        """Counts per emoji. With `identity`, also flag the ones it reacted with."""
        emojis = self._reactions.get(message_id, {})
        return [
            ReactionSummary(
                emoji=emoji,
                count=len(users),
                reactedByMe=identity is not None and identity in users,
            )
            for emoji, users in emojis.items()
            if users
        ]
