"""Per-room presence tracking with a sliding liveness window.

A room is live when at least one identity was active in it within the
window. The comparison uses the absolute time difference, so activity
stamped slightly in the future (client clock skew) still counts.

Not thread-safe on its own; ChatService serialises access.
"""
import logging
from typing import Dict

from .schemas import IdentityKey

logger = logging.getLogger(__name__)


class PresenceTracker:
    """Last-activity timestamp per (room, identity)."""

    def __init__(self) -> None:
        # room_id -> {identity -> last active timestamp}
        self._last_active: Dict[int, Dict[IdentityKey, float]] = {}

    def touch(self, room_id: int, identity: IdentityKey, now: float) -> None:
        """Record activity, replacing any earlier record for the same pair."""
        self._last_active.setdefault(room_id, {})[identity] = now

    def live_count(self, room_id: int, now: float, window: float) -> int:
        """Count identities active in the room within `window` seconds of `now`."""
        records = self._last_active.get(room_id, {})
        return sum(1 for ts in records.values() if abs(now - ts) <= window)

    def is_live(self, room_id: int, now: float, window: float) -> bool:
        return self.live_count(room_id, now, window) > 0

    def sweep(self, now: float, window: float) -> int:
        """Discard stale records across all rooms.

        Returns:
            Number of (room, identity) records removed.
        """
        removed = 0
        for room_id in list(self._last_active):
            records = self._last_active[room_id]
            stale = [ident for ident, ts in records.items() if abs(now - ts) > window]
            for ident in stale:
                del records[ident]
            removed += len(stale)
            if not records:
                del self._last_active[room_id]
        logger.debug(f"[Presence] Swept {removed} stale record(s)")
        return removed
