"""ProfileService: in-memory profiles keyed by caller identity."""
import logging
import threading
from typing import Dict, Optional

from .schemas import UserProfile

logger = logging.getLogger(__name__)


class ProfileService:
    """Stores one UserProfile per caller.

    Saving a profile does not touch historical messages; clients follow a
    rename with the retroactive rewrite endpoints.
    """

    _instance: Optional["ProfileService"] = None

    def __init__(self) -> None:
        self._profiles: Dict[str, UserProfile] = {}
        self._lock = threading.Lock()

    @classmethod
    def get_instance(cls) -> "ProfileService":
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        cls._instance = None

    def get(self, caller: str) -> Optional[UserProfile]:
        with self._lock:
            profile = self._profiles.get(caller)
            return profile.model_copy() if profile else None

    def save(self, caller: str, profile: UserProfile) -> UserProfile:
        with self._lock:
            self._profiles[caller] = profile.model_copy()
        logger.info("[profiles] Saved profile for %s (name=%s)", caller, profile.name)
        return profile
