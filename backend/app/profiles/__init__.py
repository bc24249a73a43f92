"""Anonymous user profiles."""

from .schemas import UserProfile
from .service import ProfileService
from .router import router

__all__ = ["UserProfile", "ProfileService", "router"]
