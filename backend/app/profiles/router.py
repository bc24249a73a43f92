"""Profile router: the caller's own anonymous profile."""
import logging
from typing import Optional

from fastapi import APIRouter, Header

from .schemas import UserProfile
from .service import ProfileService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profiles", tags=["profiles"])


def _service() -> ProfileService:
    return ProfileService.get_instance()


@router.get("/me", response_model=Optional[UserProfile])
async def get_caller_user_profile(
    x_caller_id: str = Header(..., alias="X-Caller-Id"),
) -> Optional[UserProfile]:
    """Get the caller's profile.

    Returns:
        The saved profile, or null if the caller never saved one.
    """
    return _service().get(x_caller_id)


@router.put("/me", response_model=UserProfile)
async def save_caller_user_profile(
    body: UserProfile,
    x_caller_id: str = Header(..., alias="X-Caller-Id"),
) -> UserProfile:
    """Create or replace the caller's profile."""
    return _service().save(x_caller_id, body)
