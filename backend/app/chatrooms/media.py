"""Media references attached to rooms and messages.

Provides the default media validator used when creating rooms and the
thumbnail rules used by reply previews. Media is always an opaque URL
string; uploads arrive as data: URLs.
"""
import re
from typing import Callable, Optional

# (media_url, media_type) -> bool
MediaValidator = Callable[[str, str], bool]

TWITCH_ICON = "/assets/generated/twitch-icon-transparent.dim_32x32.png"
TWITTER_ICON = "/assets/generated/twitter-icon-transparent.dim_32x32.png"

_YOUTUBE_ID_PATTERNS = [
    re.compile(r"(?:youtube\.com/watch\?v=|youtu\.be/)([^&\s]+)"),
    re.compile(r"youtube\.com/embed/([^&\s?]+)"),
    re.compile(r"youtube\.com/v/([^&\s?]+)"),
    re.compile(r"youtube\.com/shorts/([^&\s?]+)"),
]


def is_youtube_url(url: str) -> bool:
    lowered = url.lower()
    return "youtube.com" in lowered or "youtu.be" in lowered


def is_twitch_url(url: str) -> bool:
    return "twitch.tv" in url.lower()


def is_twitter_url(url: str) -> bool:
    lowered = url.lower()
    return "twitter.com" in lowered or "x.com" in lowered


def is_image_url(url: str) -> bool:
    lowered = url.lower()
    return lowered.startswith(("http://", "https://", "data:image/"))


def normalize_media_type(media_type: Optional[str]) -> Optional[str]:
    """Media types are case-insensitive; they are stored lower-cased."""
    if media_type is None:
        return None
    return media_type.strip().lower()


def validate_media_url(media_url: str, media_type: str) -> bool:
    """Default media validator: the URL must match its declared type."""
    if not media_url or not media_url.strip():
        return False
    checks = {
        "image": is_image_url,
        "youtube": is_youtube_url,
        "twitch": is_twitch_url,
        "twitter": is_twitter_url,
    }
    check = checks.get(normalize_media_type(media_type) or "")
    return bool(check and check(media_url.strip()))


def youtube_video_id(url: str) -> Optional[str]:
    """Extract the video ID from the common YouTube URL shapes."""
    for pattern in _YOUTUBE_ID_PATTERNS:
        match = pattern.search(url)
        if match and match.group(1):
            return match.group(1).split("?")[0].split("#")[0]
    return None


def thumbnail_for(media_url: Optional[str], media_type: Optional[str]) -> Optional[str]:
    """Small thumbnail shown next to a quoted reply, if the media has one."""
    if not media_url or not media_type:
        return None
    media_type = normalize_media_type(media_type)
    if media_type == "image":
        return media_url
    if media_type == "youtube" and is_youtube_url(media_url):
        video_id = youtube_video_id(media_url)
        if video_id:
            return f"https://img.youtube.com/vi/{video_id}/default.jpg"
        return None
    if media_type == "twitch" and is_twitch_url(media_url):
        return TWITCH_ICON
    if media_type == "twitter" and is_twitter_url(media_url):
        return TWITTER_ICON
    return None
