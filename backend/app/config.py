"""Topic Rooms application configuration.

Loads settings from a single YAML file:
  * topicrooms.settings.yaml: non-secret configuration

Every section has defaults, so a missing file (or a missing key) yields a
working configuration.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

SETTINGS_FILE = Path("topicrooms.settings.yaml")


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        logger.warning("Config file not found: %s", path)
        return {}
    with path.open(encoding="utf-8") as fh:
        return yaml.safe_load(fh) or {}


# ---------------------------------------------------------------------------
# Settings models
# ---------------------------------------------------------------------------


class ServerSettings(BaseModel):
    host:            str       = "0.0.0.0"
    port:            int       = 8000
    allowed_origins: List[str] = Field(default_factory=lambda: ["*"])


class LoggingSettings(BaseModel):
    level: str = "info"


class PresenceSettings(BaseModel):
    """Sliding window used to decide whether a room is live."""
    liveness_window_seconds: float = 60.0

    @field_validator("liveness_window_seconds")
    @classmethod
    def _positive_window(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("liveness_window_seconds must be positive")
        return value


class ChatroomSettings(BaseModel):
    """Seed message author and reply preview shape."""
    seed_sender:          str = "Creator"
    seed_sender_id:       str = "creator"
    reply_snippet_length: int = Field(default=100, ge=1)


class AccessSettings(BaseModel):
    admin_identities: List[str] = Field(default_factory=list)


class AppSettings(BaseModel):
    server:    ServerSettings   = Field(default_factory=ServerSettings)
    logging:   LoggingSettings  = Field(default_factory=LoggingSettings)
    presence:  PresenceSettings = Field(default_factory=PresenceSettings)
    chatrooms: ChatroomSettings = Field(default_factory=ChatroomSettings)
    access:    AccessSettings   = Field(default_factory=AccessSettings)


# ---------------------------------------------------------------------------
# Public loader
# ---------------------------------------------------------------------------


def load_settings(path: Optional[Path] = None) -> AppSettings:
    """Load *AppSettings* from YAML, falling back to defaults."""
    settings_data = _load_yaml(path or SETTINGS_FILE)

    app_settings = AppSettings(**settings_data)
    logger.info(
        "Settings loaded (server=%s:%s, liveness_window=%ss, admins=%d)",
        app_settings.server.host,
        app_settings.server.port,
        app_settings.presence.liveness_window_seconds,
        len(app_settings.access.admin_identities),
    )
    return app_settings


_config: Optional[AppSettings] = None


def get_config() -> AppSettings:
    """Return the process-wide settings, loading them on first use."""
    global _config
    if _config is None:
        _config = load_settings()
    return _config


def reset_config() -> None:
    """Forget cached settings so the next get_config() reloads from disk."""
    global _config
    _config = None
