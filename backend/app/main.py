"""Topic Rooms Backend Application.

This is the main entry point for the Topic Rooms backend service: anonymous
group chat in topic rooms seeded with media, with threaded replies, emoji
reactions and live-room indicators.

Modules:
    - chatrooms: room/message/presence/reaction state engine and REST API
    - profiles: anonymous user profiles
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.chatrooms.router import router as chatrooms_router
from app.chatrooms.service import ChatService
from app.config import get_config
from app.profiles.router import router as profiles_router

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

# Silence per-request noise from the HTTP stack.
for _noisy in (
    "httpx",
    "httpcore",
    "uvicorn.access",
):
    logging.getLogger(_noisy).setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup/shutdown events."""
    # Startup
    config = get_config()

    # Apply configured log level to root logger so that
    # `logging.level: "debug"` in topicrooms.settings.yaml activates DEBUG output.
    configured_level = getattr(logging, config.logging.level.upper(), None)
    if configured_level is not None:
        logging.getLogger().setLevel(configured_level)
        logger.info("Root logger level set to %s", config.logging.level.upper())

    ChatService.get_instance()
    logger.info(
        f"Server running on http://{config.server.host}:{config.server.port} "
        f"(liveness window {config.presence.liveness_window_seconds}s)"
    )

    yield  # Application runs here

    # Shutdown
    logger.info("Application shutdown complete")


# Create FastAPI application with metadata
app = FastAPI(
    title="Topic Rooms API",
    description="Backend service for Topic Rooms - anonymous media-seeded group chat",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_config().server.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register all routers
app.include_router(chatrooms_router)
app.include_router(profiles_router)


@app.get("/health")
async def health() -> dict:
    """Health check endpoint.

    Returns:
        dict: Status object indicating the server is running.
    """
    return {"status": "ok"}
