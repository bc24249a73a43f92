"""Shared test fixtures and configuration for backend tests."""
import pytest
from fastapi.testclient import TestClient

from app.chatrooms.service import ChatService
from app.config import AppSettings
from app.main import app
from app.profiles.service import ProfileService

YOUTUBE_URL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"


class FakeClock:
    """Manually advanced clock returning seconds since epoch."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings():
    return AppSettings(access={"admin_identities": ["admin-1"]})


@pytest.fixture
def service(settings, clock):
    """A fresh ChatService on a fake clock; also installed as the singleton."""
    svc = ChatService(settings, clock=clock)
    ChatService.set_instance(svc)
    yield svc
    ChatService.reset_instance()


@pytest.fixture
def room(service):
    """ID of a room created with valid YouTube media."""
    return service.create_chatroom(
        "Movie Night", "Friday films", YOUTUBE_URL, "youtube", "Entertainment",
    )


@pytest.fixture(autouse=True)
def reset_profiles():
    ProfileService.reset_instance()
    yield
    ProfileService.reset_instance()


@pytest.fixture
def api_client(service):
    """Provide a TestClient for the main FastAPI app backed by `service`."""
    return TestClient(app)
