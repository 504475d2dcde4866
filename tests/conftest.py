# Test configuration
import sys
from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient

REPO_ROOT = Path(__file__).parent.parent

# Add repo root to path so tests can import modules
sys.path.insert(0, str(REPO_ROOT))

from trello_gateway.config import Settings  # noqa: E402
from trello_gateway.dependencies import get_trello_client  # noqa: E402
from trello_gateway.main import create_app  # noqa: E402


SECRET = "correct-horse-battery-staple"
AUTH_HEADERS = {"Authorization": f"Bearer {SECRET}"}

BOARD_ID = "a" * 24
LIST_ID = "b" * 24
CARD_ID = "c" * 24
LABEL_ID = "d" * 24
MEMBER_ID = "e" * 24
CHECKLIST_ID = "f" * 24


class FakeTrelloClient:
    """Records invoke() calls and replays canned responses."""

    def __init__(self, response: Any = None, error: Exception | None = None) -> None:
        self.calls: list[tuple[str, str, dict | None]] = []
        self.response = {"id": BOARD_ID} if response is None else response
        self.error = error

    async def invoke(self, path: str, method: str = "GET", body: dict | None = None) -> Any:
        self.calls.append((method, path, body))
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def settings() -> Settings:
    return Settings(
        SHARED_SECRET=SECRET,
        TRELLO_API_KEY="test-key",
        TRELLO_TOKEN="test-token",
        SSE_PING_INTERVAL_SECONDS=0.05,
    )


@pytest.fixture
def fake_trello() -> FakeTrelloClient:
    return FakeTrelloClient()


@pytest.fixture
def app(settings, fake_trello):
    application = create_app(settings)
    application.dependency_overrides[get_trello_client] = lambda: fake_trello
    return application


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client
