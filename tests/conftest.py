"""Shared pytest fixtures for adcortex tests."""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from adcortex.types import SessionInfo


class FakeClock:
    """Controllable time source for the circuit breaker."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2025, 1, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture(autouse=True)
def no_env_api_key(monkeypatch):
    """Keep a developer's real API key out of the tests."""
    monkeypatch.delenv("ADCORTEX_API_KEY", raising=False)


@pytest.fixture
def session_data():
    return {
        "session_id": "session-123",
        "character_name": "Alex",
        "character_metadata": {"description": "Friendly and humorous assistant"},
        "user_info": {
            "user_id": "user-42",
            "age": 20,
            "gender": "male",
            "location": "US",
            "language": "en",
            "interests": ["gaming", "technology"],
        },
        "platform": {"name": "ChatBotX", "version": "1.0.2"},
    }


@pytest.fixture
def session_info(session_data):
    return SessionInfo.from_dict(session_data)


@pytest.fixture
def ad_data():
    return {
        "idx": 1,
        "ad_title": "Laptop",
        "ad_description": "Fast",
        "placement_template": "Try the new Laptop!",
        "link": "https://example.com/laptop",
    }


@pytest.fixture
def make_response():
    """Create a mock httpx response."""

    def _make_response(json_data=None, status_code=200, json_error=None):
        response = MagicMock()
        response.status_code = status_code
        if json_error is not None:
            response.json.side_effect = json_error
        else:
            response.json.return_value = json_data
        response.raise_for_status = MagicMock()
        if status_code >= 400:
            response.raise_for_status.side_effect = httpx.HTTPStatusError(
                "Error", request=MagicMock(), response=response
            )
        return response

    return _make_response


@pytest.fixture
def mock_async_http():
    """Patch httpx.AsyncClient; yields the client instance whose post() is mocked."""
    with patch("httpx.AsyncClient") as MockClient:
        mock_client = AsyncMock()
        mock_client.__aenter__.return_value = mock_client
        mock_client.__aexit__.return_value = None
        MockClient.return_value = mock_client
        yield mock_client


@pytest.fixture
def mock_sync_http():
    """Patch httpx.Client; yields the client instance whose post() is mocked."""
    with patch("httpx.Client") as MockClient:
        mock_client = MagicMock()
        mock_client.__enter__.return_value = mock_client
        mock_client.__exit__.return_value = None
        MockClient.return_value = mock_client
        yield mock_client
