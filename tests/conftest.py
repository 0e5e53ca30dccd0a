"""
Test Configuration

Pytest configuration and fixtures for the test suite.
"""

from typing import Callable, Generator, List

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from magic_conch.config import Settings
from magic_conch.main import create_app
from magic_conch.models import OutboundPayload
from magic_conch.services.groupme_client import GroupMeAPIError


class RecordingSender:
    """MessageSender fake that records payloads instead of posting them."""

    def __init__(self, status_code: int = 202):
        self.status_code = status_code
        self.sent: List[OutboundPayload] = []

    async def send(self, payload: OutboundPayload) -> httpx.Response:
        self.sent.append(payload)
        return httpx.Response(self.status_code)


class FailingSender(RecordingSender):
    """MessageSender fake whose posts are always rejected."""

    async def send(self, payload: OutboundPayload) -> httpx.Response:
        self.sent.append(payload)
        raise GroupMeAPIError("GroupMe API error: 400", status_code=400, response_body="{}")


class FixedChooser:
    """ReplyChooser that always gives the same answer."""

    def __init__(self, phrase: str = "Nothing."):
        self.phrase = phrase

    def choose(self) -> str:
        return self.phrase


@pytest.fixture
def bot_id() -> str:
    return "b1"


@pytest.fixture
def settings(bot_id: str) -> Settings:
    """Settings with a known bot ID, isolated from any .env file."""
    return Settings(groupme_bot_id=bot_id, _env_file=None)


@pytest.fixture
def make_sender() -> Callable[..., RecordingSender]:
    """Factory for recording senders."""
    return RecordingSender


@pytest.fixture
def sender(make_sender) -> RecordingSender:
    return make_sender()


@pytest.fixture
def failing_sender() -> FailingSender:
    return FailingSender()


@pytest.fixture
def make_chooser() -> Callable[..., FixedChooser]:
    """Factory for choosers pinned to one phrase."""
    return FixedChooser


@pytest.fixture
def app(settings: Settings, sender: RecordingSender) -> FastAPI:
    return create_app(settings=settings, sender=sender)


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """Create a test client for synchronous tests."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def sample_message() -> dict:
    """A GroupMe bot callback as it arrives on the wire."""
    return {
        "attachments": [],
        "avatar_url": "https://i.groupme.com/123456789",
        "created_at": 1302623328,
        "group_id": "1234567890",
        "id": "m1",
        "name": "Squidward",
        "sender_id": "u1",
        "sender_type": "user",
        "source_guid": "GUID",
        "system": False,
        "text": "/magicconch will it rain",
        "user_id": "u1"
    }
