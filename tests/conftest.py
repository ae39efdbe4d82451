"""Shared test fixtures for discord-gyazo-bridge."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import httpx
import pytest

from src.config import BridgeConfig
from src.models import Attachment, InboundEvent

IMAGE_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


class FakeStatusMessage:
    """Records edits made to a posted reply."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.edits: list[str] = []

    async def edit(self, text: str) -> None:
        self.edits.append(text)
        self.text = text


class FakeReplyTarget:
    """In-memory stand-in for a chat message that can be replied to."""

    def __init__(self) -> None:
        self.replies: list[FakeStatusMessage] = []

    async def reply(self, text: str) -> FakeStatusMessage:
        msg = FakeStatusMessage(text)
        self.replies.append(msg)
        return msg


@pytest.fixture
def reply_target() -> FakeReplyTarget:
    return FakeReplyTarget()


@pytest.fixture
def staging_dir(tmp_path: Path) -> Path:
    return tmp_path / "staging"


# --- Factory functions for test data ---


def make_config(**kwargs: Any) -> BridgeConfig:
    """Factory for BridgeConfig with sensible defaults."""
    defaults: dict[str, Any] = {
        "discord_token": "discord-test-token",
        "gyazo_token": "gyazo-test-token",
        "channel_id": "",
        "staging_dir": Path("temp"),
    }
    defaults.update(kwargs)
    return BridgeConfig(**defaults)


def make_attachment(name: str = "cat.png", **kwargs: Any) -> Attachment:
    defaults: dict[str, Any] = {
        "name": name,
        "url": f"https://cdn.discordapp.com/attachments/1/2/{name}",
    }
    defaults.update(kwargs)
    return Attachment(**defaults)


def make_event(**kwargs: Any) -> InboundEvent:
    """Factory for InboundEvent with sensible defaults."""
    defaults: dict[str, Any] = {
        "conversation_id": "1000",
        "author_is_bot": False,
        "attachments": [make_attachment()],
    }
    defaults.update(kwargs)
    return InboundEvent(**defaults)


def image_transport(
    content: bytes = IMAGE_BYTES, status_code: int = 200,
) -> httpx.MockTransport:
    """Transport serving ``content`` for every GET."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, content=content)

    return httpx.MockTransport(handler)


def gyazo_transport(
    status_code: int = 200,
    json_body: Any = None,
    requests: list[httpx.Request] | None = None,
) -> httpx.MockTransport:
    """Transport answering upload POSTs with a fixed JSON body.

    Requests are appended to ``requests`` when given.
    """
    body = json_body if json_body is not None else {
        "image_id": "xyz",
        "url": "https://gyazo.com/xyz.png",
    }

    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        return httpx.Response(status_code, json=body)

    return httpx.MockTransport(handler)
