"""Event-loop wiring for the Discord bridge."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from src.config import BridgeConfig
from src.discord_bot.client import BridgeClient
from src.pipeline.orchestrator import AttachmentPipeline

logger = logging.getLogger(__name__)


def log_unhandled_exception(loop: asyncio.AbstractEventLoop, context: dict[str, Any]) -> None:
    """Loop exception handler: log orphaned task failures instead of crashing."""
    exc = context.get("exception")
    logger.error(
        "Unhandled asynchronous error: %s",
        context.get("message", "unknown error"),
        exc_info=(type(exc), exc, exc.__traceback__) if exc else None,
    )


async def serve(config: BridgeConfig) -> None:
    """Log in and dispatch events until the connection is closed.

    Leaving the client context (including on cancellation from an
    interrupt) closes the gateway connection.
    """
    asyncio.get_running_loop().set_exception_handler(log_unhandled_exception)
    pipeline = AttachmentPipeline(config)
    async with BridgeClient(config, pipeline) as client:
        await client.start(config.discord_token)
