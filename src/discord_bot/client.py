"""Discord client: translates gateway messages into pipeline events."""

from __future__ import annotations

import logging
from typing import Any

import discord

from src.config import BridgeConfig
from src.models import Attachment, InboundEvent
from src.pipeline.orchestrator import AttachmentPipeline, ReplyError

logger = logging.getLogger(__name__)


def to_inbound_event(message: discord.Message) -> InboundEvent:
    """Extract the author flag, channel id and attachments from a message."""
    return InboundEvent(
        conversation_id=str(message.channel.id),
        author_is_bot=message.author.bot,
        attachments=[
            Attachment(name=att.filename, url=att.url)
            for att in message.attachments
        ],
    )


class DiscordStatusMessage:
    def __init__(self, message: discord.Message) -> None:
        self._message = message

    async def edit(self, text: str) -> None:
        try:
            await self._message.edit(content=text)
        except discord.HTTPException as exc:
            raise ReplyError(f"Cannot edit reply {self._message.id}: {exc}") from exc


class DiscordReplyTarget:
    """Posts replies associated with the originating message."""

    def __init__(self, message: discord.Message) -> None:
        self._message = message

    async def reply(self, text: str) -> DiscordStatusMessage:
        sent = await self._message.reply(text)
        return DiscordStatusMessage(sent)


def build_intents() -> discord.Intents:
    intents = discord.Intents.default()
    intents.guilds = True
    intents.guild_messages = True
    intents.message_content = True
    return intents


class BridgeClient(discord.Client):
    """Discord client that feeds every message into the attachment pipeline."""

    def __init__(self, config: BridgeConfig, pipeline: AttachmentPipeline) -> None:
        super().__init__(intents=build_intents())
        self._config = config
        self._pipeline = pipeline

    async def on_ready(self) -> None:
        logger.info("Bot is ready! Logged in as %s", self.user)
        scope = (
            "all channels" if self._config.monitors_all_channels
            else f"channel {self._config.channel_id}"
        )
        logger.info("Monitoring %s for images...", scope)

    async def on_message(self, message: discord.Message) -> None:
        event = to_inbound_event(message)
        await self._pipeline.handle_event(event, DiscordReplyTarget(message))

    async def on_error(self, event_method: str, /, *args: Any, **kwargs: Any) -> None:
        logger.exception("Discord client error in %s", event_method)
