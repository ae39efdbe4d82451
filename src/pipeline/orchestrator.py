"""Attachment pipeline: filter, download, upload, report, clean up.

Pipeline stages per image attachment:
1. Announce (pending reply)
2. Stage (unique path under the staging directory)
3. Transfer (download from the chat platform)
4. Upload & resolve (Gyazo direct URL)
5. Report (edit the pending reply, or post a failure notice)
6. Cleanup (always)

The pipeline only sees plain data (InboundEvent) and the small reply
protocols below, so it runs without a live chat connection.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from src.config import BridgeConfig
from src.hosting.gyazo import GyazoUploader, UploadError, resolve_direct_url
from src.models import Attachment, AttachmentOutcome, InboundEvent, ProcessingStatus
from src.pipeline.staging import (
    cleanup_staged_file,
    is_image_attachment,
    prepare_staging_path,
)
from src.transfer.downloader import ImageTransfer, TransferError

logger = logging.getLogger(__name__)

PENDING_TEXT = "🔄 Uploading image to Gyazo..."
FAILURE_TEXT = "❌ Failed to upload image to Gyazo. Please try again later."


class ReplyError(Exception):
    """Raised by a chat adapter when a reply cannot be posted or edited."""


class StatusMessage(Protocol):
    async def edit(self, text: str) -> None: ...


class ReplyTarget(Protocol):
    async def reply(self, text: str) -> StatusMessage: ...


def format_result(direct_url: str) -> str:
    return f"```{direct_url}```"


class AttachmentPipeline:
    """Drives one processing run per qualifying image attachment."""

    def __init__(
        self,
        config: BridgeConfig,
        transfer: ImageTransfer | None = None,
        uploader: GyazoUploader | None = None,
    ) -> None:
        self._config = config
        self._transfer = transfer or ImageTransfer()
        self._uploader = uploader or GyazoUploader(
            config.gyazo_token, upload_url=config.upload_url,
        )

    def should_process(self, event: InboundEvent) -> bool:
        if event.author_is_bot:
            return False
        if self._config.channel_id and event.conversation_id != self._config.channel_id:
            return False
        return bool(event.attachments)

    async def handle_event(
        self, event: InboundEvent, target: ReplyTarget,
    ) -> list[AttachmentOutcome]:
        """Process every image attachment of ``event`` in order.

        An unexpected error on one attachment is logged and does not stop
        the remaining attachments.
        """
        if not self.should_process(event):
            return []

        outcomes: list[AttachmentOutcome] = []
        for attachment in event.attachments:
            if not is_image_attachment(attachment.name):
                continue
            try:
                outcomes.append(await self.process_attachment(attachment, target))
            except Exception:
                logger.exception("Error processing image %s", attachment.name)
                outcomes.append(AttachmentOutcome(
                    name=attachment.name, status=ProcessingStatus.FAILED,
                ))
        return outcomes

    async def process_attachment(
        self, attachment: Attachment, target: ReplyTarget,
    ) -> AttachmentOutcome:
        status = await target.reply(PENDING_TEXT)

        staged: Path | None = None
        try:
            staged = prepare_staging_path(self._config.staging_dir, attachment.name)
            await self._transfer.fetch(attachment.url, staged)
            result = await self._uploader.upload(staged)
            direct_url = resolve_direct_url(result)
            await status.edit(format_result(direct_url))
        except (TransferError, UploadError, ReplyError, OSError) as exc:
            logger.error(
                "Error processing image %s: %s", attachment.name, exc,
                exc_info=True,
            )
            await target.reply(FAILURE_TEXT)
            return AttachmentOutcome(name=attachment.name, status=ProcessingStatus.FAILED)
        finally:
            if staged is not None:
                cleanup_staged_file(staged)

        logger.info("Uploaded %s to %s", attachment.name, direct_url)
        return AttachmentOutcome(
            name=attachment.name,
            status=ProcessingStatus.UPLOADED,
            direct_url=direct_url,
        )
