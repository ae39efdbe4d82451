"""Shared Pydantic data models for discord-gyazo-bridge."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

# --- Enums ---


class ProcessingStatus(str, Enum):
    UPLOADED = "uploaded"
    FAILED = "failed"


# --- Inbound Event Models ---


class Attachment(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    url: str


class InboundEvent(BaseModel):
    """Platform-neutral view of a chat message carrying attachments."""

    model_config = ConfigDict(frozen=True)

    conversation_id: str
    author_is_bot: bool = False
    attachments: list[Attachment] = Field(default_factory=list)


# --- Hosting Models ---


class HostingUploadResult(BaseModel):
    """Successful response body of the Gyazo upload API."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    image_id: str
    url: str
    permalink_url: str | None = None
    thumb_url: str | None = None
    type: str | None = None
    created_at: str | None = None


# --- Pipeline Models ---


class AttachmentOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    status: ProcessingStatus
    direct_url: str | None = None
