"""Gyazo hosting client: multipart upload and direct URL resolution."""

from __future__ import annotations

import asyncio
import logging
import mimetypes
from pathlib import Path

import httpx

from src.config import GYAZO_UPLOAD_URL
from src.models import HostingUploadResult

logger = logging.getLogger(__name__)

DIRECT_URL_PREFIX = "https://i.gyazo.com/"
DEFAULT_EXTENSION = "jpg"


class UploadError(Exception):
    """Raised when the hosting API rejects or fails an upload.

    ``payload`` holds the upstream error body when one was returned.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        payload: object | None = None,
    ) -> None:
        self.status_code = status_code
        self.payload = payload
        super().__init__(message)


class GyazoUploader:
    """Uploads staged images to Gyazo with a static access token."""

    def __init__(
        self,
        access_token: str,
        upload_url: str = GYAZO_UPLOAD_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._access_token = access_token
        self._upload_url = upload_url
        self._transport = transport

    async def upload(self, image_path: Path) -> HostingUploadResult:
        """POST ``image_path`` to the upload endpoint. Single attempt."""
        try:
            content = await asyncio.to_thread(image_path.read_bytes)
        except OSError as exc:
            raise UploadError(f"Cannot read staged file {image_path}: {exc}") from exc

        content_type = mimetypes.guess_type(image_path.name)[0] or "application/octet-stream"
        files = {"imagedata": (image_path.name, content, content_type)}
        data = {"access_token": self._access_token}

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                resp = await client.post(self._upload_url, data=data, files=files)
        except httpx.HTTPError as exc:
            logger.error("Error uploading to Gyazo: %s", exc)
            raise UploadError(str(exc) or type(exc).__name__) from exc

        if not resp.is_success:
            payload = _error_payload(resp)
            logger.error(
                "Error uploading to Gyazo: status=%d payload=%s",
                resp.status_code, payload,
            )
            raise UploadError(
                f"Gyazo upload failed with HTTP {resp.status_code}",
                status_code=resp.status_code,
                payload=payload,
            )

        try:
            return HostingUploadResult.model_validate(resp.json())
        except ValueError as exc:
            # JSONDecodeError, UnicodeDecodeError and ValidationError
            raise UploadError(
                f"Unexpected Gyazo response: {exc}",
                status_code=resp.status_code,
                payload=resp.text,
            ) from exc


def _error_payload(resp: httpx.Response) -> object:
    try:
        return resp.json()
    except ValueError:
        # Undecodable bytes are replaced in resp.text
        return resp.text


def resolve_direct_url(result: HostingUploadResult) -> str:
    """Build the ``i.gyazo.com`` direct link for an upload result.

    The extension is whatever follows the last "." in ``result.url``,
    defaulting to jpg. This is a naming heuristic; the content type is
    never inspected.
    """
    _, dot, suffix = result.url.rpartition(".")
    extension = suffix if dot and suffix else DEFAULT_EXTENSION
    return f"{DIRECT_URL_PREFIX}{result.image_id}.{extension}"
