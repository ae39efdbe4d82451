"""Image transfer: stream a remote attachment into local staging storage."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import httpx

logger = logging.getLogger(__name__)


class TransferError(Exception):
    """Raised when an attachment cannot be downloaded to local storage."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to download {url}: {reason}")


class ImageTransfer:
    """Downloads remote files to a destination path.

    A custom ``transport`` may be supplied (e.g. ``httpx.MockTransport``);
    otherwise httpx's default transport and timeouts apply.
    """

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._transport = transport

    async def fetch(self, url: str, dest: Path) -> Path:
        """Stream ``url`` into ``dest``, creating parent directories.

        The file is complete only when this returns. On failure a partial
        file may remain at ``dest``; callers are expected to clean it up.
        """
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            async with httpx.AsyncClient(
                transport=self._transport, follow_redirects=True,
            ) as client:
                async with client.stream("GET", url) as resp:
                    if not resp.is_success:
                        raise TransferError(url, f"HTTP {resp.status_code}")
                    with open(dest, "wb") as fh:
                        async for chunk in resp.aiter_bytes():
                            await asyncio.to_thread(fh.write, chunk)
        except httpx.HTTPError as exc:
            raise TransferError(url, str(exc) or type(exc).__name__) from exc
        except OSError as exc:
            raise TransferError(url, f"local write failed: {exc}") from exc

        logger.debug("Downloaded %s to %s", url, dest)
        return dest
