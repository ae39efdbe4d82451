"""Transient staging files for attachments in flight."""

from __future__ import annotations

import logging
import ntpath
import time
from pathlib import Path

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp")


class CleanupError(Exception):
    """Raised when a staging file cannot be deleted."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Failed to remove {path}: {reason}")


def is_image_attachment(name: str) -> bool:
    return name.lower().endswith(IMAGE_EXTENSIONS)


def staging_filename(name: str, now_ms: int | None = None) -> str:
    """Return ``temp_<epoch-millis>_<name>``.

    Only the final path component of ``name`` is kept. Uniqueness across
    concurrent runs is best-effort: two attachments with the same name
    staged in the same millisecond collide.
    """
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    base = Path(ntpath.basename(name.rstrip("/\\"))).name or "attachment"
    return f"temp_{now_ms}_{base}"


def prepare_staging_path(staging_dir: Path, name: str) -> Path:
    staging_dir.mkdir(parents=True, exist_ok=True)
    return staging_dir / staging_filename(name)


def remove_staged_file(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        raise CleanupError(path, str(exc)) from exc


def cleanup_staged_file(path: Path) -> None:
    """Best-effort delete; failures are logged and never propagated."""
    try:
        remove_staged_file(path)
    except CleanupError as exc:
        logger.error("Error cleaning up file: %s", exc)
