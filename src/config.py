"""Process-wide bridge configuration, read once at startup."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict

GYAZO_UPLOAD_URL = "https://upload.gyazo.com/api/upload"
DEFAULT_STAGING_DIR = "temp"


class ConfigurationError(Exception):
    """Raised when a required setting is missing from the environment."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__(f"Missing required settings: {', '.join(missing)}")


class BridgeConfig(BaseModel):
    """Immutable settings passed explicitly into the pipeline and client.

    An empty ``channel_id`` means every channel the bot can see is monitored.
    """

    model_config = ConfigDict(frozen=True)

    discord_token: str
    gyazo_token: str
    channel_id: str = ""
    staging_dir: Path = Path(DEFAULT_STAGING_DIR)
    upload_url: str = GYAZO_UPLOAD_URL

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> BridgeConfig:
        """Create BridgeConfig from environment variables."""
        env = os.environ if environ is None else environ
        discord_token = env.get("DISCORD_TOKEN", "").strip()
        gyazo_token = env.get("GYAZO_TOKEN", "").strip()

        missing = [
            name for name, value in (
                ("DISCORD_TOKEN", discord_token),
                ("GYAZO_TOKEN", gyazo_token),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(missing)

        return cls(
            discord_token=discord_token,
            gyazo_token=gyazo_token,
            channel_id=env.get("CHANNEL_ID", "").strip(),
            staging_dir=Path(env.get("STAGING_DIR") or DEFAULT_STAGING_DIR),
        )

    @property
    def monitors_all_channels(self) -> bool:
        return not self.channel_id
