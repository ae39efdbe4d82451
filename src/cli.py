"""Click CLI for the Discord to Gyazo bridge."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

import click
import discord

from src.config import BridgeConfig, ConfigurationError
from src.discord_bot.runner import serve
from src.hosting.gyazo import GyazoUploader, UploadError, resolve_direct_url

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@click.group()
@click.option(
    "--log-level",
    default="INFO",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging verbosity.",
)
def cli(log_level: str) -> None:
    """Re-host Discord image attachments on Gyazo."""
    logging.basicConfig(level=log_level.upper(), format=_LOG_FORMAT)


@cli.command()
@click.option("--channel-id", default=None, help="Only monitor this channel (overrides CHANNEL_ID).")
@click.option(
    "--staging-dir",
    default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory for transient downloads (overrides STAGING_DIR).",
)
def run(channel_id: str | None, staging_dir: Path | None) -> None:
    """Connect to Discord and start re-hosting images."""
    try:
        config = BridgeConfig.from_env()
    except ConfigurationError as exc:
        raise click.UsageError(str(exc)) from exc

    overrides: dict[str, object] = {}
    if channel_id is not None:
        overrides["channel_id"] = channel_id
    if staging_dir is not None:
        overrides["staging_dir"] = staging_dir
    if overrides:
        config = config.model_copy(update=overrides)

    try:
        asyncio.run(serve(config))
    except KeyboardInterrupt:
        logger.info("Shutting down bot...")
    except discord.LoginFailure as exc:
        logger.error("Discord login failed: %s", exc)
        sys.exit(1)


@cli.command()
@click.argument("image_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--token", envvar="GYAZO_TOKEN", required=True, help="Gyazo access token.")
def upload(image_path: Path, token: str) -> None:
    """Upload a local image to Gyazo and print its direct URL."""
    uploader = GyazoUploader(token)
    try:
        result = asyncio.run(uploader.upload(image_path))
    except UploadError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(resolve_direct_url(result))


if __name__ == "__main__":
    cli()
