"""Simple configuration management using .env."""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

from vinylshelf.core.utils.path_helper import get_app_config_path

DEFAULT_USER_AGENT = "MyRecordCollection/1.0"

# Settings a sync run needs; the token is required for writes to the collection
SYNC_REQUIRED_VARIABLES = ("DISCOGS_USERNAME", "DISCOGS_TOKEN")


@dataclass(frozen=True)
class DiscogsSettings:
    """Discogs settings supplied to the client and the sync engine."""

    user_agent: str = DEFAULT_USER_AGENT
    token: str | None = None
    username: str | None = None


def load_env_file() -> Path | None:
    """Locate and load the first available .env file.

    Returns:
        Path of the loaded file, or None if none was found
    """
    possible_paths = [
        Path(".env"),
        Path(os.path.expanduser("~/.vinylshelf/.env")),
        get_app_config_path() / ".env",
    ]

    for path in possible_paths:
        if path.exists():
            load_dotenv(path)
            logger.info(f"Loaded .env file from {path}")
            return path

    logger.debug("No .env file found")
    return None


def load_discogs_settings(load_env: bool = True) -> DiscogsSettings:
    """Read Discogs settings from the environment.

    Args:
        load_env: Whether to load a .env file first

    Returns:
        DiscogsSettings with empty values normalized to None
    """
    if load_env:
        load_env_file()

    return DiscogsSettings(
        user_agent=os.getenv("DISCOGS_USER_AGENT") or DEFAULT_USER_AGENT,
        token=os.getenv("DISCOGS_TOKEN") or None,
        username=os.getenv("DISCOGS_USERNAME") or None,
    )


def sync_readiness(settings: DiscogsSettings) -> dict[str, object]:
    """Report which settings required for sync are missing.

    Args:
        settings: Loaded Discogs settings

    Returns:
        ``{"ready": bool, "missing": [variable names]}``
    """
    values = {
        "DISCOGS_USERNAME": settings.username,
        "DISCOGS_TOKEN": settings.token,
    }
    missing = [name for name in SYNC_REQUIRED_VARIABLES if not values[name]]
    return {"ready": not missing, "missing": missing}
