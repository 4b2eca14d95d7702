import os
import sys
from typing import Mapping, Optional

from dotenv import load_dotenv
from loguru import logger
from pydantic import BaseModel, SecretStr

API_BASE_URL = "https://discord.com/api/v10"
API_TIMEOUT = 30.0
USER_AGENT = "DiscordBot (discord-mcp, 0.1.0)"


class ConfigurationError(Exception):
    """Raised when required settings are missing from the environment."""


class DiscordSettings(BaseModel):
    token: SecretStr
    base_url: str = API_BASE_URL
    request_timeout: float = API_TIMEOUT
    log_level: str = "INFO"


def load_settings(environ: Optional[Mapping[str, str]] = None) -> DiscordSettings:
    if environ is None:
        load_dotenv()
        environ = os.environ

    token = environ.get("DISCORD_TOKEN", "").strip()
    if not token:
        raise ConfigurationError("DISCORD_TOKEN environment variable is not set")

    return DiscordSettings(
        token=token,
        base_url=environ.get("DISCORD_API_BASE_URL", API_BASE_URL),
        log_level=environ.get("LOG_LEVEL", "INFO").upper(),
    )


def configure_logging(level: str = "INFO") -> None:
    logger.remove()
    logger.add(sys.stderr, level=level)
