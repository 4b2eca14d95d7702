import os
import sys
from typing import Mapping, Optional

from dotenv import load_dotenv
from loguru import logger
from pydantic import BaseModel, SecretStr

API_BASE_URL = "https://api.sunoapi.org"
API_TIMEOUT = 30.0

# The service requires a callback URL on every submission; nothing listens here.
DUMMY_CALLBACK_URL = "https://api-placeholder.local/webhook"

VALID_MODELS = ("V3_5", "V4", "V4_5", "V4_5PLUS", "V5")
OVERLAY_MODELS = ("V4_5PLUS", "V5")
VALID_VOCAL_GENDERS = ("m", "f")
SEPARATION_TYPES = ("separate_vocal", "split_stem")


class CharacterLimits:
    TITLE = 80
    PROMPT_SIMPLE_MODE = 500
    PROMPT_CUSTOM_MODE = 3000
    STYLE_V3_5 = 200
    STYLE_V4_PLUS = 1000
    NEGATIVE_TAGS = 500
    TAGS = 1000
    AUTHOR = 50
    DOMAIN_NAME = 50
    LYRICS_WORDS = 200


class ConfigurationError(Exception):
    """Raised when required settings are missing from the environment."""


class PollingConfig(BaseModel):
    initial_delay: float = 2.0
    max_delay: float = 5.0
    backoff_factor: float = 1.2
    max_consecutive_errors: int = 3


class OperationTimeouts(BaseModel):
    """Poll budget per operation, in seconds."""

    music_generation: float = 60.0
    music_extension: float = 60.0
    vocal_separation: float = 30.0
    wav_conversion: float = 30.0
    lyrics_generation: float = 20.0
    video_creation: float = 120.0
    add_vocals: float = 30.0
    add_instrumental: float = 30.0


class SunoSettings(BaseModel):
    api_key: SecretStr
    base_url: str = API_BASE_URL
    request_timeout: float = API_TIMEOUT
    polling: PollingConfig = PollingConfig()
    timeouts: OperationTimeouts = OperationTimeouts()
    log_level: str = "INFO"


def load_settings(environ: Optional[Mapping[str, str]] = None) -> SunoSettings:
    """Build settings from the process environment (and a local .env file).

    Raises ConfigurationError when SUNO_API_KEY is missing or blank.
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    api_key = environ.get("SUNO_API_KEY", "").strip()
    if not api_key:
        raise ConfigurationError("SUNO_API_KEY environment variable not set")

    return SunoSettings(
        api_key=api_key,
        base_url=environ.get("SUNO_API_BASE_URL", API_BASE_URL),
        request_timeout=float(environ.get("SUNO_REQUEST_TIMEOUT", API_TIMEOUT)),
        log_level=environ.get("LOG_LEVEL", "INFO").upper(),
    )


def configure_logging(level: str = "INFO") -> None:
    # stdout carries the MCP JSON-RPC stream
    logger.remove()
    logger.add(sys.stderr, level=level)
