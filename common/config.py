"""
Runtime Configuration

Settings are read once at startup and passed explicitly to the clients
that need them.
"""

import os
from typing import Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field
import structlog


logger = structlog.get_logger()


DEFAULT_BITQUERY_ENDPOINT = "https://streaming.bitquery.io/eap"
DEFAULT_REGISTRY_URL = "https://api.onchainbrain.xyz"


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""


class Settings(BaseModel):
    """
    Process-wide settings for the OnChain agent CLI.

    Environment variables:
    - BITQUERY_API_KEY (required)
    - BITQUERY_ENDPOINT
    - ONCHAIN_REGISTRY_URL
    - ONCHAIN_HTTP_TIMEOUT - seconds, 0 disables the timeout
    - LOG_LEVEL
    """
    bitquery_api_key: str = Field(..., min_length=1)
    bitquery_endpoint: str = DEFAULT_BITQUERY_ENDPOINT
    registry_url: str = DEFAULT_REGISTRY_URL
    http_timeout: Optional[float] = 60.0
    log_level: str = "WARNING"

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        load_env_file: bool = True,
    ) -> "Settings":
        """
        Build settings from the environment, failing fast on a missing API key.

        Args:
            environ: Mapping to read instead of ``os.environ``
            load_env_file: Whether to load a ``.env`` file first

        Raises:
            ConfigurationError: If BITQUERY_API_KEY is absent or a value is malformed
        """
        if load_env_file:
            load_dotenv()
        env = os.environ if environ is None else environ

        api_key = env.get("BITQUERY_API_KEY", "").strip()
        if not api_key:
            raise ConfigurationError("Missing BITQUERY_API_KEY in environment")

        raw_timeout = env.get("ONCHAIN_HTTP_TIMEOUT", "60")
        try:
            timeout = float(raw_timeout)
        except ValueError:
            raise ConfigurationError(f"Invalid ONCHAIN_HTTP_TIMEOUT: {raw_timeout!r}")

        settings = cls(
            bitquery_api_key=api_key,
            bitquery_endpoint=env.get("BITQUERY_ENDPOINT", DEFAULT_BITQUERY_ENDPOINT),
            registry_url=env.get("ONCHAIN_REGISTRY_URL", DEFAULT_REGISTRY_URL),
            http_timeout=timeout if timeout > 0 else None,
            log_level=env.get("LOG_LEVEL", "WARNING").upper(),
        )
        logger.debug(
            "Loaded settings",
            endpoint=settings.bitquery_endpoint,
            registry=settings.registry_url,
            timeout=settings.http_timeout,
        )
        return settings
