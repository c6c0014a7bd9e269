"""Configuration management for the Lookalike Portrait backend.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the LOOKALIKE_ prefix,
allowing the provider, credentials and server settings to change without code
changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (LOOKALIKE_* prefix)
2. .env file in the project root
3. Default values defined in LookalikeConfig

Example .env file:
    LOOKALIKE_PROVIDER=openai
    LOOKALIKE_OPENAI_API_KEY=sk-...
    LOOKALIKE_SERVER_PORT=3000

Global Configuration Instance
------------------------------
A global `config` instance is created automatically at module import time and
is what ``lookalike.api.main`` uses when no explicit settings object is passed
to ``create_app()``.

Usage Example
-------------
    from lookalike.core.config import config

    print(config.provider)
    print(config.server_port)

    # Configuration is immutable after initialization
    # To change values, set environment variables and restart

Provider Credentials
--------------------
- Pollinations accepts anonymous calls, so an empty ``pollinations_api_key`` is
  valid (requests may be rate limited or rejected upstream).
- The OpenAI Responses provider refuses to call out without
  ``openai_api_key``; every request fails with a configuration error instead.

See Also
--------
- .env.example: Template with all available configuration options
- LookalikeConfig: Full configuration class documentation
"""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Request bodies carry a base64 photo; 12 MiB covers a phone camera JPEG.
DEFAULT_MAX_BODY_BYTES = 12 * 1024 * 1024


class LookalikeConfig(BaseSettings):
    """Main configuration for the Lookalike Portrait backend.

    Values are loaded from environment variables with the LOOKALIKE_ prefix,
    with fallback to the defaults defined here. Instances are frozen: the
    application builds one at startup and shares it read-only across requests.

    Attributes
    ----------
    Provider Selection:
        provider : Literal["pollinations", "openai"]
            Which generation provider handles ``POST /api/lookalike``

    Pollinations (direct image endpoint):
        pollinations_base_url : str
            Base URL of the image API (``/image/{prompt}`` is appended)
        pollinations_model : str
            Model name passed in the ``model`` query parameter
        pollinations_api_key : str
            Optional API key; empty means anonymous calls

    OpenAI (responses endpoint with image generation tool):
        openai_responses_url : str
            Full URL of the responses endpoint
        openai_model : str
            Model that drives the image generation tool
        openai_api_key : str
            Bearer credential; required for this provider

    Server Settings:
        server_host : str
            Bind address (0.0.0.0 for all interfaces)
        server_port : int
            Listening port (1024-65535)
        static_dir : Path
            Root directory for static front-end files
        max_body_bytes : int
            Upper bound on the request body size in bytes
        request_timeout : float
            Timeout in seconds for the outbound provider call

    Examples
    --------
    Create a custom configuration:

        >>> custom_config = LookalikeConfig(
        ...     provider="openai",
        ...     openai_api_key="sk-test",
        ...     server_port=8080,
        ... )

    Use the global configuration instance:

        >>> from lookalike.core.config import config
        >>> print(config.provider)
        'pollinations'
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="LOOKALIKE_",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Provider selection
    provider: Literal["pollinations", "openai"] = Field(
        default="pollinations",
        description="Generation provider (pollinations or openai)",
    )

    # Pollinations settings
    pollinations_base_url: str = Field(
        default="https://gen.pollinations.ai",
        description="Pollinations API base URL",
    )
    pollinations_model: str = Field(
        default="flux",
        description="Pollinations image model name",
    )
    pollinations_api_key: str = Field(
        default="",
        description="Pollinations API key (optional, anonymous calls allowed)",
    )

    # OpenAI settings
    openai_responses_url: str = Field(
        default="https://api.openai.com/v1/responses",
        description="OpenAI Responses API endpoint",
    )
    openai_model: str = Field(
        default="gpt-4.1",
        description="OpenAI model driving the image_generation tool",
    )
    openai_api_key: str = Field(
        default="",
        description="OpenAI API key (required for the openai provider)",
    )

    # Server settings
    server_host: str = Field(
        default="0.0.0.0",
        description="Server bind address (0.0.0.0 for local network)",
    )
    server_port: int = Field(
        default=3000,
        description="Server port",
        ge=1024,
        le=65535,
    )
    static_dir: Path = Field(
        default_factory=Path.cwd,
        description="Directory served for non-API GET requests",
    )
    max_body_bytes: int = Field(
        default=DEFAULT_MAX_BODY_BYTES,
        description="Maximum accepted request body size in bytes",
        ge=1,
    )
    request_timeout: float = Field(
        default=120.0,
        description="Timeout in seconds for the outbound provider call",
        gt=0,
    )


# Global configuration instance
# Loads values from environment variables (LOOKALIKE_* prefix) and .env file.
config = LookalikeConfig()
