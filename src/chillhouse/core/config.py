"""Configuration management for the Chillhouse relay.

This module provides centralized configuration management using Pydantic Settings.
Service settings are loaded from environment variables with the CHILLHOUSE_
prefix.  A few settings also accept the bare variable names the service was
first deployed with (``OPENAI_API_KEY``, ``SYSTEM_PROMPT`` and ``PORT``), so
an existing ``.env`` keeps working unchanged.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (CHILLHOUSE_* prefix, or the bare aliases above)
2. .env file in the working directory
3. Default values defined in ChillhouseConfig

Example .env file:
    OPENAI_API_KEY=sk-...
    SYSTEM_PROMPT=A chill cartoon house character.
    CHILLHOUSE_UPSTREAM_TIMEOUT=60
    PORT=3000

Global Configuration Instance
------------------------------
A global `config` instance is created automatically at module import time.
The CLI entry point serves the application with it.  Tests and embedding
code build their own instance and hand it to
:func:`chillhouse.api.main.create_app`.

Usage Example
-------------
    from chillhouse.core.config import config

    print(config.image_model)
    print(config.uploads_dir)

The credential is optional at load time.  A missing key does not stop the
server from starting; it is reported per request as a misconfiguration so the
caller gets a clear error message.
"""

from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ChillhouseConfig(BaseSettings):
    """Main configuration for the Chillhouse relay.

    Attributes
    ----------
    Upstream Settings:
        openai_api_key : str | None
            Bearer credential for the image-edit API
        upstream_base_url : str
            Base URL of the OpenAI-compatible API
        image_model : str
            Model identifier sent with every edit request
        image_size : str
            Output size sent with every edit request
        upstream_timeout : float
            Seconds to wait for the upstream call before failing

    Prompt Settings:
        system_prompt : str | None
            Override for the base prompt sentence

    Paths:
        uploads_dir : Path
            Scratch directory for staged uploads

    Server Settings:
        server_host : str
            Server bind address
        server_port : int
            Server port

    Examples
    --------
        >>> custom_config = ChillhouseConfig(
        ...     openai_api_key="sk-test",
        ...     upstream_timeout=30,
        ... )
        >>> custom_config.has_credentials
        True
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CHILLHOUSE_",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    # Upstream settings
    openai_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("chillhouse_openai_api_key", "openai_api_key"),
        description="Bearer credential for the OpenAI image-edit endpoint",
    )
    upstream_base_url: str = Field(
        default="https://api.openai.com/v1",
        description="Base URL of the OpenAI-compatible API",
    )
    image_model: str = Field(
        default="gpt-image-1",
        description="Model identifier sent with every edit request",
    )
    image_size: str = Field(
        default="1024x1024",
        description="Output image size sent with every edit request",
    )
    upstream_timeout: float = Field(
        default=120.0,
        gt=0,
        description="Timeout in seconds for the outbound image-edit call",
    )

    # Prompt settings
    system_prompt: str | None = Field(
        default=None,
        validation_alias=AliasChoices("chillhouse_system_prompt", "system_prompt"),
        description="Override for the base prompt sentence",
    )

    # Paths
    uploads_dir: Path = Field(
        default=Path("uploads_tmp"),
        description="Scratch directory for staged uploads",
    )

    # Server settings
    server_host: str = Field(
        default="0.0.0.0",
        description="Server bind address",
    )
    server_port: int = Field(
        default=3000,
        validation_alias=AliasChoices("chillhouse_server_port", "port"),
        description="Server port",
        ge=1,
        le=65535,
    )

    def __init__(self, **kwargs):
        """Initialize configuration and create the uploads directory.

        Args:
            **kwargs: Configuration overrides (typically from environment variables)
        """
        super().__init__(**kwargs)

        self.uploads_dir.mkdir(parents=True, exist_ok=True)

    @property
    def has_credentials(self) -> bool:
        """Whether an upstream credential is configured (blank counts as unset)."""
        return bool(self.openai_api_key and self.openai_api_key.strip())


# Global configuration instance
config = ChillhouseConfig()
