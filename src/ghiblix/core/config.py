"""Configuration management for GhibliX.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the GHIBLIX_ prefix,
allowing easy customization without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (GHIBLIX_* prefix)
2. .env file in the project root
3. Default values defined in GhiblixConfig

Example .env file:
    GHIBLIX_API_HOST=https://api.xlap.top/v1
    GHIBLIX_EDIT_MODEL=flux-kontext-max
    GHIBLIX_SERVER_PORT=8080

Global Configuration Instance
------------------------------
A global `config` instance is created automatically at module import time.
This ensures a single source of truth for all configuration values across
the application.

Usage Example
-------------
    from ghiblix.core.config import config

    print(config.api_host)
    print(config.size_options)

Nothing here is read per request from the environment; to change values,
set environment variables and restart.
"""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_DIR = Path(__file__).resolve().parent.parent

# URL prefix the host serves static_dir under; Gradio owns /static
STATIC_MOUNT_PATH = "/ghiblix-static"

# Resolutions accepted by the text-to-image endpoint, keyed by display label
SIZE_OPTIONS: dict[str, str] = {
    "Square (1:1)": "1024x1024",
    "Landscape (16:9)": "1792x1024",
    "Portrait (9:16)": "1024x1792",
}


class GhiblixConfig(BaseSettings):
    """Main configuration for GhibliX.

    Attributes
    ----------
    Image API:
        api_host : str
            Base URL of the image-generation service (no trailing slash)
        text_model : str
            Model identifier sent with text-to-image requests
        edit_model : str
            Model identifier sent with image-to-image requests
        default_size : str
            Resolution preselected in text-to-image mode
        request_timeout : float | None
            Seconds before an outbound request is abandoned (None = no timeout)

    API key:
        api_key_prefix : str
            Prefix every valid key starts with
        api_key_length : int
            Exact total length of a valid key
        key_storage_name : str
            Browser localStorage key under which the API key is cached
        storage_secret : str | None
            Secret used to encrypt the cached key (None = random per process,
            which invalidates cached keys on restart)

    Assets:
        asset_host : str
            Prefix that showcase image references are resolved against
        data_dir : Path
            Directory holding the bundled ``case.json``
        static_dir : Path
            Directory served under ``/ghiblix-static``

    Server:
        server_host : str
            Bind address for uvicorn
        server_port : int
            Port for uvicorn (1024-65535)

    Examples
    --------
        >>> custom = GhiblixConfig(api_host="http://localhost:9000/v1")
        >>> custom.api_key_length
        51
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="GHIBLIX_",
        case_sensitive=False,
    )

    # Image API
    api_host: str = Field(
        default="https://api.xlap.top/v1",
        description="Base URL of the image-generation API",
    )
    text_model: str = Field(
        default="sora_image",
        description="Model identifier for text-to-image requests",
    )
    edit_model: str = Field(
        default="flux-kontext-pro",
        description="Model identifier for image edits (gpt-image-1, flux-kontext-pro, flux-kontext-max)",
    )
    default_size: str = Field(
        default="1024x1024",
        description="Default text-to-image resolution",
    )
    request_timeout: float | None = Field(
        default=None,
        description="Outbound request timeout in seconds (None disables the timeout)",
        gt=0,
    )

    # API key shape and caching
    api_key_prefix: str = Field(default="sk-", min_length=1)
    api_key_length: int = Field(default=51, ge=1)
    key_storage_name: str = Field(
        default="x-api-key",
        description="localStorage key for the cached API key",
    )
    storage_secret: str | None = Field(
        default=None,
        description="Encryption secret for the cached API key",
    )

    # Assets
    asset_host: str = Field(
        default="https://xlaptop.oss-cn-hongkong.aliyuncs.com/ghiblix/",
        description="Prefix for showcase image references",
    )
    data_dir: Path = Field(default=PACKAGE_DIR / "data")
    static_dir: Path = Field(default=PACKAGE_DIR / "static")

    # Server
    server_host: str = Field(
        default="0.0.0.0",
        description="Server bind address (0.0.0.0 for local network)",
    )
    server_port: int = Field(default=7860, ge=1024, le=65535)

    @field_validator("api_host")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("default_size")
    @classmethod
    def _known_size(cls, value: str) -> str:
        if value not in SIZE_OPTIONS.values():
            raise ValueError(f"default_size must be one of {sorted(SIZE_OPTIONS.values())}")
        return value

    @property
    def size_options(self) -> dict[str, str]:
        """Display label to resolution mapping for the size selector."""
        return dict(SIZE_OPTIONS)


# Global configuration instance
config = GhiblixConfig()
