"""Core functionality for GhibliX.

This module provides everything that does not depend on the web UI:

- **GhiblixConfig / config**: Configuration management using Pydantic Settings
- **StyleTransferClient**: Async client for the image-generation service
- **extract_image_ref**: Ordered response-shape extraction
- **is_valid_api_key**: API key shape check
- **load_showcase**: Bundled before/after showcase data

Usage Example
-------------
    from ghiblix.core import StyleTransferClient

    client = StyleTransferClient()
    ref = await client.generate_from_image("", "photo.jpg", api_key)
"""

from ghiblix.core.client import StyleTransferClient
from ghiblix.core.config import GhiblixConfig, config
from ghiblix.core.errors import (
    GenerationError,
    GhiblixError,
    InvalidApiKeyError,
    ResultParseError,
)
from ghiblix.core.extractors import DEFAULT_EXTRACTORS, extract_image_ref
from ghiblix.core.keys import is_valid_api_key
from ghiblix.core.showcase import ShowcaseEntry, load_showcase

__all__ = [
    "DEFAULT_EXTRACTORS",
    "GenerationError",
    "GhiblixConfig",
    "GhiblixError",
    "InvalidApiKeyError",
    "ResultParseError",
    "ShowcaseEntry",
    "StyleTransferClient",
    "config",
    "extract_image_ref",
    "is_valid_api_key",
    "load_showcase",
]
