"""GhibliX - Studio Ghibli style image generation front-end."""

__version__ = "0.1.0"

from ghiblix.core.config import GhiblixConfig, config
from ghiblix.core.client import StyleTransferClient

__all__ = [
    "GhiblixConfig",
    "StyleTransferClient",
    "config",
]
