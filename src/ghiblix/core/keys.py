"""API key shape checks."""

import logging

from .config import config
from .errors import InvalidApiKeyError

logger = logging.getLogger(__name__)


def is_valid_api_key(key: str | None, prefix: str | None = None, length: int | None = None) -> bool:
    """Check whether ``key`` has the expected prefix and exact length.

    Args:
        key: Candidate key (None is treated as missing)
        prefix: Required prefix (default: ``config.api_key_prefix``)
        length: Required total length (default: ``config.api_key_length``)

    Returns:
        True only if the key starts with the prefix and has the exact length
    """
    if not key:
        return False
    prefix = config.api_key_prefix if prefix is None else prefix
    length = config.api_key_length if length is None else length
    return key.startswith(prefix) and len(key) == length


def require_api_key(key: str | None) -> str:
    """Return ``key`` unchanged if it is usable, otherwise raise.

    Raises:
        InvalidApiKeyError: If the key is missing or malformed
    """
    if not key:
        raise InvalidApiKeyError("X Key is missing")
    if not is_valid_api_key(key):
        logger.warning("Rejected malformed API key before sending request")
        raise InvalidApiKeyError("X Key format is invalid")
    return key
