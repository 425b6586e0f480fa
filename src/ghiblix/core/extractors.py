"""Result extraction from image-service responses.

The service has answered in three shapes over time:

1. ``{"data": [{"url": "https://..."}]}``
2. ``{"data": [{"b64_json": "..."}]}``
3. a chat-completion style reply whose ``choices[0].message.content`` embeds
   a ``data:...;base64,<payload>`` reference

Each shape is handled by one extractor. :func:`extract_image_ref` tries them
in order and returns the first match; new shapes are supported by adding an
extractor to the sequence.
"""

import logging
import re
from collections.abc import Callable, Sequence
from typing import Any

from .errors import ResultParseError

logger = logging.getLogger(__name__)

# A displayable image reference: an http(s) URL or a data: URI
ImageRef = str
ResultExtractor = Callable[[Any], ImageRef | None]

INLINE_IMAGE_PREFIX = "data:image/jpeg;base64,"
LEGACY_BASE64_PATTERN = re.compile(r'base64,([^"]+)')


def _first_data_item(payload: Any) -> dict | None:
    if not isinstance(payload, dict):
        return None
    data = payload.get("data")
    if not isinstance(data, list) or not data:
        return None
    item = data[0]
    return item if isinstance(item, dict) else None


def extract_url(payload: Any) -> ImageRef | None:
    """Return ``data[0].url`` if present."""
    item = _first_data_item(payload)
    if item is None:
        return None
    url = item.get("url")
    return url if isinstance(url, str) and url else None


def extract_inline_data(payload: Any) -> ImageRef | None:
    """Return ``data[0].b64_json`` as an inline image reference."""
    item = _first_data_item(payload)
    if item is None:
        return None
    b64 = item.get("b64_json")
    if not isinstance(b64, str) or not b64:
        return None
    return INLINE_IMAGE_PREFIX + b64


def extract_legacy_reply(payload: Any) -> ImageRef | None:
    """Return the base64 image embedded in a chat-style reply."""
    if not isinstance(payload, dict):
        return None
    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return None
    message = choices[0].get("message") or {}
    content = message.get("content") if isinstance(message, dict) else None
    if not isinstance(content, str) or not content:
        return None

    match = LEGACY_BASE64_PATTERN.search(content)
    if not match:
        logger.debug("Legacy reply present but carries no base64 marker")
        return None
    return INLINE_IMAGE_PREFIX + match.group(1)


DEFAULT_EXTRACTORS: tuple[ResultExtractor, ...] = (
    extract_url,
    extract_inline_data,
    extract_legacy_reply,
)


def extract_image_ref(
    payload: Any, extractors: Sequence[ResultExtractor] = DEFAULT_EXTRACTORS
) -> ImageRef:
    """Run ``extractors`` in order and return the first image reference found.

    Args:
        payload: Decoded JSON response body
        extractors: Strategies to try, in priority order

    Returns:
        Image URL or inline data reference

    Raises:
        ResultParseError: If no extractor recognises the payload
    """
    for extractor in extractors:
        ref = extractor(payload)
        if ref is not None:
            logger.debug(f"Image reference found by {extractor.__name__}")
            return ref

    raise ResultParseError("Could not parse an image from the service response")
