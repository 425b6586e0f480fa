"""HTTP client for the third-party image-generation service.

Two request shapes are supported:

- text-to-image: ``POST {api_host}/images/generations`` with a JSON body
- image-to-image: ``POST {api_host}/images/edits`` with a multipart body

Both are authenticated with ``Authorization: Bearer <key>`` and share the
response handling in :mod:`ghiblix.core.extractors`. The key is checked
locally before anything is sent; there are no retries.

Usage Example
-------------
    client = StyleTransferClient()
    ref = await client.generate_from_text("a cat on a roof", "1024x1024", key)
"""

from __future__ import annotations

import asyncio
import io
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import httpx
from PIL import Image, UnidentifiedImageError

from .config import SIZE_OPTIONS, GhiblixConfig, config
from .errors import GenerationError, ResultParseError
from .extractors import DEFAULT_EXTRACTORS, ImageRef, ResultExtractor, extract_image_ref
from .keys import require_api_key
from .prompts import build_edit_prompt, build_text_prompt

logger = logging.getLogger(__name__)

FALLBACK_ERROR_MESSAGE = "Image generation failed"
IMAGE_TOO_LARGE_MESSAGE = "The uploaded image is too large"


def service_error_message(response: httpx.Response) -> str:
    """Pull a user-facing message out of an error response.

    The service reports errors either as ``{"error": {"message": ...}}`` or
    as ``{"error": "..."}``. Anything else gets a generic message naming the
    status code.
    """
    try:
        payload = response.json()
    except ValueError:
        return f"{FALLBACK_ERROR_MESSAGE} ({response.status_code})"

    error = payload.get("error") if isinstance(payload, dict) else None
    if isinstance(error, dict):
        message = error.get("message")
        if isinstance(message, str) and message.strip():
            return message
    elif isinstance(error, str) and error.strip():
        return error

    return f"{FALLBACK_ERROR_MESSAGE} ({response.status_code})"


def read_image_upload(image: str | Path | bytes) -> tuple[str, bytes, str]:
    """Load an uploaded image for a multipart request.

    Args:
        image: Path to the uploaded file, or its raw bytes

    Returns:
        Tuple of (filename, content, mime_type)

    Raises:
        GenerationError: If the image exceeds Pillow's decompression-bomb limit
    """
    if isinstance(image, bytes):
        filename, content = "image", image
    else:
        path = Path(image)
        filename, content = path.name, path.read_bytes()

    try:
        with Image.open(io.BytesIO(content)) as img:
            mime_type = Image.MIME.get(img.format or "", "application/octet-stream")
    except Image.DecompressionBombError as e:
        logger.warning(f"Refusing to upload oversized image {filename}: {e}")
        raise GenerationError(IMAGE_TOO_LARGE_MESSAGE) from e
    except UnidentifiedImageError:
        mime_type = "application/octet-stream"

    return filename, content, mime_type


class StyleTransferClient:
    """Async client for the text-to-image and image-edit endpoints.

    Args:
        settings: Configuration to read hosts, models and timeout from
        transport: Optional httpx transport (tests pass ``httpx.MockTransport``)
        extractors: Response extractors, tried in order
    """

    def __init__(
        self,
        settings: GhiblixConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        extractors: Sequence[ResultExtractor] = DEFAULT_EXTRACTORS,
    ):
        self.settings = settings or config
        self.transport = transport
        self.extractors = tuple(extractors)

    async def generate_from_text(self, prompt: str, size: str, api_key: str) -> ImageRef:
        """Generate an image from a text prompt.

        Args:
            prompt: User prompt (the style description is added here)
            size: One of the supported resolutions
            api_key: Bearer token for the service

        Returns:
            Image URL or inline data reference

        Raises:
            InvalidApiKeyError: If the key is missing or malformed
            ValueError: If ``size`` is not a supported resolution
            GenerationError: If the service fails or returns no image
        """
        api_key = require_api_key(api_key)
        if size not in SIZE_OPTIONS.values():
            raise ValueError(f"Unsupported size: {size}")

        body = {
            "prompt": build_text_prompt(prompt),
            "sync_mode": False,
            "model": self.settings.text_model,
            "n": 1,
            "size": size,
        }
        return await self._post("/images/generations", api_key, json=body)

    async def generate_from_image(
        self, prompt: str | None, image: str | Path | bytes, api_key: str
    ) -> ImageRef:
        """Restyle an uploaded image.

        Args:
            prompt: Edit instruction; blank uses the default style conversion
            image: Path to the uploaded image, or its raw bytes
            api_key: Bearer token for the service

        Returns:
            Image URL or inline data reference

        Raises:
            InvalidApiKeyError: If the key is missing or malformed
            GenerationError: If the image is too large, or the service fails
                or returns no image
        """
        api_key = require_api_key(api_key)
        # File read and header decode stay off the event loop
        filename, content, mime_type = await asyncio.to_thread(read_image_upload, image)

        data = {
            "prompt": build_edit_prompt(prompt),
            "model": self.settings.edit_model,
            "sync_mode": "false",
        }
        files = {"image": (filename, content, mime_type)}
        return await self._post("/images/edits", api_key, data=data, files=files)

    async def _post(self, path: str, api_key: str, **request_kwargs: Any) -> ImageRef:
        url = f"{self.settings.api_host}{path}"
        model = (request_kwargs.get("json") or request_kwargs.get("data") or {}).get("model")
        logger.info(f"POST {url} (model={model})")

        try:
            async with httpx.AsyncClient(
                timeout=self.settings.request_timeout, transport=self.transport
            ) as client:
                response = await client.post(
                    url,
                    headers={"Authorization": f"Bearer {api_key}"},
                    **request_kwargs,
                )
        except httpx.HTTPError as e:
            logger.error(f"Request to {url} failed: {e}")
            raise GenerationError(f"{FALLBACK_ERROR_MESSAGE}: could not reach the service") from e

        if response.is_error:
            message = service_error_message(response)
            logger.warning(f"Service returned {response.status_code}: {message}")
            raise GenerationError(message, status_code=response.status_code)

        try:
            payload = response.json()
        except ValueError as e:
            raise ResultParseError(
                "The service returned a response that is not JSON",
                status_code=response.status_code,
            ) from e

        return extract_image_ref(payload, self.extractors)
