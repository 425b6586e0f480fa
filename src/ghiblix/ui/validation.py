"""Validation utilities for GhibliX UI inputs."""

import logging
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from ghiblix.core.config import config
from ghiblix.core.keys import is_valid_api_key

from .models import IMG2IMG, TEXT2IMG, PageState

logger = logging.getLogger(__name__)

MISSING_IMAGE_MESSAGE = "Please upload an image"
MISSING_PROMPT_MESSAGE = "Please describe the image you want to generate"
INVALID_KEY_MESSAGE = "X Key is missing or its format is invalid"
NOT_AN_IMAGE_MESSAGE = "Please upload an image file"
IMAGE_TOO_LARGE_MESSAGE = "The image is too large, please upload a smaller one"


class ValidationError(Exception):
    """User-friendly validation error.

    This exception is raised when user input fails validation.
    The message is intended to be displayed directly to the user.
    """

    pass


def validate_image_file(path: str | Path | None) -> Path:
    """Check that an uploaded file exists and is a readable image.

    Args:
        path: Path of the uploaded file

    Returns:
        The path as a Path object

    Raises:
        ValidationError: If no file was given, it is not an image, or its
            pixel count exceeds Pillow's decompression-bomb limit
    """
    if not path:
        raise ValidationError(MISSING_IMAGE_MESSAGE)

    file_path = Path(path)
    if not file_path.is_file():
        raise ValidationError(f"File not found: {file_path.name}")

    try:
        with Image.open(file_path) as img:
            img.verify()
    except Image.DecompressionBombError as e:
        logger.warning(f"Rejected oversized upload {file_path.name}: {e}")
        raise ValidationError(IMAGE_TOO_LARGE_MESSAGE) from e
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        logger.warning(f"Rejected non-image upload {file_path.name}: {e}")
        raise ValidationError(NOT_AN_IMAGE_MESSAGE) from e

    return file_path


def validate_submission(state: PageState) -> None:
    """Check the preconditions for sending a generation request.

    Text mode needs a prompt, image mode needs an uploaded image (the
    prompt is optional there), and both need a well-formed key.

    Args:
        state: Current page state

    Raises:
        ValidationError: If a precondition is not met
    """
    if state.mode == IMG2IMG and not state.image_path:
        raise ValidationError(MISSING_IMAGE_MESSAGE)

    if state.mode == TEXT2IMG and not state.prompt.strip():
        raise ValidationError(MISSING_PROMPT_MESSAGE)

    if not is_valid_api_key(state.api_key):
        raise ValidationError(INVALID_KEY_MESSAGE)


def key_status_message(key_valid: bool | None) -> str:
    """Describe the result of a key check for display next to the key box."""
    if key_valid is None:
        return ""
    if key_valid:
        return "✅ X Key format is valid"
    return (
        f"❌ X Key must start with `{config.api_key_prefix}` "
        f"and be {config.api_key_length} characters long"
    )
