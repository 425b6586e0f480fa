"""State transitions for the GhibliX page.

Each function takes a :class:`PageState` and returns a new one; none of
them perform I/O. Handlers in :mod:`ghiblix.ui.handlers` call these and
feed the result to Gradio.

Submission lifecycle::

    idle --begin_submission--> loading --complete_success--> result
                                       \\--complete_failure--> error
    any  --reset--> idle

Every accepted submission gets a fresh request id. Only the completion that
carries the currently active id is applied; completions of requests that
were abandoned (by ``reset``) are discarded.
"""

import logging
from dataclasses import replace

from ghiblix.core.config import SIZE_OPTIONS, config
from ghiblix.core.keys import is_valid_api_key

from .models import MODES, TEXT2IMG, PageState, SubmissionTicket
from .validation import ValidationError, validate_submission

logger = logging.getLogger(__name__)


def switch_mode(state: PageState, mode: str) -> PageState:
    """Switch between text-to-image and image-to-image.

    Switching to text mode drops the uploaded image and resets the size
    selector to the default resolution.
    """
    if mode not in MODES.values():
        raise ValueError(f"Unknown mode: {mode}")

    if mode == TEXT2IMG:
        return replace(state, mode=mode, image_path=None, size=config.default_size)
    return replace(state, mode=mode)


def set_prompt(state: PageState, prompt: str | None) -> PageState:
    return replace(state, prompt=prompt or "")


def set_size(state: PageState, size: str) -> PageState:
    """Select a resolution.

    Raises:
        ValueError: If ``size`` is not one of the supported resolutions
    """
    if size not in SIZE_OPTIONS.values():
        raise ValueError(f"Unknown size: {size}")
    return replace(state, size=size)


def select_image(state: PageState, image_path: str | None) -> PageState:
    """Record the uploaded image (None clears it).

    Selecting an image clears any error; clearing the image keeps it, so a
    rejected upload's message stays visible after the widget is emptied.
    """
    if not image_path:
        return replace(state, image_path=None)
    return replace(state, image_path=image_path, error="")


def set_api_key(state: PageState, key: str | None) -> PageState:
    """Store the typed key; the check result is reset until the next blur."""
    key = key or ""
    if key == state.api_key:
        return state
    return replace(state, api_key=key, key_valid=None)


def validate_key(state: PageState) -> PageState:
    """Check the current key's shape.

    An empty key is "unchecked" rather than invalid.
    """
    if not state.api_key.strip():
        return replace(state, key_valid=None)
    return replace(state, key_valid=is_valid_api_key(state.api_key))


def clear_key(state: PageState) -> PageState:
    return replace(state, api_key="", key_valid=None)


def show_error(state: PageState, message: str) -> PageState:
    return replace(state, error=message)


def begin_submission(state: PageState) -> tuple[PageState, SubmissionTicket | None]:
    """Start a generation request.

    The previous result and error are cleared. If a precondition fails the
    error is set and no ticket is issued, so no request may be sent.

    Returns:
        Tuple of (new_state, ticket). ``ticket`` is None when nothing should
        be sent: a request is already in flight or a precondition failed.
    """
    if state.loading:
        logger.debug("Submission ignored: request already in flight")
        return state, None

    state = replace(state, result=None, error="")

    try:
        validate_submission(state)
    except ValidationError as e:
        logger.warning(f"Submission rejected: {e}")
        return replace(state, error=str(e)), None

    request_id = state.request_seq + 1
    ticket = SubmissionTicket(
        request_id=request_id,
        mode=state.mode,
        prompt=state.prompt,
        size=state.size,
        api_key=state.api_key,
        image_path=state.image_path,
    )
    new_state = replace(
        state,
        loading=True,
        request_seq=request_id,
        active_request=request_id,
    )
    logger.info(f"Submission {request_id} started ({state.mode})")
    return new_state, ticket


def _is_current(state: PageState, request_id: int) -> bool:
    if state.active_request != request_id:
        logger.info(f"Discarding completion of stale request {request_id}")
        return False
    return True


def complete_success(state: PageState, request_id: int, image_ref: str) -> PageState:
    """Display the result of request ``request_id`` if it is still current."""
    if not _is_current(state, request_id):
        return state
    return replace(state, result=image_ref, error="", loading=False, active_request=None)


def complete_failure(state: PageState, request_id: int, message: str) -> PageState:
    """Display the failure of request ``request_id`` if it is still current."""
    if not _is_current(state, request_id):
        return state
    return replace(state, result=None, error=message, loading=False, active_request=None)


def reset(state: PageState) -> PageState:
    """Clear prompt, result, error and image together.

    An in-flight request is abandoned: its completion will be discarded.
    Mode, size and key are kept.
    """
    return replace(
        state,
        prompt="",
        result=None,
        error="",
        image_path=None,
        loading=False,
        active_request=None,
    )
