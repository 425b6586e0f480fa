"""Data models for GhibliX UI state."""

import logging
from dataclasses import dataclass, field

from ghiblix.core.config import SIZE_OPTIONS, config

logger = logging.getLogger(__name__)

TEXT2IMG = "text2img"
IMG2IMG = "img2img"

MODES = {
    "Image to image": IMG2IMG,
    "Text to image": TEXT2IMG,
}

DEFAULT_MODE = IMG2IMG


@dataclass(frozen=True)
class PageState:
    """Immutable snapshot of the page.

    Every user action produces a new PageState through a transition function
    in :mod:`ghiblix.ui.state`; nothing mutates a PageState in place.

    Attributes
    ----------
    mode : str
        ``text2img`` or ``img2img``
    prompt : str
        Prompt or edit instruction typed by the user
    size : str
        Selected resolution (text-to-image only)
    api_key : str
        Key as typed by the user
    key_valid : bool | None
        Result of the last key check (None = not checked / empty)
    image_path : str | None
        Uploaded image (image-to-image only)
    result : str | None
        Displayed image reference
    error : str
        Displayed error message ("" when none)
    loading : bool
        True while a request is in flight
    request_seq : int
        Number of requests issued so far; the next one gets ``request_seq + 1``
    active_request : int | None
        Id of the request whose completion will be displayed
    """

    mode: str = DEFAULT_MODE
    prompt: str = ""
    size: str = field(default_factory=lambda: config.default_size)
    api_key: str = ""
    key_valid: bool | None = None
    image_path: str | None = None
    result: str | None = None
    error: str = ""
    loading: bool = False
    request_seq: int = 0
    active_request: int | None = None

    def __post_init__(self):
        if self.mode not in MODES.values():
            raise ValueError(f"Unknown mode: {self.mode}")
        if self.size not in SIZE_OPTIONS.values():
            raise ValueError(f"Unknown size: {self.size}")


@dataclass
class SubmissionTicket:
    """Everything a handler needs to perform one request.

    Captured when the submission starts, so later edits to the form do not
    change a request that is already in flight.
    """

    request_id: int
    mode: str
    prompt: str
    size: str
    api_key: str
    image_path: str | None = None


@dataclass
class PageSession:
    """Per-session holder for the current PageState.

    Gradio keeps one PageSession per browser tab. Handlers replace
    ``state`` with the output of a transition; async handlers re-read it
    after awaiting so that they never overwrite newer state.
    """

    state: PageState = field(default_factory=PageState)

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"PageSession(mode={self.state.mode}, loading={self.state.loading}, "
            f"active_request={self.state.active_request})"
        )
