"""Event handlers for the GhibliX Gradio UI.

Handlers translate widget values into state transitions
(:mod:`ghiblix.ui.state`), run the API client when a submission is
accepted, and turn the resulting PageState back into component updates.
"""

import logging
from collections.abc import AsyncIterator

import gradio as gr

from ghiblix.core.client import StyleTransferClient
from ghiblix.core.errors import GenerationError, InvalidApiKeyError

from .components import prompt_placeholder, render_error_markdown, render_result_html, submit_label
from .models import TEXT2IMG, PageSession, SubmissionTicket
from .state import (
    begin_submission,
    clear_key,
    complete_failure,
    complete_success,
    reset,
    select_image,
    set_api_key,
    set_prompt,
    set_size,
    show_error,
    switch_mode,
    validate_key,
)
from .validation import INVALID_KEY_MESSAGE, ValidationError, key_status_message, validate_image_file

logger = logging.getLogger(__name__)

UNEXPECTED_ERROR_MESSAGE = "An error occurred while generating the image. Check logs for details."


def _session(session: PageSession | None) -> PageSession:
    return session if session is not None else PageSession()


def _output_frame(session: PageSession) -> tuple[str, str, dict, PageSession]:
    """Render (result_html, error_markdown, submit_button_update, session)."""
    state = session.state
    button = gr.update(
        value="Generating..." if state.loading else submit_label(state.mode),
        interactive=not state.loading,
    )
    return render_result_html(state.result), render_error_markdown(state.error), button, session


async def _run_request(ticket: SubmissionTicket) -> str:
    client = StyleTransferClient()
    if ticket.mode == TEXT2IMG:
        return await client.generate_from_text(ticket.prompt, ticket.size, ticket.api_key)
    return await client.generate_from_image(ticket.prompt, ticket.image_path, ticket.api_key)


async def generate_image(
    prompt: str, size: str, api_key: str, session: PageSession | None
) -> AsyncIterator[tuple[str, str, dict, PageSession]]:
    """Submit the form and stream the loading frame, then the outcome.

    Args:
        prompt: Prompt or edit instruction
        size: Selected resolution (used in text mode)
        api_key: Key currently in the key box
        session: Per-tab page session

    Yields:
        Tuples of (result_html, error_markdown, submit_button_update, session)
    """
    session = _session(session)
    state = set_prompt(session.state, prompt)
    if state.mode == TEXT2IMG and size:
        state = set_size(state, size)
    state = set_api_key(state, api_key)

    session.state, ticket = begin_submission(state)
    yield _output_frame(session)

    if ticket is None:
        return

    try:
        image_ref = await _run_request(ticket)
        session.state = complete_success(session.state, ticket.request_id, image_ref)
        logger.info(f"Submission {ticket.request_id} complete")

    except InvalidApiKeyError as e:
        logger.warning(f"Key rejected by client: {e}")
        session.state = complete_failure(session.state, ticket.request_id, INVALID_KEY_MESSAGE)

    except GenerationError as e:
        logger.warning(f"Submission {ticket.request_id} failed: {e}")
        session.state = complete_failure(session.state, ticket.request_id, str(e))

    except Exception as e:
        logger.error(f"Error generating image: {e}", exc_info=True)
        session.state = complete_failure(
            session.state, ticket.request_id, UNEXPECTED_ERROR_MESSAGE
        )

    yield _output_frame(session)


def switch_mode_handler(mode: str, session: PageSession | None) -> tuple:
    """Handle the text/image mode selector.

    Returns:
        Tuple of (upload_group_update, size_update, image_update,
        submit_button_update, prompt_update, session)
    """
    session = _session(session)
    session.state = switch_mode(session.state, mode)
    state = session.state
    is_text = state.mode == TEXT2IMG
    logger.info(f"Switched to {state.mode}")

    image_update = gr.update(value=None) if is_text else gr.update()
    return (
        gr.update(visible=not is_text),
        gr.update(visible=is_text, value=state.size),
        image_update,
        gr.update(value=submit_label(state.mode)),
        gr.update(placeholder=prompt_placeholder(state.mode)),
        session,
    )


def upload_image(image_path: str | None, session: PageSession | None) -> tuple:
    """Validate and record an uploaded image.

    Returns:
        Tuple of (error_markdown, image_update, session)
    """
    session = _session(session)

    if not image_path:
        session.state = select_image(session.state, None)
        return render_error_markdown(session.state.error), gr.update(), session

    try:
        validate_image_file(image_path)
    except ValidationError as e:
        session.state = show_error(select_image(session.state, None), str(e))
        return render_error_markdown(session.state.error), gr.update(value=None), session

    session.state = select_image(session.state, image_path)
    return "", gr.update(), session


def check_api_key(key: str, stored_key: str, session: PageSession | None) -> tuple:
    """Check the key when its box loses focus; cache it if well-formed.

    Returns:
        Tuple of (status_markdown, stored_key, session)
    """
    session = _session(session)
    session.state = validate_key(set_api_key(session.state, key))
    if session.state.key_valid:
        stored_key = session.state.api_key
        logger.info("Valid X Key cached in browser storage")
    return key_status_message(session.state.key_valid), stored_key, session


def clear_api_key(session: PageSession | None) -> tuple:
    """Forget the key, both in the form and in browser storage.

    Returns:
        Tuple of (key_textbox_value, status_markdown, stored_key, session)
    """
    session = _session(session)
    session.state = clear_key(session.state)
    return "", "", "", session


def restore_api_key(stored_key: str | None, session: PageSession | None) -> tuple:
    """Load the cached key on page load and check it.

    Returns:
        Tuple of (key_textbox_value, status_markdown, session)
    """
    session = _session(session)
    if not stored_key:
        return gr.update(), "", session
    session.state = validate_key(set_api_key(session.state, stored_key))
    return stored_key, key_status_message(session.state.key_valid), session


def reset_form(session: PageSession | None) -> tuple:
    """Clear prompt, image, result and error together.

    Returns:
        Tuple of (prompt_value, image_update, result_html, error_markdown,
        submit_button_update, session)
    """
    session = _session(session)
    session.state = reset(session.state)
    result_html, error_md, button, session = _output_frame(session)
    return "", gr.update(value=None), result_html, error_md, button, session
