"""Gradio UI for GhibliX."""

import logging

import gradio as gr

from ghiblix.core.config import STATIC_MOUNT_PATH, GhiblixConfig, config
from ghiblix.core.showcase import load_showcase

from .components import CUSTOM_CSS, KeyInputUI, ShowcaseUI, prompt_placeholder, submit_label
from .handlers import (
    check_api_key,
    clear_api_key,
    generate_image,
    reset_form,
    restore_api_key,
    switch_mode_handler,
    upload_image,
)
from .models import DEFAULT_MODE, IMG2IMG, MODES, PageSession

logger = logging.getLogger(__name__)

SLIDER_SCRIPT_HEAD = f'<script src="{STATIC_MOUNT_PATH}/js/slider.js" defer></script>'


def create_ui(settings: GhiblixConfig | None = None) -> gr.Blocks:
    """Create the Gradio UI.

    Args:
        settings: Configuration to use (default: global config)

    Returns:
        Gradio Blocks app, ready to be mounted or launched
    """
    settings = settings or config
    showcase_entries = load_showcase(settings.data_dir)

    if settings.storage_secret is None:
        logger.warning(
            "GHIBLIX_STORAGE_SECRET is not set: cached X Keys will not survive a "
            "restart and are not shared between workers"
        )

    background_css = (
        f".gradio-container {{ background-image: url('{settings.asset_host}bg.png'); "
        "background-size: cover; background-position: center; }"
    )

    app = gr.Blocks(
        title="GhibliX",
        css=CUSTOM_CSS + background_css,
        head=SLIDER_SCRIPT_HEAD,
    )

    with app:
        # Session state - one instance per browser tab
        session = gr.State(PageSession())
        stored_key = gr.BrowserState(
            "",
            storage_key=settings.key_storage_name,
            secret=settings.storage_secret,
        )

        gr.Markdown(
            """
            # Studio Ghibli Style Image Generator GhibliX
            ### Turn a photo or a description into a Ghibli-style picture
            """
        )

        with gr.Row():
            mode = gr.Radio(
                label="Mode",
                choices=list(MODES.items()),
                value=DEFAULT_MODE,
                scale=1,
            )
            with gr.Column(scale=2):
                key_ui = KeyInputUI()

        with gr.Row():
            with gr.Column(visible=DEFAULT_MODE == IMG2IMG) as upload_group:
                image = gr.Image(
                    label="Upload image",
                    type="filepath",
                    sources=["upload"],
                    height=256,
                )
            with gr.Column(scale=2):
                prompt = gr.Textbox(
                    label="Prompt",
                    lines=4,
                    placeholder=prompt_placeholder(DEFAULT_MODE),
                )
                size = gr.Dropdown(
                    label="Image size",
                    choices=list(settings.size_options.items()),
                    value=settings.default_size,
                    visible=DEFAULT_MODE != IMG2IMG,
                )

        with gr.Row():
            reset_btn = gr.Button("Reset", variant="secondary")
            submit_btn = gr.Button(submit_label(DEFAULT_MODE), variant="primary")

        error_output = gr.Markdown(value="")
        result_output = gr.HTML(value="")

        ShowcaseUI(showcase_entries, settings.asset_host)

        # Event handlers

        mode.change(
            fn=switch_mode_handler,
            inputs=[mode, session],
            outputs=[upload_group, size, image, submit_btn, prompt, session],
        )

        image.change(
            fn=upload_image,
            inputs=[image, session],
            outputs=[error_output, image, session],
        )

        key_ui.key.blur(
            fn=check_api_key,
            inputs=[key_ui.key, stored_key, session],
            outputs=[key_ui.status, stored_key, session],
        )

        key_ui.clear.click(
            fn=clear_api_key,
            inputs=[session],
            outputs=[key_ui.key, key_ui.status, stored_key, session],
        )

        # Generation waits on the remote service, so sessions must not queue
        # behind each other
        submit_btn.click(
            fn=generate_image,
            inputs=[prompt, size, key_ui.key, session],
            outputs=[result_output, error_output, submit_btn, session],
            concurrency_limit=None,
        )

        reset_btn.click(
            fn=reset_form,
            inputs=[session],
            outputs=[prompt, image, result_output, error_output, submit_btn, session],
        )

        app.load(
            fn=restore_api_key,
            inputs=[stored_key, session],
            outputs=[key_ui.key, key_ui.status, session],
        )

    logger.info(f"UI created with {len(showcase_entries)} showcase entries")
    return app
