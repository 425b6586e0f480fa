"""Reusable UI components for the GhibliX Gradio interface."""

import html

import gradio as gr

from ghiblix.core.showcase import ShowcaseEntry

from .models import TEXT2IMG
from .slider import ComparisonSlider

CUSTOM_CSS = """
.ghx-showcase {
    display: grid;
    grid-template-columns: repeat(auto-fill, minmax(320px, 1fr));
    gap: 24px;
}
.ghx-compare {
    position: relative;
    width: 100%;
    aspect-ratio: 16 / 9;
    overflow: hidden;
    border-radius: 12px;
    cursor: grab;
    user-select: none;
    touch-action: pan-y;
}
.ghx-compare.is-dragging {
    cursor: grabbing;
}
.ghx-compare__img {
    position: absolute;
    inset: 0;
    width: 100%;
    height: 100%;
    object-fit: cover;
}
.ghx-compare__effect {
    position: absolute;
    inset: 0;
}
.ghx-compare__handle {
    position: absolute;
    top: 0;
    bottom: 0;
    width: 2px;
    background: #fff;
    box-shadow: 0 0 6px rgba(0, 0, 0, 0.4);
    cursor: grab;
}
.ghx-compare__knob {
    position: absolute;
    top: 50%;
    left: 50%;
    transform: translate(-50%, -50%);
    width: 24px;
    height: 24px;
    border-radius: 50%;
    background: #fff;
    color: #374151;
    display: flex;
    align-items: center;
    justify-content: center;
    font-size: 14px;
}
.ghx-compare__label {
    position: absolute;
    top: 12px;
    padding: 2px 8px;
    border-radius: 6px;
    background: rgba(0, 0, 0, 0.5);
    color: #fff;
    font-size: 12px;
}
.ghx-compare__label--left { left: 12px; }
.ghx-compare__label--right { right: 12px; }
.ghx-result img {
    max-width: 100%;
    border-radius: 12px;
}
"""


def render_showcase_html(entries: list[ShowcaseEntry], asset_host: str) -> str:
    """Render one comparison slider per showcase entry, in list order."""
    if not entries:
        return '<p class="ghx-showcase-empty">No examples available.</p>'

    sliders = []
    for entry in entries:
        original, effect = entry.resolve(asset_host)
        sliders.append(ComparisonSlider(original=original, effect=effect).render())
    return f'<div class="ghx-showcase">{"".join(sliders)}</div>'


def render_result_html(image_ref: str | None) -> str:
    """Render the generated image, or nothing when there is no result."""
    if not image_ref:
        return ""
    src = html.escape(image_ref, quote=True)
    return (
        '<div class="ghx-result">'
        f'<img src="{src}" alt="Generated image">'
        f'<p><a href="{src}" target="_blank" rel="noopener noreferrer" download>'
        "Open full size</a></p>"
        "</div>"
    )


def render_error_markdown(message: str) -> str:
    if not message:
        return ""
    return f"❌ **Error**\n\n{message}"


def submit_label(mode: str) -> str:
    return "Generate image" if mode == TEXT2IMG else "Convert image"


def prompt_placeholder(mode: str) -> str:
    if mode == TEXT2IMG:
        return "e.g. A little girl playing with forest spirits, sunlight filtering through the leaves"
    return (
        "Describe how to change the uploaded image, e.g. add glasses. "
        "Leave empty to simply convert it to Ghibli style"
    )


class KeyInputUI:
    """API key box with its validity indicator and clear link.

    The key is checked when the box loses focus; the indicator shows the
    result of the last check.
    """

    def __init__(self, initial_value: str = ""):
        with gr.Group():
            with gr.Row():
                self.key = gr.Textbox(
                    label="X Key",
                    placeholder="Enter your X Key",
                    value=initial_value,
                    type="password",
                    scale=4,
                )
                self.clear = gr.Button("Clear", size="sm", scale=1)
            self.status = gr.Markdown(value="")

    def get_all_components(self) -> list[gr.components.Component]:
        return [self.key, self.clear, self.status]


class ShowcaseUI:
    """Gallery of before/after comparison sliders."""

    def __init__(self, entries: list[ShowcaseEntry], asset_host: str):
        self.entries = entries
        gr.Markdown("### Examples")
        self.gallery = gr.HTML(value=render_showcase_html(entries, asset_host))
