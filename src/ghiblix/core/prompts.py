"""Style-conditioning prompt templates.

Every request sent to the image service wraps the user's text in a fixed
Studio Ghibli style description, so a short prompt such as "a cat on a roof"
still comes back in the house style.
"""

STYLE_SUFFIX = (
    "Use Hayao Miyazaki's signature art style, including soft colors, delicate details, "
    "dreamy scenery and distinctive character design."
)

TEXT_TEMPLATE = "Create an image in the style of Studio Ghibli: {prompt}. " + STYLE_SUFFIX
EDIT_TEMPLATE = "Modify this image in the style of Studio Ghibli: {prompt}. " + STYLE_SUFFIX

# Used when the user uploads an image without describing an edit
DEFAULT_EDIT_INSTRUCTION = "convert the whole picture to Studio Ghibli style"


def build_text_prompt(prompt: str) -> str:
    """Wrap a text-to-image prompt in the style description."""
    return TEXT_TEMPLATE.format(prompt=prompt.strip())


def build_edit_prompt(prompt: str | None) -> str:
    """Wrap an image-edit instruction in the style description.

    A blank instruction falls back to :data:`DEFAULT_EDIT_INSTRUCTION`.
    """
    instruction = (prompt or "").strip() or DEFAULT_EDIT_INSTRUCTION
    return EDIT_TEMPLATE.format(prompt=instruction)
