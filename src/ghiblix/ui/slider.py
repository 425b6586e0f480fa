"""Before/after comparison slider.

The slider shows the original image full-bleed and overlays the restyled
image clipped to the area right of a vertical divider. The divider sits at
``position`` percent of the container width and follows the pointer while
it is being dragged.

:class:`ComparisonSlider` holds the drag state and renders the markup;
``static/js/slider.js`` binds the same arithmetic to DOM events in the
browser, using the ``data-compare*`` attributes emitted by :meth:`render`.

Drag-end must be observed anywhere in the document, not only over the
widget, so :meth:`ComparisonSlider.attach` registers document-level
release listeners for the lifetime of a ``with`` block.
"""

import html
import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

DEFAULT_POSITION = 50.0
RELEASE_EVENTS = ("mouseup", "touchend")


def clip_percentage(client_x: float, container_left: float, container_width: float) -> float:
    """Convert a pointer x coordinate into a divider position in [0, 100]."""
    percent = (client_x - container_left) / container_width * 100
    return max(0.0, min(100.0, percent))


@dataclass
class ComparisonSlider:
    """Drag state and markup for one before/after pair.

    Attributes:
        original: URL of the image shown underneath
        effect: URL of the image revealed right of the divider
        position: Divider position in percent of the container width
        dragging: True between a press on the divider and the next release
    """

    original: str
    effect: str
    original_label: str = "Original"
    effect_label: str = "Ghibli style"
    position: float = DEFAULT_POSITION
    dragging: bool = field(default=False)

    def pointer_down(self) -> None:
        """Mouse-down or touch-start on the divider."""
        self.dragging = True

    def pointer_up(self, **_event) -> None:
        """Mouse-up or touch-end, wherever it happened."""
        self.dragging = False

    def pointer_move(self, client_x: float, container_left: float, container_width: float) -> float:
        """Follow the pointer while dragging.

        Args:
            client_x: Pointer x coordinate
            container_left: Left edge of the container, same coordinate space
            container_width: Container width in pixels

        Returns:
            The divider position after the move
        """
        if self.dragging and container_width > 0:
            self.position = clip_percentage(client_x, container_left, container_width)
        return self.position

    def touch_move(
        self, touches: Sequence[float], container_left: float, container_width: float
    ) -> float:
        """Follow the first touch point while dragging."""
        if not touches:
            return self.position
        return self.pointer_move(touches[0], container_left, container_width)

    @contextmanager
    def attach(self, document) -> Iterator["ComparisonSlider"]:
        """Listen for releases on ``document`` for the duration of the block.

        ``document`` is anything with ``add_listener(event, fn)`` and
        ``remove_listener(event, fn)``.

        The listeners are removed when the block exits, even on error.
        """
        for event in RELEASE_EVENTS:
            document.add_listener(event, self.pointer_up)
        try:
            yield self
        finally:
            for event in RELEASE_EVENTS:
                document.remove_listener(event, self.pointer_up)
            self.dragging = False

    @property
    def clip_style(self) -> str:
        return f"clip-path: inset(0 0 0 {self.position:g}%)"

    def render(self) -> str:
        """Return the widget markup at the current divider position."""
        original = html.escape(self.original, quote=True)
        effect = html.escape(self.effect, quote=True)
        original_label = html.escape(self.original_label)
        effect_label = html.escape(self.effect_label)
        return (
            '<div class="ghx-compare" data-compare>'
            f'<img class="ghx-compare__img" src="{original}" alt="{original_label}" '
            'loading="lazy" draggable="false">'
            f'<div class="ghx-compare__effect" data-compare-effect style="{self.clip_style}">'
            f'<img class="ghx-compare__img" src="{effect}" alt="{effect_label}" '
            'loading="lazy" draggable="false">'
            "</div>"
            f'<div class="ghx-compare__handle" data-compare-handle style="left: {self.position:g}%">'
            '<span class="ghx-compare__knob">&#8249;&#8250;</span>'
            "</div>"
            f'<span class="ghx-compare__label ghx-compare__label--left">{original_label}</span>'
            f'<span class="ghx-compare__label ghx-compare__label--right">{effect_label}</span>'
            "</div>"
        )
