"""Canvas compositing: padding, border, colour filters and sharpening.

All functions in this module operate on PIL images and are completely
independent of the UI layer. ``render`` is pure: it never mutates its
inputs and returns byte-identical canvases for identical arguments.

Typical usage::

    from quickedit.core.compositor import render
    from quickedit.schemas import RenderParameters

    params = RenderParameters(aspect_ratio="1/1", border_size_percent=10)
    canvas = render(source, params)
    canvas.image.save("preview.png")
"""

from __future__ import annotations

import logging

from PIL import Image

from quickedit.core.filters import apply_filter_chain, build_filter_chain
from quickedit.core.geometry import MAX_CANVAS_PIXELS, compute_layout
from quickedit.core.sharpen import sharpen_image
from quickedit.errors import PreconditionViolationError
from quickedit.schemas import Canvas, CanvasLayout, RenderParameters, SourceImage

logger = logging.getLogger(__name__)


def _check_draw_bounds(layout: CanvasLayout, source: SourceImage) -> None:
    if (
        layout.draw_x < 0
        or layout.draw_y < 0
        or layout.draw_x + source.width > layout.width
        or layout.draw_y + source.height > layout.height
    ):
        raise PreconditionViolationError(
            f"Source {source.width}x{source.height} at "
            f"({layout.draw_x}, {layout.draw_y}) exceeds canvas "
            f"{layout.width}x{layout.height}."
        )


def _is_opaque(image: Image.Image) -> bool:
    return image.getextrema()[3] == (255, 255)


def render(
    source: SourceImage,
    params: RenderParameters,
    max_canvas_px: int = MAX_CANVAS_PIXELS,
) -> Canvas:
    """Compose the source onto a fresh canvas.

    Steps: resolve geometry → fill with the border colour → apply the
    colour filter chain to the source only → draw it centred → optionally
    sharpen the whole canvas.

    Args:
        source: The decoded upload.
        params: Render parameters.
        max_canvas_px: Largest allowed canvas area in pixels.

    Returns:
        A new ``Canvas``.

    Raises:
        InvalidParameterError: If the aspect ratio does not resolve to a
            finite positive number, or if the canvas would exceed
            *max_canvas_px*. Raised before any pixel work.
        PreconditionViolationError: If the computed draw rectangle does
            not fit the canvas.
    """
    layout = compute_layout(source.width, source.height, params, max_canvas_px)
    _check_draw_bounds(layout, source)

    canvas_image = Image.new(
        "RGBA", (layout.width, layout.height), tuple(params.border_color)
    )

    filtered = source.image
    if params.has_color_adjustments():
        filtered = apply_filter_chain(filtered, build_filter_chain(params))

    origin = (layout.draw_x, layout.draw_y)
    if _is_opaque(filtered):
        canvas_image.paste(filtered, origin)
    else:
        canvas_image.alpha_composite(filtered, dest=origin)

    if params.sharpen_strength > 0.0:
        canvas_image = sharpen_image(canvas_image, params.sharpen_strength)

    logger.debug(
        "Rendered %dx%d source onto %dx%d canvas (ratio %.4f, border %.1fpx)",
        source.width,
        source.height,
        layout.width,
        layout.height,
        layout.target_ratio,
        layout.border_px,
    )
    return Canvas(image=canvas_image, layout=layout)
