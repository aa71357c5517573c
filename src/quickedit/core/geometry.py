"""Canvas geometry: aspect-ratio padding and border sizing.

The source is never scaled here. It is padded (letterbox/pillarbox) into
the target ratio, then surrounded by a border proportional to the shortest
padded side.
"""

from __future__ import annotations

import math

from quickedit.errors import InvalidParameterError
from quickedit.schemas import (
    AspectRatio,
    CanvasLayout,
    OriginalRatio,
    RenderParameters,
)

# Largest canvas area render will allocate (100 MP RGBA is ~400 MB).
MAX_CANVAS_PIXELS = 100_000_000


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties away from zero for positives."""
    return int(math.floor(value + 0.5))


def resolve_ratio(
    aspect_ratio: AspectRatio,
    source_width: int,
    source_height: int,
) -> float:
    """Turn an ``AspectRatio`` into a width/height number.

    Args:
        aspect_ratio: ``OriginalRatio`` or an explicit ``Ratio``.
        source_width: Source width in pixels.
        source_height: Source height in pixels.

    Returns:
        A finite, strictly positive ratio.

    Raises:
        InvalidParameterError: If the ratio is zero, negative, infinite
            or NaN.
    """
    if isinstance(aspect_ratio, OriginalRatio):
        numerator, denominator = float(source_width), float(source_height)
    else:
        numerator = float(aspect_ratio.width_units)
        denominator = float(aspect_ratio.height_units)

    if denominator == 0.0:
        raise InvalidParameterError(
            f"Aspect ratio '{aspect_ratio}' has a zero height term."
        )

    ratio = numerator / denominator
    if not math.isfinite(ratio) or ratio <= 0.0:
        raise InvalidParameterError(
            f"Aspect ratio '{aspect_ratio}' resolves to {ratio}; "
            "expected a finite positive number."
        )
    return ratio


def compute_layout(
    source_width: int,
    source_height: int,
    params: RenderParameters,
    max_pixels: int = MAX_CANVAS_PIXELS,
) -> CanvasLayout:
    """Compute canvas size and source placement for one render.

    Rounding to whole pixels happens once, on the final canvas size.

    Args:
        source_width: Source width in pixels.
        source_height: Source height in pixels.
        params: Current render parameters.
        max_pixels: Largest allowed canvas area (width x height).

    Returns:
        The ``CanvasLayout`` for this render.

    Raises:
        InvalidParameterError: If the aspect ratio cannot be resolved or
            the canvas would exceed *max_pixels*.
    """
    target_ratio = resolve_ratio(params.aspect_ratio, source_width, source_height)
    image_ratio = source_width / source_height

    if target_ratio > image_ratio:
        # Pillarbox: pad left and right.
        padded_height = float(source_height)
        padded_width = max(float(source_width), padded_height * target_ratio)
    else:
        # Letterbox: pad top and bottom (equal ratios land here too).
        padded_width = float(source_width)
        padded_height = max(float(source_height), padded_width / target_ratio)

    border_percent = min(max(params.border_size_percent, 0.0), 100.0)
    border_px = min(padded_width, padded_height) * (border_percent / 100.0)

    width = round_half_up(padded_width + 2.0 * border_px)
    height = round_half_up(padded_height + 2.0 * border_px)
    if width * height > max_pixels:
        raise InvalidParameterError(
            f"Canvas {width}x{height} exceeds the {max_pixels:,} pixel limit; "
            "choose a less extreme aspect ratio or a smaller border."
        )

    return CanvasLayout(
        target_ratio=target_ratio,
        padded_width=padded_width,
        padded_height=padded_height,
        border_px=border_px,
        width=width,
        height=height,
        draw_x=(width - source_width) // 2,
        draw_y=(height - source_height) // 2,
    )
