"""Filter registry — builds and applies colour-adjustment chains.

Adding a new filter requires two steps:

1. Add a member to ``FilterKind`` and its neutral amount to
   ``NEUTRAL_AMOUNTS`` in ``_base.py``.
2. Write a ``(rgb, amount) -> rgb`` function and register it below, then
   place its kind in ``FILTER_ORDER``.

Typical usage::

    from quickedit.core.filters import apply_filter_chain, build_filter_chain

    chain = build_filter_chain(params)
    filtered = apply_filter_chain(source.image, chain)
"""

from __future__ import annotations

import logging

import numpy as np
from PIL import Image

from quickedit.core.filters import color, tone
from quickedit.core.filters._base import (
    NEUTRAL_AMOUNTS,
    ColorFilter,
    ColorTransform,
    FilterKind,
)
from quickedit.schemas import RenderParameters

logger = logging.getLogger(__name__)

# Chains are always applied in this order.
FILTER_ORDER: tuple[FilterKind, ...] = (
    FilterKind.BRIGHTNESS,
    FilterKind.CONTRAST,
    FilterKind.SATURATE,
    FilterKind.GRAYSCALE,
    FilterKind.SEPIA,
)

# Filters whose amount cannot exceed 100%.
_CAPPED_AT_FULL = frozenset({FilterKind.GRAYSCALE, FilterKind.SEPIA})

# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------

_REGISTRY: dict[FilterKind, ColorTransform] = {}


def register_filter(kind: FilterKind, transform: ColorTransform) -> None:
    """Register the function implementing a filter kind.

    Args:
        kind: The filter being implemented.
        transform: Function mapping ``(rgb, amount)`` to a new RGB array.
    """
    if kind in _REGISTRY:
        logger.warning("Duplicate filter '%s' — skipping.", kind.value)
        return
    _REGISTRY[kind] = transform


register_filter(FilterKind.BRIGHTNESS, tone.brightness)
register_filter(FilterKind.CONTRAST, tone.contrast)
register_filter(FilterKind.SATURATE, color.saturate)
register_filter(FilterKind.GRAYSCALE, color.grayscale)
register_filter(FilterKind.SEPIA, color.sepia)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def _percent_to_amount(kind: FilterKind, percent: float) -> float:
    amount = max(percent, 0.0) / 100.0
    if kind in _CAPPED_AT_FULL:
        amount = min(amount, 1.0)
    return amount


def build_filter_chain(params: RenderParameters) -> list[ColorFilter]:
    """Derive the ordered filter chain from render parameters.

    Every kind in ``FILTER_ORDER`` is present, including neutral ones, so
    the chain always mirrors the full parameter set. Percentages are
    clamped into each filter's domain.

    Args:
        params: Current render parameters.

    Returns:
        Five ``ColorFilter`` stages in application order.
    """
    percents = {
        FilterKind.BRIGHTNESS: params.brightness,
        FilterKind.CONTRAST: params.contrast,
        FilterKind.SATURATE: params.saturate,
        FilterKind.GRAYSCALE: params.grayscale,
        FilterKind.SEPIA: params.sepia,
    }
    return [
        ColorFilter(kind=kind, amount=_percent_to_amount(kind, percents[kind]))
        for kind in FILTER_ORDER
    ]


def apply_filter_chain(
    image: Image.Image,
    chain: list[ColorFilter],
) -> Image.Image:
    """Apply a filter chain to the RGB channels of an RGBA image.

    Each stage's output is clamped to ``[0, 1]`` before the next stage
    runs. Alpha is carried through unchanged. If every stage is an
    identity the original image is returned unchanged (no copy).

    Args:
        image: Source image in mode ``RGBA``.
        chain: Stages from ``build_filter_chain``.

    Returns:
        A new RGBA image, or *image* itself when the chain is neutral.
    """
    active = [stage for stage in chain if not stage.is_identity]
    if not active:
        return image

    logger.debug(
        "Applying filters: %s",
        ", ".join(f"{s.kind.value}={s.amount:.2f}" for s in active),
    )

    pixels = np.array(image.convert("RGBA"))
    rgb = pixels[..., :3].astype(np.float32) / np.float32(255.0)

    for stage in active:
        rgb = np.clip(_REGISTRY[stage.kind](rgb, stage.amount), 0.0, 1.0)

    pixels[..., :3] = np.rint(rgb * np.float32(255.0)).astype(np.uint8)
    return Image.fromarray(pixels)


__all__ = [
    "FILTER_ORDER",
    "NEUTRAL_AMOUNTS",
    "ColorFilter",
    "FilterKind",
    "apply_filter_chain",
    "build_filter_chain",
    "register_filter",
]
