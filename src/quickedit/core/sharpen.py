"""Unsharp-mask sharpening with a fixed 3×3 kernel.

The kernel is applied to interior pixels only; the outermost one-pixel
ring of the buffer is left untouched. ``strength`` blends linearly
between the original pixel (``0``) and the fully convolved one (``1``).
"""

from __future__ import annotations

import logging

import numpy as np
from PIL import Image

from quickedit.errors import PreconditionViolationError

logger = logging.getLogger(__name__)

SHARPEN_KERNEL = np.array(
    [
        [0, -1, 0],
        [-1, 5, -1],
        [0, -1, 0],
    ],
    dtype=np.float64,
)


def sharpen(
    pixels: np.ndarray,
    width: int,
    height: int,
    strength: float,
) -> None:
    """Sharpen an RGBA buffer in place.

    Convolution reads from a snapshot of the buffer taken before any
    write. RGB results are rounded to nearest and clamped to ``[0, 255]``;
    alpha is not modified.

    Args:
        pixels: ``uint8`` array of shape ``(height, width, 4)``.
        width: Buffer width in pixels.
        height: Buffer height in pixels.
        strength: Blend factor, clamped to at most ``1.0``. Values
            ``<= 0`` leave the buffer unchanged.

    Raises:
        PreconditionViolationError: If *pixels* does not match the
            declared dimensions or is not an 8-bit RGBA buffer.
    """
    if width < 1 or height < 1:
        raise PreconditionViolationError(
            f"Invalid buffer dimensions {width}x{height}."
        )
    if pixels.dtype != np.uint8 or pixels.shape != (height, width, 4):
        raise PreconditionViolationError(
            f"Pixel buffer {pixels.shape}/{pixels.dtype} does not match "
            f"declared RGBA {width}x{height}."
        )

    if strength <= 0.0:
        return
    strength = min(float(strength), 1.0)

    if width < 3 or height < 3:
        # No interior pixels.
        return

    src = pixels[..., :3].astype(np.float64)
    inner_h, inner_w = height - 2, width - 2

    convolved = np.zeros((inner_h, inner_w, 3), dtype=np.float64)
    for ky in range(3):
        for kx in range(3):
            weight = SHARPEN_KERNEL[ky, kx]
            if weight == 0.0:
                continue
            convolved += weight * src[ky : ky + inner_h, kx : kx + inner_w]

    center = src[1:-1, 1:-1]
    blended = center + (convolved - center) * strength
    pixels[1:-1, 1:-1, :3] = np.clip(np.rint(blended), 0, 255).astype(np.uint8)

    logger.debug("Sharpened %dx%d buffer at strength %.2f", width, height, strength)


def sharpen_image(image: Image.Image, strength: float) -> Image.Image:
    """Return a sharpened copy of a PIL image.

    Args:
        image: Any PIL image; converted to ``RGBA``.
        strength: Blend factor passed to ``sharpen``.

    Returns:
        A new RGBA image.
    """
    pixels = np.array(image.convert("RGBA"))
    sharpen(pixels, image.width, image.height, strength)
    return Image.fromarray(pixels)
