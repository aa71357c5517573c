"""Colour-matrix filters: saturate, grayscale and sepia.

Coefficients are the ones from the W3C Filter Effects specification, so
results match what a browser canvas produces for the same CSS filter.
"""

from __future__ import annotations

import numpy as np

from quickedit.core.filters._base import apply_matrix


def _saturate_matrix(s: float) -> np.ndarray:
    return np.array(
        [
            [0.213 + 0.787 * s, 0.715 - 0.715 * s, 0.072 - 0.072 * s],
            [0.213 - 0.213 * s, 0.715 + 0.285 * s, 0.072 - 0.072 * s],
            [0.213 - 0.213 * s, 0.715 - 0.715 * s, 0.072 + 0.928 * s],
        ],
        dtype=np.float32,
    )


def saturate(rgb: np.ndarray, amount: float) -> np.ndarray:
    """Scale saturation (``1.0`` is neutral, ``0`` is fully desaturated)."""
    return apply_matrix(rgb, _saturate_matrix(amount))


def grayscale(rgb: np.ndarray, amount: float) -> np.ndarray:
    """Blend towards Rec. 709 luminance (``0`` is neutral, ``1`` is full)."""
    a = 1.0 - min(max(amount, 0.0), 1.0)
    matrix = np.array(
        [
            [0.2126 + 0.7874 * a, 0.7152 - 0.7152 * a, 0.0722 - 0.0722 * a],
            [0.2126 - 0.2126 * a, 0.7152 + 0.2848 * a, 0.0722 - 0.0722 * a],
            [0.2126 - 0.2126 * a, 0.7152 - 0.7152 * a, 0.0722 + 0.9278 * a],
        ],
        dtype=np.float32,
    )
    return apply_matrix(rgb, matrix)


def sepia(rgb: np.ndarray, amount: float) -> np.ndarray:
    """Blend towards a sepia tone (``0`` is neutral, ``1`` is full)."""
    a = 1.0 - min(max(amount, 0.0), 1.0)
    matrix = np.array(
        [
            [0.393 + 0.607 * a, 0.769 - 0.769 * a, 0.189 - 0.189 * a],
            [0.349 - 0.349 * a, 0.686 + 0.314 * a, 0.168 - 0.168 * a],
            [0.272 - 0.272 * a, 0.534 - 0.534 * a, 0.131 + 0.869 * a],
        ],
        dtype=np.float32,
    )
    return apply_matrix(rgb, matrix)
