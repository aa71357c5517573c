"""Base types and shared helpers for colour filters.

This module defines the ``FilterKind`` enum (which filters exist), the
``ColorFilter`` schema (one configured stage of a chain), and the
``ColorTransform`` signature every filter function implements.

Filters work on float32 RGB arrays of shape ``(H, W, 3)`` with values in
``[0, 1]``. Alpha never reaches them.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable

import numpy as np
from pydantic import BaseModel

# Type alias for a filter function: (rgb, amount) -> rgb.
ColorTransform = Callable[[np.ndarray, float], np.ndarray]


class FilterKind(str, Enum):
    """Supported colour adjustments, named after their CSS counterparts."""

    BRIGHTNESS = "brightness"
    CONTRAST = "contrast"
    SATURATE = "saturate"
    GRAYSCALE = "grayscale"
    SEPIA = "sepia"


# Amount (as a fraction, 1.0 == 100%) at which each filter is a no-op.
NEUTRAL_AMOUNTS: dict[FilterKind, float] = {
    FilterKind.BRIGHTNESS: 1.0,
    FilterKind.CONTRAST: 1.0,
    FilterKind.SATURATE: 1.0,
    FilterKind.GRAYSCALE: 0.0,
    FilterKind.SEPIA: 0.0,
}


class ColorFilter(BaseModel):
    """A single configured stage of a filter chain.

    Attributes:
        kind: Which adjustment to apply.
        amount: Filter amount as a fraction (``1.0`` means 100%).
    """

    model_config = {"frozen": True}

    kind: FilterKind
    amount: float

    @property
    def is_identity(self) -> bool:
        """``True`` when applying this stage would not change any pixel."""
        return self.amount == NEUTRAL_AMOUNTS[self.kind]


def apply_matrix(rgb: np.ndarray, matrix: np.ndarray) -> np.ndarray:
    """Multiply every pixel by a 3×3 colour matrix (row-vector form).

    Args:
        rgb: Float array of shape ``(H, W, 3)``.
        matrix: Float array of shape ``(3, 3)``; row *i* produces output
            channel *i*.

    Returns:
        A new array with the same shape as *rgb*.
    """
    return rgb @ matrix.T.astype(rgb.dtype)
