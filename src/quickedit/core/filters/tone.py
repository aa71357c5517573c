"""Tone filters: brightness and contrast.

Both are linear per-channel transfer functions, as in the CSS
``brightness()`` and ``contrast()`` filters.
"""

from __future__ import annotations

import numpy as np


def brightness(rgb: np.ndarray, amount: float) -> np.ndarray:
    """Scale every channel by *amount* (``1.0`` is neutral, ``0`` is black)."""
    return rgb * np.float32(amount)


def contrast(rgb: np.ndarray, amount: float) -> np.ndarray:
    """Stretch channels around mid-grey (``1.0`` is neutral, ``0`` is flat grey)."""
    return (rgb - np.float32(0.5)) * np.float32(amount) + np.float32(0.5)
