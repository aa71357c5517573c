"""Shared fixtures for QuickEdit test suite."""

import io

import numpy as np
import pytest
from PIL import Image

from quickedit.config import Settings
from quickedit.schemas import SourceImage


@pytest.fixture
def settings() -> Settings:
    """Default settings, independent of any local .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def rgb_image() -> Image.Image:
    """A small 100x80 RGB test image with a gradient."""
    arr = np.zeros((80, 100, 3), dtype=np.uint8)
    arr[:, :, 0] = np.linspace(0, 255, 100, dtype=np.uint8)  # red gradient
    arr[:, :, 1] = 128
    arr[:, :, 2] = 64
    return Image.fromarray(arr)


@pytest.fixture
def source(rgb_image: Image.Image) -> SourceImage:
    """The gradient image as a fully opaque ``SourceImage``."""
    return SourceImage(image=rgb_image)


@pytest.fixture
def landscape_source() -> SourceImage:
    """A 400x300 opaque source with random pixels."""
    rng = np.random.default_rng(7)
    arr = rng.integers(0, 256, size=(300, 400, 3), dtype=np.uint8)
    return SourceImage(image=Image.fromarray(arr))


@pytest.fixture
def noisy_rgba() -> np.ndarray:
    """A 20x16 RGBA buffer with random colour and a varying alpha channel."""
    rng = np.random.default_rng(42)
    arr = rng.integers(0, 256, size=(16, 20, 4), dtype=np.uint8)
    return arr


@pytest.fixture
def png_bytes(rgb_image: Image.Image) -> bytes:
    """The gradient image encoded as PNG."""
    buffer = io.BytesIO()
    rgb_image.save(buffer, format="PNG")
    return buffer.getvalue()
