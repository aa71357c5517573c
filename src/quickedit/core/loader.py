"""Decode uploads into ``SourceImage`` values.

Anything that is not a supported raster image is rejected here with
``UnsupportedInputError`` and never reaches the compositor.
"""

from __future__ import annotations

import io
import logging
from typing import BinaryIO

from PIL import Image, ImageOps

from quickedit.config import Settings
from quickedit.errors import UnsupportedInputError
from quickedit.schemas import SourceImage

logger = logging.getLogger(__name__)

# PIL format names that should be treated as another allowed format.
_FORMAT_ALIASES = {"mpo": "jpeg"}


def load_source_image(data: bytes | BinaryIO, settings: Settings) -> SourceImage:
    """Decode raw upload bytes into an RGBA ``SourceImage``.

    EXIF orientation is applied so the pixels match what the user sees.

    Args:
        data: File contents, or a binary file-like object.
        settings: Supplies the allowed formats and the size limit.

    Returns:
        A validated ``SourceImage``.

    Raises:
        UnsupportedInputError: If the input is too large, not an image,
            in a disallowed format, or has zero size.
    """
    raw = data if isinstance(data, bytes) else data.read()

    limit = int(settings.max_upload_mb * 1024 * 1024)
    if len(raw) > limit:
        raise UnsupportedInputError(
            f"Upload is {len(raw) / 1024 / 1024:.1f} MB; "
            f"the limit is {settings.max_upload_mb:.0f} MB."
        )

    try:
        with Image.open(io.BytesIO(raw)) as opened:
            fmt = (opened.format or "").lower()
            fmt = _FORMAT_ALIASES.get(fmt, fmt)
            if fmt not in settings.supported_formats:
                raise UnsupportedInputError(
                    f"Unsupported image format '{fmt or 'unknown'}'."
                )
            opened.load()
            image = ImageOps.exif_transpose(opened).convert("RGBA")
    except UnsupportedInputError:
        raise
    except Exception as exc:
        raise UnsupportedInputError(f"Not a readable image: {exc}") from exc

    if image.width < 1 or image.height < 1:
        raise UnsupportedInputError(f"Image has zero size: {image.size}")

    logger.info("Loaded %s image %dx%d", fmt.upper(), image.width, image.height)
    return SourceImage(image=image)
