"""Export helpers: optional downscale and JPEG encoding.

The exporter is the only place where pixels are resampled. The
compositor pads but never scales.
"""

from __future__ import annotations

import io
import logging
import threading
import time

from PIL import Image

from quickedit.config import Settings
from quickedit.core.geometry import round_half_up
from quickedit.errors import ExportError
from quickedit.schemas import Canvas, ExportOutput, RenderParameters

logger = logging.getLogger(__name__)

_stamp_lock = threading.Lock()
_last_stamp_ms = 0


def export_size(
    width: int,
    height: int,
    output_width: int | None,
) -> tuple[int, int]:
    """Return the exported ``(width, height)`` for a canvas.

    The canvas is downscaled proportionally only when *output_width* is
    set and strictly smaller than *width*; it is never upscaled.

    Args:
        width: Canvas width.
        height: Canvas height.
        output_width: Optional width cap.

    Returns:
        Target dimensions (height is at least 1).
    """
    if output_width is None or output_width >= width:
        return width, height
    new_height = max(1, round_half_up(height * output_width / width))
    return output_width, new_height


def make_export_filename(prefix: str, extension: str = "jpg") -> str:
    """Build a unique download name such as ``edited-1729351234567.jpg``.

    The token is the current epoch time in milliseconds, bumped past the
    previous token when two exports land in the same millisecond (or the
    clock steps back), so names never repeat within a process.
    """
    global _last_stamp_ms
    with _stamp_lock:
        stamp = max(time.time_ns() // 1_000_000, _last_stamp_ms + 1)
        _last_stamp_ms = stamp
    return f"{prefix}-{stamp}.{extension}"


def image_to_jpeg_bytes(image: Image.Image, quality: int) -> bytes:
    """Serialize a PIL image to JPEG bytes.

    Transparent pixels are flattened onto opaque black, as a browser
    canvas does when encoding to JPEG.

    Args:
        image: Any PIL image.
        quality: JPEG quality, ``1``–``100``.

    Returns:
        Raw JPEG file contents as ``bytes``.

    Raises:
        ExportError: If encoding fails.
    """
    try:
        rgba = image.convert("RGBA")
        flattened = Image.new("RGB", rgba.size, (0, 0, 0))
        flattened.paste(rgba, mask=rgba.split()[3])

        buffer = io.BytesIO()
        flattened.save(buffer, format="JPEG", quality=int(quality))
    except Exception as exc:
        raise ExportError(f"JPEG encoding failed: {exc}") from exc
    return buffer.getvalue()


def export_canvas(
    canvas: Canvas,
    params: RenderParameters,
    settings: Settings,
) -> ExportOutput:
    """Produce the downloadable file for a finished canvas.

    Args:
        canvas: A completed render.
        params: Supplies ``output_width`` and ``export_quality``.
        settings: Supplies the filename prefix and MIME type.

    Returns:
        An ``ExportOutput`` with encoded bytes and metadata.

    Raises:
        ExportError: If resizing or encoding fails.
    """
    size = export_size(canvas.width, canvas.height, params.output_width)
    image = canvas.image

    if size != image.size:
        logger.info("Downscaling canvas %s → %s for export.", image.size, size)
        try:
            image = image.resize(size, Image.LANCZOS)
        except Exception as exc:
            raise ExportError(f"Resize to {size} failed: {exc}") from exc

    data = image_to_jpeg_bytes(image, params.export_quality)
    return ExportOutput(
        data=data,
        size=size,
        filename=make_export_filename(settings.export_filename_prefix),
        mime_type=settings.export_mime,
    )
