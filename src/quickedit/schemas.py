"""Pydantic data contracts shared across modules.

Every cross-module boundary is typed through one of these schemas.
The pipeline flow is::

    bytes (upload)
        → load_source_image()           → SourceImage
        → render(SourceImage, RenderParameters)
            → compute_layout()          → CanvasLayout
            → build_filter_chain()      → list[ColorFilter]
            → sharpen()                 (optional, in place)
                                        → Canvas
        → export_canvas(Canvas, RenderParameters) → ExportOutput
"""

from __future__ import annotations

import re
from typing import Annotated, Literal, Union

from PIL import Image
from pydantic import BaseModel, Field, field_validator

from quickedit.errors import InvalidParameterError

Channel = Annotated[int, Field(ge=0, le=255)]
RGBA = tuple[Channel, Channel, Channel, Channel]

_RATIO_PATTERN = re.compile(
    r"^\s*(\d+(?:\.\d+)?)\s*[/:]\s*(\d+(?:\.\d+)?)\s*$"
)
_HEX_COLOR_PATTERN = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")


# ---------------------------------------------------------------------------
# Source
# ---------------------------------------------------------------------------


class SourceImage(BaseModel):
    """Decoded upload, never mutated by the pipeline.

    Attributes:
        image: PIL image, normalised to mode ``RGBA`` on construction.
    """

    image: Image.Image

    model_config = {"arbitrary_types_allowed": True, "frozen": True}

    @field_validator("image")
    @classmethod
    def _normalise_image(cls, value: Image.Image) -> Image.Image:
        if value.width < 1 or value.height < 1:
            raise ValueError(f"Source image has zero size: {value.size}")
        if value.mode != "RGBA":
            value = value.convert("RGBA")
        return value

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height


# ---------------------------------------------------------------------------
# Parameters
# ---------------------------------------------------------------------------


class OriginalRatio(BaseModel):
    """Keep the source's own aspect ratio."""

    model_config = {"frozen": True}

    kind: Literal["original"] = "original"

    def __str__(self) -> str:
        return "original"


class Ratio(BaseModel):
    """Explicit target aspect ratio, ``width_units : height_units``.

    Values are not constrained here; the compositor rejects ratios that
    resolve to a non-positive or non-finite number.
    """

    model_config = {"frozen": True}

    kind: Literal["ratio"] = "ratio"
    width_units: float
    height_units: float

    def __str__(self) -> str:
        return f"{self.width_units:g}/{self.height_units:g}"


AspectRatio = Annotated[Union[OriginalRatio, Ratio], Field(discriminator="kind")]


def parse_aspect_ratio(text: str) -> OriginalRatio | Ratio:
    """Parse a preset string such as ``"original"``, ``"16/9"`` or ``"4:5"``.

    Args:
        text: Ratio string coming from a UI control.

    Returns:
        ``OriginalRatio`` or a ``Ratio`` with both units strictly positive.

    Raises:
        InvalidParameterError: If *text* is not a well-formed ratio.
    """
    if text.strip().lower() == "original":
        return OriginalRatio()

    match = _RATIO_PATTERN.match(text)
    if match is None:
        raise InvalidParameterError(
            f"Malformed aspect ratio {text!r}; expected 'original' or 'W/H'."
        )

    width_units, height_units = float(match.group(1)), float(match.group(2))
    if width_units <= 0 or height_units <= 0:
        raise InvalidParameterError(
            f"Aspect ratio {text!r} must have positive terms."
        )
    return Ratio(width_units=width_units, height_units=height_units)


def parse_hex_color(text: str) -> tuple[int, int, int, int]:
    """Parse ``#RGB``, ``#RRGGBB`` or ``#RRGGBBAA`` into an RGBA tuple.

    Raises:
        InvalidParameterError: If *text* is not a hex colour.
    """
    match = _HEX_COLOR_PATTERN.match(text.strip())
    if match is None:
        raise InvalidParameterError(f"Malformed colour {text!r}.")

    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    if len(digits) == 6:
        digits += "ff"
    return tuple(int(digits[i : i + 2], 16) for i in range(0, 8, 2))


def format_hex_color(color: tuple[int, int, int, int]) -> str:
    """Inverse of ``parse_hex_color`` (alpha is dropped when opaque)."""
    r, g, b, a = color
    if a == 255:
        return f"#{r:02X}{g:02X}{b:02X}"
    return f"#{r:02X}{g:02X}{b:02X}{a:02X}"


class RenderParameters(BaseModel):
    """Everything the user can change about a render.

    Colour filters use CSS percentages: ``100`` is neutral for brightness,
    contrast and saturate; ``0`` is neutral for grayscale and sepia.
    Assignments are validated, so an out-of-domain value never lands in
    the model.

    Attributes:
        border_size_percent: Border thickness as a percentage of the
            shortest padded side.
        border_color: RGBA fill for the border and letterbox padding.
            Hex strings are accepted and parsed.
        aspect_ratio: Target canvas ratio. Preset strings are accepted
            and parsed.
        export_quality: JPEG quality used by the exporter.
        sharpen_strength: Unsharp blend factor, ``0`` disables sharpening.
        brightness: Brightness percentage.
        contrast: Contrast percentage.
        saturate: Saturation percentage.
        grayscale: Grayscale percentage.
        sepia: Sepia percentage.
        output_width: Optional export width cap in pixels.
    """

    model_config = {"validate_assignment": True}

    border_size_percent: float = Field(default=0.0, ge=0.0, le=100.0)
    border_color: RGBA = (255, 255, 255, 255)
    aspect_ratio: AspectRatio = OriginalRatio()
    export_quality: int = Field(default=92, ge=1, le=100)
    sharpen_strength: float = Field(default=0.0, ge=0.0, le=1.0)
    brightness: float = Field(default=100.0, ge=0.0, le=200.0)
    contrast: float = Field(default=100.0, ge=0.0, le=200.0)
    saturate: float = Field(default=100.0, ge=0.0, le=200.0)
    grayscale: float = Field(default=0.0, ge=0.0, le=100.0)
    sepia: float = Field(default=0.0, ge=0.0, le=100.0)
    output_width: int | None = Field(default=None, gt=0)

    @field_validator("border_color", mode="before")
    @classmethod
    def _parse_color(cls, value):
        if isinstance(value, str):
            return parse_hex_color(value)
        return value

    @field_validator("aspect_ratio", mode="before")
    @classmethod
    def _parse_ratio(cls, value):
        if isinstance(value, str):
            return parse_aspect_ratio(value)
        return value

    def has_color_adjustments(self) -> bool:
        """Return ``True`` if any colour filter differs from neutral."""
        return (
            self.brightness != 100.0
            or self.contrast != 100.0
            or self.saturate != 100.0
            or self.grayscale != 0.0
            or self.sepia != 0.0
        )


# ---------------------------------------------------------------------------
# Compositing
# ---------------------------------------------------------------------------


class CanvasLayout(BaseModel):
    """Geometry of a single render.

    Attributes:
        target_ratio: Resolved width/height ratio of the padded area.
        padded_width: Width of the letterboxed area (unrounded).
        padded_height: Height of the letterboxed area (unrounded).
        border_px: Border thickness in pixels (unrounded).
        width: Final canvas width in pixels.
        height: Final canvas height in pixels.
        draw_x: Left edge of the source on the canvas.
        draw_y: Top edge of the source on the canvas.
    """

    model_config = {"frozen": True}

    target_ratio: float
    padded_width: float
    padded_height: float
    border_px: float
    width: int
    height: int
    draw_x: int
    draw_y: int


class Canvas(BaseModel):
    """Output of one render. Rebuilt from scratch every time.

    Attributes:
        image: Composited RGBA image.
        layout: Geometry used to build *image*.
    """

    image: Image.Image = Field(
        ...,
        description="Composited canvas in PIL mode 'RGBA'.",
    )
    layout: CanvasLayout

    model_config = {"arbitrary_types_allowed": True}

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------


class ExportOutput(BaseModel):
    """Encoded file ready for download.

    Attributes:
        data: Raw file contents.
        size: ``(width, height)`` of the encoded image.
        filename: Suggested file name.
        mime_type: MIME type of *data*.
    """

    data: bytes
    size: tuple[int, int]
    filename: str
    mime_type: str = "image/jpeg"
