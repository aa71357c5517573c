"""Application settings loaded from environment and .env files."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Global configuration for the QuickEdit application.

    Values are loaded in order: field defaults → .env file → environment
    variables. Environment variables are prefixed with ``QES_``.

    Attributes:
        supported_formats: Allowed upload image formats (lowercase PIL
            format names / extensions, without dot).
        max_upload_mb: Maximum upload file size in megabytes.
        aspect_ratio_presets: Button label → ratio string accepted by
            ``parse_aspect_ratio``.
        sharpen_presets: Button label → sharpen strength in ``[0, 1]``.
        border_color_presets: Button label → ``#RRGGBB`` colour.
        brightness_range: Min/max bounds for the brightness slider (percent).
        contrast_range: Min/max bounds for the contrast slider (percent).
        saturate_range: Min/max bounds for the saturation slider (percent).
        border_size_max: Upper bound of the border slider (percent of the
            shortest padded side).
        export_filename_prefix: Prefix of downloaded file names.
        max_canvas_px: Largest canvas area (width x height) a render may
            allocate.
        export_mime: MIME type of the exported file.
        log_level: Root logging level used by the Streamlit entry point.
    """

    model_config = SettingsConfigDict(
        env_prefix="QES_",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # --- Upload ---
    supported_formats: list[str] = ["jpg", "jpeg", "png", "webp", "gif", "bmp"]
    max_upload_mb: float = 25.0

    # --- Presets ---
    aspect_ratio_presets: dict[str, str] = {
        "Original": "original",
        "1:1": "1/1",
        "4:5": "4/5",
        "3:4": "3/4",
        "16:9": "16/9",
        "9:16": "9/16",
    }
    sharpen_presets: dict[str, float] = {
        "Off": 0.0,
        "Low": 0.3,
        "Medium": 0.6,
        "High": 1.0,
    }
    border_color_presets: dict[str, str] = {
        "White": "#FFFFFF",
        "Black": "#000000",
        "Grey": "#808080",
        "Cream": "#F5F0E1",
    }

    # --- Slider bounds (percent) ---
    brightness_range: tuple[float, float] = (0.0, 200.0)
    contrast_range: tuple[float, float] = (0.0, 200.0)
    saturate_range: tuple[float, float] = (0.0, 200.0)
    border_size_max: float = 50.0

    # --- Render ---
    max_canvas_px: int = 100_000_000

    # --- Export ---
    export_filename_prefix: str = "edited"
    export_mime: str = "image/jpeg"

    # --- Logging ---
    log_level: str = "INFO"
