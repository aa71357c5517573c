"""Reusable Streamlit UI components.

Each function renders a self-contained section of the interface.
Widgets hold no business logic; they only collect values
that the app feeds into ``EditorSession.update``.
"""

from __future__ import annotations

from typing import Any, Callable

import streamlit as st
from PIL import Image
from streamlit.runtime.uploaded_file_manager import UploadedFile

from quickedit.config import Settings
from quickedit.schemas import Canvas, ExportOutput, format_hex_color
from quickedit.ui.state import DEFAULTS, WidgetKey


# ---------------------------------------------------------------------------
# Upload
# ---------------------------------------------------------------------------


def render_uploader(settings: Settings) -> UploadedFile | None:
    """Render the image upload widget.

    Args:
        settings: Application settings (used for allowed formats and
            max file size).

    Returns:
        The uploaded file, or ``None`` if nothing was uploaded.
    """
    return st.file_uploader(
        "Upload an image",
        type=settings.supported_formats,
        help=f"Max {settings.max_upload_mb:.0f} MB. JPG, PNG, WebP, GIF or BMP.",
    )


# ---------------------------------------------------------------------------
# Sidebar controls
# ---------------------------------------------------------------------------


def _seed(key: WidgetKey, default: Any) -> str:
    """Give a keyed widget its default once, via session state only.

    Widgets whose value can also be written by callbacks must not pass
    ``value=`` as well, or Streamlit warns about the double source.
    """
    st.session_state.setdefault(key.value, default)
    return key.value


def _percent_slider(
    label: str,
    key: WidgetKey,
    bounds: tuple[float, float],
    default: float,
) -> float:
    lo, hi = bounds
    return st.sidebar.slider(
        label,
        min_value=lo,
        max_value=hi,
        step=1.0,
        format="%.0f%%",
        key=_seed(key, default),
    )


def _set_border_color(hex_color: str) -> None:
    st.session_state[WidgetKey.BORDER_COLOR.value] = hex_color


def render_sidebar_controls(settings: Settings) -> dict[str, Any]:
    """Render the frame and colour controls in the sidebar.

    Each control maps onto exactly one ``RenderParameters`` field.
    Preset buttons replace the field value wholesale.

    Args:
        settings: Application settings (presets and slider ranges).

    Returns:
        A mapping of ``RenderParameters`` field names to control values.
    """
    st.sidebar.header("Frame")

    border_size = st.sidebar.slider(
        "Border size",
        min_value=0.0,
        max_value=settings.border_size_max,
        step=0.5,
        format="%.1f%%",
        help="Percentage of the shortest side after aspect-ratio padding.",
        key=_seed(WidgetKey.BORDER_SIZE, DEFAULTS.border_size_percent),
    )

    border_color = st.sidebar.color_picker(
        "Border colour",
        key=_seed(WidgetKey.BORDER_COLOR, format_hex_color(DEFAULTS.border_color)),
    )
    preset_cols = st.sidebar.columns(len(settings.border_color_presets))
    for col, (label, hex_color) in zip(
        preset_cols, settings.border_color_presets.items()
    ):
        col.button(
            label,
            on_click=_set_border_color,
            args=(hex_color,),
            use_container_width=True,
            key=f"border_preset_{label}",
        )

    ratio_labels = list(settings.aspect_ratio_presets)
    ratio_label = st.sidebar.radio(
        "Aspect ratio",
        options=ratio_labels,
        index=0,
        horizontal=True,
        key=WidgetKey.ASPECT_RATIO.value,
    )

    sharpen_labels = list(settings.sharpen_presets)
    default_sharpen = next(
        (
            i
            for i, value in enumerate(settings.sharpen_presets.values())
            if value == DEFAULTS.sharpen_strength
        ),
        0,
    )
    sharpen_label = st.sidebar.radio(
        "Sharpen",
        options=sharpen_labels,
        index=default_sharpen,
        horizontal=True,
        key=WidgetKey.SHARPEN.value,
    )

    st.sidebar.header("Colour")

    brightness = _percent_slider(
        "Brightness", WidgetKey.BRIGHTNESS, settings.brightness_range, DEFAULTS.brightness
    )
    contrast = _percent_slider(
        "Contrast", WidgetKey.CONTRAST, settings.contrast_range, DEFAULTS.contrast
    )
    saturate = _percent_slider(
        "Saturation", WidgetKey.SATURATE, settings.saturate_range, DEFAULTS.saturate
    )
    grayscale = _percent_slider(
        "Grayscale", WidgetKey.GRAYSCALE, (0.0, 100.0), DEFAULTS.grayscale
    )
    sepia = _percent_slider("Sepia", WidgetKey.SEPIA, (0.0, 100.0), DEFAULTS.sepia)

    return {
        "border_size_percent": border_size,
        "border_color": border_color,
        "aspect_ratio": settings.aspect_ratio_presets[ratio_label],
        "sharpen_strength": settings.sharpen_presets[sharpen_label],
        "brightness": brightness,
        "contrast": contrast,
        "saturate": saturate,
        "grayscale": grayscale,
        "sepia": sepia,
    }


def render_reset_button(on_reset: Callable[[], None]) -> None:
    """Render the sidebar button that restores every control to default.

    Args:
        on_reset: Callback run before the next script run, so widget
            state can be cleared before the widgets are rebuilt.
    """
    st.sidebar.divider()
    st.sidebar.button("Reset all", on_click=on_reset, use_container_width=True)


# ---------------------------------------------------------------------------
# Sidebar original preview
# ---------------------------------------------------------------------------


def render_sidebar_preview(image: Image.Image) -> None:
    """Display a small preview of the original image in the sidebar.

    Args:
        image: The uploaded source image.
    """
    st.sidebar.divider()
    st.sidebar.image(image, caption="Original", use_container_width=True)


# ---------------------------------------------------------------------------
# Main result area
# ---------------------------------------------------------------------------


def render_canvas(canvas: Canvas) -> None:
    """Display the composited canvas centred on the page.

    Args:
        canvas: The latest render.
    """
    _, center, _ = st.columns([1, 3, 1])
    with center:
        st.image(
            canvas.image,
            caption=f"{canvas.width} × {canvas.height} px",
            use_container_width=True,
        )


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------


def render_export_controls(canvas_width: int) -> dict[str, Any]:
    """Render the output width cap and JPEG quality controls.

    Args:
        canvas_width: Width of the current canvas, used as the initial
            value of the width input.

    Returns:
        ``export_quality`` and ``output_width`` values for the session.
    """
    _, center, _ = st.columns([1, 3, 1])
    with center:
        col_width, col_quality = st.columns(2)

        with col_width:
            limit = st.checkbox(
                "Limit output width",
                value=DEFAULTS.output_width is not None,
                key=WidgetKey.LIMIT_WIDTH.value,
            )
            width = st.number_input(
                "Output width (px)",
                min_value=1,
                value=canvas_width,
                step=1,
                disabled=not limit,
                help="Larger than the canvas means no resizing.",
                key=WidgetKey.OUTPUT_WIDTH.value,
            )

        with col_quality:
            quality = st.slider(
                "JPEG quality",
                min_value=1,
                max_value=100,
                value=DEFAULTS.export_quality,
                step=1,
                format="%d%%",
                key=WidgetKey.QUALITY.value,
            )

    return {
        "export_quality": quality,
        "output_width": int(width) if limit else None,
    }


def render_download(export_output: ExportOutput) -> None:
    """Render the download button for an encoded canvas.

    Args:
        export_output: The encoded file to offer.
    """
    width, height = export_output.size
    _, center, _ = st.columns([1, 3, 1])
    with center:
        st.download_button(
            label=f"⬇ Download JPEG ({width} × {height})",
            data=export_output.data,
            file_name=export_output.filename,
            mime=export_output.mime_type,
            use_container_width=True,
        )
