"""QuickEdit Studio — Streamlit application entry point.

Launch with::

    streamlit run src/quickedit/ui/app.py
"""

from __future__ import annotations

import logging

import streamlit as st

from quickedit.config import Settings
from quickedit.core.loader import load_source_image
from quickedit.errors import ExportError, InvalidParameterError, UnsupportedInputError
from quickedit.ui.state import (
    StateKey,
    clear_upload_state,
    get_editor_session,
    get_state,
    reset_widget_state,
    set_state,
)
from quickedit.ui.widgets import (
    render_canvas,
    render_download,
    render_export_controls,
    render_reset_button,
    render_sidebar_controls,
    render_sidebar_preview,
    render_uploader,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Page configuration (must be called first)
# ---------------------------------------------------------------------------

st.set_page_config(
    page_title="QuickEdit Studio",
    page_icon="🖼️",
    layout="wide",
    initial_sidebar_state="expanded",
)


# ---------------------------------------------------------------------------
# Cached resources
# ---------------------------------------------------------------------------


@st.cache_resource(show_spinner=False)
def _get_settings() -> Settings:
    """Load settings and configure logging once per process."""
    settings = Settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return settings


def _on_reset() -> None:
    """Restore all controls and parameters to their defaults."""
    reset_widget_state()
    get_editor_session(_get_settings()).reset()


# ---------------------------------------------------------------------------
# Main application
# ---------------------------------------------------------------------------


def main() -> None:
    """Run the QuickEdit Studio Streamlit application."""
    settings = _get_settings()
    session = get_editor_session(settings)

    # ---- Header ----
    st.title("🖼️ QuickEdit Studio")
    st.caption("Borders, aspect ratios, colour filters and sharpening.")

    # ---- Upload ----
    uploaded = render_uploader(settings)

    if uploaded is None:
        st.info("Upload an image to get started.", icon="📷")
        clear_upload_state()
        return

    token = (uploaded.name, uploaded.size)
    if get_state(StateKey.UPLOAD_TOKEN) != token:
        try:
            source = load_source_image(uploaded.getvalue(), settings)
            session.load(source)
        except (UnsupportedInputError, InvalidParameterError) as exc:
            st.error(f"Cannot open this file: {exc}")
            return
        reset_widget_state()
        set_state(StateKey.UPLOAD_TOKEN, token)

    # ---- Sidebar: controls ----
    changes = render_sidebar_controls(settings)
    render_reset_button(_on_reset)
    render_sidebar_preview(session.source.image)

    # ---- Render ----
    try:
        session.update(**changes)
    except InvalidParameterError as exc:
        # The previous canvas stays on screen.
        st.warning(f"Invalid setting: {exc}")

    canvas = session.canvas
    if canvas is None:
        return

    st.divider()
    render_canvas(canvas)

    # ---- Export ----
    st.divider()
    export_changes = render_export_controls(canvas.width)
    try:
        session.update(**export_changes)
        export_output = session.export(settings)
    except InvalidParameterError as exc:
        st.warning(f"Invalid export setting: {exc}")
        return
    except ExportError as exc:
        logger.exception("Export failed")
        st.error(f"Export failed: {exc}")
        return

    render_download(export_output)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    main()
