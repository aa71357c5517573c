"""Streamlit session state management.

Centralises all ``st.session_state`` keys and provides typed accessors
so that the rest of the UI layer never uses raw string keys.
"""

from __future__ import annotations

from enum import Enum

import streamlit as st

from quickedit.config import Settings
from quickedit.core.session import EditorSession
from quickedit.schemas import RenderParameters


class StateKey(str, Enum):
    """All non-widget session state keys used by the application."""

    EDITOR_SESSION = "editor_session"
    UPLOAD_TOKEN = "upload_token"


class WidgetKey(str, Enum):
    """Keys of every control that maps onto a ``RenderParameters`` field."""

    BORDER_SIZE = "border_size_percent"
    BORDER_COLOR = "border_color"
    ASPECT_RATIO = "aspect_ratio"
    SHARPEN = "sharpen_strength"
    BRIGHTNESS = "brightness"
    CONTRAST = "contrast"
    SATURATE = "saturate"
    GRAYSCALE = "grayscale"
    SEPIA = "sepia"
    LIMIT_WIDTH = "limit_output_width"
    OUTPUT_WIDTH = "output_width"
    QUALITY = "export_quality"


# Control defaults come straight from the parameter model.
DEFAULTS = RenderParameters()


def get_state(key: StateKey, default=None):
    """Retrieve a value from session state.

    Args:
        key: The state key to look up.
        default: Fallback value if the key is absent.

    Returns:
        The stored value or *default*.
    """
    return st.session_state.get(key.value, default)


def set_state(key: StateKey, value) -> None:
    """Store a value in session state."""
    st.session_state[key.value] = value


def get_editor_session(settings: Settings) -> EditorSession:
    """Return this browser session's ``EditorSession``, creating it once."""
    session = get_state(StateKey.EDITOR_SESSION)
    if session is None:
        session = EditorSession(max_canvas_px=settings.max_canvas_px)
        set_state(StateKey.EDITOR_SESSION, session)
    return session


def reset_widget_state() -> None:
    """Drop every control value so widgets fall back to their defaults.

    Must run before the widgets are instantiated in a script run (i.e.
    from a callback or at the top of the run).
    """
    for key in WidgetKey:
        st.session_state.pop(key.value, None)


def clear_upload_state() -> None:
    """Forget the current upload so the next one is loaded fresh."""
    st.session_state.pop(StateKey.UPLOAD_TOKEN.value, None)
