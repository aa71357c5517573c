"""Tests for quickedit.core.session."""

import threading
from unittest.mock import patch

import pytest

from quickedit.config import Settings
from quickedit.core.compositor import render
from quickedit.core.session import EditorSession
from quickedit.errors import ExportError, InvalidParameterError
from quickedit.schemas import Ratio, RenderParameters, SourceImage


@pytest.fixture
def session(landscape_source: SourceImage) -> EditorSession:
    editor = EditorSession()
    editor.load(landscape_source)
    return editor


class TestLoad:
    def test_empty_session(self) -> None:
        editor = EditorSession()
        assert editor.source is None
        assert editor.canvas is None
        assert editor.generation == 0

    def test_load_renders_once(self, session: EditorSession) -> None:
        assert session.generation == 1
        assert session.canvas is not None
        assert (session.canvas.width, session.canvas.height) == (400, 300)

    def test_load_resets_parameters(
        self, session: EditorSession, source: SourceImage
    ) -> None:
        session.update(border_size_percent=20, sepia=50)
        session.load(source)
        assert session.params == RenderParameters()


class TestUpdate:
    """Validate the single controlled update path."""

    def test_update_rerenders(self, session: EditorSession) -> None:
        canvas = session.update(aspect_ratio="1/1", border_size_percent=10)
        assert (canvas.width, canvas.height) == (480, 480)
        assert session.generation == 2

    def test_unchanged_params_skip_render(self, session: EditorSession) -> None:
        session.update(border_size_percent=0)
        assert session.generation == 1

    def test_export_only_fields_keep_canvas(self, session: EditorSession) -> None:
        canvas = session.canvas
        session.update(export_quality=50, output_width=100)
        assert session.canvas is canvas
        assert session.generation == 1
        assert session.params.export_quality == 50

    def test_out_of_domain_is_rejected_atomically(
        self, session: EditorSession
    ) -> None:
        canvas = session.canvas
        with pytest.raises(InvalidParameterError):
            session.update(border_size_percent=10, brightness=-1)
        assert session.params == RenderParameters()
        assert session.canvas is canvas

    def test_unknown_field_is_rejected(self, session: EditorSession) -> None:
        with pytest.raises(InvalidParameterError, match="Unknown"):
            session.update(vignette=30)

    def test_malformed_ratio_is_rejected(self, session: EditorSession) -> None:
        with pytest.raises(InvalidParameterError):
            session.update(aspect_ratio="16*9")

    def test_unresolvable_ratio_keeps_previous_state(
        self, session: EditorSession
    ) -> None:
        canvas = session.canvas
        with pytest.raises(InvalidParameterError):
            session.update(aspect_ratio=Ratio(width_units=0, height_units=1))
        assert session.canvas is canvas
        assert session.params == RenderParameters()

    def test_params_view_is_a_copy(self, session: EditorSession) -> None:
        view = session.params
        view.sepia = 90
        assert session.params.sepia == 0

    def test_update_without_source_stores_params(self) -> None:
        editor = EditorSession()
        assert editor.update(sepia=40) is None
        assert editor.params.sepia == 40


class TestReset:
    def test_reset_restores_defaults(self, session: EditorSession) -> None:
        session.update(
            border_size_percent=15,
            border_color="#000000",
            aspect_ratio="9/16",
            export_quality=40,
            sharpen_strength=1.0,
            brightness=150,
            contrast=80,
            saturate=10,
            grayscale=20,
            sepia=30,
            output_width=50,
        )
        session.reset()
        assert session.params == RenderParameters()

    def test_reset_matches_fresh_upload(
        self, session: EditorSession, landscape_source: SourceImage
    ) -> None:
        fresh = EditorSession()
        fresh.load(landscape_source)

        session.update(aspect_ratio="16/9", sepia=60, sharpen_strength=0.6)
        session.reset()
        assert session.canvas.image.tobytes() == fresh.canvas.image.tobytes()

    def test_reset_renders_exactly_once(self, session: EditorSession) -> None:
        session.update(sepia=60)
        with patch("quickedit.core.session.render", wraps=render) as spy:
            session.reset()
        assert spy.call_count == 1

    def test_reset_without_source(self) -> None:
        editor = EditorSession()
        editor.update(sepia=40)
        assert editor.reset() is None
        assert editor.params == RenderParameters()


class TestExport:
    def test_export_before_render_raises(self, settings: Settings) -> None:
        with pytest.raises(ExportError, match="Nothing to export"):
            EditorSession().export(settings)

    def test_export_uses_current_params(
        self, session: EditorSession, settings: Settings
    ) -> None:
        session.update(output_width=100)
        out = session.export(settings)
        assert out.size == (100, 75)

    def test_concurrent_updates_are_serialised(
        self, session: EditorSession
    ) -> None:
        """Parallel callers each commit a full render; none are lost."""
        borders = [2, 4, 6, 8, 10, 12]
        threads = [
            threading.Thread(target=session.update, kwargs={"border_size_percent": b})
            for b in borders
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert session.generation == 1 + len(borders)
        final = session.params.border_size_percent
        assert final in borders
        expected = 400 + 2 * 300 * final / 100
        assert session.canvas.width == pytest.approx(expected, abs=1)


class TestCanvasLimit:
    """Layouts over the canvas limit are rejected like any bad parameter."""

    def test_oversized_update_keeps_previous_state(
        self, landscape_source: SourceImage
    ) -> None:
        editor = EditorSession(max_canvas_px=400 * 400)
        editor.load(landscape_source)
        canvas = editor.canvas

        with pytest.raises(InvalidParameterError, match="pixel limit"):
            editor.update(aspect_ratio="9/16")
        assert editor.canvas is canvas
        assert editor.params == RenderParameters()
        assert editor.generation == 1

    def test_oversized_load_keeps_previous_source(
        self, source: SourceImage, landscape_source: SourceImage
    ) -> None:
        # 100x80 fits, 400x300 does not.
        editor = EditorSession(max_canvas_px=10_000)
        editor.load(source)

        with pytest.raises(InvalidParameterError):
            editor.load(landscape_source)
        assert editor.source is source
        assert editor.canvas.image.size == (100, 80)
        assert editor.generation == 1
