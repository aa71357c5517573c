"""Editing session: the single controlled update path for parameters.

``EditorSession`` owns the current source, the current parameters and
the last committed canvas. All mutations go through ``load``, ``update``
and ``reset``, each of which validates first and then renders once.
A failed update leaves the previous parameters and canvas in place.

Render, update, reset and the snapshot taken by ``export`` are
serialised with a re-entrant lock, and every committed canvas bumps
``generation``.
"""

from __future__ import annotations

import logging
import threading

from pydantic import ValidationError

from quickedit.config import Settings
from quickedit.core.compositor import render
from quickedit.core.export import export_canvas
from quickedit.core.geometry import MAX_CANVAS_PIXELS
from quickedit.errors import ExportError, InvalidParameterError
from quickedit.schemas import Canvas, ExportOutput, RenderParameters, SourceImage

logger = logging.getLogger(__name__)

# Parameters that only affect export, not the rendered canvas.
_EXPORT_ONLY_FIELDS = frozenset({"export_quality", "output_width"})


class EditorSession:
    """Holds one user's source image, parameters and latest canvas.

    Args:
        max_canvas_px: Largest canvas area a render may allocate; larger
            layouts are rejected as invalid parameters.
    """

    def __init__(self, max_canvas_px: int = MAX_CANVAS_PIXELS) -> None:
        self._max_canvas_px = max_canvas_px
        self._lock = threading.RLock()
        self._source: SourceImage | None = None
        self._params = RenderParameters()
        self._canvas: Canvas | None = None
        self._generation = 0

    # -- Read-only views -------------------------------------------------

    @property
    def source(self) -> SourceImage | None:
        return self._source

    @property
    def params(self) -> RenderParameters:
        """A copy of the current parameters (mutating it has no effect)."""
        with self._lock:
            return self._params.model_copy()

    @property
    def canvas(self) -> Canvas | None:
        return self._canvas

    @property
    def generation(self) -> int:
        return self._generation

    # -- Mutations -------------------------------------------------------

    def load(self, source: SourceImage) -> Canvas:
        """Replace the source, reset every parameter and render once.

        Raises:
            InvalidParameterError: If the source cannot be laid out within
                the canvas limit. The previous source is kept.
        """
        with self._lock:
            logger.info("New source %dx%d", source.width, source.height)
            return self._render_locked(RenderParameters(), source)

    def update(self, **changes) -> Canvas | None:
        """Apply one or more field changes atomically and re-render.

        Unchanged parameters skip the render and return the current
        canvas. Changes to export-only fields keep the canvas too.

        Args:
            **changes: ``RenderParameters`` field names and new values.

        Returns:
            The current canvas, or ``None`` if no source is loaded.

        Raises:
            InvalidParameterError: If a field is unknown, a value is out
                of its domain, or the aspect ratio cannot be resolved.
                Parameters and canvas are left untouched.
        """
        with self._lock:
            candidate = self._validated(changes)

            changed = {
                name
                for name in RenderParameters.model_fields
                if getattr(candidate, name) != getattr(self._params, name)
            }
            if self._canvas is not None and changed <= _EXPORT_ONLY_FIELDS:
                self._params = candidate
                return self._canvas

            if self._source is None:
                self._params = candidate
                return None

            return self._render_locked(candidate, self._source)

    def reset(self) -> Canvas | None:
        """Restore every parameter to its default and render once."""
        with self._lock:
            logger.info("Resetting parameters to defaults.")
            if self._source is None:
                self._params = RenderParameters()
                return None
            return self._render_locked(RenderParameters(), self._source)

    def export(self, settings: Settings) -> ExportOutput:
        """Encode the latest canvas with the current export parameters.

        Raises:
            ExportError: If nothing has been rendered yet or encoding fails.
        """
        with self._lock:
            canvas, params = self._canvas, self._params
        if canvas is None:
            raise ExportError("Nothing to export: no image has been rendered.")
        return export_canvas(canvas, params, settings)

    # -- Internals -------------------------------------------------------

    def _validated(self, changes: dict) -> RenderParameters:
        unknown = set(changes) - set(RenderParameters.model_fields)
        if unknown:
            raise InvalidParameterError(
                f"Unknown parameter(s): {sorted(unknown)}"
            )

        data = self._params.model_dump()
        data.update(changes)
        try:
            return RenderParameters.model_validate(data)
        except ValidationError as exc:
            raise InvalidParameterError(str(exc)) from exc

    def _render_locked(
        self, params: RenderParameters, source: SourceImage
    ) -> Canvas:
        canvas = render(source, params, self._max_canvas_px)
        self._source = source
        self._params = params
        self._canvas = canvas
        self._generation += 1
        return canvas
