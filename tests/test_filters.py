"""Tests for quickedit.core.filters."""

import numpy as np
import pytest
from PIL import Image

from quickedit.core.filters import (
    FILTER_ORDER,
    ColorFilter,
    FilterKind,
    apply_filter_chain,
    build_filter_chain,
)
from quickedit.schemas import RenderParameters


def _solid(rgba: tuple[int, int, int, int], size: tuple[int, int] = (4, 3)) -> Image.Image:
    return Image.new("RGBA", size, rgba)


def _pixel(image: Image.Image) -> tuple[int, ...]:
    return tuple(int(v) for v in np.array(image)[0, 0])


# ---------------------------------------------------------------------------
# build_filter_chain
# ---------------------------------------------------------------------------


class TestBuildFilterChain:
    """Validate chain derivation from parameters."""

    def test_fixed_order(self) -> None:
        chain = build_filter_chain(RenderParameters())
        assert [stage.kind for stage in chain] == list(FILTER_ORDER)
        assert list(FILTER_ORDER) == [
            FilterKind.BRIGHTNESS,
            FilterKind.CONTRAST,
            FilterKind.SATURATE,
            FilterKind.GRAYSCALE,
            FilterKind.SEPIA,
        ]

    def test_defaults_are_identity(self) -> None:
        chain = build_filter_chain(RenderParameters())
        assert all(stage.is_identity for stage in chain)

    def test_percent_to_fraction(self) -> None:
        chain = build_filter_chain(RenderParameters(brightness=150, sepia=40))
        amounts = {stage.kind: stage.amount for stage in chain}
        assert amounts[FilterKind.BRIGHTNESS] == pytest.approx(1.5)
        assert amounts[FilterKind.SEPIA] == pytest.approx(0.4)

    def test_out_of_domain_values_are_clamped(self) -> None:
        params = RenderParameters.model_construct(grayscale=150.0, contrast=-20.0)
        amounts = {stage.kind: stage.amount for stage in build_filter_chain(params)}
        assert amounts[FilterKind.GRAYSCALE] == 1.0
        assert amounts[FilterKind.CONTRAST] == 0.0


# ---------------------------------------------------------------------------
# apply_filter_chain
# ---------------------------------------------------------------------------


class TestApplyFilterChain:
    """Validate per-filter behaviour and chain semantics."""

    def test_neutral_chain_returns_same_object(self, source) -> None:
        chain = build_filter_chain(RenderParameters())
        assert apply_filter_chain(source.image, chain) is source.image

    def test_brightness_halves(self) -> None:
        chain = [ColorFilter(kind=FilterKind.BRIGHTNESS, amount=0.5)]
        out = apply_filter_chain(_solid((200, 100, 50, 255)), chain)
        assert _pixel(out) == (100, 50, 25, 255)

    def test_brightness_clamps_at_white(self) -> None:
        chain = [ColorFilter(kind=FilterKind.BRIGHTNESS, amount=2.0)]
        out = apply_filter_chain(_solid((200, 100, 50, 255)), chain)
        assert _pixel(out) == (255, 200, 100, 255)

    def test_zero_contrast_is_mid_grey(self) -> None:
        chain = [ColorFilter(kind=FilterKind.CONTRAST, amount=0.0)]
        out = apply_filter_chain(_solid((10, 200, 90, 255)), chain)
        assert _pixel(out) == (128, 128, 128, 255)

    def test_zero_saturation_is_grey(self) -> None:
        chain = [ColorFilter(kind=FilterKind.SATURATE, amount=0.0)]
        r, g, b, _ = _pixel(apply_filter_chain(_solid((220, 40, 90, 255)), chain))
        assert abs(r - g) <= 1 and abs(g - b) <= 1

    def test_full_grayscale_is_grey(self) -> None:
        chain = [ColorFilter(kind=FilterKind.GRAYSCALE, amount=1.0)]
        r, g, b, _ = _pixel(apply_filter_chain(_solid((220, 40, 90, 255)), chain))
        assert abs(r - g) <= 1 and abs(g - b) <= 1

    def test_full_sepia_on_white(self) -> None:
        chain = [ColorFilter(kind=FilterKind.SEPIA, amount=1.0)]
        out = apply_filter_chain(_solid((255, 255, 255, 255)), chain)
        assert _pixel(out) == (255, 255, 239, 255)

    def test_partial_grayscale_is_between(self) -> None:
        original = _solid((220, 40, 90, 255))
        half = apply_filter_chain(
            original, [ColorFilter(kind=FilterKind.GRAYSCALE, amount=0.5)]
        )
        full = apply_filter_chain(
            original, [ColorFilter(kind=FilterKind.GRAYSCALE, amount=1.0)]
        )
        assert _pixel(full)[0] < _pixel(half)[0] < 220

    def test_alpha_is_preserved(self) -> None:
        chain = build_filter_chain(RenderParameters(brightness=40, sepia=70))
        out = apply_filter_chain(_solid((90, 120, 30, 77)), chain)
        assert _pixel(out)[3] == 77

    def test_stage_outputs_are_clamped_in_order(self) -> None:
        """Brightness saturates before contrast sees the pixel."""
        params = RenderParameters(brightness=200, contrast=0)
        out = apply_filter_chain(
            _solid((200, 20, 90, 255)), build_filter_chain(params)
        )
        assert _pixel(out) == (128, 128, 128, 255)

    def test_does_not_mutate_input(self, source) -> None:
        before = np.array(source.image).copy()
        apply_filter_chain(
            source.image, build_filter_chain(RenderParameters(sepia=100))
        )
        np.testing.assert_array_equal(np.array(source.image), before)

    def test_output_mode_and_size(self, source) -> None:
        out = apply_filter_chain(
            source.image, build_filter_chain(RenderParameters(saturate=180))
        )
        assert out.mode == "RGBA"
        assert out.size == source.image.size
