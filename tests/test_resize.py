# tests/test_resize.py
"""
Anchor-preserving resize of rotated objects and the axis-aligned variant.
"""

from __future__ import annotations

import pytest

from snapcanvas.core.resize import (
    anchor_for_handle,
    calculate_resize_bounds,
    driver_dimension,
    init_resize_state,
    resize_bounds,
    resized_dimensions,
    rotated_anchor_position,
)
from snapcanvas.core.geometry import corners, rotate_delta
from snapcanvas.core.types import Bounds, Point, RotatedBounds


def test_anchor_for_handle() -> None:
    assert anchor_for_handle("se") == Point(0.0, 0.0)
    assert anchor_for_handle("n") == Point(0.5, 1.0)
    with pytest.raises(ValueError):
        anchor_for_handle("middle")  # type: ignore[arg-type]


def test_driver_dimension() -> None:
    assert driver_dimension("e", 0, 100, 10, 10) == "width"
    assert driver_dimension("s", 100, 0, 10, 10) == "height"
    assert driver_dimension("se", 5, 20, 100, 50) == "height"
    assert driver_dimension("se", 30, 5, 100, 50) == "width"
    # equal proportional change goes to width
    assert driver_dimension("nw", 10, 5, 100, 50) == "width"


def test_resized_dimensions() -> None:
    assert resized_dimensions("se", 100, 50, 10, 5) == (110, 55)
    assert resized_dimensions("nw", 100, 50, 10, 5) == (90, 45)
    assert resized_dimensions("e", 100, 50, 10, 5) == (110, 50)


def test_unrotated_east_resize() -> None:
    state = init_resize_state((100, 50), "e", Bounds(0, 0, 100, 100), (0.5, 0.5), 0)
    assert calculate_resize_bounds(state, (147, 50)) == Bounds(0, 0, 147, 100)


def test_unrotated_west_resize_keeps_right_edge() -> None:
    state = init_resize_state((0, 50), "w", Bounds(0, 0, 100, 100), (0.5, 0.5), 0)
    out = calculate_resize_bounds(state, (20, 50))
    assert out.x == pytest.approx(20)
    assert out.width == pytest.approx(80)
    assert out.right == pytest.approx(100)


def test_rotated_resize_keeps_anchor_fixed() -> None:
    b = Bounds(0, 0, 100, 50)
    state = init_resize_state((0, 0), "se", b, (0.5, 0.5), 90)
    out = calculate_resize_bounds(state, (0, 20))
    assert out.width == pytest.approx(120)
    assert out.height == pytest.approx(50)
    anchor = rotated_anchor_position(out, state.anchor, state.pivot, state.matrix)
    assert anchor.x == pytest.approx(state.anchor_screen.x)
    assert anchor.y == pytest.approx(state.anchor_screen.y)
    assert state.anchor_screen.x == pytest.approx(75)
    assert state.anchor_screen.y == pytest.approx(-25)


def test_aspect_ratio_locked() -> None:
    state = init_resize_state((100, 25), "e", Bounds(0, 0, 100, 50), (0.5, 0.5), 0)
    out = calculate_resize_bounds(state, (150, 25), aspect_ratio=2.0)
    assert out.width == pytest.approx(150)
    assert out.height == pytest.approx(75)


def test_minimum_size() -> None:
    state = init_resize_state((0, 0), "nw", Bounds(0, 0, 100, 50), (0.5, 0.5), 0)
    out = calculate_resize_bounds(state, (300, 300))
    assert out.width == 10 and out.height == 10
    assert out.right == pytest.approx(100)
    assert out.bottom == pytest.approx(50)


def test_resize_bounds_axis_aligned() -> None:
    b = Bounds(0, 0, 100, 100)
    assert resize_bounds(b, "nw", 20, 30) == Bounds(20, 30, 80, 70)
    assert resize_bounds(b, "se", 5, -10) == Bounds(0, 0, 105, 90)
    clamped = resize_bounds(b, "w", 150, 0)
    assert clamped == Bounds(99, 0, 1, 100)
    with pytest.raises(ValueError):
        resize_bounds(b, "q", 0, 0)  # type: ignore[arg-type]


@pytest.mark.parametrize("pivot", [(0.5, 0.5), (0.2, 0.8)])
def test_se_resize_at_30_degrees_keeps_nw_corner(pivot: tuple[float, float]) -> None:
    b = Bounds(40, 60, 100, 50)
    state = init_resize_state((0, 0), "se", b, pivot, 30)
    screen = rotate_delta(100, 0, state.matrix)
    out = calculate_resize_bounds(state, screen)
    assert out.width == pytest.approx(200)
    assert out.height == pytest.approx(50)
    nw_before = corners(RotatedBounds.from_bounds(b, 30, pivot))[0]
    nw_after = corners(RotatedBounds.from_bounds(out, 30, pivot))[0]
    assert nw_after.x == pytest.approx(nw_before.x)
    assert nw_after.y == pytest.approx(nw_before.y)
