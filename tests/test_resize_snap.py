# tests/test_resize_snap.py
"""
Resize snapping: moving edges snap to alignment targets, then width/height
match existing object sizes.
"""

from __future__ import annotations

import logging

import pytest

from snapcanvas.core import snapping
from snapcanvas.core.error_codes import SNAPPING_DISABLED
from snapcanvas.core.snapping import apply_edge_snap, compute_resize_snap, resizing_edges
from snapcanvas.core.types import Bounds, Point, ResizeSnapContext, RotatedBounds, SnapConfiguration, SnapObject

VIEW = Bounds(0, 0, 1000, 1000)


def _context(current: Bounds, handle: str, rotation: float = 0.0) -> ResizeSnapContext:
    return ResizeSnapContext(
        original_bounds=RotatedBounds(0, 0, 100, 100, rotation),
        current_bounds=RotatedBounds.from_bounds(current, rotation),
        object_id="me",
        handle=handle,  # type: ignore[arg-type]
    )


def test_width_matches_existing_object() -> None:
    objects = [SnapObject("me", Bounds(0, 0, 100, 100)), SnapObject("b", Bounds(200, 300, 150, 60))]
    config = SnapConfiguration(snap_to_grid=False)
    result = compute_resize_snap(_context(Bounds(0, 0, 147, 100), "e"), objects, VIEW, config)
    assert result.snapped_bounds == Bounds(0, 0, 150, 100)
    sizes = [s for s in result.active_snaps if s.matched_size is not None]
    assert len(sizes) == 2
    assert sizes[0].source_object_id == "b"
    assert all(s.matched_size == 150 for s in sizes)


def test_width_match_from_left_keeps_right_edge() -> None:
    objects = [SnapObject("b", Bounds(500, 500, 150, 60))]
    config = SnapConfiguration(snap_to_grid=False)
    result = compute_resize_snap(_context(Bounds(53, 0, 147, 100), "w"), objects, VIEW, config)
    assert result.snapped_bounds.width == 150
    assert result.snapped_bounds.right == pytest.approx(200)


def test_left_edge_snaps_to_page_boundary() -> None:
    objects = [SnapObject("b", Bounds(0, 200, 50, 50))]
    config = SnapConfiguration(snap_to_grid=False, snap_to_sizes=False)
    result = compute_resize_snap(_context(Bounds(3, 0, 97, 100), "w"), objects, VIEW, config)
    assert result.snapped_bounds == Bounds(0, 0, 100, 100)
    assert result.active_snaps[0].snap_edge == "left"
    assert len(result.candidates) >= 2


def test_corner_handle_snaps_both_edges() -> None:
    objects = [SnapObject("b", Bounds(300, 300, 40, 40))]
    config = SnapConfiguration(snap_to_grid=False, snap_to_sizes=False)
    result = compute_resize_snap(_context(Bounds(0, 0, 297, 302), "se"), objects, VIEW, config)
    assert result.snapped_bounds == Bounds(0, 0, 300, 300)
    assert {s.snap_edge for s in result.active_snaps} == {"right", "bottom"}


def test_resize_disabled() -> None:
    current = Bounds(0, 0, 147, 100)
    result = compute_resize_snap(_context(current, "e"), [], VIEW, SnapConfiguration(enabled=False))
    assert result.snapped_bounds == current
    assert result.warnings == [SNAPPING_DISABLED]


def test_apply_edge_snap() -> None:
    b = Bounds(10, 10, 100, 50)
    assert apply_edge_snap(b, "left", -5) == Bounds(5, 10, 105, 50)
    assert apply_edge_snap(b, "right", 5) == Bounds(10, 10, 105, 50)
    assert apply_edge_snap(b, "top", 2) == Bounds(10, 12, 100, 48)
    assert apply_edge_snap(b, "bottom", -10) == Bounds(10, 10, 100, 40)


def test_resizing_edges_unknown_handle() -> None:
    assert resizing_edges("nw") == (("top", "y"), ("left", "x"))
    with pytest.raises(ValueError):
        resizing_edges("x")  # type: ignore[arg-type]


def test_corner_handle_guides_span_both_objects() -> None:
    objects = [SnapObject("b", Bounds(300, 300, 40, 40))]
    config = SnapConfiguration(snap_to_grid=False, snap_to_sizes=False)
    result = compute_resize_snap(_context(Bounds(0, 0, 297, 302), "se"), objects, VIEW, config)
    guides = {s.snap_edge: (s.guide_start, s.guide_end) for s in result.active_snaps}
    assert guides["right"] == (Point(300, 0), Point(300, 340))
    assert guides["bottom"] == (Point(0, 300), Point(340, 300))


def test_rotated_object_snaps_its_visible_edge() -> None:
    # 100x50 turned 90 degrees about its center covers x 25..75 on screen
    objects = [SnapObject("t", Bounds(78, 300, 40, 40))]
    config = SnapConfiguration(snap_to_grid=False, snap_to_sizes=False)
    result = compute_resize_snap(_context(Bounds(0, 0, 100, 50), "e", rotation=90), objects, VIEW, config)
    assert result.snapped_bounds.x == pytest.approx(0)
    assert result.snapped_bounds.width == pytest.approx(103)
    assert result.snapped_bounds.height == pytest.approx(50)
    snap = result.active_snaps[0]
    assert snap.snap_edge == "right"
    assert snap.target.value == 78
    assert snap.source_object_id == "t"
    assert snap.distance == pytest.approx(3)
    assert snap.guide_start.x == 78 and snap.guide_end.x == 78
    assert snap.guide_start.y == pytest.approx(-25)
    assert snap.guide_end.y == pytest.approx(340)


def test_rotated_object_ignores_unrotated_edge() -> None:
    # the unrotated right edge (100) is 2px from the target center (98) but hidden on screen
    objects = [SnapObject("t", Bounds(78, 300, 40, 40))]
    config = SnapConfiguration(snap_to_grid=False, snap_to_sizes=False)
    result = compute_resize_snap(_context(Bounds(0, 0, 100, 50), "e", rotation=90), objects, VIEW, config)
    assert all(c.target.value != 98 for c in result.candidates)


def test_resize_winner_logged_when_debugging(monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture) -> None:
    monkeypatch.setattr(snapping, "SNAP_DEBUG", True)
    caplog.set_level(logging.DEBUG, logger="snapcanvas.core.snapping")
    objects = [SnapObject("b", Bounds(300, 300, 40, 40))]
    config = SnapConfiguration(snap_to_grid=False, snap_to_sizes=False)
    compute_resize_snap(_context(Bounds(0, 0, 297, 100), "e"), objects, VIEW, config)
    assert any("me resize snap right edge x=300.00" in r.getMessage() for r in caplog.records)
