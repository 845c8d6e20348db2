# tests/test_geometry.py
"""
Deterministic tests for geometry: rotation, corners, AABB, snap points,
grab point and bounds algebra.
"""

from __future__ import annotations

import math

import pytest

from snapcanvas.core.geometry import (
    aabb,
    bounds_center,
    bounds_contains,
    bounds_from_points,
    bounds_intersect,
    compute_grab_point,
    corners,
    distance_to_edge,
    expand_bounds,
    handle_positions,
    normalize_angle,
    object_aabb,
    point_in_bounds,
    rotate_point,
    rotation_matrix,
    rotate_point_with_matrix,
    rotated_edges,
    snap_points,
    to_polygon,
    union_all_bounds,
    unrotate_delta,
    rotate_delta,
    unrotate_point_with_matrix,
)
from snapcanvas.core.types import Bounds, Point, RotatedBounds, SnapObject


def test_normalize_angle() -> None:
    assert normalize_angle(0) == 0
    assert normalize_angle(360) == 0
    assert normalize_angle(-90) == 270
    assert normalize_angle(725) == pytest.approx(5)


def test_rotated_bounds_normalizes_rotation() -> None:
    assert RotatedBounds(0, 0, 10, 10, rotation=-90).rotation == 270
    assert RotatedBounds(0, 0, 10, 10, rotation=720).rotation == 0
    assert RotatedBounds(0, 0, 10, 10).pivot == Point(0.5, 0.5)


def test_rotate_point_clockwise_in_screen_space() -> None:
    p = rotate_point((10, 0), (0, 0), 90)
    assert p.x == pytest.approx(0, abs=1e-9)
    assert p.y == pytest.approx(10)


def test_matrix_roundtrip() -> None:
    m = rotation_matrix(33)
    p = rotate_point_with_matrix((7, -3), (2, 2), m)
    back = unrotate_point_with_matrix(p, (2, 2), m)
    assert back.x == pytest.approx(7)
    assert back.y == pytest.approx(-3)
    d = unrotate_delta(*rotate_delta(4, 5, m), m)
    assert d.x == pytest.approx(4)
    assert d.y == pytest.approx(5)


def test_corners_unrotated() -> None:
    rb = RotatedBounds(1, 2, 10, 5)
    assert corners(rb) == (Point(1, 2), Point(11, 2), Point(11, 7), Point(1, 7))
    assert aabb(rb) == Bounds(1, 2, 10, 5)


def test_corners_rotated_90_about_center() -> None:
    rb = RotatedBounds(0, 0, 20, 10, rotation=90)
    tl = corners(rb)[0]
    assert tl.x == pytest.approx(15)
    assert tl.y == pytest.approx(-5)
    box = aabb(rb)
    assert box.x == pytest.approx(5)
    assert box.y == pytest.approx(-5)
    assert box.width == pytest.approx(10)
    assert box.height == pytest.approx(20)


def test_snap_points_pivot_independent_of_rotation() -> None:
    rb = RotatedBounds(0, 0, 20, 10, rotation=37, pivot=(0.25, 0.0))
    sp = snap_points(rb)
    assert sp.pivot_x == pytest.approx(5)
    assert sp.pivot_y == pytest.approx(0)
    box = aabb(rb)
    assert sp.left == box.left and sp.right == box.right
    assert sp.center_x == pytest.approx(box.center_x)


def test_rotated_aabb_contains_corners() -> None:
    rb = RotatedBounds(30, 40, 50, 20, rotation=123, pivot=(0.1, 0.9))
    box = aabb(rb)
    for c in corners(rb):
        assert box.left - 1e-9 <= c.x <= box.right + 1e-9
        assert box.top - 1e-9 <= c.y <= box.bottom + 1e-9


def test_to_polygon_area_preserved_under_rotation() -> None:
    poly = to_polygon(RotatedBounds(0, 0, 30, 10, rotation=45))
    assert poly.area == pytest.approx(300)


def test_distance_to_edge() -> None:
    edge = (Point(0, 0), Point(10, 0))
    assert distance_to_edge((5, 5), edge) == pytest.approx(5)
    assert distance_to_edge((13, 4), edge) == pytest.approx(5)
    assert distance_to_edge((3, 4), (Point(0, 0), Point(0, 0))) == pytest.approx(5)


def test_compute_grab_point() -> None:
    b = Bounds(0, 0, 100, 50)
    assert compute_grab_point((25, 10), b) == Point(0.25, 0.2)
    assert compute_grab_point((500, -5), b) == Point(1.0, 0.0)
    assert compute_grab_point((5, 5), Bounds(0, 0, 0, 10)) == Point(0.5, 0.5)


def test_bounds_algebra() -> None:
    a = Bounds(0, 0, 10, 10)
    b = Bounds(10, 0, 5, 5)
    assert bounds_intersect(a, b)
    assert not bounds_intersect(a, Bounds(10.5, 0, 5, 5))
    assert union_all_bounds([a, b, Bounds(-5, 20, 1, 1)]) == Bounds(-5, 0, 20, 21)
    assert union_all_bounds([]) is None
    assert expand_bounds(a, 2) == Bounds(-2, -2, 14, 14)
    assert bounds_contains(a, Bounds(2, 2, 8, 8))
    assert not bounds_contains(a, Bounds(2, 2, 9, 8))
    assert point_in_bounds((10, 10), a)
    assert bounds_from_points((10, 5), (2, 8)) == Bounds(2, 5, 8, 3)


def test_handle_positions() -> None:
    handles = dict(handle_positions(Bounds(0, 0, 20, 10)))
    assert len(handles) == 8
    assert handles["se"] == Point(20, 10)
    assert handles["n"] == Point(10, 0)
    assert math.isclose(handles["w"].y, 5)


@pytest.mark.parametrize("angle", [0, 17, 90, 135, 211, 359])
def test_rotation_roundtrip(angle: float) -> None:
    center = (12.5, -3.0)
    p = rotate_point(rotate_point((40, 7), center, angle), center, -angle)
    assert p.x == pytest.approx(40)
    assert p.y == pytest.approx(7)


@pytest.mark.parametrize("angle", [10, 45, 90, 200])
def test_aabb_edges_touch_corners(angle: float) -> None:
    rb = RotatedBounds(5, 5, 60, 20, rotation=angle, pivot=(0.3, 0.7))
    box = aabb(rb)
    pts = corners(rb)
    assert min(abs(p.x - box.left) for p in pts) == pytest.approx(0, abs=1e-9)
    assert min(abs(p.x - box.right) for p in pts) == pytest.approx(0, abs=1e-9)
    assert min(abs(p.y - box.top) for p in pts) == pytest.approx(0, abs=1e-9)
    assert min(abs(p.y - box.bottom) for p in pts) == pytest.approx(0, abs=1e-9)


def test_object_aabb_uses_rotation_and_pivot() -> None:
    obj = SnapObject("o", Bounds(0, 0, 40, 10), rotation=90, pivot=(0.0, 0.0))
    box = object_aabb(obj)
    assert box.x == pytest.approx(-10)
    assert box.y == pytest.approx(0)
    assert box.width == pytest.approx(10)
    assert box.height == pytest.approx(40)
    assert bounds_center(box) == box.center
    assert bounds_center(Bounds(10, 20, 30, 40)) == Point(25, 40)


def test_rotated_edges_follow_corners() -> None:
    rb = RotatedBounds(0, 0, 20, 10, rotation=30)
    edges = rotated_edges(rb)
    tl, tr, br, bl = corners(rb)
    assert edges == [(tl, tr), (tr, br), (br, bl), (bl, tl)]
    for a, b in edges[::2]:
        assert math.hypot(b.x - a.x, b.y - a.y) == pytest.approx(20)
    for a, b in edges[1::2]:
        assert math.hypot(b.x - a.x, b.y - a.y) == pytest.approx(10)
