# snapcanvas/core/geometry.py
"""
Geometry helpers: angle conversion, point rotation, rotated corners, snap points,
axis-aligned bounding boxes, bounds algebra and shapely polygon conversion.
Rotation is clockwise in screen coordinates (y grows downward).
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from shapely.geometry import LineString, Polygon
from shapely.geometry import Point as ShapelyPoint

from snapcanvas.core.types import Bounds, Point, RotatedBounds, SnapObject, SnapPoints


def deg_to_rad(deg: float) -> float:
    return deg * math.pi / 180.0


def rad_to_deg(rad: float) -> float:
    return rad * 180.0 / math.pi


def normalize_angle(deg: float) -> float:
    """Map any angle to [0, 360)."""
    a = deg % 360.0
    if a >= 360.0:
        return 0.0
    return a


def rotate_point(point: Point | tuple[float, float], center: Point | tuple[float, float], angle_deg: float) -> Point:
    """Rotate point about center by angle_deg."""
    rad = deg_to_rad(angle_deg)
    cos = math.cos(rad)
    sin = math.sin(rad)
    dx = point[0] - center[0]
    dy = point[1] - center[1]
    return Point(center[0] + dx * cos - dy * sin, center[1] + dx * sin + dy * cos)


# ----- Rotation matrix (precomputed sin/cos for repeated use) -----

@dataclass(frozen=True)
class RotationMatrix:
    degrees: float
    radians: float
    cos: float
    sin: float


def rotation_matrix(degrees: float) -> RotationMatrix:
    rad = deg_to_rad(degrees)
    return RotationMatrix(degrees=degrees, radians=rad, cos=math.cos(rad), sin=math.sin(rad))


def rotate_point_with_matrix(point: Point | tuple[float, float], center: Point | tuple[float, float], m: RotationMatrix) -> Point:
    dx = point[0] - center[0]
    dy = point[1] - center[1]
    return Point(center[0] + dx * m.cos - dy * m.sin, center[1] + dx * m.sin + dy * m.cos)


def unrotate_point_with_matrix(point: Point | tuple[float, float], center: Point | tuple[float, float], m: RotationMatrix) -> Point:
    """Inverse of rotate_point_with_matrix."""
    dx = point[0] - center[0]
    dy = point[1] - center[1]
    return Point(center[0] + dx * m.cos + dy * m.sin, center[1] - dx * m.sin + dy * m.cos)


def rotate_delta(dx: float, dy: float, m: RotationMatrix) -> Point:
    """Local-space delta to screen space."""
    return Point(dx * m.cos - dy * m.sin, dx * m.sin + dy * m.cos)


def unrotate_delta(dx: float, dy: float, m: RotationMatrix) -> Point:
    """Screen-space delta to local (unrotated) space."""
    return Point(dx * m.cos + dy * m.sin, -dx * m.sin + dy * m.cos)


# ----- Rotated bounds -----

def pivot_point(rb: RotatedBounds) -> Point:
    """Absolute pivot position. Independent of rotation."""
    return Point(rb.x + rb.width * rb.pivot.x, rb.y + rb.height * rb.pivot.y)


def corners(rb: RotatedBounds) -> tuple[Point, Point, Point, Point]:
    """
    Corners TL, TR, BR, BL after rotating about the absolute pivot.
    Rotation exactly 0 returns the unrotated corners.
    """
    tl = Point(rb.x, rb.y)
    tr = Point(rb.x + rb.width, rb.y)
    br = Point(rb.x + rb.width, rb.y + rb.height)
    bl = Point(rb.x, rb.y + rb.height)
    if rb.rotation == 0:
        return (tl, tr, br, bl)
    m = rotation_matrix(rb.rotation)
    c = pivot_point(rb)
    return (
        rotate_point_with_matrix(tl, c, m),
        rotate_point_with_matrix(tr, c, m),
        rotate_point_with_matrix(br, c, m),
        rotate_point_with_matrix(bl, c, m),
    )


def aabb(rb: RotatedBounds) -> Bounds:
    """Axis-aligned bounding box of the rotated rectangle. Rotation 0 returns the raw bounds."""
    if rb.rotation == 0:
        return rb.bounds
    pts = corners(rb)
    xs = [p.x for p in pts]
    ys = [p.y for p in pts]
    return Bounds(min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))


def object_aabb(obj: SnapObject) -> Bounds:
    return aabb(obj.rotated_bounds())


def snap_points(rb: RotatedBounds) -> SnapPoints:
    """
    Edges and center come from the AABB of the rotated corners; the pivot is
    always x + w * px, y + h * py regardless of rotation.
    """
    pts = corners(rb)
    box = aabb(rb)
    p = pivot_point(rb)
    return SnapPoints(
        left=box.left,
        right=box.right,
        top=box.top,
        bottom=box.bottom,
        center_x=box.center_x,
        center_y=box.center_y,
        pivot_x=p.x,
        pivot_y=p.y,
        corners=pts,
    )


def rotated_edges(rb: RotatedBounds) -> list[tuple[Point, Point]]:
    """Four edges of the rotated rectangle: top, right, bottom, left."""
    tl, tr, br, bl = corners(rb)
    return [(tl, tr), (tr, br), (br, bl), (bl, tl)]


def distance_to_edge(point: Point | tuple[float, float], edge: tuple[Point, Point]) -> float:
    """Shortest distance from point to the edge segment."""
    a, b = edge
    if a == b:
        return math.hypot(point[0] - a[0], point[1] - a[1])
    return float(LineString([a, b]).distance(ShapelyPoint(point[0], point[1])))


def to_polygon(rb: RotatedBounds) -> Polygon:
    """Shapely polygon of the rotated rectangle."""
    return Polygon([tuple(p) for p in corners(rb)])


# ----- Grab point -----

def normalize_point_in_bounds(point: Point | tuple[float, float], bounds: Bounds) -> Point:
    """Position of point inside bounds as (0..1, 0..1), clamped."""
    nx = (point[0] - bounds.x) / bounds.width if bounds.width > 0 else 0.5
    ny = (point[1] - bounds.y) / bounds.height if bounds.height > 0 else 0.5
    return Point(min(1.0, max(0.0, nx)), min(1.0, max(0.0, ny)))


def compute_grab_point(pointer: Point | tuple[float, float], bounds: Bounds) -> Point:
    """Where the object was grabbed; center when the bounds are degenerate."""
    if bounds.width <= 0 or bounds.height <= 0:
        return Point(0.5, 0.5)
    return normalize_point_in_bounds(pointer, bounds)


# ----- Bounds algebra -----

def bounds_center(bounds: Bounds) -> Point:
    return bounds.center


def expand_bounds(bounds: Bounds, margin: float) -> Bounds:
    return Bounds(bounds.x - margin, bounds.y - margin, bounds.width + margin * 2, bounds.height + margin * 2)


def union_bounds(a: Bounds, b: Bounds) -> Bounds:
    min_x = min(a.x, b.x)
    min_y = min(a.y, b.y)
    max_x = max(a.right, b.right)
    max_y = max(a.bottom, b.bottom)
    return Bounds(min_x, min_y, max_x - min_x, max_y - min_y)


def union_all_bounds(bounds_list: list[Bounds]) -> Bounds | None:
    if not bounds_list:
        return None
    out = bounds_list[0]
    for b in bounds_list[1:]:
        out = union_bounds(out, b)
    return out


def bounds_intersect(a: Bounds, b: Bounds) -> bool:
    """AABB overlap; touching edges count as intersecting."""
    return not (a.x > b.right or a.right < b.x or a.y > b.bottom or a.bottom < b.y)


def point_in_bounds(point: Point | tuple[float, float], bounds: Bounds) -> bool:
    return bounds.x <= point[0] <= bounds.right and bounds.y <= point[1] <= bounds.bottom


def bounds_contains(outer: Bounds, inner: Bounds) -> bool:
    """True if inner lies completely inside outer (edges may touch)."""
    return (
        inner.x >= outer.x
        and inner.y >= outer.y
        and inner.right <= outer.right
        and inner.bottom <= outer.bottom
    )


def bounds_from_points(p1: Point | tuple[float, float], p2: Point | tuple[float, float]) -> Bounds:
    """Rectangle spanned by two points in any order."""
    return Bounds(min(p1[0], p2[0]), min(p1[1], p2[1]), abs(p2[0] - p1[0]), abs(p2[1] - p1[1]))


def handle_positions(bounds: Bounds) -> list[tuple[str, Point]]:
    """The eight resize handle positions, clockwise from nw."""
    x, y = bounds.x, bounds.y
    cx, cy = bounds.center_x, bounds.center_y
    r, b = bounds.right, bounds.bottom
    return [
        ("nw", Point(x, y)),
        ("n", Point(cx, y)),
        ("ne", Point(r, y)),
        ("e", Point(r, cy)),
        ("se", Point(r, b)),
        ("s", Point(cx, b)),
        ("sw", Point(x, b)),
        ("w", Point(x, cy)),
    ]
