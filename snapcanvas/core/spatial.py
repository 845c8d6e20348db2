# snapcanvas/core/spatial.py
"""
Spatial queries over canvas objects: hit testing, marquee selection, view
culling and nearest-object lookup. Rotated objects are tested with their
actual rotated outline (shapely polygons); boundaries count as inside.
Input order is z-order, back to front.
"""

from __future__ import annotations

import math
from collections.abc import Iterable

from shapely.geometry import Point as ShapelyPoint
from shapely.geometry import Polygon, box

from snapcanvas.core.geometry import (
    bounds_center,
    distance_to_edge,
    object_aabb,
    rotated_edges,
    to_polygon,
    union_all_bounds,
)
from snapcanvas.core.types import Bounds, Point, SnapObject


def _outline(obj: SnapObject) -> Polygon:
    return to_polygon(obj.rotated_bounds())


def _rect(rect: Bounds) -> Polygon:
    return box(rect.left, rect.top, rect.right, rect.bottom)


def objects_at_point(objects: list[SnapObject], point: Point | tuple[float, float]) -> list[SnapObject]:
    p = ShapelyPoint(point[0], point[1])
    return [o for o in objects if _outline(o).covers(p)]


def topmost_at_point(objects: list[SnapObject], point: Point | tuple[float, float]) -> SnapObject | None:
    """Last object in z-order under the point."""
    p = ShapelyPoint(point[0], point[1])
    for obj in reversed(objects):
        if _outline(obj).covers(p):
            return obj
    return None


def objects_intersecting_rect(objects: list[SnapObject], rect: Bounds) -> list[SnapObject]:
    r = _rect(rect)
    return [o for o in objects if _outline(o).intersects(r)]


def objects_contained_in_rect(objects: list[SnapObject], rect: Bounds) -> list[SnapObject]:
    r = _rect(rect)
    return [o for o in objects if r.covers(_outline(o))]


def object_ids_at_point(objects: list[SnapObject], point: Point | tuple[float, float]) -> list[str]:
    return [o.id for o in objects_at_point(objects, point)]


def object_ids_in_rect(objects: list[SnapObject], rect: Bounds) -> list[str]:
    return [o.id for o in objects_intersecting_rect(objects, rect)]


def selection_bounds(objects: list[SnapObject]) -> Bounds | None:
    """Union of the objects' AABBs, or None for an empty selection."""
    return union_all_bounds([object_aabb(o) for o in objects])


def selection_bounds_by_id(objects: list[SnapObject], ids: Iterable[str]) -> Bounds | None:
    wanted = set(ids)
    return selection_bounds([o for o in objects if o.id in wanted])


def objects_in_view(objects: list[SnapObject], view: Bounds) -> list[SnapObject]:
    """Culling: objects whose outline touches the view."""
    return objects_intersecting_rect(objects, view)


def _center_distance(obj: SnapObject, point: Point | tuple[float, float]) -> float:
    c = bounds_center(object_aabb(obj))
    return math.hypot(point[0] - c.x, point[1] - c.y)


def nearest_object(
    objects: list[SnapObject],
    point: Point | tuple[float, float],
    max_distance: float = math.inf,
) -> SnapObject | None:
    """Object whose center is closest to point, strictly within max_distance; first wins on ties."""
    nearest: SnapObject | None = None
    best = max_distance
    for obj in objects:
        d = _center_distance(obj, point)
        if d < best:
            best = d
            nearest = obj
    return nearest


def objects_in_radius(objects: list[SnapObject], center: Point | tuple[float, float], radius: float) -> list[SnapObject]:
    """Objects whose center lies within radius (inclusive)."""
    return [o for o in objects if _center_distance(o, center) <= radius]


def distance_to_outline(obj: SnapObject, point: Point | tuple[float, float]) -> float:
    """Distance from point to the object's rotated outline; 0 when the point is on or inside it."""
    if _outline(obj).covers(ShapelyPoint(point[0], point[1])):
        return 0.0
    return min(distance_to_edge(point, edge) for edge in rotated_edges(obj.rotated_bounds()))


def objects_near_point(
    objects: list[SnapObject],
    point: Point | tuple[float, float],
    tolerance: float,
) -> list[SnapObject]:
    """Hit testing with slop: objects whose outline lies within tolerance of the point."""
    return [o for o in objects if distance_to_outline(o, point) <= tolerance]
