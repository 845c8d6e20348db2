# snapcanvas/core/targets.py
"""
Snap target generation: object edges, centers and pivots, view boundaries,
grid lines and size targets for resize matching.
Order of the combined list: view boundaries, objects, grid.
"""

from __future__ import annotations

import math
from collections.abc import Iterable

from snapcanvas.core.config import (
    GRID_MARGIN_CELLS,
    PRIORITY_CENTER,
    PRIORITY_EDGE,
    PRIORITY_GRID,
    PRIORITY_PAGE_CENTER,
    PRIORITY_PAGE_EDGE,
    PRIORITY_SIZE,
    RELEVANCE_DISTANCE_FACTOR,
)
from snapcanvas.core.geometry import aabb, snap_points
from snapcanvas.core.types import (
    Bounds,
    CenterTarget,
    EdgeTarget,
    GridTarget,
    RotatedBounds,
    SizeTarget,
    SnapConfiguration,
    SnapObject,
    SnapTarget,
)


def object_targets(obj: SnapObject, include_x: bool = True, include_y: bool = True) -> list[SnapTarget]:
    """
    Edge, center and pivot targets of one object. Pivot targets are emitted
    only where the pivot differs from the AABB center on that axis.
    """
    sp = snap_points(obj.rotated_bounds())
    out: list[SnapTarget] = []
    if include_x:
        out.append(EdgeTarget("x", sp.left, PRIORITY_EDGE, obj.id, "left"))
        out.append(EdgeTarget("x", sp.right, PRIORITY_EDGE, obj.id, "right"))
    if include_y:
        out.append(EdgeTarget("y", sp.top, PRIORITY_EDGE, obj.id, "top"))
        out.append(EdgeTarget("y", sp.bottom, PRIORITY_EDGE, obj.id, "bottom"))
    if include_x:
        out.append(CenterTarget("x", sp.center_x, PRIORITY_CENTER, obj.id, "center_x"))
    if include_y:
        out.append(CenterTarget("y", sp.center_y, PRIORITY_CENTER, obj.id, "center_y"))
    if include_x and sp.pivot_x != sp.center_x:
        out.append(CenterTarget("x", sp.pivot_x, PRIORITY_CENTER, obj.id, "pivot_x"))
    if include_y and sp.pivot_y != sp.center_y:
        out.append(CenterTarget("y", sp.pivot_y, PRIORITY_CENTER, obj.id, "pivot_y"))
    return out


def _extent_gap(a_min: float, a_max: float, b_min: float, b_max: float) -> float:
    """Distance between two 1D ranges; 0 when they overlap or touch."""
    if a_max < b_min:
        return b_min - a_max
    if b_max < a_min:
        return a_min - b_max
    return 0.0


def relevant_axes(obj_box: Bounds, dragged_box: Bounds, snap_threshold: float) -> tuple[bool, bool]:
    """
    Geometric relevance of an object for a drag, as (x_relevant, y_relevant).
    x-axis targets (vertical guides) need the object's y-extent near the
    dragged y-extent; y-axis targets need the x-extents near each other.
    """
    limit = snap_threshold * RELEVANCE_DISTANCE_FACTOR
    x_ok = _extent_gap(obj_box.top, obj_box.bottom, dragged_box.top, dragged_box.bottom) <= limit
    y_ok = _extent_gap(obj_box.left, obj_box.right, dragged_box.left, dragged_box.right) <= limit
    return x_ok, y_ok


def generate_object_targets(
    objects: Iterable[SnapObject],
    exclude_ids: set[str],
    config: SnapConfiguration,
    dragged: RotatedBounds | None = None,
) -> list[SnapTarget]:
    """Targets from every non-excluded object; filtered by relevance when dragged is given."""
    if not config.snap_to_objects:
        return []
    dragged_box = aabb(dragged) if dragged is not None else None
    out: list[SnapTarget] = []
    for obj in objects:
        if obj.id in exclude_ids:
            continue
        include_x = include_y = True
        if dragged_box is not None:
            include_x, include_y = relevant_axes(
                aabb(obj.rotated_bounds()), dragged_box, config.snap_threshold
            )
            if not include_x and not include_y:
                continue
        out.extend(object_targets(obj, include_x, include_y))
    return out


def generate_grid_targets(view: Bounds, grid_size: float) -> list[SnapTarget]:
    """Grid lines covering the view plus a margin of GRID_MARGIN_CELLS cells on each side."""
    if grid_size <= 0:
        return []
    margin = grid_size * GRID_MARGIN_CELLS
    out: list[SnapTarget] = []
    for axis, lo, hi in (("x", view.x, view.right), ("y", view.y, view.bottom)):
        start = math.floor((lo - margin) / grid_size)
        end = math.ceil((hi + margin) / grid_size)
        for i in range(start, end + 1):
            out.append(GridTarget(axis, i * grid_size, PRIORITY_GRID))
    return out


def generate_page_boundary_targets(view: Bounds) -> list[SnapTarget]:
    """View edges and center lines; these carry no source object."""
    return [
        EdgeTarget("x", view.left, PRIORITY_PAGE_EDGE, None, "left"),
        EdgeTarget("x", view.right, PRIORITY_PAGE_EDGE, None, "right"),
        EdgeTarget("y", view.top, PRIORITY_PAGE_EDGE, None, "top"),
        EdgeTarget("y", view.bottom, PRIORITY_PAGE_EDGE, None, "bottom"),
        CenterTarget("x", view.center_x, PRIORITY_PAGE_CENTER, None, "center_x"),
        CenterTarget("y", view.center_y, PRIORITY_PAGE_CENTER, None, "center_y"),
    ]


def generate_all_targets(
    objects: Iterable[SnapObject],
    exclude_ids: set[str],
    view: Bounds,
    config: SnapConfiguration,
    dragged: RotatedBounds | None = None,
) -> list[SnapTarget]:
    """All alignment targets for a drag or resize. Size targets are separate (size_targets)."""
    targets: list[SnapTarget] = []
    if config.snap_to_objects:
        targets.extend(generate_page_boundary_targets(view))
        targets.extend(generate_object_targets(objects, exclude_ids, config, dragged))
    if config.snap_to_grid:
        targets.extend(generate_grid_targets(view, config.grid_size))
    return targets


def size_targets(
    objects: Iterable[SnapObject],
    exclude_ids: set[str],
) -> tuple[list[SizeTarget], list[SizeTarget]]:
    """
    (widths, heights) of the non-excluded objects' AABBs, deduplicated by
    value; the first object seen owns each value.
    """
    widths: dict[float, SizeTarget] = {}
    heights: dict[float, SizeTarget] = {}
    for obj in objects:
        if obj.id in exclude_ids:
            continue
        box = aabb(obj.rotated_bounds())
        if box.width not in widths:
            widths[box.width] = SizeTarget("x", box.width, PRIORITY_SIZE, obj.id, "width")
        if box.height not in heights:
            heights[box.height] = SizeTarget("y", box.height, PRIORITY_SIZE, obj.id, "height")
    return list(widths.values()), list(heights.values())
