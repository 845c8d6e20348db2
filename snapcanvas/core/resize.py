# snapcanvas/core/resize.py
"""
Resize algebra. calculate_resize_bounds keeps the corner or edge opposite the
dragged handle fixed on screen while a rotated object is resized around its
normalized pivot. resize_bounds is the plain axis-aligned variant.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from snapcanvas.core.config import MIN_AXIS_ALIGNED_SIZE, MIN_RESIZE_HEIGHT, MIN_RESIZE_WIDTH
from snapcanvas.core.geometry import RotationMatrix, rotation_matrix, unrotate_delta
from snapcanvas.core.types import Bounds, Point, ResizeHandle


ANCHORS: dict[str, Point] = {
    "nw": Point(1.0, 1.0),
    "n": Point(0.5, 1.0),
    "ne": Point(0.0, 1.0),
    "e": Point(0.0, 0.5),
    "se": Point(0.0, 0.0),
    "s": Point(0.5, 0.0),
    "sw": Point(1.0, 0.0),
    "w": Point(1.0, 0.5),
}
"""Normalized point that stays fixed for each handle (the opposite corner or edge center)."""


def anchor_for_handle(handle: ResizeHandle) -> Point:
    try:
        return ANCHORS[handle]
    except KeyError:
        raise ValueError(f"Unknown resize handle: {handle!r}") from None


def rotated_anchor_position(bounds: Bounds, anchor: Point, pivot: Point, m: RotationMatrix) -> Point:
    """Screen position of the anchor after rotating about the absolute pivot."""
    ax = bounds.x + bounds.width * anchor.x
    ay = bounds.y + bounds.height * anchor.y
    px = bounds.x + bounds.width * pivot.x
    py = bounds.y + bounds.height * pivot.y
    return Point(
        px + (ax - px) * m.cos - (ay - py) * m.sin,
        py + (ax - px) * m.sin + (ay - py) * m.cos,
    )


def driver_dimension(
    handle: ResizeHandle,
    local_dx: float,
    local_dy: float,
    original_width: float,
    original_height: float,
) -> Literal["width", "height"]:
    """Which dimension drives an aspect-locked resize. Corners pick the larger proportional change."""
    if handle in ("e", "w"):
        return "width"
    if handle in ("n", "s"):
        return "height"
    prop_x = abs(local_dx) / original_width
    prop_y = abs(local_dy) / original_height
    return "width" if prop_x >= prop_y else "height"


def resized_dimensions(
    handle: ResizeHandle,
    original_width: float,
    original_height: float,
    local_dx: float,
    local_dy: float,
) -> tuple[float, float]:
    """Unconstrained (width, height) for a local-space pointer delta."""
    width, height = original_width, original_height
    if "e" in handle:
        width = original_width + local_dx
    elif "w" in handle:
        width = original_width - local_dx
    if "s" in handle:
        height = original_height + local_dy
    elif "n" in handle:
        height = original_height - local_dy
    return width, height


def resized_position(
    new_width: float,
    new_height: float,
    anchor: Point,
    pivot: Point,
    anchor_screen: Point,
    m: RotationMatrix,
) -> Point:
    """Top-left that puts the anchor back on anchor_screen for the new size."""
    off_x = new_width * (anchor.x - pivot.x)
    off_y = new_height * (anchor.y - pivot.y)
    rot_x = off_x * m.cos - off_y * m.sin
    rot_y = off_x * m.sin + off_y * m.cos
    pivot_x = anchor_screen.x - rot_x
    pivot_y = anchor_screen.y - rot_y
    return Point(pivot_x - new_width * pivot.x, pivot_y - new_height * pivot.y)


@dataclass(frozen=True)
class ResizeState:
    """Captured at the start of a resize gesture."""
    start: Point
    handle: ResizeHandle
    original_bounds: Bounds
    pivot: Point
    anchor: Point
    anchor_screen: Point
    matrix: RotationMatrix


def init_resize_state(
    start_point: Point | tuple[float, float],
    handle: ResizeHandle,
    bounds: Bounds,
    pivot: Point | tuple[float, float],
    rotation: float,
) -> ResizeState:
    m = rotation_matrix(rotation)
    pivot = Point(*pivot)
    anchor = anchor_for_handle(handle)
    return ResizeState(
        start=Point(*start_point),
        handle=handle,
        original_bounds=bounds,
        pivot=pivot,
        anchor=anchor,
        anchor_screen=rotated_anchor_position(bounds, anchor, pivot, m),
        matrix=m,
    )


def calculate_resize_bounds(
    state: ResizeState,
    pointer: Point | tuple[float, float],
    min_width: float = MIN_RESIZE_WIDTH,
    min_height: float = MIN_RESIZE_HEIGHT,
    aspect_ratio: float | None = None,
) -> Bounds:
    """
    New unrotated bounds for the pointer position. The screen delta is
    un-rotated into local space, sizes are constrained (aspect ratio, minimum
    size) and the position is solved so the anchor does not move.
    """
    local = unrotate_delta(pointer[0] - state.start.x, pointer[1] - state.start.y, state.matrix)
    ob = state.original_bounds
    width, height = resized_dimensions(state.handle, ob.width, ob.height, local.x, local.y)

    if aspect_ratio is not None:
        if driver_dimension(state.handle, local.x, local.y, ob.width, ob.height) == "width":
            height = width / aspect_ratio
        else:
            width = height * aspect_ratio
        min_by_height = min_height * aspect_ratio
        if width < min_width or height < min_height:
            if min_width >= min_by_height:
                width = min_width
                height = width / aspect_ratio
            else:
                height = min_height
                width = height * aspect_ratio
    else:
        width = max(width, min_width)
        height = max(height, min_height)

    pos = resized_position(width, height, state.anchor, state.pivot, state.anchor_screen, state.matrix)
    return Bounds(pos.x, pos.y, width, height)


def resize_bounds(
    original: Bounds,
    handle: ResizeHandle,
    dx: float,
    dy: float,
    min_width: float = MIN_AXIS_ALIGNED_SIZE,
    min_height: float = MIN_AXIS_ALIGNED_SIZE,
) -> Bounds:
    """Axis-aligned resize from a handle; clamped sizes keep the opposite edge in place."""
    if handle not in ANCHORS:
        raise ValueError(f"Unknown resize handle: {handle!r}")
    x, y, width, height = original.x, original.y, original.width, original.height
    if "e" in handle:
        width += dx
    elif "w" in handle:
        x += dx
        width -= dx
    if "s" in handle:
        height += dy
    elif "n" in handle:
        y += dy
        height -= dy

    if width < min_width:
        if "w" in handle:
            x = original.right - min_width
        width = min_width
    if height < min_height:
        if "n" in handle:
            y = original.bottom - min_height
        height = min_height
    return Bounds(x, y, width, height)
