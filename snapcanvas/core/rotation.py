# snapcanvas/core/rotation.py
"""
Pivot and rotation algebra: angle snapping, pivot placement and snapping,
position compensation when the pivot moves on a rotated object, group
rotation about a shared pivot and rotation-arc geometry.
Angles are degrees; 0 points along +x and 90 points down (screen coordinates).
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from snapcanvas.core.config import (
    ARC_HANDLE_PADDING_PX,
    DEFAULT_ANGLE_SNAP_THRESHOLD_DEG,
    DEFAULT_PIVOT_SNAP_POINTS,
    DEFAULT_PIVOT_SNAP_THRESHOLD,
    DEFAULT_SNAP_ANGLES,
    DEFAULT_SNAP_ZONE_RATIO,
    ROTATION_EPSILON_DEG,
    SNAP_ANGLE_STEP_DEG,
)
from snapcanvas.core.geometry import bounds_center, deg_to_rad, normalize_angle, rad_to_deg, rotate_point
from snapcanvas.core.types import Bounds, Point


@dataclass(frozen=True)
class AngleSnap:
    angle: float
    is_snapped: bool


@dataclass(frozen=True)
class PivotSnap:
    pivot: Point
    snapped_point: Point | None


@dataclass(frozen=True)
class GroupRotation:
    """New top-left and accumulated rotation of one object after a group rotation."""
    x: float
    y: float
    rotation: float


# ----- Angles -----

def rotate_point_around_center(point: Point | tuple[float, float], center: Point | tuple[float, float], angle_deg: float) -> Point:
    """Clockwise (screen) rotation of point about center."""
    return rotate_point(point, center, angle_deg)


def angle_from_center(center: Point | tuple[float, float], target: Point | tuple[float, float]) -> float:
    """Angle of target seen from center, in [0, 360)."""
    return normalize_angle(rad_to_deg(math.atan2(target[1] - center[1], target[0] - center[0])))


def _angular_distance(a: float, b: float) -> float:
    return min(abs(a - b), abs(a - b + 360.0), abs(a - b - 360.0))


def closest_snap_angle(angle: float, snap_angles: Sequence[float] = DEFAULT_SNAP_ANGLES) -> float:
    """Nearest snap angle, wrap-aware (359 is close to 0)."""
    normalized = normalize_angle(angle)
    closest = snap_angles[0]
    best = math.inf
    for candidate in snap_angles:
        d = _angular_distance(normalized, candidate)
        if d < best:
            best = d
            closest = candidate
    return closest


def snap_angle(
    angle: float,
    snap_angles: Sequence[float] = DEFAULT_SNAP_ANGLES,
    threshold: float = DEFAULT_ANGLE_SNAP_THRESHOLD_DEG,
) -> AngleSnap:
    """Snap to the nearest snap angle within threshold; otherwise return the normalized angle."""
    normalized = normalize_angle(angle)
    if not snap_angles:
        return AngleSnap(normalized, False)
    closest = closest_snap_angle(normalized, snap_angles)
    if _angular_distance(normalized, closest) <= threshold:
        return AngleSnap(normalize_angle(closest), True)
    return AngleSnap(normalized, False)


def wrap_delta(delta_deg: float) -> float:
    """Bring an angle difference into [-180, 180]."""
    if delta_deg > 180.0:
        delta_deg -= 360.0
    if delta_deg < -180.0:
        delta_deg += 360.0
    return delta_deg


def snap_interval(snap_angles: Sequence[float]) -> float:
    """Spacing of the snap angle table (first two entries)."""
    if len(snap_angles) > 1:
        return snap_angles[1] - snap_angles[0]
    return SNAP_ANGLE_STEP_DEG


# ----- Pivot -----

def pivot_position(bounds: Bounds, pivot_x: float, pivot_y: float) -> Point:
    """Absolute canvas position of a normalized pivot."""
    return Point(bounds.x + bounds.width * pivot_x, bounds.y + bounds.height * pivot_y)


def canvas_to_pivot(point: Point | tuple[float, float], bounds: Bounds) -> Point:
    """Canvas point to normalized pivot coordinates (not clamped). Bounds must be non-degenerate."""
    return Point((point[0] - bounds.x) / bounds.width, (point[1] - bounds.y) / bounds.height)


def clamp_pivot(pivot: Point | tuple[float, float]) -> Point:
    return Point(max(0.0, min(1.0, pivot[0])), max(0.0, min(1.0, pivot[1])))


def snap_pivot(
    pivot: Point | tuple[float, float],
    snap_points: Sequence[tuple[float, float]] = DEFAULT_PIVOT_SNAP_POINTS,
    threshold: float = DEFAULT_PIVOT_SNAP_THRESHOLD,
) -> PivotSnap:
    """Snap to the nearest canonical point within threshold (normalized units)."""
    pivot = Point(*pivot)
    closest: Point | None = None
    best = math.inf
    for sp in snap_points:
        d = math.hypot(pivot.x - sp[0], pivot.y - sp[1])
        if d < best:
            best = d
            closest = Point(*sp)
    if closest is not None and best <= threshold:
        return PivotSnap(closest, closest)
    return PivotSnap(pivot, None)


def calculate_pivot_compensation(
    old_pivot: Point | tuple[float, float],
    new_pivot: Point | tuple[float, float],
    bounds: Bounds,
    rotation: float,
) -> Point:
    """
    Position offset to add when the pivot of a rotated object moves, so the
    rendered object stays in place. Near-zero rotation returns the plain
    size-scaled pivot delta.
    """
    dpx = old_pivot[0] - new_pivot[0]
    dpy = old_pivot[1] - new_pivot[1]
    if rotation == 0 or abs(rotation) < ROTATION_EPSILON_DEG:
        return Point(bounds.width * dpx, bounds.height * dpy)
    rad = deg_to_rad(rotation)
    cos = math.cos(rad)
    sin = math.sin(rad)
    w, h = bounds.width, bounds.height
    return Point(
        w * dpx * (1 - cos) + h * dpy * sin,
        h * dpy * (1 - cos) - w * dpx * sin,
    )


def pivot_from_local_drag(
    initial_pivot: Point | tuple[float, float],
    delta: Point | tuple[float, float],
    bounds: Bounds,
    rotation: float,
) -> Point:
    """
    Pivot after dragging its handle by a screen-space delta: the delta is
    un-rotated into the object's local frame and normalized by its size.
    Result is clamped to [0, 1].
    """
    rad = deg_to_rad(rotation)
    cos = math.cos(rad)
    sin = math.sin(rad)
    dx, dy = delta
    local_dx = dx * cos + dy * sin
    local_dy = -dx * sin + dy * cos
    return clamp_pivot((
        initial_pivot[0] + local_dx / bounds.width,
        initial_pivot[1] + local_dy / bounds.height,
    ))


# ----- Group rotation -----

def selection_center(bounds: Bounds) -> Point:
    """Default group pivot: center of the selection bounds."""
    return bounds_center(bounds)


def rotate_object_around_pivot(
    bounds: Bounds,
    rotation: float,
    group_pivot: Point | tuple[float, float],
    delta_angle: float,
) -> GroupRotation:
    """Rotate the object's center about the group pivot and accumulate the rotation."""
    center = rotate_point_around_center(bounds_center(bounds), group_pivot, delta_angle)
    return GroupRotation(
        x=center.x - bounds.width / 2,
        y=center.y - bounds.height / 2,
        rotation=normalize_angle(rotation + delta_angle),
    )


def rotate_objects_around_pivot(
    items: Sequence[tuple[Bounds, float]],
    group_pivot: Point | tuple[float, float],
    delta_angle: float,
) -> list[GroupRotation]:
    """
    Vectorized rotate_object_around_pivot for a whole selection.
    items are (bounds, rotation) pairs; output order matches input.
    """
    if not items:
        return []
    sizes = np.array([(b.width, b.height) for b, _ in items], dtype=float)
    centers = np.array([(b.center_x, b.center_y) for b, _ in items], dtype=float)
    rad = deg_to_rad(delta_angle)
    rot = np.array([[math.cos(rad), -math.sin(rad)], [math.sin(rad), math.cos(rad)]])
    pivot = np.array([group_pivot[0], group_pivot[1]], dtype=float)
    moved = (centers - pivot) @ rot.T + pivot
    top_left = moved - sizes / 2
    return [
        GroupRotation(float(tl[0]), float(tl[1]), normalize_angle(r + delta_angle))
        for tl, (_, r) in zip(top_left, items)
    ]


# ----- Rotation arc -----

def max_distance_from_pivot(bounds: Bounds, pivot_x: float, pivot_y: float) -> float:
    """Distance from the pivot to the farthest corner of the unrotated bounds."""
    p = pivot_position(bounds, pivot_x, pivot_y)
    pts = (
        (bounds.left, bounds.top),
        (bounds.right, bounds.top),
        (bounds.left, bounds.bottom),
        (bounds.right, bounds.bottom),
    )
    return max(math.hypot(cx - p.x, cy - p.y) for cx, cy in pts)


def arc_radius(bounds: Bounds, pivot_x: float, pivot_y: float) -> float:
    return max_distance_from_pivot(bounds, pivot_x, pivot_y) + ARC_HANDLE_PADDING_PX


def is_in_snap_zone(
    point: Point | tuple[float, float],
    center: Point | tuple[float, float],
    radius: float,
    snap_zone_ratio: float = DEFAULT_SNAP_ZONE_RATIO,
) -> bool:
    """True when the pointer is inside the inner part of the rotation arc."""
    return math.hypot(point[0] - center[0], point[1] - center[1]) <= radius * snap_zone_ratio


def point_on_arc(center: Point | tuple[float, float], radius: float, angle_deg: float) -> Point:
    rad = deg_to_rad(angle_deg)
    return Point(center[0] + radius * math.cos(rad), center[1] + radius * math.sin(rad))
