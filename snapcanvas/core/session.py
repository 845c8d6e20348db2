# snapcanvas/core/session.py
"""
Per-gesture session objects for drag, resize, rotate and pivot drag.
The caller creates one session per gesture, feeds it pointer positions in
canvas coordinates and ends or cancels it. A session is not reusable.
"""

from __future__ import annotations

import math
from collections import deque
from collections.abc import Sequence

from snapcanvas.core.config import (
    DEFAULT_PIVOT_SNAP_POINTS,
    DEFAULT_PIVOT_SNAP_THRESHOLD,
    DEFAULT_SNAP_ANGLES,
    DEFAULT_SNAP_ZONE_RATIO,
    MIN_RESIZE_HEIGHT,
    MIN_RESIZE_WIDTH,
    VELOCITY_HISTORY_SIZE,
    VELOCITY_WINDOW,
)
from snapcanvas.core.geometry import compute_grab_point, normalize_angle
from snapcanvas.core.resize import ResizeState, calculate_resize_bounds, init_resize_state
from snapcanvas.core.rotation import (
    AngleSnap,
    PivotSnap,
    angle_from_center,
    arc_radius,
    calculate_pivot_compensation,
    is_in_snap_zone,
    pivot_from_local_drag,
    pivot_position,
    snap_angle,
    snap_interval,
    snap_pivot,
    wrap_delta,
)
from snapcanvas.core.snapping import compute_resize_snap, compute_snap
from snapcanvas.core.types import (
    CENTER_PIVOT,
    Bounds,
    DragSnapContext,
    ParentLookup,
    Point,
    ResizeHandle,
    ResizeSnapContext,
    ResizeSnapResult,
    RotatedBounds,
    SnapConfiguration,
    SnapObject,
    SnapResult,
)


def estimate_velocity(positions: Sequence[Point], window: int = VELOCITY_WINDOW) -> float:
    """Mean step length over the last `window` positions (px per move event)."""
    recent = list(positions)[-window:]
    if len(recent) < 2:
        return 0.0
    total = sum(math.hypot(b.x - a.x, b.y - a.y) for a, b in zip(recent, recent[1:]))
    return total / len(recent)


def normalize_direction(delta: Point | tuple[float, float]) -> Point:
    """Unit vector along delta, or (0, 0) for no movement."""
    length = math.hypot(delta[0], delta[1])
    if length == 0:
        return Point(0.0, 0.0)
    return Point(delta[0] / length, delta[1] / length)


class _Session:
    def __init__(self) -> None:
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def _check_active(self) -> None:
        if not self._active:
            raise RuntimeError(f"{type(self).__name__} already ended")


class DragSession(_Session):
    """
    One drag gesture. Each move() proposes origin + pointer delta, updates the
    velocity history and returns the snapped result.
    """

    def __init__(
        self,
        objects: list[SnapObject],
        view: Bounds,
        config: SnapConfiguration,
        obj: SnapObject,
        start_point: Point | tuple[float, float],
        get_parent: ParentLookup | None = None,
        auto_grab_point: bool = True,
    ) -> None:
        super().__init__()
        self.objects = objects
        self.view = view
        self.config = config
        self.obj = obj
        self.get_parent = get_parent
        self.start = Point(*start_point)
        b = obj.bounds
        if auto_grab_point and b.width > 0 and b.height > 0:
            self.grab_point = compute_grab_point(self.start, b)
        else:
            self.grab_point = CENTER_PIVOT
        self.history: deque[Point] = deque(maxlen=VELOCITY_HISTORY_SIZE)
        self.position = Point(b.x, b.y)
        self.last_result: SnapResult | None = None

    def move(self, pointer: Point | tuple[float, float]) -> SnapResult:
        self._check_active()
        delta = Point(pointer[0] - self.start.x, pointer[1] - self.start.y)
        b = self.obj.bounds
        proposed = RotatedBounds(
            b.x + delta.x, b.y + delta.y, b.width, b.height,
            self.obj.rotation, self.obj.pivot,
        )
        self.history.append(Point(proposed.x, proposed.y))
        context = DragSnapContext(
            bounds=proposed,
            object_id=self.obj.id,
            grab_point=self.grab_point,
            direction=normalize_direction(delta),
            velocity=estimate_velocity(self.history),
            delta=delta,
        )
        result = compute_snap(context, self.objects, self.view, self.config, self.get_parent)
        self.position = result.snapped_position
        self.last_result = result
        return result

    def end(self) -> Point:
        """Commit: returns the last snapped position and clears the history."""
        self._check_active()
        self._active = False
        self.history.clear()
        return self.position

    def cancel(self) -> None:
        self._check_active()
        self._active = False
        self.history.clear()
        self.last_result = None


class ResizeSession(_Session):
    """Anchor-preserving resize of a (possibly rotated) object with edge and size snapping."""

    def __init__(
        self,
        objects: list[SnapObject],
        view: Bounds,
        config: SnapConfiguration,
        obj: SnapObject,
        handle: ResizeHandle,
        start_point: Point | tuple[float, float],
        min_width: float = MIN_RESIZE_WIDTH,
        min_height: float = MIN_RESIZE_HEIGHT,
        aspect_ratio: float | None = None,
    ) -> None:
        super().__init__()
        self.objects = objects
        self.view = view
        self.config = config
        self.obj = obj
        self.min_width = min_width
        self.min_height = min_height
        self.aspect_ratio = aspect_ratio
        self.state: ResizeState = init_resize_state(start_point, handle, obj.bounds, obj.pivot, obj.rotation)
        self.bounds = obj.bounds

    def move(self, pointer: Point | tuple[float, float]) -> ResizeSnapResult:
        self._check_active()
        current = calculate_resize_bounds(
            self.state, pointer, self.min_width, self.min_height, self.aspect_ratio
        )
        context = ResizeSnapContext(
            original_bounds=RotatedBounds.from_bounds(self.state.original_bounds, self.obj.rotation, self.obj.pivot),
            current_bounds=RotatedBounds.from_bounds(current, self.obj.rotation, self.obj.pivot),
            object_id=self.obj.id,
            handle=self.state.handle,
            delta=Point(pointer[0] - self.state.start.x, pointer[1] - self.state.start.y),
        )
        result = compute_resize_snap(context, self.objects, self.view, self.config)
        self.bounds = result.snapped_bounds
        return result

    def end(self) -> Bounds:
        self._check_active()
        self._active = False
        return self.bounds

    def cancel(self) -> None:
        self._check_active()
        self._active = False
        self.bounds = self.state.original_bounds


class RotationSession(_Session):
    """
    Rotation about the object's pivot. The angle follows the pointer relative
    to the start angle; inside the inner snap zone of the arc it snaps to the
    snap angle table with a threshold of half the interval plus one degree.
    """

    def __init__(
        self,
        bounds: Bounds,
        rotation: float,
        pivot: Point | tuple[float, float],
        start_point: Point | tuple[float, float],
        snap_angles: Sequence[float] = DEFAULT_SNAP_ANGLES,
        snap_zone_ratio: float = DEFAULT_SNAP_ZONE_RATIO,
    ) -> None:
        super().__init__()
        self.bounds = bounds
        self.initial_rotation = rotation
        self.snap_angles = snap_angles
        self.snap_zone_ratio = snap_zone_ratio
        self.center = pivot_position(bounds, pivot[0], pivot[1])
        self.radius = arc_radius(bounds, pivot[0], pivot[1])
        self.start_angle = angle_from_center(self.center, start_point)
        self.rotation = rotation

    def in_snap_zone(self, pointer: Point | tuple[float, float]) -> bool:
        return is_in_snap_zone(pointer, self.center, self.radius, self.snap_zone_ratio)

    def move(self, pointer: Point | tuple[float, float]) -> AngleSnap:
        self._check_active()
        delta = wrap_delta(angle_from_center(self.center, pointer) - self.start_angle)
        result = AngleSnap(angle=normalize_angle(self.initial_rotation + delta), is_snapped=False)
        if self.in_snap_zone(pointer):
            threshold = snap_interval(self.snap_angles) / 2 + 1
            result = snap_angle(result.angle, self.snap_angles, threshold)
        self.rotation = result.angle
        return result

    def end(self) -> float:
        self._check_active()
        self._active = False
        return self.rotation

    def cancel(self) -> None:
        self._check_active()
        self._active = False
        self.rotation = self.initial_rotation


class PivotDragSession(_Session):
    """
    Dragging the pivot handle of a rotated object. move() returns the snapped
    pivot; compensation() is the position offset that keeps the object in place.
    """

    def __init__(
        self,
        bounds: Bounds,
        rotation: float,
        pivot: Point | tuple[float, float],
        start_point: Point | tuple[float, float],
        snap_points: Sequence[tuple[float, float]] = DEFAULT_PIVOT_SNAP_POINTS,
        snap_threshold: float = DEFAULT_PIVOT_SNAP_THRESHOLD,
    ) -> None:
        super().__init__()
        self.bounds = bounds
        self.rotation = rotation
        self.initial_pivot = Point(*pivot)
        self.pivot = self.initial_pivot
        self.start = Point(*start_point)
        self.snap_points = snap_points
        self.snap_threshold = snap_threshold

    def move(self, pointer: Point | tuple[float, float]) -> PivotSnap:
        self._check_active()
        delta = (pointer[0] - self.start.x, pointer[1] - self.start.y)
        moved = pivot_from_local_drag(self.initial_pivot, delta, self.bounds, self.rotation)
        result = snap_pivot(moved, self.snap_points, self.snap_threshold)
        self.pivot = result.pivot
        return result

    def compensation(self) -> Point:
        return calculate_pivot_compensation(self.initial_pivot, self.pivot, self.bounds, self.rotation)

    def end(self) -> tuple[Point, Point]:
        """Returns (pivot, position compensation)."""
        self._check_active()
        self._active = False
        return self.pivot, self.compensation()

    def cancel(self) -> None:
        self._check_active()
        self._active = False
        self.pivot = self.initial_pivot
