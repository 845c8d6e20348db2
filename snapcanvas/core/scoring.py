# snapcanvas/core/scoring.py
"""
Heuristic drag scoring: distance, grab proximity, hierarchy, direction,
velocity and per-type priority. Higher is better.
"""

from __future__ import annotations

from snapcanvas.core.config import (
    HIERARCHY_DEPTH_PENALTY,
    HIERARCHY_MIN_SHARED,
    HIERARCHY_SELF,
    HIERARCHY_SIBLING,
    HIERARCHY_UNKNOWN,
    HIERARCHY_UNRELATED,
    VELOCITY_MAX_PX,
)
from snapcanvas.core.types import (
    Axis,
    CenterTarget,
    DistributionTarget,
    DragSnapContext,
    EdgeTarget,
    GridTarget,
    ParentLookup,
    Point,
    ScoreBreakdown,
    SizeTarget,
    SnapConfiguration,
    SnapEdge,
    SnapTarget,
)


def distance_score(distance: float, snap_threshold: float) -> float:
    """1 at distance 0, 0 at the threshold."""
    if snap_threshold <= 0:
        return 0.0
    return max(0.0, (snap_threshold - distance) / snap_threshold)


def grab_proximity_score(grab_point: Point, snap_edge: SnapEdge) -> float:
    """How close the grab point is to the dragged edge that would snap."""
    gx, gy = grab_point
    if snap_edge == "left":
        return 1.0 - gx
    if snap_edge == "right":
        return gx
    if snap_edge == "top":
        return 1.0 - gy
    if snap_edge == "bottom":
        return gy
    if snap_edge in ("center_x", "pivot_x"):
        return 1.0 - abs(gx - 0.5) * 2
    if snap_edge in ("center_y", "pivot_y"):
        return 1.0 - abs(gy - 0.5) * 2
    raise ValueError(f"Not a drag snap edge: {snap_edge!r}")


def ancestor_chain(object_id: str, get_parent: ParentLookup) -> list[str]:
    """Parents from nearest to root. Stops at a repeated id (cycle)."""
    chain: list[str] = []
    seen = {object_id}
    current = get_parent(object_id)
    while current and current not in seen:
        chain.append(current)
        seen.add(current)
        current = get_parent(current)
    return chain


def hierarchy_score(
    dragged_id: str,
    source_id: str | None,
    get_parent: ParentLookup | None = None,
) -> float:
    """
    1.0 for siblings, decaying with the depth of the nearest shared ancestor,
    0.2 for unrelated trees, 0.5 when the relationship is unknown.
    """
    if source_id is not None and source_id == dragged_id:
        return HIERARCHY_SELF
    if not source_id or get_parent is None:
        return HIERARCHY_UNKNOWN
    dragged_ancestors = ancestor_chain(dragged_id, get_parent)
    source_ancestors = ancestor_chain(source_id, get_parent)
    if dragged_ancestors and source_ancestors and dragged_ancestors[0] == source_ancestors[0]:
        return HIERARCHY_SIBLING
    for i, ancestor in enumerate(dragged_ancestors):
        if ancestor in source_ancestors:
            depth = max(i, source_ancestors.index(ancestor))
            return max(HIERARCHY_MIN_SHARED, 1.0 - depth * HIERARCHY_DEPTH_PENALTY)
    return HIERARCHY_UNRELATED


def _sign(v: float) -> float:
    if v > 0:
        return 1.0
    if v < 0:
        return -1.0
    return 0.0


def direction_score(movement: Point, current_value: float, target_value: float, axis: Axis) -> float:
    """Above 0.5 when moving toward the target, below when moving away."""
    component = movement.x if axis == "x" else movement.y
    return max(0.0, 0.5 + component * _sign(target_value - current_value) * 0.5)


def velocity_score(velocity: float, max_velocity: float = VELOCITY_MAX_PX) -> float:
    """Slower movement snaps more readily."""
    return 1.0 - min(velocity / max_velocity, 1.0)


def type_priority_weight(target: SnapTarget, config: SnapConfiguration) -> float:
    """Configured weight for the target's variant."""
    w = config.weights
    if isinstance(target, EdgeTarget):
        return w.edge_priority
    if isinstance(target, CenterTarget):
        return w.center_priority
    if isinstance(target, GridTarget):
        return w.grid_priority
    if isinstance(target, SizeTarget):
        return w.size_priority
    if isinstance(target, DistributionTarget):
        return w.distribution_priority
    raise TypeError(f"Unknown snap target: {type(target).__name__}")


def compute_score(
    target: SnapTarget,
    distance: float,
    snap_edge: SnapEdge,
    context: DragSnapContext,
    config: SnapConfiguration,
    get_parent: ParentLookup | None = None,
) -> tuple[float, ScoreBreakdown]:
    """
    Weighted sum of the sub-scores. The type term multiplies the configured
    type weight by the target's own priority, unlike the other terms.
    """
    w = config.weights
    b = context.bounds
    current = b.x + b.width / 2 if target.axis == "x" else b.y + b.height / 2
    breakdown = ScoreBreakdown(
        distance=distance_score(distance, config.snap_threshold),
        grab_proximity=grab_proximity_score(context.grab_point, snap_edge),
        hierarchy=hierarchy_score(context.object_id, target.source_object_id, get_parent),
        direction=direction_score(context.direction, current, target.value, target.axis),
        velocity=velocity_score(context.velocity),
        type_priority=type_priority_weight(target, config),
    )
    score = (
        breakdown.distance * w.distance
        + breakdown.grab_proximity * w.grab_proximity
        + breakdown.hierarchy * w.hierarchy
        + breakdown.direction * w.direction
        + breakdown.velocity * w.velocity
        + breakdown.type_priority * target.priority
    )
    return score, breakdown
