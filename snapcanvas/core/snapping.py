# snapcanvas/core/snapping.py
"""
Snap selection for drag and resize. Targets are generated, scored per axis and
the best candidate on each axis wins; distribution patterns override the axis
they constrain. Misconfiguration never raises: the input is returned unchanged
with a warning code.
"""

from __future__ import annotations

import logging
import sys

from snapcanvas.core.config import SIZE_INDICATOR_OFFSET_PX, SNAP_DEBUG
from snapcanvas.core.distribution import detect_distribution, distribution_to_active_snap
from snapcanvas.core.error_codes import INVALID_GRID_SIZE, INVALID_THRESHOLD, SNAPPING_DISABLED
from snapcanvas.core.geometry import object_aabb, snap_points
from snapcanvas.core.scoring import compute_score, distance_score, type_priority_weight
from snapcanvas.core.targets import generate_all_targets, size_targets
from snapcanvas.core.types import (
    ActiveSnap,
    Axis,
    Bounds,
    DragSnapContext,
    ParentLookup,
    Point,
    ResizeHandle,
    ResizeSnapContext,
    ResizeSnapResult,
    ScoreBreakdown,
    ScoredCandidate,
    SizeTarget,
    SnapConfiguration,
    SnapEdge,
    SnapObject,
    SnapPoints,
    SnapResult,
    SnapTarget,
)

logger = logging.getLogger(__name__)

# Make debug output visible when SNAP_DEBUG is set (add handler if none exists)
if not logger.handlers and not logging.root.handlers:
    _handler = logging.StreamHandler(sys.stderr)
    _handler.setLevel(logging.DEBUG if SNAP_DEBUG else logging.WARNING)
    _handler.setFormatter(logging.Formatter("[snap] %(levelname)s: %(message)s"))
    logger.addHandler(_handler)
    logger.setLevel(logging.DEBUG if SNAP_DEBUG else logging.WARNING)


RESIZE_EDGES: dict[str, tuple[tuple[SnapEdge, Axis], ...]] = {
    "n": (("top", "y"),),
    "s": (("bottom", "y"),),
    "e": (("right", "x"),),
    "w": (("left", "x"),),
    "nw": (("top", "y"), ("left", "x")),
    "ne": (("top", "y"), ("right", "x")),
    "sw": (("bottom", "y"), ("left", "x")),
    "se": (("bottom", "y"), ("right", "x")),
}

DISTRIBUTION_AXES: dict[str, tuple[Axis, ...]] = {
    "row": ("x",),
    "column": ("y",),
    "staircase": ("x", "y"),
}


def _skip_reason(config: SnapConfiguration) -> str | None:
    if not config.enabled:
        return SNAPPING_DISABLED
    if config.snap_threshold <= 0:
        return INVALID_THRESHOLD
    return None


def _config_warnings(config: SnapConfiguration) -> list[str]:
    if config.snap_to_grid and config.grid_size <= 0:
        return [INVALID_GRID_SIZE]
    return []


def drag_snap_values(sp: SnapPoints, axis: Axis) -> list[tuple[float, SnapEdge]]:
    """Dragged values compared against targets on `axis`; the pivot only when it differs from the center."""
    if axis == "x":
        values: list[tuple[float, SnapEdge]] = [(sp.left, "left"), (sp.right, "right"), (sp.center_x, "center_x")]
        if sp.pivot_x != sp.center_x:
            values.append((sp.pivot_x, "pivot_x"))
    else:
        values = [(sp.top, "top"), (sp.bottom, "bottom"), (sp.center_y, "center_y")]
        if sp.pivot_y != sp.center_y:
            values.append((sp.pivot_y, "pivot_y"))
    return values


def guide_endpoints(
    target: SnapTarget,
    sp: SnapPoints,
    view: Bounds,
    source: Bounds | None,
) -> tuple[Point, Point]:
    """
    Object targets: the guide spans both the dragged and the source AABB along
    the guide direction. Sourceless targets (grid, view) span the whole view.
    """
    if target.axis == "x":
        if source is not None and target.source_object_id:
            return (
                Point(target.value, min(sp.top, source.top)),
                Point(target.value, max(sp.bottom, source.bottom)),
            )
        return Point(target.value, view.top), Point(target.value, view.bottom)
    if source is not None and target.source_object_id:
        return (
            Point(min(sp.left, source.left), target.value),
            Point(max(sp.right, source.right), target.value),
        )
    return Point(view.left, target.value), Point(view.right, target.value)


def _object_boxes(objects: list[SnapObject]) -> dict[str, Bounds]:
    return {o.id: object_aabb(o) for o in objects}


def compute_snap(
    context: DragSnapContext,
    objects: list[SnapObject],
    view: Bounds,
    config: SnapConfiguration,
    get_parent: ParentLookup | None = None,
) -> SnapResult:
    """
    Snap the proposed drag position. Returns the snapped top-left of the
    dragged bounds, at most one ActiveSnap per axis (or one distribution snap)
    and every scored candidate, best first.
    """
    origin = Point(context.bounds.x, context.bounds.y)
    reason = _skip_reason(config)
    if reason is not None:
        logger.info("snap skipped for %s: %s", context.object_id, reason)
        return SnapResult(snapped_position=origin, warnings=[reason])
    warnings = _config_warnings(config)

    boxes = _object_boxes(objects)
    targets = generate_all_targets(objects, {context.object_id}, view, config, dragged=context.bounds)
    sp = snap_points(context.bounds)
    threshold = config.snap_threshold

    by_axis: dict[Axis, list[ScoredCandidate]] = {"x": [], "y": []}
    for target in targets:
        source = boxes.get(target.source_object_id) if target.source_object_id else None
        for value, edge in drag_snap_values(sp, target.axis):
            distance = abs(value - target.value)
            if distance > threshold:
                continue
            score, breakdown = compute_score(target, distance, edge, context, config, get_parent)
            start, end = guide_endpoints(target, sp, view, source)
            by_axis[target.axis].append(
                ScoredCandidate(target, score, breakdown, distance, edge, start, end)
            )

    snapped: dict[Axis, float] = {"x": origin.x, "y": origin.y}
    active: dict[Axis, ActiveSnap] = {}
    values = {edge: value for axis in ("x", "y") for value, edge in drag_snap_values(sp, axis)}
    for axis, found in by_axis.items():
        found.sort(key=lambda c: c.score, reverse=True)
        if not found:
            continue
        best = found[0]
        snapped[axis] += best.target.value - values[best.snap_edge]
        active[axis] = ActiveSnap(
            target=best.target,
            distance=best.distance,
            score=best.score,
            guide_start=best.guide_start,
            guide_end=best.guide_end,
            snap_edge=best.snap_edge,
            source_bounds=boxes.get(best.target.source_object_id) if best.target.source_object_id else None,
            source_object_id=best.target.source_object_id,
        )

    distribution = detect_distribution(
        context.bounds, context.object_id, objects, {context.object_id}, config
    )
    active_snaps = list(active.values())
    if distribution:
        best_dist = distribution[0]
        for axis in DISTRIBUTION_AXES[best_dist.pattern.pattern]:
            snapped[axis] = best_dist.position.x if axis == "x" else best_dist.position.y
            active.pop(axis, None)
        active_snaps = list(active.values()) + [distribution_to_active_snap(best_dist, config)]

    candidates = by_axis["x"] + by_axis["y"]
    candidates.sort(key=lambda c: c.score, reverse=True)

    if SNAP_DEBUG:
        for snap in active_snaps:
            logger.debug(
                "%s snap %s %s=%.2f d=%.2f score=%.2f",
                context.object_id, snap.target.type, snap.target.axis,
                snap.target.value, snap.distance, snap.score,
            )

    return SnapResult(
        snapped_position=Point(snapped["x"], snapped["y"]),
        active_snaps=active_snaps,
        candidates=candidates,
        distribution_candidates=distribution,
        warnings=warnings,
    )


def apply_edge_snap(bounds: Bounds, edge: SnapEdge, offset: float) -> Bounds:
    """Move one edge by offset; left/top keep the opposite edge fixed."""
    x, y, w, h = bounds.x, bounds.y, bounds.width, bounds.height
    if edge == "left":
        x += offset
        w -= offset
    elif edge == "right":
        w += offset
    elif edge == "top":
        y += offset
        h -= offset
    elif edge == "bottom":
        h += offset
    return Bounds(x, y, w, h)


def _match_size(
    bounds: Bounds,
    sizes: list[SizeTarget],
    axis: Axis,
    far_edge: bool,
    threshold: float,
    boxes: dict[str, Bounds],
) -> tuple[Bounds, list[ActiveSnap]]:
    """
    First size within threshold of the current width (axis x) or height
    (axis y) wins. far_edge means the right/bottom edge is being dragged;
    otherwise the origin moves so the far edge stays put.
    """
    current = bounds.width if axis == "x" else bounds.height
    off = SIZE_INDICATOR_OFFSET_PX
    for st in sizes:
        distance = abs(current - st.value)
        if distance > threshold:
            continue
        diff = st.value - current
        if axis == "x":
            x = bounds.x if far_edge else bounds.x - diff
            snapped = Bounds(x, bounds.y, st.value, bounds.height)
        else:
            y = bounds.y if far_edge else bounds.y - diff
            snapped = Bounds(bounds.x, y, bounds.width, st.value)
        src = boxes[st.source_object_id] if st.source_object_id else snapped
        if axis == "x":
            src_line = (Point(src.x, src.y - off), Point(src.x + st.value, src.y - off))
            own_line = (Point(snapped.x, snapped.y - off), Point(snapped.x + st.value, snapped.y - off))
        else:
            src_line = (Point(src.x - off, src.y), Point(src.x - off, src.y + st.value))
            own_line = (Point(snapped.x - off, snapped.y), Point(snapped.x - off, snapped.y + st.value))
        snaps = [
            ActiveSnap(
                target=SizeTarget(axis, st.value, 1.0, st.source_object_id, st.source_edge),
                distance=distance,
                score=1.0,
                guide_start=src_line[0],
                guide_end=src_line[1],
                source_bounds=src,
                source_object_id=st.source_object_id,
                matched_size=st.value,
            ),
            ActiveSnap(
                target=SizeTarget(axis, st.value, 1.0, None, st.source_edge),
                distance=distance,
                score=1.0,
                guide_start=own_line[0],
                guide_end=own_line[1],
                matched_size=st.value,
            ),
        ]
        return snapped, snaps
    return bounds, []


def resizing_edges(handle: ResizeHandle) -> tuple[tuple[SnapEdge, Axis], ...]:
    try:
        return RESIZE_EDGES[handle]
    except KeyError:
        raise ValueError(f"Unknown resize handle: {handle!r}") from None


def compute_resize_snap(
    context: ResizeSnapContext,
    objects: list[SnapObject],
    view: Bounds,
    config: SnapConfiguration,
) -> ResizeSnapResult:
    """
    Snap the edges moved by the active handle to alignment targets, then match
    the resulting width/height to existing object sizes. Edge positions come
    from the rotated AABB; offsets are applied to the unrotated bounds.
    """
    rotated = context.current_bounds
    current = rotated.bounds
    reason = _skip_reason(config)
    if reason is not None:
        logger.info("resize snap skipped for %s: %s", context.object_id, reason)
        return ResizeSnapResult(snapped_bounds=current, warnings=[reason])
    warnings = _config_warnings(config)

    edges = resizing_edges(context.handle)
    exclude = {context.object_id}
    boxes = _object_boxes(objects)
    targets = generate_all_targets(objects, exclude, view, config)
    sp = snap_points(rotated)
    threshold = config.snap_threshold

    snapped = current
    candidates: list[ScoredCandidate] = []
    active_snaps: list[ActiveSnap] = []
    for edge, axis in edges:
        value = getattr(sp, edge)
        best: ScoredCandidate | None = None
        for target in targets:
            if target.axis != axis:
                continue
            distance = abs(target.value - value)
            if distance > threshold:
                continue
            d_score = distance_score(distance, threshold)
            t_weight = type_priority_weight(target, config)
            source = boxes.get(target.source_object_id) if target.source_object_id else None
            start, end = guide_endpoints(target, sp, view, source)
            cand = ScoredCandidate(
                target=target,
                score=d_score * t_weight,
                breakdown=ScoreBreakdown(distance=d_score, type_priority=t_weight),
                distance=distance,
                snap_edge=edge,
                guide_start=start,
                guide_end=end,
            )
            candidates.append(cand)
            if best is None or cand.score > best.score:
                best = cand
        if best is None:
            continue
        snapped = apply_edge_snap(snapped, edge, best.target.value - value)
        if SNAP_DEBUG:
            logger.debug(
                "%s resize snap %s %s %s=%.2f d=%.2f score=%.2f",
                context.object_id, edge, best.target.type, best.target.axis,
                best.target.value, best.distance, best.score,
            )
        active_snaps.append(ActiveSnap(
            target=best.target,
            distance=best.distance,
            score=best.score,
            guide_start=best.guide_start,
            guide_end=best.guide_end,
            snap_edge=edge,
            source_bounds=boxes.get(best.target.source_object_id) if best.target.source_object_id else None,
            source_object_id=best.target.source_object_id,
        ))

    if config.snap_to_sizes:
        widths, heights = size_targets(objects, exclude)
        names = {edge for edge, _ in edges}
        if names & {"left", "right"}:
            snapped, snaps = _match_size(snapped, widths, "x", "right" in names, threshold, boxes)
            active_snaps.extend(snaps)
        if names & {"top", "bottom"}:
            snapped, snaps = _match_size(snapped, heights, "y", "bottom" in names, threshold, boxes)
            active_snaps.extend(snaps)

    candidates.sort(key=lambda c: c.score, reverse=True)
    if SNAP_DEBUG:
        logger.debug("resize %s %s -> %s", context.object_id, context.handle, snapped)
    return ResizeSnapResult(
        snapped_bounds=snapped,
        active_snaps=active_snaps,
        candidates=candidates,
        warnings=warnings,
    )
