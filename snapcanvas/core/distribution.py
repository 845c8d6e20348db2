# snapcanvas/core/distribution.py
"""
Equal-spacing distribution detection: row, column and staircase patterns.
All objects are handled through their axis-aligned bounding boxes; the
returned positions are converted back to the dragged object's own bounds.
"""

from __future__ import annotations

import logging
import math
from typing import NamedTuple

import numpy as np

from snapcanvas.core.config import (
    DISTRIBUTION_COUNT_BONUS,
    DISTRIBUTION_COUNT_SATURATION,
    DISTRIBUTION_OVERLAP_FACTOR,
    GAP_TOLERANCE_PX,
    SNAP_DEBUG,
    STAIRCASE_THRESHOLD_FACTOR,
)
from snapcanvas.core.geometry import aabb
from snapcanvas.core.types import (
    ActiveSnap,
    Axis,
    Bounds,
    DistributionCandidate,
    DistributionGap,
    DistributionKind,
    DistributionPattern,
    DistributionTarget,
    Point,
    RotatedBounds,
    SnapConfiguration,
    SnapObject,
)

logger = logging.getLogger(__name__)


class _Item(NamedTuple):
    id: str
    box: Bounds


# ----- Axis accessors (row works on x, column on y) -----

def _lo(box: Bounds, axis: Axis) -> float:
    return box.left if axis == "x" else box.top


def _hi(box: Bounds, axis: Axis) -> float:
    return box.right if axis == "x" else box.bottom


def _size(box: Bounds, axis: Axis) -> float:
    return box.width if axis == "x" else box.height


def _center(box: Bounds, axis: Axis) -> float:
    return box.center_x if axis == "x" else box.center_y


def _cross(axis: Axis) -> Axis:
    return "y" if axis == "x" else "x"


def _moved_to(box: Bounds, axis: Axis, lo: float) -> Bounds:
    if axis == "x":
        return Bounds(lo, box.y, box.width, box.height)
    return Bounds(box.x, lo, box.width, box.height)


def ranges_overlap(a1: float, a2: float, b1: float, b2: float, tolerance: float = 0.0) -> bool:
    """1D overlap of [a1, a2] and [b1, b2], widened by tolerance."""
    return not (a2 + tolerance < b1 or b2 + tolerance < a1)


def distribution_score(object_count: int, distance: float, threshold: float) -> float:
    """Closer snaps and more participants score higher."""
    base = max(0.0, (threshold - distance) / threshold)
    bonus = min(object_count / DISTRIBUTION_COUNT_SATURATION, 1.0)
    return base * (1.0 + bonus * DISTRIBUTION_COUNT_BONUS)


def _gap_segment(before: Bounds, after: Bounds, axis: Axis) -> DistributionGap:
    """Indicator for the gap between two consecutive boxes, drawn through the mid cross-center."""
    cross = _cross(axis)
    mid = (_center(before, cross) + _center(after, cross)) / 2
    if axis == "x":
        start, end = Point(before.right, mid), Point(after.left, mid)
    else:
        start, end = Point(mid, before.bottom), Point(mid, after.top)
    return DistributionGap(start=start, end=end, distance=_lo(after, axis) - _hi(before, axis), axis=axis)


def _equal_gaps(items: list[_Item], spacing: float, axis: Axis, skip: set[tuple[str, str]] | None = None) -> list[DistributionGap]:
    """Indicators for consecutive gaps equal to spacing within GAP_TOLERANCE_PX."""
    out: list[DistributionGap] = []
    for a, b in zip(items, items[1:]):
        if skip and (a.id, b.id) in skip:
            continue
        gap = _lo(b.box, axis) - _hi(a.box, axis)
        if abs(gap - spacing) > GAP_TOLERANCE_PX:
            continue
        out.append(_gap_segment(a.box, b.box, axis))
    return out


def _linear_candidate(
    kind: DistributionKind,
    axis: Axis,
    members: list[_Item],
    spacing: float,
    gaps: list[DistributionGap],
    snapped: Bounds,
    distance: float,
    threshold: float,
) -> DistributionCandidate:
    pattern = DistributionPattern(
        pattern=kind,
        object_ids=[m.id for m in members],
        spacing=spacing,
        gaps=gaps,
    )
    return DistributionCandidate(
        position=Point(snapped.x, snapped.y),
        pattern=pattern,
        distance=distance,
        score=distribution_score(len(members), distance, threshold),
    )


def _detect_linear(
    dragged: _Item,
    others: list[_Item],
    threshold: float,
    axis: Axis,
) -> DistributionCandidate | None:
    """
    Row (axis x) or column (axis y) detection. Insertion between two
    neighbours is tried first; then the dragged object's gap to a neighbour is
    matched against the existing consecutive gaps in order, first match wins.
    """
    kind: DistributionKind = "row" if axis == "x" else "column"
    cross = _cross(axis)
    tolerance = threshold * DISTRIBUTION_OVERLAP_FACTOR
    line = [
        o for o in others
        if ranges_overlap(_lo(dragged.box, cross), _hi(dragged.box, cross), _lo(o.box, cross), _hi(o.box, cross), tolerance)
    ]
    if len(line) < 2:
        return None
    line.sort(key=lambda o: _center(o.box, axis))
    size = _size(dragged.box, axis)
    d_lo = _lo(dragged.box, axis)

    # Insertion between two neighbours
    for a, b in zip(line, line[1:]):
        gap = _lo(b.box, axis) - _hi(a.box, axis)
        if gap < size:
            continue
        spacing = (gap - size) / 2
        new_lo = _hi(a.box, axis) + spacing
        dist = abs(d_lo - new_lo)
        if dist <= threshold:
            snapped = _Item(dragged.id, _moved_to(dragged.box, axis, new_lo))
            members = [a, snapped, b]
            return _linear_candidate(
                kind, axis, members, spacing, _equal_gaps(members, spacing, axis),
                snapped.box, dist, threshold,
            )

    # Gap matching against existing gaps
    with_dragged = sorted(line + [dragged], key=lambda o: _center(o.box, axis))
    idx = next(i for i, o in enumerate(with_dragged) if o is dragged)
    before = with_dragged[idx - 1] if idx > 0 else None
    after = with_dragged[idx + 1] if idx < len(with_dragged) - 1 else None
    gaps = [_lo(b.box, axis) - _hi(a.box, axis) for a, b in zip(line, line[1:])]

    split = (before.id, after.id) if before is not None and after is not None else None

    for existing in gaps:
        if existing < 0:
            continue
        if before is not None:
            diff = abs((d_lo - _hi(before.box, axis)) - existing)
            if 0 < diff <= threshold:
                new_lo = _hi(before.box, axis) + existing
                return _gap_match(kind, axis, line, dragged, before, True, split, new_lo, existing, threshold)
        if after is not None:
            diff = abs((_lo(after.box, axis) - (d_lo + size)) - existing)
            if 0 < diff <= threshold:
                new_lo = _lo(after.box, axis) - existing - size
                return _gap_match(kind, axis, line, dragged, after, False, split, new_lo, existing, threshold)
    return None


def _gap_match(
    kind: DistributionKind,
    axis: Axis,
    line: list[_Item],
    dragged: _Item,
    neighbour: _Item,
    attach_before: bool,
    split: tuple[str, str] | None,
    new_lo: float,
    spacing: float,
    threshold: float,
) -> DistributionCandidate:
    """
    Candidate reproducing `spacing` next to one neighbour. Indicators show the
    new gap plus every existing gap of the same size, except the gap the
    dragged object now sits in (`split`).
    """
    snapped = _Item(dragged.id, _moved_to(dragged.box, axis, new_lo))
    if attach_before:
        new_gap = _gap_segment(neighbour.box, snapped.box, axis)
    else:
        new_gap = _gap_segment(snapped.box, neighbour.box, axis)
    new_gap.distance = spacing

    skip = {split} if split else set()
    existing = _equal_gaps(line, spacing, axis, skip)

    ids = {neighbour.id}
    for a, b in zip(line, line[1:]):
        if (a.id, b.id) in skip:
            continue
        if abs((_lo(b.box, axis) - _hi(a.box, axis)) - spacing) <= GAP_TOLERANCE_PX:
            ids.update((a.id, b.id))
    members = sorted(
        [o for o in line if o.id in ids] + [snapped],
        key=lambda o: _center(o.box, axis),
    )
    return _linear_candidate(
        kind, axis, members, spacing, [new_gap] + existing,
        snapped.box, abs(_lo(dragged.box, axis) - new_lo), threshold,
    )


def detect_row(dragged: _Item, others: list[_Item], threshold: float) -> DistributionCandidate | None:
    return _detect_linear(dragged, others, threshold, "x")


def detect_column(dragged: _Item, others: list[_Item], threshold: float) -> DistributionCandidate | None:
    return _detect_linear(dragged, others, threshold, "y")


def _staircase_gaps(items: list[_Item], avg_dx: float, avg_dy: float) -> list[DistributionGap]:
    gaps: list[DistributionGap] = []
    for cur, nxt in zip(items, items[1:]):
        a, b = cur.box, nxt.box
        if abs(avg_dx) > 1:
            mid_y = (a.center_y + b.center_y) / 2
            gaps.append(DistributionGap(Point(a.right, mid_y), Point(b.left, mid_y), abs(b.left - a.right), "x"))
        if abs(avg_dy) > 1:
            mid_x = (a.center_x + b.center_x) / 2
            gaps.append(DistributionGap(Point(mid_x, a.bottom), Point(mid_x, b.top), abs(b.top - a.bottom), "y"))
    return gaps


def detect_staircase(dragged: _Item, others: list[_Item], threshold: float) -> DistributionCandidate | None:
    """
    Diagonal pattern: consecutive center deltas (objects ordered by x center)
    agree within threshold and both average deltas are at least threshold.
    The dragged object may extend the staircase before the first or after the last member.
    """
    if len(others) < 2:
        return None
    items = sorted(others, key=lambda o: o.box.center_x)
    cx = np.array([o.box.center_x for o in items], dtype=float)
    cy = np.array([o.box.center_y for o in items], dtype=float)
    dx = np.diff(cx)
    dy = np.diff(cy)
    avg_dx = float(dx.mean())
    avg_dy = float(dy.mean())
    if abs(avg_dx) < threshold or abs(avg_dy) < threshold:
        return None
    if not (np.all(np.abs(dx - avg_dx) <= threshold) and np.all(np.abs(dy - avg_dy) <= threshold)):
        return None

    limit = threshold * STAIRCASE_THRESHOLD_FACTOR
    w, h = dragged.box.width, dragged.box.height
    slots = (
        (Point(float(cx[0]) - avg_dx, float(cy[0]) - avg_dy), True),
        (Point(float(cx[-1]) + avg_dx, float(cy[-1]) + avg_dy), False),
    )
    for slot, prepend in slots:
        dist = math.hypot(dragged.box.center_x - slot.x, dragged.box.center_y - slot.y)
        if dist > limit:
            continue
        snapped = _Item(dragged.id, Bounds(slot.x - w / 2, slot.y - h / 2, w, h))
        members = [snapped] + items if prepend else items + [snapped]
        pattern = DistributionPattern(
            pattern="staircase",
            object_ids=[m.id for m in members],
            spacing=math.hypot(avg_dx, avg_dy),
            gaps=_staircase_gaps(members, avg_dx, avg_dy),
        )
        return DistributionCandidate(
            position=Point(snapped.box.x, snapped.box.y),
            pattern=pattern,
            distance=dist,
            score=distribution_score(len(members), dist, threshold),
        )
    return None


def detect_distribution(
    dragged_bounds: RotatedBounds,
    dragged_id: str,
    objects: list[SnapObject],
    exclude_ids: set[str],
    config: SnapConfiguration,
) -> list[DistributionCandidate]:
    """
    Row, column and staircase candidates for the dragged object, best first.
    Needs snap_to_distribution and at least two other objects.
    """
    if not config.snap_to_distribution or config.snap_threshold <= 0:
        return []
    excluded = set(exclude_ids) | {dragged_id}
    others = [_Item(o.id, aabb(o.rotated_bounds())) for o in objects if o.id not in excluded]
    if len(others) < 2:
        return []

    box = aabb(dragged_bounds)
    dragged = _Item(dragged_id, box)
    threshold = config.snap_threshold
    found = [
        c for c in (
            detect_row(dragged, others, threshold),
            detect_column(dragged, others, threshold),
            detect_staircase(dragged, others, threshold),
        )
        if c is not None
    ]
    # AABB position back to the object's own top-left
    off_x = dragged_bounds.x - box.x
    off_y = dragged_bounds.y - box.y
    for c in found:
        c.position = Point(c.position.x + off_x, c.position.y + off_y)
    found.sort(key=lambda c: c.score, reverse=True)
    if SNAP_DEBUG and found:
        logger.debug(
            "distribution %s: %s spacing=%.2f score=%.3f",
            dragged_id, found[0].pattern.pattern, found[0].pattern.spacing, found[0].score,
        )
    return found


def distribution_to_active_snap(candidate: DistributionCandidate, config: SnapConfiguration) -> ActiveSnap:
    """ActiveSnap for rendering; the guide runs from the first gap start to the last gap end."""
    info = candidate.pattern
    axis: Axis = "y" if info.pattern == "column" else "x"
    value = candidate.position.y if axis == "y" else candidate.position.x
    target = DistributionTarget(axis, value, config.weights.distribution_priority)
    start = info.gaps[0].start if info.gaps else candidate.position
    end = info.gaps[-1].end if info.gaps else candidate.position
    return ActiveSnap(
        target=target,
        distance=candidate.distance,
        score=candidate.score,
        guide_start=start,
        guide_end=end,
        distribution=info,
    )
