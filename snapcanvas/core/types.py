# snapcanvas/core/types.py
"""
Dataclasses for bounds, snap targets, scored candidates and snap results.
Everything here is created per call and discarded; nothing is mutated by the engine.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Callable, ClassVar, Literal, NamedTuple

from snapcanvas.core.config import (
    DEFAULT_GRID_SIZE,
    DEFAULT_SNAP_THRESHOLD,
    WEIGHT_CENTER_PRIORITY,
    WEIGHT_DIRECTION,
    WEIGHT_DISTANCE,
    WEIGHT_DISTRIBUTION_PRIORITY,
    WEIGHT_EDGE_PRIORITY,
    WEIGHT_GRAB_PROXIMITY,
    WEIGHT_GRID_PRIORITY,
    WEIGHT_HIERARCHY,
    WEIGHT_SIZE_PRIORITY,
    WEIGHT_VELOCITY,
)


Axis = Literal["x", "y"]
SnapEdge = Literal[
    "left", "right", "top", "bottom",
    "center_x", "center_y", "pivot_x", "pivot_y",
    "width", "height",
]
ResizeHandle = Literal["n", "s", "e", "w", "nw", "ne", "sw", "se"]
DistributionKind = Literal["row", "column", "staircase"]

ParentLookup = Callable[[str], "str | None"]


class Point(NamedTuple):
    x: float
    y: float


CENTER_PIVOT = Point(0.5, 0.5)


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned rectangle, top-left origin. width and height are >= 0."""
    x: float
    y: float
    width: float
    height: float

    @property
    def left(self) -> float:
        return self.x

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def top(self) -> float:
        return self.y

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2

    @property
    def center(self) -> Point:
        return Point(self.center_x, self.center_y)


@dataclass(frozen=True)
class RotatedBounds:
    """
    Bounds rotated by `rotation` degrees (clockwise, screen coordinates) about
    the pivot. The pivot is a normalized point inside the unrotated bounds;
    it defaults to the center and is stored explicitly, never derived.
    rotation is normalized to [0, 360) on construction.
    """
    x: float
    y: float
    width: float
    height: float
    rotation: float = 0.0
    pivot: Point = CENTER_PIVOT

    def __post_init__(self) -> None:
        r = float(self.rotation) % 360.0
        if r >= 360.0:
            r = 0.0
        object.__setattr__(self, "rotation", r)
        object.__setattr__(self, "pivot", Point(float(self.pivot[0]), float(self.pivot[1])))

    @classmethod
    def from_bounds(
        cls,
        bounds: Bounds,
        rotation: float = 0.0,
        pivot: Point | tuple[float, float] = CENTER_PIVOT,
    ) -> RotatedBounds:
        return cls(bounds.x, bounds.y, bounds.width, bounds.height, rotation, Point(*pivot))

    @property
    def bounds(self) -> Bounds:
        return Bounds(self.x, self.y, self.width, self.height)


@dataclass(frozen=True)
class SnapPoints:
    """Snap-relevant coordinates of a (possibly rotated) object."""
    left: float
    right: float
    top: float
    bottom: float
    center_x: float
    center_y: float
    pivot_x: float
    pivot_y: float
    corners: tuple[Point, Point, Point, Point]


@dataclass(frozen=True)
class SnapObject:
    """A canvas object as seen by the snapping engine."""
    id: str
    bounds: Bounds
    rotation: float = 0.0
    pivot: Point = CENTER_PIVOT
    parent_id: str | None = None

    def rotated_bounds(self) -> RotatedBounds:
        return RotatedBounds.from_bounds(self.bounds, self.rotation, self.pivot)


def parent_lookup(objects: list[SnapObject]) -> ParentLookup:
    """Build a get_parent(id) function from the objects' parent_id fields."""
    parents = {o.id: o.parent_id for o in objects}

    def get_parent(object_id: str) -> str | None:
        return parents.get(object_id)

    return get_parent


# ----- Snap targets (tagged variants; dispatch on `type`) -----

@dataclass(frozen=True)
class EdgeTarget:
    axis: Axis
    value: float
    priority: float
    source_object_id: str | None = None
    source_edge: SnapEdge | None = None
    type: ClassVar[str] = "edge"


@dataclass(frozen=True)
class CenterTarget:
    axis: Axis
    value: float
    priority: float
    source_object_id: str | None = None
    source_edge: SnapEdge | None = None
    type: ClassVar[str] = "center"


@dataclass(frozen=True)
class GridTarget:
    axis: Axis
    value: float
    priority: float
    source_object_id: str | None = None
    source_edge: SnapEdge | None = None
    type: ClassVar[str] = "grid"


@dataclass(frozen=True)
class SizeTarget:
    """Width (axis x) or height (axis y) of an existing object."""
    axis: Axis
    value: float
    priority: float
    source_object_id: str | None = None
    source_edge: SnapEdge | None = None
    type: ClassVar[str] = "size"


@dataclass(frozen=True)
class DistributionTarget:
    """Coordinate of the dragged object's top-left that reproduces an equal spacing."""
    axis: Axis
    value: float
    priority: float
    source_object_id: str | None = None
    source_edge: SnapEdge | None = None
    type: ClassVar[str] = "distribution"


SnapTarget = EdgeTarget | CenterTarget | GridTarget | SizeTarget | DistributionTarget

TARGET_TYPES: tuple[type, ...] = (EdgeTarget, CenterTarget, GridTarget, SizeTarget, DistributionTarget)


# ----- Scoring -----

@dataclass
class ScoreBreakdown:
    distance: float = 0.0
    grab_proximity: float = 0.0
    hierarchy: float = 0.0
    direction: float = 0.0
    velocity: float = 0.0
    type_priority: float = 0.0


@dataclass
class ScoredCandidate:
    target: SnapTarget
    score: float
    breakdown: ScoreBreakdown
    distance: float
    snap_edge: SnapEdge
    guide_start: Point
    guide_end: Point


@dataclass
class DistributionGap:
    start: Point
    end: Point
    distance: float
    axis: Axis


@dataclass
class DistributionPattern:
    pattern: DistributionKind
    object_ids: list[str]
    spacing: float
    gaps: list[DistributionGap] = field(default_factory=list)


@dataclass
class DistributionCandidate:
    """position is the snapped top-left of the dragged object's own bounds."""
    position: Point
    pattern: DistributionPattern
    distance: float
    score: float


@dataclass
class ActiveSnap:
    target: SnapTarget
    distance: float
    score: float
    guide_start: Point
    guide_end: Point
    snap_edge: SnapEdge | None = None
    source_bounds: Bounds | None = None
    source_object_id: str | None = None
    matched_size: float | None = None
    distribution: DistributionPattern | None = None


# ----- Configuration -----

@dataclass
class SnapWeights:
    distance: float = WEIGHT_DISTANCE
    direction: float = WEIGHT_DIRECTION
    velocity: float = WEIGHT_VELOCITY
    grab_proximity: float = WEIGHT_GRAB_PROXIMITY
    hierarchy: float = WEIGHT_HIERARCHY
    edge_priority: float = WEIGHT_EDGE_PRIORITY
    center_priority: float = WEIGHT_CENTER_PRIORITY
    grid_priority: float = WEIGHT_GRID_PRIORITY
    size_priority: float = WEIGHT_SIZE_PRIORITY
    distribution_priority: float = WEIGHT_DISTRIBUTION_PRIORITY


@dataclass
class SnapConfiguration:
    enabled: bool = True
    snap_to_grid: bool = True
    snap_to_objects: bool = True
    snap_to_sizes: bool = True
    snap_to_distribution: bool = True
    grid_size: float = DEFAULT_GRID_SIZE
    snap_threshold: float = DEFAULT_SNAP_THRESHOLD
    weights: SnapWeights = field(default_factory=SnapWeights)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SnapConfiguration:
        """Build from a plain mapping. Unknown keys raise ValueError."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(unknown)}")
        kwargs = {k: v for k, v in data.items() if k != "weights"}
        weights_data = data.get("weights") or {}
        if not isinstance(weights_data, dict):
            raise ValueError("config.weights must be an object")
        weight_names = {f.name for f in fields(SnapWeights)}
        bad = sorted(set(weights_data) - weight_names)
        if bad:
            raise ValueError(f"Unknown weight keys: {', '.join(bad)}")
        weights = SnapWeights(**{k: float(v) for k, v in weights_data.items()})
        return cls(weights=weights, **kwargs)


# ----- Contexts and results -----

@dataclass
class DragSnapContext:
    """
    One pointer-move of a drag. bounds is the proposed position before snapping.
    grab_point is normalized within the unrotated bounds; direction is a unit
    vector (or zero); velocity is px per frame.
    """
    bounds: RotatedBounds
    object_id: str
    grab_point: Point = CENTER_PIVOT
    direction: Point = Point(0.0, 0.0)
    velocity: float = 0.0
    delta: Point = Point(0.0, 0.0)


@dataclass
class ResizeSnapContext:
    """Bounds carry the object's rotation and pivot; edges snap on the rotated AABB."""
    original_bounds: RotatedBounds
    current_bounds: RotatedBounds
    object_id: str
    handle: ResizeHandle
    delta: Point = Point(0.0, 0.0)


@dataclass
class SnapResult:
    snapped_position: Point
    active_snaps: list[ActiveSnap] = field(default_factory=list)
    candidates: list[ScoredCandidate] = field(default_factory=list)
    distribution_candidates: list[DistributionCandidate] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass
class ResizeSnapResult:
    snapped_bounds: Bounds
    active_snaps: list[ActiveSnap] = field(default_factory=list)
    candidates: list[ScoredCandidate] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass
class Scene:
    """A canvas loaded from a scene file: visible view, objects in z-order and snap settings."""
    view: Bounds
    objects: list[SnapObject]
    config: SnapConfiguration = field(default_factory=SnapConfiguration)

    def get(self, object_id: str) -> SnapObject | None:
        for obj in self.objects:
            if obj.id == object_id:
                return obj
        return None
