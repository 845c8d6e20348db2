# snapcanvas/core/config.py
"""
Central configuration for snapping, distribution and transform algebra.
All tunable values live here; no magic numbers in other modules.
"""

from __future__ import annotations
import os

# ----- Paths (repo-relative) -----
REPORTS_DIR: str = "reports"

# ----- Target priorities -----
PRIORITY_EDGE: float = 10.0
"""Base priority for object edge targets (left/right/top/bottom)."""

PRIORITY_CENTER: float = 8.0
"""Base priority for object center and pivot targets."""

PRIORITY_GRID: float = 5.0
"""Base priority for grid line targets."""

PRIORITY_SIZE: float = 7.0
"""Base priority for size (width/height) match targets."""

PRIORITY_PAGE_EDGE: float = 12.0
"""View (page) boundary edges: edge priority plus bonus."""

PRIORITY_PAGE_CENTER: float = 10.0
"""View (page) center lines: center priority plus bonus."""

# ----- Score weights (defaults for SnapWeights) -----
WEIGHT_DISTANCE: float = 10.0
WEIGHT_DIRECTION: float = 3.0
WEIGHT_VELOCITY: float = 2.0
WEIGHT_GRAB_PROXIMITY: float = 5.0
WEIGHT_HIERARCHY: float = 4.0
WEIGHT_EDGE_PRIORITY: float = 1.2
WEIGHT_CENTER_PRIORITY: float = 1.0
WEIGHT_GRID_PRIORITY: float = 0.8
WEIGHT_SIZE_PRIORITY: float = 0.9
WEIGHT_DISTRIBUTION_PRIORITY: float = 1.5

# ----- Snapping defaults -----
DEFAULT_GRID_SIZE: float = 10.0
"""Grid spacing in canvas px."""

DEFAULT_SNAP_THRESHOLD: float = 8.0
"""Maximum distance (px, inclusive) at which a target is considered."""

GRID_MARGIN_CELLS: int = 2
"""Grid lines are generated this many cells beyond the visible view."""

RELEVANCE_DISTANCE_FACTOR: float = 200.0
"""Objects farther than snap_threshold * factor on the perpendicular axis emit no targets."""

VELOCITY_MAX_PX: float = 20.0
"""Velocity (px/frame) at which the velocity score reaches 0."""

# ----- Hierarchy scores -----
HIERARCHY_SELF: float = 0.0
HIERARCHY_UNKNOWN: float = 0.5
HIERARCHY_SIBLING: float = 1.0
HIERARCHY_UNRELATED: float = 0.2
HIERARCHY_MIN_SHARED: float = 0.3
HIERARCHY_DEPTH_PENALTY: float = 0.2
"""Shared-ancestor score is max(HIERARCHY_MIN_SHARED, 1 - penalty * depth)."""

# ----- Sessions -----
VELOCITY_HISTORY_SIZE: int = 10
"""Ring buffer capacity for drag positions."""

VELOCITY_WINDOW: int = 5
"""Most recent positions used for the velocity estimate."""

# ----- Distribution -----
DISTRIBUTION_OVERLAP_FACTOR: float = 2.0
"""Row/column membership overlap tolerance is snap_threshold * factor."""

GAP_TOLERANCE_PX: float = 1.0
"""Existing gaps equal to the spacing within this tolerance are shown as indicators."""

STAIRCASE_THRESHOLD_FACTOR: float = 1.5
"""Staircase slots accept the dragged center within snap_threshold * factor."""

DISTRIBUTION_COUNT_SATURATION: int = 5
"""Participant count at which the distribution score bonus saturates."""

DISTRIBUTION_COUNT_BONUS: float = 0.5
"""Maximum multiplicative bonus for many participants."""

# ----- Resize -----
SIZE_INDICATOR_OFFSET_PX: float = 15.0
"""Size-match indicators are drawn this far outside the object edge."""

MIN_RESIZE_WIDTH: float = 10.0
MIN_RESIZE_HEIGHT: float = 10.0
MIN_AXIS_ALIGNED_SIZE: float = 1.0
"""Minimum size for the axis-aligned resize helper."""

# ----- Rotation -----
SNAP_ANGLE_STEP_DEG: float = 15.0
DEFAULT_SNAP_ANGLES: tuple[float, ...] = tuple(i * SNAP_ANGLE_STEP_DEG for i in range(24))
"""Angles (degrees) that rotation snaps to."""

DEFAULT_ANGLE_SNAP_THRESHOLD_DEG: float = 2.0

ROTATION_EPSILON_DEG: float = 0.001
"""Below this rotation the pivot compensation is a plain translation."""

DEFAULT_PIVOT_SNAP_THRESHOLD: float = 0.08
"""Normalized distance at which a dragged pivot snaps to a canonical point."""

DEFAULT_PIVOT_SNAP_POINTS: tuple[tuple[float, float], ...] = (
    (0.0, 0.0), (0.5, 0.0), (1.0, 0.0),
    (0.0, 0.5), (0.5, 0.5), (1.0, 0.5),
    (0.0, 1.0), (0.5, 1.0), (1.0, 1.0),
)

DEFAULT_SNAP_ZONE_RATIO: float = 0.75
"""Pointer within ratio * arc radius of the pivot enables angle snapping."""

ARC_HANDLE_PADDING_PX: float = 25.0
"""Rotation arc radius is the farthest corner distance from the pivot plus this padding."""

# ----- Rendering -----
RENDER_WIDTH_PX: int = 800
RENDER_HEIGHT_PX: int = 600
RENDER_DPI: int = 100

# ----- Debug -----
SNAP_DEBUG: bool = os.environ.get("SNAP_DEBUG", "").lower() in ("1", "true", "yes")
"""Enable debug logging of snap decisions. Set env SNAP_DEBUG=1 to enable."""
