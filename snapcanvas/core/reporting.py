# snapcanvas/core/reporting.py
"""
Create reports/<run_name>/ and write snap.json and run_metadata.json for a
simulated gesture.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path

from snapcanvas.core.config import (
    DEFAULT_ANGLE_SNAP_THRESHOLD_DEG,
    DEFAULT_PIVOT_SNAP_THRESHOLD,
    DISTRIBUTION_OVERLAP_FACTOR,
    GAP_TOLERANCE_PX,
    GRID_MARGIN_CELLS,
    RELEVANCE_DISTANCE_FACTOR,
    REPORTS_DIR,
    SNAP_ANGLE_STEP_DEG,
    STAIRCASE_THRESHOLD_FACTOR,
    VELOCITY_MAX_PX,
)
from snapcanvas.core.types import (
    TARGET_TYPES,
    ActiveSnap,
    Bounds,
    DistributionCandidate,
    DistributionPattern,
    Point,
    ResizeSnapResult,
    ScoredCandidate,
    SnapConfiguration,
    SnapResult,
    SnapTarget,
)


def _point(p: Point) -> dict:
    return {"x": float(p[0]), "y": float(p[1])}


def _bounds(b: Bounds | None) -> dict | None:
    if b is None:
        return None
    return {"x": b.x, "y": b.y, "width": b.width, "height": b.height}


def target_to_dict(target: SnapTarget) -> dict:
    if not isinstance(target, TARGET_TYPES):
        raise TypeError(f"Unknown snap target: {type(target).__name__}")
    return {
        "type": target.type,
        "axis": target.axis,
        "value": target.value,
        "priority": target.priority,
        "source_object_id": target.source_object_id,
        "source_edge": target.source_edge,
    }


def pattern_to_dict(pattern: DistributionPattern) -> dict:
    return {
        "pattern": pattern.pattern,
        "object_ids": list(pattern.object_ids),
        "spacing": pattern.spacing,
        "gaps": [
            {"start": _point(g.start), "end": _point(g.end), "distance": g.distance, "axis": g.axis}
            for g in pattern.gaps
        ],
    }


def active_snap_to_dict(snap: ActiveSnap) -> dict:
    return {
        "target": target_to_dict(snap.target),
        "snap_edge": snap.snap_edge,
        "distance": snap.distance,
        "score": snap.score,
        "guide": {"start": _point(snap.guide_start), "end": _point(snap.guide_end)},
        "source_object_id": snap.source_object_id,
        "source_bounds": _bounds(snap.source_bounds),
        "matched_size": snap.matched_size,
        "distribution": pattern_to_dict(snap.distribution) if snap.distribution else None,
    }


def candidate_to_dict(candidate: ScoredCandidate) -> dict:
    return {
        "target": target_to_dict(candidate.target),
        "snap_edge": candidate.snap_edge,
        "distance": candidate.distance,
        "score": candidate.score,
        "breakdown": asdict(candidate.breakdown),
    }


def distribution_candidate_to_dict(candidate: DistributionCandidate) -> dict:
    return {
        "position": _point(candidate.position),
        "distance": candidate.distance,
        "score": candidate.score,
        "pattern": pattern_to_dict(candidate.pattern),
    }


def snap_result_to_dict(result: SnapResult) -> dict:
    """Structure for snap.json after a drag."""
    return {
        "mode": "drag",
        "result": {"position": _point(result.snapped_position)},
        "active_snaps": [active_snap_to_dict(s) for s in result.active_snaps],
        "candidates": [candidate_to_dict(c) for c in result.candidates],
        "distribution_candidates": [distribution_candidate_to_dict(c) for c in result.distribution_candidates],
        "warnings": list(result.warnings),
    }


def resize_result_to_dict(result: ResizeSnapResult) -> dict:
    """Structure for snap.json after a resize."""
    return {
        "mode": "resize",
        "result": {"bounds": _bounds(result.snapped_bounds)},
        "active_snaps": [active_snap_to_dict(s) for s in result.active_snaps],
        "candidates": [candidate_to_dict(c) for c in result.candidates],
        "warnings": list(result.warnings),
    }


def run_metadata_dict(
    run_name: str,
    scene_path: str,
    object_id: str,
    delta: tuple[float, float],
    handle: str | None,
    config: SnapConfiguration,
) -> dict:
    """Timestamp, gesture and config snapshot for run_metadata.json."""
    return {
        "run_name": run_name,
        "timestamp_utc": datetime.now(timezone.utc).isoformat(),
        "scene_path": scene_path,
        "object_id": object_id,
        "delta": {"dx": delta[0], "dy": delta[1]},
        "handle": handle,
        "snap_config": asdict(config),
        "config": {
            "GRID_MARGIN_CELLS": GRID_MARGIN_CELLS,
            "RELEVANCE_DISTANCE_FACTOR": RELEVANCE_DISTANCE_FACTOR,
            "VELOCITY_MAX_PX": VELOCITY_MAX_PX,
            "DISTRIBUTION_OVERLAP_FACTOR": DISTRIBUTION_OVERLAP_FACTOR,
            "GAP_TOLERANCE_PX": GAP_TOLERANCE_PX,
            "STAIRCASE_THRESHOLD_FACTOR": STAIRCASE_THRESHOLD_FACTOR,
            "SNAP_ANGLE_STEP_DEG": SNAP_ANGLE_STEP_DEG,
            "DEFAULT_ANGLE_SNAP_THRESHOLD_DEG": DEFAULT_ANGLE_SNAP_THRESHOLD_DEG,
            "DEFAULT_PIVOT_SNAP_THRESHOLD": DEFAULT_PIVOT_SNAP_THRESHOLD,
        },
    }


def ensure_report_dir(
    repo_root: Path,
    run_name: str,
    output_dir: str | None = None,
) -> Path:
    """Create output_dir/<run_name>/ under repo_root; return path. Default output_dir from config."""
    base = output_dir if output_dir is not None else REPORTS_DIR
    out = (repo_root / base).resolve() / run_name
    out.mkdir(parents=True, exist_ok=True)
    return out


def write_snap_json(report_dir: Path, result: SnapResult | ResizeSnapResult) -> Path:
    """Write snap.json to report_dir. Returns path to file."""
    path = report_dir / "snap.json"
    if isinstance(result, ResizeSnapResult):
        data = resize_result_to_dict(result)
    else:
        data = snap_result_to_dict(result)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path


def write_run_metadata_json(
    report_dir: Path,
    run_name: str,
    scene_path: str,
    object_id: str,
    delta: tuple[float, float],
    handle: str | None,
    config: SnapConfiguration,
) -> Path:
    path = report_dir / "run_metadata.json"
    data = run_metadata_dict(run_name, scene_path, object_id, delta, handle, config)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path
