# snapcanvas/core/io.py
"""
Load and validate a scene from JSON: view bounds, objects and optional
snap configuration overrides.

    {"view": {"x": 0, "y": 0, "width": 800, "height": 600},
     "objects": [{"id": "a", "x": 10, "y": 20, "width": 100, "height": 50,
                  "rotation": 0, "pivot_x": 0.5, "pivot_y": 0.5, "parent_id": null}],
     "config": {"snap_threshold": 8, "weights": {"distance": 10}}}
"""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any

from snapcanvas.core.types import Bounds, Point, Scene, SnapConfiguration, SnapObject

OBJECT_KEYS = {"id", "x", "y", "width", "height", "rotation", "pivot_x", "pivot_y", "parent_id"}


def _resolve_path(path: str | Path, repo_root: Path | None) -> Path:
    """Resolve path; if relative, against repo_root (or cwd if repo_root is None)."""
    p = Path(path)
    if not p.is_absolute() and repo_root is not None:
        p = repo_root / p
    return p.resolve()


def _number(data: dict[str, Any], key: str, where: str, default: float | None = None) -> float:
    value = data.get(key, default)
    if value is None:
        raise ValueError(f"{where}: missing '{key}'")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{where}: '{key}' must be a number")
    if not math.isfinite(value):
        raise ValueError(f"{where}: '{key}' must be finite")
    return float(value)


def parse_bounds(data: Any, where: str) -> Bounds:
    """Bounds from {x, y, width, height}; sizes must be non-negative."""
    if not isinstance(data, dict):
        raise ValueError(f"{where}: expected an object")
    b = Bounds(
        _number(data, "x", where),
        _number(data, "y", where),
        _number(data, "width", where),
        _number(data, "height", where),
    )
    if b.width < 0 or b.height < 0:
        raise ValueError(f"{where}: width and height must be >= 0")
    return b


def parse_object(data: Any, index: int) -> SnapObject:
    where = f"objects[{index}]"
    if not isinstance(data, dict):
        raise ValueError(f"{where}: expected an object")
    unknown = sorted(set(data) - OBJECT_KEYS)
    if unknown:
        raise ValueError(f"{where}: unknown keys {', '.join(unknown)}")
    object_id = data.get("id")
    if not isinstance(object_id, str) or not object_id:
        raise ValueError(f"{where}: 'id' must be a non-empty string")
    parent_id = data.get("parent_id")
    if parent_id is not None and not isinstance(parent_id, str):
        raise ValueError(f"{where}: 'parent_id' must be a string or null")
    return SnapObject(
        id=object_id,
        bounds=parse_bounds(data, where),
        rotation=_number(data, "rotation", where, 0.0),
        pivot=Point(_number(data, "pivot_x", where, 0.5), _number(data, "pivot_y", where, 0.5)),
        parent_id=parent_id,
    )


def scene_from_dict(data: Any) -> Scene:
    """Validate a decoded scene document. Raises ValueError naming the offending field."""
    if not isinstance(data, dict):
        raise ValueError("scene: expected a JSON object")
    if "view" not in data:
        raise ValueError("scene: missing 'view'")
    view = parse_bounds(data["view"], "view")
    raw_objects = data.get("objects", [])
    if not isinstance(raw_objects, list):
        raise ValueError("scene: 'objects' must be a list")
    objects = [parse_object(o, i) for i, o in enumerate(raw_objects)]
    seen: set[str] = set()
    for obj in objects:
        if obj.id in seen:
            raise ValueError(f"scene: duplicate object id '{obj.id}'")
        seen.add(obj.id)
    raw_config = data.get("config") or {}
    if not isinstance(raw_config, dict):
        raise ValueError("scene: 'config' must be an object")
    return Scene(view=view, objects=objects, config=SnapConfiguration.from_dict(raw_config))


def load_scene(path: str | Path, repo_root: Path | None = None) -> Scene:
    """Read and validate a scene file."""
    resolved = _resolve_path(path, repo_root)
    if not resolved.exists():
        raise FileNotFoundError(f"Scene file not found: {resolved}")
    try:
        data = json.loads(resolved.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Scene file is not valid JSON: {e}") from e
    return scene_from_dict(data)
