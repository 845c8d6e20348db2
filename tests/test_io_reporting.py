# tests/test_io_reporting.py
"""
Scene loading and validation; snap.json / run_metadata.json reporting.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from snapcanvas.core.io import load_scene, scene_from_dict
from snapcanvas.core.reporting import (
    ensure_report_dir,
    resize_result_to_dict,
    run_metadata_dict,
    snap_result_to_dict,
    target_to_dict,
    write_run_metadata_json,
    write_snap_json,
)
from snapcanvas.core.snapping import compute_snap
from snapcanvas.core.types import (
    Bounds,
    DragSnapContext,
    GridTarget,
    Point,
    ResizeSnapResult,
    RotatedBounds,
    SnapConfiguration,
    SnapObject,
)


def _scene_dict() -> dict:
    return {
        "view": {"x": 0, "y": 0, "width": 800, "height": 600},
        "objects": [
            {"id": "a", "x": 0, "y": 0, "width": 50, "height": 50},
            {"id": "b", "x": 100, "y": 0, "width": 50, "height": 50, "rotation": 15,
             "pivot_x": 0, "pivot_y": 1, "parent_id": "a"},
        ],
        "config": {"snap_threshold": 6, "weights": {"distance": 12}},
    }


def test_load_scene(tmp_path: Path) -> None:
    path = tmp_path / "scene.json"
    path.write_text(json.dumps(_scene_dict()), encoding="utf-8")
    scene = load_scene("scene.json", repo_root=tmp_path)
    assert scene.view == Bounds(0, 0, 800, 600)
    assert [o.id for o in scene.objects] == ["a", "b"]
    b = scene.get("b")
    assert b is not None
    assert b.rotation == 15
    assert b.pivot == Point(0.0, 1.0)
    assert b.parent_id == "a"
    assert scene.get("a").pivot == Point(0.5, 0.5)
    assert scene.config.snap_threshold == 6
    assert scene.config.weights.distance == 12
    assert scene.config.weights.hierarchy == SnapConfiguration().weights.hierarchy
    assert scene.get("missing") is None


def test_load_scene_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_scene(tmp_path / "nope.json")


def test_load_scene_bad_json(tmp_path: Path) -> None:
    path = tmp_path / "bad.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ValueError):
        load_scene(path)


@pytest.mark.parametrize(
    "mutate, match",
    [
        (lambda d: d.pop("view"), "view"),
        (lambda d: d["objects"].append({"id": "a", "x": 0, "y": 0, "width": 1, "height": 1}), "duplicate"),
        (lambda d: d["objects"][0].update(width=-1), "width"),
        (lambda d: d["objects"][0].update(x="left"), "'x'"),
        (lambda d: d["objects"][0].pop("height"), "height"),
        (lambda d: d["objects"][0].update(colour="red"), "colour"),
        (lambda d: d["config"].update(snap_radius=3), "snap_radius"),
        (lambda d: d["config"]["weights"].update(speed=1), "speed"),
    ],
)
def test_scene_validation(mutate, match: str) -> None:
    data = _scene_dict()
    mutate(data)
    with pytest.raises(ValueError, match=match):
        scene_from_dict(data)


def _drag_result():
    objects = [SnapObject("other", Bounds(100, 200, 50, 50))]
    context = DragSnapContext(bounds=RotatedBounds(97, 50, 100, 80), object_id="me")
    return compute_snap(context, objects, Bounds(0, 0, 800, 600), SnapConfiguration(snap_to_grid=False))


def test_snap_result_to_dict() -> None:
    data = snap_result_to_dict(_drag_result())
    assert data["mode"] == "drag"
    assert data["result"]["position"] == {"x": 100.0, "y": 50.0}
    assert len(data["active_snaps"]) == 1
    snap = data["active_snaps"][0]
    assert snap["target"]["axis"] == "x"
    assert snap["source_bounds"] == {"x": 100, "y": 200, "width": 50, "height": 50}
    assert set(data["candidates"][0]["breakdown"]) == {
        "distance", "grab_proximity", "hierarchy", "direction", "velocity", "type_priority",
    }
    json.dumps(data)


def test_resize_result_to_dict() -> None:
    data = resize_result_to_dict(ResizeSnapResult(snapped_bounds=Bounds(1, 2, 3, 4), warnings=["x"]))
    assert data["mode"] == "resize"
    assert data["result"]["bounds"] == {"x": 1, "y": 2, "width": 3, "height": 4}
    assert data["warnings"] == ["x"]


def test_target_to_dict() -> None:
    assert target_to_dict(GridTarget("y", 40, 5)) == {
        "type": "grid", "axis": "y", "value": 40, "priority": 5,
        "source_object_id": None, "source_edge": None,
    }
    with pytest.raises(TypeError):
        target_to_dict("edge")  # type: ignore[arg-type]


def test_run_metadata_dict() -> None:
    meta = run_metadata_dict("r1", "scene.json", "a", (10, 5), None, SnapConfiguration())
    assert meta["run_name"] == "r1"
    assert meta["delta"] == {"dx": 10, "dy": 5}
    assert meta["snap_config"]["snap_threshold"] == 8
    assert "timestamp_utc" in meta and "config" in meta


def test_write_reports(tmp_path: Path) -> None:
    report_dir = ensure_report_dir(tmp_path, "run1", output_dir="out")
    assert report_dir == (tmp_path / "out").resolve() / "run1"
    assert report_dir.is_dir()
    snap_path = write_snap_json(report_dir, _drag_result())
    meta_path = write_run_metadata_json(report_dir, "run1", "scene.json", "me", (3, 0), None, SnapConfiguration())
    assert json.loads(snap_path.read_text(encoding="utf-8"))["mode"] == "drag"
    assert json.loads(meta_path.read_text(encoding="utf-8"))["object_id"] == "me"
