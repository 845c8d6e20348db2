# snapcanvas/core/runner.py
"""
CLI entrypoint: load a scene, simulate one drag (or resize with --handle) of
an object by (dx, dy), write snap.json, run_metadata.json and debug.png.

    python -m snapcanvas.core.runner --scene scene.json --object card --dx 10 --dy 5
"""

from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence
from pathlib import Path

from snapcanvas.core.error_codes import OBJECT_NOT_FOUND, RUN_FAILED, user_message
from snapcanvas.core.io import load_scene
from snapcanvas.core.render import render_debug
from snapcanvas.core.reporting import ensure_report_dir, write_run_metadata_json, write_snap_json
from snapcanvas.core.resize import ANCHORS, calculate_resize_bounds
from snapcanvas.core.session import DragSession, ResizeSession
from snapcanvas.core.types import Point, RotatedBounds, parent_lookup

logger = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Simulate a snapped drag or resize on a scene.")
    p.add_argument("--scene", type=str, required=True, help="Scene JSON path (repo-relative)")
    p.add_argument("--object", type=str, required=True, dest="object_id", help="Id of the object to move")
    p.add_argument("--dx", type=float, default=0.0, help="Pointer delta x (px)")
    p.add_argument("--dy", type=float, default=0.0, help="Pointer delta y (px)")
    p.add_argument("--handle", type=str, default=None, choices=sorted(ANCHORS), help="Resize handle; omit for a drag")
    p.add_argument("--run-name", type=str, default="run", dest="run_name", help="Reports subdir name")
    p.add_argument("--output-dir", type=str, default="reports", dest="output_dir", help="Output directory (repo-relative)")
    p.add_argument("--repo-root", type=str, default=None, dest="repo_root", help="Repo root (default: cwd)")
    p.add_argument("--no-render", action="store_true", dest="no_render", help="Skip debug.png")
    return p.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> None:
    args = _parse_args(argv)
    repo_root = Path(args.repo_root).resolve() if args.repo_root else Path.cwd().resolve()

    try:
        scene = load_scene(args.scene, repo_root=repo_root)
    except (FileNotFoundError, ValueError) as e:
        logger.error("could not load scene %s: %s", args.scene, e)
        raise SystemExit(f"{user_message(RUN_FAILED)} ({e})") from e
    obj = scene.get(args.object_id)
    if obj is None:
        raise SystemExit(f"{user_message(OBJECT_NOT_FOUND)} ({args.object_id})")

    # Pointer starts on the object center; the gesture is one move by (dx, dy)
    start = obj.bounds.center
    pointer = Point(start.x + args.dx, start.y + args.dy)
    b = obj.bounds
    proposed = RotatedBounds(b.x + args.dx, b.y + args.dy, b.width, b.height, obj.rotation, obj.pivot)

    if args.handle is None:
        drag = DragSession(scene.objects, scene.view, scene.config, obj, start, get_parent=parent_lookup(scene.objects))
        result = drag.move(pointer)
        position = drag.end()
        after = RotatedBounds(position.x, position.y, b.width, b.height, obj.rotation, obj.pivot)
    else:
        resize = ResizeSession(scene.objects, scene.view, scene.config, obj, args.handle, start)
        result = resize.move(pointer)
        unsnapped = calculate_resize_bounds(resize.state, pointer, resize.min_width, resize.min_height)
        proposed = RotatedBounds.from_bounds(unsnapped, obj.rotation, obj.pivot)
        after = RotatedBounds.from_bounds(resize.end(), obj.rotation, obj.pivot)

    for code in result.warnings:
        logger.warning("%s: %s", code, user_message(code))

    report_dir = ensure_report_dir(repo_root, args.run_name, output_dir=args.output_dir)
    snap_path = write_snap_json(report_dir, result)
    meta_path = write_run_metadata_json(
        report_dir,
        args.run_name,
        args.scene,
        obj.id,
        (args.dx, args.dy),
        args.handle,
        scene.config,
    )
    paths = [snap_path, meta_path]
    if not args.no_render:
        debug_path = report_dir / "debug.png"
        render_debug(scene.view, scene.objects, obj.id, proposed, after, result.active_snaps, debug_path)
        paths.append(debug_path)

    for p in paths:
        print(p)


if __name__ == "__main__":
    main()
