# snapcanvas/core/render.py
"""
Matplotlib PNG rendering of a snap run: objects (rotated outlines), the
dragged object before and after snapping, alignment guides and distribution gaps.
Canvas coordinates are y-down, so the y axis is inverted.
"""

from __future__ import annotations

import warnings
from pathlib import Path

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
from shapely.geometry import Polygon

from snapcanvas.core.config import RENDER_DPI, RENDER_HEIGHT_PX, RENDER_WIDTH_PX
from snapcanvas.core.geometry import to_polygon
from snapcanvas.core.types import ActiveSnap, Bounds, RotatedBounds, SnapObject


def set_axes_to_view(ax: plt.Axes, view: Bounds, pad_frac: float = 0.05) -> None:
    """Set xlim/ylim from the view with margin; equal aspect; y down; hide axes."""
    dx = max(1.0, view.width * pad_frac)
    dy = max(1.0, view.height * pad_frac)
    ax.set_xlim(view.left - dx, view.right + dx)
    ax.set_ylim(view.bottom + dy, view.top - dy)
    ax.set_aspect("equal", adjustable="box")
    ax.axis("off")


def _new_fig(width_px: int, height_px: int) -> tuple[plt.Figure, plt.Axes]:
    fig = plt.figure(
        figsize=(width_px / RENDER_DPI, height_px / RENDER_DPI),
        dpi=RENDER_DPI,
        constrained_layout=False,
    )
    # Bottom margin reserved for the legend
    ax = fig.add_axes([0.05, 0.08, 0.9, 0.88])
    ax.axis("off")
    return fig, ax


def _draw_polygon(
    ax: plt.Axes,
    poly: Polygon,
    facecolor: str = "lightblue",
    edgecolor: str = "navy",
    alpha: float = 1.0,
    linestyle: str = "-",
    label: str | None = None,
) -> None:
    if poly.is_empty:
        return
    xy = np.array(poly.exterior.coords)
    ax.fill(
        xy[:, 0], xy[:, 1],
        facecolor=facecolor, edgecolor=edgecolor, linewidth=1,
        alpha=alpha, linestyle=linestyle, label=label,
    )


def _draw_view(ax: plt.Axes, view: Bounds) -> None:
    xs = [view.left, view.right, view.right, view.left, view.left]
    ys = [view.top, view.top, view.bottom, view.bottom, view.top]
    ax.plot(xs, ys, color="gray", linewidth=0.8, linestyle=":")


def _draw_snap(ax: plt.Axes, snap: ActiveSnap, labelled: set[str]) -> None:
    kind = snap.target.type
    label = kind if kind not in labelled else None
    labelled.add(kind)
    if snap.distribution is not None:
        for gap in snap.distribution.gaps:
            ax.annotate(
                "", xy=(gap.end.x, gap.end.y), xytext=(gap.start.x, gap.start.y),
                arrowprops={"arrowstyle": "<->", "color": "purple", "linewidth": 1},
            )
        ax.plot([], [], color="purple", label=label)
        return
    color = "green" if kind == "size" else "magenta"
    ax.plot(
        [snap.guide_start.x, snap.guide_end.x],
        [snap.guide_start.y, snap.guide_end.y],
        color=color, linewidth=1, linestyle="--", label=label,
    )


def render_debug(
    view: Bounds,
    objects: list[SnapObject],
    moved_id: str,
    before: RotatedBounds,
    after: RotatedBounds,
    active_snaps: list[ActiveSnap],
    output_path: str | Path,
    width_px: int = RENDER_WIDTH_PX,
    height_px: int = RENDER_HEIGHT_PX,
    scale: int = 1,
) -> None:
    """Render the debug overlay. scale multiplies output resolution (1x, 2x, 4x)."""
    w, h = width_px * scale, height_px * scale
    fig, ax = _new_fig(w, h)
    _draw_view(ax, view)

    for obj in objects:
        if obj.id == moved_id:
            continue
        _draw_polygon(ax, to_polygon(obj.rotated_bounds()), alpha=0.5)

    _draw_polygon(ax, to_polygon(before), facecolor="none", edgecolor="orange", linestyle="--", label="proposed")
    _draw_polygon(ax, to_polygon(after), facecolor="orange", edgecolor="darkorange", alpha=0.6, label="snapped")

    labelled: set[str] = set()
    for snap in active_snaps:
        _draw_snap(ax, snap, labelled)

    set_axes_to_view(ax, view)
    # Legend in the reserved bottom margin so it never overlaps the image
    leg = ax.legend(loc="upper center", bbox_to_anchor=(0.5, -0.02), ncol=4, fontsize=8)
    with warnings.catch_warnings():
        warnings.filterwarnings("ignore", message=".*constrained_layout.*", category=UserWarning)
        fig.savefig(output_path, dpi=RENDER_DPI, facecolor="white", bbox_inches="tight", bbox_extra_artists=[leg])
    plt.close(fig)
