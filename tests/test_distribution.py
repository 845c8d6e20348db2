# tests/test_distribution.py
"""
Equal-spacing detection: row insertion, gap matching, column, staircase and
the guards that disable detection.
"""

from __future__ import annotations

import pytest

from snapcanvas.core.distribution import (
    detect_distribution,
    distribution_score,
    distribution_to_active_snap,
    ranges_overlap,
)
from snapcanvas.core.types import Bounds, Point, RotatedBounds, SnapConfiguration, SnapObject


def _row(*xs: float, y: float = 0, size: float = 50) -> list[SnapObject]:
    return [SnapObject(f"o{i}", Bounds(x, y, size, size)) for i, x in enumerate(xs)]


def test_ranges_overlap() -> None:
    assert ranges_overlap(0, 10, 10, 20)
    assert not ranges_overlap(0, 10, 11, 20)
    assert ranges_overlap(0, 10, 15, 20, tolerance=5)


def test_distribution_score() -> None:
    assert distribution_score(3, 0, 8) == pytest.approx(1.3)
    assert distribution_score(10, 0, 8) == pytest.approx(1.5)
    assert distribution_score(4, 8, 8) == 0.0


def test_row_gap_match_extends_sequence() -> None:
    objects = _row(0, 150, 300)
    found = detect_distribution(RotatedBounds(447, 0, 50, 50), "me", objects, set(), SnapConfiguration())
    assert len(found) == 1
    best = found[0]
    assert best.pattern.pattern == "row"
    assert best.position == Point(450, 0)
    assert best.pattern.spacing == pytest.approx(100)
    assert best.pattern.object_ids == ["o0", "o1", "o2", "me"]
    assert len(best.pattern.gaps) == 3
    assert best.distance == pytest.approx(3)
    assert best.score == pytest.approx(0.625 * 1.4)


def test_row_insertion_between_neighbours() -> None:
    objects = _row(0, 200)
    found = detect_distribution(RotatedBounds(98, 0, 50, 50), "me", objects, set(), SnapConfiguration())
    assert len(found) == 1
    best = found[0]
    assert best.position == Point(100, 0)
    assert best.pattern.spacing == pytest.approx(50)
    assert best.pattern.object_ids == ["o0", "me", "o1"]
    assert [g.distance for g in best.pattern.gaps] == [pytest.approx(50), pytest.approx(50)]


def test_column_insertion() -> None:
    objects = [SnapObject("top", Bounds(0, 0, 50, 50)), SnapObject("bottom", Bounds(0, 200, 50, 50))]
    found = detect_distribution(RotatedBounds(0, 103, 50, 50), "me", objects, set(), SnapConfiguration())
    assert found[0].pattern.pattern == "column"
    assert found[0].position == Point(0, 100)
    assert found[0].pattern.gaps[0].axis == "y"


def test_staircase_extends_after_last() -> None:
    objects = [
        SnapObject("a", Bounds(0, 0, 20, 20)),
        SnapObject("b", Bounds(50, 50, 20, 20)),
        SnapObject("c", Bounds(100, 100, 20, 20)),
    ]
    found = detect_distribution(RotatedBounds(153, 150, 20, 20), "me", objects, set(), SnapConfiguration())
    assert len(found) == 1
    best = found[0]
    assert best.pattern.pattern == "staircase"
    assert best.position.x == pytest.approx(150)
    assert best.position.y == pytest.approx(150)
    assert best.pattern.object_ids == ["a", "b", "c", "me"]
    assert best.pattern.spacing == pytest.approx(50 * 2 ** 0.5)


def test_rotated_dragged_position_in_own_frame() -> None:
    objects = _row(0, 200)
    # 90 degrees about the center of a square keeps the AABB equal to the bounds
    found = detect_distribution(RotatedBounds(98, 0, 50, 50, rotation=90), "me", objects, set(), SnapConfiguration())
    assert found[0].position.x == pytest.approx(100)
    assert found[0].position.y == pytest.approx(0, abs=1e-9)


def test_guards() -> None:
    objects = _row(0, 200)
    dragged = RotatedBounds(98, 0, 50, 50)
    assert detect_distribution(dragged, "me", objects, set(), SnapConfiguration(snap_to_distribution=False)) == []
    assert detect_distribution(dragged, "me", objects[:1], set(), SnapConfiguration()) == []
    assert detect_distribution(dragged, "me", objects, {"o1"}, SnapConfiguration()) == []
    assert detect_distribution(dragged, "me", objects, set(), SnapConfiguration(snap_threshold=0)) == []


def test_dragged_object_in_list_is_ignored() -> None:
    objects = _row(0, 200) + [SnapObject("me", Bounds(98, 0, 50, 50))]
    found = detect_distribution(RotatedBounds(98, 0, 50, 50), "me", objects, set(), SnapConfiguration())
    assert found[0].pattern.object_ids == ["o0", "me", "o1"]


def test_out_of_threshold_no_pattern() -> None:
    objects = _row(0, 150, 300)
    found = detect_distribution(RotatedBounds(470, 0, 50, 50), "me", objects, set(), SnapConfiguration())
    assert found == []


def test_distribution_to_active_snap() -> None:
    objects = _row(0, 150, 300)
    config = SnapConfiguration()
    best = detect_distribution(RotatedBounds(447, 0, 50, 50), "me", objects, set(), config)[0]
    snap = distribution_to_active_snap(best, config)
    assert snap.target.type == "distribution"
    assert snap.target.axis == "x"
    assert snap.target.value == 450
    assert snap.target.priority == config.weights.distribution_priority
    assert snap.distribution is best.pattern
