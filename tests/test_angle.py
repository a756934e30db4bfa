from __future__ import annotations

import math

import numpy as np
import pytest

from postureangle.analysis.angle import (
    Point,
    compute_angle,
    compute_raw_angle,
    format_angle,
    make_landmark_set,
    replace_point,
)


def _points(*coords: tuple[float, float]) -> tuple[Point, ...]:
    return tuple(Point(float(x), float(y)) for x, y in coords)


def test_right_angle_folds_to_zero() -> None:
    points = _points((0, 0), (10, 0), (10, 10))
    assert compute_raw_angle(points) == pytest.approx(90.0)
    assert compute_angle(points) == 0.0
    assert format_angle(compute_angle(points)) == "0.00°"


def test_straight_line_is_zero() -> None:
    assert compute_angle(_points((0, 0), (10, 0), (20, 0))) == 0.0


def test_coincident_points_return_sentinel_not_nan() -> None:
    points = _points((0, 0), (0, 0), (0, 0))
    result = compute_angle(points)
    assert result == 0.0
    assert not math.isnan(result)
    assert compute_raw_angle(points) is None


def test_single_zero_length_segment_returns_sentinel() -> None:
    assert compute_angle(_points((5, 5), (5, 5), (20, 7))) == 0.0


def test_fewer_than_three_points_is_zero() -> None:
    assert compute_angle(_points((0, 0), (10, 0))) == 0.0
    assert compute_angle(()) == 0.0


def test_thirty_and_sixty_degrees_fold_to_thirty() -> None:
    sqrt3 = math.sqrt(3.0)
    thirty = _points((0, 0), (1, 0), (1 + sqrt3, 1))
    sixty = _points((0, 0), (1, 0), (2, sqrt3))
    assert compute_angle(thirty) == 30.0
    assert compute_angle(sixty) == 30.0


def test_forty_five_degrees() -> None:
    assert compute_angle(_points((0, 0), (10, 0), (20, 10))) == 45.0


def test_obtuse_angles_fold_to_negative_values() -> None:
    # The fold min(a, 90 - a) is not clamped for raw angles above 90 degrees.
    sqrt3 = math.sqrt(3.0)
    assert compute_angle(_points((0, 0), (1, 0), (0, sqrt3))) == -30.0
    assert compute_angle(_points((0, 0), (10, 0), (0, 0))) == -90.0


def test_result_is_rounded_to_two_decimals() -> None:
    result = compute_angle(_points((0, 0), (10, 0), (17, 3)))
    assert result == round(result, 2)
    assert result == pytest.approx(math.degrees(math.atan2(3, 7)), abs=0.005)


def test_acute_configurations_stay_within_zero_and_forty_five() -> None:
    rng = np.random.default_rng(7)
    for _ in range(200):
        coords = rng.uniform(-500.0, 500.0, size=(3, 2))
        points = _points(*(tuple(row) for row in coords))
        raw = compute_raw_angle(points)
        if raw is None or raw > 90.0:
            continue
        assert 0.0 <= compute_angle(points) <= 45.0


def test_make_landmark_set_requires_three_points() -> None:
    with pytest.raises(ValueError) as exc_info:
        make_landmark_set([(0, 0), (1, 1)])
    assert "exactly 3 points" in str(exc_info.value)


def test_replace_point_keeps_other_points() -> None:
    points = make_landmark_set([(1, 2), (3, 4), (5, 6)])
    updated = replace_point(points, 1, Point(9, 9))
    assert updated == (Point(1, 2), Point(9, 9), Point(5, 6))
    assert points[1] == Point(3, 4)
    with pytest.raises(IndexError):
        replace_point(points, 3, Point(0, 0))
