"""Landmark geometry and the folded segment angle used as the posture readout."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np

LANDMARK_COUNT = 3
DEGENERATE_ANGLE = 0.0


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def as_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)


LandmarkSet = tuple[Point, Point, Point]


def to_point(value: Point | Sequence[float]) -> Point:
    if isinstance(value, Point):
        return value
    if len(value) != 2:
        raise ValueError(f"Point must have 2 coordinates, got: {len(value)}")
    return Point(float(value[0]), float(value[1]))


def make_landmark_set(points: Iterable[Point | Sequence[float]]) -> LandmarkSet:
    items = tuple(to_point(point) for point in points)
    if len(items) != LANDMARK_COUNT:
        raise ValueError(f"Landmark set must contain exactly {LANDMARK_COUNT} points, got: {len(items)}")
    return items  # type: ignore[return-value]


def replace_point(points: LandmarkSet, index: int, point: Point) -> LandmarkSet:
    """Return a copy of ``points`` with only ``index`` replaced."""
    if not 0 <= index < LANDMARK_COUNT:
        raise IndexError(f"Landmark index must be in [0, {LANDMARK_COUNT - 1}], got: {index}")
    updated = list(points)
    updated[index] = point
    return tuple(updated)  # type: ignore[return-value]


def segment_vectors(points: Sequence[Point]) -> tuple[np.ndarray, np.ndarray]:
    p0, p1, p2 = (np.asarray(point.as_tuple(), dtype=np.float64) for point in points[:LANDMARK_COUNT])
    return p1 - p0, p2 - p1


def compute_raw_angle(points: Sequence[Point]) -> float | None:
    """Return the unfolded angle in degrees between the two segments.

    ``None`` is returned when either segment has zero length.
    """
    if len(points) < LANDMARK_COUNT:
        return None
    u, v = segment_vectors(points)
    magnitude = float(np.linalg.norm(u) * np.linalg.norm(v))
    if magnitude == 0.0:
        return None
    cosine = float(np.dot(u, v)) / magnitude
    return float(np.degrees(np.arccos(np.clip(cosine, -1.0, 1.0))))


def compute_angle(points: Sequence[Point]) -> float:
    """Fold the segment angle into ``min(angle, 90 - angle)``, rounded to 2 decimals.

    Raw angles above 90 degrees fold to negative values; that is kept as is.
    Fewer than three points or a zero-length segment yields 0.0.
    """
    raw = compute_raw_angle(points)
    if raw is None:
        return DEGENERATE_ANGLE
    folded = min(raw, 90.0 - raw)
    # adding 0.0 turns a rounded -0.0 into 0.0
    return round(folded, 2) + 0.0


def format_angle(value: float) -> str:
    return f"{value:.2f}°"
