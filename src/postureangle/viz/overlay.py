from __future__ import annotations

from typing import Sequence

import cv2
import numpy as np

from postureangle.analysis.angle import Point, compute_angle, format_angle

LINE_COLOR_RGB = (255, 0, 0)
HANDLE_COLOR_RGB = (255, 0, 0)
TEXT_COLOR_RGB = (255, 255, 255)


def hit_test(points: Sequence[Point], x: float, y: float, *, diameter: float = 30.0) -> int | None:
    """Return the index of the top-most handle under ``(x, y)``.

    Handles are stacked in index order, so the highest matching index wins.
    """
    radius_sq = (diameter / 2.0) ** 2
    for index in range(len(points) - 1, -1, -1):
        point = points[index]
        if (x - point.x) ** 2 + (y - point.y) ** 2 <= radius_sq:
            return index
    return None


def segment_pairs(points: Sequence[Point]) -> list[tuple[Point, Point]]:
    return [(points[idx], points[idx + 1]) for idx in range(len(points) - 1)]


def _pixel(point: Point) -> tuple[int, int]:
    return (int(round(point.x)), int(round(point.y)))


def render_overlay(
    image_rgb: np.ndarray,
    points: Sequence[Point],
    *,
    handle_diameter: int = 30,
    line_width: int = 2,
    show_angle: bool = True,
) -> np.ndarray:
    """Draw both segments, the handles and the angle readout on a copy of the image."""
    canvas = np.ascontiguousarray(image_rgb.copy())
    for start, end in segment_pairs(points):
        cv2.line(canvas, _pixel(start), _pixel(end), LINE_COLOR_RGB, line_width, cv2.LINE_AA)

    radius = max(1, handle_diameter // 2)
    for point in points:
        cv2.circle(canvas, _pixel(point), radius, HANDLE_COLOR_RGB, thickness=-1, lineType=cv2.LINE_AA)

    if show_angle:
        label = f"Angle between lines: {format_angle(compute_angle(points))}"
        # Hershey fonts have no degree glyph
        label = label.replace("°", " deg")
        origin = (10, max(24, canvas.shape[0] - 12))
        cv2.putText(canvas, label, origin, cv2.FONT_HERSHEY_SIMPLEX, 0.7, (0, 0, 0), 4, cv2.LINE_AA)
        cv2.putText(canvas, label, origin, cv2.FONT_HERSHEY_SIMPLEX, 0.7, TEXT_COLOR_RGB, 1, cv2.LINE_AA)
    return canvas
