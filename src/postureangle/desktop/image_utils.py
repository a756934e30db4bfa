"""Utilities for converting RGB numpy frames to Qt images."""

from __future__ import annotations

import numpy as np
from PySide6.QtGui import QImage, QPixmap


def rgb_array_to_qimage(image_rgb: np.ndarray) -> QImage:
    """Return a QImage that owns a copy of an ``(H, W, 3)`` uint8 RGB array."""
    frame = np.ascontiguousarray(image_rgb, dtype=np.uint8)
    height, width = frame.shape[:2]
    qimage = QImage(frame.data, width, height, 3 * width, QImage.Format.Format_RGB888)
    return qimage.copy()


def rgb_array_to_pixmap(image_rgb: np.ndarray) -> QPixmap:
    return QPixmap.fromImage(rgb_array_to_qimage(image_rgb))
