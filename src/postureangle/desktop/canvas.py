"""Canvas widget showing the still image with draggable landmark handles."""

from __future__ import annotations

from typing import Any

from PySide6.QtCore import QEvent, QPoint, QPointF, Qt
from PySide6.QtGui import QColor, QPainter, QPen, QPixmap
from PySide6.QtWidgets import QWidget

from postureangle.interaction.drag import DragController, SurfaceRect
from postureangle.interaction.events import InputHub, InputKind
from postureangle.interaction.state import AppState
from postureangle.viz.overlay import hit_test, segment_pairs

HANDLE_COLOR = QColor(255, 0, 0)


class LandmarkCanvas(QWidget):
    """Paints the captured image at natural size and forwards input to the drag controller.

    Handles take the press; moves and releases go through the
    :class:`InputHub` so only an active drag is listening. Qt keeps delivering
    mouse events to the pressed widget until release, so a release anywhere
    ends the drag.
    """

    def __init__(
        self,
        hub: InputHub,
        *,
        handle_diameter: int = 30,
        line_width: int = 2,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._hub = hub
        self._drag: DragController | None = None
        self._pixmap: QPixmap | None = None
        self._state: AppState | None = None
        self._handle_diameter = handle_diameter
        self._line_width = line_width
        self.setAttribute(Qt.WidgetAttribute.WA_AcceptTouchEvents, True)
        self.setMinimumSize(320, 240)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def bind(self, drag: DragController) -> None:
        self._drag = drag

    def set_pixmap(self, pixmap: QPixmap | None) -> None:
        self._pixmap = pixmap
        if pixmap is not None:
            self.setFixedSize(pixmap.size())
        self.update()

    def set_state(self, state: AppState) -> None:
        self._state = state
        self.update()

    def surface_rect(self) -> SurfaceRect | None:
        """Image bounding box in global screen coordinates."""
        if self._pixmap is None:
            return None
        top_left = self.mapToGlobal(QPoint(0, 0))
        return SurfaceRect(
            left=float(top_left.x()),
            top=float(top_left.y()),
            width=float(self._pixmap.width()),
            height=float(self._pixmap.height()),
        )

    # ------------------------------------------------------------------
    # Painting
    # ------------------------------------------------------------------
    def paintEvent(self, event: Any) -> None:  # noqa: N802 – Qt override
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        if self._pixmap is None:
            painter.fillRect(self.rect(), QColor(0, 0, 0))
            painter.end()
            return
        painter.drawPixmap(0, 0, self._pixmap)

        if self._state is not None:
            painter.setPen(QPen(HANDLE_COLOR, self._line_width))
            for start, end in segment_pairs(self._state.points):
                painter.drawLine(QPointF(start.x, start.y), QPointF(end.x, end.y))

            radius = self._handle_diameter / 2.0
            painter.setPen(Qt.PenStyle.NoPen)
            painter.setBrush(HANDLE_COLOR)
            for point in self._state.points:
                painter.drawEllipse(QPointF(point.x, point.y), radius, radius)
        painter.end()

    # ------------------------------------------------------------------
    # Pointer input
    # ------------------------------------------------------------------
    def _press_at(self, local_x: float, local_y: float) -> bool:
        if self._drag is None or self._state is None or self._pixmap is None:
            return False
        index = hit_test(self._state.points, local_x, local_y, diameter=self._handle_diameter)
        if index is None:
            return False
        self._drag.begin_drag(index)
        return True

    def mousePressEvent(self, event: Any) -> None:  # noqa: N802 – Qt override
        pos = event.position()
        if event.button() == Qt.MouseButton.LeftButton and self._press_at(pos.x(), pos.y()):
            self.setCursor(Qt.CursorShape.ClosedHandCursor)
            event.accept()
            return
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event: Any) -> None:  # noqa: N802 – Qt override
        pos = event.globalPosition()
        self._hub.emit(InputKind.pointer_move, pos.x(), pos.y())

    def mouseReleaseEvent(self, event: Any) -> None:  # noqa: N802 – Qt override
        self.unsetCursor()
        self._hub.emit(InputKind.pointer_up)

    # ------------------------------------------------------------------
    # Touch input
    # ------------------------------------------------------------------
    def event(self, event: Any) -> bool:
        kind = event.type()
        if kind == QEvent.Type.TouchBegin:
            points = event.points()
            if points:
                local = points[0].position()
                self._press_at(local.x(), local.y())
            event.accept()
            return True
        if kind == QEvent.Type.TouchUpdate:
            touches = [(p.globalPosition().x(), p.globalPosition().y()) for p in event.points()]
            self._hub.emit(InputKind.touch_move, touches)
            event.accept()
            return True
        if kind in (QEvent.Type.TouchEnd, QEvent.Type.TouchCancel):
            self._hub.emit(InputKind.touch_end)
            event.accept()
            return True
        return super().event(event)
