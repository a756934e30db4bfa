"""Main window: live preview, landmark canvas, angle readout and drag-drop support."""

from __future__ import annotations

import logging
from concurrent.futures import Future
from pathlib import Path
from typing import Any

from PySide6.QtCore import QSettings, Qt, QTimer, Signal
from PySide6.QtWidgets import (
    QLabel,
    QMainWindow,
    QMessageBox,
    QScrollArea,
    QStatusBar,
    QVBoxLayout,
    QWidget,
)

from postureangle.analysis.angle import format_angle
from postureangle.config import AppSettings
from postureangle.desktop.canvas import LandmarkCanvas
from postureangle.desktop.controls_panel import ControlsPanel
from postureangle.desktop.image_utils import rgb_array_to_pixmap
from postureangle.interaction.drag import DragController
from postureangle.interaction.events import InputHub
from postureangle.interaction.state import AppState, StateStore
from postureangle.io.camera import CameraBackend, CaptureController, is_superseded
from postureangle.io.image_codec import SUPPORTED_IMAGE_EXTENSIONS, write_image_rgb
from postureangle.viz.overlay import render_overlay

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """Camera capture with three movable landmarks and the folded angle readout."""

    # Store listeners and future callbacks may run on worker threads; these
    # signals hop back onto the GUI thread.
    state_changed = Signal(object)
    notice_requested = Signal(str)
    camera_started = Signal(object)
    image_loaded = Signal(object)

    def __init__(
        self,
        settings: AppSettings | None = None,
        backend: CameraBackend | None = None,
    ) -> None:
        super().__init__()
        self.setWindowTitle("Posture Angle")
        self.resize(900, 820)
        self.setAcceptDrops(True)

        self._settings = settings or AppSettings()
        self._store = StateStore.with_points(self._settings.initial_points)
        self._hub = InputHub()
        self._controller = CaptureController(
            self._store,
            backend,
            settings=self._settings,
            notify=self.notice_requested.emit,
        )
        self._shown_image: Any = None

        self._build_ui()

        self._drag = DragController(self._store, self._hub, self._canvas.surface_rect)
        self._canvas.bind(self._drag)

        self.state_changed.connect(self._on_state_changed)
        self.notice_requested.connect(self._on_notice)
        self.camera_started.connect(self._on_camera_future_done)
        self.image_loaded.connect(self._on_image_future_done)
        self._unsubscribe = self._store.subscribe(self.state_changed.emit)

        self._preview_timer = QTimer(self)
        self._preview_timer.setInterval(self._settings.preview_interval_ms)
        self._preview_timer.timeout.connect(self._refresh_preview)

        self._restore_geometry()
        self._on_state_changed(self._store.state)

    # ------------------------------------------------------------------
    # UI construction
    # ------------------------------------------------------------------
    def _build_ui(self) -> None:
        central = QWidget()
        root = QVBoxLayout(central)

        self._preview_label = QLabel("Camera preview")
        self._preview_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._preview_label.setMinimumHeight(240)
        self._preview_label.setStyleSheet("background-color: black; color: gray;")
        root.addWidget(self._preview_label)

        self._controls = ControlsPanel()
        root.addWidget(self._controls)

        self._canvas = LandmarkCanvas(
            self._hub,
            handle_diameter=self._settings.handle_diameter,
            line_width=self._settings.line_width,
        )
        scroll = QScrollArea()
        scroll.setWidget(self._canvas)
        scroll.setAlignment(Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignTop)
        root.addWidget(scroll, stretch=1)

        self._angle_label = QLabel("")
        font = self._angle_label.font()
        font.setPointSize(font.pointSize() + 4)
        self._angle_label.setFont(font)
        root.addWidget(self._angle_label)

        self.setCentralWidget(central)
        self.setStatusBar(QStatusBar())

        self._controls.start_requested.connect(self._on_start_camera)
        self._controls.capture_requested.connect(self._on_capture)
        self._controls.stop_requested.connect(self._on_stop_camera)
        self._controls.switch_requested.connect(self._on_switch_camera)
        self._controls.open_requested.connect(self.open_image)
        self._controls.save_requested.connect(self._on_save_overlay)

    # ------------------------------------------------------------------
    # Camera control
    # ------------------------------------------------------------------
    def _on_start_camera(self) -> None:
        self.statusBar().showMessage("Starting camera...")
        future = self._controller.start_camera()
        future.add_done_callback(self.camera_started.emit)

    def _on_camera_future_done(self, future: Future) -> None:
        if is_superseded(future):
            return
        exc = future.exception()
        if exc is not None:
            self.statusBar().showMessage("Camera unavailable", 5000)
            return
        self._controls.set_camera_running(True)
        self._preview_timer.start()
        self.statusBar().showMessage("Camera started", 3000)

    def _on_capture(self) -> None:
        image = self._controller.capture_frame()
        if image is not None:
            self.statusBar().showMessage(f"Captured {image.width}x{image.height}", 3000)

    def _on_stop_camera(self) -> None:
        self._controller.stop_camera()
        self._preview_timer.stop()
        self._controls.set_camera_running(False)
        self._preview_label.clear()
        self._preview_label.setText("Camera preview")

    def _on_switch_camera(self) -> None:
        mode = self._controller.toggle_facing_mode()
        self.statusBar().showMessage(f"Switched to {mode.value} camera for the next start", 3000)

    def _refresh_preview(self) -> None:
        frame = self._controller.preview_frame()
        if frame is None:
            return
        pixmap = rgb_array_to_pixmap(frame)
        self._preview_label.setPixmap(
            pixmap.scaledToHeight(self._preview_label.height(), Qt.TransformationMode.SmoothTransformation)
        )

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------
    def open_image(self, path: str) -> None:
        future = self._controller.upload_image(path)
        future.add_done_callback(self.image_loaded.emit)

    def _on_image_future_done(self, future: Future) -> None:
        if future.cancelled():
            return
        if future.exception() is None:
            self.statusBar().showMessage(f"Loaded {future.result().filename}", 3000)

    def _on_save_overlay(self, path: str) -> None:
        state = self._store.state
        if state.image is None:
            return
        overlay = render_overlay(
            state.image.image_rgb,
            state.points,
            handle_diameter=self._settings.handle_diameter,
            line_width=self._settings.line_width,
        )
        try:
            out_path = write_image_rgb(path, overlay)
        except RuntimeError as exc:
            QMessageBox.warning(self, "Save Failed", str(exc))
            return
        self.statusBar().showMessage(f"Saved {out_path}", 5000)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    def _on_state_changed(self, state: AppState) -> None:
        if state.image is not self._shown_image:
            self._shown_image = state.image
            pixmap = rgb_array_to_pixmap(state.image.image_rgb) if state.image is not None else None
            self._canvas.set_pixmap(pixmap)
            self._controls.set_has_image(state.image is not None)
        self._canvas.set_state(state)
        self._controls.set_facing_mode(state.facing_mode)
        self._angle_label.setText(f"Angle between lines: {format_angle(state.angle)}")

    def _on_notice(self, message: str) -> None:
        QMessageBox.warning(self, "Posture Angle", message)

    # ------------------------------------------------------------------
    # Drag & drop
    # ------------------------------------------------------------------
    def dragEnterEvent(self, event: Any) -> None:  # noqa: N802 – Qt override
        mime = event.mimeData()
        if mime.hasUrls():
            for url in mime.urls():
                if url.isLocalFile() and Path(url.toLocalFile()).suffix.lower() in SUPPORTED_IMAGE_EXTENSIONS:
                    event.acceptProposedAction()
                    return
        event.ignore()

    def dropEvent(self, event: Any) -> None:  # noqa: N802 – Qt override
        for url in event.mimeData().urls():
            path = url.toLocalFile()
            if Path(path).suffix.lower() in SUPPORTED_IMAGE_EXTENSIONS:
                self.open_image(path)
                event.acceptProposedAction()
                return
        event.ignore()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def _restore_geometry(self) -> None:
        geometry = QSettings().value("main_window/geometry")
        if geometry is not None:
            self.restoreGeometry(geometry)

    def closeEvent(self, event: Any) -> None:  # noqa: N802 – Qt override
        QSettings().setValue("main_window/geometry", self.saveGeometry())
        self._preview_timer.stop()
        self._drag.teardown()
        self._unsubscribe()
        self._controller.close()
        logger.info("Main window closed")
        super().closeEvent(event)
