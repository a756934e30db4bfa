"""Button row for camera control and image selection."""

from __future__ import annotations

from PySide6.QtCore import Signal
from PySide6.QtWidgets import QFileDialog, QHBoxLayout, QLabel, QPushButton, QVBoxLayout, QWidget

from postureangle.config import FacingMode
from postureangle.runtime_paths import get_base_dir

IMAGE_FILTERS = "Image Files (*.jpg *.jpeg *.png *.bmp *.webp *.tif *.tiff);;All Files (*)"

FACING_LABELS = {
    FacingMode.user: "Front camera",
    FacingMode.environment: "Back camera",
}


class ControlsPanel(QWidget):
    """Start/Capture/Stop/Switch camera buttons plus image open and overlay save."""

    start_requested = Signal()
    capture_requested = Signal()
    stop_requested = Signal()
    switch_requested = Signal()
    open_requested = Signal(str)  # image path
    save_requested = Signal(str)  # output path

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._build_ui()

    # ------------------------------------------------------------------
    # UI construction
    # ------------------------------------------------------------------
    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)

        buttons = QHBoxLayout()
        self._start_btn = QPushButton("Start Camera")
        self._start_btn.clicked.connect(self.start_requested.emit)
        buttons.addWidget(self._start_btn)

        self._capture_btn = QPushButton("Capture Photo")
        self._capture_btn.setEnabled(False)
        self._capture_btn.clicked.connect(self.capture_requested.emit)
        buttons.addWidget(self._capture_btn)

        self._stop_btn = QPushButton("Stop Camera")
        self._stop_btn.clicked.connect(self.stop_requested.emit)
        buttons.addWidget(self._stop_btn)

        self._switch_btn = QPushButton("Switch Camera")
        self._switch_btn.clicked.connect(self.switch_requested.emit)
        buttons.addWidget(self._switch_btn)

        open_btn = QPushButton("Open Image...")
        open_btn.clicked.connect(self._on_open)
        buttons.addWidget(open_btn)

        self._save_btn = QPushButton("Save Overlay...")
        self._save_btn.setEnabled(False)
        self._save_btn.clicked.connect(self._on_save)
        buttons.addWidget(self._save_btn)

        buttons.addStretch()
        root.addLayout(buttons)

        self._facing_label = QLabel("")
        root.addWidget(self._facing_label)

    # ------------------------------------------------------------------
    # Slots
    # ------------------------------------------------------------------
    def _on_open(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self, "Select Image", str(get_base_dir()), IMAGE_FILTERS)
        if path:
            self.open_requested.emit(path)

    def _on_save(self) -> None:
        path, _ = QFileDialog.getSaveFileName(
            self, "Save Overlay", str(get_base_dir() / "overlay.png"), "PNG (*.png);;JPEG (*.jpg)"
        )
        if path:
            self.save_requested.emit(path)

    # ------------------------------------------------------------------
    # Public helpers
    # ------------------------------------------------------------------
    def set_camera_running(self, running: bool) -> None:
        self._capture_btn.setEnabled(running)

    def set_has_image(self, has_image: bool) -> None:
        self._save_btn.setEnabled(has_image)

    def set_facing_mode(self, facing_mode: FacingMode) -> None:
        self._facing_label.setText(f"Next start uses: {FACING_LABELS[facing_mode]}")
