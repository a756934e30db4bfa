"""Camera acquisition and the capture controller.

The controller binds at most one :class:`MediaStream` at a time. Starting the
camera always releases the previously bound stream, and a start that finishes
after it has been superseded releases its own stream instead of binding it.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from pathlib import Path
from typing import Callable

import cv2
import numpy as np

from postureangle.config import AppSettings, FacingMode
from postureangle.errors import CameraSupersededError, CameraUnavailableError, CaptureError
from postureangle.interaction.state import StateStore
from postureangle.io.image_codec import CapturedImage, capture_from_frame, read_image_file

logger = logging.getLogger(__name__)

Notifier = Callable[[str], None]

CAMERA_DENIED_MESSAGE = "Camera access denied. Please allow camera access."
IMAGE_READ_FAILED_MESSAGE = "Could not open the selected image."


class MediaTrack(ABC):
    @property
    @abstractmethod
    def stopped(self) -> bool:
        """Return ``True`` once the track no longer holds the device."""

    @abstractmethod
    def stop(self) -> None:
        """Release the underlying device; safe to call more than once."""


class MediaStream(ABC):
    @property
    @abstractmethod
    def tracks(self) -> list[MediaTrack]:
        """Tracks owned by this stream."""

    @abstractmethod
    def read_frame(self) -> np.ndarray | None:
        """Return the current RGB frame, or ``None`` when none is available."""

    def stop(self) -> None:
        for track in self.tracks:
            track.stop()

    @property
    def active(self) -> bool:
        return any(not track.stopped for track in self.tracks)


class CameraBackend(ABC):
    """Interface for opening a live video stream."""

    @abstractmethod
    def open(self, facing_mode: FacingMode) -> MediaStream:
        """Open a stream for ``facing_mode`` or raise :class:`CameraUnavailableError`."""


class OpenCVVideoTrack(MediaTrack):
    def __init__(self, capture: cv2.VideoCapture) -> None:
        self._capture = capture
        self._stopped = False
        self._lock = threading.Lock()

    @property
    def stopped(self) -> bool:
        return self._stopped

    def stop(self) -> None:
        with self._lock:
            if self._stopped:
                return
            self._stopped = True
            self._capture.release()

    def read(self) -> np.ndarray | None:
        with self._lock:
            if self._stopped:
                return None
            ok, image = self._capture.read()
        if not ok or image is None:
            return None
        return cv2.cvtColor(image, cv2.COLOR_BGR2RGB)


class OpenCVMediaStream(MediaStream):
    def __init__(self, capture: cv2.VideoCapture) -> None:
        self._track = OpenCVVideoTrack(capture)

    @property
    def tracks(self) -> list[MediaTrack]:
        return [self._track]

    def read_frame(self) -> np.ndarray | None:
        return self._track.read()


class OpenCVCameraBackend(CameraBackend):
    def __init__(self, settings: AppSettings | None = None) -> None:
        self._settings = settings or AppSettings()

    def open(self, facing_mode: FacingMode) -> MediaStream:
        index = self._settings.camera_index_for(facing_mode)
        capture = cv2.VideoCapture(index)
        if not capture.isOpened():
            capture.release()
            raise CameraUnavailableError(
                f"Failed to open camera {index} for facing mode '{facing_mode.value}'"
            )
        logger.info("Opened camera %d (%s)", index, facing_mode.value)
        return OpenCVMediaStream(capture)


def is_superseded(future: Future) -> bool:
    """True for futures that were cancelled or replaced; their callbacks have nothing to report."""
    if future.cancelled():
        return True
    return isinstance(future.exception(), CameraSupersededError)


class CaptureController:
    """Produces the Captured Image Reference from a camera or an image file."""

    def __init__(
        self,
        store: StateStore,
        backend: CameraBackend | None = None,
        *,
        settings: AppSettings | None = None,
        notify: Notifier | None = None,
        executor: Executor | None = None,
    ) -> None:
        self._store = store
        self._settings = settings or AppSettings()
        self._backend = backend or OpenCVCameraBackend(self._settings)
        self._notify = notify
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=2, thread_name_prefix="capture")
        self._stream: MediaStream | None = None
        self._generation = 0
        self._pending: set[int] = set()
        self._bound_generation = 0
        self._stopped_generation = 0
        self._lock = threading.Lock()

    @property
    def stream(self) -> MediaStream | None:
        return self._stream

    @property
    def camera_active(self) -> bool:
        stream = self._stream
        return stream is not None and stream.active

    # ------------------------------------------------------------------
    # Camera
    # ------------------------------------------------------------------
    def start_camera(self, facing_mode: FacingMode | None = None) -> Future[MediaStream]:
        """Open the camera on a worker thread; the future resolves to the bound stream."""
        mode = facing_mode or self._store.state.facing_mode
        with self._lock:
            self._generation += 1
            generation = self._generation
            self._pending.add(generation)
        return self._executor.submit(self._open_and_bind, generation, mode)

    def _is_current(self, generation: int) -> bool:
        """A start may bind only if no stop, bound start or pending start came after it."""
        if generation <= self._stopped_generation or generation <= self._bound_generation:
            return False
        return not any(pending > generation for pending in self._pending)

    def _open_and_bind(self, generation: int, facing_mode: FacingMode) -> MediaStream:
        try:
            stream = self._backend.open(facing_mode)
        except Exception as exc:
            with self._lock:
                self._pending.discard(generation)
                current = self._is_current(generation)
            logger.warning("Camera start failed: %s", exc)
            if not current:
                raise CameraSupersededError("Camera start failed after being superseded") from exc
            self._emit_notice(CAMERA_DENIED_MESSAGE)
            if isinstance(exc, CameraUnavailableError):
                raise
            raise CameraUnavailableError(str(exc)) from exc

        with self._lock:
            self._pending.discard(generation)
            superseded = not self._is_current(generation)
            previous = None
            if not superseded:
                previous, self._stream = self._stream, stream
                self._bound_generation = generation

        if superseded:
            stream.stop()
            logger.info("Released camera stream from superseded start")
            raise CameraSupersededError("Camera start was superseded by a newer request")
        if previous is not None and previous is not stream:
            previous.stop()
            logger.info("Released previously bound camera stream")
        return stream

    def stop_camera(self) -> None:
        with self._lock:
            self._stopped_generation = self._generation
            stream, self._stream = self._stream, None
        if stream is not None:
            stream.stop()
            logger.info("Camera stopped")

    def toggle_facing_mode(self) -> FacingMode:
        return self._store.toggle_facing_mode().facing_mode

    def preview_frame(self) -> np.ndarray | None:
        stream = self._stream
        if stream is None:
            return None
        return stream.read_frame()

    def capture_frame(self) -> CapturedImage | None:
        """Snapshot the live frame; returns ``None`` when no sized frame is available."""
        frame = self.preview_frame()
        if frame is None or frame.ndim != 3 or frame.shape[0] == 0 or frame.shape[1] == 0:
            return None
        image = capture_from_frame(frame, quality=self._settings.jpeg_quality)
        self._store.set_image(image)
        logger.info("Captured %dx%d frame", image.width, image.height)
        return image

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------
    def upload_image(self, path: str | Path) -> Future[CapturedImage]:
        return self._executor.submit(self._read_and_store, Path(path))

    def _read_and_store(self, path: Path) -> CapturedImage:
        try:
            image = read_image_file(path)
        except CaptureError as exc:
            logger.warning("Image upload failed: %s", exc)
            self._emit_notice(IMAGE_READ_FAILED_MESSAGE)
            raise
        self._store.set_image(image)
        logger.info("Loaded image %s (%dx%d)", path.name, image.width, image.height)
        return image

    # ------------------------------------------------------------------
    def close(self) -> None:
        self.stop_camera()
        if self._owns_executor:
            self._executor.shutdown(wait=False, cancel_futures=True)

    def _emit_notice(self, message: str) -> None:
        if self._notify is not None:
            self._notify(message)
