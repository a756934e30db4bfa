from __future__ import annotations


class CaptureError(RuntimeError):
    """Base class for failures while acquiring an image."""


class CameraUnavailableError(CaptureError):
    """The camera could not be opened (no device, permission denied, busy)."""


class CameraSupersededError(CaptureError):
    """A pending camera start was replaced by a newer start or a stop."""


class ImageReadError(CaptureError):
    """An image file could not be read or decoded."""
