from __future__ import annotations

import base64
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

import cv2
import numpy as np

from postureangle.errors import ImageReadError

SUPPORTED_IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".bmp", ".webp", ".tif", ".tiff"}

ImageSource = Literal["camera", "upload"]


@dataclass(frozen=True, eq=False)
class CapturedImage:
    image_rgb: np.ndarray
    encoded: bytes
    mime_type: str
    source: ImageSource
    filename: str | None = None

    @property
    def width(self) -> int:
        return int(self.image_rgb.shape[1])

    @property
    def height(self) -> int:
        return int(self.image_rgb.shape[0])

    @property
    def data_url(self) -> str:
        payload = base64.b64encode(self.encoded).decode("ascii")
        return f"data:{self.mime_type};base64,{payload}"

    def summary(self) -> dict[str, object]:
        return {
            "source": self.source,
            "filename": self.filename,
            "mime_type": self.mime_type,
            "width": self.width,
            "height": self.height,
            "size_bytes": len(self.encoded),
        }


def encode_jpeg(image_rgb: np.ndarray, quality: int = 92) -> bytes:
    if image_rgb.ndim != 3 or image_rgb.shape[2] != 3:
        raise ValueError(f"image_rgb must have shape (H, W, 3), got: {image_rgb.shape}")
    image_bgr = cv2.cvtColor(image_rgb, cv2.COLOR_RGB2BGR)
    ok, buffer = cv2.imencode(".jpg", image_bgr, [int(cv2.IMWRITE_JPEG_QUALITY), int(quality)])
    if not ok:
        raise RuntimeError("Failed to encode frame as JPEG")
    return buffer.tobytes()


def decode_image_bytes(raw: bytes) -> np.ndarray:
    if not raw:
        raise ImageReadError("Image file is empty")
    buffer = np.frombuffer(raw, dtype=np.uint8)
    image_bgr = cv2.imdecode(buffer, cv2.IMREAD_COLOR)
    if image_bgr is None:
        raise ImageReadError("File is not a decodable image")
    return cv2.cvtColor(image_bgr, cv2.COLOR_BGR2RGB)


def _mime_type_for(raw: bytes, path: Path) -> str:
    if raw.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if raw.startswith(b"\xff\xd8"):
        return "image/jpeg"
    suffix = path.suffix.lower().lstrip(".")
    if suffix == "jpg":
        suffix = "jpeg"
    return f"image/{suffix or 'octet-stream'}"


def capture_from_frame(image_rgb: np.ndarray, *, quality: int = 92) -> CapturedImage:
    return CapturedImage(
        image_rgb=image_rgb,
        encoded=encode_jpeg(image_rgb, quality=quality),
        mime_type="image/jpeg",
        source="camera",
    )


def read_image_file(path: str | Path) -> CapturedImage:
    image_path = Path(path)
    if not image_path.exists():
        raise ImageReadError(f"Image file does not exist: {image_path}")
    if not image_path.is_file():
        raise ImageReadError(f"Image path is not a file: {image_path}")
    try:
        raw = image_path.read_bytes()
    except OSError as exc:
        raise ImageReadError(f"Failed to read image file: {image_path}") from exc
    return CapturedImage(
        image_rgb=decode_image_bytes(raw),
        encoded=raw,
        mime_type=_mime_type_for(raw, image_path),
        source="upload",
        filename=image_path.name,
    )


def write_image_rgb(path: str | Path, image_rgb: np.ndarray) -> Path:
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    ok = cv2.imwrite(str(out_path), cv2.cvtColor(image_rgb, cv2.COLOR_RGB2BGR))
    if not ok:
        raise RuntimeError(f"Failed to write image to: {out_path}")
    return out_path
