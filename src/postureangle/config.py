from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

DEFAULT_POINTS: tuple[tuple[float, float], ...] = ((100.0, 100.0), (200.0, 200.0), (300.0, 100.0))


class FacingMode(str, Enum):
    user = "user"
    environment = "environment"

    def toggled(self) -> "FacingMode":
        return FacingMode.environment if self is FacingMode.user else FacingMode.user


class AppSettings(BaseModel):
    camera_indices: dict[FacingMode, int] = Field(
        default_factory=lambda: {FacingMode.user: 0, FacingMode.environment: 1},
        description="OpenCV device index for each facing mode",
    )
    jpeg_quality: int = Field(default=92, ge=1, le=100, description="Quality of captured stills")
    initial_points: list[tuple[float, float]] = Field(
        default_factory=lambda: [tuple(point) for point in DEFAULT_POINTS],
        description="Landmark positions before the first drag",
    )
    handle_diameter: int = Field(default=30, ge=4)
    line_width: int = Field(default=2, ge=1)
    preview_interval_ms: int = Field(default=33, ge=5, description="Live preview refresh period")

    @field_validator("initial_points")
    @classmethod
    def validate_initial_points(cls, value: list[tuple[float, float]]) -> list[tuple[float, float]]:
        if len(value) != 3:
            raise ValueError(f"initial_points must contain exactly 3 points, got: {len(value)}")
        return value

    @field_validator("camera_indices")
    @classmethod
    def validate_camera_indices(cls, value: dict[FacingMode, int]) -> dict[FacingMode, int]:
        missing = [mode.value for mode in FacingMode if mode not in value]
        if missing:
            raise ValueError(f"camera_indices is missing facing modes: {', '.join(missing)}")
        negative = [mode.value for mode, index in value.items() if index < 0]
        if negative:
            raise ValueError(f"camera index must be >= 0 for: {', '.join(negative)}")
        return value

    def camera_index_for(self, facing_mode: FacingMode | str) -> int:
        return self.camera_indices[normalize_facing_mode(facing_mode)]

    def as_summary(self) -> dict[str, Any]:
        return {
            "camera_indices": {mode.value: index for mode, index in self.camera_indices.items()},
            "jpeg_quality": self.jpeg_quality,
            "initial_points": [list(point) for point in self.initial_points],
            "handle_diameter": self.handle_diameter,
            "line_width": self.line_width,
            "preview_interval_ms": self.preview_interval_ms,
        }


def load_settings(path: str | Path | None = None) -> AppSettings:
    """Read settings from a JSON file, falling back to defaults when it is absent."""
    if path is None:
        from postureangle.runtime_paths import get_settings_path

        path = get_settings_path()
    settings_path = Path(path)
    if not settings_path.exists():
        return AppSettings()
    if not settings_path.is_file():
        raise ValueError(f"Settings path is not a file: {settings_path}")
    return AppSettings.model_validate_json(settings_path.read_text(encoding="utf-8"))


def normalize_facing_mode(value: Any) -> FacingMode:
    if isinstance(value, FacingMode):
        return value
    text = str(value.value) if hasattr(value, "value") else str(value)
    try:
        return FacingMode(text)
    except ValueError as exc:
        valid = ", ".join(member.value for member in FacingMode)
        raise ValueError(f"Unsupported facing mode '{text}'. Expected one of: {valid}") from exc
