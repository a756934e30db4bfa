from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from postureangle.config import AppSettings, FacingMode, load_settings, normalize_facing_mode


def test_defaults_match_initial_layout() -> None:
    settings = AppSettings()
    assert settings.initial_points == [(100.0, 100.0), (200.0, 200.0), (300.0, 100.0)]
    assert settings.camera_index_for(FacingMode.user) == 0
    assert settings.camera_index_for("environment") == 1
    assert settings.jpeg_quality == 92


def test_initial_points_must_have_three_entries() -> None:
    with pytest.raises(ValidationError) as exc_info:
        AppSettings(initial_points=[(0, 0), (1, 1)])
    assert "exactly 3 points" in str(exc_info.value)


def test_camera_indices_must_cover_both_modes() -> None:
    with pytest.raises(ValidationError) as exc_info:
        AppSettings(camera_indices={"user": 0})
    assert "environment" in str(exc_info.value)


def test_load_settings_reads_json(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(
        json.dumps({"camera_indices": {"user": 2, "environment": 0}, "jpeg_quality": 75}),
        encoding="utf-8",
    )
    settings = load_settings(path)
    assert settings.camera_index_for(FacingMode.user) == 2
    assert settings.jpeg_quality == 75


def test_load_settings_missing_file_returns_defaults(tmp_path: Path) -> None:
    assert load_settings(tmp_path / "absent.json") == AppSettings()


def test_normalize_facing_mode_rejects_unknown() -> None:
    assert normalize_facing_mode("user") is FacingMode.user
    with pytest.raises(ValueError) as exc_info:
        normalize_facing_mode("side")
    assert "Expected one of: user, environment" in str(exc_info.value)
