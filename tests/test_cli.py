from __future__ import annotations

import json
from pathlib import Path

import cv2
import numpy as np
from typer.testing import CliRunner

from postureangle.cli import app

runner = CliRunner()


def _write_image(path: Path, width: int = 400, height: int = 300) -> Path:
    assert cv2.imwrite(str(path), np.full((height, width, 3), 90, dtype=np.uint8))
    return path


def test_cli_help_runs() -> None:
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "Forward head posture angle" in result.output


def test_angle_command_right_angle_fixture() -> None:
    result = runner.invoke(app, ["angle", "0", "0", "10", "0", "10", "10"])
    assert result.exit_code == 0
    assert result.output.strip() == "0.00"


def test_angle_command_forty_five_degrees() -> None:
    result = runner.invoke(app, ["angle", "0", "0", "10", "0", "20", "10"])
    assert result.exit_code == 0
    assert result.output.strip() == "45.00"


def test_measure_prints_angle_and_writes_overlay(tmp_path: Path) -> None:
    image = _write_image(tmp_path / "side.png")
    output = tmp_path / "out" / "overlay.png"

    result = runner.invoke(
        app,
        [
            "measure",
            "--image",
            str(image),
            "--point",
            "0,0",
            "--point",
            "10,0",
            "--point",
            "20,10",
            "--output",
            str(output),
        ],
    )

    assert result.exit_code == 0
    assert "45.00°" in result.output
    assert "400x300" in result.output
    assert output.exists()
    assert cv2.imread(str(output)).shape == (300, 400, 3)


def test_measure_uses_configured_default_points(tmp_path: Path) -> None:
    image = _write_image(tmp_path / "side.png")
    settings = tmp_path / "settings.json"
    settings.write_text(json.dumps({"initial_points": [[0, 0], [10, 0], [10, 10]]}), encoding="utf-8")

    result = runner.invoke(app, ["measure", "--image", str(image), "--settings", str(settings)])

    assert result.exit_code == 0
    assert "Angle between lines: 0.00°" in result.output


def test_measure_rejects_wrong_point_count(tmp_path: Path) -> None:
    image = _write_image(tmp_path / "side.png")
    result = runner.invoke(app, ["measure", "--image", str(image), "--point", "1,2"])
    assert result.exit_code != 0
    assert "Expected 3 points" in result.output


def test_measure_rejects_missing_image(tmp_path: Path) -> None:
    result = runner.invoke(app, ["measure", "--image", str(tmp_path / "missing.png")])
    assert result.exit_code != 0
    assert "does not exist" in result.output


def test_config_command_prints_settings(tmp_path: Path) -> None:
    settings = tmp_path / "settings.json"
    settings.write_text(json.dumps({"jpeg_quality": 80}), encoding="utf-8")
    result = runner.invoke(app, ["config", "--settings", str(settings)])
    assert result.exit_code == 0
    assert '"jpeg_quality": 80' in result.output


def test_angle_command_accepts_negative_coordinates() -> None:
    result = runner.invoke(app, ["angle", "0", "0", "10", "0", "-5", "10"])
    assert result.exit_code == 0
    assert result.output.strip() == "-56.31"
