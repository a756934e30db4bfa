from __future__ import annotations

import numpy as np
import pytest

from postureangle.demo.gradio_app import (
    _angle_markdown,
    _next_choice,
    _place_point,
    _point_choice_to_index,
    _render,
)


def test_point_choice_mapping_and_cycle() -> None:
    assert _point_choice_to_index("Point 1") == 0
    assert _point_choice_to_index("Point 3") == 2
    assert _next_choice("Point 3") == "Point 1"
    with pytest.raises(ValueError):
        _point_choice_to_index("Point 4")


def test_place_point_replaces_only_selected_point() -> None:
    points = [[0.0, 0.0], [10.0, 0.0], [99.0, 99.0]]
    updated = _place_point(points, "Point 3", (10, 10))
    assert updated == [[0.0, 0.0], [10.0, 0.0], [10.0, 10.0]]
    assert points[2] == [99.0, 99.0]
    assert _angle_markdown(updated).endswith("0.00°")


def test_render_handles_missing_image_and_alpha_channel() -> None:
    assert _render(None, None) is None
    rgba = np.zeros((50, 60, 4), dtype=np.uint8)
    rendered = _render(rgba, [[5, 5], [30, 5], [30, 40]])
    assert rendered.shape == (50, 60, 3)
    assert rendered.any()
