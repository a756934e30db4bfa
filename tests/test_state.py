from __future__ import annotations

import numpy as np
import pytest

from postureangle.analysis.angle import Point
from postureangle.config import FacingMode
from postureangle.interaction.state import AppState, StateStore
from postureangle.io.image_codec import capture_from_frame


def test_default_state_has_three_points_and_front_camera() -> None:
    state = AppState()
    assert state.points == (Point(100, 100), Point(200, 200), Point(300, 100))
    assert state.image is None
    assert state.drag_index is None
    assert state.facing_mode is FacingMode.user


def test_setters_return_new_snapshots_and_notify() -> None:
    store = StateStore()
    seen: list[AppState] = []
    store.subscribe(seen.append)

    before = store.state
    after = store.move_point(2, Point(1.5, 2.5))

    assert after is not before
    assert before.points[2] == Point(300, 100)
    assert after.points == (Point(100, 100), Point(200, 200), Point(1.5, 2.5))
    assert seen == [after]
    assert store.state is after


def test_unsubscribe_stops_notifications() -> None:
    store = StateStore()
    seen: list[AppState] = []
    unsubscribe = store.subscribe(seen.append)
    store.set_drag_index(0)
    unsubscribe()
    unsubscribe()
    store.set_drag_index(None)
    assert len(seen) == 1


def test_toggle_facing_mode_flips_flag() -> None:
    store = StateStore()
    assert store.toggle_facing_mode().facing_mode is FacingMode.environment
    assert store.toggle_facing_mode().facing_mode is FacingMode.user
    assert store.set_facing_mode("environment").facing_mode is FacingMode.environment


def test_set_points_enforces_three_points() -> None:
    store = StateStore()
    with pytest.raises(ValueError):
        store.set_points([(0, 0)])
    with pytest.raises(IndexError):
        store.set_drag_index(5)
    assert store.state.points == AppState().points


def test_as_dict_is_plain_data() -> None:
    frame = np.zeros((12, 16, 3), dtype=np.uint8)
    store = StateStore.with_points([(0, 0), (10, 0), (10, 10)])
    state = store.set_image(capture_from_frame(frame))

    payload = state.as_dict()
    assert payload["angle"] == 0.0
    assert payload["facing_mode"] == "user"
    assert payload["points"][1] == {"x": 10.0, "y": 0.0}
    assert payload["image"]["width"] == 16
    assert payload["image"]["height"] == 12
    assert payload["image"]["source"] == "camera"
