from __future__ import annotations

import pytest

from postureangle.analysis.angle import Point
from postureangle.interaction.drag import DragController, SurfaceRect
from postureangle.interaction.events import InputHub, InputKind
from postureangle.interaction.state import StateStore


def _make_controller(rect: SurfaceRect | None = SurfaceRect(left=50, top=20, width=640, height=480)):
    store = StateStore()
    hub = InputHub()
    controller = DragController(store, hub, lambda: rect)
    return store, hub, controller


def test_pointer_drag_moves_only_the_active_point() -> None:
    store, hub, controller = _make_controller()
    original = store.state.points

    controller.begin_drag(1)
    hub.emit(InputKind.pointer_move, 150.0, 70.0)

    points = store.state.points
    assert points[1] == Point(100.0, 50.0)
    assert points[0] == original[0]
    assert points[2] == original[2]


def test_new_drag_replaces_active_index() -> None:
    store, hub, controller = _make_controller()
    original = store.state.points

    controller.begin_drag(0)
    controller.begin_drag(1)
    hub.emit(InputKind.pointer_move, 60.0, 30.0)

    assert store.state.drag_index == 1
    assert store.state.points[0] == original[0]
    assert store.state.points[1] == Point(10.0, 10.0)
    assert hub.listener_count(InputKind.pointer_move) == 1


def test_touch_uses_primary_touch_point() -> None:
    store, hub, controller = _make_controller()
    controller.begin_drag(2)
    hub.emit(InputKind.touch_move, [(250.0, 120.0), (10.0, 10.0)])
    assert store.state.points[2] == Point(200.0, 100.0)

    hub.emit(InputKind.touch_move, [])
    assert store.state.points[2] == Point(200.0, 100.0)


def test_release_anywhere_ends_drag_and_drops_listeners() -> None:
    store, hub, controller = _make_controller()
    controller.begin_drag(0)
    assert hub.listener_count() == 4

    hub.emit(InputKind.pointer_up)
    assert store.state.drag_index is None
    assert hub.listener_count() == 0

    before = store.state.points
    hub.emit(InputKind.pointer_move, 400.0, 400.0)
    assert store.state.points == before


def test_repeated_drag_cycles_do_not_leak_listeners() -> None:
    _, hub, controller = _make_controller()
    for index in (0, 1, 2, 1, 0):
        controller.begin_drag(index)
        hub.emit(InputKind.pointer_move, 100.0, 100.0)
        hub.emit(InputKind.touch_end)
    assert hub.listener_count() == 0


def test_update_is_noop_without_drag_or_surface() -> None:
    store, _, controller = _make_controller()
    before = store.state.points
    assert controller.update_drag_position(10.0, 10.0) is None

    store_no_surface, _, no_surface = _make_controller(rect=None)
    before_no_surface = store_no_surface.state.points
    no_surface.begin_drag(0)
    assert no_surface.update_drag_position(10.0, 10.0) is None
    assert store_no_surface.state.points == before_no_surface
    assert store.state.points == before


def test_end_drag_is_idempotent_and_teardown_releases() -> None:
    store, hub, controller = _make_controller()
    controller.end_drag()
    controller.begin_drag(2)
    controller.teardown()
    controller.end_drag()
    assert store.state.drag_index is None
    assert hub.listener_count() == 0


def test_begin_drag_rejects_unknown_index() -> None:
    _, hub, controller = _make_controller()
    with pytest.raises(IndexError):
        controller.begin_drag(3)
    assert hub.listener_count() == 0
