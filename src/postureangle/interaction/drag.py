"""Single-point drag state machine: ``Idle -> Dragging(index) -> Idle``."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Sequence

from postureangle.analysis.angle import Point
from postureangle.interaction.events import InputHub, InputKind, Subscription
from postureangle.interaction.state import AppState, StateStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SurfaceRect:
    """Bounding box of the displayed image in the same space as pointer events."""

    left: float
    top: float
    width: float
    height: float


SurfaceProvider = Callable[[], "SurfaceRect | None"]


class DragController:
    """Moves one landmark at a time in response to pointer and touch input.

    Move and release handlers are subscribed on :meth:`begin_drag` and
    released on :meth:`end_drag`, so nothing stays connected between drags.
    """

    def __init__(self, store: StateStore, hub: InputHub, surface: SurfaceProvider) -> None:
        self._store = store
        self._hub = hub
        self._surface = surface
        self._subscription: Subscription | None = None

    @property
    def drag_index(self) -> int | None:
        return self._store.state.drag_index

    def begin_drag(self, index: int) -> AppState:
        snapshot = self._store.set_drag_index(index)
        if self._subscription is None or not self._subscription.active:
            self._subscription = self._hub.subscribe(
                {
                    InputKind.pointer_move: self.update_drag_position,
                    InputKind.touch_move: self.update_touch_position,
                    InputKind.pointer_up: self.end_drag,
                    InputKind.touch_end: self.end_drag,
                }
            )
        logger.debug("Dragging landmark %d", index)
        return snapshot

    def update_drag_position(self, pointer_x: float, pointer_y: float) -> AppState | None:
        index = self._store.state.drag_index
        if index is None:
            return None
        rect = self._surface()
        if rect is None:
            return None
        point = Point(float(pointer_x) - rect.left, float(pointer_y) - rect.top)
        return self._store.move_point(index, point)

    def update_touch_position(self, touches: Sequence[tuple[float, float]]) -> AppState | None:
        if not touches:
            return None
        touch_x, touch_y = touches[0]
        return self.update_drag_position(touch_x, touch_y)

    def end_drag(self, *_: object) -> AppState:
        if self._subscription is not None:
            self._subscription.release()
            self._subscription = None
        if self._store.state.drag_index is None:
            return self._store.state
        return self._store.set_drag_index(None)

    def teardown(self) -> None:
        self.end_drag()
