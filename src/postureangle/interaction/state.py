"""Explicit application state and the store that owns it.

Every mutation goes through a :class:`StateStore` setter which swaps in a new
frozen :class:`AppState` snapshot, notifies subscribers and returns the
snapshot.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Iterable, Sequence

from postureangle.analysis.angle import (
    LandmarkSet,
    Point,
    compute_angle,
    make_landmark_set,
    replace_point,
)
from postureangle.config import DEFAULT_POINTS, FacingMode, normalize_facing_mode
from postureangle.io.image_codec import CapturedImage

StateListener = Callable[["AppState"], None]


@dataclass(frozen=True)
class AppState:
    image: CapturedImage | None = None
    points: LandmarkSet = field(default_factory=lambda: make_landmark_set(DEFAULT_POINTS))
    drag_index: int | None = None
    facing_mode: FacingMode = FacingMode.user

    @property
    def angle(self) -> float:
        return compute_angle(self.points)

    @property
    def is_dragging(self) -> bool:
        return self.drag_index is not None

    def as_dict(self) -> dict[str, Any]:
        return {
            "image": self.image.summary() if self.image is not None else None,
            "points": [{"x": point.x, "y": point.y} for point in self.points],
            "drag_index": self.drag_index,
            "facing_mode": self.facing_mode.value,
            "angle": self.angle,
        }


class StateStore:
    """Owns the current :class:`AppState` and notifies listeners on change."""

    def __init__(self, initial: AppState | None = None) -> None:
        self._state = initial if initial is not None else AppState()
        self._listeners: list[StateListener] = []
        self._lock = threading.Lock()

    @classmethod
    def with_points(cls, points: Iterable[Point | Sequence[float]]) -> "StateStore":
        return cls(AppState(points=make_landmark_set(points)))

    @property
    def state(self) -> AppState:
        return self._state

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register ``listener``; the returned callable unregisters it."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Setters
    # ------------------------------------------------------------------
    def set_image(self, image: CapturedImage | None) -> AppState:
        return self._update(image=image)

    def set_points(self, points: Iterable[Point | Sequence[float]]) -> AppState:
        return self._update(points=make_landmark_set(points))

    def move_point(self, index: int, point: Point) -> AppState:
        return self._apply(lambda state: {"points": replace_point(state.points, index, point)})

    def set_drag_index(self, index: int | None) -> AppState:
        if index is not None and not 0 <= index < len(self._state.points):
            raise IndexError(f"Drag index must be in [0, {len(self._state.points) - 1}], got: {index}")
        return self._update(drag_index=index)

    def set_facing_mode(self, facing_mode: FacingMode | str) -> AppState:
        return self._update(facing_mode=normalize_facing_mode(facing_mode))

    def toggle_facing_mode(self) -> AppState:
        return self._apply(lambda state: {"facing_mode": state.facing_mode.toggled()})

    # ------------------------------------------------------------------
    def _update(self, **changes: Any) -> AppState:
        return self._apply(lambda _state: changes)

    def _apply(self, make_changes: Callable[[AppState], dict[str, Any]]) -> AppState:
        with self._lock:
            snapshot = replace(self._state, **make_changes(self._state))
            self._state = snapshot
            listeners = list(self._listeners)
        for listener in listeners:
            listener(snapshot)
        return snapshot
