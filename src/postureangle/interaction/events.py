"""A small publish/subscribe hub for pointer and touch input.

The desktop canvas (or a test) emits raw input through an :class:`InputHub`;
handlers hold a :class:`Subscription` only for as long as they need events.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable


class InputKind(str, Enum):
    pointer_move = "pointer_move"
    pointer_up = "pointer_up"
    touch_move = "touch_move"
    touch_end = "touch_end"


Handler = Callable[..., None]


class Subscription:
    """Handle to a group of connected handlers; :meth:`release` is idempotent."""

    def __init__(self, hub: "InputHub", entries: list[tuple[InputKind, Handler]]) -> None:
        self._hub = hub
        self._entries = entries

    @property
    def active(self) -> bool:
        return bool(self._entries)

    def release(self) -> None:
        entries, self._entries = self._entries, []
        for kind, handler in entries:
            self._hub._disconnect(kind, handler)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.release()


class InputHub:
    def __init__(self) -> None:
        self._handlers: dict[InputKind, list[Handler]] = {kind: [] for kind in InputKind}

    def subscribe(self, handlers: dict[InputKind, Handler]) -> Subscription:
        entries = []
        for kind, handler in handlers.items():
            self._handlers[InputKind(kind)].append(handler)
            entries.append((InputKind(kind), handler))
        return Subscription(self, entries)

    def emit(self, kind: InputKind, *args: Any) -> None:
        for handler in list(self._handlers[InputKind(kind)]):
            handler(*args)

    def listener_count(self, kind: InputKind | None = None) -> int:
        if kind is not None:
            return len(self._handlers[InputKind(kind)])
        return sum(len(handlers) for handlers in self._handlers.values())

    def _disconnect(self, kind: InputKind, handler: Handler) -> None:
        handlers = self._handlers[kind]
        if handler in handlers:
            handlers.remove(handler)
