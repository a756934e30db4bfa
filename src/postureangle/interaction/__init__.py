from postureangle.interaction.drag import DragController, SurfaceRect
from postureangle.interaction.events import InputHub, InputKind, Subscription
from postureangle.interaction.state import AppState, StateStore

__all__ = [
    "AppState",
    "DragController",
    "InputHub",
    "InputKind",
    "StateStore",
    "Subscription",
    "SurfaceRect",
]
