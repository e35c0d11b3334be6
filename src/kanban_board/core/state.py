# src/kanban_board/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..board.drag import ActivationConstraint
from .engine import BoardEngine
from .handlers import BoardHandlers


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: object

    engine: BoardEngine
    handlers: BoardHandlers
    drag_activation: ActivationConstraint

    @property
    def lock(self):
        return self.engine.lock
