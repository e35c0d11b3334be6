# src/kanban_board/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- picks the board store backend and wires the engine + handlers into AppState.
"""

from __future__ import annotations

import logging

from ..board.drag import ActivationConstraint
from ..config import get_settings
from ..core.engine import BoardEngine
from ..core.handlers import BoardHandlers
from ..core.ports import BoardStore
from ..core.state import AppState
from ..storage.board_store import JsonFileBoardStore, SqliteBoardStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.board_db_path.parent.mkdir(parents=True, exist_ok=True)
    settings.board_json_path.parent.mkdir(parents=True, exist_ok=True)


def create_board_store(settings) -> BoardStore:
    backend = str(getattr(settings, "store_backend", "sqlite")).lower()
    if backend == "json":
        return JsonFileBoardStore(settings.board_json_path)
    return SqliteBoardStore(settings.board_db_path, key=getattr(settings, "board_key", "boardData"))


def create_initial_state(*, settings=None, store: BoardStore | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings (and the store) injectable makes the app easier to test and
    avoids hidden global config reads. If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    if store is None:
        store = create_board_store(settings)

    engine = BoardEngine(store)
    state = AppState(
        settings=settings,
        engine=engine,
        handlers=BoardHandlers(engine),
        drag_activation=ActivationConstraint(
            distance=float(getattr(settings, "drag_activation_distance", 5.0)),
            delay=float(getattr(settings, "drag_activation_delay_ms", 250)) / 1000.0,
        ),
    )
    logger.info(
        "Board ready: %d lists, %d cards, %d labels",
        len(engine.board.lists),
        len(engine.board.all_cards()),
        len(engine.board.labels),
    )
    return state
