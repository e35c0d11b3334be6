# tests/conftest.py

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from types import SimpleNamespace

import pytest

from kanban_board.board.drag import ActivationConstraint
from kanban_board.board.models import Board
from kanban_board.core.engine import BoardEngine
from kanban_board.core.handlers import BoardHandlers
from kanban_board.core.state import AppState

from fakes import FakeBoardStore, FixedClock, make_board


@pytest.fixture()
def board() -> Board:
    return make_board()


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock(current=datetime(2026, 10, 19, 12, 0, 0))


@pytest.fixture()
def store(board: Board) -> FakeBoardStore:
    return FakeBoardStore(initial=board)


@pytest.fixture()
def engine(store: FakeBoardStore, clock: FixedClock) -> BoardEngine:
    return BoardEngine(store, clock=clock)


@pytest.fixture()
def handlers(engine: BoardEngine) -> BoardHandlers:
    counter = iter(range(1, 1000))
    return BoardHandlers(
        engine,
        id_factory=lambda: f"id-{next(counter)}",
        label_id_factory=lambda: f"label-{next(counter)}",
    )


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="kanban-test",
        data_dir=tmp_path,
        store_backend="sqlite",
        board_db_path=tmp_path / "board.sqlite3",
        board_json_path=tmp_path / "board.json",
        board_key="boardData",
        status_sweep_enabled=False,
        status_sweep_interval_seconds=3600.0,
        drag_activation_distance=5.0,
        drag_activation_delay_ms=250,
    )


@pytest.fixture()
def state(settings: SimpleNamespace, engine: BoardEngine, handlers: BoardHandlers) -> AppState:
    return AppState(
        settings=settings,
        engine=engine,
        handlers=handlers,
        drag_activation=ActivationConstraint(),
    )
