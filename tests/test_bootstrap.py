# tests/test_bootstrap.py

from __future__ import annotations

import logging

import pytest

from kanban_board.board.models import default_board
from kanban_board.cli.bootstrap import create_board_store, create_initial_state
from kanban_board.config import Settings
from kanban_board.logging_setup import setup_logging
from kanban_board.storage.board_store import JsonFileBoardStore, SqliteBoardStore


def test_create_initial_state_seeds_default_board(settings) -> None:
    state = create_initial_state(settings=settings)
    assert state.engine.board == default_board()
    assert state.drag_activation.delay == pytest.approx(0.25)
    assert state.lock is state.engine.lock


def test_store_backend_selection(settings) -> None:
    assert isinstance(create_board_store(settings), SqliteBoardStore)
    settings.store_backend = "json"
    store = create_board_store(settings)
    assert isinstance(store, JsonFileBoardStore)
    assert store.path == settings.board_json_path


def test_state_survives_restart(settings) -> None:
    first = create_initial_state(settings=settings)
    first.handlers.add_list("Persisted")

    second = create_initial_state(settings=settings)
    assert [lst.title for lst in second.engine.board.lists] == ["How to Use", "Persisted"]


def test_settings_from_env(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("KANBAN_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("KANBAN_STORE", "JSON")
    monkeypatch.setenv("KANBAN_STATUS_SWEEP", "off")
    monkeypatch.setenv("KANBAN_STATUS_SWEEP_INTERVAL", "0")
    monkeypatch.setenv("KANBAN_DRAG_DELAY_MS", "not-a-number")

    s = Settings.from_env()
    assert s.store_backend == "json"
    assert s.board_json_path == tmp_path / "board.json"
    assert s.status_sweep_enabled is False
    assert s.status_sweep_interval_seconds == 1.0
    assert s.drag_activation_delay_ms == 250


def test_unknown_store_backend_falls_back_to_sqlite(monkeypatch) -> None:
    monkeypatch.setenv("KANBAN_STORE", "redis")
    assert Settings.from_env().store_backend == "sqlite"


def test_setup_logging_writes_file(tmp_path) -> None:
    root = logging.getLogger()
    saved = root.handlers[:]
    saved_level = root.level
    try:
        setup_logging(log_dir=tmp_path, console_level=logging.WARNING)
        logging.getLogger("kanban_board.test").info("hello file")
        for h in root.handlers:
            h.flush()
        assert "hello file" in (tmp_path / "kanban.log").read_text("utf-8")
    finally:
        for h in root.handlers[:]:
            if h not in saved:
                root.removeHandler(h)
                h.close()
        root.handlers[:] = saved
        root.setLevel(saved_level)
        logging.captureWarnings(False)
