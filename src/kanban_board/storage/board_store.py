# src/kanban_board/storage/board_store.py

from __future__ import annotations

import contextlib
import logging
import os
import sqlite3
import time
from pathlib import Path

from ..board.models import Board, default_board
from .serialization import dumps_board, loads_board

logger = logging.getLogger(__name__)

DEFAULT_BOARD_KEY = "boardData"


class SqliteBoardStore:
    """
    SQLite key-value store holding the board as a single JSON blob.

    Schema: kv(key TEXT PRIMARY KEY, value TEXT, updated_at REAL).
    One row per board key; the whole aggregate is rewritten on every save.

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "board.sqlite3", *, key: str = DEFAULT_BOARD_KEY) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._key = key
        self._ensure_schema()
        logger.info("SqliteBoardStore ready db=%s key=%s", self._db_path, self._key)

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        with contextlib.suppress(Exception):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT,
                    updated_at REAL NOT NULL DEFAULT 0
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    # ---- raw blob API ----

    def read_blob(self) -> str | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (self._key,)).fetchone()
            return None if row is None else row["value"]
        finally:
            conn.close()

    def write_blob(self, blob: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO kv (key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
                """,
                (self._key, blob, time.time()),
            )
            conn.commit()
        finally:
            conn.close()

    # ---- BoardStore ----

    def load(self) -> Board:
        try:
            blob = self.read_blob()
        except Exception:
            logger.exception("Failed to read board blob from %s", self._db_path)
            blob = None

        board = loads_board(blob)
        if board is None:
            logger.info("No usable board stored under key=%s; seeding default board.", self._key)
            return default_board()
        logger.info("Loaded board: %d lists, %d labels", len(board.lists), len(board.labels))
        return board

    def save(self, board: Board) -> None:
        self.write_blob(dumps_board(board))
        logger.debug("Saved board key=%s lists=%d", self._key, len(board.lists))


class JsonFileBoardStore:
    """Board blob in a plain JSON file, replaced atomically on each save."""

    def __init__(self, path: str | Path = "board.json") -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Board:
        board: Board | None = None
        if self._path.exists():
            try:
                board = loads_board(self._path.read_text("utf-8"))
            except (OSError, UnicodeDecodeError):
                logger.exception("Failed to read board file %s", self._path)
        if board is None:
            logger.info("No usable board at %s; seeding default board.", self._path)
            return default_board()
        logger.info("Loaded board from %s: %d lists", self._path, len(board.lists))
        return board

    def save(self, board: Board) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(".tmp")
        tmp.write_text(dumps_board(board), "utf-8")
        os.replace(tmp, self._path)
        logger.debug("Saved board to %s", self._path)
