# src/kanban_board/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The engine depends on Protocols instead of concrete implementations, so the
persistence transport can be swapped (SQLite row, JSON file, in-memory fake in tests).
"""

from datetime import UTC, datetime
from typing import Protocol

from ..board.models import Board


class BoardStore(Protocol):
    """
    Load/save of the whole board as one blob.

    load() never fails: absent or unusable data yields the seeded default board.
    save() may raise; the engine logs and ignores save failures.
    """

    def load(self) -> Board: ...
    def save(self, board: Board) -> None: ...


class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    def now(self) -> datetime:
        return datetime.now(UTC)
