# src/kanban_board/core/engine.py

from __future__ import annotations

"""
Board engine: the only place that holds the current board.

- dispatch() is the single mutation entry point; it runs the pure reducer
  under a lock so the console thread and the status sweep thread never interleave;
- after every accepted change the board is saved (fire-and-forget: a failed
  save is logged and the new state is kept);
- readers get immutable snapshots (board / view()).
"""

import logging
import threading
from collections.abc import Mapping
from dataclasses import replace
from datetime import date
from typing import Any

from ..board.actions import RefreshAllStatuses, UpdateCardStatus, action_from_dict
from ..board.drag import DragKind, DragSession
from ..board.models import Board, BoardList
from ..board.projection import project
from ..board.reducer import reduce
from ..board.status import compute_all_statuses
from .ports import BoardStore, Clock, SystemClock

logger = logging.getLogger(__name__)


class BoardEngine:
    def __init__(
        self,
        store: BoardStore,
        *,
        clock: Clock | None = None,
        board: Board | None = None,
    ) -> None:
        self._store = store
        self.clock: Clock = clock or SystemClock()
        self._board: Board = board if board is not None else store.load()
        # Re-entrant: refresh_statuses() reads the snapshot and dispatches while holding it.
        self.lock = threading.RLock()
        self._drag = DragSession()

    @property
    def board(self) -> Board:
        return self._board

    def today(self) -> date:
        return self.clock.now().astimezone().date()

    # ---- mutation ----

    def dispatch(self, action: Any) -> Board:
        """
        Apply one action and return the resulting board.

        Accepts typed actions or their dict form ({"type": ..., "payload": ...}).
        A status change without a timestamp is stamped with the engine clock.
        Unknown/malformed actions leave the board untouched.
        """
        if isinstance(action, Mapping):
            action = action_from_dict(action)
        if isinstance(action, UpdateCardStatus) and action.updated_at is None:
            action = replace(action, updated_at=self.clock.now())

        with self.lock:
            before = self._board
            after = reduce(before, action)
            if after is before:
                return before
            self._board = after
            self._persist(after)
            return after

    def flush(self) -> None:
        """Save the current board again (best-effort)."""
        with self.lock:
            self._persist(self._board)

    def _persist(self, board: Board) -> None:
        try:
            self._store.save(board)
        except Exception:
            logger.exception("Board save failed; keeping in-memory state.")

    # ---- reads ----

    def view(self) -> tuple[BoardList, ...]:
        return project(self._board)

    # ---- status sweep ----

    def refresh_statuses(self, *, today: date | None = None) -> Board:
        """Recompute every card's status from the current snapshot and apply it in one action."""
        with self.lock:
            statuses = compute_all_statuses(self._board, today=today or self.today())
            return self.dispatch(RefreshAllStatuses(card_statuses=statuses))

    # ---- drag events ----

    def drag_start(self, active_id: str) -> DragKind | None:
        with self.lock:
            return self._drag.drag_start(self._board, active_id)

    def drag_end(self, active_id: str, over_id: str | None) -> Board:
        # Resolved against the board as it is now, not as it was at drag_start.
        with self.lock:
            action = self._drag.drag_end(self._board, active_id, over_id)
            if action is None:
                return self._board
            return self.dispatch(action)

    def drag_cancel(self) -> None:
        with self.lock:
            self._drag.drag_cancel()

    @property
    def dragging(self) -> DragSession:
        return self._drag
