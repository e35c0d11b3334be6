# src/kanban_board/board/drag.py

from __future__ import annotations

"""
Drag resolution.

The pointer sensor only reports two ids: what started dragging (active_id) and
what was under the pointer on release (over_id). Either may be a list id or a
card id. resolve_drag turns that pair into a move intent against the board
snapshot passed in, which must be the *current* one: anything captured at
drag-start may be stale after an automatic status refresh.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from .actions import MoveCard, MoveList
from .models import Board, BoardList

logger = logging.getLogger(__name__)


class DragKind(str, Enum):
    LIST = "list"
    CARD = "card"


@dataclass(slots=True, frozen=True)
class ListMove:
    source_index: int
    dest_index: int

    def to_action(self) -> MoveList:
        return MoveList(source_index=self.source_index, destination_index=self.dest_index)


@dataclass(slots=True, frozen=True)
class CardMove:
    card_id: str
    source_list_id: str
    dest_list_id: str
    over_card_id: str | None

    def to_action(self) -> MoveCard:
        return MoveCard(
            card_id=self.card_id,
            source_list_id=self.source_list_id,
            dest_list_id=self.dest_list_id,
            over_card_id=self.over_card_id,
        )


DragIntent = ListMove | CardMove


def _list_index(board: Board, list_id: str) -> int:
    return next((i for i, lst in enumerate(board.lists) if lst.id == list_id), -1)


def _list_holding(board: Board, card_id: str) -> BoardList | None:
    return next((lst for lst in board.lists if any(c.id == card_id for c in lst.cards)), None)


def classify(board: Board, active_id: str) -> DragKind | None:
    if _list_index(board, active_id) >= 0:
        return DragKind.LIST
    if _list_holding(board, active_id) is not None:
        return DragKind.CARD
    return None


def resolve_drag(board: Board, active_id: str, over_id: str | None) -> DragIntent | None:
    """
    Decide what a drop means.

    - list dragged  -> ListMove(source_index, dest_index), both must resolve
    - card dragged  -> CardMove; over_id may be a list (append) or a card (insert before it)
    - anything else -> None
    """
    if over_id is None or active_id == over_id:
        return None

    kind = classify(board, active_id)

    if kind is DragKind.LIST:
        source_index = _list_index(board, active_id)
        dest_index = _list_index(board, over_id)
        if source_index < 0 or dest_index < 0 or source_index == dest_index:
            return None
        return ListMove(source_index=source_index, dest_index=dest_index)

    if kind is DragKind.CARD:
        source = _list_holding(board, active_id)
        dest = next(
            (
                lst
                for lst in board.lists
                if lst.id == over_id or any(c.id == over_id for c in lst.cards)
            ),
            None,
        )
        if source is None or dest is None:
            return None
        dropped_on_card = any(c.id == over_id for c in dest.cards)
        return CardMove(
            card_id=active_id,
            source_list_id=source.id,
            dest_list_id=dest.id,
            over_card_id=over_id if dropped_on_card else None,
        )

    logger.debug("Drag of unknown element %s ignored", active_id)
    return None


@dataclass(slots=True, frozen=True)
class ActivationConstraint:
    """
    Click vs. drag disambiguation at the input layer.

    A press only becomes a drag once it was held for `delay` seconds and the
    pointer travelled `distance` pixels.
    """

    distance: float = 5.0
    delay: float = 0.25

    def is_activated(self, travelled: float, held_seconds: float) -> bool:
        return held_seconds >= self.delay and travelled >= self.distance


class DragSession:
    """
    Tracks one gesture between drag_start and drag_end/drag_cancel.

    The active kind is only kept for overlay rendering; drag_end re-resolves
    everything against the board it is given.
    """

    def __init__(self) -> None:
        self.active_id: str | None = None
        self.active_kind: DragKind | None = None

    @property
    def is_dragging(self) -> bool:
        return self.active_id is not None

    def drag_start(self, board: Board, active_id: str) -> DragKind | None:
        kind = classify(board, active_id)
        if kind is None:
            self.active_id = None
            self.active_kind = None
            return None
        self.active_id = active_id
        self.active_kind = kind
        return kind

    def drag_end(self, board: Board, active_id: str, over_id: str | None) -> MoveList | MoveCard | None:
        self.active_id = None
        self.active_kind = None
        intent = resolve_drag(board, active_id, over_id)
        return intent.to_action() if intent is not None else None

    def drag_cancel(self) -> None:
        self.active_id = None
        self.active_kind = None
