# tests/test_drag.py

from __future__ import annotations

import pytest

from kanban_board.board.actions import MoveCard, MoveList
from kanban_board.board.drag import (
    ActivationConstraint,
    CardMove,
    DragKind,
    DragSession,
    ListMove,
    classify,
    resolve_drag,
)
from kanban_board.board.models import Board


def test_classify(board: Board) -> None:
    assert classify(board, "A") is DragKind.LIST
    assert classify(board, "c4") is DragKind.CARD
    assert classify(board, "ghost") is None


def test_list_onto_list(board: Board) -> None:
    assert resolve_drag(board, "A", "C") == ListMove(source_index=0, dest_index=2)
    assert resolve_drag(board, "C", "A").to_action() == MoveList(source_index=2, destination_index=0)


def test_list_onto_card_is_ignored(board: Board) -> None:
    assert resolve_drag(board, "A", "c4") is None


def test_card_onto_list_appends(board: Board) -> None:
    assert resolve_drag(board, "c1", "B") == CardMove(
        card_id="c1", source_list_id="A", dest_list_id="B", over_card_id=None
    )
    # Empty list is a valid target too.
    assert resolve_drag(board, "c1", "C").dest_list_id == "C"


def test_card_onto_card_inserts_before_it(board: Board) -> None:
    intent = resolve_drag(board, "c3", "c1")
    assert intent == CardMove(card_id="c3", source_list_id="A", dest_list_id="A", over_card_id="c1")
    assert intent.to_action() == MoveCard(card_id="c3", source_list_id="A", dest_list_id="A", over_card_id="c1")

    across = resolve_drag(board, "c4", "c2")
    assert across.source_list_id == "B"
    assert across.dest_list_id == "A"


@pytest.mark.parametrize(
    "active_id, over_id",
    [
        ("c1", None),
        ("c1", "c1"),
        ("A", "A"),
        ("ghost", "B"),
        ("c1", "ghost"),
        ("A", "ghost"),
    ],
)
def test_unresolvable_drops(board: Board, active_id: str, over_id: str | None) -> None:
    assert resolve_drag(board, active_id, over_id) is None


def test_session_tracks_one_gesture(board: Board) -> None:
    session = DragSession()
    assert session.drag_start(board, "c1") is DragKind.CARD
    assert session.is_dragging
    assert session.active_kind is DragKind.CARD

    action = session.drag_end(board, "c1", "B")
    assert action == MoveCard(card_id="c1", source_list_id="A", dest_list_id="B", over_card_id=None)
    assert not session.is_dragging


def test_session_cancel_and_unknown_start(board: Board) -> None:
    session = DragSession()
    session.drag_start(board, "A")
    session.drag_cancel()
    assert not session.is_dragging

    assert session.drag_start(board, "ghost") is None
    assert session.active_id is None
    assert session.drag_end(board, "A", None) is None


def test_activation_constraint() -> None:
    c = ActivationConstraint()
    assert not c.is_activated(travelled=10, held_seconds=0.1)
    assert not c.is_activated(travelled=2, held_seconds=1.0)
    assert c.is_activated(travelled=5, held_seconds=0.25)
