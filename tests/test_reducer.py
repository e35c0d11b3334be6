# tests/test_reducer.py

from __future__ import annotations

from datetime import datetime

import pytest

from kanban_board.board.actions import (
    AddCard,
    AddLabel,
    AddLabelToCard,
    AddList,
    ClearAllFilters,
    DeleteLabel,
    DeleteList,
    EditCard,
    EditLabel,
    EditListTitle,
    MoveCard,
    MoveList,
    RefreshAllStatuses,
    RemoveCard,
    RemoveLabelFromCard,
    ToggleLabelFilter,
    UpdateCardDueDate,
    UpdateCardStatus,
)
from kanban_board.board.models import Board, BoardList, Card, Label, LabelColor, StatusId
from kanban_board.board.reducer import reduce

from fakes import card_ids


def _lists(*layout: tuple[str, list[str]]) -> Board:
    return Board(
        lists=tuple(
            BoardList(id=lid, title=lid, cards=tuple(Card(id=c, title=c) for c in cids)) for lid, cids in layout
        )
    )


def _count_cards(board: Board) -> int:
    return sum(len(lst.cards) for lst in board.lists)


@pytest.mark.parametrize("action", [None, object(), "MOVE_CARD", {"type": "MOVE_CARD"}, 42])
def test_unknown_action_returns_same_board(board: Board, action) -> None:
    assert reduce(board, action) is board


# ---- lists ----


def test_add_edit_delete_list(board: Board) -> None:
    b1 = reduce(board, AddList(board_list=BoardList(id="D", title="New")))
    assert [lst.id for lst in b1.lists] == ["A", "B", "C", "D"]

    b2 = reduce(b1, EditListTitle(list_id="D", title="Renamed"))
    assert b2.lists[-1].title == "Renamed"
    assert b2.lists[0] is b1.lists[0]

    b3 = reduce(b2, DeleteList(list_id="A"))
    assert [lst.id for lst in b3.lists] == ["B", "C", "D"]
    assert "c1" not in {c.id for c in b3.all_cards()}


def test_list_referential_miss_is_noop(board: Board) -> None:
    assert reduce(board, EditListTitle(list_id="nope", title="x")) is board
    assert reduce(board, DeleteList(list_id="nope")) is board


def test_input_board_is_not_mutated(board: Board) -> None:
    snapshot = card_ids(board)
    reduce(board, MoveCard(card_id="c1", source_list_id="A", dest_list_id="B"))
    reduce(board, DeleteList(list_id="A"))
    assert card_ids(board) == snapshot


# ---- move list ----


def test_move_list_splice_semantics_rightward_quirk() -> None:
    b = _lists(("L1", []), ("L2", []), ("L3", []))
    out = reduce(b, MoveList(source_index=0, destination_index=2))
    assert [lst.id for lst in out.lists] == ["L2", "L3", "L1"]

    out = reduce(b, MoveList(source_index=0, destination_index=1))
    assert [lst.id for lst in out.lists] == ["L2", "L1", "L3"]


def test_move_list_leftward() -> None:
    b = _lists(("L1", []), ("L2", []), ("L3", []))
    out = reduce(b, MoveList(source_index=2, destination_index=0))
    assert [lst.id for lst in out.lists] == ["L3", "L1", "L2"]


def test_move_list_index_normalisation() -> None:
    b = _lists(("L1", []), ("L2", []), ("L3", []))
    # Negative source counts from the end, like Array.splice.
    out = reduce(b, MoveList(source_index=-1, destination_index=0))
    assert [lst.id for lst in out.lists] == ["L3", "L1", "L2"]
    # Destination past the end appends.
    out = reduce(b, MoveList(source_index=0, destination_index=99))
    assert [lst.id for lst in out.lists] == ["L2", "L3", "L1"]
    # Source past the end: nothing to move.
    assert reduce(b, MoveList(source_index=5, destination_index=0)) is b


def test_move_list_preserves_cards(board: Board) -> None:
    out = reduce(board, MoveList(source_index=0, destination_index=2))
    assert _count_cards(out) == _count_cards(board)


# ---- cards ----


def test_add_remove_edit_card(board: Board) -> None:
    b1 = reduce(board, AddCard(list_id="C", card=Card(id="c9", title="nine")))
    assert card_ids(b1)["C"] == ["c9"]

    b2 = reduce(b1, EditCard(list_id="C", card_id="c9", title="NINE", description="desc"))
    edited = b2.lists[2].cards[0]
    assert (edited.title, edited.description) == ("NINE", "desc")

    b3 = reduce(b2, RemoveCard(list_id="C", card_id="c9"))
    assert card_ids(b3)["C"] == []


def test_edit_card_mirrors_input_without_validation(board: Board) -> None:
    out = reduce(board, EditCard(list_id="A", card_id="c1", title="", description=""))
    assert out.lists[0].cards[0].title == ""


def test_card_ops_in_wrong_list_are_noops(board: Board) -> None:
    assert reduce(board, RemoveCard(list_id="B", card_id="c1")) is board
    assert reduce(board, EditCard(list_id="B", card_id="c1", title="x", description="")) is board
    assert reduce(board, AddCard(list_id="nope", card=Card(id="x", title="x"))) is board


# ---- move card ----


def test_move_card_to_empty_list_appends() -> None:
    b = _lists(("A", ["card1", "card2"]), ("B", []))
    out = reduce(b, MoveCard(card_id="card1", source_list_id="A", dest_list_id="B", over_card_id=None))
    assert card_ids(out) == {"A": ["card2"], "B": ["card1"]}


def test_move_card_within_list_inserts_before_over_card() -> None:
    b = _lists(("A", ["card1", "card2", "card3"]))
    out = reduce(b, MoveCard(card_id="card3", source_list_id="A", dest_list_id="A", over_card_id="card1"))
    assert card_ids(out) == {"A": ["card3", "card1", "card2"]}


def test_move_card_within_list_downward_uses_post_removal_index() -> None:
    b = _lists(("A", ["card1", "card2", "card3"]))
    out = reduce(b, MoveCard(card_id="card1", source_list_id="A", dest_list_id="A", over_card_id="card3"))
    assert card_ids(out) == {"A": ["card2", "card1", "card3"]}


def test_move_card_between_lists_before_card(board: Board) -> None:
    out = reduce(board, MoveCard(card_id="c2", source_list_id="A", dest_list_id="B", over_card_id="c4"))
    assert card_ids(out)["A"] == ["c1", "c3"]
    assert card_ids(out)["B"] == ["c2", "c4"]


def test_move_card_unknown_over_card_appends(board: Board) -> None:
    out = reduce(board, MoveCard(card_id="c1", source_list_id="A", dest_list_id="B", over_card_id="ghost"))
    assert card_ids(out)["B"] == ["c4", "c1"]


def test_move_card_keeps_card_identity(board: Board) -> None:
    original = board.lists[0].cards[0]
    out = reduce(board, MoveCard(card_id="c1", source_list_id="A", dest_list_id="C"))
    assert out.lists[2].cards[0] is original
    assert out.lists[1] is board.lists[1]


def test_move_card_missing_card_or_list_is_noop(board: Board) -> None:
    assert reduce(board, MoveCard(card_id="ghost", source_list_id="A", dest_list_id="B")) is board
    assert reduce(board, MoveCard(card_id="c1", source_list_id="B", dest_list_id="C")) is board
    assert reduce(board, MoveCard(card_id="c1", source_list_id="nope", dest_list_id="C")) is board
    # No destination: the card must not be dropped from the board.
    assert reduce(board, MoveCard(card_id="c1", source_list_id="A", dest_list_id="nope")) is board


@pytest.mark.parametrize(
    "card_id, src, dest, over",
    [
        ("c1", "A", "B", None),
        ("c1", "A", "B", "c4"),
        ("c3", "A", "A", "c1"),
        ("c2", "A", "A", None),
        ("c4", "B", "C", None),
    ],
)
def test_move_card_is_reversible(board: Board, card_id: str, src: str, dest: str, over: str | None) -> None:
    before = card_ids(board)
    # The card that followed the moved one is where it has to go back.
    src_cards = before[src]
    idx = src_cards.index(card_id)
    back_over = src_cards[idx + 1] if idx + 1 < len(src_cards) else None

    moved = reduce(board, MoveCard(card_id=card_id, source_list_id=src, dest_list_id=dest, over_card_id=over))
    assert _count_cards(moved) == _count_cards(board)

    restored = reduce(
        moved, MoveCard(card_id=card_id, source_list_id=dest, dest_list_id=src, over_card_id=back_over)
    )
    assert card_ids(restored) == before


# ---- labels ----


def test_add_edit_label(board: Board) -> None:
    b1 = reduce(board, AddLabel(label=Label(id="ux", color=LabelColor.PINK, text="UX")))
    assert [lb.id for lb in b1.labels] == ["bug", "feature", "ux"]

    b2 = reduce(b1, EditLabel(label_id="ux", text="Design", color=LabelColor.TEAL))
    assert b2.labels[-1] == Label(id="ux", color=LabelColor.TEAL, text="Design")
    assert reduce(b2, EditLabel(label_id="nope", text="x", color=LabelColor.RED)) is b2


def test_delete_label_cascades_to_cards_and_filters(board: Board) -> None:
    filtered = reduce(reduce(board, ToggleLabelFilter(label_id="bug")), ToggleLabelFilter(label_id="feature"))
    out = reduce(filtered, DeleteLabel(label_id="bug"))

    assert all("bug" not in c.label_ids for c in out.all_cards())
    assert "bug" not in out.active_filters
    assert out.active_filters == ("feature",)
    assert [lb.id for lb in out.labels] == ["feature"]
    # c3 never had the label: same object.
    assert out.lists[0].cards[2] is board.lists[0].cards[2]


def test_delete_unknown_label_is_noop(board: Board) -> None:
    assert reduce(board, DeleteLabel(label_id="nope")) is board


def test_card_label_association_is_idempotent(board: Board) -> None:
    b1 = reduce(board, AddLabelToCard(list_id="A", card_id="c3", label_id="bug"))
    assert b1.lists[0].cards[2].label_ids == ("bug",)
    assert reduce(b1, AddLabelToCard(list_id="A", card_id="c3", label_id="bug")) is b1

    b2 = reduce(b1, RemoveLabelFromCard(list_id="A", card_id="c3", label_id="bug"))
    assert b2.lists[0].cards[2].label_ids == ()
    assert reduce(b2, RemoveLabelFromCard(list_id="A", card_id="c3", label_id="bug")) is b2


def test_card_may_reference_unknown_label(board: Board) -> None:
    out = reduce(board, AddLabelToCard(list_id="A", card_id="c3", label_id="not-a-label"))
    assert out.lists[0].cards[2].label_ids == ("not-a-label",)


# ---- filters ----


def test_toggle_and_clear_filters(board: Board) -> None:
    b1 = reduce(board, ToggleLabelFilter(label_id="bug"))
    assert b1.active_filters == ("bug",)
    b2 = reduce(b1, ToggleLabelFilter(label_id="bug"))
    assert b2.active_filters == ()

    b3 = reduce(reduce(b2, ToggleLabelFilter(label_id="bug")), ToggleLabelFilter(label_id="stale"))
    assert b3.active_filters == ("bug", "stale")
    assert reduce(b3, ClearAllFilters()).active_filters == ()
    assert reduce(board, ClearAllFilters()) is board


# ---- statuses ----


def test_update_card_status_stamps_time(board: Board) -> None:
    stamp = datetime(2026, 10, 19, 9, 30)
    out = reduce(board, UpdateCardStatus(card_id="c4", status=StatusId.DONE, updated_at=stamp))
    card = out.lists[1].cards[0]
    assert card.status == "done"
    assert card.status_updated_at == stamp


def test_update_card_status_is_unchecked(board: Board) -> None:
    out = reduce(board, UpdateCardStatus(card_id="c1", status=StatusId.MISSED))
    assert out.lists[0].cards[0].status == "missed"


def test_update_card_due_date_sets_precomputed_status(board: Board) -> None:
    due = datetime(2026, 10, 20)
    out = reduce(board, UpdateCardDueDate(card_id="c2", due_date=due, new_status=StatusId.THIS_WEEK))
    card = out.lists[0].cards[1]
    assert card.due_date == due
    assert card.status == "this-week"


def test_refresh_all_statuses_leaves_unlisted_cards(board: Board) -> None:
    out = reduce(board, RefreshAllStatuses(card_statuses={"c1": StatusId.MISSED, "c4": StatusId.LATER}))
    statuses = {c.id: c.status for c in out.all_cards()}
    assert statuses == {"c1": "missed", "c2": "todo", "c3": "todo", "c4": "later"}
    assert out.lists[2] is board.lists[2]


def test_refresh_all_statuses_without_changes_returns_same_board(board: Board) -> None:
    assert reduce(board, RefreshAllStatuses(card_statuses={"c1": StatusId.TODO})) is board
    assert reduce(board, RefreshAllStatuses(card_statuses={})) is board


def test_status_actions_on_unknown_card_are_noops(board: Board) -> None:
    assert reduce(board, UpdateCardStatus(card_id="ghost", status=StatusId.DONE)) is board
    assert reduce(board, UpdateCardDueDate(card_id="ghost", due_date=None, new_status=StatusId.TODO)) is board
