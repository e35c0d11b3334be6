# src/kanban_board/board/reducer.py

from __future__ import annotations

"""
Board reducer: reduce(board, action) -> board.

Rules:
- pure: the input board is never modified, a new Board is built when something changes;
- total: unknown actions, referential misses and even handler bugs return the input board;
- no validation: the reducer mirrors whatever the caller dispatches
  (empty titles, manual statuses, etc. are gated in core.handlers).

When an action changes nothing, the *same* Board object is returned so callers can
detect "nothing happened" with an identity check.
"""

import logging
from collections.abc import Callable
from dataclasses import replace
from typing import Any

from .actions import (
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
from .models import Board, BoardList, Card

logger = logging.getLogger(__name__)

Handler = Callable[[Board, Any], Board]


# ---- low-level helpers ----


def _update_list(board: Board, list_id: str, fn: Callable[[BoardList], BoardList]) -> Board:
    changed = False
    lists: list[BoardList] = []
    for lst in board.lists:
        if lst.id == list_id:
            new_lst = fn(lst)
            changed = changed or new_lst is not lst
            lists.append(new_lst)
        else:
            lists.append(lst)
    if not changed:
        return board
    return replace(board, lists=tuple(lists))


def _update_card_in_list(
    board: Board, list_id: str, card_id: str, fn: Callable[[Card], Card]
) -> Board:
    def on_list(lst: BoardList) -> BoardList:
        changed = False
        cards: list[Card] = []
        for card in lst.cards:
            if card.id == card_id:
                new_card = fn(card)
                changed = changed or new_card is not card
                cards.append(new_card)
            else:
                cards.append(card)
        return replace(lst, cards=tuple(cards)) if changed else lst

    return _update_list(board, list_id, on_list)


def _update_cards(board: Board, fn: Callable[[Card], Card]) -> Board:
    """Apply fn to every card on the board, reusing lists whose cards did not change."""
    changed = False
    lists: list[BoardList] = []
    for lst in board.lists:
        cards = tuple(fn(c) for c in lst.cards)
        if any(new is not old for new, old in zip(cards, lst.cards)):
            lists.append(replace(lst, cards=cards))
            changed = True
        else:
            lists.append(lst)
    if not changed:
        return board
    return replace(board, lists=tuple(lists))


def _update_card_anywhere(board: Board, card_id: str, fn: Callable[[Card], Card]) -> Board:
    return _update_cards(board, lambda c: fn(c) if c.id == card_id else c)


# ---- lists ----


def _add_list(board: Board, action: AddList) -> Board:
    return replace(board, lists=board.lists + (action.board_list,))


def _edit_list_title(board: Board, action: EditListTitle) -> Board:
    return _update_list(board, action.list_id, lambda lst: replace(lst, title=action.title))


def _delete_list(board: Board, action: DeleteList) -> Board:
    lists = tuple(lst for lst in board.lists if lst.id != action.list_id)
    if len(lists) == len(board.lists):
        return board
    return replace(board, lists=lists)


def _move_list(board: Board, action: MoveList) -> Board:
    lists = list(board.lists)
    n = len(lists)

    # Array.prototype.splice start normalisation: negative counts from the end.
    src = int(action.source_index)
    if src < 0:
        src = max(n + src, 0)
    if src >= n:
        return board

    moved = lists.pop(src)
    # list.insert clamps/normalises exactly like splice(dest, 0, item).
    lists.insert(int(action.destination_index), moved)
    return replace(board, lists=tuple(lists))


# ---- cards ----


def _add_card(board: Board, action: AddCard) -> Board:
    return _update_list(board, action.list_id, lambda lst: replace(lst, cards=lst.cards + (action.card,)))


def _remove_card(board: Board, action: RemoveCard) -> Board:
    def on_list(lst: BoardList) -> BoardList:
        cards = tuple(c for c in lst.cards if c.id != action.card_id)
        return lst if len(cards) == len(lst.cards) else replace(lst, cards=cards)

    return _update_list(board, action.list_id, on_list)


def _edit_card(board: Board, action: EditCard) -> Board:
    return _update_card_in_list(
        board,
        action.list_id,
        action.card_id,
        lambda c: replace(c, title=action.title, description=action.description),
    )


def _move_card(board: Board, action: MoveCard) -> Board:
    source = next((lst for lst in board.lists if lst.id == action.source_list_id), None)
    if source is None:
        return board
    moving = next((c for c in source.cards if c.id == action.card_id), None)
    if moving is None:
        return board
    if not any(lst.id == action.dest_list_id for lst in board.lists):
        # Removing without a place to insert would orphan the card.
        return board

    stripped = tuple(c for c in source.cards if c.id != action.card_id)

    lists: list[BoardList] = []
    for lst in board.lists:
        cards = stripped if lst.id == source.id else lst.cards
        if lst.id == action.dest_list_id:
            # Index is taken after removal: for same-list moves this shifts.
            over_index = -1
            if action.over_card_id is not None:
                over_index = next(
                    (i for i, c in enumerate(cards) if c.id == action.over_card_id), -1
                )
            if over_index >= 0:
                cards = cards[:over_index] + (moving,) + cards[over_index:]
            else:
                cards = cards + (moving,)
        lists.append(lst if cards is lst.cards else replace(lst, cards=cards))

    return replace(board, lists=tuple(lists))


# ---- labels / filters ----


def _add_label(board: Board, action: AddLabel) -> Board:
    return replace(board, labels=board.labels + (action.label,))


def _edit_label(board: Board, action: EditLabel) -> Board:
    if not any(lb.id == action.label_id for lb in board.labels):
        return board
    labels = tuple(
        replace(lb, text=action.text, color=action.color) if lb.id == action.label_id else lb
        for lb in board.labels
    )
    return replace(board, labels=labels)


def _delete_label(board: Board, action: DeleteLabel) -> Board:
    label_id = action.label_id

    def strip(card: Card) -> Card:
        if label_id not in card.label_ids:
            return card
        return replace(card, label_ids=tuple(x for x in card.label_ids if x != label_id))

    stripped = _update_cards(board, strip)
    if (
        stripped is board
        and label_id not in board.active_filters
        and not any(lb.id == label_id for lb in board.labels)
    ):
        return board
    return replace(
        stripped,
        labels=tuple(lb for lb in board.labels if lb.id != label_id),
        active_filters=tuple(f for f in board.active_filters if f != label_id),
    )


def _add_label_to_card(board: Board, action: AddLabelToCard) -> Board:
    def add(card: Card) -> Card:
        if action.label_id in card.label_ids:
            return card
        return replace(card, label_ids=card.label_ids + (action.label_id,))

    return _update_card_in_list(board, action.list_id, action.card_id, add)


def _remove_label_from_card(board: Board, action: RemoveLabelFromCard) -> Board:
    def remove(card: Card) -> Card:
        if action.label_id not in card.label_ids:
            return card
        return replace(card, label_ids=tuple(x for x in card.label_ids if x != action.label_id))

    return _update_card_in_list(board, action.list_id, action.card_id, remove)


def _toggle_label_filter(board: Board, action: ToggleLabelFilter) -> Board:
    if action.label_id in board.active_filters:
        filters = tuple(f for f in board.active_filters if f != action.label_id)
    else:
        filters = board.active_filters + (action.label_id,)
    return replace(board, active_filters=filters)


def _clear_all_filters(board: Board, action: ClearAllFilters) -> Board:
    if not board.active_filters:
        return board
    return replace(board, active_filters=())


# ---- statuses ----


def _update_card_status(board: Board, action: UpdateCardStatus) -> Board:
    def apply(card: Card) -> Card:
        stamp = action.updated_at if action.updated_at is not None else card.status_updated_at
        return replace(card, status=action.status, status_updated_at=stamp)

    return _update_card_anywhere(board, action.card_id, apply)


def _update_card_due_date(board: Board, action: UpdateCardDueDate) -> Board:
    return _update_card_anywhere(
        board,
        action.card_id,
        lambda c: replace(c, due_date=action.due_date, status=action.new_status),
    )


def _refresh_all_statuses(board: Board, action: RefreshAllStatuses) -> Board:
    statuses = action.card_statuses

    def apply(card: Card) -> Card:
        new_status = statuses.get(card.id)
        if new_status is None or new_status == card.status:
            return card
        return replace(card, status=new_status)

    return _update_cards(board, apply)


_HANDLERS: dict[type, Handler] = {
    AddList: _add_list,
    EditListTitle: _edit_list_title,
    DeleteList: _delete_list,
    MoveList: _move_list,
    AddCard: _add_card,
    RemoveCard: _remove_card,
    EditCard: _edit_card,
    MoveCard: _move_card,
    AddLabel: _add_label,
    EditLabel: _edit_label,
    DeleteLabel: _delete_label,
    AddLabelToCard: _add_label_to_card,
    RemoveLabelFromCard: _remove_label_from_card,
    ToggleLabelFilter: _toggle_label_filter,
    ClearAllFilters: _clear_all_filters,
    UpdateCardStatus: _update_card_status,
    UpdateCardDueDate: _update_card_due_date,
    RefreshAllStatuses: _refresh_all_statuses,
}


def reduce(board: Board, action: Any) -> Board:
    """Apply one action. Never raises; anything unrecognised is a no-op."""
    handler = _HANDLERS.get(type(action))
    if handler is None:
        logger.debug("Ignoring unknown action %r", type(action).__name__)
        return board

    try:
        return handler(board, action)
    except Exception:
        logger.exception("Reducer handler failed for %s; state unchanged", type(action).__name__)
        return board
