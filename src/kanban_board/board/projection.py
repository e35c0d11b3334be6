# src/kanban_board/board/projection.py

from __future__ import annotations

"""
Read-only views over a Board.

Nothing here is ever dispatched back into the reducer.
"""

from .models import Board, BoardList, Card, Label

# Accent colours for list headers; a list keeps the same colour for its lifetime.
LIST_COLORS: tuple[str, ...] = (
    "#2196f3",  # blue
    "#4caf50",  # green
    "#ff9800",  # orange
    "#9c27b0",  # purple
    "#009688",  # teal
    "#00bcd4",  # cyan
    "#8bc34a",  # light green
    "#e91e63",  # pink
    "#3f51b5",  # indigo
    "#cddc39",  # lime
    "#ffc107",  # amber
    "#795548",  # brown
)


def project(board: Board) -> tuple[BoardList, ...]:
    """
    Lists as they should be shown under the active label filters.

    - no filters: board.lists itself, no copies
    - filters: cards carrying at least one of the active labels (OR, not AND)
    """
    if not board.active_filters:
        return board.lists

    active = set(board.active_filters)
    out: list[BoardList] = []
    for lst in board.lists:
        cards = tuple(c for c in lst.cards if active.intersection(c.label_ids))
        out.append(lst if len(cards) == len(lst.cards) else BoardList(id=lst.id, title=lst.title, cards=cards))
    return tuple(out)


def find_card(board: Board, card_id: str) -> tuple[BoardList, Card] | None:
    for lst in board.lists:
        for card in lst.cards:
            if card.id == card_id:
                return lst, card
    return None


def find_list(board: Board, list_id: str) -> BoardList | None:
    return next((lst for lst in board.lists if lst.id == list_id), None)


def labels_for_card(board: Board, card: Card) -> list[Label]:
    """Resolve label ids; ids without a Label are silently skipped."""
    by_id = {lb.id: lb for lb in board.labels}
    return [by_id[i] for i in card.label_ids if i in by_id]


def label_usage_count(board: Board, label_id: str) -> int:
    return sum(1 for lst in board.lists for c in lst.cards if label_id in c.label_ids)


def list_color_index(list_id: str) -> int:
    """
    Stable palette index for a list id.

    Same 32-bit "h * 31 + code unit" hash the browser client uses, so both
    render a given list in the same colour.
    """
    h = 0
    data = list_id.encode("utf-16-le")
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = ((h << 5) - h + unit) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return abs(h) % len(LIST_COLORS)


def list_color(list_id: str) -> str:
    return LIST_COLORS[list_color_index(list_id)]
