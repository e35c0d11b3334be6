# src/kanban_board/board/status.py

from __future__ import annotations

"""
Due-date status derivation.

Maps a card's due date onto one of the time buckets (missed / due-today /
this-week / later). A card the user marked "done" keeps that status no matter
how its due date relates to today.

Comparison happens on local calendar days: both the due date and "now" are
truncated to midnight, so a card due at 23:59 today is "due-today" all day.
"""

from datetime import date, datetime

from .models import Board, StatusId

THIS_WEEK_DAYS = 7


def _local_day(value: datetime | date) -> date:
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()
    return value


def compute_status(
    due_date: datetime | date | None,
    current_status: str | None = StatusId.TODO,
    preserve_manual: bool = True,
    *,
    today: date | None = None,
) -> str:
    """
    Return the status a card should have given its due date.

    - no due date      -> current status unchanged ("todo" when unset)
    - done + preserve  -> "done"
    - otherwise        -> bucket by whole days between the due day and today
    """
    if due_date is None:
        return current_status or StatusId.TODO

    if current_status == StatusId.DONE and preserve_manual:
        return StatusId.DONE

    today_day = today if today is not None else datetime.now().date()
    days_diff = (_local_day(due_date) - today_day).days

    if days_diff < 0:
        return StatusId.MISSED
    if days_diff == 0:
        return StatusId.DUE_TODAY
    if days_diff <= THIS_WEEK_DAYS:
        return StatusId.THIS_WEEK
    return StatusId.LATER


def compute_all_statuses(board: Board, *, today: date | None = None) -> dict[str, str]:
    """Recompute every card's status; the result feeds RefreshAllStatuses."""
    today_day = today if today is not None else datetime.now().date()
    out: dict[str, str] = {}
    for lst in board.lists:
        for card in lst.cards:
            out[card.id] = compute_status(card.due_date, card.status, today=today_day)
    return out
