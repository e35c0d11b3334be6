# src/kanban_board/storage/serialization.py

from __future__ import annotations

"""
Board <-> JSON tree.

The stored blob uses the camelCase keys of the browser app it came from
(activeFilters, taskStatuses, labelIds, dueDate, statusUpdatedAt), so blobs
written by either side stay interchangeable.

Decoding is forgiving per entity (bad cards/lists are dropped, bad fields get
defaults) but strict at the top level: a blob without array-typed "lists" and
"labels" is rejected and the caller falls back to the seeded board.
"""

import json
import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from ..board.models import (
    DEFAULT_TASK_STATUSES,
    Board,
    BoardList,
    Card,
    Label,
    LabelColor,
    StatusDefinition,
    StatusId,
)

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 2


# ---- scalar helpers ----


def parse_datetime(raw: Any) -> datetime | None:
    if raw is None or raw == "":
        return None
    if isinstance(raw, datetime):
        return raw
    try:
        return datetime.fromisoformat(str(raw).strip())
    except ValueError:
        return None


def format_datetime(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _str_or(raw: Any, default: str) -> str:
    return default if raw is None else str(raw)


def _id_tuple(raw: Any) -> tuple[str, ...]:
    """List of ids -> tuple with duplicates removed (set semantics, order kept)."""
    if not isinstance(raw, list):
        return ()
    seen: dict[str, None] = {}
    for v in raw:
        if v is None:
            continue
        seen.setdefault(str(v), None)
    return tuple(seen)


# ---- entities: decode ----


def label_from_dict(raw: Any) -> Label | None:
    if not isinstance(raw, Mapping) or raw.get("id") in (None, ""):
        return None
    # Legacy embedded labels used "name" instead of "text".
    text = raw.get("text", raw.get("name", ""))
    return Label(id=str(raw["id"]), color=LabelColor.from_raw(raw.get("color")), text=_str_or(text, ""))


def card_from_dict(raw: Any) -> Card | None:
    if not isinstance(raw, Mapping) or raw.get("id") in (None, ""):
        return None

    label_ids = _id_tuple(raw.get("labelIds"))
    if not label_ids and isinstance(raw.get("labels"), list):
        label_ids = _id_tuple([lb.get("id") for lb in raw["labels"] if isinstance(lb, Mapping)])

    return Card(
        id=str(raw["id"]),
        title=_str_or(raw.get("title"), ""),
        description=_str_or(raw.get("description"), ""),
        label_ids=label_ids,
        status=StatusId.from_raw(raw.get("status")),
        due_date=parse_datetime(raw.get("dueDate")),
        status_updated_at=parse_datetime(raw.get("statusUpdatedAt")),
    )


def list_from_dict(raw: Any, *, seen_card_ids: set[str] | None = None) -> BoardList | None:
    if not isinstance(raw, Mapping) or raw.get("id") in (None, ""):
        return None

    seen = seen_card_ids if seen_card_ids is not None else set()
    cards: list[Card] = []
    raw_cards = raw.get("cards")
    for rc in raw_cards if isinstance(raw_cards, list) else []:
        card = card_from_dict(rc)
        if card is None:
            continue
        if card.id in seen:
            logger.warning("Dropping duplicate card id=%s in list=%s", card.id, raw.get("id"))
            continue
        seen.add(card.id)
        cards.append(card)

    return BoardList(id=str(raw["id"]), title=_str_or(raw.get("title"), ""), cards=tuple(cards))


def _status_def_from_dict(raw: Any) -> StatusDefinition | None:
    if not isinstance(raw, Mapping) or not raw.get("id"):
        return None
    return StatusDefinition(
        id=str(raw["id"]),
        name=_str_or(raw.get("name"), str(raw["id"])),
        color=_str_or(raw.get("color"), "gray"),
    )


# ---- entities: encode ----


def card_to_dict(card: Card) -> dict[str, Any]:
    return {
        "id": card.id,
        "title": card.title,
        "description": card.description,
        "labelIds": list(card.label_ids),
        "status": str(card.status),
        "dueDate": format_datetime(card.due_date),
        "statusUpdatedAt": format_datetime(card.status_updated_at),
    }


def board_to_dict(board: Board) -> dict[str, Any]:
    return {
        "version": SCHEMA_VERSION,
        "lists": [
            {"id": lst.id, "title": lst.title, "cards": [card_to_dict(c) for c in lst.cards]}
            for lst in board.lists
        ],
        "labels": [{"id": lb.id, "color": str(lb.color), "text": lb.text} for lb in board.labels],
        "activeFilters": list(board.active_filters),
        "taskStatuses": [{"id": str(s.id), "name": s.name, "color": s.color} for s in board.task_statuses],
    }


# ---- migration ----


def _migrate_legacy_lists(raw_lists: list[Any]) -> dict[str, Any]:
    """
    First storage format: the blob was just the array of lists, and each card
    embedded its label objects. Lift the labels to the board level.
    """
    labels: dict[str, Any] = {}
    for lst in raw_lists:
        if not isinstance(lst, Mapping):
            continue
        cards = lst.get("cards")
        for card in cards if isinstance(cards, list) else []:
            if not isinstance(card, Mapping):
                continue
            embedded = card.get("labels")
            for lb in embedded if isinstance(embedded, list) else []:
                if isinstance(lb, Mapping) and lb.get("id") not in (None, ""):
                    labels.setdefault(str(lb["id"]), lb)
    logger.info("Migrating legacy board blob: %d lists, %d labels", len(raw_lists), len(labels))
    return {"lists": raw_lists, "labels": list(labels.values())}


def board_from_dict(data: Any) -> Board | None:
    """
    Decode a JSON tree into a Board.

    Returns None when the tree is not usable at all (the caller seeds defaults).
    Missing activeFilters / taskStatuses are backfilled, not treated as errors.
    """
    if isinstance(data, list):
        data = _migrate_legacy_lists(data)

    if not isinstance(data, Mapping):
        return None
    raw_lists = data.get("lists")
    raw_labels = data.get("labels")
    if not isinstance(raw_lists, list) or not isinstance(raw_labels, list):
        return None

    seen_card_ids: set[str] = set()
    seen_list_ids: set[str] = set()
    lists: list[BoardList] = []
    for rl in raw_lists:
        lst = list_from_dict(rl, seen_card_ids=seen_card_ids)
        if lst is None:
            continue
        if lst.id in seen_list_ids:
            logger.warning("Dropping duplicate list id=%s", lst.id)
            continue
        seen_list_ids.add(lst.id)
        lists.append(lst)

    labels: list[Label] = []
    seen_label_ids: set[str] = set()
    for rl in raw_labels:
        label = label_from_dict(rl)
        if label is None or label.id in seen_label_ids:
            continue
        seen_label_ids.add(label.id)
        labels.append(label)

    active_filters = _id_tuple(data.get("activeFilters"))

    task_statuses = DEFAULT_TASK_STATUSES
    raw_statuses = data.get("taskStatuses")
    if isinstance(raw_statuses, list):
        decoded = tuple(s for s in (_status_def_from_dict(r) for r in raw_statuses) if s is not None)
        if decoded:
            task_statuses = decoded

    return Board(
        lists=tuple(lists),
        labels=tuple(labels),
        active_filters=active_filters,
        task_statuses=task_statuses,
    )


# ---- blob ----


def dumps_board(board: Board) -> str:
    return json.dumps(board_to_dict(board), ensure_ascii=False)


def loads_board(blob: str | bytes | None) -> Board | None:
    """Blob -> Board, or None when absent/malformed."""
    if blob is None:
        return None
    try:
        data = json.loads(blob)
    except (TypeError, ValueError, RecursionError):
        logger.warning("Stored board blob is not valid JSON.")
        return None
    board = board_from_dict(data)
    if board is None:
        logger.warning("Stored board blob lacks lists/labels arrays.")
    return board
