# src/kanban_board/board/actions.py

from __future__ import annotations

"""
Board actions.

Every mutation of the board is one of the frozen dataclasses below. The
reducer dispatches on the action's class; anything else is ignored.

The dict form ({"type": "MOVE_CARD", "payload": {...}}) is what UI layers and
scripts speak; action_from_dict turns it into a typed action or None.
"""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any, ClassVar

from ..storage.serialization import card_from_dict, label_from_dict, list_from_dict, parse_datetime
from .models import BoardList, Card, Label, LabelColor

logger = logging.getLogger(__name__)


class ActionKind(StrEnum):
    ADD_LIST = "ADD_LIST"
    EDIT_LIST_TITLE = "EDIT_LIST_TITLE"
    DELETE_LIST = "DELETE_LIST"
    ADD_CARD = "ADD_CARD"
    REMOVE_CARD = "REMOVE_CARD"
    EDIT_CARD = "EDIT_CARD"
    MOVE_CARD = "MOVE_CARD"
    MOVE_LIST = "MOVE_LIST"
    ADD_LABEL = "ADD_LABEL"
    EDIT_LABEL = "EDIT_LABEL"
    DELETE_LABEL = "DELETE_LABEL"
    ADD_LABEL_TO_CARD = "ADD_LABEL_TO_CARD"
    REMOVE_LABEL_FROM_CARD = "REMOVE_LABEL_FROM_CARD"
    TOGGLE_LABEL_FILTER = "TOGGLE_LABEL_FILTER"
    CLEAR_ALL_FILTERS = "CLEAR_ALL_FILTERS"
    UPDATE_CARD_STATUS = "UPDATE_CARD_STATUS"
    UPDATE_CARD_DUE_DATE = "UPDATE_CARD_DUE_DATE"
    REFRESH_ALL_STATUSES = "REFRESH_ALL_STATUSES"


# ---- lists ----


@dataclass(frozen=True, slots=True)
class AddList:
    kind: ClassVar[ActionKind] = ActionKind.ADD_LIST
    board_list: BoardList


@dataclass(frozen=True, slots=True)
class EditListTitle:
    kind: ClassVar[ActionKind] = ActionKind.EDIT_LIST_TITLE
    list_id: str
    title: str


@dataclass(frozen=True, slots=True)
class DeleteList:
    kind: ClassVar[ActionKind] = ActionKind.DELETE_LIST
    list_id: str


@dataclass(frozen=True, slots=True)
class MoveList:
    """
    Splice-style reorder: pop at source_index, then insert at destination_index.

    destination_index is interpreted against the list *after* the pop, so moving
    rightwards lands one slot further than "drop onto" intuition suggests.
    Clients already depend on this ordering; keep it.
    """

    kind: ClassVar[ActionKind] = ActionKind.MOVE_LIST
    source_index: int
    destination_index: int


# ---- cards ----


@dataclass(frozen=True, slots=True)
class AddCard:
    kind: ClassVar[ActionKind] = ActionKind.ADD_CARD
    list_id: str
    card: Card


@dataclass(frozen=True, slots=True)
class RemoveCard:
    kind: ClassVar[ActionKind] = ActionKind.REMOVE_CARD
    list_id: str
    card_id: str


@dataclass(frozen=True, slots=True)
class EditCard:
    kind: ClassVar[ActionKind] = ActionKind.EDIT_CARD
    list_id: str
    card_id: str
    title: str
    description: str


@dataclass(frozen=True, slots=True)
class MoveCard:
    kind: ClassVar[ActionKind] = ActionKind.MOVE_CARD
    card_id: str
    source_list_id: str
    dest_list_id: str
    # None -> append to the end of the destination list.
    over_card_id: str | None = None


# ---- labels / filters ----


@dataclass(frozen=True, slots=True)
class AddLabel:
    kind: ClassVar[ActionKind] = ActionKind.ADD_LABEL
    label: Label


@dataclass(frozen=True, slots=True)
class EditLabel:
    kind: ClassVar[ActionKind] = ActionKind.EDIT_LABEL
    label_id: str
    text: str
    color: LabelColor


@dataclass(frozen=True, slots=True)
class DeleteLabel:
    kind: ClassVar[ActionKind] = ActionKind.DELETE_LABEL
    label_id: str


@dataclass(frozen=True, slots=True)
class AddLabelToCard:
    kind: ClassVar[ActionKind] = ActionKind.ADD_LABEL_TO_CARD
    list_id: str
    card_id: str
    label_id: str


@dataclass(frozen=True, slots=True)
class RemoveLabelFromCard:
    kind: ClassVar[ActionKind] = ActionKind.REMOVE_LABEL_FROM_CARD
    list_id: str
    card_id: str
    label_id: str


@dataclass(frozen=True, slots=True)
class ToggleLabelFilter:
    kind: ClassVar[ActionKind] = ActionKind.TOGGLE_LABEL_FILTER
    label_id: str


@dataclass(frozen=True, slots=True)
class ClearAllFilters:
    kind: ClassVar[ActionKind] = ActionKind.CLEAR_ALL_FILTERS


# ---- statuses ----


@dataclass(frozen=True, slots=True)
class UpdateCardStatus:
    kind: ClassVar[ActionKind] = ActionKind.UPDATE_CARD_STATUS
    card_id: str
    status: str
    updated_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class UpdateCardDueDate:
    kind: ClassVar[ActionKind] = ActionKind.UPDATE_CARD_DUE_DATE
    card_id: str
    due_date: datetime | None
    new_status: str


@dataclass(frozen=True, slots=True)
class RefreshAllStatuses:
    kind: ClassVar[ActionKind] = ActionKind.REFRESH_ALL_STATUSES
    card_statuses: Mapping[str, str] = field(default_factory=dict)


Action = (
    AddList
    | EditListTitle
    | DeleteList
    | MoveList
    | AddCard
    | RemoveCard
    | EditCard
    | MoveCard
    | AddLabel
    | EditLabel
    | DeleteLabel
    | AddLabelToCard
    | RemoveLabelFromCard
    | ToggleLabelFilter
    | ClearAllFilters
    | UpdateCardStatus
    | UpdateCardDueDate
    | RefreshAllStatuses
)


# --------------------------------------------------------------------------------------
# Dict form
# --------------------------------------------------------------------------------------


def _pick(payload: Mapping[str, Any], *names: str) -> Any:
    """First present key wins; older clients sent listID rather than listId."""
    for n in names:
        if n in payload:
            return payload[n]
    raise KeyError(names[0])


def _str(payload: Mapping[str, Any], *names: str) -> str:
    return str(_pick(payload, *names))


def _opt_str(payload: Mapping[str, Any], *names: str) -> str | None:
    try:
        v = _pick(payload, *names)
    except KeyError:
        return None
    return None if v is None else str(v)


def _card_statuses(payload: Mapping[str, Any]) -> RefreshAllStatuses:
    raw = _pick(payload, "cardStatuses", "card_statuses")
    if not isinstance(raw, Mapping):
        raise TypeError("cardStatuses must be an object")
    return RefreshAllStatuses(card_statuses={str(k): str(v) for k, v in raw.items()})


def _add_list(p: Mapping[str, Any]) -> AddList:
    board_list = list_from_dict(p)
    if board_list is None:
        raise ValueError("list payload needs an id")
    return AddList(board_list=board_list)


def _add_card(p: Mapping[str, Any]) -> AddCard:
    card = card_from_dict(_pick(p, "card"))
    if card is None:
        raise ValueError("card payload needs an id")
    return AddCard(list_id=_str(p, "listId", "listID"), card=card)


def _add_label(p: Mapping[str, Any]) -> AddLabel:
    label = label_from_dict(p)
    if label is None:
        raise ValueError("label payload needs an id")
    return AddLabel(label=label)


_PARSERS: dict[str, Callable[[Mapping[str, Any]], Any]] = {
    ActionKind.ADD_LIST: _add_list,
    ActionKind.EDIT_LIST_TITLE: lambda p: EditListTitle(
        list_id=_str(p, "listId", "listID"), title=_str(p, "title", "newTitle")
    ),
    ActionKind.DELETE_LIST: lambda p: DeleteList(list_id=_str(p, "listId", "listID")),
    # Older UI code dispatched REMOVE_LIST; same semantics.
    "REMOVE_LIST": lambda p: DeleteList(list_id=_str(p, "listId", "listID")),
    ActionKind.MOVE_LIST: lambda p: MoveList(
        source_index=int(_pick(p, "sourceIndex")),
        destination_index=int(_pick(p, "destinationIndex", "destIndex")),
    ),
    ActionKind.ADD_CARD: _add_card,
    ActionKind.REMOVE_CARD: lambda p: RemoveCard(
        list_id=_str(p, "listId", "listID"), card_id=_str(p, "cardId", "cardID")
    ),
    ActionKind.EDIT_CARD: lambda p: EditCard(
        list_id=_str(p, "listId", "listID"),
        card_id=_str(p, "cardId", "cardID"),
        title=_str(p, "title", "newCardTitle"),
        description=_str(p, "description", "newDescription"),
    ),
    ActionKind.MOVE_CARD: lambda p: MoveCard(
        card_id=_str(p, "cardId"),
        source_list_id=_str(p, "sourceListId"),
        dest_list_id=_str(p, "destListId"),
        over_card_id=_opt_str(p, "overCardId"),
    ),
    ActionKind.ADD_LABEL: _add_label,
    ActionKind.EDIT_LABEL: lambda p: EditLabel(
        label_id=_str(p, "labelId", "labelID"),
        text=_str(p, "text"),
        color=LabelColor.from_raw(_opt_str(p, "color")),
    ),
    ActionKind.DELETE_LABEL: lambda p: DeleteLabel(label_id=_str(p, "labelId", "labelID")),
    ActionKind.ADD_LABEL_TO_CARD: lambda p: AddLabelToCard(
        list_id=_str(p, "listId", "listID"),
        card_id=_str(p, "cardId", "cardID"),
        label_id=_str(p, "labelId", "labelID"),
    ),
    ActionKind.REMOVE_LABEL_FROM_CARD: lambda p: RemoveLabelFromCard(
        list_id=_str(p, "listId", "listID"),
        card_id=_str(p, "cardId", "cardID"),
        label_id=_str(p, "labelId", "labelID"),
    ),
    ActionKind.TOGGLE_LABEL_FILTER: lambda p: ToggleLabelFilter(label_id=_str(p, "labelId", "labelID")),
    ActionKind.CLEAR_ALL_FILTERS: lambda p: ClearAllFilters(),
    ActionKind.UPDATE_CARD_STATUS: lambda p: UpdateCardStatus(
        card_id=_str(p, "cardId"),
        status=_str(p, "status"),
        updated_at=parse_datetime(_opt_str(p, "statusUpdatedAt", "updatedAt")),
    ),
    ActionKind.UPDATE_CARD_DUE_DATE: lambda p: UpdateCardDueDate(
        card_id=_str(p, "cardId"),
        due_date=parse_datetime(_opt_str(p, "dueDate")),
        new_status=_str(p, "newStatus"),
    ),
    ActionKind.REFRESH_ALL_STATUSES: _card_statuses,
}


def action_from_dict(raw: Any) -> Action | None:
    """
    Parse {"type": ..., "payload": {...}} into an action.

    Returns None for anything unrecognised or malformed; callers hand the
    result straight to the reducer, which treats None as a no-op.
    """
    if not isinstance(raw, Mapping):
        return None

    kind = raw.get("type")
    parser = _PARSERS.get(str(kind)) if kind is not None else None
    if parser is None:
        logger.debug("Unknown action type: %r", kind)
        return None

    payload = raw.get("payload")
    if payload is None:
        payload = {}
    if not isinstance(payload, Mapping):
        logger.debug("Action %s has a non-object payload", kind)
        return None

    try:
        return parser(payload)
    except Exception:
        logger.debug("Malformed %s payload: %r", kind, payload, exc_info=True)
        return None
