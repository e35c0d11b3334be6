# src/kanban_board/board/models.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum


class StatusId(StrEnum):
    """
    Card status buckets.

    Notes:
    - "todo" and "done" are the only values a user sets by hand.
    - the other four are derived from the due date by board.status.
    """

    TODO = "todo"
    DUE_TODAY = "due-today"
    THIS_WEEK = "this-week"
    LATER = "later"
    DONE = "done"
    MISSED = "missed"

    @classmethod
    def from_raw(cls, raw: str | None) -> StatusId:
        if not raw:
            return cls.TODO
        try:
            return cls(raw)
        except Exception:
            return cls.TODO


MANUAL_STATUSES: frozenset[str] = frozenset({StatusId.TODO, StatusId.DONE})


class LabelColor(StrEnum):
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"
    ORANGE = "orange"
    RED = "red"
    PURPLE = "purple"
    PINK = "pink"
    TEAL = "teal"
    CYAN = "cyan"
    INDIGO = "indigo"
    LIME = "lime"
    GRAY = "gray"

    @classmethod
    def from_raw(cls, raw: str | None) -> LabelColor:
        if not raw:
            return cls.GRAY
        try:
            return cls(str(raw).strip().lower())
        except Exception:
            return cls.GRAY


@dataclass(frozen=True, slots=True)
class StatusDefinition:
    id: str
    name: str
    color: str


@dataclass(frozen=True, slots=True)
class Label:
    id: str
    color: LabelColor
    text: str


@dataclass(frozen=True, slots=True)
class Card:
    id: str
    title: str
    description: str = ""
    # Foreign keys into Board.labels; may dangle.
    label_ids: tuple[str, ...] = ()
    status: str = StatusId.TODO
    due_date: datetime | None = None
    status_updated_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class BoardList:
    id: str
    title: str
    cards: tuple[Card, ...] = ()


@dataclass(frozen=True, slots=True)
class Board:
    """
    Board aggregate.

    Every collection is a tuple so a Board can be shared between the engine,
    the projection and the store without copying. Transitions build a
    new Board; untouched lists and cards are reused as-is.
    """

    lists: tuple[BoardList, ...] = ()
    labels: tuple[Label, ...] = ()
    active_filters: tuple[str, ...] = ()
    task_statuses: tuple[StatusDefinition, ...] = field(default_factory=lambda: DEFAULT_TASK_STATUSES)

    def all_cards(self) -> list[Card]:
        return [card for lst in self.lists for card in lst.cards]


DEFAULT_TASK_STATUSES: tuple[StatusDefinition, ...] = (
    StatusDefinition(id=StatusId.TODO, name="To Do", color="gray"),
    StatusDefinition(id=StatusId.DUE_TODAY, name="Due Today", color="orange"),
    StatusDefinition(id=StatusId.THIS_WEEK, name="This Week", color="blue"),
    StatusDefinition(id=StatusId.LATER, name="Later", color="purple"),
    StatusDefinition(id=StatusId.DONE, name="Done", color="green"),
    StatusDefinition(id=StatusId.MISSED, name="Missed", color="red"),
)

DEFAULT_LABELS: tuple[Label, ...] = (
    Label(id="label-1", color=LabelColor.BLUE, text="Tutorial"),
    Label(id="label-2", color=LabelColor.GREEN, text="Feature"),
    Label(id="label-3", color=LabelColor.RED, text="Bug"),
    Label(id="label-4", color=LabelColor.ORANGE, text="Urgent"),
)


def default_board() -> Board:
    """Tutorial board used on first start and whenever the stored blob is unusable."""
    cards = (
        Card(
            id="card-1",
            title="How Add cards?",
            description="Click on add cards to add new cards in the list",
            label_ids=("label-1",),
        ),
        Card(
            id="card-2",
            title="How Add List",
            description="Click on add new list to add lists",
            label_ids=("label-1",),
        ),
        Card(
            id="card-4",
            title="How to Delete Card",
            description="Click on the card to delete it",
        ),
        Card(
            id="card-5",
            title="How to Drag and Drop Card",
            description="Click and hold the card to drag it to another list or position",
        ),
        Card(
            id="card-3",
            title="How to Edit Card",
            description="Click on the card to edit its title and description",
        ),
    )
    return Board(
        lists=(BoardList(id="list-1", title="How to Use", cards=cards),),
        labels=DEFAULT_LABELS,
        active_filters=(),
        task_statuses=DEFAULT_TASK_STATUSES,
    )
