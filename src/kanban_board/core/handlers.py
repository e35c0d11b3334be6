# src/kanban_board/core/handlers.py

from __future__ import annotations

"""
UI-side handlers: validate user input, build actions, dispatch.

The reducer trusts whatever it is given, so everything a user can get wrong is
rejected here first:
- empty titles / label texts are never dispatched;
- only "todo" and "done" may be set by hand, the other statuses come from due dates;
- a due-date change carries its freshly computed status.

Each method returns a falsy value when nothing was dispatched.
"""

import logging
import secrets
import time
import uuid
from collections.abc import Callable
from datetime import datetime

from ..board.actions import (
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
    RemoveCard,
    RemoveLabelFromCard,
    ToggleLabelFilter,
    UpdateCardDueDate,
    UpdateCardStatus,
)
from ..board.models import MANUAL_STATUSES, BoardList, Card, Label, LabelColor, StatusId
from ..board.projection import find_card, find_list
from ..board.status import compute_status
from .engine import BoardEngine

logger = logging.getLogger(__name__)


def new_id() -> str:
    return str(uuid.uuid4())


def new_label_id() -> str:
    return f"label-{int(time.time() * 1000)}-{secrets.token_hex(5)[:9]}"


class BoardHandlers:
    def __init__(
        self,
        engine: BoardEngine,
        *,
        id_factory: Callable[[], str] = new_id,
        label_id_factory: Callable[[], str] = new_label_id,
    ) -> None:
        self.engine = engine
        self._new_id = id_factory
        self._new_label_id = label_id_factory

    # ---- lists ----

    def add_list(self, title: str) -> str | None:
        title = (title or "").strip()
        if not title:
            return None
        list_id = self._new_id()
        self.engine.dispatch(AddList(board_list=BoardList(id=list_id, title=title)))
        return list_id

    def edit_list_title(self, list_id: str, title: str) -> bool:
        # Empty edit reverts to the old title: nothing to dispatch.
        title = (title or "").strip()
        if not title:
            return False
        return self._changed(EditListTitle(list_id=list_id, title=title))

    def delete_list(self, list_id: str) -> bool:
        return self._changed(DeleteList(list_id=list_id))

    def move_list(self, source_index: int, destination_index: int) -> bool:
        if source_index == destination_index:
            return False
        return self._changed(MoveList(source_index=source_index, destination_index=destination_index))

    # ---- cards ----

    def add_card(self, list_id: str, title: str, description: str = "") -> str | None:
        title = (title or "").strip()
        if not title or find_list(self.engine.board, list_id) is None:
            return None
        card_id = self._new_id()
        card = Card(id=card_id, title=title, description=(description or "").strip())
        self.engine.dispatch(AddCard(list_id=list_id, card=card))
        return card_id

    def edit_card(self, list_id: str, card_id: str, title: str, description: str = "") -> bool:
        title = (title or "").strip()
        if not title:
            return False
        return self._changed(
            EditCard(list_id=list_id, card_id=card_id, title=title, description=(description or "").strip())
        )

    def remove_card(self, list_id: str, card_id: str) -> bool:
        return self._changed(RemoveCard(list_id=list_id, card_id=card_id))

    def move_card(
        self, card_id: str, dest_list_id: str, over_card_id: str | None = None
    ) -> bool:
        found = find_card(self.engine.board, card_id)
        if found is None:
            return False
        source, _card = found
        return self._changed(
            MoveCard(
                card_id=card_id,
                source_list_id=source.id,
                dest_list_id=dest_list_id,
                over_card_id=over_card_id,
            )
        )

    # ---- labels ----

    def create_label(self, text: str, color: str | LabelColor = LabelColor.BLUE) -> str | None:
        text = (text or "").strip()
        if not text:
            return None
        label_id = self._new_label_id()
        self.engine.dispatch(AddLabel(label=Label(id=label_id, color=LabelColor.from_raw(color), text=text)))
        return label_id

    def edit_label(self, label_id: str, text: str, color: str | LabelColor) -> bool:
        text = (text or "").strip()
        if not text:
            return False
        return self._changed(EditLabel(label_id=label_id, text=text, color=LabelColor.from_raw(color)))

    def delete_label(self, label_id: str) -> bool:
        return self._changed(DeleteLabel(label_id=label_id))

    def add_label_to_card(self, list_id: str, card_id: str, label_id: str) -> bool:
        return self._changed(AddLabelToCard(list_id=list_id, card_id=card_id, label_id=label_id))

    def remove_label_from_card(self, list_id: str, card_id: str, label_id: str) -> bool:
        return self._changed(RemoveLabelFromCard(list_id=list_id, card_id=card_id, label_id=label_id))

    def toggle_filter(self, label_id: str) -> bool:
        return self._changed(ToggleLabelFilter(label_id=label_id))

    def clear_filters(self) -> bool:
        return self._changed(ClearAllFilters())

    # ---- statuses ----

    def update_card_status(self, card_id: str, status: str) -> bool:
        if status not in MANUAL_STATUSES:
            logger.debug("Refusing manual status %r for card %s", status, card_id)
            return False
        return self._changed(
            UpdateCardStatus(card_id=card_id, status=StatusId(status), updated_at=self.engine.clock.now())
        )

    def toggle_card_completion(self, card_id: str) -> bool:
        found = find_card(self.engine.board, card_id)
        if found is None:
            return False
        _lst, card = found
        new_status = StatusId.TODO if card.status == StatusId.DONE else StatusId.DONE
        return self.update_card_status(card_id, new_status)

    def update_card_due_date(self, card_id: str, due_date: datetime | None) -> bool:
        found = find_card(self.engine.board, card_id)
        if found is None:
            return False
        _lst, card = found
        if card.status == StatusId.DONE:
            new_status: str = StatusId.DONE
        else:
            new_status = compute_status(due_date, card.status, today=self.engine.today())
        return self._changed(UpdateCardDueDate(card_id=card_id, due_date=due_date, new_status=new_status))

    def mark_list_complete(self, list_id: str) -> int:
        """Mark every unfinished card of a list as done; returns how many changed."""
        lst = find_list(self.engine.board, list_id)
        if lst is None:
            return 0
        count = 0
        for card in lst.cards:
            if card.status != StatusId.DONE and self.update_card_status(card.id, StatusId.DONE):
                count += 1
        return count

    def refresh_all_statuses(self) -> bool:
        before = self.engine.board
        return self.engine.refresh_statuses() is not before

    # ---- internals ----

    def _changed(self, action) -> bool:
        before = self.engine.board
        return self.engine.dispatch(action) is not before
