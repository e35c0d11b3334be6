# src/kanban_board/cli/commands.py

from __future__ import annotations

import inspect
import json
import logging
from collections.abc import Callable
from typing import cast

from ..board.models import Board, BoardList, LabelColor, StatusId
from ..board.projection import find_card, find_list, label_usage_count, labels_for_card, list_color
from ..core.state import AppState
from ..storage.serialization import parse_datetime

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /board, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except Exception:
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# --------------------------------------------------------------------------------------
# Rendering
# --------------------------------------------------------------------------------------


def render_list(board: Board, lst: BoardList) -> list[str]:
    lines = [f"== {lst.title} [{lst.id}] ({len(lst.cards)}) {list_color(lst.id)}"]
    if not lst.cards:
        lines.append("   (empty)")
    for card in lst.cards:
        tags = ", ".join(lb.text for lb in labels_for_card(board, card))
        due = f" due {card.due_date.date().isoformat()}" if card.due_date else ""
        tag_str = f" [{tags}]" if tags else ""
        lines.append(f"   - {card.title} <{card.status}>{due}{tag_str}  ({card.id})")
    return lines


def render_board(state: AppState) -> str:
    board = state.engine.board
    visible = state.engine.view()
    lines: list[str] = []
    if board.active_filters:
        names = [lb.text for lb in board.labels if lb.id in board.active_filters]
        lines.append(f"Filtered by: {', '.join(names) or '(stale filters)'}")
    for lst in visible:
        lines.extend(render_list(board, lst))
    if not visible:
        lines.append("(no lists) Use /list add <title>.")
    return "\n".join(lines)


# --------------------------------------------------------------------------------------
# Commands
# --------------------------------------------------------------------------------------


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_board(state: AppState, args: list[str]) -> str:
    return render_board(state)


def cmd_status(state: AppState, args: list[str]) -> str:
    board = state.engine.board
    counts: dict[str, int] = {str(s.id): 0 for s in board.task_statuses}
    for card in board.all_cards():
        counts[str(card.status)] = counts.get(str(card.status), 0) + 1
    per_status = ", ".join(f"{k}={v}" for k, v in counts.items())
    backend = getattr(state.settings, "store_backend", "?")
    return (
        "Status:\n"
        f"  Lists: {len(board.lists)}  Cards: {len(board.all_cards())}  Labels: {len(board.labels)}\n"
        f"  Cards by status: {per_status}\n"
        f"  Active filters: {len(board.active_filters)}\n"
        f"  Store: {backend}"
    )


def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list add <title...>
    /list rename <list-id> <title...>
    /list rm <list-id>
    /list move <from-index> <to-index>
    """
    h = state.handlers
    if not args:
        return "Usage: /list add|rename|rm|move ..."
    sub, rest = args[0].lower(), args[1:]

    if sub == "add":
        list_id = h.add_list(" ".join(rest))
        return f"List added ({list_id})." if list_id else "Title required."

    if sub == "rename":
        if len(rest) < 2:
            return "Usage: /list rename <list-id> <title...>"
        return "List renamed." if h.edit_list_title(rest[0], " ".join(rest[1:])) else "Nothing changed."

    if sub in ("rm", "delete"):
        if len(rest) != 1:
            return "Usage: /list rm <list-id>"
        return "List deleted." if h.delete_list(rest[0]) else f"No list {rest[0]}."

    if sub == "move":
        if len(rest) != 2 or not all(x.lstrip("-").isdigit() for x in rest):
            return "Usage: /list move <from-index> <to-index>"
        return "List moved." if h.move_list(int(rest[0]), int(rest[1])) else "Nothing changed."

    return "Unknown /list subcommand."


def cmd_card(state: AppState, args: list[str]) -> str:
    """
    /card add <list-id> <title...>
    /card edit <card-id> <title...> [| description...]
    /card rm <card-id>
    /card move <card-id> <list-id> [before-card-id]
    /card done|todo|toggle <card-id>
    /card due <card-id> <YYYY-MM-DD|none>
    /card label|unlabel <card-id> <label-id>
    /card show <card-id>
    """
    h = state.handlers
    if len(args) < 2:
        return "Usage: /card add|edit|rm|move|done|todo|toggle|due|label|unlabel|show ..."
    sub, rest = args[0].lower(), args[1:]

    if sub == "add":
        if len(rest) < 2:
            return "Usage: /card add <list-id> <title...>"
        card_id = h.add_card(rest[0], " ".join(rest[1:]))
        return f"Card added ({card_id})." if card_id else "Title and an existing list are required."

    card_id = rest[0]
    found = find_card(state.engine.board, card_id)
    if found is None:
        return f"No card {card_id}."
    lst, card = found

    if sub == "show":
        tags = ", ".join(f"{lb.text} ({lb.id})" for lb in labels_for_card(state.engine.board, card))
        return (
            f"{card.title} [{card.id}] in {lst.title}\n"
            f"  status: {card.status}\n"
            f"  due: {card.due_date.isoformat() if card.due_date else '-'}\n"
            f"  labels: {tags or '-'}\n"
            f"  {card.description}"
        )

    if sub == "edit":
        text = " ".join(rest[1:])
        title, _, description = text.partition("|")
        ok = h.edit_card(lst.id, card.id, title, description if description else card.description)
        return "Card updated." if ok else "Title required."

    if sub in ("rm", "delete"):
        h.remove_card(lst.id, card.id)
        return "Card removed."

    if sub == "move":
        if len(rest) not in (2, 3):
            return "Usage: /card move <card-id> <list-id> [before-card-id]"
        if find_list(state.engine.board, rest[1]) is None:
            return f"No list {rest[1]}."
        over = rest[2] if len(rest) == 3 else None
        return "Card moved." if h.move_card(card.id, rest[1], over) else "Nothing changed."

    if sub in ("done", "todo"):
        ok = h.update_card_status(card.id, StatusId(sub))
        return f"Card marked {sub}." if ok else "Nothing changed."

    if sub == "toggle":
        h.toggle_card_completion(card.id)
        return f"Card is now {find_card(state.engine.board, card.id)[1].status}."  # type: ignore[index]

    if sub == "due":
        if len(rest) != 2:
            return "Usage: /card due <card-id> <YYYY-MM-DD|none>"
        raw = rest[1]
        due = None if raw.lower() in ("none", "-", "clear") else parse_datetime(raw)
        if due is None and raw.lower() not in ("none", "-", "clear"):
            return "Invalid date; use YYYY-MM-DD."
        h.update_card_due_date(card.id, due)
        return f"Due date set; status {find_card(state.engine.board, card.id)[1].status}."  # type: ignore[index]

    if sub in ("label", "unlabel"):
        if len(rest) != 2:
            return f"Usage: /card {sub} <card-id> <label-id>"
        if sub == "label":
            ok = h.add_label_to_card(lst.id, card.id, rest[1])
        else:
            ok = h.remove_label_from_card(lst.id, card.id, rest[1])
        return "Card labels updated." if ok else "Nothing changed."

    return "Unknown /card subcommand."


def cmd_label(state: AppState, args: list[str]) -> str:
    """
    /label list
    /label add <color> <text...>
    /label edit <label-id> <color> <text...>
    /label rm <label-id>
    """
    h = state.handlers
    board = state.engine.board
    if not args or args[0].lower() == "list":
        if not board.labels:
            return "No labels."
        lines = ["Labels:"]
        for lb in board.labels:
            used = label_usage_count(board, lb.id)
            active = " *" if lb.id in board.active_filters else ""
            lines.append(f"  {lb.text} <{lb.color}> [{lb.id}] used on {used} card(s){active}")
        return "\n".join(lines)

    sub, rest = args[0].lower(), args[1:]
    colors = ", ".join(c.value for c in LabelColor)

    if sub == "add":
        if len(rest) < 2:
            return f"Usage: /label add <color> <text...>  colors: {colors}"
        label_id = h.create_label(" ".join(rest[1:]), rest[0])
        return f"Label added ({label_id})." if label_id else "Text required."

    if sub == "edit":
        if len(rest) < 3:
            return "Usage: /label edit <label-id> <color> <text...>"
        return "Label updated." if h.edit_label(rest[0], " ".join(rest[2:]), rest[1]) else "Nothing changed."

    if sub in ("rm", "delete"):
        if len(rest) != 1:
            return "Usage: /label rm <label-id>"
        return "Label deleted from board and cards." if h.delete_label(rest[0]) else f"No label {rest[0]}."

    return "Unknown /label subcommand."


def cmd_filter(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /filter <label-id> | /filter clear"
    if args[0].lower() == "clear":
        state.handlers.clear_filters()
        return "Filters cleared."
    state.handlers.toggle_filter(args[0])
    active = args[0] in state.engine.board.active_filters
    return f"Filter {args[0]} {'on' if active else 'off'}."


def cmd_drag(state: AppState, args: list[str]) -> str:
    """
    /drag <active-id> <over-id> [travelled-px held-ms]

    Simulates a full drag gesture (start + drop). With travel/hold given, a
    press below the activation constraint stays a click and nothing moves.
    """
    if len(args) not in (2, 4):
        return "Usage: /drag <active-id> <over-id> [travelled-px held-ms]"
    if len(args) == 4:
        try:
            travelled, held_ms = float(args[2]), float(args[3])
        except ValueError:
            return "Usage: /drag <active-id> <over-id> [travelled-px held-ms]"
        if not state.drag_activation.is_activated(travelled, held_ms / 1000.0):
            return "Press did not activate a drag."
    engine = state.engine
    kind = engine.drag_start(args[0])
    if kind is None:
        engine.drag_cancel()
        return f"Nothing draggable with id {args[0]}."
    before = engine.board
    after = engine.drag_end(args[0], args[1])
    return f"Dropped {kind.value}." if after is not before else "Drop ignored."


def cmd_refresh(state: AppState, args: list[str]) -> str:
    return "Statuses refreshed." if state.handlers.refresh_all_statuses() else "Statuses already current."


def cmd_complete(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /complete <list-id>"
    n = state.handlers.mark_list_complete(args[0])
    return f"Marked {n} card(s) done."


def cmd_dispatch(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """/dispatch {"type": ..., "payload": {...}}: raw action, for scripting."""
    raw = " ".join(args)
    try:
        data = json.loads(raw)
    except ValueError:
        return "Invalid JSON."
    before = state.engine.board
    after = state.engine.dispatch(data)
    if after is before:
        return "No change (unknown action or nothing to do)."
    if emit is not None:
        emit(render_board(state))
    return "Action applied."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("board", cmd_board, help_text="Show the board (respects label filters).", aliases=["b"])
registry.register("status", cmd_status, help_text="Show board counts and settings.")
registry.register("list", cmd_list, help_text="Lists: /list add|rename|rm|move ...")
registry.register("card", cmd_card, help_text="Cards: /card add|edit|rm|move|done|todo|toggle|due|label|unlabel|show ...")
registry.register("label", cmd_label, help_text="Labels: /label list|add|edit|rm ...")
registry.register("filter", cmd_filter, help_text="Toggle a label filter: /filter <label-id> | /filter clear.")
registry.register("drag", cmd_drag, help_text="Drag and drop: /drag <active-id> <over-id> [travelled-px held-ms].")
registry.register("refresh", cmd_refresh, help_text="Recompute due-date statuses now.")
registry.register("complete", cmd_complete, help_text="Mark every card of a list done: /complete <list-id>.")
registry.register("dispatch", cmd_dispatch, help_text="Dispatch a raw JSON action.")
