# src/kanban_board/core/status_sweep.py

from __future__ import annotations

"""
Status sweep.

A small polling loop that, every interval_seconds (hourly by default):
- recomputes every card's status from its due date (done stays done),
- dispatches a single RefreshAllStatuses through the engine.

Cards whose day boundary passed without any due-date edit move on
(this-week -> due-today -> missed). The sweep is idempotent: an unchanged day
produces the same board object and no save.

To stop the sweep, cancel the coroutine/task (or use StatusSweepRunner.stop()).
"""

import asyncio
import contextlib
import logging
import threading
from dataclasses import dataclass

from .engine import BoardEngine

logger = logging.getLogger(__name__)


def sweep_once(engine: BoardEngine) -> bool:
    """Run one refresh; True when at least one card changed status."""
    before = engine.board
    after = engine.refresh_statuses()
    changed = after is not before
    if changed:
        logger.info("Status sweep updated card statuses.")
    else:
        logger.debug("Status sweep: nothing to update.")
    return changed


async def run_status_sweep(
        engine: BoardEngine,
        *,
        interval_seconds: float = 3600.0,
        stop_event: asyncio.Event | None = None,
) -> None:
    """
    Periodic sweep. Runs one refresh immediately, then every interval_seconds.

    Errors are logged and the loop keeps going; the next tick retries.
    """
    sleep_s = max(0.01, float(interval_seconds))

    while stop_event is None or not stop_event.is_set():
        try:
            sweep_once(engine)
        except Exception:
            logger.exception("Status sweep failed")

        if stop_event is None:
            await asyncio.sleep(sleep_s)
            continue

        with contextlib.suppress(asyncio.TimeoutError):
            await asyncio.wait_for(stop_event.wait(), timeout=sleep_s)

    logger.info("Status sweep stopped.")


@dataclass
class StatusSweepRunner:
    thread: threading.Thread
    loop: asyncio.AbstractEventLoop
    stop_event: asyncio.Event

    def stop(self) -> None:
        try:
            self.loop.call_soon_threadsafe(self.stop_event.set)
        except Exception:
            logger.debug("Failed to signal status sweep stop.", exc_info=True)

    def join(self, timeout: float | None = None) -> None:
        self.thread.join(timeout=timeout)


def start_status_sweep_in_background(
    engine: BoardEngine, *, interval_seconds: float = 3600.0
) -> StatusSweepRunner | None:
    """
    Start the sweep in a background thread with its own event loop,
    so the blocking console REPL can run in the main thread.
    """
    ready = threading.Event()
    holder: dict[str, object] = {}

    def runner() -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        stop_event = asyncio.Event()

        holder["loop"] = loop
        holder["stop_event"] = stop_event
        ready.set()

        try:
            loop.run_until_complete(
                run_status_sweep(engine, interval_seconds=interval_seconds, stop_event=stop_event)
            )
        finally:
            with contextlib.suppress(Exception):
                loop.stop()
            with contextlib.suppress(Exception):
                loop.close()

    t = threading.Thread(target=runner, name="status-sweep", daemon=True)
    t.start()

    ready.wait(timeout=5.0)
    loop = holder.get("loop")
    stop_event = holder.get("stop_event")

    if not isinstance(loop, asyncio.AbstractEventLoop) or not isinstance(stop_event, asyncio.Event):
        logger.error("Status sweep thread did not initialize properly.")
        return None

    logger.info("Status sweep started (interval=%ss).", interval_seconds)
    return StatusSweepRunner(thread=t, loop=loop, stop_event=stop_event)
