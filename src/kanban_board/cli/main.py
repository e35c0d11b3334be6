# src/kanban_board/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then starts:
- the hourly status sweep in a background thread (optional),
- the console REPL in the main thread.
"""

from __future__ import annotations

import logging
import signal

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..core.status_sweep import StatusSweepRunner, start_status_sweep_in_background
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _shutdown(state, sweep_runner: StatusSweepRunner | None) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    if sweep_runner is not None:
        sweep_runner.stop()
        sweep_runner.join(timeout=5.0)

    # Every accepted action is already saved; this covers an earlier failed save.
    try:
        state.engine.flush()
    except Exception:
        logger.debug("Final board save failed.", exc_info=True)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    log_dir = getattr(settings, "data_dir", ".local/kanban")
    setup_logging(log_dir=log_dir, console_level=console_level)

    logger.info("Starting %s...", getattr(settings, "app_name", "kanban"))

    # IMPORTANT: reuse same settings object
    state = create_initial_state(settings=settings)

    sweep_runner: StatusSweepRunner | None = None
    if settings.status_sweep_enabled:
        sweep_runner = start_status_sweep_in_background(
            state.engine, interval_seconds=settings.status_sweep_interval_seconds
        )

    def _handle_signal(signum, _frame) -> None:
        logger.info("Signal %s received, shutting down...", signum)
        raise KeyboardInterrupt

    try:
        signal.signal(signal.SIGTERM, _handle_signal)
    except Exception:
        # Some platforms may not support SIGTERM, etc.
        pass

    try:
        run_console_loop(state)
    finally:
        _shutdown(state, sweep_runner)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
