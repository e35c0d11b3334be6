# src/kanban_board/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Nothing required at import time; every value has a default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "KANBAN"

STORE_BACKENDS = ("sqlite", "json")


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Persistence ----
    data_dir: Path
    store_backend: str
    board_db_path: Path
    board_json_path: Path
    board_key: str

    # ---- Status sweep ----
    status_sweep_enabled: bool
    status_sweep_interval_seconds: float

    # ---- Drag activation ----
    drag_activation_distance: float
    drag_activation_delay_ms: int

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "kanban") or "kanban"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/kanban"))

        store_backend = _env(_k("STORE"), "sqlite").strip().lower()
        if store_backend not in STORE_BACKENDS:
            store_backend = "sqlite"

        board_db_path = _env_path(_k("BOARD_DB_PATH"), data_dir / "board.sqlite3")
        board_json_path = _env_path(_k("BOARD_JSON_PATH"), data_dir / "board.json")
        board_key = _env(_k("BOARD_KEY"), "boardData") or "boardData"

        status_sweep_enabled = _env_bool(_k("STATUS_SWEEP"), True)
        status_sweep_interval_seconds = max(1.0, _env_float(_k("STATUS_SWEEP_INTERVAL"), 3600.0))

        drag_activation_distance = _env_float(_k("DRAG_DISTANCE"), 5.0)
        drag_activation_delay_ms = _env_int(_k("DRAG_DELAY_MS"), 250)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            store_backend=store_backend,
            board_db_path=board_db_path,
            board_json_path=board_json_path,
            board_key=board_key,
            status_sweep_enabled=status_sweep_enabled,
            status_sweep_interval_seconds=status_sweep_interval_seconds,
            drag_activation_distance=drag_activation_distance,
            drag_activation_delay_ms=drag_activation_delay_ms,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
