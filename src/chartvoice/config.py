"""Configuration loaded from environment variables."""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# Server
HOST: str = os.getenv("HOST", "0.0.0.0")
PORT: int = int(os.getenv("PORT", "8000"))
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# Command engine
HISTORY_LIMIT: int = int(os.getenv("HISTORY_LIMIT", "50"))
NUDGE_STEP: int = int(os.getenv("NUDGE_STEP", "40"))
PLACEMENT_GAP: int = int(os.getenv("PLACEMENT_GAP", "50"))

# Chart state
SNAP_TO_GRID: bool = _flag("SNAP_TO_GRID")
GRID_SIZE: int = int(os.getenv("GRID_SIZE", "20"))
UNDO_LIMIT: int = int(os.getenv("UNDO_LIMIT", "50"))
