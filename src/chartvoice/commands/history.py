"""Bounded in-session log of executed commands."""

from __future__ import annotations

from collections import deque
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any

DEFAULT_LIMIT = 50


@dataclass(frozen=True)
class CommandEntry:
    id: int
    transcript: str
    result: str
    success: bool
    timestamp: datetime

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["timestamp"] = self.timestamp.isoformat()
        return d


class CommandLog:
    """Keeps the most recent ``limit`` entries; the oldest is evicted first."""

    def __init__(self, limit: int = DEFAULT_LIMIT) -> None:
        if limit < 1:
            raise ValueError(f"limit must be positive, got {limit}")
        self._entries: deque[CommandEntry] = deque(maxlen=limit)
        self._next_id = 1

    def append(self, transcript: str, result: str, success: bool) -> CommandEntry:
        entry = CommandEntry(
            id=self._next_id,
            transcript=transcript,
            result=result,
            success=success,
            timestamp=datetime.now(timezone.utc),
        )
        self._next_id += 1
        self._entries.append(entry)
        return entry

    def entries(self) -> list[CommandEntry]:
        """Entries oldest first, newest last."""
        return list(self._entries)
