# services/store.py
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Dict, List

from app.state import Mode, Result

logger = logging.getLogger(__name__)

MAX_HISTORY_ITEMS = 50


class MemoryStore:
    """In-process personal best and history. Nothing is written to disk."""

    def __init__(self, pb: int = 0):
        self._pb = int(pb)
        self._history: List[Dict] = []

    def get(self) -> int:
        return self._pb

    def set(self, wpm: int):
        self._pb = int(wpm)

    def history(self) -> List[Dict]:
        return list(self._history)

    def record_result(self, result: Result, mode: Mode, limit: int):
        entry = {
            "wpm": result.wpm,
            "accuracy": result.accuracy,
            "mode": Mode(mode).value,
            "limit": limit,
            "date": datetime.now(timezone.utc).isoformat(),
        }
        self._history = [entry] + self._history[: MAX_HISTORY_ITEMS - 1]
        logger.info("History entry recorded: %s wpm, %s%%", result.wpm, result.accuracy)

    def clear(self):
        self._pb = 0
        self._history.clear()
