# services/telemetry.py
from __future__ import annotations

import logging
from collections import deque
from typing import Deque, List

from app.calculation import round_half_up
from app.state import TelemetrySample

logger = logging.getLogger(__name__)


class TelemetrySampler:
    """Per-second WPM history in a fixed-size ring (oldest evicted first)."""

    def __init__(self, capacity: int = 120):
        self.ring: Deque[TelemetrySample] = deque(maxlen=capacity)
        self.last_sec = 0

    @property
    def capacity(self) -> int:
        return self.ring.maxlen

    def sample(self, elapsed_ms: float, wpm: int, raw: int) -> TelemetrySample | None:
        """Append one sample unless this whole second was already recorded."""
        sec = round_half_up(elapsed_ms / 1000.0)
        if sec <= self.last_sec:
            logger.debug("Skipping telemetry tick for second %d (last %d)", sec, self.last_sec)
            return None
        s = TelemetrySample(sec=sec, wpm=wpm, raw=raw)
        self.ring.append(s)
        self.last_sec = sec
        return s

    def snapshot(self) -> List[TelemetrySample]:
        return list(self.ring)

    def clear(self):
        self.ring.clear()
        self.last_sec = 0

    def __len__(self) -> int:
        return len(self.ring)
