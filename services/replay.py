# services/replay.py
from __future__ import annotations

import logging
from typing import Sequence, Tuple

from PySide6.QtCore import QObject, QTimer, Signal

from app.state import Keystroke

logger = logging.getLogger(__name__)

DEFAULT_CAP_MS = 500


def replay_delays(keys: Sequence[Keystroke], cap_ms: int = DEFAULT_CAP_MS) -> list[int]:
    """
    Waits between replay steps: the original inter-keystroke gaps, each capped,
    followed by one final capped settle wait after the last keystroke.
    """
    delays = []
    for prev, nxt in zip(keys, keys[1:]):
        gap = max(0.0, nxt.timestamp_ms - prev.timestamp_ms)
        delays.append(int(min(gap, cap_ms)))
    if keys:
        delays.append(int(cap_ms))
    return delays


class ReplayPlayer(QObject):
    """Re-emits a recorded keystroke list at its original (capped) cadence.

    The player never touches session state itself: it emits ``stepped`` with
    each recorded value and ``completed`` at the end, and the owner applies
    them.
    """

    stepped = Signal(str)
    completed = Signal()

    def __init__(self, cap_ms: int = DEFAULT_CAP_MS, parent=None):
        super().__init__(parent)
        self.cap_ms = cap_ms
        self._keys: Tuple[Keystroke, ...] = ()
        self._delays: list[int] = []
        self._i = 0
        self._active = False
        self.scheduled_ms = 0

        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._step)

    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def is_pending(self) -> bool:
        return self._timer.isActive()

    def start(self, keys: Sequence[Keystroke]) -> bool:
        if not keys:
            return False
        self.cancel()
        self._keys = tuple(keys)
        self._delays = replay_delays(self._keys, self.cap_ms)
        self._i = 0
        self.scheduled_ms = 0
        self._active = True
        logger.info("Replaying %d keystrokes", len(self._keys))
        self._step()
        return True

    def skip(self):
        """Jump to the final recorded value and complete immediately."""
        if not self._active:
            return
        self._timer.stop()
        self._active = False
        self.stepped.emit(self._keys[-1].value)
        self.completed.emit()

    def cancel(self):
        self._timer.stop()
        self._active = False

    def _step(self):
        if not self._active:
            return
        if self._i >= len(self._keys):
            self._timer.stop()
            self._active = False
            self.completed.emit()
            return
        value = self._keys[self._i].value
        delay = self._delays[self._i]
        self._i += 1
        self.stepped.emit(value)
        if self._active:
            self._schedule(delay)

    def _schedule(self, delay_ms: int):
        self.scheduled_ms += delay_ms
        self._timer.start(delay_ms)
