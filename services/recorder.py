# services/recorder.py
from typing import List, Tuple

from app.state import Keystroke


class KeystrokeRecorder:
    """Append-only keystroke log for one attempt; the source of truth for replay."""

    def __init__(self):
        self._keys: List[Keystroke] = []

    def record(self, value: str, timestamp_ms: float) -> Keystroke:
        k = Keystroke(value=value, timestamp_ms=timestamp_ms)
        self._keys.append(k)
        return k

    def snapshot(self) -> Tuple[Keystroke, ...]:
        return tuple(self._keys)

    def clear(self):
        self._keys.clear()

    def __len__(self) -> int:
        return len(self._keys)

    def __bool__(self) -> bool:
        return bool(self._keys)
