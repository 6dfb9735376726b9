from PySide6.QtCore import QElapsedTimer


class Clock:
    """Monotonic millisecond clock. Never follows wall-clock adjustments."""

    def __init__(self):
        self.t = QElapsedTimer()
        self.t.start()

    def now(self) -> float:
        return self.t.nsecsElapsed() / 1_000_000.0
