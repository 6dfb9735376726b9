# core/chrono.py
from PySide6.QtCore import QObject, QTimer, Signal


class Ticker(QObject):
    """Repeating QTimer wrapper owned by one engine component.

    ``stop()`` is synchronous: once it returns no further ``ticked`` is
    emitted, even if a timeout was already due.
    """

    ticked = Signal()
    started = Signal()
    stopped = Signal()

    def __init__(self, tick_ms: int = 1000, parent=None):
        super().__init__(parent)
        self._running = False
        self._tick = QTimer(self)
        self._tick.setInterval(tick_ms)
        self._tick.timeout.connect(self._on_tick)

    @property
    def is_active(self) -> bool:
        return self._running

    def start(self):
        if self._running:
            return
        self._running = True
        self._tick.start()
        self.started.emit()

    def stop(self):
        if self._running:
            self._running = False
            self._tick.stop()
            self.stopped.emit()

    def _on_tick(self):
        if self._running:
            self.ticked.emit()
