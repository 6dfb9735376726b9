# services/ghost.py
from __future__ import annotations

import logging
import math
from typing import Callable, Optional

from PySide6.QtCore import QObject, Signal

from app.calculation import chars_per_ms
from app.config import GhostSettings, clamp_ghost_speed
from app.state import GhostState
from core.chrono import Ticker

logger = logging.getLogger(__name__)

# char index -> visual line number, supplied by whoever lays the text out
LineResolver = Callable[[int], int]


def rubber_band_factor(lead: int, threshold: int = 3, gain: float = 0.05,
                       max_adjust: float = 0.35) -> float:
    """
    Speed factor that narrows the ghost/typist gap.
    Leading by more than ``threshold`` chars slows the ghost down, lagging by
    more speeds it up; the adjustment grows with the excess and is capped at
    ``max_adjust`` either way.
    """
    excess = abs(lead) - threshold
    if excess <= 0:
        return 1.0
    # factor must stay positive so progress never runs backwards
    bound = max(0.0, min(max_adjust, 0.9))
    adjust = min(bound, excess * gain)
    return 1.0 - adjust if lead > 0 else 1.0 + adjust


def interpolate(progress: float, total_chars: int,
                line_of: Optional[LineResolver] = None) -> tuple[float, float, bool]:
    """
    Map fractional progress to (position, opacity, crossing_line).

    Within a line the position slides linearly between neighbouring chars.
    Across a wrap it never sweeps diagonally: the first half fades out at the
    old index, the second half fades in at the next one.
    """
    index = int(math.floor(progress))
    frac = progress - index
    if frac <= 0.0 or line_of is None or index + 1 >= total_chars:
        return index + frac, 1.0, False
    if line_of(index) == line_of(index + 1):
        return index + frac, 1.0, False
    if frac < 0.5:
        return float(index), 1.0 - frac * 2, True
    return float(index + 1), (frac - 0.5) * 2, True


class GhostPacer(QObject):
    """Personal-best pacer that races the live typist.

    Integrates ``progress += dt * chars_per_ms`` on every frame using the
    measured clock delta, so pacing does not depend on the frame rate.
    Only the typed length is read from the session, never its content.
    """

    updated = Signal(object)
    finished = Signal()

    def __init__(self, clock, typed_length: Callable[[], int] | None = None,
                 settings: GhostSettings | None = None, parent=None):
        super().__init__(parent)
        settings = settings or GhostSettings()
        self._clock = clock
        self._typed_length = typed_length or (lambda: 0)
        self.settings = settings
        self.enabled = settings.enabled
        self.speed = clamp_ghost_speed(settings.speed)
        self.pb = 0
        self.total_chars = 0
        self.line_of: Optional[LineResolver] = None

        self.progress = 0.0
        self._last_frame: float | None = None
        self.state = GhostState()

        self._frames = Ticker(settings.frame_ms, self)
        self._frames.ticked.connect(self._on_frame)

    @property
    def is_running(self) -> bool:
        return self._frames.is_active

    def set_typed_length(self, fn: Callable[[], int]):
        self._typed_length = fn

    def set_pb(self, wpm: int):
        self.pb = max(0, int(wpm))

    def set_speed(self, multiplier: float):
        self.speed = clamp_ghost_speed(multiplier)

    def set_target(self, full_text: str):
        self.total_chars = len(full_text)

    def set_line_resolver(self, resolver: Optional[LineResolver]):
        self.line_of = resolver

    def set_enabled(self, enabled: bool):
        self.enabled = bool(enabled)
        if not self.enabled:
            self.reset()

    def start(self) -> bool:
        if not self.enabled or self.pb <= 0 or self.total_chars <= 0:
            return False
        self.progress = 0.0
        self.state = GhostState()
        self._last_frame = self._clock.now()
        self._frames.start()
        logger.debug("Ghost started at %d wpm x%.2f", self.pb, self.speed)
        return True

    def stop(self):
        self._frames.stop()
        self._last_frame = None

    def reset(self):
        self.stop()
        self.progress = 0.0
        self.state = GhostState()

    def advance(self, now_ms: float) -> GhostState:
        if self._last_frame is None:
            self._last_frame = now_ms
        dt = now_ms - self._last_frame
        self._last_frame = now_ms
        typed = self._typed_length()

        if dt > 0 and self.progress < self.total_chars:
            lead = int(math.floor(self.progress)) - typed
            factor = rubber_band_factor(
                lead,
                self.settings.lead_threshold,
                self.settings.gain,
                self.settings.max_adjust,
            )
            rate = chars_per_ms(self.pb * self.speed * factor)
            self.progress = min(float(self.total_chars), self.progress + dt * rate)

        position, opacity, crossing = interpolate(self.progress, self.total_chars, self.line_of)
        self.state = GhostState(
            progress=self.progress,
            lead_chars=int(math.floor(self.progress)) - typed,
            position=position,
            opacity=opacity,
            crossing_line=crossing,
        )
        return self.state

    def _on_frame(self):
        state = self.advance(self._clock.now())
        self.updated.emit(state)
        if self.progress >= self.total_chars:
            self.stop()
            self.finished.emit()
