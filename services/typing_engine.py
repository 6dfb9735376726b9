# services/typing_engine.py
from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from PySide6.QtCore import QObject, Signal

from app.audio import classify_input
from app.calculation import round_half_up, score
from app.config import EngineSettings
from app.errors import ConfigError, ContentError
from app.state import Keystroke, Mode, Result, Scores, Status, TelemetrySample
from core.chrono import Ticker
from services.recorder import KeystrokeRecorder
from services.replay import ReplayPlayer
from services.telemetry import TelemetrySampler

logger = logging.getLogger(__name__)


class TypingSession(QObject):
    """One typing test at a time: Idle -> Running -> Finished (<-> Replaying).

    Owns the typed text, keystroke log, telemetry ring and result. Every
    transition is observable through signals, so a widget or a headless test
    can follow the attempt without polling.
    """

    statusChanged = Signal(object)
    inputChanged = Signal(str)
    ticked = Signal(int, int)  # elapsed seconds, seconds left (time mode)
    telemetryAppended = Signal(object)
    keyFeedback = Signal(object)
    finished = Signal(object)

    def __init__(self, clock, content, store=None, settings: EngineSettings | None = None,
                 pacer=None, parent=None):
        super().__init__(parent)
        self.settings = settings or EngineSettings()
        self._clock = clock
        self._content = content
        self._store = store
        self.mode = self.settings.mode
        self.limit = self.settings.limit

        self._ticker = Ticker(self.settings.telemetry_interval_ms, self)
        self._ticker.ticked.connect(self._on_second)
        self._telemetry = TelemetrySampler(self.settings.telemetry_capacity)
        self._recorder = KeystrokeRecorder()
        self._replay = ReplayPlayer(self.settings.replay_cap_ms, self)
        self._replay.stepped.connect(self._on_replay_step)
        self._replay.completed.connect(self._on_replay_done)

        self.pacer = pacer
        if pacer is not None:
            pacer.set_typed_length(lambda: len(self._input))

        self.status = Status.IDLE
        self.words: List[str] = []
        self.full_text = ""
        self._input = ""
        self._start_ms: float | None = None
        self.time_left = 0
        self.elapsed_seconds = 0
        self.result: Optional[Result] = None

        self.reset_game()

    # ---------------- read side ----------------
    @property
    def input(self) -> str:
        return self._input

    @property
    def caret_index(self) -> int:
        return len(self._input)

    @property
    def keystrokes(self) -> Tuple[Keystroke, ...]:
        return self._recorder.snapshot()

    @property
    def telemetry(self) -> List[TelemetrySample]:
        return self._telemetry.snapshot()

    @property
    def is_running(self) -> bool:
        return self.status is Status.RUNNING

    @property
    def is_new_pb(self) -> bool:
        return bool(self.result and self.result.is_new_pb)

    @property
    def timers_active(self) -> bool:
        pacing = self.pacer is not None and self.pacer.is_running
        return self._ticker.is_active or self._replay.is_pending or pacing

    def elapsed_ms(self) -> float:
        if self._start_ms is None:
            return 0.0
        return self._clock.now() - self._start_ms

    def live_metrics(self) -> Scores:
        if self.result is not None:
            r = self.result
            return Scores(wpm=r.wpm, raw_wpm=r.raw_wpm, accuracy=r.accuracy, errors=r.errors)
        if self.status is not Status.RUNNING:
            return Scores()
        return score(self.full_text, self._input, self.elapsed_ms())

    # ---------------- lifecycle ----------------
    def reset_game(self, mode: Mode | str | None = None, limit: int | None = None):
        """Pull fresh words for the (optionally new) mode/limit and go Idle."""
        try:
            mode = Mode(mode) if mode is not None else self.mode
        except ValueError as e:
            raise ConfigError(f"unknown test mode: {mode!r}") from e
        try:
            limit = int(limit) if limit is not None else self.limit
        except (TypeError, ValueError) as e:
            raise ConfigError(f"test limit must be an integer: {limit!r}") from e
        if limit <= 0:
            raise ConfigError(f"test limit must be positive: {limit}")

        words = list(self._content.generate(mode, limit))
        if not words:
            raise ContentError(f"content provider returned no words for {mode.value} {limit}")

        self.mode, self.limit = mode, limit
        self.words = words
        self.full_text = " ".join(words)
        if self.pacer is not None:
            self.pacer.set_target(self.full_text)
        self.reset()

    def reset(self):
        """Back to Idle on the current words, whatever state we were in."""
        self._cancel_timers()
        self._input = ""
        self._start_ms = None
        self.time_left = self.limit if self.mode is Mode.TIME else 0
        self.elapsed_seconds = 0
        self.result = None
        self._recorder.clear()
        self._telemetry.clear()
        if self.pacer is not None:
            self.pacer.reset()
        self._set_status(Status.IDLE)
        self.inputChanged.emit("")

    def dispose(self):
        self._cancel_timers()

    def _cancel_timers(self):
        self._ticker.stop()
        self._replay.cancel()
        if self.pacer is not None:
            self.pacer.stop()

    def _set_status(self, status: Status):
        if status is not self.status:
            self.status = status
            self.statusChanged.emit(status)

    def _begin(self, now: float):
        self._start_ms = now
        self.time_left = self.limit if self.mode is Mode.TIME else 0
        self._set_status(Status.RUNNING)
        self._ticker.start()
        if self.pacer is not None:
            self.pacer.set_pb(self._store.get() if self._store is not None else 0)
            self.pacer.start()
        logger.info("Test started (%s %d, %d chars)", self.mode.value, self.limit, len(self.full_text))

    # ---------------- input ----------------
    def handle_input(self, value: str):
        if self.status in (Status.FINISHED, Status.REPLAYING):
            logger.debug("Ignoring input while %s", self.status.value)
            return
        now = self._clock.now()
        if self.status is Status.IDLE:
            self._begin(now)

        previous = self._input
        self._recorder.record(value, now)
        self._input = value
        self.inputChanged.emit(value)
        self.keyFeedback.emit(classify_input(previous, value, self.full_text))

        if self.mode is Mode.WORDS and len(value) >= len(self.full_text):
            self._finish(value, now)

    def _on_second(self):
        if self.status is not Status.RUNNING:
            return
        now = self._clock.now()
        elapsed = now - self._start_ms
        # derived from the clock; the tick interval is configurable
        self.elapsed_seconds = int(max(0.0, elapsed) // 1000)

        live = score(self.full_text, self._input, elapsed)
        sample = self._telemetry.sample(elapsed, live.wpm, live.raw_wpm)
        if sample is not None:
            self.telemetryAppended.emit(sample)

        if self.mode is Mode.TIME:
            self.time_left = max(0, self.limit - self.elapsed_seconds)
        self.ticked.emit(self.elapsed_seconds, self.time_left)

        if self.mode is Mode.TIME and self.time_left <= 0:
            # stop the tick before finishing so no second timeout can land
            self._ticker.stop()
            self._finish(self._input, now)

    # ---------------- finish ----------------
    def finish(self) -> Optional[Result]:
        return self._finish(self._input, self._clock.now())

    def _finish(self, final_input: str, end_ms: float) -> Optional[Result]:
        if self.status is not Status.RUNNING:
            logger.debug("Finish ignored while %s", self.status.value)
            return None
        self.status = Status.FINISHED
        self._ticker.stop()
        if self.pacer is not None:
            self.pacer.stop()

        elapsed = end_ms - self._start_ms
        if elapsed <= 0:
            logger.warning("Non-positive elapsed time %.3f ms at finish", elapsed)
        s = score(self.full_text, final_input, elapsed)
        previous_pb = self._store.get() if self._store is not None else None
        is_new_pb = previous_pb is not None and s.wpm > previous_pb
        if is_new_pb:
            self._store.set(s.wpm)

        self._input = final_input
        self.result = Result(
            wpm=s.wpm,
            raw_wpm=s.raw_wpm,
            accuracy=s.accuracy,
            errors=s.errors,
            duration_sec=round_half_up(max(0.0, elapsed) / 1000.0),
            is_new_pb=is_new_pb,
            previous_pb=previous_pb,
        )
        logger.info(
            "Test finished: %d wpm (raw %d), %d%% accuracy, %d errors in %ds%s",
            self.result.wpm, self.result.raw_wpm, self.result.accuracy,
            self.result.errors, self.result.duration_sec,
            " - new personal best" if is_new_pb else "",
        )
        self.statusChanged.emit(Status.FINISHED)
        self.finished.emit(self.result)
        return self.result

    # ---------------- replay ----------------
    def run_replay(self) -> bool:
        if self.status is not Status.FINISHED or not self._recorder:
            return False
        self._set_status(Status.REPLAYING)
        self._input = ""
        self.inputChanged.emit("")
        return self._replay.start(self._recorder.snapshot())

    def skip_replay(self):
        if self.status is Status.REPLAYING:
            self._replay.skip()

    def _on_replay_step(self, value: str):
        if self.status is not Status.REPLAYING:
            return
        previous = self._input
        self._input = value
        self.inputChanged.emit(value)
        self.keyFeedback.emit(classify_input(previous, value, self.full_text))

    def _on_replay_done(self):
        if self.status is Status.REPLAYING:
            self._set_status(Status.FINISHED)
