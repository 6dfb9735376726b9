# main.py
from __future__ import annotations
import sys
import logging

from PySide6.QtCore import QCoreApplication, QObject, QTimer

from app.config import EngineSettings, load_config
from app.errors import TypepacerError
from app.timer import Clock
from services.content import WordGenerator
from services.ghost import GhostPacer
from services.store import MemoryStore
from services.typing_engine import TypingSession


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        handlers=handlers,
    )

    # Log any uncaught exceptions rather than silently dying
    def excepthook(exctype, value, tb):
        logging.critical("Unhandled exception", exc_info=(exctype, value, tb))
        sys.exit(1)

    sys.excepthook = excepthook


def build_session(settings: EngineSettings, store: MemoryStore | None = None,
                  clock=None, parent=None) -> TypingSession:
    clock = clock or Clock()
    store = store if store is not None else MemoryStore()
    content = WordGenerator(
        difficulty=settings.difficulty,
        punctuation=settings.punctuation,
        numbers=settings.numbers,
        caps=settings.caps,
        time_multiplier=settings.time_multiplier,
        time_min_words=settings.time_min_words,
        seed=settings.seed,
    )
    pacer = GhostPacer(clock, settings=settings.ghost, parent=parent)
    session = TypingSession(clock, content, store, settings, pacer=pacer, parent=parent)
    session.finished.connect(lambda r: store.record_result(r, session.mode, session.limit))
    return session


class ScriptedTypist(QObject):
    """Feeds the session's own target text at a fixed speed (demo driver)."""

    def __init__(self, session: TypingSession, wpm: int = 60, parent=None):
        super().__init__(parent)
        self.session = session
        self._timer = QTimer(self)
        self._timer.setInterval(max(1, int(60000 / (wpm * 5))))
        self._timer.timeout.connect(self._type_next)
        session.finished.connect(lambda _r: self._timer.stop())

    def start(self):
        self._timer.start()

    def _type_next(self):
        s = self.session
        n = len(s.input)
        if n >= len(s.full_text):
            self._timer.stop()
            return
        s.handle_input(s.full_text[: n + 1])


def main() -> int:
    try:
        config = load_config()
        settings = EngineSettings.from_config(config)
    except TypepacerError as e:
        print(f"config error: {e}", file=sys.stderr)
        return 2
    setup_logging(config["logging"]["level"], config["logging"]["file"])

    app = QCoreApplication.instance() or QCoreApplication(sys.argv)
    app.setApplicationName("typepacer")

    store = MemoryStore(pb=50)
    session = build_session(settings, store=store)
    session.ticked.connect(
        lambda sec, left: logging.info("t=%ds left=%ds live=%s", sec, left, session.live_metrics())
    )
    session.finished.connect(lambda _r: QTimer.singleShot(0, app.quit))

    typist = ScriptedTypist(session, wpm=70)
    typist.start()
    code = app.exec()
    session.dispose()
    logging.info("Result: %s", session.result)
    return code


if __name__ == "__main__":
    sys.exit(main())
