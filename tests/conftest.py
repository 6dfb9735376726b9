import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtWidgets import QApplication  # noqa: E402

from app.config import EngineSettings
from services.content import StaticContent
from services.store import MemoryStore
from services.typing_engine import TypingSession


class ManualClock:
    def __init__(self, start: float = 1000.0):
        self.t = start

    def now(self) -> float:
        return self.t

    def advance(self, ms: float) -> float:
        self.t += ms
        return self.t


@pytest.fixture(scope="session", autouse=True)
def qapp():
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def make_session(clock):
    sessions = []

    def factory(words=("hi", "there"), mode="words", limit=2, store=None, pacer=None, **cfg):
        config = {"test": {"mode": mode, "limit": limit}}
        config.update(cfg)
        settings = EngineSettings.from_config(config)
        session = TypingSession(
            clock,
            StaticContent(words),
            store if store is not None else MemoryStore(),
            settings,
            pacer=pacer,
        )
        sessions.append(session)
        return session

    yield factory
    for s in sessions:
        s.dispose()


def type_text(session, clock, text, step_ms=500):
    """Type text one char at a time, advancing the clock between keystrokes."""
    for i in range(1, len(text) + 1):
        if i > 1:
            clock.advance(step_ms)
        session.handle_input(text[:i])


@pytest.fixture
def typer(clock):
    def _type(session, text, step_ms=500):
        type_text(session, clock, text, step_ms)
    return _type
