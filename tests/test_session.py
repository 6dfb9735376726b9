import pytest

from app.audio import KeyFeedback
from app.errors import ConfigError, ContentError
from app.state import Mode, Status
from services.content import StaticContent
from services.store import MemoryStore
from services.typing_engine import TypingSession


def test_first_keystroke_starts_the_attempt(make_session):
    session = make_session()
    assert session.status is Status.IDLE
    assert session.full_text == "hi there"

    session.handle_input("h")
    assert session.status is Status.RUNNING
    assert session._ticker.is_active
    assert session.caret_index == 1


def test_words_mode_finish_exactly_at_target_length(make_session, clock):
    session = make_session()
    results = []
    session.finished.connect(results.append)

    text = "hi there"
    for i in range(1, len(text)):
        session.handle_input(text[:i])
        clock.advance(500)
    assert session.status is Status.RUNNING

    session.handle_input(text)
    assert session.status is Status.FINISHED
    assert not session._ticker.is_active
    assert len(results) == 1
    r = results[0]
    # 8 correct chars over 3.5 s
    assert r.wpm == 27
    assert r.raw_wpm == 27
    assert r.accuracy == 100
    assert r.errors == 0
    assert r.duration_sec == 4


def test_time_mode_auto_finishes_after_limit_ticks(make_session, clock):
    session = make_session(words=["abc"] * 10, mode="time", limit=15)
    ticker_states = []
    session.finished.connect(lambda _r: ticker_states.append(session._ticker.is_active))

    session.handle_input("a")
    clock.advance(300)
    session.handle_input("ab")
    for _ in range(15):
        clock.advance(1000)
        session._on_second()

    assert session.status is Status.FINISHED
    assert session.result is not None
    assert session.input == "ab"
    assert session.time_left == 0
    assert ticker_states == [False]

    # a late timeout after finishing changes nothing
    clock.advance(1000)
    session._on_second()
    assert session.elapsed_seconds == 15
    assert not session._ticker.is_active


def test_time_mode_counts_down(make_session, clock):
    session = make_session(words=["abc"] * 10, mode="time", limit=30)
    ticks = []
    session.ticked.connect(lambda sec, left: ticks.append((sec, left)))
    session.handle_input("a")
    clock.advance(1000)
    session._on_second()
    clock.advance(1000)
    session._on_second()
    assert ticks == [(1, 29), (2, 28)]
    assert session.status is Status.RUNNING


def test_double_finish_keeps_first_result(make_session, clock):
    session = make_session(words=["abc"] * 10, mode="time", limit=60)
    session.handle_input("a")
    clock.advance(2000)
    first = session.finish()
    clock.advance(5000)
    session.handle_input("ab")
    second = session.finish()

    assert first is not None
    assert second is None
    assert session.result is first
    assert session.input == "a"


def test_input_after_finish_is_ignored(make_session, typer):
    session = make_session()
    typer(session, "hi there")
    frozen = session.result
    count = len(session.keystrokes)

    session.handle_input("hi there!")
    assert session.input == "hi there"
    assert len(session.keystrokes) == count
    assert session.result is frozen


def test_every_input_is_recorded_in_order(make_session, clock):
    session = make_session()
    for value in ["h", "hx", "h", "hi"]:
        session.handle_input(value)
        clock.advance(100)
    values = [k.value for k in session.keystrokes]
    assert values == ["h", "hx", "h", "hi"]
    stamps = [k.timestamp_ms for k in session.keystrokes]
    assert stamps == sorted(stamps)


def test_backspace_shrinks_input(make_session, clock):
    session = make_session()
    session.handle_input("hx")
    clock.advance(1000)
    session.handle_input("h")
    assert session.input == "h"
    assert session.live_metrics().errors == 0


def test_key_feedback_classification(make_session):
    session = make_session()
    seen = []
    session.keyFeedback.connect(seen.append)
    for value in ["h", "hx", "h", "hi", "hi "]:
        session.handle_input(value)
    assert seen == [
        KeyFeedback.CORRECT,
        KeyFeedback.INCORRECT,
        KeyFeedback.BACKSPACE,
        KeyFeedback.CORRECT,
        KeyFeedback.SPACE,
    ]


def test_telemetry_sampled_once_per_second(make_session, clock):
    session = make_session(words=["hi"] * 20)
    session.handle_input("h")
    session.handle_input("hi")
    clock.advance(1000)
    session._on_second()
    session._on_second()  # same second again

    assert len(session.telemetry) == 1
    sample = session.telemetry[0]
    assert (sample.sec, sample.wpm, sample.raw) == (1, 24, 24)

    clock.advance(1000)
    session._on_second()
    assert [s.sec for s in session.telemetry] == [1, 2]


def test_reset_clears_everything_and_cancels_timers(make_session, clock):
    session = make_session(words=["abc"] * 10, mode="time", limit=15)
    session.handle_input("a")
    clock.advance(1000)
    session._on_second()
    assert session.timers_active

    session.reset()
    assert session.status is Status.IDLE
    assert not session.timers_active
    assert session.input == ""
    assert session.keystrokes == ()
    assert session.telemetry == []
    assert session.result is None
    assert session.time_left == 15


def test_reset_game_switches_mode(make_session):
    session = make_session()
    session.reset_game(mode="time", limit=30)
    assert session.mode is Mode.TIME
    assert session.time_left == 30


def test_reset_game_rejects_bad_limit(make_session):
    session = make_session()
    with pytest.raises(ConfigError):
        session.reset_game(limit=0)


def test_empty_content_is_a_precondition_error(clock):
    with pytest.raises(ContentError):
        TypingSession(clock, StaticContent([]), MemoryStore())


def test_new_personal_best_is_stored(make_session, typer):
    store = MemoryStore(pb=10)
    session = make_session(store=store)
    typer(session, "hi there")
    assert session.is_new_pb
    assert session.result.previous_pb == 10
    assert store.get() == session.result.wpm


def test_slower_attempt_keeps_personal_best(make_session, typer):
    store = MemoryStore(pb=500)
    session = make_session(store=store)
    typer(session, "hi there")
    assert not session.is_new_pb
    assert store.get() == 500


def test_live_metrics_follow_clock_then_freeze(make_session, clock):
    session = make_session(words=["hi"] * 20)
    assert session.live_metrics().wpm == 0
    session.handle_input("h")
    assert session.live_metrics().wpm == 0  # no time has passed yet
    session.handle_input("hi")
    clock.advance(1000)
    assert session.live_metrics().wpm == 24

    session.finish()
    clock.advance(60000)
    assert session.live_metrics().wpm == 24


def test_status_changes_are_signalled(make_session, typer):
    session = make_session()
    seen = []
    session.statusChanged.connect(seen.append)
    typer(session, "hi there")
    session.reset()
    assert seen == [Status.RUNNING, Status.FINISHED, Status.IDLE]


def test_time_limit_follows_clock_with_fast_ticks(make_session, clock):
    session = make_session(
        words=["abc"] * 10, mode="time", limit=2, telemetry={"interval_ms": 250}
    )
    assert session._ticker._tick.interval() == 250
    session.handle_input("a")
    for _ in range(4):
        clock.advance(250)
        session._on_second()
    assert session.status is Status.RUNNING
    assert session.time_left == 1

    for _ in range(3):
        clock.advance(250)
        session._on_second()
    assert session.status is Status.RUNNING

    clock.advance(250)
    session._on_second()
    assert session.status is Status.FINISHED
    assert session.result.duration_sec == 2
    assert [s.sec for s in session.telemetry] == [1, 2]


@pytest.mark.parametrize(
    "kwargs",
    [{"mode": "zen"}, {"limit": "lots"}, {"limit": None, "mode": 3}, {"limit": [15]}],
)
def test_reset_game_rejects_bad_mode_or_limit(make_session, kwargs):
    session = make_session()
    with pytest.raises(ConfigError):
        session.reset_game(**kwargs)
    assert session.mode is Mode.WORDS
    assert session.full_text == "hi there"


def test_live_accuracy_matches_final_rule_at_zero_elapsed(make_session):
    session = make_session()
    session.handle_input("x")
    live = session.live_metrics()
    assert live.accuracy == 0
    assert live.errors == 1
