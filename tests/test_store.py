from app.state import Mode, Result
from services.store import MAX_HISTORY_ITEMS, MemoryStore


def _result(wpm):
    return Result(wpm=wpm, raw_wpm=wpm, accuracy=100, errors=0, duration_sec=15)


def test_history_is_newest_first_and_bounded():
    store = MemoryStore()
    for wpm in range(MAX_HISTORY_ITEMS + 5):
        store.record_result(_result(wpm), Mode.TIME, 15)
    history = store.history()
    assert len(history) == MAX_HISTORY_ITEMS
    assert history[0]["wpm"] == MAX_HISTORY_ITEMS + 4
    assert history[0]["mode"] == "time"


def test_clear():
    store = MemoryStore(pb=80)
    store.record_result(_result(80), Mode.WORDS, 25)
    store.clear()
    assert store.get() == 0
    assert store.history() == []
