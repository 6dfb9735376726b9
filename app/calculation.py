import math

from app.state import Scores

CHARS_PER_WORD = 5


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def count_correct(target: str, typed: str) -> tuple[int, int]:
    """
    Position-wise comparison of typed against target.
    Returns (correct_chars, errors). Characters typed past the end of the
    target are errors.
    """
    correct = 0
    errors = 0
    limit = len(target)
    for i, ch in enumerate(typed):
        if i < limit and ch == target[i]:
            correct += 1
        else:
            errors += 1
    return correct, errors


def score(target: str, typed: str, elapsed_ms: float) -> Scores:
    """
    Net WPM = (correct chars / 5) / minutes
    Raw WPM = (typed chars / 5) / minutes
    A non-positive duration degrades to zero speeds instead of raising.
    """
    correct, errors = count_correct(target, typed)
    n = len(typed)
    if elapsed_ms <= 0:
        return Scores(wpm=0, raw_wpm=0, accuracy=100 if n == 0 else 0, errors=errors)

    minutes = elapsed_ms / 60000.0
    wpm = max(0, round_half_up((correct / CHARS_PER_WORD) / minutes))
    raw = max(0, round_half_up((n / CHARS_PER_WORD) / minutes))
    accuracy = round_half_up(correct / n * 100) if n > 0 else 100
    return Scores(wpm=wpm, raw_wpm=raw, accuracy=accuracy, errors=errors)


def chars_per_ms(wpm: float) -> float:
    return wpm * CHARS_PER_WORD / 60000.0
