from enum import Enum


class KeyFeedback(str, Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"
    SPACE = "space"
    BACKSPACE = "backspace"


def classify_input(previous: str, value: str, target: str) -> KeyFeedback:
    """Classify one input mutation for sound/haptic collaborators.

    The engine only emits the class; playing anything is up to the listener.
    """
    if len(value) < len(previous) or not value:
        return KeyFeedback.BACKSPACE
    last = value[-1]
    if last == " ":
        return KeyFeedback.SPACE
    i = len(value) - 1
    if i < len(target) and target[i] == last:
        return KeyFeedback.CORRECT
    return KeyFeedback.INCORRECT
