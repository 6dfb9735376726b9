from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Status(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    FINISHED = "finished"
    REPLAYING = "replaying"


class Mode(str, Enum):
    TIME = "time"
    WORDS = "words"


@dataclass(frozen=True)
class Keystroke:
    """Snapshot of the whole typed string at one clock reading."""
    value: str
    timestamp_ms: float


@dataclass(frozen=True)
class TelemetrySample:
    sec: int
    wpm: int
    raw: int


@dataclass(frozen=True)
class Scores:
    wpm: int = 0
    raw_wpm: int = 0
    accuracy: int = 100
    errors: int = 0


@dataclass(frozen=True)
class Result:
    wpm: int
    raw_wpm: int
    accuracy: int
    errors: int
    duration_sec: int
    is_new_pb: bool = False
    previous_pb: Optional[int] = None


@dataclass(frozen=True)
class GhostState:
    """Logical ghost position for one animation frame.

    ``position`` is the fractional character index the renderer should draw
    at, ``opacity`` is below 1.0 only while crossing a line boundary.
    """
    progress: float = 0.0
    lead_chars: int = 0
    position: float = 0.0
    opacity: float = 1.0
    crossing_line: bool = False
