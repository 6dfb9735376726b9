from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

import yaml

from app.errors import ConfigError
from app.state import Mode

GHOST_SPEED_MIN = 0.5
GHOST_SPEED_MAX = 2.0

DEFAULT_CONFIG: Dict[str, Any] = {
    "test": {
        "mode": "words",
        "limit": 25,
    },
    "content": {
        "difficulty": "beginner",
        "punctuation": False,
        "numbers": False,
        "caps": False,
        "time_multiplier": 4,
        "time_min_words": 100,
        "seed": None,
    },
    "telemetry": {
        "capacity": 120,
        "interval_ms": 1000,
    },
    "replay": {
        "cap_ms": 500,
    },
    "ghost": {
        "enabled": True,
        "speed": 1.0,
        "frame_ms": 16,
        "lead_threshold": 3,
        "gain": 0.05,
        "max_adjust": 0.35,
    },
    "logging": {
        "level": "INFO",
        "file": None,
    },
}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if (
            key in merged
            and isinstance(merged[key], dict)
            and isinstance(value, dict)
        ):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _candidate_config_paths() -> list[Path]:
    env_path = os.environ.get("TYPEPACER_CONFIG")
    paths = []
    if env_path:
        paths.append(Path(env_path))
    paths.append(Path("typepacer.yaml"))
    return paths


def load_config() -> Dict[str, Any]:
    config = copy.deepcopy(DEFAULT_CONFIG)
    for path in _candidate_config_paths():
        if path.exists():
            with path.open("r", encoding="utf-8") as handle:
                try:
                    data = yaml.safe_load(handle) or {}
                except yaml.YAMLError as e:
                    raise ConfigError(f"{path}: {e}") from e
            if isinstance(data, dict):
                config = _deep_merge(config, data)
            break
    return config


def clamp_ghost_speed(speed: float) -> float:
    return max(GHOST_SPEED_MIN, min(GHOST_SPEED_MAX, float(speed)))


@dataclass(frozen=True)
class GhostSettings:
    enabled: bool = True
    speed: float = 1.0
    frame_ms: int = 16
    lead_threshold: int = 3
    gain: float = 0.05
    max_adjust: float = 0.35


@dataclass(frozen=True)
class EngineSettings:
    mode: Mode = Mode.WORDS
    limit: int = 25
    difficulty: str = "beginner"
    punctuation: bool = False
    numbers: bool = False
    caps: bool = False
    time_multiplier: int = 4
    time_min_words: int = 100
    seed: int | None = None
    telemetry_capacity: int = 120
    telemetry_interval_ms: int = 1000
    replay_cap_ms: int = 500
    ghost: GhostSettings = field(default_factory=GhostSettings)

    @classmethod
    def from_config(cls, cfg: Dict[str, Any] | None = None) -> "EngineSettings":
        cfg = _deep_merge(DEFAULT_CONFIG, cfg or {})
        test, content = cfg["test"], cfg["content"]
        telemetry, ghost = cfg["telemetry"], cfg["ghost"]

        try:
            mode = Mode(test["mode"])
        except ValueError as e:
            raise ConfigError(f"unknown test mode: {test['mode']!r}") from e
        try:
            limit = int(test["limit"])
        except (TypeError, ValueError) as e:
            raise ConfigError(f"test limit must be an integer: {test['limit']!r}") from e
        if limit <= 0:
            raise ConfigError(f"test limit must be positive: {limit}")
        capacity = int(telemetry["capacity"])
        if capacity <= 0:
            raise ConfigError(f"telemetry capacity must be positive: {capacity}")

        return cls(
            mode=mode,
            limit=limit,
            difficulty=str(content["difficulty"]),
            punctuation=bool(content["punctuation"]),
            numbers=bool(content["numbers"]),
            caps=bool(content["caps"]),
            time_multiplier=int(content["time_multiplier"]),
            time_min_words=int(content["time_min_words"]),
            seed=content.get("seed"),
            telemetry_capacity=capacity,
            telemetry_interval_ms=int(telemetry["interval_ms"]),
            replay_cap_ms=max(0, int(cfg["replay"]["cap_ms"])),
            ghost=GhostSettings(
                enabled=bool(ghost["enabled"]),
                speed=clamp_ghost_speed(ghost["speed"]),
                frame_ms=int(ghost["frame_ms"]),
                lead_threshold=int(ghost["lead_threshold"]),
                gain=float(ghost["gain"]),
                max_adjust=float(ghost["max_adjust"]),
            ),
        )
