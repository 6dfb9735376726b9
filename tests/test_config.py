import pytest

from app.config import DEFAULT_CONFIG, EngineSettings, load_config
from app.errors import ConfigError
from app.state import Mode


def test_load_config_overrides(tmp_path, monkeypatch):
    config_path = tmp_path / "typepacer.yaml"
    config_path.write_text(
        "test:\n  mode: time\n  limit: 30\nreplay:\n  cap_ms: 250\n", encoding="utf-8"
    )
    monkeypatch.setenv("TYPEPACER_CONFIG", str(config_path))

    config = load_config()
    assert config["test"]["mode"] == "time"
    assert config["replay"]["cap_ms"] == 250
    assert config["ghost"]["frame_ms"] == 16

    settings = EngineSettings.from_config(config)
    assert settings.mode is Mode.TIME
    assert settings.limit == 30
    assert settings.replay_cap_ms == 250


def test_load_config_rejects_broken_yaml(tmp_path, monkeypatch):
    config_path = tmp_path / "typepacer.yaml"
    config_path.write_text("test: [unclosed\n", encoding="utf-8")
    monkeypatch.setenv("TYPEPACER_CONFIG", str(config_path))
    with pytest.raises(ConfigError):
        load_config()


def test_defaults():
    settings = EngineSettings.from_config()
    assert settings.mode is Mode.WORDS
    assert settings.limit == 25
    assert settings.replay_cap_ms == 500
    assert settings.time_multiplier == 4
    assert settings.time_min_words == 100


@pytest.mark.parametrize(
    "override",
    [
        {"test": {"mode": "sprint"}},
        {"test": {"limit": 0}},
        {"test": {"limit": "many"}},
        {"telemetry": {"capacity": 0}},
    ],
)
def test_invalid_settings(override):
    with pytest.raises(ConfigError):
        EngineSettings.from_config(override)


def test_ghost_speed_clamped():
    assert EngineSettings.from_config({"ghost": {"speed": 3}}).ghost.speed == 2.0
    assert EngineSettings.from_config({"ghost": {"speed": 0.1}}).ghost.speed == 0.5


def test_loaded_config_does_not_alias_defaults(tmp_path, monkeypatch):
    monkeypatch.setenv("TYPEPACER_CONFIG", str(tmp_path / "missing.yaml"))
    monkeypatch.chdir(tmp_path)
    config = load_config()
    config["ghost"]["speed"] = 1.7
    config["test"]["limit"] = 99
    assert DEFAULT_CONFIG["ghost"]["speed"] == 1.0
    assert DEFAULT_CONFIG["test"]["limit"] == 25

    settings_cfg = load_config()
    assert settings_cfg["test"]["limit"] == 25
