from __future__ import annotations

import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from whack.config import EngineConfig, config_from_env, configure_logging


def test_reference_defaults() -> None:
    cfg = EngineConfig()

    assert cfg.grid_size == 9
    assert cfg.round_duration_s == 45
    assert (cfg.min_up_time_s, cfg.max_up_time_s) == (0.45, 1.1)
    assert cfg.base_spawn_interval_s == 0.5
    assert (cfg.spawn_jitter_min, cfg.spawn_jitter_max) == (0.7, 1.3)
    assert cfg.penalty_duration_s == 0.7
    assert cfg.target_probability == pytest.approx(0.8)


def test_config_is_frozen() -> None:
    cfg = EngineConfig()
    with pytest.raises(ValidationError):
        cfg.grid_size = 4  # type: ignore[misc]


@pytest.mark.parametrize(
    "overrides",
    [
        {"min_up_time_s": 2.0, "max_up_time_s": 1.0},
        {"spawn_jitter_min": 1.5, "spawn_jitter_max": 1.2},
        {"hazard_probability": 0.7, "bonus_probability": 0.4},
        {"hazard_score": 5},
        {"target_score": 0},
        {"grid_size": 0},
        {"unknown_field": 1},
    ],
)
def test_invalid_configs_are_rejected(overrides: dict) -> None:
    with pytest.raises(ValidationError):
        EngineConfig(**overrides)


def test_config_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WHACK_GRID_SIZE", "16")
    monkeypatch.setenv("WHACK_HAZARD_PROBABILITY", "0.2")
    monkeypatch.setenv("WHACK_ROUND_DURATION_S", " ")

    cfg = config_from_env()

    assert cfg.grid_size == 16
    assert cfg.hazard_probability == 0.2
    assert cfg.round_duration_s == 45


def test_config_from_env_rejects_bad_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WHACK_GRID_SIZE", "lots")
    with pytest.raises(ValidationError):
        config_from_env()


def test_config_from_dotenv_does_not_override_real_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("WHACK_GRID_SIZE=25\nWHACK_PENALTY_DURATION_S=1.5\n", encoding="utf-8")

    monkeypatch.setenv("WHACK_GRID_SIZE", "4")
    # Register the key with monkeypatch so whatever load_dotenv writes is undone afterwards.
    monkeypatch.setenv("WHACK_PENALTY_DURATION_S", "0")
    monkeypatch.delenv("WHACK_PENALTY_DURATION_S")

    cfg = config_from_env(dotenv_path=env_file)

    assert cfg.grid_size == 4
    assert cfg.penalty_duration_s == 1.5


def test_missing_dotenv_file_is_ignored(tmp_path: Path) -> None:
    cfg = config_from_env(prefix="WHACK_TEST_NOPE_", dotenv_path=tmp_path / "missing.env")
    assert cfg == EngineConfig()


def test_configure_logging_reads_level_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[object] = []
    monkeypatch.setattr("logging.basicConfig", lambda **kw: calls.append(kw["level"]))
    monkeypatch.setenv("WHACK_LOG_LEVEL", "debug")

    configure_logging()
    configure_logging(logging.WARNING)

    assert calls == ["DEBUG", logging.WARNING]
