from __future__ import annotations

import logging
import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, model_validator

ENV_PREFIX = "WHACK_"


class EngineConfig(BaseModel):
    """Startup constants for one engine instance.

    Frozen: a running controller never sees these change. Defaults are the
    reference tuning (3x3 grid, 45 second rounds).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    grid_size: int = Field(9, ge=1)
    round_duration_s: int = Field(45, ge=1)

    # Per-item up-time is drawn uniformly from [min, max].
    min_up_time_s: float = Field(0.45, gt=0)
    max_up_time_s: float = Field(1.1, gt=0)

    # Next spawn delay = base * Uniform(jitter_min, jitter_max), redrawn each tick.
    base_spawn_interval_s: float = Field(0.5, gt=0)
    spawn_jitter_min: float = Field(0.7, gt=0)
    spawn_jitter_max: float = Field(1.3, gt=0)

    # Target gets whatever probability mass is left.
    hazard_probability: float = Field(0.15, ge=0, le=1)
    bonus_probability: float = Field(0.05, ge=0, le=1)

    target_score: int = Field(10, gt=0)
    hazard_score: int = Field(-25, lt=0)
    bonus_score: int = Field(50, gt=0)

    penalty_duration_s: float = Field(0.7, gt=0)
    tick_interval_s: float = Field(1.0, gt=0)

    @model_validator(mode="after")
    def _check_ranges(self) -> "EngineConfig":
        if self.min_up_time_s > self.max_up_time_s:
            raise ValueError("min_up_time_s must be <= max_up_time_s")
        if self.spawn_jitter_min > self.spawn_jitter_max:
            raise ValueError("spawn_jitter_min must be <= spawn_jitter_max")
        if self.hazard_probability + self.bonus_probability > 1:
            raise ValueError("hazard_probability + bonus_probability must be <= 1")
        return self

    @property
    def target_probability(self) -> float:
        return 1.0 - self.hazard_probability - self.bonus_probability


def config_from_env(*, prefix: str = ENV_PREFIX, dotenv_path: Path | None = None) -> EngineConfig:
    """Build an EngineConfig from `WHACK_*` environment variables.

    If `dotenv_path` exists it is loaded first; variables already set in the
    real environment win. Unset fields keep their defaults.
    """

    if dotenv_path is not None and dotenv_path.exists():
        from dotenv import load_dotenv

        load_dotenv(dotenv_path=dotenv_path, override=False)

    raw: dict[str, str] = {}
    for name in EngineConfig.model_fields:
        value = os.environ.get(f"{prefix}{name.upper()}")
        if value is not None and value.strip():
            raw[name] = value.strip()

    return EngineConfig.model_validate(raw)


def configure_logging(level: int | str | None = None) -> None:
    if level is None:
        level = os.environ.get(f"{ENV_PREFIX}LOG_LEVEL", "INFO").upper()
    logging.basicConfig(level=level)
