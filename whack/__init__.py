"""Timed multi-slot spawn/despawn engine for whack-a-mole style games.

The engine is UI-agnostic: a shell drives it through `GameController` and
renders whatever it reports via `GameListener` callbacks.
"""

from whack.config import EngineConfig, config_from_env, configure_logging
from whack.controller import GameController, HitOutcome, HitResult
from whack.errors import InvalidSlotError, PreconditionError, WhackError
from whack.items import ItemType
from whack.listeners import EventJournal, GameListener, ListenerHub
from whack.rng import RandomSource

__all__ = [
    "EngineConfig",
    "EventJournal",
    "GameController",
    "GameListener",
    "HitOutcome",
    "HitResult",
    "InvalidSlotError",
    "ItemType",
    "ListenerHub",
    "PreconditionError",
    "RandomSource",
    "WhackError",
    "config_from_env",
    "configure_logging",
]
