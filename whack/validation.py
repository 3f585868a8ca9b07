from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from whack.errors import PreconditionError
from whack.fsm import RoundPhase
from whack.slots import check_slot_id


@dataclass(frozen=True, slots=True)
class ValidationContext:
    """Inputs available to validators. Small enough to log as-is."""

    action: str
    phase: RoundPhase
    grid_size: int
    slot_id: object = None


class ActionValidator(ABC):
    """A small, composable precondition check for an inbound action."""

    @abstractmethod
    def validate(self, *, ctx: ValidationContext) -> None:
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class PhaseValidator(ActionValidator):
    allowed_phases: frozenset[RoundPhase]

    def validate(self, *, ctx: ValidationContext) -> None:
        if ctx.phase not in self.allowed_phases:
            allowed = ",".join(sorted(p.value for p in self.allowed_phases))
            raise PreconditionError(f"Action '{ctx.action}' not allowed in phase '{ctx.phase.value}' (allowed: {allowed})")


@dataclass(frozen=True, slots=True)
class SlotRangeValidator(ActionValidator):
    def validate(self, *, ctx: ValidationContext) -> None:
        check_slot_id(ctx.slot_id, ctx.grid_size)


@dataclass(frozen=True, slots=True)
class ValidatorPipeline:
    validators: tuple[ActionValidator, ...]

    def validate(self, *, ctx: ValidationContext) -> None:
        for v in self.validators:
            v.validate(ctx=ctx)


# Bad input is reported before wrong phase: a caller error either way.
DEFAULT_ACTION_PIPELINES: dict[str, ValidatorPipeline] = {
    "start": ValidatorPipeline(
        validators=(PhaseValidator(allowed_phases=frozenset({RoundPhase.idle, RoundPhase.ended})),),
    ),
    "stop": ValidatorPipeline(
        validators=(PhaseValidator(allowed_phases=frozenset({RoundPhase.running})),),
    ),
    "hit": ValidatorPipeline(
        validators=(
            SlotRangeValidator(),
            PhaseValidator(allowed_phases=frozenset({RoundPhase.running})),
        ),
    ),
}


def pipeline_for_action(action: str) -> ValidatorPipeline:
    pipe = DEFAULT_ACTION_PIPELINES.get(action)
    if pipe is None:
        raise ValueError(f"Unknown action: {action}")
    return pipe
