from __future__ import annotations

from enum import StrEnum

from statemachine import State, StateMachine


class RoundPhase(StrEnum):
    idle = "idle"
    running = "running"
    ended = "ended"


class RoundFSM(StateMachine):
    """Round lifecycle: idle -> running -> ended, and ended -> running for a fresh round.

    The FSM only guards transitions; the controller does the work.
    """

    idle = State(RoundPhase.idle.value, value=RoundPhase.idle.value, initial=True)
    running = State(RoundPhase.running.value, value=RoundPhase.running.value)
    ended = State(RoundPhase.ended.value, value=RoundPhase.ended.value)

    begin = idle.to(running) | ended.to(running)
    finish = running.to(ended)

    def __init__(self, phase: RoundPhase = RoundPhase.idle):
        super().__init__(start_value=phase.value)

    @property
    def phase(self) -> RoundPhase:
        return RoundPhase(str(self.current_state.value))
