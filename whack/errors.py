from __future__ import annotations


class WhackError(Exception):
    """Base class for errors raised to engine callers."""


class PreconditionError(WhackError, ValueError):
    """Operation not allowed in the current round phase. No state was changed."""


class InvalidSlotError(WhackError, ValueError):
    """Slot id outside `[0, grid_size)`."""

    def __init__(self, slot_id: object, grid_size: int) -> None:
        self.slot_id = slot_id
        self.grid_size = grid_size
        super().__init__(f"slot_id must be an int in [0, {grid_size}) (got {slot_id!r})")
