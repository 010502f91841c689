# FILE: datatypes.py
# ------------------
# Basic data structures shared by the simulator: copy directions, outstanding
# async copy requests, and run statistics.

from dataclasses import dataclass, field
from typing import Any, Dict

# ----------------------------- Copy directions -----------------------------

# Transfer out of the default tier (prefetch into alternate memory).
READ_DEFAULT = 'read_default'
# Transfer into the default tier (eviction out of alternate memory).
WRITE_DEFAULT = 'write_default'

DIRECTIONS = (READ_DEFAULT, WRITE_DEFAULT)


def opposite_direction(direction: str) -> str:
    """Returns the direction sharing the default-memory interface with `direction`."""
    if direction == READ_DEFAULT:
        return WRITE_DEFAULT
    if direction == WRITE_DEFAULT:
        return READ_DEFAULT
    raise ValueError(f"Unknown copy direction '{direction}'")

# ----------------------------- Outstanding copies -----------------------------

@dataclass(eq=False)
class OutstandingAsyncCopy:
    """A copy that has been started but not fully drained of bytes."""
    copy_start: Any
    remaining_bytes: float

    def __eq__(self, other):
        if not isinstance(other, OutstandingAsyncCopy):
            return NotImplemented
        return (self.copy_start is other.copy_start
                and self.remaining_bytes == other.remaining_bytes)

    def drain(self, num_bytes: float) -> float:
        """Removes up to `num_bytes`, clamping at zero. Returns the bytes actually removed."""
        moved = min(self.remaining_bytes, num_bytes)
        self.remaining_bytes = max(0.0, self.remaining_bytes - num_bytes)
        return moved

# ----------------------------- Simulator Stats -----------------------------

@dataclass
class Stats:
    """Holds the simulation results."""
    elapsed_time: float = 0.0
    compute_time: float = 0.0
    copy_time: float = 0.0
    num_copies_completed: int = 0
    bytes_copied: float = 0.0
    breakdown: Dict[str, float] = field(default_factory=dict)
