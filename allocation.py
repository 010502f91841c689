# FILE: allocation.py
# -------------------
# The memory placement decided by the planning pass: which values live in
# alternate memory and which async copies move them there (or back).

from dataclasses import dataclass
from typing import Dict, List, Optional, Set

from operations import Op

DEFAULT_MEMORY = 'default'
ALTERNATE_MEMORY = 'alternate'
MEMORY_SPACES = (DEFAULT_MEMORY, ALTERNATE_MEMORY)


@dataclass
class Allocation:
    """Placement of one value, optionally produced by an async copy."""
    value: Op
    memory_space: str = ALTERNATE_MEMORY
    copy_start: Optional[Op] = None
    copy_done: Optional[Op] = None

    def __post_init__(self):
        if self.memory_space not in MEMORY_SPACES:
            raise ValueError(f"Unknown memory space '{self.memory_space}' for {self.value.name}")


class AllocationPlan:
    """Ordered collection of allocations. May be empty."""

    def __init__(self, allocations: Optional[List[Allocation]] = None):
        self.allocations: List[Allocation] = []
        self._copy_ops: Set[int] = set()
        self._alternate_values: Dict[int, Op] = {}
        for a in allocations or []:
            self.add(a)

    def add(self, allocation: Allocation):
        self.allocations.append(allocation)
        for op in (allocation.copy_start, allocation.copy_done):
            if op is not None:
                self._copy_ops.add(id(op))
        if allocation.memory_space == ALTERNATE_MEMORY:
            self._alternate_values[id(allocation.value)] = allocation.value

    def __len__(self):
        return len(self.allocations)

    def references_copy(self, op: Op) -> bool:
        return id(op) in self._copy_ops

    def in_alternate_memory(self, op: Op) -> bool:
        return id(op) in self._alternate_values

    def operands_in_alternate(self, op: Op) -> List[int]:
        return [i for i, operand in enumerate(op.operands) if self.in_alternate_memory(operand)]
