# Hardware components and the per-instruction cost model: memory tiers,
# compute unit, and intrinsic elapsed time of an instruction.

from dataclasses import dataclass
from typing import Sequence

from operations import Op

# ----------------------------- Memory models (byte units) -----------------------------

@dataclass
class MemoryDevice:
    name: str
    bandwidth_bytes_per_second: float   # shared by reads and writes

    def transfer_time(self, size_bytes: float) -> float:
        if size_bytes <= 0:
            return 0.0
        return size_bytes / self.bandwidth_bytes_per_second

# ----------------------------- Compute unit model -----------------------------

@dataclass
class ComputeUnit:
    name: str
    flops_per_second: float
    transcendentals_per_second: float = 0.0   # 0 means same rate as flops

    def compute_time(self, flops: int, transcendentals: int = 0) -> float:
        t = flops / self.flops_per_second if flops > 0 else 0.0
        if transcendentals > 0:
            rate = self.transcendentals_per_second or self.flops_per_second
            t = max(t, transcendentals / rate)
        return t

# ----------------------------- Cost model -----------------------------

class CostModel:
    """
    Intrinsic elapsed time of single instructions.

    An instruction is bound by whichever is slower, its arithmetic or its
    memory traffic. Traffic to operands/outputs placed in alternate memory is
    charged at the alternate tier's bandwidth, everything else at the default
    tier's.
    """

    def __init__(self, compute_unit: ComputeUnit, default_memory: MemoryDevice, alternate_memory: MemoryDevice):
        self.compute_unit = compute_unit
        self.default_memory = default_memory
        self.alternate_memory = alternate_memory

    @property
    def default_bandwidth(self) -> float:
        return self.default_memory.bandwidth_bytes_per_second

    def memory_time(self, op: Op, operands_in_alternate: Sequence[int] = (), output_in_alternate: bool = False) -> float:
        default_bytes, alternate_bytes = 0, 0
        for i, nbytes in enumerate(op.operand_bytes()):
            if i in operands_in_alternate:
                alternate_bytes += nbytes
            else:
                default_bytes += nbytes
        if output_in_alternate:
            alternate_bytes += op.output_bytes
        else:
            default_bytes += op.output_bytes
        return self.default_memory.transfer_time(default_bytes) + self.alternate_memory.transfer_time(alternate_bytes)

    def elapsed_time(self, op: Op, operands_in_alternate: Sequence[int] = (), output_in_alternate: bool = False) -> float:
        compute = self.compute_unit.compute_time(op.flops, op.transcendentals)
        return max(compute, self.memory_time(op, operands_in_alternate, output_in_alternate))
