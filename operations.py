# Define all ops

import numpy as np
from typing import List, Optional, Sequence, Tuple

from datatypes import DIRECTIONS

# Bytes per element for the supported element types.
DTYPE_BYTES = {
    'pred': 1, 's8': 1, 'u8': 1,
    's16': 2, 'u16': 2, 'f16': 2, 'bf16': 2,
    's32': 4, 'u32': 4, 'f32': 4,
    's64': 8, 'u64': 8, 'f64': 8,
}


def shape_size_bytes(shape: Sequence[int], dtype: str) -> int:
    if dtype not in DTYPE_BYTES:
        raise ValueError(f"Unknown dtype '{dtype}'")
    return int(np.prod(shape, dtype=np.int64)) * DTYPE_BYTES[dtype]


class Op:
    def __init__(self, name: str, operands: Optional[List['Op']] = None):
        self.name = name
        self.operands = list(operands or [])

    # intrinsic cost inputs; zero unless a subclass says otherwise
    flops = 0
    transcendentals = 0
    output_bytes = 0

    def operand_bytes(self) -> List[int]:
        return [o.output_bytes for o in self.operands]

    def __repr__(self):
        return f"{self.__class__.__name__}({self.name})"

class ParameterOp(Op):
    def __init__(self, name: str, shape: Tuple[int, ...], dtype: str = 'f32'):
        super().__init__(name)
        self.shape, self.dtype = tuple(shape), dtype
        self.output_bytes = shape_size_bytes(self.shape, dtype)

class ConstantOp(ParameterOp):
    pass

class ComputeOp(Op):
    """An ordinary instruction costed by the cost model."""
    def __init__(self, name: str, operands: Optional[List[Op]] = None,
                 flops: int = 0, transcendentals: int = 0, output_bytes: int = 0):
        super().__init__(name, operands)
        self.flops = flops
        self.transcendentals = transcendentals
        self.output_bytes = output_bytes

class CopyStartOp(Op):
    """Issues an async copy of `operand` across tiers."""
    def __init__(self, name: str, operand: Op, direction: str, size_bytes: Optional[int] = None):
        super().__init__(name, [operand])
        if direction not in DIRECTIONS:
            raise ValueError(f"Unknown copy direction '{direction}' for {name}")
        self.direction = direction
        self.size_bytes = operand.output_bytes if size_bytes is None else size_bytes
        self.output_bytes = self.size_bytes

    @property
    def operand(self) -> Op:
        return self.operands[0]

class CopyDoneOp(Op):
    """Blocks until the copy issued by `copy_start` has finished."""
    def __init__(self, name: str, copy_start: CopyStartOp):
        super().__init__(name, [copy_start])
        self.output_bytes = copy_start.size_bytes

    @property
    def copy_start(self) -> CopyStartOp:
        return self.operands[0]

class WhileOp(Op):
    """A counted loop; `body` runs `trip_count` times."""
    def __init__(self, name: str, body: List[Op], trip_count: int, operands: Optional[List[Op]] = None):
        super().__init__(name, operands)
        if trip_count < 0:
            raise ValueError(f"Negative trip count {trip_count} for {name}")
        self.body = list(body)
        self.trip_count = trip_count
