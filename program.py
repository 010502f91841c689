# Container for all instructions of a program, in schedule order.

from typing import Dict, List, Iterator
from operations import Op, WhileOp

class Program:
    def __init__(self):
        self.ops: List[Op] = []
        self.ops_by_name: Dict[str, Op] = {}

    def register(self, op: Op):
        if op.name in self.ops_by_name:
            raise ValueError(f"Duplicate instruction name '{op.name}'")
        self.ops_by_name[op.name] = op

    def add_op(self, op: Op):
        self.register(op)
        self.ops.append(op)

    def __getitem__(self, name: str) -> Op:
        return self.ops_by_name[name]

    def all_ops(self) -> Iterator[Op]:
        """Yields every op, descending into loop bodies."""
        stack = list(reversed(self.ops))
        while stack:
            op = stack.pop()
            yield op
            if isinstance(op, WhileOp):
                stack.extend(reversed(op.body))
