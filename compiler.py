# file: compiler.py
# Linearizes a program into the schedule consumed by the simulator.

from typing import List, Dict, Any
from program import Program
from operations import Op, ComputeOp, ParameterOp, CopyStartOp, CopyDoneOp, WhileOp

class ScheduleBuilder:
    def __init__(self, program: Program):
        self.program = program

    @staticmethod
    def item_type(op: Op) -> str:
        if isinstance(op, CopyStartOp):
            return 'copy_start'
        if isinstance(op, CopyDoneOp):
            return 'copy_done'
        if isinstance(op, WhileOp):
            return 'while'
        if isinstance(op, ParameterOp):
            return 'parameter'
        if isinstance(op, ComputeOp):
            return 'compute'
        raise ValueError(f"Cannot schedule op {op!r}")

    def _compile_op(self, op: Op, trip_count: int) -> List[Dict[str, Any]]:
        """Compiles one op; loop bodies are expanded in place with a multiplied trip count."""
        schedule = [{
            'op': op,
            'type': self.item_type(op),
            'trip_count': trip_count,
        }]
        if isinstance(op, WhileOp):
            inner = trip_count * op.trip_count
            for body_op in op.body:
                schedule.extend(self._compile_op(body_op, inner))
        return schedule

    def compile(self) -> List[Dict[str, Any]]:
        final_schedule = []
        for op in self.program.ops:
            final_schedule.extend(self._compile_op(op, 1))
        return final_schedule
