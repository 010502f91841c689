# Parses JSON program and allocation plan descriptions.

import json
from typing import Dict, Any, List

from program import Program
from allocation import Allocation, AllocationPlan, ALTERNATE_MEMORY
from operations import (
    Op, ParameterOp, ConstantOp, ComputeOp,
    CopyStartOp, CopyDoneOp, WhileOp
)
from datatypes import READ_DEFAULT, WRITE_DEFAULT

# destination tier of a copy -> direction on the default-memory interface
COPY_DIRECTIONS = {
    'alternate': READ_DEFAULT,
    'default': WRITE_DEFAULT,
    READ_DEFAULT: READ_DEFAULT,
    WRITE_DEFAULT: WRITE_DEFAULT,
}

class JSONProgramLoader:
    def __init__(self, default_dtype: str = 'f32'):
        self.default_dtype = default_dtype

    def _operands(self, m: Program, names: List[str], owner: str) -> List[Op]:
        ops = []
        for n in names:
            if n not in m.ops_by_name:
                raise ValueError(f"Unknown operand '{n}' of {owner}")
            ops.append(m.ops_by_name[n])
        return ops

    def _build_op(self, m: Program, o: Dict[str, Any]) -> Op:
        tpe = o.get("type", "").lower()
        if "name" not in o:
            raise ValueError(f"Op without a name in JSON: {o}")
        name = o["name"]
        if tpe in ('parameter', 'constant'):
            cls = ParameterOp if tpe == 'parameter' else ConstantOp
            return cls(name, tuple(int(x) for x in o.get("shape", [])), o.get("dtype", self.default_dtype))
        elif tpe == 'compute':
            return ComputeOp(
                name,
                self._operands(m, o.get("operands", []), name),
                flops=int(o.get("flops", 0)),
                transcendentals=int(o.get("transcendentals", 0)),
                output_bytes=int(o.get("output_bytes", 0)),
            )
        elif tpe == 'copy_start':
            operand, = self._operands(m, [o["operand"]], name)
            to = o.get("to", "alternate")
            if to not in COPY_DIRECTIONS:
                raise ValueError(f"Unknown copy destination '{to}' of {name}")
            size = o.get("size_bytes")
            return CopyStartOp(name, operand, COPY_DIRECTIONS[to], None if size is None else int(size))
        elif tpe == 'copy_done':
            copy_start, = self._operands(m, [o["operand"]], name)
            if not isinstance(copy_start, CopyStartOp):
                raise ValueError(f"Operand of {name} is not a copy-start: {copy_start!r}")
            return CopyDoneOp(name, copy_start)
        elif tpe == 'while':
            body = []
            for b in o.get("body", []):
                # body ops are registered so later ops can refer to them
                op = self._build_op(m, b)
                m.register(op)
                body.append(op)
            return WhileOp(name, body, int(o["trip_count"]), self._operands(m, o.get("operands", []), name))
        else:
            raise ValueError(f"Unknown op type in JSON: {o}")

    def build(self, spec: Dict[str, Any]) -> Program:
        m = Program()
        for o in spec.get("ops", []):
            m.add_op(self._build_op(m, o))
        return m

    def load(self, path: str) -> Program:
        with open(path, 'r') as f:
            return self.build(json.load(f))


class JSONAllocationLoader:
    """Builds an AllocationPlan whose entries refer to ops of `program` by name."""
    def __init__(self, program: Program):
        self.program = program

    def _lookup(self, name):
        if name is None:
            return None
        if name not in self.program.ops_by_name:
            raise ValueError(f"Allocation refers to unknown instruction '{name}'")
        return self.program[name]

    def build(self, spec: Dict[str, Any]) -> AllocationPlan:
        plan = AllocationPlan()
        for a in spec.get("allocations", []):
            plan.add(Allocation(
                value=self._lookup(a["value"]),
                memory_space=a.get("memory_space", ALTERNATE_MEMORY),
                copy_start=self._lookup(a.get("copy_start")),
                copy_done=self._lookup(a.get("copy_done")),
            ))
        return plan

    def load(self, path: str) -> AllocationPlan:
        with open(path, 'r') as f:
            return self.build(json.load(f))
