"""
Tests for the schedule builder and the elapsed-time aggregator.
"""

import pytest

from allocation import Allocation, AllocationPlan, ALTERNATE_MEMORY, DEFAULT_MEMORY
from compiler import ScheduleBuilder
from loader import JSONProgramLoader
from simulator import RuntimeSimulator

from conftest import make_cost_model


def counted_loop(trip_count=42):
    return JSONProgramLoader().build({
        "ops": [
            {"name": "dummy_input", "type": "parameter", "shape": [], "dtype": "s32"},
            {"name": "while", "type": "while", "trip_count": trip_count, "body": [
                {"name": "increment", "type": "compute", "flops": 1},
                {"name": "greater", "type": "compute", "flops": 1},
            ]},
        ]
    })


def copy_plan(program):
    return AllocationPlan([
        Allocation(program["copy-done.1"], ALTERNATE_MEMORY,
                   program["copy-start.1"], program["copy-done.1"]),
        Allocation(program["copy-done.2"], DEFAULT_MEMORY,
                   program["copy-start.2"], program["copy-done.2"]),
    ])


class TestScheduleBuilder:
    """Tests for ScheduleBuilder."""

    def test_loop_body_annotated_with_trip_count(self):
        schedule = ScheduleBuilder(counted_loop()).compile()

        assert [i['type'] for i in schedule] == ['parameter', 'while', 'compute', 'compute']
        assert [i['trip_count'] for i in schedule] == [1, 1, 42, 42]

    def test_nested_trip_counts_multiply(self):
        program = JSONProgramLoader().build({
            "ops": [{"name": "outer", "type": "while", "trip_count": 3, "body": [
                {"name": "a", "type": "compute", "flops": 1},
                {"name": "inner", "type": "while", "trip_count": 5, "body": [
                    {"name": "b", "type": "compute", "flops": 2},
                ]},
            ]}]
        })
        schedule = ScheduleBuilder(program).compile()

        counts = {i['op'].name: i['trip_count'] for i in schedule}
        assert counts == {'outer': 1, 'a': 3, 'inner': 3, 'b': 15}


class TestEstimate:
    """Tests for RuntimeSimulator.estimate."""

    def test_single_layer_loop(self, unit_cost_model):
        schedule = ScheduleBuilder(counted_loop()).compile()
        sim = RuntimeSimulator(unit_cost_model)

        # 42 iterations of 2 flops
        assert sim.estimate(schedule, AllocationPlan()) == 84

    def test_nested_loop_cost(self, unit_cost_model):
        program = JSONProgramLoader().build({
            "ops": [{"name": "outer", "type": "while", "trip_count": 3, "body": [
                {"name": "a", "type": "compute", "flops": 1},
                {"name": "inner", "type": "while", "trip_count": 5, "body": [
                    {"name": "b", "type": "compute", "flops": 2},
                ]},
            ]}]
        })
        sim = RuntimeSimulator(unit_cost_model)
        assert sim.estimate(ScheduleBuilder(program).compile()) == 3 * 1 + 15 * 2

    def test_zero_trip_count(self, unit_cost_model):
        sim = RuntimeSimulator(unit_cost_model)
        assert sim.estimate(ScheduleBuilder(counted_loop(0)).compile()) == 0

    def test_async_copies_through_plan(self, unit_cost_model, copy_program):
        sim = RuntimeSimulator(unit_cost_model)
        total = sim.estimate(ScheduleBuilder(copy_program).compile(), copy_plan(copy_program))

        # copy-done.2 at half bandwidth, then copy-done.1 alone on the interface
        assert total == 256 + 384
        assert sim.stats.copy_time == 640
        assert sim.stats.compute_time == 0
        assert sim.stats.num_copies_completed == 2
        assert sim.get_outstanding_read_default_queue() == ()
        assert sim.get_outstanding_write_default_queue() == ()

    def test_copies_outside_plan_are_plain_instructions(self, unit_cost_model, copy_program):
        sim = RuntimeSimulator(unit_cost_model)
        total = sim.estimate(ScheduleBuilder(copy_program).compile(), AllocationPlan())

        # each copy instruction reads and writes its bytes in default memory
        assert total == (512 + 512) + (128 + 128) + (128 + 128) + (512 + 512)
        assert sim.stats.copy_time == 0
        assert sim.get_outstanding_read_default_queue() == ()

    def test_alternate_memory_operands_are_cheaper(self):
        program = JSONProgramLoader().build({
            "ops": [
                {"name": "p", "type": "parameter", "shape": [256], "dtype": "f32"},
                {"name": "neg", "type": "compute", "operands": ["p"], "flops": 256, "output_bytes": 1024},
            ]
        })
        schedule = ScheduleBuilder(program).compile()
        cost_model = make_cost_model(flops=1.0, default_bw=1.0, alternate_bw=4.0)

        in_default = RuntimeSimulator(cost_model).estimate(schedule, AllocationPlan())
        in_alternate = RuntimeSimulator(cost_model).estimate(
            schedule, AllocationPlan([Allocation(program["p"]), Allocation(program["neg"])]))

        assert in_default == 2048
        # memory time 2048 / 4 = 512 beats compute time 256
        assert in_alternate == 512

    def test_preseeded_resume(self, unit_cost_model, copy_program, read_queue):
        schedule = [i for i in ScheduleBuilder(copy_program).compile() if i['op'].name == 'copy-done.1']
        sim = RuntimeSimulator(unit_cost_model, read_queue)

        assert sim.estimate(schedule, copy_plan(copy_program)) == 512

    def test_resume_skips_already_outstanding_copy_start(self, unit_cost_model, copy_program, read_queue):
        sim = RuntimeSimulator(unit_cost_model, read_queue)
        total = sim.estimate(ScheduleBuilder(copy_program).compile(), copy_plan(copy_program))

        assert total == 256 + 384
        assert sim.get_outstanding_read_default_queue() == ()
        assert sim.get_outstanding_write_default_queue() == ()

    def test_estimate_twice_leaves_queues_empty(self, unit_cost_model, copy_program):
        schedule = ScheduleBuilder(copy_program).compile()
        sim = RuntimeSimulator(unit_cost_model)

        assert sim.estimate(schedule, copy_plan(copy_program)) == 640
        assert sim.estimate(schedule, copy_plan(copy_program)) == 640
        assert sim.get_outstanding_read_default_queue() == ()

    def test_copies_in_loop_scale_with_trip_count(self, unit_cost_model):
        program = JSONProgramLoader().build({
            "ops": [
                {"name": "p", "type": "parameter", "shape": [4], "dtype": "f32"},
                {"name": "while", "type": "while", "trip_count": 10, "body": [
                    {"name": "cs", "type": "copy_start", "operand": "p", "to": "alternate"},
                    {"name": "inc", "type": "compute", "flops": 1},
                    {"name": "cd", "type": "copy_done", "operand": "cs"},
                ]},
            ]
        })
        plan = AllocationPlan([Allocation(program["cd"], ALTERNATE_MEMORY, program["cs"], program["cd"])])
        sim = RuntimeSimulator(unit_cost_model)

        # ten 16-byte transfers plus ten 1-flop increments
        assert sim.estimate(ScheduleBuilder(program).compile(), plan) == 160 + 10
        assert sim.stats.copy_time == 160
        assert sim.get_outstanding_read_default_queue() == ()

    def test_copies_in_zero_trip_loop_never_issue(self, unit_cost_model):
        program = JSONProgramLoader().build({
            "ops": [
                {"name": "p", "type": "parameter", "shape": [4], "dtype": "f32"},
                {"name": "while", "type": "while", "trip_count": 0, "body": [
                    {"name": "cs", "type": "copy_start", "operand": "p", "to": "alternate"},
                    {"name": "cd", "type": "copy_done", "operand": "cs"},
                ]},
            ]
        })
        plan = AllocationPlan([Allocation(program["cd"], ALTERNATE_MEMORY, program["cs"], program["cd"])])
        sim = RuntimeSimulator(unit_cost_model)

        assert sim.estimate(ScheduleBuilder(program).compile(), plan) == 0
        assert sim.get_outstanding_read_default_queue() == ()

    def test_deterministic(self, unit_cost_model, copy_program):
        schedule = ScheduleBuilder(copy_program).compile()
        runs = [RuntimeSimulator(unit_cost_model).estimate(schedule, copy_plan(copy_program)) for _ in range(3)]
        assert runs == [640, 640, 640]

    def test_unknown_item_type(self, unit_cost_model, copy_program):
        sim = RuntimeSimulator(unit_cost_model)
        with pytest.raises(ValueError):
            sim.estimate([{'op': copy_program["param_0"], 'type': 'bogus', 'trip_count': 1}])
