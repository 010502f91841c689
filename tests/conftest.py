"""
Shared fixtures: a unit-rate machine (1 flop/s, 1 byte/s) and the two-copy
program used by the async copy tests.
"""

import pytest

from datatypes import OutstandingAsyncCopy
from hardware_models import ComputeUnit, CostModel, MemoryDevice
from loader import JSONProgramLoader


def make_cost_model(flops=1.0, default_bw=1.0, alternate_bw=1.0):
    return CostModel(
        ComputeUnit('CU', flops_per_second=flops),
        MemoryDevice('default', bandwidth_bytes_per_second=default_bw),
        MemoryDevice('alternate', bandwidth_bytes_per_second=alternate_bw),
    )


@pytest.fixture
def unit_cost_model():
    return make_cost_model()


@pytest.fixture
def copy_program():
    """param_0 (512 bytes) is prefetched; param_1 (128 bytes) is evicted."""
    return JSONProgramLoader().build({
        "ops": [
            {"name": "param_0", "type": "parameter", "shape": [128], "dtype": "f32"},
            {"name": "param_1", "type": "parameter", "shape": [32], "dtype": "f32"},
            {"name": "copy-start.1", "type": "copy_start", "operand": "param_0", "to": "alternate"},
            {"name": "copy-start.2", "type": "copy_start", "operand": "param_1", "to": "default"},
            {"name": "copy-done.2", "type": "copy_done", "operand": "copy-start.2"},
            {"name": "copy-done.1", "type": "copy_done", "operand": "copy-start.1"},
        ]
    })


@pytest.fixture
def read_queue(copy_program):
    return [OutstandingAsyncCopy(copy_program["copy-start.1"], 512)]


@pytest.fixture
def write_queue(copy_program):
    return [OutstandingAsyncCopy(copy_program["copy-start.2"], 128)]
