import logging
from typing import List, Dict, Any, Optional, Tuple

from allocation import AllocationPlan
from datatypes import (
    READ_DEFAULT, WRITE_DEFAULT, OutstandingAsyncCopy, Stats, opposite_direction
)
from hardware_models import CostModel
from operations import Op, CopyDoneOp
from queues import OutstandingCopyQueues

logger = logging.getLogger(__name__)


class RuntimeSimulator:
    """
    Estimates the elapsed time of a scheduled program under a fixed memory plan.

    Async copies share one default-memory interface. A copy running alone gets
    the full default bandwidth; while copies are outstanding in both directions
    each direction gets half of it.
    """

    def __init__(self, cost_model: CostModel,
                 outstanding_read_default_queue: Optional[List[OutstandingAsyncCopy]] = None,
                 outstanding_write_default_queue: Optional[List[OutstandingAsyncCopy]] = None):
        self.cost_model = cost_model
        self.default_bandwidth = cost_model.default_bandwidth
        self.queues = OutstandingCopyQueues(outstanding_read_default_queue, outstanding_write_default_queue)
        self.stats = Stats()

    def get_outstanding_read_default_queue(self) -> Tuple[OutstandingAsyncCopy, ...]:
        return self.queues.snapshot(READ_DEFAULT)

    def get_outstanding_write_default_queue(self) -> Tuple[OutstandingAsyncCopy, ...]:
        return self.queues.snapshot(WRITE_DEFAULT)

    def enqueue_async_copy(self, copy_start: Op) -> None:
        if self.queues.find(copy_start) is not None:
            # already outstanding, e.g. seeded for a resumed schedule
            return
        self.queues.enqueue(copy_start.direction, OutstandingAsyncCopy(copy_start, copy_start.size_bytes))

    def simulate_async_copy_done(self, instruction: Op) -> float:
        """
        Drains the copy finished by `instruction` (a copy-done or its copy-start)
        and returns the time it took.

        Returns 0 if the copy is not outstanding, e.g. it was already completed.
        """
        copy_start = instruction.copy_start if isinstance(instruction, CopyDoneOp) else instruction
        found = self.queues.find(copy_start)
        if found is None:
            return 0.0
        direction, target = found
        other = opposite_direction(direction)

        # earlier same-direction copies hold the interface until they finish
        ahead = self.queues.ahead_of(direction, copy_start)
        pending = sum(r.remaining_bytes for r in ahead) + target.remaining_bytes

        active_directions = 1 if self.queues.is_empty(other) else 2
        bandwidth = self.default_bandwidth / active_directions
        elapsed_time = pending / bandwidth

        moved = pending
        for request in ahead:
            request.remaining_bytes = 0.0
        if active_directions == 2:
            # the opposite head keeps its (possibly zero) entry until its own copy-done
            moved += self.queues.head(other).drain(elapsed_time * bandwidth)
        target.remaining_bytes = 0.0
        self.queues.remove(direction, copy_start)

        logger.debug("copy %s (%s) done: %.6g bytes at %.6g B/s -> %.6g",
                     copy_start.name, direction, moved, bandwidth, elapsed_time)
        self.stats.num_copies_completed += 1
        self.stats.bytes_copied += moved
        return elapsed_time

    def _item_elapsed_time(self, item: Dict[str, Any], allocation_plan: AllocationPlan) -> float:
        ttype = item['type']
        op = item['op']

        if ttype in ('copy_start', 'copy_done') and allocation_plan.references_copy(op):
            trip_count = item.get('trip_count', 1)
            if trip_count == 0:
                return 0.0
            if ttype == 'copy_start':
                self.enqueue_async_copy(op)
                return 0.0
            # each iteration repeats the same transfer under the same contention
            return self.simulate_async_copy_done(op) * trip_count

        if ttype in ('compute', 'copy_start', 'copy_done'):
            cost = self.cost_model.elapsed_time(
                op,
                operands_in_alternate=allocation_plan.operands_in_alternate(op),
                output_in_alternate=allocation_plan.in_alternate_memory(op),
            )
            return cost * item.get('trip_count', 1)

        if ttype in ('parameter', 'while'):
            # parameters are free; a loop's cost is carried by its expanded body
            return 0.0

        raise ValueError(f"Unknown ttype '{ttype}' in schedule item: {item}")

    def estimate(self, schedule: List[Dict[str, Any]], allocation_plan: Optional[AllocationPlan] = None) -> float:
        """Walks `schedule` once and returns the total elapsed time."""
        if allocation_plan is None:
            allocation_plan = AllocationPlan()

        total = 0.0
        for item in schedule:
            ttype = item['type']
            t = self._item_elapsed_time(item, allocation_plan)
            total += t

            if ttype == 'copy_done' and allocation_plan.references_copy(item['op']):
                self.stats.copy_time += t
            else:
                self.stats.compute_time += t
            self.stats.breakdown[ttype] = self.stats.breakdown.get(ttype, 0.0) + t

        self.stats.elapsed_time += total
        logger.debug("estimated %d schedule items: %.6g", len(schedule), total)
        return total
