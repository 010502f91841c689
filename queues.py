# FILE: queues.py
# ---------------
# Outstanding async copy requests, one FIFO per direction of the shared
# default-memory interface.

from typing import Dict, List, Optional, Tuple

from datatypes import DIRECTIONS, OutstandingAsyncCopy


class OutstandingCopyQueues:
    """
    Two ordered lists of outstanding copies, keyed by direction.

    Only the head of each list receives bandwidth; later entries wait until
    the head is removed. Lookups are linear searches by copy-start identity,
    which is fine for the handful of copies in flight at any time.
    """

    def __init__(self, read_default: Optional[List[OutstandingAsyncCopy]] = None,
                 write_default: Optional[List[OutstandingAsyncCopy]] = None):
        self._queues: Dict[str, List[OutstandingAsyncCopy]] = {d: [] for d in DIRECTIONS}
        for direction, seed in zip(DIRECTIONS, (read_default, write_default)):
            for request in seed or []:
                # Copy so the caller's seed list is never mutated.
                self.enqueue(direction, OutstandingAsyncCopy(request.copy_start, request.remaining_bytes))

    def _queue(self, direction: str) -> List[OutstandingAsyncCopy]:
        if direction not in self._queues:
            raise ValueError(f"Unknown copy direction '{direction}'")
        return self._queues[direction]

    def enqueue(self, direction: str, request: OutstandingAsyncCopy) -> None:
        if request.remaining_bytes < 0:
            raise ValueError(f"Negative byte size for outstanding copy: {request}")
        self._queue(direction).append(request)

    def find(self, copy_start) -> Optional[Tuple[str, OutstandingAsyncCopy]]:
        for direction in DIRECTIONS:
            for request in self._queues[direction]:
                if request.copy_start is copy_start:
                    return direction, request
        return None

    def remove(self, direction: str, copy_start) -> None:
        queue = self._queue(direction)
        for i, request in enumerate(queue):
            if request.copy_start is copy_start:
                del queue[i]
                return

    def ahead_of(self, direction: str, copy_start) -> List[OutstandingAsyncCopy]:
        """Live entries queued before `copy_start` in the same direction."""
        ahead = []
        for request in self._queue(direction):
            if request.copy_start is copy_start:
                return ahead
            ahead.append(request)
        return []

    def is_empty(self, direction: str) -> bool:
        return not self._queue(direction)

    def head(self, direction: str) -> Optional[OutstandingAsyncCopy]:
        queue = self._queue(direction)
        return queue[0] if queue else None

    def snapshot(self, direction: str) -> Tuple[OutstandingAsyncCopy, ...]:
        return tuple(OutstandingAsyncCopy(r.copy_start, r.remaining_bytes)
                     for r in self._queue(direction))

    def total_outstanding_bytes(self) -> float:
        return sum(r.remaining_bytes for q in self._queues.values() for r in q)
