# Ready-queue ordering policies
import heapq
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable, Dict, Iterator, List, Tuple

from schedcore.errors import SimulationError
from schedcore.process import Process


class QueueOrder(Enum):
    FIFO = auto()
    SHORTEST_TOTAL_BURST = auto()
    SHORTEST_REMAINING_BURST = auto()


# Sort key per order; the insertion counter breaks any remaining tie.
_SORT_KEYS: Dict[QueueOrder, Callable[[Process], Tuple[int, ...]]] = {
    QueueOrder.FIFO: lambda p: (),
    QueueOrder.SHORTEST_TOTAL_BURST: lambda p: (p.total_cpu_burst, p.arrival_time),
    QueueOrder.SHORTEST_REMAINING_BURST: lambda p: (p.remaining_cpu_burst, p.arrival_time),
}


@dataclass(order=True)
class _Entry:
    key: Tuple[int, ...]
    order: int
    process: Process = field(compare=False)


class ReadyQueue:
    def __init__(self, order: QueueOrder = QueueOrder.FIFO):
        self.order = order
        self._key = _SORT_KEYS[order]
        self._heap: List[_Entry] = []
        self._counter = 0

    def push(self, process: Process) -> None:
        self._counter += 1
        heapq.heappush(self._heap, _Entry(self._key(process), self._counter, process))

    def pop_front(self) -> Process:
        if not self._heap:
            raise SimulationError("pop from an empty ready queue")
        return heapq.heappop(self._heap).process

    def peek(self) -> Process:
        if not self._heap:
            raise SimulationError("peek at an empty ready queue")
        return self._heap[0].process

    def clear(self) -> None:
        self._heap = []
        self._counter = 0

    def is_empty(self) -> bool:
        return not self._heap

    def __len__(self) -> int:
        return len(self._heap)

    def __contains__(self, process: Process) -> bool:
        return any(entry.process is process for entry in self._heap)

    def __iter__(self) -> Iterator[Process]:
        """Queued processes in no particular order."""
        return (entry.process for entry in list(self._heap))

    def __repr__(self):
        return f"ReadyQueue({self.order.name}, queued={len(self._heap)})"
