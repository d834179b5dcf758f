from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Deque, List, Optional

from schedcore.process import Process
from schedcore.readyqueue import QueueOrder, ReadyQueue
from schedcore.trace import TraceEvent

if TYPE_CHECKING:
    from schedcore.scheduler import Discipline


@dataclass
class SimulationContext:
    """All mutable state of a single run. Built fresh by the engine for every run."""

    ready_queue: ReadyQueue
    backlog: List[Process]
    tick: int = 0
    idle_ticks: int = 0
    quantum_elapsed: int = 0
    io_progress: int = 0
    cpu: Optional[Process] = None
    io: Optional[Process] = None
    io_queue: Deque[Process] = field(default_factory=deque)
    aux_queue: Deque[Process] = field(default_factory=deque)
    completed: List[Process] = field(default_factory=list)
    trace: List[TraceEvent] = field(default_factory=list)
    outstanding: int = 0

    @classmethod
    def fresh(cls, processes: List[Process], order: QueueOrder) -> 'SimulationContext':
        return cls(ready_queue=ReadyQueue(order), backlog=list(processes), outstanding=len(processes))

    @property
    def finished(self) -> bool:
        return self.outstanding == 0

    def occupancy(self) -> int:
        """Number of processes held across every container."""
        slots = (self.cpu is not None) + (self.io is not None)
        return (len(self.backlog) + len(self.ready_queue) + len(self.io_queue)
                + len(self.aux_queue) + len(self.completed) + slots)


@dataclass
class SimulationResult:
    discipline: 'Discipline'
    time_quantum: int
    completed: List[Process]
    total_ticks: int
    idle_ticks: int
    trace: List[TraceEvent]

    @property
    def busy_ticks(self) -> int:
        return self.total_ticks - self.idle_ticks
