from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, FrozenSet, Optional

from schedcore.errors import ConfigurationError, SimulationError


class ProcessState(Enum):
    NEW = auto()
    READY = auto()
    RUNNING = auto()
    BLOCKED = auto()
    TERMINATED = auto()


_TRANSITIONS: Dict[ProcessState, FrozenSet[ProcessState]] = {
    ProcessState.NEW: frozenset({ProcessState.READY}),
    ProcessState.READY: frozenset({ProcessState.RUNNING}),
    ProcessState.RUNNING: frozenset({ProcessState.READY, ProcessState.BLOCKED, ProcessState.TERMINATED}),
    ProcessState.BLOCKED: frozenset({ProcessState.READY}),
    ProcessState.TERMINATED: frozenset(),
}


@dataclass(frozen=True)
class ProcessDefinition:
    """One workload entry, exactly as loaded from the workload file."""

    name: str
    arrival_time: int
    total_cpu_burst: int
    io_burst_duration: int
    io_burst_rate: int

    def __post_init__(self) -> None:
        if not self.name:
            raise ConfigurationError("process name must not be empty")
        if self.arrival_time < 0:
            raise ConfigurationError(f"{self.name}: arrival time cannot be negative")
        if self.total_cpu_burst < 1:
            raise ConfigurationError(f"{self.name}: total CPU burst must be at least 1 tick")
        if self.io_burst_duration < 0:
            raise ConfigurationError(f"{self.name}: IO burst duration cannot be negative")
        if self.io_burst_rate < 1:
            raise ConfigurationError(f"{self.name}: IO burst rate must be at least 1 tick")


class Process:
    """Mutable per-run record of a workload entry."""

    def __init__(self, name: str, arrival_time: int, total_cpu_burst: int,
                 io_burst_duration: int, io_burst_rate: int):
        self.name = name
        self.arrival_time = arrival_time
        self.total_cpu_burst = total_cpu_burst
        self.io_burst_duration = io_burst_duration
        self.io_burst_rate = io_burst_rate  # block for IO after this many CPU ticks
        self.remaining_cpu_burst = total_cpu_burst
        self.start_time: Optional[int] = None
        self.completion_time: Optional[int] = None
        self.last_io_burst_counter = 0
        self.saved_quantum_context = 0
        self.cpu_ticks_run = 0
        self.state = ProcessState.NEW

    @classmethod
    def from_definition(cls, definition: ProcessDefinition) -> 'Process':
        return cls(definition.name, definition.arrival_time, definition.total_cpu_burst,
                   definition.io_burst_duration, definition.io_burst_rate)

    def transition(self, new_state: ProcessState) -> None:
        if new_state not in _TRANSITIONS[self.state]:
            raise SimulationError(f"{self.name}: illegal transition {self.state.name} -> {new_state.name}")
        if new_state is ProcessState.TERMINATED and self.remaining_cpu_burst != 0:
            raise SimulationError(f"{self.name}: terminated with {self.remaining_cpu_burst} ticks left")
        self.state = new_state

    def mark_dispatched(self, tick: int) -> None:
        self.transition(ProcessState.RUNNING)
        if self.start_time is None or tick < self.start_time:
            self.start_time = tick

    def execute_tick(self) -> ProcessState:
        """Consume one CPU tick and return the state the process ends up in.

        A process that runs out of CPU burst terminates, even if the same tick
        would also have reached its IO burst rate.
        """
        if self.state is not ProcessState.RUNNING:
            raise SimulationError(f"{self.name}: executed while {self.state.name}")
        if self.remaining_cpu_burst <= 0:
            raise SimulationError(f"{self.name}: no CPU burst left to execute")
        self.remaining_cpu_burst -= 1
        self.cpu_ticks_run += 1
        if self.remaining_cpu_burst == 0:
            self.transition(ProcessState.TERMINATED)
        else:
            self.last_io_burst_counter += 1
            if self.last_io_burst_counter >= self.io_burst_rate:
                self.last_io_burst_counter = 0
                self.transition(ProcessState.BLOCKED)
        return self.state

    def __repr__(self) -> str:
        return (f"Process(name={self.name}, state={self.state.name}, "
                f"remaining={self.remaining_cpu_burst}/{self.total_cpu_burst})")
