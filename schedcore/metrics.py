from dataclasses import dataclass
from statistics import mean
from typing import Iterable, List

from schedcore.context import SimulationResult
from schedcore.errors import SimulationError
from schedcore.process import Process


@dataclass
class ProcessMetrics:
    name: str
    arrival_time: int
    start_time: int
    completion_time: int
    total_cpu_burst: int
    response_time: int
    turnaround_time: int
    waiting_time: int


@dataclass
class AggregateMetrics:
    count: int
    avg_waiting_time: float
    avg_turnaround_time: float
    avg_response_time: float
    idle_ticks: int
    total_ticks: int
    cpu_utilization: float  # fraction in [0, 1]
    throughput: float       # completed processes per tick


def process_metrics(process: Process) -> ProcessMetrics:
    if process.start_time is None or process.completion_time is None:
        raise SimulationError(f"{process.name} has not completed")
    turnaround = process.completion_time - process.arrival_time
    return ProcessMetrics(
        name=process.name,
        arrival_time=process.arrival_time,
        start_time=process.start_time,
        completion_time=process.completion_time,
        total_cpu_burst=process.total_cpu_burst,
        response_time=process.start_time - process.arrival_time,
        turnaround_time=turnaround,
        waiting_time=turnaround - process.total_cpu_burst,
    )


def build_process_metrics(completed: Iterable[Process]) -> List[ProcessMetrics]:
    return [process_metrics(p) for p in completed]


def summarise(result: SimulationResult) -> AggregateMetrics:
    """Aggregate a finished run. The run must have completed at least one process."""
    if not result.completed:
        raise ValueError("cannot summarise a run with no completed processes")
    per_process = build_process_metrics(result.completed)
    total = result.total_ticks
    return AggregateMetrics(
        count=len(per_process),
        avg_waiting_time=mean(m.waiting_time for m in per_process),
        avg_turnaround_time=mean(m.turnaround_time for m in per_process),
        avg_response_time=mean(m.response_time for m in per_process),
        idle_ticks=result.idle_ticks,
        total_ticks=total,
        cpu_utilization=result.busy_ticks / total if total else 0.0,
        throughput=len(per_process) / total if total else 0.0,
    )
