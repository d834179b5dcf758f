# Console presentation of a finished run
import sys
from typing import List, Optional, TextIO

from schedcore.context import SimulationResult
from schedcore.metrics import AggregateMetrics, build_process_metrics, summarise
from schedcore.trace import TraceAction, TraceEvent

TRACE_HEADER = "Time (tick)\tDevice\t\tProcess Served"

_LABELS = {
    TraceAction.ARRIVE: "{name}[Arrive]",
    TraceAction.SCHEDULED: "{name}[Sched]",
    TraceAction.RUNNING: "{name}:{detail}",
    TraceAction.QUEUED_IO: "{name}[Q IO]:{detail}",
    TraceAction.COMPLETED: "{name}[Comp]",
    TraceAction.PREEMPTED: "{name}[Preempt]:{detail}",
    TraceAction.IDLE: "-",
    TraceAction.IO_SCHEDULED: "{name}[Sched]:{detail}",
    TraceAction.IO_RUNNING: "{name}:{detail}",
    TraceAction.IO_COMPLETED: "{name}[Comp]:{detail}",
}


def format_event(event: TraceEvent) -> str:
    label = _LABELS[event.action].format(name=event.process, detail=event.detail)
    return f"{event.tick}\t{event.device}\t\t{label}"


def format_trace(events: List[TraceEvent]) -> List[str]:
    return [TRACE_HEADER] + [format_event(ev) for ev in events]


def format_process_details(result: SimulationResult) -> List[str]:
    lines = []
    for m in build_process_metrics(result.completed):
        lines.append(m.name)
        lines.append(f"\t\tArrival Time:\t\t{m.arrival_time}")
        lines.append(f"\t\tStart Time:\t\t{m.start_time}")
        lines.append(f"\t\tResponse Time:\t\t{m.response_time}")
        lines.append(f"\t\tCompletion Time:\t{m.completion_time}")
        lines.append(f"\t\tTurnaround Time:\t{m.turnaround_time}")
        lines.append(f"\t\tWaiting Time:\t\t{m.waiting_time}")
    return lines


def format_summary(metrics: AggregateMetrics) -> List[str]:
    return [
        f"Avg Waiting Time\t{metrics.avg_waiting_time:.2f}",
        f"Avg Turnaround Time\t{metrics.avg_turnaround_time:.2f}",
        f"Avg Response Time\t{metrics.avg_response_time:.2f}",
        f"Ticks CPU Idle\t\t{metrics.idle_ticks}",
        f"Total Ticks CPU\t\t{metrics.total_ticks}",
        f"Total CPU Usage\t\t{metrics.cpu_utilization * 100:.2f} %",
        f"CPU Throughput\t\t{metrics.throughput:.4f}",
    ]


def render(result: SimulationResult, show_trace: bool = True) -> List[str]:
    title = result.discipline.token
    if result.discipline.uses_quantum:
        title += f" (quantum {result.time_quantum})"
    lines = [f"=== {title} ==="]
    if show_trace:
        lines.extend(format_trace(result.trace))
        lines.append("")
    lines.extend(format_process_details(result))
    lines.extend(format_summary(summarise(result)))
    return lines


def print_report(result: SimulationResult, show_trace: bool = True, stream: Optional[TextIO] = None) -> None:
    out = stream or sys.stdout
    for line in render(result, show_trace=show_trace):
        print(line, file=out)
