"""
Tick-driven simulation engine.

The Device owns one CPU slot and one IO slot and moves processes between
them, the ready queue, the IO queue and (variable round robin only) the
auxiliary resume queue. Every tick runs the same phases in a fixed order:

    arrivals -> CPU step -> IO step -> scheduling decision -> idle bookkeeping

All mutable state lives in a SimulationContext that is built fresh for every
call to run(), so one Device can simulate the same workload repeatedly.
"""

from typing import Callable, List, Optional, Sequence, Union

from schedcore.context import SimulationContext, SimulationResult
from schedcore.errors import ConfigurationError, NonTerminatingRunError
from schedcore.process import Process, ProcessDefinition, ProcessState
from schedcore.scheduler import Discipline, should_schedule
from schedcore.trace import CPU, IO, TraceAction, TraceEvent


DEFAULT_TIME_QUANTUM = 5

TickObserver = Callable[[SimulationContext], None]


def tick_limit(workload: Sequence[Union[ProcessDefinition, Process]]) -> int:
    """Upper bound on the ticks any run of this workload can take.

    After the last arrival the CPU or the IO device is busy on every tick, and
    each IO burst occupies the device for at least one tick.
    """
    last_arrival = max(p.arrival_time for p in workload)
    work = sum(p.total_cpu_burst * (1 + max(p.io_burst_duration, 1)) for p in workload)
    return last_arrival + work + 1


class Device:
    def __init__(self, discipline: Discipline, time_quantum: int = DEFAULT_TIME_QUANTUM,
                 verbose: bool = False, max_ticks: Optional[int] = None):
        if discipline.uses_quantum and time_quantum < 1:
            raise ConfigurationError(f"{discipline.token} needs a time quantum of at least 1 tick, got {time_quantum}")
        if max_ticks is not None and max_ticks < 0:
            raise ConfigurationError("max_ticks cannot be negative")
        self.discipline = discipline
        self.time_quantum = time_quantum
        self.verbose = verbose
        self.max_ticks = max_ticks

    # main loop
    def run(self, workload: Sequence[ProcessDefinition], on_tick: Optional[TickObserver] = None) -> SimulationResult:
        if not workload:
            raise ConfigurationError("workload defines no processes")
        names = [d.name for d in workload]
        if len(set(names)) != len(names):
            raise ConfigurationError("process names must be unique")

        processes = [Process.from_definition(d) for d in workload]
        ctx = SimulationContext.fresh(processes, self.discipline.queue_order)
        limit = self.max_ticks if self.max_ticks is not None else tick_limit(workload)
        if self.verbose:
            print(f"[t=0] {self.discipline.token}: {len(processes)} processes, quantum={self.time_quantum}, tick limit={limit}")

        while True:
            if ctx.tick > limit:
                raise NonTerminatingRunError(limit)
            # '-' marks a tick that begins with an empty CPU slot
            if ctx.cpu is None:
                self._log(ctx, CPU, TraceAction.IDLE)
            self._fresh_arrivals(ctx)
            if ctx.cpu is not None:
                self._exec_cpu(ctx)
            self._io_device(ctx)
            if should_schedule(self.discipline, ctx, self.time_quantum):
                self._schedule(ctx)
            # the tick in which the last process terminates closes the run
            if not ctx.finished and ctx.cpu is None:
                ctx.idle_ticks += 1
            if on_tick is not None:
                on_tick(ctx)
            if ctx.finished:
                break
            ctx.tick += 1

        return SimulationResult(
            discipline=self.discipline,
            time_quantum=self.time_quantum,
            completed=ctx.completed,
            total_ticks=ctx.tick,
            idle_ticks=ctx.idle_ticks,
            trace=ctx.trace,
        )

    # phases
    def _fresh_arrivals(self, ctx: SimulationContext) -> None:
        arrived = [p for p in ctx.backlog if p.arrival_time == ctx.tick]
        if not arrived:
            return
        ctx.backlog = [p for p in ctx.backlog if p.arrival_time != ctx.tick]
        for p in arrived:
            p.transition(ProcessState.READY)
            ctx.ready_queue.push(p)
            self._log(ctx, CPU, TraceAction.ARRIVE, p)

    def _exec_cpu(self, ctx: SimulationContext) -> None:
        p = ctx.cpu
        state = p.execute_tick()
        ctx.quantum_elapsed += 1
        if state is ProcessState.TERMINATED:
            p.completion_time = ctx.tick
            ctx.completed.append(p)
            ctx.outstanding -= 1
            ctx.cpu = None
            self._log(ctx, CPU, TraceAction.COMPLETED, p)
        elif state is ProcessState.BLOCKED:
            p.saved_quantum_context = self._remaining_quantum(ctx) if self.discipline is Discipline.VRR else 0
            ctx.io_queue.append(p)
            ctx.cpu = None
            self._log(ctx, CPU, TraceAction.QUEUED_IO, p, p.remaining_cpu_burst)
            if self.verbose:
                print(f"[t={ctx.tick}]   {p.name} blocked, saved quantum={p.saved_quantum_context}")
        else:
            self._log(ctx, CPU, TraceAction.RUNNING, p, p.remaining_cpu_burst)

    def _io_device(self, ctx: SimulationContext) -> None:
        if ctx.io is not None:
            p = ctx.io
            ctx.io_progress += 1
            # an IO burst occupies the device for at least one tick
            if ctx.io_progress >= p.io_burst_duration:
                self._log(ctx, IO, TraceAction.IO_COMPLETED, p, ctx.io_progress)
                p.transition(ProcessState.READY)
                if self.discipline is Discipline.VRR:
                    ctx.aux_queue.append(p)
                else:
                    ctx.ready_queue.push(p)
                ctx.io = None
            else:
                self._log(ctx, IO, TraceAction.IO_RUNNING, p, ctx.io_progress)

        if ctx.io is None and ctx.io_queue:
            ctx.io = ctx.io_queue.popleft()
            ctx.io_progress = 0
            self._log(ctx, IO, TraceAction.IO_SCHEDULED, ctx.io, ctx.io_progress)

    def _schedule(self, ctx: SimulationContext) -> None:
        resumed = self.discipline is Discipline.VRR and bool(ctx.aux_queue)
        if resumed:
            nxt = ctx.aux_queue.popleft()
        else:
            nxt = ctx.ready_queue.pop_front()

        if ctx.cpu is not None:
            preempted = ctx.cpu
            preempted.transition(ProcessState.READY)
            ctx.ready_queue.push(preempted)
            self._log(ctx, CPU, TraceAction.PREEMPTED, preempted, preempted.remaining_cpu_burst)
            if self.verbose:
                print(f"[t={ctx.tick}]   preempt {preempted.name} after {ctx.quantum_elapsed} ticks")

        nxt.mark_dispatched(ctx.tick)
        if resumed and nxt.saved_quantum_context > 0:
            ctx.quantum_elapsed = self.time_quantum - nxt.saved_quantum_context
        else:
            ctx.quantum_elapsed = 0
        nxt.saved_quantum_context = 0
        ctx.cpu = nxt
        self._log(ctx, CPU, TraceAction.SCHEDULED, nxt)
        if self.verbose:
            source = 'aux' if resumed else 'ready'
            print(f"[t={ctx.tick}]   dispatch {nxt.name} from {source} queue "
                  f"(ready={len(ctx.ready_queue)}, aux={len(ctx.aux_queue)}, elapsed={ctx.quantum_elapsed})")

    # helpers
    def _remaining_quantum(self, ctx: SimulationContext) -> int:
        # 0 means the slice is used up and the next dispatch gets a full quantum
        return max(self.time_quantum - ctx.quantum_elapsed, 0)

    def _log(self, ctx: SimulationContext, device: str, action: TraceAction,
             process: Optional[Process] = None, detail: Optional[int] = None) -> None:
        ctx.trace.append(TraceEvent(ctx.tick, device, action, process.name if process else None, detail))

    def __repr__(self):
        return f"Device({self.discipline.token}, quantum={self.time_quantum})"


def run_disciplines(workload: Sequence[ProcessDefinition], disciplines: Sequence[Discipline],
                    time_quantum: int = DEFAULT_TIME_QUANTUM, verbose: bool = False) -> List[SimulationResult]:
    """Simulate the workload once per discipline, each on fresh process records."""
    devices = [Device(d, time_quantum=time_quantum, verbose=verbose) for d in disciplines]
    return [device.run(workload) for device in devices]
