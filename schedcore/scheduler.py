# Scheduling disciplines and the per-tick dispatch predicate
from enum import Enum
from typing import Dict

from schedcore.context import SimulationContext
from schedcore.readyqueue import QueueOrder


class Discipline(Enum):
    SJF = 'shortest-job-first'
    SRTF = 'shortest-remaining-time-first'
    RR = 'round-robin'
    VRR = 'variable-round-robin'

    @property
    def token(self) -> str:
        return self.value

    @property
    def queue_order(self) -> QueueOrder:
        return _QUEUE_ORDERS[self]

    @property
    def uses_quantum(self) -> bool:
        return self in (Discipline.RR, Discipline.VRR)

    @classmethod
    def from_token(cls, token: str) -> 'Discipline':
        key = token.strip().lower()
        if key in _ALIASES:
            return _ALIASES[key]
        try:
            return cls(key)
        except ValueError:
            choices = ', '.join(d.value for d in cls)
            raise ValueError(f"unknown discipline '{token}' (choose from {choices})") from None


_QUEUE_ORDERS: Dict[Discipline, QueueOrder] = {
    Discipline.SJF: QueueOrder.SHORTEST_TOTAL_BURST,
    Discipline.SRTF: QueueOrder.SHORTEST_REMAINING_BURST,
    Discipline.RR: QueueOrder.FIFO,
    Discipline.VRR: QueueOrder.FIFO,
}

_ALIASES: Dict[str, Discipline] = {
    'sjf': Discipline.SJF,
    'srtf': Discipline.SRTF,
    'rr': Discipline.RR,
    'vrr': Discipline.VRR,
}


def quantum_expired(ctx: SimulationContext, time_quantum: int) -> bool:
    # quantum_elapsed already includes the tick the running process just used
    return ctx.quantum_elapsed >= time_quantum


def should_schedule(discipline: Discipline, ctx: SimulationContext, time_quantum: int) -> bool:
    cpu_idle = ctx.cpu is None
    if discipline is Discipline.SJF:
        return cpu_idle and not ctx.ready_queue.is_empty()
    if discipline is Discipline.SRTF:
        if ctx.ready_queue.is_empty():
            return False
        return cpu_idle or ctx.ready_queue.peek().remaining_cpu_burst < ctx.cpu.remaining_cpu_burst
    if discipline is Discipline.RR:
        return not ctx.ready_queue.is_empty() and (cpu_idle or quantum_expired(ctx, time_quantum))
    if discipline is Discipline.VRR:
        waiting = not ctx.ready_queue.is_empty() or bool(ctx.aux_queue)
        return waiting and (cpu_idle or quantum_expired(ctx, time_quantum))
    raise ValueError(f"Unknown discipline {discipline}")
