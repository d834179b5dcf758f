from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


class TraceAction(Enum):
    ARRIVE = auto()
    SCHEDULED = auto()
    RUNNING = auto()           # one CPU tick consumed, detail = remaining burst
    QUEUED_IO = auto()         # blocked for IO, detail = remaining burst
    COMPLETED = auto()
    PREEMPTED = auto()
    IDLE = auto()
    IO_SCHEDULED = auto()      # detail = IO progress (always 0)
    IO_RUNNING = auto()        # detail = IO progress
    IO_COMPLETED = auto()      # detail = IO progress


CPU = 'CPU'
IO = 'IO'


@dataclass(frozen=True)
class TraceEvent:
    tick: int
    device: str
    action: TraceAction
    process: Optional[str] = None
    detail: Optional[int] = None

    def __repr__(self):
        return f"TraceEvent(tick={self.tick}, {self.device}, {self.action.name}, process={self.process}, detail={self.detail})"
