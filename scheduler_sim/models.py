from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

from .errors import InvalidConfig


IDLE: Optional[int] = None


class Algorithm(Enum):
    """
    Closed set of scheduling variants understood by the engine.
    """

    FCFS = "FCFS"
    SJF_NP = "SJF_NP"
    SJF_P = "SJF_P"
    PRIORITY_NP = "PRIORITY_NP"
    PRIORITY_P = "PRIORITY_P"
    RR = "RR"

    @classmethod
    def parse(cls, code: Union[str, "Algorithm"]) -> "Algorithm":
        if isinstance(code, cls):
            return code
        if not isinstance(code, str):
            raise InvalidConfig(f"Unknown algorithm {code!r}")

        key = code.strip().upper().replace("-", "_")
        key = _ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            raise InvalidConfig(f"Unknown algorithm '{code}'") from None

    @property
    def label(self) -> str:
        return _LABELS[self]


_ALIASES = {
    "SJF": "SJF_NP",
    "SRTF": "SJF_P",
    "PRIORITY": "PRIORITY_NP",
}

_LABELS = {
    Algorithm.FCFS: "FCFS",
    Algorithm.SJF_NP: "SJF (non-preemptive)",
    Algorithm.SJF_P: "SJF (preemptive / SRTF)",
    Algorithm.PRIORITY_NP: "Priority (non-preemptive)",
    Algorithm.PRIORITY_P: "Priority (preemptive)",
    Algorithm.RR: "Round Robin",
}


@dataclass(frozen=True)
class Process:
    pid: int
    arrival_time: int
    burst_time: int
    priority: int = 0
    color: Optional[str] = None


@dataclass
class Job:
    """
    Working copy of a Process for a single simulation run.
    """

    process: Process
    remaining: int
    start_time: int = -1
    finish_time: int = -1

    @classmethod
    def from_process(cls, process: Process) -> "Job":
        return cls(process=process, remaining=process.burst_time)

    @property
    def pid(self) -> int:
        return self.process.pid

    @property
    def arrival_time(self) -> int:
        return self.process.arrival_time

    @property
    def burst_time(self) -> int:
        return self.process.burst_time

    @property
    def priority(self) -> int:
        return self.process.priority


@dataclass(frozen=True)
class Config:
    algorithm: Algorithm
    quantum: int = 2
    context_switch_cost: int = 0


@dataclass(frozen=True)
class TimelineBlock:
    """
    One contiguous interval of the CPU timeline; pid is None while idle.
    """

    start: int
    end: int
    pid: Optional[int] = IDLE

    @property
    def duration(self) -> int:
        return self.end - self.start

    @property
    def is_idle(self) -> bool:
        return self.pid is IDLE


@dataclass(frozen=True)
class DecisionLogEntry:
    time: int
    message: str


@dataclass(frozen=True)
class ProcessMetrics:
    pid: int
    arrival_time: int
    burst_time: int
    priority: int
    start_time: int
    completion: int
    turnaround: int
    waiting: int
    response: int
    color: Optional[str] = None


@dataclass(frozen=True)
class Summary:
    avg_waiting: float = 0.0
    avg_turnaround: float = 0.0
    avg_response: float = 0.0
    cpu_utilization: float = 0.0
    throughput: float = 0.0
    busy_time: int = 0
    total_span: int = 0


@dataclass(frozen=True)
class SimulationResult:
    algorithm: Algorithm
    quantum: Optional[int]
    timeline: Tuple[TimelineBlock, ...] = ()
    logs: Tuple[DecisionLogEntry, ...] = ()
    metrics: Tuple[ProcessMetrics, ...] = ()
    summary: Summary = Summary()

    @property
    def total_span(self) -> int:
        return self.timeline[-1].end if self.timeline else 0

    def metrics_for(self, pid: int) -> ProcessMetrics:
        for m in self.metrics:
            if m.pid == pid:
                return m
        raise KeyError(pid)

    def logs_until(self, time: int) -> Tuple[DecisionLogEntry, ...]:
        return tuple(entry for entry in self.logs if entry.time <= time)

    def running_at(self, time: int) -> Optional[int]:
        for block in self.timeline:
            if block.start <= time < block.end:
                return block.pid
        return IDLE
