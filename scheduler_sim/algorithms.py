from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from .models import Algorithm, Config, Job


SortKey = Callable[[Job], Tuple[int, ...]]


def fcfs_key(job: Job) -> Tuple[int, ...]:
    return (job.arrival_time, job.pid)


def shortest_remaining_key(job: Job) -> Tuple[int, ...]:
    return (job.remaining, job.arrival_time, job.pid)


def priority_key(job: Job) -> Tuple[int, ...]:
    # Lower numeric priority value means more urgent.
    return (job.priority, job.arrival_time, job.pid)


@dataclass(frozen=True)
class Policy:
    """
    Dispatch rule for one algorithm.

    key is None for Round Robin, which never re-sorts its queue and always
    runs the head. Preemptive sorted policies run one time unit per dispatch
    so a new arrival gets a chance to take the CPU at the next unit boundary.
    """

    algorithm: Algorithm
    key: Optional[SortKey]
    preemptive: bool

    @property
    def rotates(self) -> bool:
        return self.key is None

    def slice_for(self, job: Job, config: Config) -> int:
        if self.rotates:
            return min(config.quantum, job.remaining)
        if self.preemptive:
            return 1
        return job.remaining


POLICIES: Dict[Algorithm, Policy] = {
    Algorithm.FCFS: Policy(Algorithm.FCFS, fcfs_key, preemptive=False),
    Algorithm.SJF_NP: Policy(Algorithm.SJF_NP, shortest_remaining_key, preemptive=False),
    Algorithm.SJF_P: Policy(Algorithm.SJF_P, shortest_remaining_key, preemptive=True),
    Algorithm.PRIORITY_NP: Policy(Algorithm.PRIORITY_NP, priority_key, preemptive=False),
    Algorithm.PRIORITY_P: Policy(Algorithm.PRIORITY_P, priority_key, preemptive=True),
    Algorithm.RR: Policy(Algorithm.RR, None, preemptive=True),
}

_missing = set(Algorithm) - set(POLICIES)
if _missing:  # pragma: no cover
    raise RuntimeError(f"No dispatch policy for {sorted(a.value for a in _missing)}")


def policy_for(algorithm: Algorithm) -> Policy:
    return POLICIES[algorithm]


class ReadyQueue:
    """
    FIFO of jobs that have arrived and still have work left.

    Every algorithm admits into the same queue. Round Robin consumes it in
    order and rotates; the other policies sort it by their key before each
    dispatch. Sorting is stable, and every key ends in the pid, so the
    order is total.
    """

    def __init__(self) -> None:
        self._jobs: List[Job] = []

    def __len__(self) -> int:
        return len(self._jobs)

    def __bool__(self) -> bool:
        return bool(self._jobs)

    def __contains__(self, job: Job) -> bool:
        return any(j is job for j in self._jobs)

    def admit(self, jobs: Iterable[Job], now: int) -> List[Job]:
        """
        Append every job that has arrived by `now`, has work left and is not
        queued yet. Newcomers are appended in (arrival, pid) order.
        """
        arrived = [
            job
            for job in jobs
            if job.arrival_time <= now and job.remaining > 0 and job not in self
        ]
        arrived.sort(key=fcfs_key)
        self._jobs.extend(arrived)
        return arrived

    def select(self, key: Optional[SortKey]) -> Job:
        if key is not None:
            self._jobs.sort(key=key)
        return self._jobs[0]

    def remove(self, job: Job) -> None:
        self._jobs = [j for j in self._jobs if j is not job]

    def rotate(self, job: Job) -> None:
        """Move `job` to the back of the queue."""
        self.remove(job)
        self._jobs.append(job)

    def pids(self) -> List[int]:
        return [j.pid for j in self._jobs]
