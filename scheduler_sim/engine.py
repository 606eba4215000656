from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from .algorithms import ReadyQueue, policy_for
from .metrics import compute_process_metrics, compute_summary, merge_timeline
from .models import (
    IDLE,
    Algorithm,
    Config,
    DecisionLogEntry,
    Job,
    Process,
    SimulationResult,
    Summary,
    TimelineBlock,
)
from .validation import validate_config, validate_processes

logger = logging.getLogger(__name__)


def _format_pids(pids: Iterable[int]) -> str:
    return ", ".join(f"P{pid}" for pid in pids)


def simulate(processes: Sequence[Process], config: Config) -> SimulationResult:
    """
    Run one scheduling simulation from time 0.

    Input is validated as a whole before anything runs; the processes are
    copied into fresh Jobs and never modified. The returned result is
    immutable and depends only on the arguments.
    """
    config = validate_config(config)
    checked = validate_processes(processes)
    policy = policy_for(config.algorithm)
    quantum = config.quantum if config.algorithm is Algorithm.RR else None

    if not checked:
        return SimulationResult(algorithm=config.algorithm, quantum=quantum, summary=Summary())

    jobs = [Job.from_process(p) for p in checked]
    queue = ReadyQueue()
    timeline: List[TimelineBlock] = []
    logs: List[DecisionLogEntry] = []

    logger.debug(
        "Simulating %s over %d processes (quantum=%s, context switch=%d)",
        config.algorithm.value,
        len(jobs),
        quantum,
        config.context_switch_cost,
    )

    time = 0
    completed = 0
    last_pid: Optional[int] = None

    while completed < len(jobs):
        queue.admit(jobs, time)

        if not queue:
            # Nothing ready: jump straight to the next arrival.
            next_arrival = min(job.arrival_time for job in jobs if job.remaining > 0)
            timeline.append(TimelineBlock(start=time, end=next_arrival, pid=IDLE))
            logs.append(DecisionLogEntry(time=time, message=f"CPU idle until {next_arrival}"))
            logger.debug("t=%d idle until %d", time, next_arrival)
            time = next_arrival
            continue

        job = queue.select(policy.key)

        if config.context_switch_cost > 0 and last_pid is not None and job.pid != last_pid:
            switch_end = time + config.context_switch_cost
            # The dispatch is decided when the switch completes, so arrivals
            # during the switch compete for the CPU it is being loaded for.
            queue.admit(jobs, switch_end)
            job = queue.select(policy.key)
            timeline.append(TimelineBlock(start=time, end=switch_end, pid=IDLE))
            logs.append(
                DecisionLogEntry(time=time, message=f"Context switch P{last_pid} -> P{job.pid} until {switch_end}")
            )
            time = switch_end

        if job.start_time == -1:
            job.start_time = time

        run_time = policy.slice_for(job, config)
        others = [pid for pid in queue.pids() if pid != job.pid]

        timeline.append(TimelineBlock(start=time, end=time + run_time, pid=job.pid))
        logs.append(
            DecisionLogEntry(
                time=time,
                message=f"Selected P{job.pid} (remaining {job.remaining}). Ready: [{_format_pids(others)}]",
            )
        )
        logger.debug("t=%d dispatch P%d for %d (ready: %s)", time, job.pid, run_time, others)

        job.remaining -= run_time
        time += run_time
        last_pid = job.pid

        if job.remaining == 0:
            job.finish_time = time
            completed += 1
            queue.remove(job)
            logs.append(DecisionLogEntry(time=time, message=f"P{job.pid} completed"))
            logger.debug("t=%d P%d completed", time, job.pid)
        elif policy.rotates:
            # Arrivals during the slice queue up ahead of the preempted job.
            queue.admit(jobs, time)
            queue.rotate(job)

    merged = merge_timeline(timeline)
    metrics = compute_process_metrics(jobs)
    summary = compute_summary(metrics, merged)

    return SimulationResult(
        algorithm=config.algorithm,
        quantum=quantum,
        timeline=merged,
        logs=tuple(logs),
        metrics=metrics,
        summary=summary,
    )


def run_algorithm(
    name: Union[str, Algorithm],
    processes: Sequence[Process],
    quantum: Optional[int] = None,
    context_switch_cost: int = 0,
) -> SimulationResult:
    """
    Build a Config from an algorithm code and simulate.

    The quantum falls back to the Config default when not given.
    """
    algorithm = Algorithm.parse(name)
    if quantum is None:
        config = Config(algorithm=algorithm, context_switch_cost=context_switch_cost)
    else:
        config = Config(algorithm=algorithm, quantum=quantum, context_switch_cost=context_switch_cost)
    return simulate(processes, config)


def compare(
    processes: Sequence[Process],
    algorithms: Iterable[Union[str, Algorithm]],
    quantum: int = 2,
    context_switch_cost: int = 0,
) -> List[Tuple[Algorithm, SimulationResult]]:
    results: List[Tuple[Algorithm, SimulationResult]] = []
    for name in algorithms:
        algorithm = Algorithm.parse(name)
        results.append(
            (algorithm, run_algorithm(algorithm, processes, quantum=quantum, context_switch_cost=context_switch_cost))
        )
    return results
