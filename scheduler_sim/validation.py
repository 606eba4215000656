from __future__ import annotations

from typing import Iterable, List, Set

from .errors import InvalidConfig, InvalidProcess
from .models import Algorithm, Config, Process


def _is_int(value) -> bool:
    # bool is an int subclass but never a valid time or id
    return isinstance(value, int) and not isinstance(value, bool)


def validate_config(config: Config) -> Config:
    """
    Reject configurations that would make the run undefined.

    Returns the config with its algorithm normalised to an Algorithm member.
    """
    algorithm = Algorithm.parse(config.algorithm)

    # The quantum only matters to Round Robin; other algorithms ignore it.
    if algorithm is Algorithm.RR:
        if not _is_int(config.quantum):
            raise InvalidConfig(f"Quantum must be an integer, got {config.quantum!r}")
        if config.quantum < 1:
            raise InvalidConfig(f"Round Robin requires a quantum >= 1 (got {config.quantum})")

    if not _is_int(config.context_switch_cost) or config.context_switch_cost < 0:
        raise InvalidConfig(
            f"Context switch cost must be a non-negative integer, got {config.context_switch_cost!r}"
        )

    if algorithm is not config.algorithm:
        return Config(
            algorithm=algorithm,
            quantum=config.quantum,
            context_switch_cost=config.context_switch_cost,
        )
    return config


def validate_processes(processes: Iterable[Process]) -> List[Process]:
    """
    Check the whole batch; the first bad entry rejects all of it.
    """
    checked: List[Process] = []
    seen: Set[int] = set()

    for p in processes:
        if not isinstance(p, Process):
            raise InvalidProcess(f"Expected a Process, got {type(p).__name__}")
        if not _is_int(p.pid) or p.pid < 1:
            raise InvalidProcess(f"Process id must be a positive integer, got {p.pid!r}", pid=None)
        if p.pid in seen:
            raise InvalidProcess(f"Duplicate process id P{p.pid}", pid=p.pid)
        if not _is_int(p.arrival_time) or p.arrival_time < 0:
            raise InvalidProcess(f"P{p.pid}: arrival time must be an integer >= 0", pid=p.pid)
        if not _is_int(p.burst_time) or p.burst_time < 1:
            raise InvalidProcess(f"P{p.pid}: burst time must be an integer >= 1", pid=p.pid)
        if not _is_int(p.priority):
            raise InvalidProcess(f"P{p.pid}: priority must be an integer", pid=p.pid)

        seen.add(p.pid)
        checked.append(p)

    return checked
