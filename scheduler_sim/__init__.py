"""
Scheduler simulation package.

Deterministic uniprocessor CPU scheduling simulator (FCFS, SJF, SRTF,
Priority, Round Robin) producing a timeline, a decision log and
per-process metrics, plus a small command-line front end.
"""

from .engine import compare, run_algorithm, simulate
from .errors import InvalidConfig, InvalidProcess, SchedulerError, WorkloadFormatError
from .models import Algorithm, Config, Process, SimulationResult

__all__ = [
    "Algorithm",
    "Config",
    "InvalidConfig",
    "InvalidProcess",
    "Process",
    "SchedulerError",
    "SimulationResult",
    "WorkloadFormatError",
    "cli",
    "compare",
    "run_algorithm",
    "simulate",
]
