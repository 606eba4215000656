from __future__ import annotations

from typing import Optional


class SchedulerError(ValueError):
    """
    Base class for every input error raised before a simulation starts.
    """


class InvalidConfig(SchedulerError):
    pass


class InvalidProcess(SchedulerError):
    def __init__(self, message: str, pid: Optional[int] = None) -> None:
        super().__init__(message)
        self.pid = pid


class WorkloadFormatError(SchedulerError):
    pass
