from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from .models import DecisionLogEntry, SimulationResult


@dataclass(frozen=True)
class Frame:
    time: int
    running: Optional[int]
    logs: Tuple[DecisionLogEntry, ...]


class Replay:
    """
    Playback cursor over a finished simulation.

    Moves a time counter between 0 and the end of the timeline and reads the
    precomputed result at that offset. Nothing here re-runs the scheduler.
    """

    def __init__(self, result: SimulationResult) -> None:
        self.result = result
        self.time = 0

    @property
    def end(self) -> int:
        return self.result.total_span

    @property
    def at_end(self) -> bool:
        return self.time >= self.end

    def seek(self, time: int) -> int:
        self.time = max(0, min(time, self.end))
        return self.time

    def step(self, direction: int = 1) -> int:
        return self.seek(self.time + direction)

    def restart(self) -> int:
        return self.seek(0)

    def frame(self) -> Frame:
        return Frame(
            time=self.time,
            running=self.result.running_at(self.time),
            logs=self.result.logs_until(self.time),
        )

    def frames(self):
        """Yield one frame per time unit from the current position to the end."""
        while True:
            yield self.frame()
            if self.at_end:
                return
            self.step(1)
