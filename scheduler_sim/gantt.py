from __future__ import annotations

from typing import Dict, Mapping, Optional, Sequence

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import TimelineBlock


FALLBACK_COLORS = ["red", "green", "yellow", "blue", "magenta", "cyan"]


def block_label(block: TimelineBlock) -> str:
    return "idle" if block.is_idle else f"P{block.pid}"


def render_gantt(timeline: Sequence[TimelineBlock]) -> str:
    """
    Plain-text Gantt chart: one character per time unit, dots while idle.

    Short blocks are widened so their end mark keeps a space before it.
    """
    if not timeline:
        return "(no execution)"

    line = "|"
    labels = ""
    time_marks = "0"

    for block in timeline:
        width = max(1, block.duration, len(str(block.end)) + 1)
        if block.is_idle:
            line += "." * width
            labels += " " * width
        else:
            line += "=" * width
            labels += block_label(block)[:width].ljust(width)
        time_marks += f"{block.end:>{width}}"

    line += "|"

    return "\n".join(
        [
            "Gantt Chart:",
            line,
            " " + labels,
            time_marks,
        ]
    )


def build_rich_gantt(
    timeline: Sequence[TimelineBlock],
    colors: Optional[Mapping[int, str]] = None,
) -> tuple[Panel, str]:
    """
    Build a Rich Panel containing a colored Gantt chart and a string with time marks.

    `colors` maps pid to a color tag (a rich color name or hex string); pids
    without one cycle through a fixed palette.
    """
    if not timeline:
        panel = Panel("No execution", title="Gantt Chart")
        return panel, ""

    given = dict(colors or {})
    pid_to_color: Dict[int, str] = {}

    def pid_color(pid: int) -> str:
        if pid not in pid_to_color:
            if given.get(pid):
                pid_to_color[pid] = given[pid]
            else:
                idx = len(pid_to_color) % len(FALLBACK_COLORS)
                pid_to_color[pid] = FALLBACK_COLORS[idx]
        return pid_to_color[pid]

    bar = Text()
    labels = Text()
    time_marks = "0"

    for block in timeline:
        width = max(1, block.duration)
        if block.is_idle:
            bar.append("." * width, style="dim")
            labels.append(" " * width)
        else:
            bar.append(" " * width, style=f"on {pid_color(block.pid)}")
            labels.append(block_label(block)[:width].ljust(width), style="bold")
        time_marks += f"{block.end:>3}"

    table = Table.grid(padding=(0, 0))
    table.add_row(bar)
    table.add_row(labels)

    panel = Panel.fit(table, title="Gantt Chart")
    return panel, time_marks
