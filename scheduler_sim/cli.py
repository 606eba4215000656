from __future__ import annotations

import argparse
import logging
import time
from pathlib import Path
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .engine import compare, simulate
from .errors import SchedulerError
from .gantt import build_rich_gantt
from .models import Algorithm, Config, SimulationResult
from .replay import Replay
from .workload_io import load_scenario, save_scenario

logger = logging.getLogger(__name__)

ALGORITHM_CODES = [a.value.lower() for a in Algorithm]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scheduler-sim",
        description="CPU scheduling simulator (FCFS, SJF, SRTF, Priority, RR).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log every scheduling decision at debug level.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run a scheduling algorithm on a workload file.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        default=None,
        help=f"Algorithm to use ({', '.join(ALGORITHM_CODES)}). Required unless the scenario file sets one.",
    )
    _add_workload_args(run_parser)
    run_parser.add_argument(
        "--log",
        action="store_true",
        help="Print the decision log after the metrics.",
    )
    run_parser.add_argument(
        "--step",
        action="store_true",
        help="Replay the schedule one time unit at a time in the terminal.",
    )
    run_parser.add_argument(
        "--step-delay",
        type=float,
        default=0.3,
        help="Seconds to wait between steps when --step is used (default: 0.3).",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run multiple algorithms on the same workload and compare average metrics.",
    )
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        default=ALGORITHM_CODES,
        help=f"Algorithms to compare (default: {' '.join(ALGORITHM_CODES)}).",
    )
    _add_workload_args(compare_parser)

    export_parser = subparsers.add_parser(
        "export",
        help="Write the workload and configuration as a JSON scenario file.",
    )
    export_parser.add_argument("--algorithm", "-a", default=None, help="Algorithm to store in the scenario.")
    _add_workload_args(export_parser)
    export_parser.add_argument("--output", "-o", required=True, help="Destination .json path.")

    return parser


def _add_workload_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON or CSV workload file.",
    )
    parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=None,
        help="Time quantum for round-robin (default: 2, or the scenario's value).",
    )
    parser.add_argument(
        "--context-switch",
        type=int,
        default=None,
        help="Time units spent switching between different processes (default: 0).",
    )


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=False)],
    )


def _resolve_config(
    args: argparse.Namespace,
    from_file: Optional[Config],
    require_algorithm: bool = True,
) -> Config:
    """
    Command-line flags override the scenario file field by field.
    """
    base = from_file or Config(algorithm=Algorithm.FCFS)

    algorithm_arg = getattr(args, "algorithm", None)
    if algorithm_arg is not None:
        algorithm = Algorithm.parse(algorithm_arg)
    elif from_file is not None or not require_algorithm:
        algorithm = base.algorithm
    else:
        raise SchedulerError("No algorithm given (use --algorithm or a scenario file with a config)")

    return Config(
        algorithm=algorithm,
        quantum=args.quantum if args.quantum is not None else base.quantum,
        context_switch_cost=args.context_switch if args.context_switch is not None else base.context_switch_cost,
    )


def _print_result(result: SimulationResult, console: Console, show_log: bool = False) -> None:
    console.print(f"[bold]Algorithm:[/bold] {result.algorithm.label}")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")

    console.print()

    colors = {m.pid: m.color for m in result.metrics if m.color}
    panel, time_marks = build_rich_gantt(result.timeline, colors)
    console.print(panel)
    if time_marks:
        console.print(time_marks)

    console.print()

    headers = [
        "PID",
        "Arrive",
        "Burst",
        "Priority",
        "Start",
        "Complete",
        "Turnaround",
        "Wait",
        "Response",
    ]

    proc_table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in headers:
        justify = "center" if h in {"PID", "Priority"} else "right"
        proc_table.add_column(h, justify=justify)

    for m in result.metrics:
        proc_table.add_row(
            f"P{m.pid}",
            str(m.arrival_time),
            str(m.burst_time),
            str(m.priority),
            str(m.start_time),
            str(m.completion),
            str(m.turnaround),
            str(m.waiting),
            str(m.response),
        )

    console.print(proc_table)
    console.print()

    summary = result.summary
    sys_table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
    sys_table.add_column("Metric")
    sys_table.add_column("Value", justify="right")

    sys_table.add_row("Avg waiting", f"{summary.avg_waiting:.2f}")
    sys_table.add_row("Avg turnaround", f"{summary.avg_turnaround:.2f}")
    sys_table.add_row("Avg response", f"{summary.avg_response:.2f}")
    sys_table.add_row("Throughput (proc/time)", f"{summary.throughput:.4f}")
    sys_table.add_row("CPU utilization", f"{summary.cpu_utilization * 100:.1f}%")
    sys_table.add_row("Total time", str(summary.total_span))

    console.print(sys_table)

    if show_log:
        console.print()
        console.print("[bold]Decision log[/bold]")
        for entry in result.logs:
            console.print(f"[blue]{escape(f'[T={entry.time}]')}[/blue] {escape(entry.message)}")


def _print_comparison(processes, config: Config, algorithms: List[str], console: Console) -> None:
    summary_table = Table(title="Algorithm comparison", box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Avg response", justify="right")
    summary_table.add_column("CPU util", justify="right")

    results = compare(
        processes,
        algorithms,
        quantum=config.quantum,
        context_switch_cost=config.context_switch_cost,
    )
    for algorithm, result in results:
        summary = result.summary
        summary_table.add_row(
            algorithm.label,
            "" if result.quantum is None else str(result.quantum),
            f"{summary.avg_waiting:.2f}",
            f"{summary.avg_turnaround:.2f}",
            f"{summary.avg_response:.2f}",
            f"{summary.cpu_utilization * 100:.1f}%",
        )

    console.print(summary_table)


def _animate_result(result: SimulationResult, delay: float, console: Console) -> None:
    """
    Time-stepped textual replay of the computed schedule.
    """
    replay = Replay(result)
    if not result.timeline:
        console.print("[red]No execution to animate.[/red]")
        return

    console.print(f"[bold]Replaying {result.algorithm.label}[/bold] (duration {replay.end} time units)")
    console.print("[dim]Press Ctrl+C to skip animation.[/dim]")

    shown = 0
    for frame in replay.frames():
        running = "idle" if frame.running is None else f"P{frame.running}"
        console.print(f"t={frame.time:3d}: [green]{running}[/green]")
        for entry in frame.logs[shown:]:
            console.print(f"        [dim]{escape(entry.message)}[/dim]")
        shown = len(frame.logs)
        time.sleep(delay)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)
    console = Console()

    try:
        processes, file_config = load_scenario(Path(args.workload))

        if args.command == "run":
            config = _resolve_config(args, file_config)
            result = simulate(processes, config)
            if args.step:
                try:
                    _animate_result(result, delay=args.step_delay, console=console)
                except KeyboardInterrupt:
                    console.print("[yellow]Animation skipped.[/yellow]")
            _print_result(result, console, show_log=args.log)
            return 0

        if args.command == "compare":
            config = _resolve_config(args, file_config, require_algorithm=False)
            _print_comparison(processes, config, args.algorithms, console)
            return 0

        if args.command == "export":
            config = _resolve_config(args, file_config)
            # Validate before writing so a bad scenario never reaches disk.
            simulate(processes, config)
            out = save_scenario(args.output, processes, config)
            console.print(f"[green]Scenario written to {out}[/green]")
            return 0
    except SchedulerError as exc:
        logger.debug("Rejected input", exc_info=True)
        console.print(f"[red]Error: {exc}[/red]")
        return 2

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
