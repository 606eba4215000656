from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

from .models import Job, ProcessMetrics, Summary, TimelineBlock


def merge_timeline(blocks: Iterable[TimelineBlock]) -> Tuple[TimelineBlock, ...]:
    """
    Collapse contiguous blocks that share a pid (idle included) into one.
    """
    merged: List[TimelineBlock] = []
    for block in blocks:
        if merged and merged[-1].pid == block.pid and merged[-1].end == block.start:
            merged[-1] = TimelineBlock(start=merged[-1].start, end=block.end, pid=block.pid)
        else:
            merged.append(block)
    return tuple(merged)


def compute_process_metrics(jobs: Iterable[Job]) -> Tuple[ProcessMetrics, ...]:
    """
    Per-process completion, turnaround, waiting and response, ordered by pid.

    Expects every job to have finished.
    """
    metrics: List[ProcessMetrics] = []
    for job in sorted(jobs, key=lambda j: j.pid):
        turnaround = job.finish_time - job.arrival_time
        metrics.append(
            ProcessMetrics(
                pid=job.pid,
                arrival_time=job.arrival_time,
                burst_time=job.burst_time,
                priority=job.priority,
                start_time=job.start_time,
                completion=job.finish_time,
                turnaround=turnaround,
                waiting=turnaround - job.burst_time,
                response=job.start_time - job.arrival_time,
                color=job.process.color,
            )
        )
    return tuple(metrics)


def compute_summary(metrics: Sequence[ProcessMetrics], timeline: Sequence[TimelineBlock]) -> Summary:
    """
    Averages over the processes plus utilization and throughput over the
    whole simulated span. Everything is zero for an empty run.
    """
    if not metrics or not timeline:
        return Summary()

    n = len(metrics)
    total_span = timeline[-1].end
    busy_time = sum(block.duration for block in timeline if not block.is_idle)

    return Summary(
        avg_waiting=sum(m.waiting for m in metrics) / n,
        avg_turnaround=sum(m.turnaround for m in metrics) / n,
        avg_response=sum(m.response for m in metrics) / n,
        cpu_utilization=busy_time / total_span if total_span > 0 else 0.0,
        throughput=n / total_span if total_span > 0 else 0.0,
        busy_time=busy_time,
        total_span=total_span,
    )
