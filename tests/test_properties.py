from collections import defaultdict

import pytest

from scheduler_sim.engine import compare, simulate
from scheduler_sim.models import Algorithm, Config, Process


WORKLOAD = [
    Process(1, arrival_time=0, burst_time=6, priority=2),
    Process(2, arrival_time=2, burst_time=4, priority=1),
    Process(3, arrival_time=4, burst_time=8, priority=3),
    Process(4, arrival_time=6, burst_time=3, priority=4),
    Process(5, arrival_time=6, burst_time=3, priority=4),
    Process(6, arrival_time=30, burst_time=2, priority=0),
    Process(7, arrival_time=31, burst_time=1, priority=0),
]

CONFIGS = [
    Config(Algorithm.FCFS),
    Config(Algorithm.SJF_NP),
    Config(Algorithm.SJF_P),
    Config(Algorithm.PRIORITY_NP),
    Config(Algorithm.PRIORITY_P),
    Config(Algorithm.RR, quantum=1),
    Config(Algorithm.RR, quantum=3),
    Config(Algorithm.SJF_P, context_switch_cost=1),
    Config(Algorithm.RR, quantum=2, context_switch_cost=2),
]


@pytest.mark.parametrize("config", CONFIGS, ids=lambda c: f"{c.algorithm.value}-q{c.quantum}-cs{c.context_switch_cost}")
def test_conservation(config):
    res = simulate(WORKLOAD, config)
    ran = defaultdict(int)
    for block in res.timeline:
        if not block.is_idle:
            ran[block.pid] += block.duration
    assert dict(ran) == {p.pid: p.burst_time for p in WORKLOAD}
    assert res.summary.busy_time == sum(p.burst_time for p in WORKLOAD)


@pytest.mark.parametrize("config", CONFIGS, ids=lambda c: f"{c.algorithm.value}-q{c.quantum}-cs{c.context_switch_cost}")
def test_timeline_coverage(config):
    res = simulate(WORKLOAD, config)
    assert res.timeline[0].start == 0
    for block in res.timeline:
        assert block.start < block.end
    for prev, nxt in zip(res.timeline, res.timeline[1:]):
        assert prev.end == nxt.start
        assert prev.pid != nxt.pid
    assert res.timeline[-1].end == res.total_span == res.summary.total_span


@pytest.mark.parametrize("config", CONFIGS, ids=lambda c: f"{c.algorithm.value}-q{c.quantum}-cs{c.context_switch_cost}")
def test_metrics_consistent(config):
    res = simulate(WORKLOAD, config)
    by_pid = {p.pid: p for p in WORKLOAD}
    for m in res.metrics:
        p = by_pid[m.pid]
        assert m.turnaround == m.completion - p.arrival_time
        assert m.waiting == m.turnaround - p.burst_time
        assert m.response == m.start_time - p.arrival_time
        assert 0 <= m.response <= m.waiting
        assert m.completion <= res.total_span
    assert [m.pid for m in res.metrics] == sorted(by_pid)


@pytest.mark.parametrize("config", CONFIGS, ids=lambda c: f"{c.algorithm.value}-q{c.quantum}-cs{c.context_switch_cost}")
def test_logs_are_chronological(config):
    res = simulate(WORKLOAD, config)
    times = [entry.time for entry in res.logs]
    assert times == sorted(times)
    completions = [entry for entry in res.logs if entry.message.endswith("completed")]
    assert len(completions) == len(WORKLOAD)


@pytest.mark.parametrize("config", CONFIGS, ids=lambda c: f"{c.algorithm.value}-q{c.quantum}-cs{c.context_switch_cost}")
def test_idempotent(config):
    assert simulate(WORKLOAD, config) == simulate(list(WORKLOAD), config)


def test_input_order_does_not_matter():
    config = Config(Algorithm.PRIORITY_P)
    assert simulate(WORKLOAD, config) == simulate(list(reversed(WORKLOAD)), config)


def test_compare_runs_each_algorithm():
    results = compare(WORKLOAD, ["fcfs", "sjf", "rr"], quantum=3)
    assert [alg for alg, _ in results] == [Algorithm.FCFS, Algorithm.SJF_NP, Algorithm.RR]
    assert results[2][1].quantum == 3
    assert results[0][1].quantum is None
