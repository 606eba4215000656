from scheduler_sim.engine import simulate
from scheduler_sim.models import Algorithm, Config, Process
from scheduler_sim.replay import Replay


def _result():
    return simulate([Process(1, arrival_time=5, burst_time=3)], Config(Algorithm.FCFS))


def test_step_is_clamped():
    replay = Replay(_result())
    assert replay.step(-1) == 0
    assert replay.seek(100) == 8
    assert replay.at_end
    assert replay.step(1) == 8
    assert replay.restart() == 0


def test_frame_reads_precomputed_result():
    replay = Replay(_result())
    frame = replay.frame()
    assert frame.running is None
    assert [entry.message for entry in frame.logs] == ["CPU idle until 5"]

    replay.seek(5)
    frame = replay.frame()
    assert frame.running == 1
    assert len(frame.logs) == 2

    replay.seek(8)
    assert replay.frame().running is None
    assert replay.frame().logs[-1].message == "P1 completed"


def test_frames_cover_whole_span():
    frames = list(Replay(_result()).frames())
    assert [f.time for f in frames] == list(range(9))


def test_empty_result():
    replay = Replay(simulate([], Config(Algorithm.FCFS)))
    assert replay.end == 0
    assert [f.time for f in replay.frames()] == [0]
