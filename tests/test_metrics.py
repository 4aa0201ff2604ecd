import pytest

from schedsim.algorithms import schedule_fcfs, schedule_mlq, schedule_rr, schedule_sjf, schedule_srtf
from schedsim.metrics import compute_metrics, context_switches_from_timeline, summarize_process_metrics
from schedsim.models import ExecutionBlock, IdleBlock, Process, SimulationResult


def test_fcfs_metrics():
    res = schedule_fcfs([Process("P1", 0, 5), Process("P2", 1, 3)])
    m = compute_metrics(res)
    assert m.avg_waiting_time == pytest.approx(2.0)
    assert m.avg_turnaround_time == pytest.approx(6.0)
    assert m.avg_response_time == pytest.approx(2.0)
    assert m.cpu_utilization == pytest.approx(100.0)
    assert m.throughput == pytest.approx(0.25)
    assert m.context_switches == 2
    assert m.cpu_busy_time == 8
    assert m.total_time == 8


def test_idle_lowers_utilization():
    m = compute_metrics(schedule_fcfs([Process("P", 5, 2)]))
    assert m.cpu_busy_time == 2
    assert m.cpu_utilization == pytest.approx(100.0 * 2 / 7)
    assert m.throughput == pytest.approx(1 / 7)


def test_empty_result_is_all_zero():
    m = compute_metrics(SimulationResult(algorithm="none"))
    assert m.avg_waiting_time == 0.0
    assert m.avg_response_time == 0.0
    assert m.cpu_utilization == 0.0
    assert m.throughput == 0.0
    assert m.context_switches == 0


def test_summarize_empty():
    assert summarize_process_metrics([]) == {"avg_waiting": 0.0, "avg_turnaround": 0.0, "avg_response": 0.0}


def test_timeline_recount_counts_first_block_and_changes():
    timeline = [IdleBlock(0, 2), ExecutionBlock("A", 2, 4), ExecutionBlock("A", 4, 5), ExecutionBlock("B", 5, 6)]
    assert context_switches_from_timeline(timeline) == 3
    assert context_switches_from_timeline([]) == 0


def test_timeline_recount_does_not_confuse_idle_with_pid():
    timeline = [IdleBlock(0, 1), ExecutionBlock("idle", 1, 2)]
    assert context_switches_from_timeline(timeline) == 2


def _workload():
    return [
        Process("P1", 0, 4),
        Process("P2", 2, 6),
        Process("P3", 3, 1),
        Process("P4", 12, 2),
    ]


@pytest.mark.parametrize("strategy", [schedule_fcfs, schedule_sjf])
def test_recount_matches_non_preemptive(strategy):
    res = strategy(_workload())
    assert context_switches_from_timeline(res.timeline) == res.context_switches


def test_recount_matches_round_robin_without_repeats():
    res = schedule_rr([Process("P1", 0, 5), Process("P2", 0, 3)], time_quantum=2)
    assert context_switches_from_timeline(res.timeline) == res.context_switches == 5


def test_recount_matches_mlq_without_repeats():
    res = schedule_mlq([Process("A", 0, 5, queue_level=2), Process("B", 2, 2, queue_level=0)])
    assert context_switches_from_timeline(res.timeline) == res.context_switches == 3


def test_srtf_reports_extra_switch_per_preemption():
    res = schedule_srtf([Process("P1", 0, 8), Process("P2", 1, 4)])
    assert res.context_switches == 4
    assert context_switches_from_timeline(res.timeline) == 3
