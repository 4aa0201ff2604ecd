import pytest

from schedsim.algorithms import PREEMPTIVE_PRIORITY_NAME, run_algorithm
from schedsim.compare import RANKED_METRICS, best_by_metric, compare_algorithms, rank_algorithms
from schedsim.config import SimulationConfig
from schedsim.metrics import compute_metrics
from schedsim.models import Process


def _procs():
    return [
        Process("P1", arrival_time=0, burst_time=5, priority=2, queue_level=1),
        Process("P2", arrival_time=1, burst_time=3, priority=1, queue_level=0),
        Process("P3", arrival_time=2, burst_time=8, priority=3, queue_level=2),
    ]


def test_compare_runs_all_six():
    rows = compare_algorithms(_procs())
    assert [r.key for r in rows] == ["fcfs", "sjf", "srtf", "rr", "priority", "mlq"]
    for row in rows:
        assert row.metrics == compute_metrics(run_algorithm(row.key, _procs()))


def test_compare_applies_same_parameters():
    config = SimulationConfig(time_quantum=4, preemptive=True)
    rows = {r.key: r for r in compare_algorithms(_procs(), config)}
    assert rows["rr"].result.quantum == 4
    assert rows["priority"].result.algorithm == PREEMPTIVE_PRIORITY_NAME


def test_compare_subset():
    rows = compare_algorithms(_procs(), algorithms=["SRTF", "fcfs"])
    assert [r.key for r in rows] == ["srtf", "fcfs"]


def test_rank_lower_is_better_for_waiting():
    ranked = rank_algorithms(compare_algorithms(_procs()), "avg_waiting_time")
    waits = [r.metrics.avg_waiting_time for r in ranked]
    assert waits == sorted(waits)
    assert ranked[0].key == "srtf"


def test_rank_higher_is_better_for_throughput():
    rows = compare_algorithms(_procs() + [Process("P4", 30, 1)])
    ranked = rank_algorithms(rows, "throughput")
    values = [r.metrics.throughput for r in ranked]
    assert values == sorted(values, reverse=True)


def test_rank_unknown_metric():
    with pytest.raises(ValueError):
        rank_algorithms(compare_algorithms(_procs()), "fairness")


def test_best_by_metric():
    rows = compare_algorithms(_procs())
    best = best_by_metric(rows)
    assert set(best) == set(RANKED_METRICS)
    assert best["avg_waiting_time"] == "srtf"
    # every algorithm keeps the CPU busy here, so the first row wins the tie
    assert best["cpu_utilization"] == "fcfs"
    assert best_by_metric([]) == {}
