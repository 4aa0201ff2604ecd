from __future__ import annotations

from typing import Iterable, Optional, Sequence

from .models import ExecutionBlock, ProcessResult, SimulationMetrics, SimulationResult, TimelineBlock

_IDLE = object()


def compute_metrics(result: SimulationResult) -> SimulationMetrics:
    """
    Reduce a simulation result to averages, CPU utilization, throughput and
    the context-switch count reported by the strategy.
    """
    summary = summarize_process_metrics(result.processes)
    total_time = result.total_time
    cpu_busy_time = sum(b.duration for b in result.timeline if isinstance(b, ExecutionBlock))

    cpu_utilization = 100.0 * cpu_busy_time / total_time if total_time > 0 else 0.0
    throughput = len(result.processes) / total_time if total_time > 0 else 0.0

    return SimulationMetrics(
        avg_waiting_time=summary["avg_waiting"],
        avg_turnaround_time=summary["avg_turnaround"],
        avg_response_time=summary["avg_response"],
        cpu_utilization=cpu_utilization,
        throughput=throughput,
        context_switches=result.context_switches,
        cpu_busy_time=cpu_busy_time,
        total_time=total_time,
    )


def summarize_process_metrics(processes: Sequence[ProcessResult]) -> dict:
    """
    Return averages of the key per-process metrics for quick comparison.
    """
    if not processes:
        return {"avg_waiting": 0.0, "avg_turnaround": 0.0, "avg_response": 0.0}

    n = len(processes)
    return {
        "avg_waiting": sum(p.waiting_time for p in processes) / n,
        "avg_turnaround": sum(p.turnaround_time for p in processes) / n,
        "avg_response": sum(p.response_time for p in processes) / n,
    }


def context_switches_from_timeline(timeline: Iterable[TimelineBlock]) -> int:
    """
    Recount context switches from block boundaries: every block whose occupant
    (a pid, or idle) differs from the previous block's counts, the first block
    included.

    FCFS, SJF and non-preemptive Priority always report this value. RR, MLQ
    and preemptive Priority report one switch per block, so they agree unless
    a process occupies two consecutive blocks. SRTF additionally charges one
    switch per preemption.
    """
    count = 0
    previous: Optional[object] = None
    for block in timeline:
        occupant = block.pid if isinstance(block, ExecutionBlock) else _IDLE
        if occupant != previous:
            count += 1
        previous = occupant
    return count
