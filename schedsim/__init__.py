"""
CPU scheduling simulator.

Runs FCFS, SJF, SRTF, Round Robin, Priority and Multilevel Queue scheduling
over a fixed set of CPU-bound processes and reports the resulting timeline
and performance metrics.
"""

from .algorithms import (
    run_algorithm,
    schedule_fcfs,
    schedule_mlq,
    schedule_priority,
    schedule_rr,
    schedule_sjf,
    schedule_srtf,
)
from .compare import compare_algorithms
from .metrics import compute_metrics
from .models import ExecutionBlock, IdleBlock, Process, ProcessResult, SimulationMetrics, SimulationResult

__all__ = [
    "ExecutionBlock",
    "IdleBlock",
    "Process",
    "ProcessResult",
    "SimulationMetrics",
    "SimulationResult",
    "compare_algorithms",
    "compute_metrics",
    "run_algorithm",
    "schedule_fcfs",
    "schedule_mlq",
    "schedule_priority",
    "schedule_rr",
    "schedule_sjf",
    "schedule_srtf",
]
