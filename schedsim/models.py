from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class Process:
    pid: str
    arrival_time: int
    burst_time: int
    priority: int = 0  # lower value runs first
    queue_level: int = 0  # multilevel queue only


@dataclass(frozen=True)
class IdleBlock:
    """
    A stretch of time in which no process occupies the CPU.
    """

    start: int
    end: int

    @property
    def duration(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class ExecutionBlock:
    """
    One contiguous slice of execution for a process in the Gantt chart.
    """

    pid: str
    start: int
    end: int

    @property
    def duration(self) -> int:
        return self.end - self.start


TimelineBlock = Union[IdleBlock, ExecutionBlock]


@dataclass(frozen=True)
class ProcessResult:
    pid: str
    arrival_time: int
    burst_time: int
    start_time: int
    completion_time: int
    waiting_time: int
    turnaround_time: int
    response_time: int
    priority: Optional[int] = None
    queue_level: Optional[int] = None


@dataclass(frozen=True)
class SimulationResult:
    algorithm: str
    timeline: Tuple[TimelineBlock, ...] = ()
    processes: Tuple[ProcessResult, ...] = ()
    total_time: int = 0
    context_switches: int = 0
    quantum: Optional[int] = None


@dataclass(frozen=True)
class SimulationMetrics:
    avg_waiting_time: float
    avg_turnaround_time: float
    avg_response_time: float
    cpu_utilization: float  # percent, 0-100
    throughput: float
    context_switches: int
    cpu_busy_time: int
    total_time: int
