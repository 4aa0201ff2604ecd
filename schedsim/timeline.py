"""
Stepping primitives shared by the scheduling strategies.

Every strategy drives a ``TimelineBuilder``: it owns the simulation clock,
appends idle and execution blocks, counts context switches (one per emitted
block) and enforces the iteration ceiling used by the preemptive loops.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from .models import ExecutionBlock, IdleBlock, Process, ProcessResult, SimulationResult, TimelineBlock

logger = logging.getLogger(__name__)


class TimelineBuilder:
    def __init__(self, algorithm: str, max_steps: Optional[int] = None) -> None:
        self.algorithm = algorithm
        self.max_steps = max_steps
        self.clock = 0
        self.steps = 0
        self.context_switches = 0
        self.blocks: List[TimelineBlock] = []

    def step(self) -> bool:
        """
        Count one scheduler iteration. Returns False once the ceiling is
        exceeded; the caller is expected to stop and return what it has.
        """
        self.steps += 1
        if self.max_steps is not None and self.steps > self.max_steps:
            logger.warning(
                f"{self.algorithm}: stopped after {self.max_steps} steps at t={self.clock}; "
                "timeline is truncated"
            )
            return False
        return True

    def idle_until(self, time: int) -> None:
        if time <= self.clock:
            return
        self.blocks.append(IdleBlock(start=self.clock, end=time))
        self.context_switches += 1
        self.clock = time

    def execute(self, pid: str, duration: int) -> ExecutionBlock:
        block = ExecutionBlock(pid=pid, start=self.clock, end=self.clock + duration)
        self.blocks.append(block)
        self.context_switches += 1
        self.clock = block.end
        return block

    def count_switch(self) -> None:
        self.context_switches += 1

    def build(self, processes: Iterable[ProcessResult], quantum: Optional[int] = None) -> SimulationResult:
        return SimulationResult(
            algorithm=self.algorithm,
            timeline=tuple(self.blocks),
            processes=tuple(processes),
            total_time=self.clock,
            context_switches=self.context_switches,
            quantum=quantum,
        )


def next_arrival_after(processes: Iterable[Process], remaining: Dict[str, int], time: int) -> Optional[int]:
    future = [p.arrival_time for p in processes if p.arrival_time > time and remaining[p.pid] > 0]
    return min(future) if future else None


def make_result(
    process: Process,
    start_time: int,
    completion_time: int,
    priority: Optional[int] = None,
    queue_level: Optional[int] = None,
) -> ProcessResult:
    turnaround_time = completion_time - process.arrival_time
    return ProcessResult(
        pid=process.pid,
        arrival_time=process.arrival_time,
        burst_time=process.burst_time,
        start_time=start_time,
        completion_time=completion_time,
        waiting_time=turnaround_time - process.burst_time,
        turnaround_time=turnaround_time,
        response_time=start_time - process.arrival_time,
        priority=priority,
        queue_level=queue_level,
    )


def step_ceiling(processes: Iterable[Process]) -> int:
    """
    Upper bound on scheduler iterations for valid input: at most one
    execution block per unit of burst, one idle jump per process and a
    final pass. Only degenerate parameters can exceed it.
    """
    procs = list(processes)
    return sum(max(p.burst_time, 0) for p in procs) + 2 * len(procs) + 1


def results_from_timeline(
    processes: List[Process],
    timeline: List[TimelineBlock],
    remaining: Optional[Dict[str, int]] = None,
    with_priority: bool = False,
    with_queue_level: bool = False,
) -> Tuple[ProcessResult, ...]:
    """
    Derive one result per finished process, in input order, from the emitted
    blocks.

    Start is the first block's start and completion the last block's end.
    Processes with burst left in ``remaining`` (only possible when the
    simulation was stopped early) are left out, since they have no
    completion time.
    """
    spans: Dict[str, Tuple[int, int]] = {}
    for block in timeline:
        if isinstance(block, ExecutionBlock):
            first = spans.get(block.pid, (block.start, block.end))[0]
            spans[block.pid] = (first, block.end)

    results = []
    for p in processes:
        if remaining is not None and remaining[p.pid] > 0:
            continue
        start_time, completion_time = spans.get(p.pid, (p.arrival_time, p.arrival_time))
        results.append(
            make_result(
                p,
                start_time,
                completion_time,
                priority=p.priority if with_priority else None,
                queue_level=p.queue_level if with_queue_level else None,
            )
        )
    return tuple(results)
