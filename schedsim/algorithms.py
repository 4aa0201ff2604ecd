from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Deque, Dict, List, Optional, Set

from .config import DEFAULT_TIME_QUANTUM, MLQ_QUANTA, SimulationConfig
from .models import Process, ProcessResult, SimulationResult
from .timeline import TimelineBuilder, make_result, next_arrival_after, results_from_timeline, step_ceiling

logger = logging.getLogger(__name__)

ALGORITHM_NAMES: Dict[str, str] = {
    "fcfs": "First-Come First-Served (FCFS)",
    "sjf": "Shortest Job First (SJF)",
    "srtf": "Shortest Remaining Time First (SRTF)",
    "rr": "Round Robin (RR)",
    "priority": "Priority Scheduling",
    "mlq": "Multilevel Queue (MLQ)",
}

ALGORITHM_SHORT_NAMES: Dict[str, str] = {
    "fcfs": "FCFS",
    "sjf": "SJF",
    "srtf": "SRTF",
    "rr": "RR",
    "priority": "Priority",
    "mlq": "MLQ",
}

PREEMPTIVE_PRIORITY_NAME = "Priority Scheduling (preemptive)"


def _ceiling(processes: List[Process], max_steps: Optional[int]) -> int:
    return max_steps if max_steps is not None else step_ceiling(processes)


def schedule_fcfs(processes: List[Process]) -> SimulationResult:
    """
    First-Come First-Serve (non-preemptive) scheduling.
    """
    # sorted() is stable, so equal arrivals keep their input order.
    processes_sorted = sorted(processes, key=lambda p: p.arrival_time)

    builder = TimelineBuilder(ALGORITHM_NAMES["fcfs"])
    results: List[ProcessResult] = []

    for p in processes_sorted:
        builder.idle_until(p.arrival_time)
        start_time = builder.clock
        builder.execute(p.pid, p.burst_time)
        results.append(make_result(p, start_time, builder.clock))

    return builder.build(results)


def _schedule_non_preemptive(
    processes: List[Process],
    builder: TimelineBuilder,
    key: Callable[[Process], object],
    with_priority: bool = False,
) -> SimulationResult:
    """
    Run-to-completion loop shared by SJF and non-preemptive Priority.

    At each decision point, among processes that have arrived and have not
    run yet, choose the minimum by ``key``; ties go to the earliest entry in
    input order.
    """
    pending: List[Process] = list(processes)
    results: List[ProcessResult] = []

    while pending:
        ready = [p for p in pending if p.arrival_time <= builder.clock]

        if not ready:
            builder.idle_until(min(p.arrival_time for p in pending))
            continue

        p = min(ready, key=key)

        start_time = builder.clock
        builder.execute(p.pid, p.burst_time)
        results.append(
            make_result(p, start_time, builder.clock, priority=p.priority if with_priority else None)
        )
        pending.remove(p)

    return builder.build(results)


def schedule_sjf(processes: List[Process]) -> SimulationResult:
    """
    Shortest Job First (non-preemptive).
    """
    builder = TimelineBuilder(ALGORITHM_NAMES["sjf"])
    return _schedule_non_preemptive(processes, builder, key=lambda p: p.burst_time)


def _schedule_preemptive(
    processes: List[Process],
    builder: TimelineBuilder,
    key: Callable[[Process, Dict[str, int]], object],
    count_preemptions: bool,
    with_priority: bool = False,
) -> SimulationResult:
    """
    Event-stepping loop shared by SRTF and preemptive Priority.

    The selected process runs until its own completion or the next arrival,
    whichever comes first, and the choice is re-made at that boundary. When
    ``count_preemptions`` is set, a segment that ends before its process
    finishes costs one extra context switch on top of the per-block one.
    """
    procs = list(processes)
    remaining = {p.pid: p.burst_time for p in procs}

    while any(rt > 0 for rt in remaining.values()):
        if not builder.step():
            break

        ready = [p for p in procs if p.arrival_time <= builder.clock and remaining[p.pid] > 0]
        if not ready:
            nxt = next_arrival_after(procs, remaining, builder.clock)
            if nxt is None:
                break
            builder.idle_until(nxt)
            continue

        current = min(ready, key=lambda p: key(p, remaining))

        run_until = builder.clock + remaining[current.pid]
        nxt_arrival = next_arrival_after(procs, remaining, builder.clock)
        if nxt_arrival is not None:
            run_until = min(run_until, nxt_arrival)

        run_time = run_until - builder.clock
        builder.execute(current.pid, run_time)
        remaining[current.pid] -= run_time

        if count_preemptions and remaining[current.pid] > 0:
            builder.count_switch()

    return builder.build(results_from_timeline(procs, builder.blocks, remaining, with_priority=with_priority))


def schedule_srtf(processes: List[Process], max_steps: Optional[int] = None) -> SimulationResult:
    """
    Shortest Remaining Time First (preemptive SJF).

    Ties on remaining time go to the earlier arrival. Every segment cut short
    by an arrival counts as two context switches.
    """
    builder = TimelineBuilder(ALGORITHM_NAMES["srtf"], _ceiling(processes, max_steps))
    return _schedule_preemptive(
        processes,
        builder,
        key=lambda p, remaining: (remaining[p.pid], p.arrival_time),
        count_preemptions=True,
    )


def schedule_rr(
    processes: List[Process],
    time_quantum: int = DEFAULT_TIME_QUANTUM,
    max_steps: Optional[int] = None,
) -> SimulationResult:
    """
    Round Robin scheduling with a fixed time quantum.

    Processes that arrive while a slice is running join the ready queue ahead
    of the process whose slice just ended.
    """
    procs = list(processes)
    builder = TimelineBuilder(ALGORITHM_NAMES["rr"], _ceiling(procs, max_steps))

    if time_quantum is None or time_quantum < 1:
        logger.warning(f"Round Robin needs a time quantum >= 1, got {time_quantum!r}; nothing scheduled")
        return builder.build((), quantum=time_quantum)

    remaining = {p.pid: p.burst_time for p in procs}

    # Ready queue as a deque of PIDs
    ready: Deque[str] = deque()

    def enqueue_new_arrivals(exclude: Optional[str] = None) -> None:
        for p in procs:
            if (
                p.arrival_time <= builder.clock
                and remaining[p.pid] > 0
                and p.pid not in ready
                and p.pid != exclude
            ):
                ready.append(p.pid)

    while builder.step():
        enqueue_new_arrivals()

        if not ready:
            nxt = next_arrival_after(procs, remaining, builder.clock)
            if nxt is None:
                break
            builder.idle_until(nxt)
            continue

        pid = ready.popleft()
        run_time = min(time_quantum, remaining[pid])
        builder.execute(pid, run_time)
        remaining[pid] -= run_time

        if remaining[pid] > 0:
            enqueue_new_arrivals(exclude=pid)
            ready.append(pid)

    return builder.build(results_from_timeline(procs, builder.blocks, remaining), quantum=time_quantum)


def schedule_priority(
    processes: List[Process],
    preemptive: bool = False,
    max_steps: Optional[int] = None,
) -> SimulationResult:
    """
    Static Priority scheduling.

    Lower numeric priority value means higher priority; ties are broken by
    earlier arrival. In preemptive mode the choice is re-made at every
    arrival, so a running process only loses the CPU to a strictly better
    newcomer. Unlike SRTF, preemption costs no extra context switch.
    """
    def priority_key(p: Process):
        return (p.priority, p.arrival_time)

    if not preemptive:
        builder = TimelineBuilder(ALGORITHM_NAMES["priority"])
        return _schedule_non_preemptive(processes, builder, key=priority_key, with_priority=True)

    builder = TimelineBuilder(PREEMPTIVE_PRIORITY_NAME, _ceiling(processes, max_steps))
    return _schedule_preemptive(
        processes,
        builder,
        key=lambda p, remaining: priority_key(p),
        count_preemptions=False,
        with_priority=True,
    )


def schedule_mlq(processes: List[Process], max_steps: Optional[int] = None) -> SimulationResult:
    """
    Multilevel Queue with three fixed levels and no feedback.

    - Q0 is round-robin with quantum 2, Q1 round-robin with quantum 4, Q2 FCFS.
    - A process stays in its ``queue_level`` for its whole life.
    - The highest non-empty queue is always served first.
    - Arrivals are admitted after every time unit of a running slice; one that
      lands in a higher queue cuts the slice short. The interrupted process
      goes back to the head of its own queue and later resumes with what is
      left of its quantum.
    - If the CPU is idle, time jumps to the next arrival.
    """
    procs = list(processes)
    builder = TimelineBuilder(ALGORITHM_NAMES["mlq"], _ceiling(procs, max_steps))

    top = len(MLQ_QUANTA) - 1
    levels = {p.pid: min(max(p.queue_level, 0), top) for p in procs}
    remaining = {p.pid: p.burst_time for p in procs}

    queues: List[Deque[str]] = [deque() for _ in MLQ_QUANTA]
    queued: Set[str] = set()
    # unused quantum of a process preempted mid-slice
    quantum_left: Dict[str, int] = {}

    def enqueue_new_arrivals(current_time: int, running: Optional[str] = None) -> None:
        for p in procs:
            if (
                p.arrival_time <= current_time
                and remaining[p.pid] > 0
                and p.pid not in queued
                and p.pid != running
            ):
                queues[levels[p.pid]].append(p.pid)
                queued.add(p.pid)

    def first_ready_level(below: int = len(MLQ_QUANTA)) -> Optional[int]:
        for level in range(below):
            if queues[level]:
                return level
        return None

    enqueue_new_arrivals(0)

    while any(rt > 0 for rt in remaining.values()):
        if not builder.step():
            break

        level = first_ready_level()
        if level is None:
            nxt = next_arrival_after(procs, remaining, builder.clock)
            if nxt is None:
                break
            builder.idle_until(nxt)
            enqueue_new_arrivals(builder.clock)
            continue

        pid = queues[level].popleft()
        queued.discard(pid)

        quantum = quantum_left.pop(pid, MLQ_QUANTA[level])
        limit = remaining[pid] if quantum is None else min(quantum, remaining[pid])

        start_time = builder.clock
        run_time = 0
        preempted = False
        while run_time < limit:
            run_time += 1
            enqueue_new_arrivals(start_time + run_time, running=pid)
            if run_time < limit and first_ready_level(below=level) is not None:
                preempted = True
                break

        builder.execute(pid, run_time)
        remaining[pid] -= run_time

        if remaining[pid] > 0:
            if preempted:
                if quantum is not None:
                    quantum_left[pid] = quantum - run_time
                queues[level].appendleft(pid)
            else:
                queues[level].append(pid)
            queued.add(pid)

    return builder.build(results_from_timeline(procs, builder.blocks, remaining, with_queue_level=True))


ALGORITHMS: Dict[str, Callable[[List[Process], SimulationConfig], SimulationResult]] = {
    "fcfs": lambda processes, config: schedule_fcfs(processes),
    "sjf": lambda processes, config: schedule_sjf(processes),
    "srtf": lambda processes, config: schedule_srtf(processes, max_steps=config.max_steps),
    "rr": lambda processes, config: schedule_rr(
        processes, time_quantum=config.time_quantum, max_steps=config.max_steps
    ),
    "priority": lambda processes, config: schedule_priority(
        processes, preemptive=config.preemptive, max_steps=config.max_steps
    ),
    "mlq": lambda processes, config: schedule_mlq(processes, max_steps=config.max_steps),
}


def run_algorithm(
    name: str,
    processes: List[Process],
    config: Optional[SimulationConfig] = None,
) -> SimulationResult:
    """
    Dispatch to the requested algorithm. Only the parameters an algorithm
    understands are taken from ``config``.
    """
    name = name.lower()
    if name not in ALGORITHMS:
        raise ValueError(f"Unknown algorithm '{name}' (choose from {', '.join(ALGORITHMS)})")

    config = config or SimulationConfig()
    logger.debug(f"Running {name} on {len(processes)} processes with {config}")
    return ALGORITHMS[name](list(processes), config)
