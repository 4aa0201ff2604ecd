"""
Simulation defaults and the per-run parameter bundle.

The strategies take their parameters as plain keyword arguments; the config
object exists so that the dispatcher, the comparison driver and the CLI can
pass one set of knobs around and apply the same values to every algorithm.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

DEFAULT_TIME_QUANTUM = 2

# Quanta for queues 0, 1 and 2 of the multilevel queue; None runs to completion.
MLQ_QUANTA: Tuple[Optional[int], ...] = (2, 4, None)


@dataclass(frozen=True)
class SimulationConfig:
    time_quantum: int = DEFAULT_TIME_QUANTUM
    preemptive: bool = False
    # None derives the iteration ceiling from the workload
    max_steps: Optional[int] = None
