"""
Side-by-side comparison of every algorithm on one workload.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from .algorithms import ALGORITHM_NAMES, ALGORITHM_SHORT_NAMES, ALGORITHMS, run_algorithm
from .config import SimulationConfig
from .metrics import compute_metrics
from .models import Process, SimulationMetrics, SimulationResult

logger = logging.getLogger(__name__)

# Metrics where a larger value is better; for all the others smaller wins.
HIGHER_IS_BETTER = {"cpu_utilization", "throughput"}

RANKED_METRICS = (
    "avg_waiting_time",
    "avg_turnaround_time",
    "avg_response_time",
    "cpu_utilization",
    "throughput",
    "context_switches",
)


@dataclass(frozen=True)
class ComparisonRow:
    key: str
    name: str
    short: str
    result: SimulationResult
    metrics: SimulationMetrics


def compare_algorithms(
    processes: List[Process],
    config: Optional[SimulationConfig] = None,
    algorithms: Optional[Iterable[str]] = None,
) -> List[ComparisonRow]:
    """
    Run each algorithm on the same processes and parameters and return one
    row per algorithm, in the order requested (all six by default).
    """
    config = config or SimulationConfig()
    keys = [a.lower() for a in algorithms] if algorithms is not None else list(ALGORITHMS)

    rows: List[ComparisonRow] = []
    for key in keys:
        result = run_algorithm(key, processes, config)
        metrics = compute_metrics(result)
        logger.debug(
            f"{key}: avg wait {metrics.avg_waiting_time:.2f}, "
            f"avg turnaround {metrics.avg_turnaround_time:.2f}, switches {metrics.context_switches}"
        )
        rows.append(
            ComparisonRow(
                key=key,
                name=ALGORITHM_NAMES[key],
                short=ALGORITHM_SHORT_NAMES[key],
                result=result,
                metrics=metrics,
            )
        )
    return rows


def rank_algorithms(rows: List[ComparisonRow], metric: str) -> List[ComparisonRow]:
    """
    Order rows best-first on ``metric``. Equal values keep their input order.
    """
    if metric not in RANKED_METRICS:
        raise ValueError(f"Unknown metric '{metric}' (choose from {', '.join(RANKED_METRICS)})")

    reverse = metric in HIGHER_IS_BETTER
    return sorted(rows, key=lambda row: getattr(row.metrics, metric), reverse=reverse)


def best_by_metric(rows: List[ComparisonRow]) -> Dict[str, str]:
    """
    Map every ranked metric to the key of the algorithm that does best on it.
    """
    if not rows:
        return {}
    return {metric: rank_algorithms(rows, metric)[0].key for metric in RANKED_METRICS}
