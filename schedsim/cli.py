from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .algorithms import ALGORITHM_NAMES, ALGORITHMS, run_algorithm
from .compare import RANKED_METRICS, ComparisonRow, best_by_metric, compare_algorithms, rank_algorithms
from .config import DEFAULT_TIME_QUANTUM, SimulationConfig
from .gantt import build_rich_gantt, render_gantt
from .metrics import compute_metrics
from .models import SimulationResult
from .workload_io import load_workload

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schedsim",
        description="CPU scheduling simulator (FCFS, SJF, SRTF, RR, Priority, MLQ).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log scheduling decisions and warnings at debug level.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Options shared by run and compare.
    sim_options = argparse.ArgumentParser(add_help=False)
    sim_options.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON or CSV workload file.",
    )
    sim_options.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_TIME_QUANTUM,
        help=f"Time quantum for round-robin (default: {DEFAULT_TIME_QUANTUM}).",
    )
    sim_options.add_argument(
        "--preemptive",
        action="store_true",
        help="Use preemptive priority scheduling.",
    )
    sim_options.add_argument(
        "--max-steps",
        type=int,
        default=None,
        help="Iteration ceiling for the preemptive algorithms (default: derived from the workload).",
    )

    run_parser = subparsers.add_parser(
        "run",
        parents=[sim_options],
        help="Run a scheduling algorithm on a workload file.",
    )
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        choices=list(ALGORITHMS),
        help="Algorithm to use.",
    )
    run_parser.add_argument(
        "--plain",
        action="store_true",
        help="Draw the Gantt chart as plain text instead of colored blocks.",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        parents=[sim_options],
        help="Run every algorithm on the same workload and compare their metrics.",
    )
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        choices=list(ALGORITHMS),
        default=list(ALGORITHMS),
        help="Algorithms to compare (default: all).",
    )
    compare_parser.add_argument(
        "--sort-by",
        choices=RANKED_METRICS,
        default=None,
        help="Order rows best-first on this metric.",
    )

    subparsers.add_parser("algorithms", help="List the available algorithms.")

    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _config_from_args(args: argparse.Namespace) -> SimulationConfig:
    return SimulationConfig(
        time_quantum=args.quantum,
        preemptive=args.preemptive,
        max_steps=args.max_steps,
    )


def _print_result(result: SimulationResult, console: Console, plain: bool = False) -> None:
    console.print(f"[bold]Algorithm:[/bold] {result.algorithm}")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")

    console.print()

    if plain:
        # markup off so pids are printed verbatim
        console.print(render_gantt(result.timeline), markup=False, highlight=False, soft_wrap=True)
    else:
        panel, time_marks = build_rich_gantt(result.timeline)
        console.print(panel)
        if time_marks:
            console.print(time_marks)

    console.print()

    show_priority = any(p.priority is not None for p in result.processes)
    show_queue = any(p.queue_level is not None for p in result.processes)

    headers = ["PID", "Arrive", "Burst", "Start", "Complete", "Wait", "Turnaround", "Response"]
    if show_priority:
        headers.append("Priority")
    if show_queue:
        headers.append("Queue")

    proc_table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in headers:
        justify = "center" if h in {"PID", "Priority", "Queue"} else "right"
        proc_table.add_column(h, justify=justify)

    for p in result.processes:
        row = [
            p.pid,
            str(p.arrival_time),
            str(p.burst_time),
            str(p.start_time),
            str(p.completion_time),
            str(p.waiting_time),
            str(p.turnaround_time),
            str(p.response_time),
        ]
        if show_priority:
            row.append(str(p.priority))
        if show_queue:
            row.append(str(p.queue_level))
        proc_table.add_row(*row)

    console.print(proc_table)
    console.print()

    metrics = compute_metrics(result)
    sys_table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
    sys_table.add_column("Metric")
    sys_table.add_column("Value", justify="right")

    sys_table.add_row("Avg waiting", f"{metrics.avg_waiting_time:.2f}")
    sys_table.add_row("Avg turnaround", f"{metrics.avg_turnaround_time:.2f}")
    sys_table.add_row("Avg response", f"{metrics.avg_response_time:.2f}")
    sys_table.add_row("Throughput (proc/time)", f"{metrics.throughput:.3f}")
    sys_table.add_row("CPU utilization", f"{metrics.cpu_utilization:.1f}%")
    sys_table.add_row("Context switches", str(metrics.context_switches))
    sys_table.add_row("Total time", str(metrics.total_time))

    console.print(sys_table)


def _comparison_rows(
    processes,
    config: SimulationConfig,
    algorithms: List[str],
    sort_by: Optional[str],
) -> Tuple[List[ComparisonRow], Dict[str, str]]:
    rows = compare_algorithms(processes, config, algorithms=algorithms)
    # ties go to the earlier algorithm in run order, whatever the sort
    best = best_by_metric(rows)
    if sort_by:
        rows = rank_algorithms(rows, sort_by)
    return rows, best


def _print_comparison(
    processes,
    config: SimulationConfig,
    algorithms: List[str],
    sort_by: Optional[str],
    console: Console,
) -> None:
    rows, best = _comparison_rows(processes, config, algorithms, sort_by)

    columns = [
        ("avg_waiting_time", "Avg waiting", "{:.2f}"),
        ("avg_turnaround_time", "Avg turnaround", "{:.2f}"),
        ("avg_response_time", "Avg response", "{:.2f}"),
        ("cpu_utilization", "CPU %", "{:.1f}"),
        ("throughput", "Throughput", "{:.3f}"),
        ("context_switches", "Switches", "{}"),
    ]

    table = Table(title="Algorithm comparison", box=box.SIMPLE_HEAVY)
    table.add_column("Algorithm")
    for _, label, _ in columns:
        table.add_column(label, justify="right")

    for row in rows:
        cells = [row.short]
        for metric, _, fmt in columns:
            value = fmt.format(getattr(row.metrics, metric))
            cells.append(f"[bold green]{value}[/bold green]" if best.get(metric) == row.key else value)
        table.add_row(*cells)

    console.print(table)
    console.print("[dim]Lower is better for times and switches; higher for CPU % and throughput.[/dim]")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)
    console = Console()

    if args.command == "algorithms":
        for key, name in ALGORITHM_NAMES.items():
            console.print(f"[yellow]{key:<9}[/yellow] {name}")
        return 0

    try:
        processes = load_workload(Path(args.workload))
    except (OSError, ValueError) as exc:
        parser.error(str(exc))
    logger.debug(f"Loaded {len(processes)} processes from {args.workload}")

    config = _config_from_args(args)

    if args.command == "run":
        result = run_algorithm(args.algorithm, processes, config)
        _print_result(result, console, plain=args.plain)
        return 0

    if args.command == "compare":
        _print_comparison(processes, config, args.algorithms, args.sort_by, console)
        return 0

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
