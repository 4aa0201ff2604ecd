from __future__ import annotations

from typing import Dict, Sequence

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import ExecutionBlock, TimelineBlock

COLORS = ["red", "green", "yellow", "blue", "magenta", "cyan"]


def time_marks(timeline: Sequence[TimelineBlock]) -> str:
    """
    Block end times, each right-aligned under the column where its block ends.
    A mark that would run into the previous one is dropped.
    """
    marks = "0"
    column = 0
    for block in timeline:
        column += max(1, block.duration)
        label = str(block.end)
        start = column + 1 - len(label)
        if start > len(marks):
            marks += " " * (start - len(marks)) + label
    return marks


def render_gantt(timeline: Sequence[TimelineBlock]) -> str:
    """
    Plain-text Gantt chart: ``=`` for execution, ``.`` for idle, one
    character per time unit.
    """
    if not timeline:
        return "(no execution)"

    line = "|"
    labels = " "

    for block in timeline:
        width = max(1, block.duration)
        if isinstance(block, ExecutionBlock):
            line += "=" * width
            labels += block.pid[:width].ljust(width)
        else:
            line += "." * width
            labels += " " * width

    line += "|"

    return "\n".join(
        [
            "Gantt Chart:",
            line,
            labels.rstrip(),
            time_marks(timeline),
        ]
    )


def build_rich_gantt(timeline: Sequence[TimelineBlock]) -> tuple[Panel, str]:
    """
    Build a Rich Panel containing a colored Gantt chart and a string with time marks.
    """
    if not timeline:
        panel = Panel("No execution", title="Gantt Chart")
        return panel, ""

    pid_to_color: Dict[str, str] = {}

    def pid_color(pid: str) -> str:
        if pid not in pid_to_color:
            idx = len(pid_to_color) % len(COLORS)
            pid_to_color[pid] = COLORS[idx]
        return pid_to_color[pid]

    bar = Text()
    labels = Text()

    for block in timeline:
        width = max(1, block.duration)
        if isinstance(block, ExecutionBlock):
            bar.append(" " * width, style=f"on {pid_color(block.pid)}")
            labels.append(block.pid[:width].ljust(width), style="bold")
        else:
            bar.append("·" * width, style="dim")
            labels.append("idle"[:width].ljust(width), style="dim")

    table = Table.grid(padding=(0, 0))
    table.add_row(bar)
    table.add_row(labels)

    panel = Panel.fit(table, title="Gantt Chart")
    return panel, time_marks(timeline)
