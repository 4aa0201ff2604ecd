from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import List

from .models import Process

QUEUE_LEVELS = (0, 1, 2)


def load_workload(path: str | Path) -> List[Process]:
    """
    Load a workload from a JSON or CSV file into a list of Process objects.

    Entries are validated here so the scheduling engine can assume
    non-negative arrivals, positive bursts, valid queue levels and unique
    pids.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        processes = _load_json(path)
    elif suffix == ".csv":
        processes = _load_csv(path)
    else:
        raise ValueError(f"Unsupported workload format: {suffix} (use .json or .csv)")

    seen = set()
    for p in processes:
        if p.pid in seen:
            raise ValueError(f"Duplicate process id: {p.pid!r}")
        seen.add(p.pid)

    return processes


def _load_json(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8") as f:
        raw = json.load(f)

    if not isinstance(raw, list):
        raise ValueError("JSON workload must be a list of process objects")

    return [_process_from_mapping(entry) for entry in raw]


def _load_csv(path: Path) -> List[Process]:
    processes: List[Process] = []
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            processes.append(_process_from_mapping(row))
    return processes


def _first_present(mapping, *keys):
    for key in keys:
        value = mapping.get(key)
        if value not in (None, ""):
            return value
    return None


def _process_from_mapping(mapping) -> Process:
    try:
        pid = str(mapping["pid"]).strip()
        arrival_time = int(_first_present(mapping, "arrival_time", "arrival"))
        burst_time = int(_first_present(mapping, "burst_time", "burst"))
        priority_val = _first_present(mapping, "priority")
        priority = int(priority_val) if priority_val is not None else 0
        level_val = _first_present(mapping, "queue_level", "queueLevel")
        queue_level = int(level_val) if level_val is not None else 0
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"Invalid process entry: {mapping!r}") from exc

    if not pid:
        raise ValueError(f"Process entry has an empty pid: {mapping!r}")
    if arrival_time < 0:
        raise ValueError(f"Arrival time must be >= 0 for process {pid!r}")
    if burst_time < 1:
        raise ValueError(f"Burst time must be >= 1 for process {pid!r}")
    if queue_level not in QUEUE_LEVELS:
        raise ValueError(f"Queue level must be one of {QUEUE_LEVELS} for process {pid!r}")

    return Process(
        pid=pid,
        arrival_time=arrival_time,
        burst_time=burst_time,
        priority=priority,
        queue_level=queue_level,
    )
