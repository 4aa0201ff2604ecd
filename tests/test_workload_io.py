from pathlib import Path

import pytest

from schedsim.models import Process
from schedsim.workload_io import load_workload


def test_load_json(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"pid":"A","arrival_time":0,"burst_time":3,"priority":1},'
                 '{"pid":"B","arrival_time":1,"burst_time":2,"queue_level":2}]')
    procs = load_workload(p)
    assert isinstance(procs[0], Process)
    assert procs[0].priority == 1
    assert procs[1].priority == 0
    assert procs[1].arrival_time == 1
    assert procs[1].queue_level == 2


def test_load_json_short_field_names(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"pid":"A","arrival":2,"burst":4,"queueLevel":1}]')
    assert load_workload(p) == [Process("A", arrival_time=2, burst_time=4, queue_level=1)]


def test_load_csv(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("pid,arrival_time,burst_time,priority,queue_level\nA,0,3,1,\nB,1,2,,1\n")
    procs = load_workload(p)
    assert procs[0].pid == "A"
    assert procs[0].queue_level == 0
    assert procs[1].priority == 0
    assert procs[1].queue_level == 1


@pytest.mark.parametrize(
    "body",
    [
        '[{"pid":"A","arrival_time":0,"burst_time":0}]',
        '[{"pid":"A","arrival_time":-1,"burst_time":2}]',
        '[{"pid":"A","arrival_time":0,"burst_time":2,"queue_level":3}]',
        '[{"pid":"A","arrival_time":"soon","burst_time":2}]',
        '[{"arrival_time":0,"burst_time":2}]',
        '[{"pid":"  ","arrival_time":0,"burst_time":2}]',
        '[{"pid":"A","arrival_time":0,"burst_time":2},{"pid":"A","arrival_time":1,"burst_time":1}]',
        '{"pid":"A","arrival_time":0,"burst_time":2}',
    ],
)
def test_invalid_entries_rejected(tmp_path: Path, body):
    p = tmp_path / "w.json"
    p.write_text(body)
    with pytest.raises(ValueError):
        load_workload(p)


def test_unsupported_suffix(tmp_path: Path):
    p = tmp_path / "w.yaml"
    p.write_text("- pid: A\n")
    with pytest.raises(ValueError, match="Unsupported workload format"):
        load_workload(p)
