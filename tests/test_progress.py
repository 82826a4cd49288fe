import importlib
import json
import os
import time

from progress import reset, search_started, search_observed, search_finished, snapshot, as_json


def test_search_round_trip_counts_boards():
    reset()
    started = search_started(5, 4, cell_groups=3, dependencies=2)
    snap = snapshot()
    assert snap["status"] == "Searching"
    assert snap["board"] == "5 x 4"
    assert snap["cell_groups"] == 3
    assert snap["dependencies"] == 2
    assert snap["done"] is False

    search_observed(7, 1)
    assert snapshot()["observations"] == 7

    search_finished(True, started=started, observations=9, cliche_attempts=2)
    snap = snapshot()
    assert snap["status"] == "Done"
    assert snap["ok"] is True
    assert snap["done"] is True
    assert snap["observations"] == 9
    assert snap["cliche_attempts"] == 2
    assert snap["boards_done"] == 1
    assert snap["elapsed"] >= 0.0


def test_failed_search_records_message():
    reset()
    search_started(3, 3, cell_groups=1, dependencies=1)
    search_finished(False, message="boom")
    snap = as_json()
    assert snap["status"] == "Error"
    assert snap["ok"] is False
    assert snap["message"] == "boom"
    assert snap["boards_done"] == 0


def test_reset_increments_run_identifier():
    reset()
    first = snapshot()["run_id"]
    reset()
    second = snapshot()["run_id"]
    assert isinstance(first, int)
    assert isinstance(second, int)
    assert second == first + 1


def test_snapshot_reads_state_written_by_other_process(tmp_path, monkeypatch):
    import progress as progress_module

    state_path = tmp_path / "state.json"
    monkeypatch.setenv("PROGRESS_STATE_FILE", str(state_path))
    progress = importlib.reload(progress_module)

    progress.reset()
    progress.search_started(4, 4, cell_groups=2, dependencies=1)
    first = progress.snapshot()
    assert first["board"] == "4 x 4"

    data = dict(first)
    data["board"] = "9 x 9"
    data["observations"] = 42
    state_path.write_text(json.dumps(data))
    os.utime(state_path, None)

    with progress.PROGRESS_LOCK:
        progress.PROGRESS["board"] = ""
        progress.PROGRESS["observations"] = 0
        progress._LAST_STATE_MTIME = 0.0

    time.sleep(0.01)
    updated = progress.snapshot()
    assert updated["board"] == "9 x 9"
    assert updated["observations"] == 42

    monkeypatch.delenv("PROGRESS_STATE_FILE", raising=False)
    importlib.reload(progress_module)
