from __future__ import annotations

import json
import logging
import os
import time
import threading
from pathlib import Path
from typing import Any, Dict, Optional

from config import CFG

# ------------------------------
# Thread-safe global search state
# ------------------------------

PROGRESS_LOCK = threading.Lock()


def _state_file_path() -> Path:
    configured = Path(os.environ.get("PROGRESS_STATE_FILE") or CFG.PROGRESS_STATE_FILE)
    if configured.is_absolute():
        return configured
    return Path(__file__).resolve().parent / configured


STATE_FILE = _state_file_path()
STATE_FILE_TMP = STATE_FILE.with_name(STATE_FILE.name + ".tmp")
_LAST_STATE_MTIME: float = 0.0


def _init_logger() -> logging.Logger:
    logger = logging.getLogger("randomizer.search_log")
    if logger.handlers or not CFG.SEARCH_LOG_ENABLED:
        return logger

    log_path = Path(CFG.SEARCH_LOG)
    if not log_path.is_absolute():
        log_path = Path(__file__).resolve().parent / log_path
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_path, encoding="utf-8")
    except OSError:
        # No writable log location; searches still run without a log file.
        return logger
    formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    logger.propagate = False
    return logger


SEARCH_LOGGER = _init_logger()


def _log_enabled() -> bool:
    return bool(SEARCH_LOGGER.handlers)


def _fmt_seconds(seconds: Optional[float]) -> Optional[str]:
    if seconds is None:
        return None
    return f"{float(seconds):.3f}s"


def _emit_log(event: str, level: int = logging.INFO, **fields: Any) -> None:
    if not _log_enabled():
        return
    extras = [
        f"{key}={value}"
        for key, value in fields.items()
        if value is not None and value != ""
    ]
    if extras:
        SEARCH_LOGGER.log(level, "%s | %s", event, " ".join(extras))
    else:
        SEARCH_LOGGER.log(level, "%s", event)


# Single source of truth for /progress3
PROGRESS: Dict[str, Any] = {
    "status": "Idle",          # Idle | Searching | Done | Error
    "run_id": 0,               # bumped by reset()
    "board": "",               # e.g. "5 x 5"
    "cell_groups": 0,          # cell groups found in the last board
    "dependencies": 0,         # dependency incrementers in the last search
    "observations": 0,         # joint observations pulled in the last search
    "cliche_attempts": 0,      # clique searches run in the last search
    "boards_done": 0,          # boards produced since reset()
    "elapsed": 0.0,            # seconds spent in the last search
    "message": "",
    "done": False,
    "ok": None,
}


def _persist_locked() -> None:
    global _LAST_STATE_MTIME
    try:
        STATE_FILE.parent.mkdir(parents=True, exist_ok=True)
        with STATE_FILE_TMP.open("w", encoding="utf-8") as fh:
            json.dump(PROGRESS, fh, ensure_ascii=False, separators=(",", ":"))
        STATE_FILE_TMP.replace(STATE_FILE)
        _LAST_STATE_MTIME = STATE_FILE.stat().st_mtime
    except OSError:
        # Persistence is best effort; the in-memory state stays authoritative.
        _emit_log("State persistence failed", level=logging.WARNING, path=STATE_FILE)


def _load_persisted_locked(force: bool = False) -> None:
    global _LAST_STATE_MTIME
    try:
        stat = STATE_FILE.stat()
    except OSError:
        return
    if not force and stat.st_mtime <= _LAST_STATE_MTIME:
        return
    try:
        with STATE_FILE.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except (OSError, ValueError):
        return
    if not isinstance(data, dict):
        return
    for key in PROGRESS.keys():
        if key in data:
            PROGRESS[key] = data[key]
    _LAST_STATE_MTIME = stat.st_mtime


def _now() -> float:
    return time.time()


def reset() -> None:
    with PROGRESS_LOCK:
        try:
            current_run_id = int(PROGRESS.get("run_id", 0))
        except (TypeError, ValueError):
            current_run_id = 0
        PROGRESS.update({
            "status": "Idle",
            "run_id": current_run_id + 1,
            "board": "",
            "cell_groups": 0,
            "dependencies": 0,
            "observations": 0,
            "cliche_attempts": 0,
            "boards_done": 0,
            "elapsed": 0.0,
            "message": "",
            "done": False,
            "ok": None,
        })
        _emit_log("Progress reset", run_id=PROGRESS["run_id"])
        _persist_locked()


def search_started(width: int, height: int, cell_groups: int, dependencies: int) -> float:
    """Record the start of one randomization; returns the start timestamp."""
    started = _now()
    with PROGRESS_LOCK:
        PROGRESS.update({
            "status": "Searching",
            "board": f"{width} x {height}",
            "cell_groups": int(cell_groups),
            "dependencies": int(dependencies),
            "observations": 0,
            "cliche_attempts": 0,
            "elapsed": 0.0,
            "message": "",
            "done": False,
            "ok": None,
        })
        _emit_log(
            "Search started",
            board=PROGRESS["board"],
            cell_groups=cell_groups,
            dependencies=dependencies,
        )
    return started


def search_observed(observations: int, cliche_attempts: int) -> None:
    # In-memory only; search_finished persists the final counts.
    with PROGRESS_LOCK:
        PROGRESS["observations"] = int(observations)
        PROGRESS["cliche_attempts"] = int(cliche_attempts)


def search_finished(
    ok: bool,
    *,
    started: Optional[float] = None,
    observations: int = 0,
    cliche_attempts: int = 0,
    message: Any = None,
) -> None:
    elapsed = None if started is None else max(0.0, _now() - float(started))
    with PROGRESS_LOCK:
        PROGRESS["status"] = "Done" if ok else "Error"
        PROGRESS["observations"] = int(observations)
        PROGRESS["cliche_attempts"] = int(cliche_attempts)
        if elapsed is not None:
            PROGRESS["elapsed"] = elapsed
        if message is not None:
            PROGRESS["message"] = str(message)
        PROGRESS["done"] = True
        PROGRESS["ok"] = bool(ok)
        if ok:
            PROGRESS["boards_done"] = int(PROGRESS.get("boards_done", 0)) + 1
        _emit_log(
            "Search finished",
            level=logging.INFO if ok else logging.ERROR,
            board=PROGRESS["board"],
            ok=bool(ok),
            observations=observations,
            cliche_attempts=cliche_attempts,
            duration=_fmt_seconds(elapsed),
            message=PROGRESS["message"],
        )
        _persist_locked()


# ------------------------------
# Snapshots for the service
# ------------------------------

def snapshot() -> Dict[str, Any]:
    with PROGRESS_LOCK:
        _load_persisted_locked()
        return dict(PROGRESS)


def as_json() -> Dict[str, Any]:
    # Alias used by /progress3
    return snapshot()


with PROGRESS_LOCK:
    _load_persisted_locked(force=True)
