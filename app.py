# app.py: JSON front for the pixel board randomizer; progress no-cache
from __future__ import annotations
import random
import time
from typing import Any, Dict, List, Optional

from flask import Flask, request, jsonify

from board_parser import format_board, try_parse_board
from config import CFG, seed_or_none
from errors import SearchInvariantError, SearchLimitError
from pixel_board.pixel_board_randomizer import PixelBoardRandomizer

import progress
from progress import (
    reset as progress_reset,
    as_json as progress_json,
)

LAST_RESULT: Dict[str, Any] = {
    "ok": False,
    "reason": "",
    "width": 0,
    "height": 0,
    "seed": None,
    "boards": [],
    "elapsed_str": "0s",
}

app = Flask(__name__)


@app.after_request
def _no_cache_progress(resp):
    if request.path == "/progress3":
        resp.headers["Cache-Control"] = "no-store, max-age=0"
        resp.headers["Pragma"] = "no-cache"
        resp.headers["Expires"] = "0"
    return resp


@app.route("/")
def index():
    return jsonify({
        "service": "pixel-board-randomizer",
        "routes": ["POST /randomize", "GET /result/latest", "GET /progress3"],
        "empty_cell": CFG.EMPTY_CELL,
    })


@app.route("/result/latest")
def result_latest():
    return jsonify(LAST_RESULT)


def _fmt_elapsed(seconds: float) -> str:
    if seconds < 1:
        return "0s"
    m, s = divmod(int(seconds), 60)
    if m == 0:
        return f"{s}s"
    h, m = divmod(m, 60)
    if h == 0:
        return f"{m}m {s}s"
    return f"{h}h {m}m {s}s"


def _merge_like_mapping() -> Dict[str, Any]:
    merged: Dict[str, Any] = {}
    payload = request.get_json(silent=True)
    if isinstance(payload, dict):
        merged.update(payload)
    for k, v in request.form.to_dict(flat=True).items():
        merged.setdefault(k, v)
    for k, v in request.args.to_dict(flat=True).items():
        merged.setdefault(k, v)
    return merged


def _parse_count(raw: Any) -> int:
    if raw is None or raw == "":
        return 1
    count = int(raw)
    if count < 1 or count > CFG.MAX_BOARDS_PER_REQUEST:
        raise ValueError(f"count must be between 1 and {CFG.MAX_BOARDS_PER_REQUEST}")
    return count


def _fail(reason: str, status: int, t0: float):
    LAST_RESULT.update({
        "ok": False,
        "reason": reason,
        "width": 0,
        "height": 0,
        "seed": None,
        "boards": [],
        "elapsed_str": _fmt_elapsed(time.time() - t0),
    })
    return jsonify(LAST_RESULT), status


def randomize_rows(rows: Any, seed: Optional[int] = None, count: int = 1) -> List[List[str]]:
    """Parse ``rows`` and return ``count`` randomized boards as text rows."""
    ok, parsed = try_parse_board(rows)
    if not ok:
        raise ValueError(parsed)
    rng = random.Random(seed) if seed is not None else None
    randomizer = PixelBoardRandomizer(parsed, rng=rng, observer=progress)
    return [format_board(randomizer.get_random_pixel_board()) for _ in range(count)]


@app.route("/randomize", methods=["POST"])
def randomize():
    progress_reset()
    t0 = time.time()

    like = _merge_like_mapping()
    rows = like.get("rows") or like.get("board")
    if not rows:
        return _fail("Bad board: nothing parsed from request", 400, t0)
    try:
        count = _parse_count(like.get("count"))
        seed = seed_or_none(like.get("seed"))
    except (TypeError, ValueError) as exc:
        return _fail(f"Bad request: {exc}", 400, t0)

    try:
        boards = randomize_rows(rows, seed=seed, count=count)
    except ValueError as exc:
        return _fail(f"Bad board: {exc}", 400, t0)
    except SearchLimitError as exc:
        return _fail(str(exc), 422, t0)
    except SearchInvariantError as exc:
        return _fail(str(exc), 500, t0)

    LAST_RESULT.update({
        "ok": True,
        "reason": "",
        "width": len(boards[0][0]) if boards and boards[0] else 0,
        "height": len(boards[0]) if boards else 0,
        "seed": seed,
        "boards": boards,
        "elapsed_str": _fmt_elapsed(time.time() - t0),
    })
    return jsonify(LAST_RESULT)


@app.route("/progress3")
def progress3():
    return jsonify(progress_json())


if __name__ == "__main__":
    app.run(debug=False)
