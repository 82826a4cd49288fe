# config.py
import os

# ======= Randomness =======
# Empty seed means every randomizer draws from system entropy.
RANDOM_SEED = os.getenv("PBR_RANDOM_SEED", "")

# ======= Search caps =======
MAX_OBSERVATIONS = int(os.getenv("PBR_MAX_OBSERVATIONS", "0"))   # 0 = unbounded
MAX_BOARD_CELLS  = int(os.getenv("PBR_MAX_BOARD_CELLS", "4096"))
MAX_BOARDS_PER_REQUEST = int(os.getenv("PBR_MAX_BOARDS_PER_REQUEST", "16"))

# ======= Board geometry =======
# Minimum gap between wall segments sharing a side.
WALL_PADDING = int(os.getenv("PBR_WALL_PADDING", "1"))

# ======= Text board codec =======
EMPTY_CELL = os.getenv("PBR_EMPTY_CELL", ".")
# Padding around "element" payloads in text boards (uppercase letters).
ELEMENT_PADDING = int(os.getenv("PBR_ELEMENT_PADDING", "1"))

# ======= Logs / state =======
SEARCH_LOG = os.getenv("PBR_SEARCH_LOG", "logs/search_attempts.log")
SEARCH_LOG_ENABLED = int(os.getenv("PBR_SEARCH_LOG_ENABLED", "1")) != 0
PROGRESS_STATE_FILE = os.getenv("PROGRESS_STATE_FILE", "logs/search_state.json")


class CFG:
    RANDOM_SEED = RANDOM_SEED

    MAX_OBSERVATIONS       = MAX_OBSERVATIONS
    MAX_BOARD_CELLS        = MAX_BOARD_CELLS
    MAX_BOARDS_PER_REQUEST = MAX_BOARDS_PER_REQUEST

    EMPTY_CELL      = EMPTY_CELL
    ELEMENT_PADDING = ELEMENT_PADDING
    WALL_PADDING    = WALL_PADDING

    SEARCH_LOG         = SEARCH_LOG
    SEARCH_LOG_ENABLED = SEARCH_LOG_ENABLED
    PROGRESS_STATE_FILE = PROGRESS_STATE_FILE


def seed_or_none(value=None):
    """Return an int seed from ``value`` (or ``CFG.RANDOM_SEED``), else None."""
    raw = CFG.RANDOM_SEED if value is None else value
    raw = str(raw).strip()
    if not raw:
        return None
    return int(raw)


__all__ = ["CFG", "seed_or_none"]
