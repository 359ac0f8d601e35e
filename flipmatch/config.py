"""
Single place for game and service configuration.

Grid bounds and the default size mirror the classic board; the reveal delay
and service settings can be overridden from the environment.
"""

import os

MIN_GRID_SIZE = 2
MAX_GRID_SIZE = 10
DEFAULT_GRID_SIZE = 4

# Every card may be flipped twice on average before the game is lost.
MOVES_PER_CARD = 2

REVEAL_DELAY_SECONDS = float(os.getenv("FLIPMATCH_REVEAL_DELAY", "1.0"))

FLIPMATCH_ENV = os.getenv("FLIPMATCH_ENV", "development")
LOG_LEVEL = os.getenv("FLIPMATCH_LOG_LEVEL", "INFO").upper()
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")
SESSION_MAX_AGE_SECONDS = int(os.getenv("FLIPMATCH_SESSION_MAX_AGE", "3600"))


def is_valid_grid_size(value) -> bool:
    """True for an integer (not bool) within the supported grid bounds."""
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return MIN_GRID_SIZE <= value <= MAX_GRID_SIZE
