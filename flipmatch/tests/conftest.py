"""
Pytest fixtures for Flipmatch tests.
"""

import math

import pytest

from ..engine_core.deck import deck_from_values
from ..engine_core.state import GameState
from ..session import ManualScheduler, MemoryGame


def fixed_deck_factory(values):
    """Deck factory that always deals the same board."""
    def _factory(grid_size, rng):
        return deck_from_values(values)
    return _factory


@pytest.fixture
def scheduler() -> ManualScheduler:
    """Virtual-clock scheduler for reveal timers."""
    return ManualScheduler()


@pytest.fixture
def make_game(scheduler):
    """Build a MemoryGame on a fixed board, e.g. make_game([3, 3, 5, 5])."""
    def _make(values, reveal_delay=1.0):
        grid_size = math.isqrt(len(values))
        return MemoryGame(
            grid_size=grid_size,
            scheduler=scheduler,
            reveal_delay=reveal_delay,
            deck_factory=fixed_deck_factory(values),
        )
    return _make


@pytest.fixture
def paired_game(make_game) -> MemoryGame:
    """2x2 board where 0/1 and 2/3 are pairs."""
    return make_game([3, 3, 5, 5])


@pytest.fixture
def split_game(make_game) -> MemoryGame:
    """2x2 board where 0/2 and 1/3 are pairs, so 0+1 never matches."""
    return make_game([1, 2, 1, 2])


@pytest.fixture
def opening_state() -> GameState:
    """Fresh 2x2 state with pairs 0/1 and 2/3."""
    return GameState.new(2, deck_from_values([3, 3, 5, 5]))
