"""
Deck generation.

A deck is a tuple of immutable cards laid out row by row on a square grid.
Each value 1..pair_count is dealt twice, the pool is shuffled, and card ids
follow the final position. When the grid has an odd number of cells the
doubled pool is one card short, so a single extra value is dealt once and
can never be matched.
"""

from __future__ import annotations
from dataclasses import dataclass
import random


@dataclass(frozen=True)
class Card:
    """
    A face value at a fixed position on the board.

    Values run 1..pair_count, each dealt twice. On an odd grid the one
    unmatched card carries pair_count + 1, which no other card shares.
    """
    card_id: int
    value: int


Deck = tuple[Card, ...]


def total_cards(grid_size: int) -> int:
    return grid_size * grid_size


def pair_count(grid_size: int) -> int:
    return total_cards(grid_size) // 2


def generate_deck(grid_size: int, rng: random.Random | None = None) -> Deck:
    """
    Build a freshly shuffled deck for a grid_size x grid_size board.

    Args:
        grid_size: Side length of the board. Range checks are the caller's job.
        rng: Optional random source (seeded in tests and from the CLI)

    Returns:
        Tuple of exactly grid_size**2 cards, ids 0..n-1 in board order
    """
    rng = rng or random.Random()
    count = total_cards(grid_size)
    numbers = list(range(1, pair_count(grid_size) + 1))

    pool = numbers + numbers
    if len(pool) < count:
        pool.append(len(numbers) + 1)
    rng.shuffle(pool)

    return tuple(
        Card(card_id=index, value=value)
        for index, value in enumerate(pool[:count])
    )


def deck_from_values(values: list[int]) -> Deck:
    """Lay out a deck in the given order (fixed boards for tests and replays)."""
    return tuple(Card(card_id=index, value=value) for index, value in enumerate(values))
